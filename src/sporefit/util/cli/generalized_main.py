import sys
import inspect
import argparse

def _add_argument(parser, name, default, arg_type, required):

    if required:
        parser.add_argument(name, type=arg_type)
        return

    flag = f"--{name}"
    if arg_type is bool:
        action = "store_false" if default is True else "store_true"
        parser.add_argument(flag, action=action)
    else:
        parser.add_argument(flag, type=arg_type, default=default)


def generalized_main(fcn, argv=None, prog=None):
    """
    Expose a function on the command line and run it.

    Parameters without a default become positional arguments. The rest
    become `--name` options converted with the type of their default;
    boolean defaults turn into flags and a None default leaves the value
    as a string.

    Parameters
    ----------
    fcn : callable
        function to run. Its docstring becomes the help text.
    argv : iterable, optional
        arguments to parse. if None, use sys.argv[1:]
    prog : str, optional
        program name shown in usage. Defaults to the function name.

    Returns
    -------
    object
        whatever `fcn` returns.
    """

    if argv is None:
        argv = sys.argv[1:]

    parser = argparse.ArgumentParser(prog=prog or fcn.__name__,
                                     description=inspect.getdoc(fcn),
                                     formatter_class=argparse.RawTextHelpFormatter)

    for name, param in inspect.signature(fcn).parameters.items():

        required = param.default is param.empty
        default = None if required else param.default

        if default is None:
            arg_type = None
        else:
            arg_type = type(default)

        _add_argument(parser, name, default, arg_type, required)

    args = parser.parse_args(argv)

    return fcn(**vars(args))
