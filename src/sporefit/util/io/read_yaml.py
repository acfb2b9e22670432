import yaml

import re

# PyYAML reads 2.1e8 (no sign in the exponent) back as a string
_SCI_NOTATION = re.compile(r'^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)$')

def _normalize_types(node):
    """
    Walk a parsed YAML tree turning scientific-notation strings into
    numbers and whole-number floats (9.0, "2.1e8") into ints.
    """

    if isinstance(node, dict):
        return {k: _normalize_types(v) for k, v in node.items()}
    if isinstance(node, list):
        return [_normalize_types(v) for v in node]

    if isinstance(node, str) and _SCI_NOTATION.match(node):
        node = float(node)

    if isinstance(node, float) and node.is_integer():
        return int(node)

    return node


def _load_file(path):

    try:
        with open(path, 'r') as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        raise ValueError(f"Configuration file not found at '{path}'")
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML file '{path}': {e}") from e

    if not isinstance(config, dict):
        raise ValueError(f"Configuration file '{path}' does not hold a mapping")

    return _normalize_types(config)


def read_yaml(cf: str | dict,
              override_keys: dict | None=None) -> dict:
    """
    Read a YAML configuration.

    Parameters
    ----------
    cf : str or dict
        Path to a YAML file, or an already-read dict (copied, not
        normalized).
    override_keys : dict, optional
        Top-level values replacing those read. Every key must already be
        in the configuration.

    Returns
    -------
    dict

    Raises
    ------
    ValueError
        Missing or unparseable file, a file that is not a mapping, or an
        override key the configuration does not have.
    """

    if isinstance(cf, dict):
        config = dict(cf)
    else:
        config = _load_file(cf)

    for k, v in (override_keys or {}).items():
        if k not in config:
            err = f"override_keys has a key '{k}' that was not in configuration."
            raise ValueError(err)
        config[k] = v

    return config
