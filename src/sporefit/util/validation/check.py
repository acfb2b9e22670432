import numpy as np
from typing import Any, Callable, Optional, TypeVar

_Numeric = TypeVar("_Numeric", int, float)

def _range_problem(v, min_allowed, max_allowed, inclusive_min, inclusive_max):
    """Description of the bound `v` violates, or None."""

    if min_allowed is not None:
        if inclusive_min and not v >= min_allowed:
            return f"must be >= {min_allowed}"
        if not inclusive_min and not v > min_allowed:
            return f"must be > {min_allowed}"

    if max_allowed is not None:
        if inclusive_max and not v <= max_allowed:
            return f"must be <= {max_allowed}"
        if not inclusive_max and not v < max_allowed:
            return f"must be < {max_allowed}"

    return None


def check_number(
    value: Any,
    param_name: Optional[str] = None,
    cast_type: Callable[[Any], _Numeric] = float,
    min_allowed: Optional[_Numeric] = None,
    max_allowed: Optional[_Numeric] = None,
    inclusive_min: bool = True,
    inclusive_max: bool = True,
) -> _Numeric:
    """
    Validate and cast a numeric setting (mixing ratio, floors, confidence
    level...).

    Strings and booleans are refused even though they would cast: a config
    value of "0.9" or `true` is a typo, not a number.

    Parameters
    ----------
    value : Any
    param_name : str, optional
        setting name used in the error message.
    cast_type : Callable, default: float
    min_allowed, max_allowed : int or float, optional
        allowed range. None means unbounded.
    inclusive_min, inclusive_max : bool, default: True
        whether the bounds themselves are allowed.

    Returns
    -------
    int or float

    Raises
    ------
    ValueError
        None, non-numeric, NaN or out-of-range values.
    """

    if value is None:
        raise ValueError(f"{param_name} cannot be None")

    if isinstance(value, (str, bool)) or not np.isscalar(value):
        problem = "not a numeric scalar"
    else:
        try:
            v_cast = cast_type(value)
        except (TypeError, ValueError) as e:
            problem = str(e)
        else:
            if np.isnan(v_cast):
                problem = "NaN is not allowed"
            else:
                problem = _range_problem(v_cast, min_allowed, max_allowed,
                                         inclusive_min, inclusive_max)

    if problem is not None:
        raise ValueError(f"setting '{param_name}' has value '{value}': {problem}")

    return v_cast
