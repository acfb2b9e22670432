"""
Small helpers shared across sporefit: file reading, column checks, scalar
validation and the command line wrapper.
"""

from .io import (
    read_dataframe,
    read_yaml
)

from .dataframe import (
    check_columns
)

from .validation import (
    check_number
)

from .cli import (
    generalized_main
)
