"""
sporefit package initialization.

Spore counts, fitness metrics and hypothesis tests for sporulation
cheating experiments.
"""

from . import util
from . import data
from . import records
from . import derive
from . import stats
from . import plot
from . import analysis

from .config import (
    load_config
)

from .errors import (
    SporefitError,
    MismatchedPairing,
    MissingReference,
    UnpairedInput,
    UnknownPair,
    UnknownLevel,
    InsufficientGroupSize,
    StaleExclusionRule
)

from .analysis import (
    analyze_lab_strains,
    analyze_natural_isolates,
    run_pipeline,
    AnalysisReport
)
