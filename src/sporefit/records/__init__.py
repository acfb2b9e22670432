from .load_observations import (
    load_observations,
    OBSERVATION_COLUMNS,
    NO_PARTNER
)

from .exclusion_rule import (
    ExclusionRule
)

from .clean_observations import (
    clean_observations
)
