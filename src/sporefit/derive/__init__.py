from .spores import (
    derive_spores
)

from .mixtures import (
    pair_mixture_plates,
    treatment_label
)

from .wij import (
    compute_wij,
    get_wij
)

from .cij import (
    build_pure_lookup,
    compute_cij,
    get_cij
)

from .bij import (
    compute_bij,
    get_bij
)
