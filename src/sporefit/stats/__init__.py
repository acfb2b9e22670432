from .correction import (
    bh_correct
)

from .compare_samples import (
    compare_samples,
    TEST_KINDS,
    ALTERNATIVES
)

from .grouped_test import (
    grouped_test,
    split_groups
)

from .anova import (
    anova,
    fit_factorial_model,
    residual_normality
)

from .post_hoc import (
    post_hoc_all_pairs,
    post_hoc_vs_control
)

from .summarize import (
    summarize
)
