from sporefit.records.exclusion_rule import ExclusionRule
from sporefit.errors import StaleExclusionRule

import warnings

def clean_observations(df, exclusion_rules, verbose=False):
    """
    Remove rows hit by documented technical failures.

    Rules are applied in order. A rule that removes nothing raises a
    `StaleExclusionRule` warning (the dataset changed or was already
    cleaned) but does not stop cleaning. Applying the same rules to
    already-cleaned data removes nothing more.

    Parameters
    ----------
    df : pandas.DataFrame
        Observation table from `load_observations`.
    exclusion_rules : list
        `ExclusionRule` objects or config dicts convertible with
        `ExclusionRule.from_dict`.
    verbose : bool, default False
        print the number of rows each rule removed.

    Returns
    -------
    pandas.DataFrame
        New DataFrame with a fresh index.
    """

    out_df = df.copy()
    for rule in exclusion_rules:

        if not isinstance(rule, ExclusionRule):
            rule = ExclusionRule.from_dict(rule)

        out_df, num_removed = rule.apply(out_df)

        if num_removed == 0:
            w = f"exclusion rule '{rule.name}' matched no rows"
            warnings.warn(w, StaleExclusionRule)
        elif verbose:
            print(f"exclusion rule '{rule.name}' removed {num_removed} rows")

    return out_df.reset_index(drop=True)
