"""
Building blocks shared by the lab-strain and natural-isolate analyses.

Every block takes a table and returns new tables; nothing here modifies
its input.
"""

from sporefit.records import (
    load_observations,
    clean_observations,
    NO_PARTNER
)
from sporefit.derive import derive_spores
from sporefit.stats import (
    anova,
    residual_normality,
    grouped_test
)
from sporefit.errors import InsufficientGroupSize
from sporefit.util import check_columns

import numpy as np
import pandas as pd

import warnings

NORMALITY_NOTE = ("check residual normality (Q-Q plot of residuals) before "
                  "trusting this ANOVA; Shapiro-Wilk result is in "
                  "the 'normality' table")


def select(df, **criteria):
    """
    Copy of the rows of `df` matching every criterion.

    Each keyword names a column. A scalar value selects rows equal to it;
    a list/tuple/set selects rows whose value is in it, e.g.
    select(df, strain2="none", nutrients=["high", "low"]).
    """

    check_columns(df, required_columns=list(criteria))

    keep = pd.Series(True, index=df.index)
    for col, value in criteria.items():
        if isinstance(value, (list, tuple, set)):
            keep &= df[col].isin(list(value))
        else:
            keep &= (df[col] == value)

    return df.loc[keep].copy()


def prepare_observations(source,
                         exclusion_rules,
                         cfu_floor,
                         extra_columns=None,
                         verbose=False):
    """
    Load, clean and derive spore counts for one dataset.

    Returns the derived observation table (one row per plate count).
    """

    raw = load_observations(source, extra_columns=extra_columns)
    if verbose:
        print(f"loaded {len(raw)} plate counts")

    cleaned = clean_observations(raw, exclusion_rules, verbose=verbose)

    return derive_spores(cleaned, cfu_floor=cfu_floor)


def pure_cultures(df):
    """Pure-culture plates counted without antibiotic."""
    return select(df, strain2=NO_PARTNER, antibiotics=NO_PARTNER)


def anova_block(df, metric, factors):
    """
    ANOVA table plus the Shapiro-Wilk test and the residuals (for a Q-Q
    plot) of the same model fit.
    """

    table, model = anova(df, metric, factors, return_model=True)
    normality = pd.DataFrame([residual_normality(model)])
    residuals = pd.DataFrame({"fitted": np.asarray(model.fittedvalues, dtype=float),
                              "residual": np.asarray(model.resid, dtype=float)})

    return {"anova": table, "normality": normality, "residuals": residuals}


def marker_effect_block(df, metric="logspores", conf_level=0.95):
    """
    Does plating on the marker antibiotic change pure-culture counts?

    For every (strain, nutrients) whose pure culture was also plated on an
    antibiotic, run a two-sided paired t-test (by replicate) of `metric` on
    antibiotic vs no-antibiotic plates. Estimates are marker - none.
    """

    pure = select(df, strain2=NO_PARTNER)
    on_marker = pure["antibiotics"] != NO_PARTNER

    tested = set(map(tuple, pure.loc[on_marker, ["strain", "nutrients"]].values))
    in_tested = np.array([(s, n) in tested for s, n in zip(pure["strain"],
                                                            pure["nutrients"])],
                         dtype=bool)

    pure = pure.loc[in_tested].copy()
    pure["plating"] = np.where(pure["antibiotics"] == NO_PARTNER, "none", "marker")

    return grouped_test(pure,
                        group_key=["strain", "nutrients"],
                        metric=metric,
                        test_kind="paired",
                        alternative="two-sided",
                        paired_by="replicate",
                        compare_by="plating",
                        compare_levels=("marker", "none"),
                        conf_level=conf_level)


def one_sample_family(df, metric, group_key, treatments, alternative, conf_level=0.95):
    """
    One-sample t-tests of `metric` against zero for one hypothesis family.

    Only rows whose 'treatment' is in `treatments` take part; the family is
    BH corrected on its own.
    """

    family = select(df, treatment=list(treatments))

    return grouped_test(family,
                        group_key=group_key,
                        metric=metric,
                        test_kind="one_sample",
                        alternative=alternative,
                        conf_level=conf_level)


def by_stratum(df, stratum, fcn, verbose=False, **kwargs):
    """
    Run `fcn(sub_df, **kwargs)` within each level of `stratum`.

    Strata that raise `InsufficientGroupSize` are skipped and listed in the
    'skipped' table; other errors propagate.

    Returns
    -------
    dict
        'result': concatenated output with `stratum` as first column;
        'skipped': stratum level and reason for each skipped stratum.
    """

    check_columns(df, required_columns=[stratum])

    results = []
    skipped = []
    for level, sub_df in df.groupby(stratum, sort=True, observed=True):

        try:
            out = fcn(sub_df, **kwargs)
        except InsufficientGroupSize as e:
            warnings.warn(f"skipping {stratum} '{level}': {e}")
            skipped.append({stratum: level, "reason": str(e)})
            continue

        out = out.copy()
        out.insert(0, stratum, level)
        results.append(out)

        if verbose:
            print(f"    {stratum} '{level}': {len(out)} comparisons")

    if len(results) > 0:
        result = pd.concat(results, ignore_index=True)
    else:
        result = pd.DataFrame({stratum: []})

    return {"result": result,
            "skipped": pd.DataFrame(skipped, columns=[stratum, "reason"])}
