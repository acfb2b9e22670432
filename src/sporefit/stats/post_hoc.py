from sporefit.errors import (
    InsufficientGroupSize,
    UnknownLevel
)
from sporefit.util import check_columns

import itertools

import numpy as np
import pandas as pd
from scipy import stats
from scipy.optimize import brentq
from statsmodels.stats.multicomp import pairwise_tukeyhsd

PAIRWISE_COLUMNS = ["factor", "group1", "group2", "estimate",
                    "ci_low", "ci_high", "p_adj", "reject"]

# integration points for the multivariate t coverage
MVT_MAXPTS = 100000


def _level_samples(df, metric, factor):
    """Sorted levels of `factor` and the metric values for each."""

    check_columns(df, required_columns=[metric, factor])

    sub_df = df[[metric, factor]].dropna()
    levels = sorted(pd.unique(sub_df[factor].astype(str)))
    samples = {}
    for level in levels:
        values = sub_df.loc[sub_df[factor].astype(str) == level, metric].to_numpy(dtype=float)
        if len(values) < 2:
            err = f"level '{level}' of '{factor}' has {len(values)} observation(s)"
            raise InsufficientGroupSize(err)
        samples[level] = values

    return levels, samples


def post_hoc_all_pairs(df, metric, factor, alpha=0.05):
    """
    Tukey HSD comparison of every pair of levels of one factor.

    Parameters
    ----------
    df : pandas.DataFrame
    metric : str
        numeric column.
    factor : str
        categorical column.
    alpha : float, default 0.05
        family-wise error rate; also sets the confidence intervals.

    Returns
    -------
    pandas.DataFrame
        factor, group1, group2, estimate (mean of group2 - mean of group1),
        ci_low, ci_high, p_adj, reject. One row per pair, levels in sorted
        order.

    Raises
    ------
    InsufficientGroupSize
        fewer than two levels, or a level with fewer than two observations.
    """

    levels, samples = _level_samples(df, metric, factor)
    if len(levels) < 2:
        raise InsufficientGroupSize(f"'{factor}' has fewer than two levels")

    endog = np.concatenate([samples[lv] for lv in levels])
    groups = np.concatenate([[lv]*len(samples[lv]) for lv in levels])

    res = pairwise_tukeyhsd(endog=endog, groups=groups, alpha=alpha)

    names = [str(g) for g in res.groupsunique]
    pairs = list(itertools.combinations(range(len(names)), 2))

    out_df = pd.DataFrame({"factor": factor,
                           "group1": [names[i] for i, _ in pairs],
                           "group2": [names[j] for _, j in pairs],
                           "estimate": np.asarray(res.meandiffs, dtype=float),
                           "ci_low": np.asarray(res.confint, dtype=float)[:, 0],
                           "ci_high": np.asarray(res.confint, dtype=float)[:, 1],
                           "p_adj": np.asarray(res.pvalues, dtype=float),
                           "reject": np.asarray(res.reject, dtype=bool)})

    return out_df[PAIRWISE_COLUMNS]


def _dunnett_critical_value(n_control, n_others, df_resid, alpha, alternative, seed):
    """
    Critical value of the Dunnett statistic at family-wise level `alpha`.

    Each coverage evaluation uses a freshly seeded generator, so the result
    depends only on the inputs and `seed`.
    """

    n_others = np.asarray(n_others, dtype=float)
    k = len(n_others)

    if alternative == "two-sided":
        lower = stats.t.ppf(1 - alpha/2, df_resid)
        upper = stats.t.ppf(1 - alpha/(2*k), df_resid)
    else:
        lower = stats.t.ppf(1 - alpha, df_resid)
        upper = stats.t.ppf(1 - alpha/k, df_resid)

    if k == 1:
        return lower

    # correlation between the comparisons sharing one control
    scale = np.sqrt(n_others/(n_others + n_control))
    rho = np.outer(scale, scale)
    np.fill_diagonal(rho, 1.0)

    def coverage_gap(c):
        limit = np.full(k, c)
        kwargs = {"maxpts": MVT_MAXPTS,
                  "random_state": np.random.default_rng(seed)}
        if alternative == "two-sided":
            kwargs["lower_limit"] = -limit
        coverage = stats.multivariate_t.cdf(limit, shape=rho, df=df_resid, **kwargs)
        return coverage - (1 - alpha)

    # single-comparison and Bonferroni quantiles bracket the root
    return brentq(coverage_gap, 0.9*lower, 1.1*upper, xtol=1e-6)


def post_hoc_vs_control(df,
                        metric,
                        factor,
                        control_level,
                        alternative="two-sided",
                        alpha=0.05,
                        seed=0):
    """
    Dunnett comparison of each level of a factor against a control level.

    Only level-vs-control comparisons are made (never level-vs-level and
    never control-vs-control), with family-wise error controlled across
    that smaller set.

    Parameters
    ----------
    df : pandas.DataFrame
    metric : str
    factor : str
    control_level : str
        reference level of `factor`.
    alternative : str, default 'two-sided'
        'two-sided', 'greater' or 'less' (level relative to control).
    alpha : float, default 0.05
    seed : int, default 0
        seed for the quasi-Monte Carlo integration of the multivariate t
        distribution. Identical input and seed give identical output.

    Returns
    -------
    pandas.DataFrame
        factor, group1 (always the control), group2, estimate
        (mean of group2 - mean of control), ci_low, ci_high, p_adj, reject.
        The intervals are simultaneous at level 1 - alpha.

    Raises
    ------
    UnknownLevel
        `control_level` is not an observed level of `factor`.
    InsufficientGroupSize
        no level besides the control, or a level with fewer than two
        observations.
    """

    check_columns(df, required_columns=[metric, factor])

    if alternative not in ("two-sided", "greater", "less"):
        raise ValueError(f"alternative '{alternative}' not recognized")

    control_level = str(control_level)
    observed = set(df[factor].dropna().astype(str))
    if control_level not in observed:
        err = f"control level '{control_level}' not among the levels of "
        err += f"'{factor}': {sorted(observed)}"
        raise UnknownLevel(err)

    levels, samples = _level_samples(df, metric, factor)
    others = [lv for lv in levels if lv != control_level]
    if len(others) == 0:
        raise InsufficientGroupSize(f"'{factor}' has no level besides the control")

    control = samples[control_level]
    res = stats.dunnett(*[samples[lv] for lv in others],
                        control=control,
                        alternative=alternative,
                        random_state=np.random.default_rng(seed))
    p_adj = np.asarray(res.pvalue, dtype=float)

    # pooled standard deviation over every level, control included
    n_others = np.array([len(samples[lv]) for lv in others])
    df_resid = sum(len(v) for v in samples.values()) - len(levels)
    pooled_ss = sum(np.sum((v - np.mean(v))**2) for v in samples.values())
    std = np.sqrt(pooled_ss/df_resid)

    estimate = np.array([np.mean(samples[lv]) - np.mean(control) for lv in others])
    critical = _dunnett_critical_value(len(control), n_others, df_resid,
                                       alpha, alternative, seed)
    allowance = critical*std*np.sqrt(1/n_others + 1/len(control))

    ci_low = estimate - allowance
    ci_high = estimate + allowance
    if alternative == "greater":
        ci_high = np.full(len(others), np.inf)
    elif alternative == "less":
        ci_low = np.full(len(others), -np.inf)

    out_df = pd.DataFrame({"factor": factor,
                           "group1": control_level,
                           "group2": others,
                           "estimate": estimate,
                           "ci_low": ci_low,
                           "ci_high": ci_high,
                           "p_adj": p_adj,
                           "reject": p_adj < alpha})

    return out_df[PAIRWISE_COLUMNS]
