from sporefit.errors import InsufficientGroupSize

import numpy as np
from scipy import stats

TEST_KINDS = ("one_sample", "two_sample", "paired")
ALTERNATIVES = ("two-sided", "greater", "less")

def _check_test_args(test_kind, alternative):

    if test_kind not in TEST_KINDS:
        raise ValueError(f"test_kind must be one of {TEST_KINDS}, not '{test_kind}'")
    if alternative not in ALTERNATIVES:
        raise ValueError(f"alternative must be one of {ALTERNATIVES}, not '{alternative}'")


def _t_interval(estimate, std_err, df, alternative, conf_level):
    """t-based confidence bounds; one-sided alternatives give open bounds."""

    if alternative == "two-sided":
        t_crit = stats.t.ppf(1 - (1 - conf_level)/2, df)
        return estimate - t_crit*std_err, estimate + t_crit*std_err

    t_crit = stats.t.ppf(conf_level, df)
    if alternative == "greater":
        return estimate - t_crit*std_err, np.inf

    return -np.inf, estimate + t_crit*std_err


def compare_samples(x,
                    y=None,
                    test_kind="one_sample",
                    alternative="two-sided",
                    mu=0.0,
                    conf_level=0.95):
    """
    Run a single Student/Welch t-test.

    Parameters
    ----------
    x : array_like
        first sample.
    y : array_like, optional
        second sample. Required for 'two_sample' and 'paired'. For 'paired'
        `x` and `y` must be aligned element by element.
    test_kind : str
        'one_sample' (x against `mu`), 'two_sample' (Welch, unequal
        variances) or 'paired' (x - y against zero).
    alternative : str
        'two-sided', 'greater' or 'less'. The estimate is mean(x) - mu,
        mean(x) - mean(y) or mean(x - y).
    mu : float, default 0.0
        null value of the mean for one-sample tests.
    conf_level : float, default 0.95

    Returns
    -------
    dict
        n1, n2, estimate, mean1, mean2, statistic, df, std_err, ci_low,
        ci_high, p_value

    Raises
    ------
    InsufficientGroupSize
        fewer than two observations in a sample.
    """

    _check_test_args(test_kind, alternative)

    x = np.asarray(x, dtype=float)
    if len(x) < 2:
        raise InsufficientGroupSize(f"need at least 2 observations, got {len(x)}")

    if test_kind == "one_sample":

        res = stats.ttest_1samp(x, mu, alternative=alternative)
        n2 = 0
        mean2 = np.nan
        estimate = np.mean(x)
        std_err = np.std(x, ddof=1)/np.sqrt(len(x))
        df = len(x) - 1

    else:

        if y is None:
            raise ValueError(f"'{test_kind}' test needs a second sample")
        y = np.asarray(y, dtype=float)
        if len(y) < 2:
            raise InsufficientGroupSize(f"need at least 2 observations, got {len(y)}")

        n2 = len(y)
        mean2 = np.mean(y)

        if test_kind == "paired":
            if len(x) != len(y):
                raise ValueError("paired samples must have the same length")
            diff = x - y
            res = stats.ttest_rel(x, y, alternative=alternative)
            estimate = np.mean(diff)
            std_err = np.std(diff, ddof=1)/np.sqrt(len(diff))
            df = len(diff) - 1
        else:
            res = stats.ttest_ind(x, y, equal_var=False, alternative=alternative)
            estimate = np.mean(x) - mean2
            vx = np.var(x, ddof=1)/len(x)
            vy = np.var(y, ddof=1)/len(y)
            std_err = np.sqrt(vx + vy)

            # Welch-Satterthwaite degrees of freedom
            with np.errstate(divide="ignore", invalid="ignore"):
                df = (vx + vy)**2/(vx**2/(len(x) - 1) + vy**2/(len(y) - 1))

    ci_low, ci_high = _t_interval(estimate, std_err, df, alternative, conf_level)

    return {"n1": len(x),
            "n2": n2,
            "estimate": float(estimate),
            "mean1": float(np.mean(x)),
            "mean2": float(mean2),
            "statistic": float(res.statistic),
            "df": float(df),
            "std_err": float(std_err),
            "ci_low": float(ci_low),
            "ci_high": float(ci_high),
            "p_value": float(res.pvalue)}
