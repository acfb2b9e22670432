import numpy as np
from statsmodels.stats.multitest import multipletests

def bh_correct(p_values):
    """
    Benjamini-Hochberg adjusted p-values for one family of tests.

    NaN entries (skipped tests) are left as NaN and do not count towards
    the number of tests. The output is in the same order as the input.

    Parameters
    ----------
    p_values : array_like
        raw p-values of a single family of hypotheses.

    Returns
    -------
    numpy.ndarray
        adjusted p-values, each >= its raw p-value.
    """

    p_values = np.asarray(p_values, dtype=float)
    if p_values.ndim != 1:
        raise ValueError("p_values must be one-dimensional")

    p_adj = np.full(p_values.shape, np.nan)

    good = ~np.isnan(p_values)
    if not np.any(good):
        return p_adj

    if np.any((p_values[good] < 0) | (p_values[good] > 1)):
        raise ValueError("p-values must lie between 0 and 1")

    _, corrected, _, _ = multipletests(p_values[good], method="fdr_bh")
    p_adj[good] = corrected

    return p_adj
