from sporefit.util import check_columns

import numpy as np
from scipy import stats

def summarize(df, group_cols, metric, conf_level=0.95):
    """
    Mean, count and t-based confidence interval of `metric` per group.

    Returns
    -------
    pandas.DataFrame
        group columns plus n, mean, sd, se, ci_low, ci_high. Groups with a
        single observation get NaN spread statistics.
    """

    if isinstance(group_cols, str):
        group_cols = [group_cols]
    group_cols = list(group_cols)
    check_columns(df, required_columns=group_cols + [metric])

    out_df = (df.groupby(group_cols, sort=True, observed=True)[metric]
                .agg(n="count", mean="mean", sd="std")
                .reset_index())

    out_df["se"] = out_df["sd"]/np.sqrt(out_df["n"])

    dof = (out_df["n"] - 1).to_numpy(dtype=float)
    dof[dof < 1] = np.nan
    t_crit = stats.t.ppf(1 - (1 - conf_level)/2, dof)
    out_df["ci_low"] = out_df["mean"] - t_crit*out_df["se"]
    out_df["ci_high"] = out_df["mean"] + t_crit*out_df["se"]

    return out_df
