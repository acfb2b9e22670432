from sporefit.util import (
    check_columns,
    check_number
)

import numpy as np
import pandas as pd

def derive_spores(df: pd.DataFrame, cfu_floor: float = 0.9) -> pd.DataFrame:
    """
    Add spore-count columns to an observation table.

    A plate with zero colonies is indistinguishable from one below the
    detection limit, so zero counts are replaced by `cfu_floor` before
    scaling. The plate count is then scaled by its dilution and log
    transformed:

        numspores = cfus_floored * 10**dilution
        logspores = log10(numspores + 1)

    Parameters
    ----------
    df : pandas.DataFrame
        Observation table with 'cfus' and 'dilution' columns.
    cfu_floor : float, default 0.9
        Count substituted for zero-colony plates.

    Returns
    -------
    pandas.DataFrame
        Copy of `df` with 'cfus_floored', 'numspores' and 'logspores'.

    Examples
    --------
    >>> df = pd.DataFrame({"cfus": [2, 0], "dilution": [3, 5]})
    >>> derive_spores(df)["numspores"].tolist()
    [2000.0, 90000.0]
    """

    check_columns(df, required_columns=["cfus", "dilution"])
    cfu_floor = check_number(cfu_floor, "cfu_floor",
                             min_allowed=0, inclusive_min=False)

    cfus = df["cfus"].to_numpy(dtype=float)
    if np.any(cfus < 0) or np.any(np.isnan(cfus)):
        raise ValueError("cfus must be non-negative numbers")

    df = df.copy()
    df["cfus_floored"] = np.where(cfus == 0, cfu_floor, cfus)
    df["numspores"] = df["cfus_floored"] * np.power(10.0, df["dilution"].to_numpy(dtype=float))
    df["logspores"] = np.log10(df["numspores"] + 1)

    return df
