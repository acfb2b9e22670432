from sporefit.util import (
    read_dataframe,
    check_columns
)

import numpy as np
import pandas as pd

OBSERVATION_COLUMNS = ["plate",
                       "strain",
                       "strain2",
                       "nutrients",
                       "nutrients2",
                       "antibiotics",
                       "replicate",
                       "dilution",
                       "cfus"]

CATEGORICAL_COLUMNS = ["plate",
                       "strain",
                       "strain2",
                       "nutrients",
                       "nutrients2",
                       "antibiotics",
                       "pair",
                       "trt"]

# Columns where an empty cell means "no partner" / "no antibiotic"
NONE_FILL_COLUMNS = ["strain2", "nutrients2", "antibiotics", "pair"]

NO_PARTNER = "none"


def load_observations(source, extra_columns=None):
    """
    Read a table of CFU counts and normalize column types.

    Parameters
    ----------
    source : str or pandas.DataFrame
        Path to a csv/tsv/xlsx file or a DataFrame with one row per plate
        count.
    extra_columns : list of str, optional
        Columns required on top of the standard observation columns (for
        example ['pair', 'trt'] for the natural isolate dataset).

    Returns
    -------
    pandas.DataFrame
        New DataFrame. Categorical columns are str, 'replicate' and
        'dilution' are int and 'cfus' is float.

    Raises
    ------
    ValueError
        Missing columns, negative or missing counts, replicates below 1 or
        non-integer dilutions.
    """

    df = read_dataframe(source)

    required = list(OBSERVATION_COLUMNS)
    if extra_columns is not None:
        required.extend(extra_columns)
    check_columns(df, required_columns=required, table_name="observation table")

    for col in NONE_FILL_COLUMNS:
        if col in df.columns:
            df[col] = df[col].fillna(NO_PARTNER)

    for col in CATEGORICAL_COLUMNS:
        if col in df.columns:
            if df[col].isna().any():
                raise ValueError(f"column '{col}' has missing values")
            df[col] = df[col].astype(str).str.strip()

    for col in ["replicate", "dilution"]:
        values = pd.to_numeric(df[col], errors="coerce")
        if values.isna().any() or np.any(values != np.floor(values)):
            raise ValueError(f"column '{col}' must hold integers")
        df[col] = values.astype(int)

    if np.any(df["replicate"] < 1):
        raise ValueError("replicate numbers must be 1 or greater")

    cfus = pd.to_numeric(df["cfus"], errors="coerce")
    if cfus.isna().any():
        raise ValueError("column 'cfus' has missing or non-numeric values")
    if np.any(cfus < 0):
        raise ValueError("column 'cfus' cannot be negative")
    df["cfus"] = cfus.astype(float)

    return df.reset_index(drop=True)
