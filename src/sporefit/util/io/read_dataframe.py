import numpy as np
import pandas as pd

import os

# Row-number columns written by pandas (to_csv) and R (write.csv)
ROW_NUMBER_COLUMNS = ["Unnamed: 0", "X"]

def _read_file(path):

    ext = os.path.splitext(path)[1].lower()

    if ext in [".xlsx", ".xls"]:
        reader, kwargs = pd.read_excel, {}
    elif ext == ".csv":
        reader, kwargs = pd.read_csv, {}
    elif ext == ".tsv":
        reader, kwargs = pd.read_csv, {"sep": "\t"}
    else:
        reader, kwargs = pd.read_csv, {"sep": None, "engine": "python"}

    try:
        return reader(path, **kwargs)
    except FileNotFoundError:
        raise ValueError(f"File not found at path: {path}")
    except Exception as e:
        raise IOError(f"Error reading file {path}: {e}") from e


def _is_row_number(values):
    """True if `values` count 0, 1, 2, ... or 1, 2, 3, ..."""

    if not pd.api.types.is_integer_dtype(values):
        return False

    values = values.to_numpy()
    for start in [0, 1]:
        if np.array_equal(values, np.arange(start, start + len(values))):
            return True

    return False


def read_dataframe(source):
    """
    Read a CFU spreadsheet from a file path or DataFrame.

    Handles .csv, .tsv, and .xlsx/.xls files; other extensions are sniffed.
    Sheets exported from pandas or R often carry a row-number column
    ('Unnamed: 0' or 'X'). A column with one of those names that holds
    0, 1, 2, ... or 1, 2, 3, ... is dropped.

    Parameters
    ----------
    source : pandas.DataFrame or str
        A pandas DataFrame or the file path to read.

    Returns
    -------
    pandas.DataFrame
        The processed DataFrame (always a new object).
    """

    if isinstance(source, str):
        df = _read_file(source)
    elif isinstance(source, pd.DataFrame):
        df = source.copy()
    else:
        raise TypeError("`source` must be a file path (str) or pandas DataFrame.")

    for col in ROW_NUMBER_COLUMNS:
        if col in df.columns and _is_row_number(df[col]):
            df = df.drop(columns=col)

    return df
