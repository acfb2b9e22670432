
def check_columns(df, required_columns, table_name="table"):
    """
    Make sure a record table carries every column an operation reads.

    Parameters
    ----------
    df : pandas.DataFrame
    required_columns : iterable of str
    table_name : str, default "table"
        how the table is named in the error message.

    Raises
    ------
    ValueError
        listing the missing columns in sorted order.
    """

    missing = sorted(set(required_columns).difference(df.columns))
    if len(missing) == 0:
        return

    err = f"{table_name} is missing required columns:\n"
    err += "".join(f"    {c}\n" for c in missing)
    raise ValueError(err)
