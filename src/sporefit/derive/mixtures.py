from sporefit.records import NO_PARTNER
from sporefit.errors import MismatchedPairing
from sporefit.util import check_columns

import pandas as pd

MIX_KEY = ["plate", "replicate"]

def treatment_label(nutrients, nutrients2):
    """Label of a mixture treatment from the two nutrient histories."""
    return f"{nutrients}-{nutrients2}"


def pair_mixture_plates(df: pd.DataFrame) -> pd.DataFrame:
    """
    Match each mixture's marker-antibiotic count with its total count.

    Mixtures (strain2 != 'none') are plated once without antibiotic (all
    spores) and once on the marker antibiotic (spores of the marked strain,
    named in 'strain'). This returns one row per (plate, replicate) with
    the metadata of the mixture and the two spore counts.

    Parameters
    ----------
    df : pandas.DataFrame
        derived observation table (needs 'numspores' and 'logspores').

    Returns
    -------
    pandas.DataFrame
        columns: plate, replicate, strain, strain2, nutrients, nutrients2,
        treatment, marked_spores, total_spores, total_logspores, plus
        'pair' and 'trt' when present in `df`.

    Raises
    ------
    MismatchedPairing
        a mixture does not have exactly one marked and one total count per
        (plate, replicate), or the two rows disagree on the strains or
        nutrient histories.
    """

    check_columns(df, required_columns=MIX_KEY + ["strain", "strain2",
                                                  "nutrients", "nutrients2",
                                                  "antibiotics", "numspores",
                                                  "logspores"])

    meta_cols = ["strain", "strain2", "nutrients", "nutrients2"]
    meta_cols.extend([c for c in ["pair", "trt"] if c in df.columns])

    mix_df = df[df["strain2"] != NO_PARTNER]
    is_total = mix_df["antibiotics"] == NO_PARTNER
    total_df = mix_df[is_total]
    marked_df = mix_df[~is_total]

    for name, sub_df in [("total", total_df), ("marker", marked_df)]:
        counts = sub_df.groupby(MIX_KEY, observed=True).size()
        if (counts > 1).any():
            bad = list(counts[counts > 1].index)
            err = f"more than one {name} count for mixture plate(s) {bad}"
            raise MismatchedPairing(err)

    total_keys = set(map(tuple, total_df[MIX_KEY].values))
    marked_keys = set(map(tuple, marked_df[MIX_KEY].values))
    if total_keys != marked_keys:
        unmatched = sorted(total_keys ^ marked_keys)
        err = f"mixture plate(s) without both a total and a marker count: {unmatched}"
        raise MismatchedPairing(err)

    paired = pd.merge(marked_df[MIX_KEY + meta_cols + ["numspores"]],
                      total_df[MIX_KEY + meta_cols + ["numspores", "logspores"]],
                      on=MIX_KEY,
                      how="inner",
                      suffixes=("", "_total"),
                      sort=True)

    for col in meta_cols:
        disagree = paired[col] != paired[f"{col}_total"]
        if disagree.any():
            bad = list(map(tuple, paired.loc[disagree, MIX_KEY].values))
            err = f"marker and total counts disagree on '{col}' for {bad}"
            raise MismatchedPairing(err)

    paired = paired.rename(columns={"numspores": "marked_spores",
                                    "numspores_total": "total_spores",
                                    "logspores": "total_logspores"})
    paired["treatment"] = [treatment_label(a, b) for a, b in
                           zip(paired["nutrients"], paired["nutrients2"])]

    out_cols = MIX_KEY + meta_cols + ["treatment",
                                      "marked_spores",
                                      "total_spores",
                                      "total_logspores"]

    return paired[out_cols].reset_index(drop=True)
