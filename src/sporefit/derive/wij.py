from sporefit.derive.mixtures import (
    pair_mixture_plates,
    MIX_KEY
)
from sporefit.errors import MismatchedPairing
from sporefit.util import check_number

import numpy as np
import pandas as pd

def compute_wij(mixture_row, total_row, mixing_ratio, mix_floor=1.0):
    """
    Cheating fitness of the marked strain in one mixture.

        Wij = log10(mixing_ratio * cheater / partner)

    where cheater is the spore count on the marker antibiotic and partner
    is total - cheater. The partner count is clamped to `mix_floor` when
    the subtraction leaves less than that. Wij > 0 means the cheater is
    over-represented among the spores relative to its starting frequency.

    Parameters
    ----------
    mixture_row : mapping
        marker-antibiotic count of the mixture. Needs 'plate', 'replicate'
        and 'numspores'.
    total_row : mapping
        no-antibiotic count of the same mixture plate and replicate.
    mixing_ratio : float
        partner:cheater starting ratio (9 for a 1:9 mixture).
    mix_floor : float, default 1.0
        minimum partner count.

    Returns
    -------
    float

    Raises
    ------
    MismatchedPairing
        the rows come from different plates or replicates.
    """

    for key in MIX_KEY:
        if mixture_row[key] != total_row[key]:
            err = f"mixture and total rows differ in '{key}': "
            err += f"{mixture_row[key]} vs {total_row[key]}"
            raise MismatchedPairing(err)

    mixing_ratio = check_number(mixing_ratio, "mixing_ratio",
                                min_allowed=0, inclusive_min=False)

    cheater = float(mixture_row["numspores"])
    partner = max(float(total_row["numspores"]) - cheater, mix_floor)

    return float(np.log10(mixing_ratio * cheater / partner))


def get_wij(df: pd.DataFrame, mixing_ratio: float, mix_floor: float = 1.0) -> pd.DataFrame:
    """
    Compute Wij for every lab-strain mixture in a derived observation table.

    Parameters
    ----------
    df : pandas.DataFrame
        cleaned table with spore columns (see `derive_spores`).
    mixing_ratio : float
        partner:cheater starting ratio.
    mix_floor : float, default 1.0
        minimum partner count.

    Returns
    -------
    pandas.DataFrame
        one row per (plate, replicate): plate, replicate, strain, strain2,
        nutrients, nutrients2, treatment, cheater_spores, total_spores,
        partner_spores, wij.
    """

    paired = pair_mixture_plates(df)

    wij = []
    for _, row in paired.iterrows():
        mixture_row = {"plate": row["plate"],
                       "replicate": row["replicate"],
                       "numspores": row["marked_spores"]}
        total_row = {"plate": row["plate"],
                     "replicate": row["replicate"],
                     "numspores": row["total_spores"]}
        wij.append(compute_wij(mixture_row, total_row, mixing_ratio, mix_floor))

    out_df = paired.rename(columns={"marked_spores": "cheater_spores"})
    out_df["partner_spores"] = np.maximum(out_df["total_spores"] - out_df["cheater_spores"],
                                          mix_floor)
    out_df["wij"] = np.array(wij, dtype=float)

    out_cols = ["plate", "replicate", "strain", "strain2", "nutrients",
                "nutrients2", "treatment", "cheater_spores", "total_spores",
                "partner_spores", "wij"]

    return out_df[out_cols]
