from sporefit.derive.mixtures import (
    pair_mixture_plates,
    treatment_label
)
from sporefit.records import NO_PARTNER
from sporefit.errors import (
    MismatchedPairing,
    MissingReference
)

import numpy as np
import pandas as pd

def build_pure_lookup(df: pd.DataFrame) -> dict:
    """
    Map (strain, nutrients, replicate) to the pure-culture spore count.

    Only no-antibiotic plates of pure cultures (strain2 == 'none') are
    used.

    Raises
    ------
    MismatchedPairing
        more than one pure-culture count for the same key.
    """

    pure_df = df[(df["strain2"] == NO_PARTNER) & (df["antibiotics"] == NO_PARTNER)]

    lookup = {}
    for strain, nutrients, replicate, numspores in zip(pure_df["strain"],
                                                       pure_df["nutrients"],
                                                       pure_df["replicate"],
                                                       pure_df["numspores"]):
        key = (strain, nutrients, int(replicate))
        if key in lookup:
            raise MismatchedPairing(f"more than one pure-culture count for {key}")
        lookup[key] = float(numspores)

    return lookup


def compute_cij(mixture_row, pure_lookup, mix_floor=1.0):
    """
    Mixing effect of strain i in a 1:1 mixture with strain j.

        Ci(j) = log10(2 * spores_i_in_mix / spores_i_in_pure_culture)

    The pure culture is matched on strain i, the nutrient history i
    experienced and the replicate. Counts of i in the mixture below
    `mix_floor` are raised to `mix_floor` first. Ci(j) > 0 means i
    exploits j.

    Parameters
    ----------
    mixture_row : mapping
        needs 'strain' (i), 'nutrients' (i's history), 'replicate' and
        'mix_spores' (spores of i in the mixture).
    pure_lookup : dict
        output of `build_pure_lookup`.
    mix_floor : float, default 1.0

    Returns
    -------
    float

    Raises
    ------
    MissingReference
        no pure-culture count for this strain, nutrients and replicate.
    """

    key = (mixture_row["strain"], mixture_row["nutrients"], int(mixture_row["replicate"]))
    if key not in pure_lookup:
        err = f"no pure-culture count for strain '{key[0]}', nutrients '{key[1]}', "
        err += f"replicate {key[2]}"
        raise MissingReference(err)

    mix_spores = max(float(mixture_row["mix_spores"]), mix_floor)

    return float(np.log10(2 * mix_spores / pure_lookup[key]))


def get_cij(df: pd.DataFrame, mix_floor: float = 1.0) -> pd.DataFrame:
    """
    Compute Ci(j) for both members of every natural-isolate mixture.

    Each mixture gives two rows: role 'focal' for the marked strain
    (counted on the antibiotic plate) and role 'partner' for the other
    strain (total minus marked). In both rows 'strain' is i, 'strain2' is
    j, and 'nutrients' is the history of i.

    Returns
    -------
    pandas.DataFrame
        plate, pair, replicate, strain, strain2, nutrients, nutrients2,
        treatment, role, mix_spores, pure_spores, cij
    """

    paired = pair_mixture_plates(df)
    pure_lookup = build_pure_lookup(df)

    rows = []
    for _, mix in paired.iterrows():

        pair = mix["pair"] if "pair" in mix else f"{mix['strain']}:{mix['strain2']}"
        marked = mix["marked_spores"]

        focal = {"strain": mix["strain"],
                 "strain2": mix["strain2"],
                 "nutrients": mix["nutrients"],
                 "nutrients2": mix["nutrients2"],
                 "role": "focal",
                 "mix_spores": marked}
        partner = {"strain": mix["strain2"],
                   "strain2": mix["strain"],
                   "nutrients": mix["nutrients2"],
                   "nutrients2": mix["nutrients"],
                   "role": "partner",
                   "mix_spores": mix["total_spores"] - marked}

        for role_row in [focal, partner]:
            role_row["plate"] = mix["plate"]
            role_row["pair"] = pair
            role_row["replicate"] = mix["replicate"]
            role_row["treatment"] = treatment_label(role_row["nutrients"],
                                                     role_row["nutrients2"])
            role_row["pure_spores"] = pure_lookup.get((role_row["strain"],
                                                       role_row["nutrients"],
                                                       int(mix["replicate"])),
                                                      np.nan)
            role_row["cij"] = compute_cij(role_row, pure_lookup, mix_floor)
            rows.append(role_row)

    out_cols = ["plate", "pair", "replicate", "strain", "strain2",
                "nutrients", "nutrients2", "treatment", "role",
                "mix_spores", "pure_spores", "cij"]

    return pd.DataFrame(rows, columns=out_cols)
