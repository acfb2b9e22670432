from sporefit.derive.mixtures import pair_mixture_plates
from sporefit.errors import UnknownPair

import numpy as np
import pandas as pd

def compute_bij(mixture_total_row, pair_constants):
    """
    Spore yield of a 1:1 mixture relative to its expected starting density.

        Bij = logspores_total - log10(density_i / 2 + density_j / 2)

    Parameters
    ----------
    mixture_total_row : mapping
        needs 'pair' (e.g. 'D:I') and 'logspores' of the no-antibiotic
        mixture plate.
    pair_constants : dict
        pair label -> (density_i, density_j). Labels are matched exactly.

    Returns
    -------
    float

    Raises
    ------
    UnknownPair
        the pair has no entry in `pair_constants`.
    """

    pair = mixture_total_row["pair"]
    if pair not in pair_constants:
        err = f"no initial densities configured for pair '{pair}'. "
        err += f"Known pairs: {sorted(pair_constants)}"
        raise UnknownPair(err)

    density_i, density_j = pair_constants[pair]
    expected = density_i / 2 + density_j / 2

    return float(mixture_total_row["logspores"] - np.log10(expected))


def get_bij(df: pd.DataFrame, pair_constants: dict) -> pd.DataFrame:
    """
    Compute Bij for every natural-isolate mixture plate.

    Returns
    -------
    pandas.DataFrame
        plate, pair, replicate, nutrients, nutrients2, treatment,
        logspores, expected_density, bij
    """

    paired = pair_mixture_plates(df)
    if "pair" not in paired.columns:
        raise ValueError("Bij needs a 'pair' column in the observation table")

    out_df = paired.rename(columns={"total_logspores": "logspores"})

    bij = []
    expected = []
    for _, row in out_df.iterrows():
        bij.append(compute_bij(row, pair_constants))
        density_i, density_j = pair_constants[row["pair"]]
        expected.append(density_i / 2 + density_j / 2)

    out_df["expected_density"] = np.array(expected, dtype=float)
    out_df["bij"] = np.array(bij, dtype=float)

    out_cols = ["plate", "pair", "replicate", "nutrients", "nutrients2",
                "treatment", "logspores", "expected_density", "bij"]

    return out_df[out_cols]
