import numpy as np
import pandas as pd
import pytest

from sporefit.derive import (
    build_pure_lookup,
    compute_cij,
    get_cij
)
from sporefit.errors import (
    MismatchedPairing,
    MissingReference
)

@pytest.fixture
def lookup():
    return {("D", "high", 1): 100.0,
            ("I", "low", 1): 400.0}

def test_compute_cij(lookup):

    row = {"strain": "D", "nutrients": "high", "replicate": 1, "mix_spores": 50}
    assert compute_cij(row, lookup) == pytest.approx(0)

    row["mix_spores"] = 500
    assert compute_cij(row, lookup) == pytest.approx(1)

def test_compute_cij_floor(lookup):

    row = {"strain": "D", "nutrients": "high", "replicate": 1, "mix_spores": 0.5}
    clamped = compute_cij(row, lookup)

    assert clamped == pytest.approx(np.log10(2*1/100))
    assert clamped != pytest.approx(np.log10(2*0.5/100))

def test_compute_cij_missing_reference(lookup):

    row = {"strain": "D", "nutrients": "low", "replicate": 1, "mix_spores": 50}
    with pytest.raises(MissingReference, match="nutrients 'low'"):
        compute_cij(row, lookup)

def test_build_pure_lookup(natural_derived):

    lookup = build_pure_lookup(natural_derived)

    # 3 strains x 2 nutrients x 3 replicates, plain plates only
    assert len(lookup) == 18
    pure = natural_derived[(natural_derived["strain"] == "D") &
                           (natural_derived["strain2"] == "none") &
                           (natural_derived["antibiotics"] == "none") &
                           (natural_derived["nutrients"] == "low") &
                           (natural_derived["replicate"] == 2)]
    assert lookup[("D", "low", 2)] == pure["numspores"].iloc[0]

def test_build_pure_lookup_duplicate(natural_derived):

    pure = natural_derived[(natural_derived["strain2"] == "none") &
                           (natural_derived["antibiotics"] == "none")]
    df = pd.concat([natural_derived, pure.iloc[[0]]], ignore_index=True)

    with pytest.raises(MismatchedPairing):
        build_pure_lookup(df)

def test_get_cij(natural_derived):

    cij_df = get_cij(natural_derived)

    assert list(cij_df.columns) == ["plate", "pair", "replicate", "strain",
                                    "strain2", "nutrients", "nutrients2",
                                    "treatment", "role", "mix_spores",
                                    "pure_spores", "cij"]

    # 3 pairs x 4 treatments x 3 replicates, less the D:I replicate 1
    # mixtures, two roles each
    assert len(cij_df) == 2*(36 - 4)
    assert set(cij_df["role"]) == {"focal", "partner"}

    expected = np.log10(2*np.maximum(cij_df["mix_spores"], 1)/cij_df["pure_spores"])
    assert np.allclose(cij_df["cij"], expected)

    # the partner row swaps strains and nutrient histories
    focal = cij_df[cij_df["role"] == "focal"].reset_index(drop=True)
    partner = cij_df[cij_df["role"] == "partner"].reset_index(drop=True)
    assert (focal["strain"] == partner["strain2"]).all()
    assert (focal["nutrients"] == partner["nutrients2"]).all()
    assert (partner["treatment"] == partner["nutrients"] + "-" + partner["nutrients2"]).all()

def test_get_cij_missing_pure(natural_derived):

    no_g = natural_derived[~((natural_derived["strain"] == "G") &
                             (natural_derived["strain2"] == "none"))]
    with pytest.raises(MissingReference, match="'G'"):
        get_cij(no_g)
