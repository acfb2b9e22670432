import pandas as pd
import pytest

from sporefit.derive import (
    pair_mixture_plates,
    treatment_label
)
from sporefit.errors import MismatchedPairing

def test_treatment_label():
    assert treatment_label("high", "low") == "high-low"

def test_pair_mixture_plates(lab_derived):

    paired = pair_mixture_plates(lab_derived)

    # 2 cheaters x 4 treatments x 3 replicates
    assert len(paired) == 24
    assert not paired.duplicated(["plate", "replicate"]).any()
    assert set(paired["strain2"]) == {"WT"}
    assert set(paired["treatment"]) == {"high-high", "high-low",
                                        "low-high", "low-low"}

    row = paired.iloc[0]
    source = lab_derived[(lab_derived["plate"] == row["plate"]) &
                         (lab_derived["replicate"] == row["replicate"])]
    marked = source.loc[source["antibiotics"] != "none", "numspores"].iloc[0]
    total = source.loc[source["antibiotics"] == "none", "numspores"].iloc[0]
    assert row["marked_spores"] == marked
    assert row["total_spores"] == total

def test_pair_mixture_plates_keeps_pair(natural_derived):

    paired = pair_mixture_plates(natural_derived)
    assert "pair" in paired.columns
    assert "trt" in paired.columns
    assert set(paired["pair"]) == {"D:I", "D:G", "I:G"}

def test_pair_mixture_plates_duplicate(lab_derived):

    dup = lab_derived[lab_derived["strain2"] != "none"].iloc[[0]]
    df = pd.concat([lab_derived, dup], ignore_index=True)

    with pytest.raises(MismatchedPairing, match="more than one"):
        pair_mixture_plates(df)

def test_pair_mixture_plates_missing_marker(lab_derived):

    is_marker = (lab_derived["strain2"] != "none") & (lab_derived["antibiotics"] != "none")
    drop_idx = lab_derived.index[is_marker][0]

    with pytest.raises(MismatchedPairing, match="without both"):
        pair_mixture_plates(lab_derived.drop(index=drop_idx))

def test_pair_mixture_plates_disagreeing_metadata(lab_derived):

    df = lab_derived.copy()
    is_marker = (df["strain2"] != "none") & (df["antibiotics"] != "none")
    df.loc[df.index[is_marker][0], "nutrients2"] = "medium"

    with pytest.raises(MismatchedPairing, match="nutrients2"):
        pair_mixture_plates(df)
