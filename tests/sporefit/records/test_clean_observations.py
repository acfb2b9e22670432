import warnings

import pandas as pd
import pytest

from sporefit.records import (
    clean_observations,
    load_observations,
    ExclusionRule
)
from sporefit.errors import StaleExclusionRule

@pytest.fixture
def obs(lab_df):
    return load_observations(lab_df)

@pytest.fixture
def rules():
    return [ExclusionRule(name="rep2_ch1_contaminated",
                          match={"replicate": 2, "strain": "Ch1",
                                 "strain2": "none", "nutrients": "high"}),
            {"name": "rep3_ch2_mix",
             "match": {"replicate": 3, "strain": "Ch2", "strain2": "WT"}}]

def test_clean_removes_rows(obs, rules):

    with warnings.catch_warnings():
        warnings.simplefilter("error")
        cleaned = clean_observations(obs, rules)

    assert len(cleaned) == len(obs) - 2 - 8
    assert cleaned.index.equals(pd.RangeIndex(len(cleaned)))

def test_clean_stale_rule_warns(obs, rules):

    stale = ExclusionRule(name="gone", match={"strain": "Ch9"})

    with pytest.warns(StaleExclusionRule, match="gone"):
        cleaned = clean_observations(obs, rules + [stale])

    assert len(cleaned) == len(obs) - 10

def test_clean_is_idempotent(obs, rules):

    once = clean_observations(obs, rules)

    with pytest.warns(StaleExclusionRule):
        twice = clean_observations(once, rules)

    pd.testing.assert_frame_equal(once, twice)

def test_clean_order_matters(natural_df):

    obs = load_observations(natural_df, extra_columns=["pair", "trt"])

    keep_dil4 = ExclusionRule(name="dil4",
                              match={"replicate": 2, "strain": "I",
                                     "strain2": "G", "nutrients": "low"},
                              action="use_dilution",
                              dilution=4)
    drop_all = ExclusionRule(name="all", match={"replicate": 2, "strain": "I",
                                                "strain2": "G"})

    cleaned = clean_observations(obs, [keep_dil4, drop_all])
    assert not keep_dil4.mask(cleaned).any()

    with pytest.warns(StaleExclusionRule, match="dil4"):
        clean_observations(obs, [drop_all, keep_dil4])

def test_clean_verbose(obs, rules, capsys):
    clean_observations(obs, rules, verbose=True)
    out = capsys.readouterr().out
    assert "rep2_ch1_contaminated" in out
    assert "removed 2 rows" in out

def test_clean_no_rules(obs):
    cleaned = clean_observations(obs, [])
    pd.testing.assert_frame_equal(cleaned, obs)
    assert cleaned is not obs
