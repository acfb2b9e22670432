import pytest

from sporefit.config import load_config
from sporefit.records import (
    load_observations,
    clean_observations
)
from sporefit.derive import derive_spores

@pytest.fixture
def lab_derived(lab_df):
    return derive_spores(load_observations(lab_df))

@pytest.fixture
def natural_derived(natural_df):
    rules = load_config()["natural_isolates"]["exclusion_rules"]
    obs = load_observations(natural_df, extra_columns=["pair", "trt"])
    return derive_spores(clean_observations(obs, rules))
