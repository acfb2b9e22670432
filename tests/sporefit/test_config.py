import pytest

from sporefit.config import load_config
from sporefit.records import ExclusionRule

def test_default_config():

    cf = load_config()

    assert cf["cfu_floor"] == 0.9
    assert cf["mix_floor"] == 1.0
    assert cf["mixing_ratio"] == 9.0
    assert cf["conf_level"] == 0.95
    assert cf["alpha"] == 0.05
    assert cf["dunnett_seed"] == 20231107
    assert isinstance(cf["dunnett_seed"], int)

    assert set(cf["pair_densities"]) == {"D:I", "D:G", "I:G"}
    for densities in cf["pair_densities"].values():
        assert isinstance(densities, tuple)
        assert len(densities) == 2
        assert all(isinstance(d, float) for d in densities)

    for expt in ["lab_strains", "natural_isolates"]:
        section = cf[expt]
        assert all(isinstance(r, ExclusionRule) for r in section["exclusion_rules"])
        assert isinstance(section["control_treatment"], str)
        assert isinstance(section["directional"], list)

    names = [r.name for r in cf["natural_isolates"]["exclusion_rules"]]
    assert names == ["natural_rep1_di_technical", "natural_rep2_ig_low_dilution"]

def test_user_file_merges_sections(tmp_path):

    cf_file = tmp_path / "cfg.yaml"
    cf_file.write_text(
        "alpha: 0.01\n"
        "pair_densities:\n"
        "  'A:B': [1.0e8, 2.0e8]\n"
        "lab_strains:\n"
        "  exclusion_rules: []\n"
    )

    cf = load_config(str(cf_file))

    assert cf["alpha"] == 0.01
    assert cf["pair_densities"] == {"A:B": (1.0e8, 2.0e8)}

    # only the exclusion rules of this section were replaced
    assert cf["lab_strains"]["exclusion_rules"] == []
    assert cf["lab_strains"]["control_treatment"] == "high-high"
    assert len(cf["natural_isolates"]["exclusion_rules"]) == 2

def test_dict_config_and_overrides():

    cf = load_config({"mixing_ratio": 4}, override_keys={"cfu_floor": 0.5})
    assert cf["mixing_ratio"] == 4.0
    assert cf["cfu_floor"] == 0.5

def test_loaded_config_round_trips():

    cf = load_config()
    again = load_config(cf)
    assert again["pair_densities"] == cf["pair_densities"]
    assert again["lab_strains"]["exclusion_rules"] == cf["lab_strains"]["exclusion_rules"]

@pytest.mark.parametrize("user, match", [
    ({"not_a_key": 1}, "unrecognized configuration key"),
    ({"alpha": 1.5}, "alpha"),
    ({"conf_level": 0}, "conf_level"),
    ({"dunnett_seed": -1}, "dunnett_seed"),
    ({"cfu_floor": 0}, "cfu_floor"),
    ({"mixing_ratio": -9}, "mixing_ratio"),
    ({"pair_densities": {"D:I": [1e8]}}, "two densities"),
    ({"pair_densities": {"D:I": [1e8, -1]}}, "D:I"),
    ({"lab_strains": {"exclusion_rules": [{"name": "x", "match": {}}]}},
     "at least one column"),
])
def test_bad_config(user, match):
    with pytest.raises(ValueError, match=match):
        load_config(user)
