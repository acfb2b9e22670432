from sporefit.util import (
    read_yaml,
    check_number
)
from sporefit.data import DEFAULT_CONFIG
from sporefit.records import ExclusionRule

EXPERIMENTS = ("lab_strains", "natural_isolates")

def load_config(cf=None, override_keys=None):
    """
    Load the analysis configuration.

    The packaged defaults are read first. Top-level keys present in `cf`
    replace the defaults; the per-experiment sections are merged key by key
    so a user file can, for example, swap only the exclusion rules.

    Parameters
    ----------
    cf : str or dict, optional
        Path to a YAML file or an already-read dict.
    override_keys : dict, optional
        Final top-level replacements (must name existing keys).

    Returns
    -------
    dict
        Validated configuration. Each experiment's 'exclusion_rules' is a
        list of `ExclusionRule` objects and 'pair_densities' maps pair
        labels to (density_a, density_b) tuples of floats.
    """

    config = read_yaml(DEFAULT_CONFIG)

    if cf is not None:
        user = read_yaml(cf)
        for key, value in user.items():
            if key not in config:
                raise ValueError(f"unrecognized configuration key '{key}'")
            if key in EXPERIMENTS:
                section = dict(config[key])
                section.update(value)
                config[key] = section
            else:
                config[key] = value

    config = read_yaml(config, override_keys=override_keys)

    config["cfu_floor"] = check_number(config["cfu_floor"], "cfu_floor",
                                       min_allowed=0, inclusive_min=False)
    config["mix_floor"] = check_number(config["mix_floor"], "mix_floor",
                                       min_allowed=0, inclusive_min=False)
    config["mixing_ratio"] = check_number(config["mixing_ratio"], "mixing_ratio",
                                          min_allowed=0, inclusive_min=False)
    config["conf_level"] = check_number(config["conf_level"], "conf_level",
                                        min_allowed=0, max_allowed=1,
                                        inclusive_min=False, inclusive_max=False)
    config["alpha"] = check_number(config["alpha"], "alpha",
                                   min_allowed=0, max_allowed=1,
                                   inclusive_min=False, inclusive_max=False)
    config["dunnett_seed"] = check_number(config["dunnett_seed"], "dunnett_seed",
                                          cast_type=int, min_allowed=0)

    densities = {}
    for pair, values in config["pair_densities"].items():
        if len(values) != 2:
            raise ValueError(f"pair_densities['{pair}'] must hold two densities")
        densities[str(pair)] = tuple(check_number(v, f"pair_densities['{pair}']",
                                                  min_allowed=0, inclusive_min=False)
                                     for v in values)
    config["pair_densities"] = densities

    for expt in EXPERIMENTS:
        section = dict(config[expt])
        rules = section.get("exclusion_rules", None) or []
        section["exclusion_rules"] = [r if isinstance(r, ExclusionRule)
                                      else ExclusionRule.from_dict(r)
                                      for r in rules]
        section["directional"] = [str(t) for t in (section.get("directional", None) or [])]
        section["control_treatment"] = str(section["control_treatment"])
        config[expt] = section

    return config
