import numpy as np
import pandas as pd
import pytest

import matplotlib
matplotlib.use("Agg")

NUTRIENTS = ["high", "low"]
REPLICATES = [1, 2, 3]

def _row(plate, strain, strain2, nutrients, nutrients2, antibiotics,
         replicate, dilution, cfus, **extra):

    row = {"plate": plate,
           "strain": strain,
           "strain2": strain2,
           "nutrients": nutrients,
           "nutrients2": nutrients2,
           "antibiotics": antibiotics,
           "replicate": replicate,
           "dilution": dilution,
           "cfus": cfus}
    row.update(extra)
    return row


def make_lab_df(seed=1):
    """
    Lab-strain plate counts: three pure cultures (two marked cheaters and
    the wild type) and 1:9 mixtures of each cheater with the wild type
    across all four nutrient treatments.
    """

    rng = np.random.default_rng(seed)
    pure_level = {"Ch1": 40, "Ch2": 25, "WT": 60}

    rows = []
    for strain in ["Ch1", "Ch2", "WT"]:
        for n in NUTRIENTS:
            for rep in REPLICATES:
                scale = 1.0 if n == "high" else 0.5
                cfus = int(round(pure_level[strain]*scale*rng.uniform(0.8, 1.2)))
                plate = f"P-{strain}-{n}"
                rows.append(_row(plate, strain, "none", n, "none", "none",
                                 rep, 5, cfus))
                if strain != "WT":
                    marker_cfus = int(round(cfus*rng.uniform(0.85, 1.1)))
                    rows.append(_row(plate, strain, "none", n, "none", "kan",
                                     rep, 5, marker_cfus))

    for strain in ["Ch1", "Ch2"]:
        for n in NUTRIENTS:
            for n2 in NUTRIENTS:
                for rep in REPLICATES:
                    total = int(round(50*rng.uniform(0.8, 1.2)))
                    frac = 0.1*rng.uniform(0.8, 1.25)
                    if strain == "Ch1" and n == "high":
                        frac *= 1.6
                    # marker plate is one dilution less concentrated
                    marked = int(round(total*frac*10))
                    plate = f"M-{strain}-{n}-{n2}"
                    rows.append(_row(plate, strain, "WT", n, n2, "none",
                                     rep, 5, total))
                    rows.append(_row(plate, strain, "WT", n, n2, "kan",
                                     rep, 4, marked))

    return pd.DataFrame(rows)


def make_natural_df(seed=2):
    """
    Natural-isolate plate counts: pure cultures of D, I and G and 1:1
    mixtures of each pair across all four nutrient treatments. The I:G
    replicate 2 low-nutrient mixtures were re-plated at dilution 4; the
    dilution 5 plates are the ones a use_dilution rule removes.
    """

    rng = np.random.default_rng(seed)
    pure_level = {"D": 55, "I": 35, "G": 45}
    marked_strains = ["D", "I"]

    rows = []
    for strain in ["D", "I", "G"]:
        for n in NUTRIENTS:
            for rep in REPLICATES:
                scale = 1.0 if n == "high" else 0.6
                cfus = int(round(pure_level[strain]*scale*rng.uniform(0.8, 1.2)))
                plate = f"P-{strain}-{n}"
                rows.append(_row(plate, strain, "none", n, "none", "none",
                                 rep, 5, cfus, pair="none", trt=n))
                if strain in marked_strains:
                    marker_cfus = int(round(cfus*rng.uniform(0.85, 1.1)))
                    rows.append(_row(plate, strain, "none", n, "none", "rif",
                                     rep, 5, marker_cfus, pair="none", trt=n))

    for a, b in [("D", "I"), ("D", "G"), ("I", "G")]:
        for n in NUTRIENTS:
            for n2 in NUTRIENTS:
                for rep in REPLICATES:
                    total = int(round(60*rng.uniform(0.8, 1.2)))
                    frac = 0.5*rng.uniform(0.7, 1.3)
                    if a == "D":
                        frac *= 1.3
                    marked = int(round(total*frac))
                    plate = f"M-{a}{b}-{n}-{n2}"
                    extra = {"pair": f"{a}:{b}", "trt": f"{n}-{n2}"}

                    rows.append(_row(plate, a, b, n, n2, "none",
                                     rep, 5, total, **extra))
                    rows.append(_row(plate, a, b, n, n2, "rif",
                                     rep, 5, marked, **extra))

                    if (a, b) == ("I", "G") and rep == 2 and n == "low":
                        rows.append(_row(plate, a, b, n, n2, "none",
                                         rep, 4, total*10 + 3, **extra))
                        rows.append(_row(plate, a, b, n, n2, "rif",
                                         rep, 4, marked*10 - 2, **extra))

    return pd.DataFrame(rows)


@pytest.fixture
def lab_df():
    return make_lab_df()

@pytest.fixture
def natural_df():
    return make_natural_df()

@pytest.fixture
def no_rules_config():
    """Configuration with every exclusion rule removed."""
    return {"lab_strains": {"exclusion_rules": []},
            "natural_isolates": {"exclusion_rules": []}}
