import warnings

import numpy as np
import pandas as pd
import pytest

from sporefit.stats import (
    anova,
    fit_factorial_model,
    residual_normality
)
from sporefit.stats.anova import (
    build_formula,
    ANOVA_COLUMNS
)
from sporefit.errors import InsufficientGroupSize

@pytest.fixture
def factorial_df():
    rng = np.random.default_rng(11)
    rows = []
    for strain, s_eff in [("A", 0.0), ("B", 1.0), ("C", 0.2)]:
        for nutrients, n_eff in [("high", 0.5), ("low", 0.0)]:
            for rep in range(4):
                rows.append({"strain": strain,
                             "nutrients": nutrients,
                             "replicate": rep + 1,
                             "logspores": 6 + s_eff + n_eff + rng.normal(0, 0.1)})
    return pd.DataFrame(rows)

def test_build_formula():
    assert build_formula("wij", ["strain", "nutrients"]) == "wij ~ C(strain) * C(nutrients)"

def test_anova_table(factorial_df):

    table = anova(factorial_df, "logspores", ["strain", "nutrients"])

    assert list(table.columns) == ANOVA_COLUMNS
    assert list(table["term"]) == ["strain", "nutrients", "strain:nutrients", "Residual"]

    df_by_term = dict(zip(table["term"], table["df"]))
    assert df_by_term == {"strain": 2, "nutrients": 1,
                          "strain:nutrients": 2, "Residual": 18}

    p = dict(zip(table["term"], table["p_value"]))
    assert p["strain"] < 1e-6
    assert p["nutrients"] < 1e-6
    assert np.isnan(p["Residual"])

def test_anova_three_factors(factorial_df):

    df = factorial_df.copy()
    df["nutrients2"] = np.where(df["replicate"] % 2 == 0, "high", "low")

    table = anova(df, "logspores", ["strain", "nutrients", "nutrients2"])
    assert "strain:nutrients:nutrients2" in list(table["term"])
    assert table["df"].iloc[-1] == 12

def test_anova_type_one_is_sequential(factorial_df):

    # drop cells to unbalance the design; order then changes the sums of squares
    df = factorial_df.drop(index=[0, 1, 9]).reset_index(drop=True)

    t1 = anova(df, "logspores", ["strain", "nutrients"])
    t2 = anova(df, "logspores", ["nutrients", "strain"])

    ss1 = dict(zip(t1["term"], t1["sum_sq"]))
    ss2 = dict(zip(t2["term"], t2["sum_sq"]))
    assert ss1["strain"] != pytest.approx(ss2["strain"])
    assert ss1["Residual"] == pytest.approx(ss2["Residual"])

def test_fit_factorial_model_numeric_factor(factorial_df):

    # replicate is numeric but must be treated as categorical
    model = fit_factorial_model(factorial_df, "logspores", ["replicate"])
    assert model.df_model == 3

def test_single_level_factor(factorial_df):

    df = factorial_df[factorial_df["nutrients"] == "high"]
    with pytest.raises(InsufficientGroupSize, match="nutrients"):
        anova(df, "logspores", ["strain", "nutrients"])

def test_no_residual_df(factorial_df):

    df = factorial_df.drop_duplicates(["strain", "nutrients"])
    with pytest.raises(InsufficientGroupSize, match="residual"):
        anova(df, "logspores", ["strain", "nutrients"])

def test_empty_cell_warns(factorial_df):

    df = factorial_df[~((factorial_df["strain"] == "C") &
                        (factorial_df["nutrients"] == "low"))]
    with pytest.warns(UserWarning, match="rank deficient"):
        fit_factorial_model(df, "logspores", ["strain", "nutrients"])

@pytest.mark.parametrize("factors, match", [
    ([], "between one and three"),
    (["strain", "nutrients", "replicate", "strain2"], "between one and three"),
    (["strain", "strain"], "unique"),
    (["plate"], "plate"),
])
def test_bad_factors(factorial_df, factors, match):
    with pytest.raises(ValueError, match=match):
        anova(factorial_df, "logspores", factors)

def test_residual_normality(factorial_df):

    model = fit_factorial_model(factorial_df, "logspores", ["strain", "nutrients"])
    result = residual_normality(model)

    assert result["n"] == 24
    assert 0 < result["W"] <= 1
    assert 0 <= result["p_value"] <= 1

def test_anova_returns_model(factorial_df):

    table, model = anova(factorial_df, "logspores", ["strain", "nutrients"],
                         return_model=True)

    residual = table[table["term"] == "Residual"].iloc[0]
    assert model.df_resid == residual["df"]
    assert model.ssr == pytest.approx(residual["sum_sq"])
