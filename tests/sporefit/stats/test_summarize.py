import numpy as np
import pandas as pd
import pytest
from scipy import stats

from sporefit.stats import summarize

def test_summarize():

    df = pd.DataFrame({"strain": ["A", "A", "A", "B", "B", "C"],
                       "logspores": [6.0, 6.2, 6.4, 5.0, 5.5, 7.0]})

    out = summarize(df, "strain", "logspores")

    assert list(out.columns) == ["strain", "n", "mean", "sd", "se",
                                 "ci_low", "ci_high"]
    assert list(out["strain"]) == ["A", "B", "C"]
    assert list(out["n"]) == [3, 2, 1]

    a = out.iloc[0]
    assert a["mean"] == pytest.approx(6.2)
    assert a["sd"] == pytest.approx(0.2)
    half = stats.t.ppf(0.975, 2)*0.2/np.sqrt(3)
    assert a["ci_low"] == pytest.approx(6.2 - half)
    assert a["ci_high"] == pytest.approx(6.2 + half)

    # single observation: no spread
    c = out.iloc[2]
    assert c["mean"] == 7.0
    assert np.isnan(c["sd"])
    assert np.isnan(c["ci_low"])

def test_summarize_multiple_keys():

    df = pd.DataFrame({"strain": ["A", "A", "A", "A"],
                       "nutrients": ["high", "high", "low", "low"],
                       "wij": [0.1, 0.3, -0.1, 0.1]})

    out = summarize(df, ["strain", "nutrients"], "wij", conf_level=0.9)
    assert len(out) == 2
    assert np.allclose(out["mean"], [0.2, 0.0])

def test_summarize_missing_column():
    with pytest.raises(ValueError, match="wij"):
        summarize(pd.DataFrame({"strain": ["A"]}), "strain", "wij")
