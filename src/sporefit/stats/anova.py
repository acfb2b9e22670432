from sporefit.errors import InsufficientGroupSize
from sporefit.util import check_columns

import numpy as np
import pandas as pd
import patsy
from scipy import stats
from statsmodels.formula.api import ols
from statsmodels.stats.anova import anova_lm

import re
import warnings

ANOVA_COLUMNS = ["term", "sum_sq", "df", "F", "p_value"]

_C_TERM = re.compile(r"C\((\w+)\)")


def _check_factorial_args(df, metric, factors):

    if isinstance(factors, str):
        factors = [factors]
    factors = list(factors)

    if len(factors) < 1 or len(factors) > 3:
        raise ValueError("factors must name between one and three columns")
    if len(set(factors)) != len(factors):
        raise ValueError("factors must be unique")

    for name in [metric] + factors:
        if not name.isidentifier():
            raise ValueError(f"'{name}' is not usable as a model term")

    check_columns(df, required_columns=[metric] + factors)

    return factors


def build_formula(metric, factors):
    """Full-factorial formula, e.g. 'wij ~ C(strain) * C(nutrients)'."""
    return f"{metric} ~ " + " * ".join([f"C({f})" for f in factors])


def fit_factorial_model(df, metric, factors):
    """
    Fit an ordinary least squares model of `metric` on up to three
    categorical factors and all of their interactions.

    Parameters
    ----------
    df : pandas.DataFrame
        record table. Rows with a missing metric are dropped.
    metric : str
        numeric response column.
    factors : list of str
        1-3 categorical columns. Order matters for the sequential sums of
        squares reported by `anova`.

    Returns
    -------
    statsmodels.regression.linear_model.RegressionResultsWrapper

    Raises
    ------
    InsufficientGroupSize
        a factor has fewer than two levels, or no residual degrees of
        freedom are left.
    """

    factors = _check_factorial_args(df, metric, factors)

    model_df = df[[metric] + factors].dropna().copy()
    for f in factors:
        model_df[f] = model_df[f].astype(str)
        num_levels = model_df[f].nunique()
        if num_levels < 2:
            err = f"factor '{f}' has {num_levels} level(s); need at least 2"
            raise InsufficientGroupSize(err)

    formula = build_formula(metric, factors)

    # Empty cells in the factorial make the design rank deficient
    X = patsy.dmatrix(formula.split("~")[1], model_df, return_type="dataframe")
    rank = np.linalg.matrix_rank(X.to_numpy())
    if rank < X.shape[1]:
        w = f"design for '{formula}' is rank deficient ({rank} of {X.shape[1]} "
        w += "columns); some factor combinations have no observations"
        warnings.warn(w)

    if len(model_df) <= rank:
        err = f"'{formula}' leaves no residual degrees of freedom "
        err += f"({len(model_df)} observations)"
        raise InsufficientGroupSize(err)

    return ols(formula, data=model_df).fit()


def anova(df, metric, factors, return_model=False):
    """
    Analysis of variance of `metric` against categorical factors.

    The model includes every main effect and every interaction among the
    factors. Sums of squares are sequential (type I), so the order of
    `factors` matters for unbalanced data.

    This does not check that the residuals are normally distributed. Look
    at `residual_normality` and a Q-Q plot of the residuals
    (`sporefit.plot.residual_qq`) before trusting the F-tests.

    Parameters
    ----------
    df : pandas.DataFrame
    metric : str
    factors : list of str
        one to three categorical columns.
    return_model : bool, default False
        also return the fitted model, so residual checks use the same fit
        as the F-tests.

    Returns
    -------
    pandas.DataFrame
        term, sum_sq, df, F, p_value. Terms are named by factor, with
        interactions joined by ':' (e.g. 'strain:nutrients'). The last row
        is 'Residual'.
    statsmodels.regression.linear_model.RegressionResultsWrapper
        only if `return_model` is True.
    """

    model = fit_factorial_model(df, metric, factors)
    table = anova_lm(model, typ=1)

    out_df = pd.DataFrame({"term": [_C_TERM.sub(r"\1", t) for t in table.index],
                           "sum_sq": table["sum_sq"].to_numpy(),
                           "df": table["df"].to_numpy(),
                           "F": table["F"].to_numpy(),
                           "p_value": table["PR(>F)"].to_numpy()})

    if return_model:
        return out_df[ANOVA_COLUMNS], model

    return out_df[ANOVA_COLUMNS]


def residual_normality(model):
    """
    Shapiro-Wilk test on the residuals of a fitted model.

    An aid for the normality check that has to precede reading an ANOVA
    table, not a replacement for looking at a Q-Q plot.

    Returns
    -------
    dict
        n, W, p_value (NaN when there are fewer than three residuals).
    """

    resid = np.asarray(model.resid, dtype=float)
    if len(resid) < 3:
        return {"n": len(resid), "W": np.nan, "p_value": np.nan}

    W, p_value = stats.shapiro(resid)

    return {"n": len(resid), "W": float(W), "p_value": float(p_value)}
