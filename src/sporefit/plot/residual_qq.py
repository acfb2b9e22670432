from sporefit.plot.default_styles import (
    DEFAULT_QQ_SCATTER_KWARGS,
    DEFAULT_QQ_LINE_KWARGS
)
from sporefit.plot.helper import merge_kwargs

import numpy as np
from matplotlib import pyplot as plt
from scipy import stats

def residual_qq(residuals,
                metric,
                factors,
                scatter_kwargs=None,
                line_kwargs=None,
                ax=None):
    """
    Normal Q-Q plot of the residuals of the factorial model behind an ANOVA.

    Parameters
    ----------
    residuals : array-like
        model residuals, e.g. the 'residual' column of the 'residuals'
        table of an ANOVA block or `model.resid`.
    metric : str
        response the model was fit to (axis label).
    factors : list of str
        factors of the model (title).
    scatter_kwargs : dict, optional
        keyword arguments passed to ax.scatter.
    line_kwargs : dict, optional
        keyword arguments passed to ax.plot for the reference line.
    ax : matplotlib.axes._axes.Axes, optional

    Returns
    -------
    matplotlib.axes._axes.Axes
    """

    residuals = np.asarray(residuals, dtype=float)
    residuals = residuals[np.isfinite(residuals)]
    if len(residuals) < 2:
        raise ValueError("need at least two residuals for a Q-Q plot")

    (theoretical, ordered), (slope, intercept, _) = stats.probplot(residuals,
                                                                   dist="norm")

    if ax is None:
        _, ax = plt.subplots(1, figsize=(5, 5))

    final_scatter_kwargs = merge_kwargs(DEFAULT_QQ_SCATTER_KWARGS, scatter_kwargs)
    final_line_kwargs = merge_kwargs(DEFAULT_QQ_LINE_KWARGS, line_kwargs)

    ax.scatter(theoretical, ordered, **final_scatter_kwargs)

    x_line = np.array([np.min(theoretical), np.max(theoretical)])
    ax.plot(x_line, slope*x_line + intercept, **final_line_kwargs)

    ax.set_xlabel("theoretical quantiles")
    ax.set_ylabel(f"{metric} residuals")
    ax.set_title(" x ".join(factors))

    return ax
