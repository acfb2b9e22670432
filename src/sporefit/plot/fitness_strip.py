from sporefit.plot.default_styles import (
    DEFAULT_POINT_KWARGS,
    DEFAULT_MEAN_ERROR_KWARGS,
    DEFAULT_ZERO_LINE_KWARGS,
    DEFAULT_HUE_COLORS
)
from sporefit.plot.helper import (
    merge_kwargs,
    draw_strip
)
from sporefit.util import check_columns

from matplotlib import pyplot as plt

def fitness_strip(df,
                  metric,
                  x="treatment",
                  hue="strain",
                  conf_level=0.95,
                  point_kwargs=None,
                  mean_error_kwargs=None,
                  ax=None):
    """
    Plot a fitness metric (wij, cij or bij) per treatment against zero.

    Zero is the no-advantage line for all three metrics, so it is drawn as
    a dashed reference.

    Parameters
    ----------
    df : pandas.DataFrame
        table returned by get_wij, get_cij or get_bij.
    metric : str
        fitness column to plot.
    x : str, default "treatment"
    hue : str or None, default "strain"
        use "pair" for Bi(j) tables.
    conf_level : float, default 0.95
    point_kwargs : dict, optional
    mean_error_kwargs : dict, optional
    ax : matplotlib.axes._axes.Axes, optional

    Returns
    -------
    matplotlib.axes._axes.Axes
    """

    columns = [x, metric]
    if hue is not None:
        columns.append(hue)
    check_columns(df, required_columns=columns)

    if ax is None:
        _, ax = plt.subplots(1, figsize=(6, 4))

    final_point_kwargs = merge_kwargs(DEFAULT_POINT_KWARGS, point_kwargs)
    final_point_kwargs.setdefault("colors", DEFAULT_HUE_COLORS)
    final_mean_error_kwargs = merge_kwargs(DEFAULT_MEAN_ERROR_KWARGS,
                                           mean_error_kwargs)

    draw_strip(ax, df, x, metric, hue,
               point_kwargs=final_point_kwargs,
               mean_error_kwargs=final_mean_error_kwargs,
               conf_level=conf_level)

    ax.axhline(0, **DEFAULT_ZERO_LINE_KWARGS)

    return ax
