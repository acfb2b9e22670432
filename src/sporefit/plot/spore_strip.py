from sporefit.plot.default_styles import (
    DEFAULT_POINT_KWARGS,
    DEFAULT_MEAN_ERROR_KWARGS,
    DEFAULT_HUE_COLORS
)
from sporefit.plot.helper import (
    merge_kwargs,
    draw_strip
)
from sporefit.util import check_columns

from matplotlib import pyplot as plt

def spore_strip(df,
                x="strain",
                y="logspores",
                hue="nutrients",
                conf_level=0.95,
                point_kwargs=None,
                mean_error_kwargs=None,
                ax=None):
    """
    Strip plot of spore counts per strain, colored by nutrient history.

    Each replicate plate is a point; group means are drawn with their
    t-based confidence interval.

    Parameters
    ----------
    df : pandas.DataFrame
        derived observation table (needs `x`, `y` and `hue` columns).
    x : str, default "strain"
        categorical column along the x-axis.
    y : str, default "logspores"
        numeric column plotted.
    hue : str or None, default "nutrients"
        column used to color and offset points. None draws one group per x.
    conf_level : float, default 0.95
        confidence level of the error bars.
    point_kwargs : dict, optional
        keyword arguments passed to ax.scatter. 'colors' sets the hue palette.
    mean_error_kwargs : dict, optional
        keyword arguments passed to ax.errorbar.
    ax : matplotlib.axes._axes.Axes, optional
        Axes object to plot on. If None, a new figure and axes are created.

    Returns
    -------
    matplotlib.axes._axes.Axes
        The axes object with the plot.
    """

    columns = [x, y]
    if hue is not None:
        columns.append(hue)
    check_columns(df, required_columns=columns)

    if ax is None:
        _, ax = plt.subplots(1, figsize=(6, 4))

    final_point_kwargs = merge_kwargs(DEFAULT_POINT_KWARGS, point_kwargs)
    final_point_kwargs.setdefault("colors", DEFAULT_HUE_COLORS)
    final_mean_error_kwargs = merge_kwargs(DEFAULT_MEAN_ERROR_KWARGS,
                                           mean_error_kwargs)

    draw_strip(ax, df, x, y, hue,
               point_kwargs=final_point_kwargs,
               mean_error_kwargs=final_mean_error_kwargs,
               conf_level=conf_level)

    return ax
