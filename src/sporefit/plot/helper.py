import copy

import numpy as np
from scipy import stats

def merge_kwargs(defaults, overrides):
    """Copy of `defaults` updated with `overrides` (which may be None)."""

    final = copy.deepcopy(defaults)
    if overrides is not None:
        for k in overrides:
            final[k] = overrides[k]
    return final

def hue_offsets(num_hue, width=0.6):
    """
    Horizontal offsets spreading `num_hue` groups over `width` around each
    categorical x position.
    """

    if num_hue <= 1:
        return np.zeros(1)
    return np.linspace(-width/2, width/2, num_hue)

def jitter(n, scale=0.04, seed=0):
    """Small deterministic horizontal jitter for `n` points."""
    rng = np.random.default_rng(seed)
    return rng.uniform(-scale, scale, size=n)

def category_levels(values):
    """Sorted unique levels of a categorical/object column as strings."""
    return sorted(set(str(v) for v in values))

def draw_strip(ax,
               df,
               x,
               y,
               hue,
               point_kwargs,
               mean_error_kwargs,
               conf_level=0.95):
    """
    Draw replicate points and mean +/- t confidence interval for every
    (x, hue) combination in `df`.

    Returns the list of x levels (in axis order).
    """

    x_levels = category_levels(df[x])
    if hue is None:
        hue_levels = [None]
    else:
        hue_levels = category_levels(df[hue])

    offsets = hue_offsets(len(hue_levels))
    colors = point_kwargs.pop("colors")

    for j, h in enumerate(hue_levels):

        if h is None:
            hue_df = df
        else:
            hue_df = df[df[hue].astype(str) == h]

        color = colors[j % len(colors)]
        labeled = False
        for i, level in enumerate(x_levels):

            values = hue_df.loc[hue_df[x].astype(str) == level, y].to_numpy(dtype=float)
            values = values[np.isfinite(values)]
            if len(values) == 0:
                continue

            pos = i + offsets[j]
            label = None
            if h is not None and not labeled:
                label = h
                labeled = True

            ax.scatter(pos + jitter(len(values), seed=i*len(hue_levels) + j),
                       values,
                       color=color,
                       label=label,
                       **point_kwargs)

            mean = np.mean(values)
            if len(values) > 1:
                sem = np.std(values, ddof=1)/np.sqrt(len(values))
                half = stats.t.ppf(1 - (1 - conf_level)/2, len(values) - 1)*sem
            else:
                half = 0.0

            ax.errorbar([pos], [mean], yerr=[half], **mean_error_kwargs)

    ax.set_xticks(np.arange(len(x_levels)))
    ax.set_xticklabels(x_levels)
    ax.set_xlim(-0.75, len(x_levels) - 0.25)
    ax.set_xlabel(x)
    ax.set_ylabel(y)

    if hue is not None:
        ax.legend(title=hue, frameon=False)

    return x_levels
