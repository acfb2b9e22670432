
from matplotlib import pyplot as plt

SMALL_SIZE = 12
MEDIUM_SIZE = 14
BIGGER_SIZE = 16

plt.rc('font', size=SMALL_SIZE)          # controls default text sizes
plt.rc('axes', titlesize=SMALL_SIZE)     # fontsize of the axes title
plt.rc('axes', labelsize=MEDIUM_SIZE)    # fontsize of the x and y labels
plt.rc('xtick', labelsize=SMALL_SIZE)    # fontsize of the tick labels
plt.rc('ytick', labelsize=SMALL_SIZE)    # fontsize of the tick labels
plt.rc('legend', fontsize=SMALL_SIZE)    # legend fontsize
plt.rc('figure', titlesize=BIGGER_SIZE)  # fontsize of the figure title

# Replicate points
DEFAULT_POINT_KWARGS = {
    "s":40,
    "alpha":0.8,
    "edgecolor":"black",
    "linewidth":0.5
}

# Group means with confidence intervals
DEFAULT_MEAN_ERROR_KWARGS = {
    "color":"black",
    "lw":0,
    "elinewidth":1.5,
    "capsize":6,
    "marker":"_",
    "markersize":16
}

DEFAULT_ZERO_LINE_KWARGS = {
    "lw":1,
    "ls":"--",
    "color":"gray",
    "zorder":0
}

DEFAULT_QQ_SCATTER_KWARGS = {
    "s":30,
    "edgecolor":"royalblue",
    "facecolor":"none"
}

DEFAULT_QQ_LINE_KWARGS = {
    "lw":2,
    "color":"firebrick"
}

# Colors cycled through hue levels (nutrient history, strain...)
DEFAULT_HUE_COLORS = ["steelblue", "darkorange", "seagreen", "firebrick",
                      "mediumpurple", "saddlebrown", "gray"]
