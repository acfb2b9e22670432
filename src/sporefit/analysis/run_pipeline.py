from sporefit.analysis.lab_strains import analyze_lab_strains
from sporefit.analysis.natural_isolates import analyze_natural_isolates
from sporefit.analysis.blocks import pure_cultures
from sporefit.analysis.report import (
    prepare_output_dir,
    OK
)
from sporefit.config import load_config
from sporefit.plot import (
    spore_strip,
    fitness_strip,
    residual_qq
)
from sporefit.util import generalized_main

from matplotlib import pyplot as plt
from tqdm.auto import tqdm

import os

# anova block -> (metric, factors)
ANOVA_FIGURES = {
    "lab_strains":{
        "pure_anova":("logspores", ["strain", "nutrients"]),
        "wij_anova":("wij", ["strain", "nutrients", "nutrients2"]),
    },
    "natural_isolates":{
        "pure_anova":("logspores", ["strain", "nutrients"]),
        "cij_anova":("cij", ["strain", "nutrients", "nutrients2"]),
        "bij_anova":("bij", ["pair", "nutrients", "nutrients2"]),
    }
}

# fitness block -> (metric, hue)
FITNESS_SOURCES = {
    "lab_strains":{"mix_wij":("wij", "strain")},
    "natural_isolates":{"mix_cij":("cij", "strain"),
                        "mix_bij":("bij", "pair")},
}


def _report_figures(report):
    """
    Build the diagnostic figures for one report.

    Returns a dict mapping figure name to matplotlib figure. Figures are only
    made for blocks that succeeded.
    """

    experiment = report.experiment
    figures = {}

    observations = report.get("observations")
    if observations is not None:
        pure = pure_cultures(observations)
        if len(pure) > 0:
            fig, ax = plt.subplots(1, figsize=(6, 4))
            spore_strip(pure, ax=ax)
            ax.set_title(f"{experiment}: pure cultures")
            figures["pure_spores"] = fig

    for block, (metric, hue) in FITNESS_SOURCES[experiment].items():
        table = report.get(block)
        if table is None or len(table) == 0:
            continue
        fig, ax = plt.subplots(1, figsize=(8, 4))
        fitness_strip(table, metric, hue=hue, ax=ax)
        ax.set_title(f"{experiment}: {metric}")
        figures[f"{metric}_strip"] = fig

    for block, (metric, factors) in ANOVA_FIGURES[experiment].items():
        if report.status(block) != OK:
            continue
        residuals = report.get(block, "residuals")["residual"]
        fig, ax = plt.subplots(1, figsize=(5, 5))
        residual_qq(residuals, metric, factors, ax=ax)
        figures[f"{block}_qq"] = fig

    return figures


def _write_figures(report, output_dir, prefix=""):

    figures = _report_figures(report)

    files = {name: os.path.join(output_dir, f"{prefix}{report.experiment}_{name}.pdf")
             for name in figures}
    prepare_output_dir(output_dir, list(files.values()))

    written = []
    for name, fig in figures.items():
        fig.savefig(files[name], bbox_inches="tight")
        plt.close(fig)
        written.append(files[name])

    return written


def run_pipeline(lab_strains,
                 natural_isolates,
                 output_dir=None,
                 config=None,
                 output_prefix="sporefit_",
                 plots=False,
                 verbose=False):
    """
    Run the lab-strain and natural-isolate analyses.

    Parameters
    ----------
    lab_strains : str or pandas.DataFrame or None
        lab-strain CFU table. None skips this experiment.
    natural_isolates : str or pandas.DataFrame or None
        natural-isolate CFU table. None skips this experiment.
    output_dir : str, optional
        directory for result csv files (and pdf figures if `plots` is set).
        If None, nothing is written.
    config : str or dict, optional
        yaml file or dictionary overriding the packaged configuration.
    output_prefix : str, default "sporefit_"
        prefix for every file written.
    plots : bool, default False
        also write diagnostic figures (pure-culture spores, fitness strip
        plots, ANOVA residual Q-Q plots).
    verbose : bool, default False
        print progress and show a progress bar over experiments.

    Returns
    -------
    dict
        experiment name -> AnalysisReport
    """

    if lab_strains is None and natural_isolates is None:
        raise ValueError("at least one of lab_strains or natural_isolates must be given")

    # Resolve once so a bad config fails before any analysis runs
    cf = load_config(config)

    to_run = []
    if lab_strains is not None:
        to_run.append(("lab_strains", analyze_lab_strains, lab_strains))
    if natural_isolates is not None:
        to_run.append(("natural_isolates", analyze_natural_isolates, natural_isolates))

    reports = {}
    for name, fcn, source in tqdm(to_run, desc="experiments", disable=not verbose):

        report = fcn(source, config=cf, verbose=verbose)
        reports[name] = report

        if output_dir is None:
            continue

        written = report.write(output_dir, prefix=output_prefix)
        if plots:
            written.extend(_write_figures(report, output_dir, prefix=output_prefix))

        if verbose:
            print(f"wrote {len(written)} files for {name} to {output_dir}")

    return reports


def main():
    """
    Command line entry point wrapping `run_pipeline`.
    """

    generalized_main(run_pipeline, prog="sporefit-run")

if __name__ == "__main__":
    main()
