from sporefit.analysis.report import AnalysisReport
from sporefit.analysis.blocks import (
    pure_cultures,
    anova_block,
    marker_effect_block,
    one_sample_family,
    by_stratum,
    prepare_observations,
    NORMALITY_NOTE
)
from sporefit.derive import (
    get_wij
)
from sporefit.stats import (
    post_hoc_all_pairs,
    post_hoc_vs_control
)
from sporefit.config import load_config

def analyze_lab_strains(source, config=None, verbose=False):
    """
    Cheating assay of lab strains mixed 1:9 with a cooperating partner.

    Steps, each recorded as a block in the returned report:

    + observations: cleaned observations with numspores/logspores.
    + pure_anova: logspores ~ strain * nutrients on pure cultures.
    + pure_marker_effect: paired test of antibiotic vs plain plates.
    + mix_wij: Wij for every mixture plate and replicate.
    + wij_directional: Wij > 0 for the treatments where cheating is
      expected a priori (one-sided, BH within the family).
    + wij_other: Wij != 0 for the remaining treatments (two-sided, BH).
    + wij_anova: wij ~ strain * nutrients * nutrients2.
    + wij_posthoc_treatment: per strain, each treatment vs the control
      treatment (Dunnett).
    + wij_posthoc_strain: per treatment, all pairs of strains (Tukey).

    Parameters
    ----------
    source : str or pandas.DataFrame
        lab-strain CFU table.
    config : str or dict, optional
        configuration overriding the packaged defaults.
    verbose : bool, default False

    Returns
    -------
    AnalysisReport
    """

    cf = load_config(config)
    section = cf["lab_strains"]
    conf_level = cf["conf_level"]
    alpha = cf["alpha"]

    report = AnalysisReport("lab_strains", verbose=verbose)

    derived = report.run_block("observations",
                               prepare_observations,
                               source,
                               exclusion_rules=section["exclusion_rules"],
                               cfu_floor=cf["cfu_floor"],
                               verbose=verbose)
    if derived is None:
        return report

    # pure cultures
    report.run_block("pure_anova",
                     anova_block,
                     pure_cultures(derived), "logspores", ["strain", "nutrients"],
                     notes=[NORMALITY_NOTE])

    report.run_block("pure_marker_effect",
                     marker_effect_block,
                     derived, conf_level=conf_level)

    # mixtures
    wij_df = report.run_block("mix_wij",
                              get_wij,
                              derived,
                              mixing_ratio=cf["mixing_ratio"],
                              mix_floor=cf["mix_floor"])

    directional = section["directional"]
    if wij_df is not None:
        other = sorted(set(wij_df["treatment"]) - set(directional))
    else:
        other = []

    report.run_block("wij_directional",
                     one_sample_family,
                     wij_df, "wij", ["strain", "strain2", "treatment"],
                     treatments=directional,
                     alternative="greater",
                     conf_level=conf_level,
                     requires=["mix_wij"],
                     notes=[f"one-sided (greater) for treatments {directional}"])

    report.run_block("wij_other",
                     one_sample_family,
                     wij_df, "wij", ["strain", "strain2", "treatment"],
                     treatments=other,
                     alternative="two-sided",
                     conf_level=conf_level,
                     requires=["mix_wij"])

    report.run_block("wij_anova",
                     anova_block,
                     wij_df, "wij", ["strain", "nutrients", "nutrients2"],
                     requires=["mix_wij"],
                     notes=[NORMALITY_NOTE])

    report.run_block("wij_posthoc_treatment",
                     by_stratum,
                     wij_df, "strain", post_hoc_vs_control,
                     verbose=verbose,
                     metric="wij",
                     factor="treatment",
                     control_level=section["control_treatment"],
                     alpha=alpha,
                     seed=cf["dunnett_seed"],
                     requires=["mix_wij"],
                     notes=[f"control treatment '{section['control_treatment']}'"])

    report.run_block("wij_posthoc_strain",
                     by_stratum,
                     wij_df, "treatment", post_hoc_all_pairs,
                     verbose=verbose,
                     metric="wij",
                     factor="strain",
                     alpha=alpha,
                     requires=["mix_wij"])

    return report
