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
    get_cij,
    get_bij
)
from sporefit.stats import (
    post_hoc_all_pairs,
    post_hoc_vs_control
)
from sporefit.config import load_config

def analyze_natural_isolates(source, config=None, verbose=False):
    """
    Exploitation hierarchy among natural isolates mixed 1:1.

    Blocks recorded in the returned report:

    + observations: cleaned observations with numspores/logspores.
    + pure_anova: logspores ~ strain * nutrients on pure cultures.
    + pure_marker_effect: paired test of antibiotic vs plain plates.
    + mix_cij: Ci(j) for both members of every mixture.
    + cij_directional: one-sided tests for the treatments listed as
      directional in the configuration (BH within the family).
    + cij_other: two-sided tests of Ci(j) != 0 for the rest (BH).
    + cij_anova: cij ~ strain * nutrients * nutrients2.
    + cij_posthoc_partner: per strain, all pairs of partners (Tukey).
    + mix_bij: Bij for every mixture.
    + bij_tests: two-sided tests of Bij != 0 per pair and treatment (BH).
    + bij_anova: bij ~ pair * nutrients * nutrients2.
    + bij_posthoc_pair: per treatment, all pairs of pairs (Tukey).
    + bij_posthoc_treatment: per pair, each treatment vs the control
      treatment (Dunnett).

    Parameters
    ----------
    source : str or pandas.DataFrame
        natural-isolate CFU table (with 'pair' and 'trt' columns).
    config : str or dict, optional
    verbose : bool, default False

    Returns
    -------
    AnalysisReport
    """

    cf = load_config(config)
    section = cf["natural_isolates"]
    conf_level = cf["conf_level"]
    alpha = cf["alpha"]
    control = section["control_treatment"]

    report = AnalysisReport("natural_isolates", verbose=verbose)

    derived = report.run_block("observations",
                               prepare_observations,
                               source,
                               exclusion_rules=section["exclusion_rules"],
                               cfu_floor=cf["cfu_floor"],
                               extra_columns=["pair", "trt"],
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

    # Ci(j)
    cij_df = report.run_block("mix_cij",
                              get_cij,
                              derived,
                              mix_floor=cf["mix_floor"])

    directional = section["directional"]
    if cij_df is not None:
        other = sorted(set(cij_df["treatment"]) - set(directional))
    else:
        other = []

    report.run_block("cij_directional",
                     one_sample_family,
                     cij_df, "cij", ["strain", "strain2", "treatment"],
                     treatments=directional,
                     alternative="greater",
                     conf_level=conf_level,
                     requires=["mix_cij"],
                     notes=[f"one-sided (greater) for treatments {directional}"])

    report.run_block("cij_other",
                     one_sample_family,
                     cij_df, "cij", ["strain", "strain2", "treatment"],
                     treatments=other,
                     alternative="two-sided",
                     conf_level=conf_level,
                     requires=["mix_cij"])

    report.run_block("cij_anova",
                     anova_block,
                     cij_df, "cij", ["strain", "nutrients", "nutrients2"],
                     requires=["mix_cij"],
                     notes=[NORMALITY_NOTE])

    report.run_block("cij_posthoc_partner",
                     by_stratum,
                     cij_df, "strain", post_hoc_all_pairs,
                     verbose=verbose,
                     metric="cij",
                     factor="strain2",
                     alpha=alpha,
                     requires=["mix_cij"])

    # Bi(j)
    bij_df = report.run_block("mix_bij",
                              get_bij,
                              derived,
                              pair_constants=cf["pair_densities"])

    if bij_df is not None:
        treatments = sorted(set(bij_df["treatment"]))
    else:
        treatments = []

    report.run_block("bij_tests",
                     one_sample_family,
                     bij_df, "bij", ["pair", "treatment"],
                     treatments=treatments,
                     alternative="two-sided",
                     conf_level=conf_level,
                     requires=["mix_bij"])

    report.run_block("bij_anova",
                     anova_block,
                     bij_df, "bij", ["pair", "nutrients", "nutrients2"],
                     requires=["mix_bij"],
                     notes=[NORMALITY_NOTE])

    report.run_block("bij_posthoc_pair",
                     by_stratum,
                     bij_df, "treatment", post_hoc_all_pairs,
                     verbose=verbose,
                     metric="bij",
                     factor="pair",
                     alpha=alpha,
                     requires=["mix_bij"])

    report.run_block("bij_posthoc_treatment",
                     by_stratum,
                     bij_df, "pair", post_hoc_vs_control,
                     verbose=verbose,
                     metric="bij",
                     factor="treatment",
                     control_level=control,
                     alpha=alpha,
                     seed=cf["dunnett_seed"],
                     requires=["mix_bij"],
                     notes=[f"control treatment '{control}'"])

    return report
