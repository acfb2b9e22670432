
from .report import (
    AnalysisReport
)

from .lab_strains import (
    analyze_lab_strains
)

from .natural_isolates import (
    analyze_natural_isolates
)

from .run_pipeline import (
    run_pipeline
)
