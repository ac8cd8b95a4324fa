from bvepls.selection.engine import (
    bve_pls,
    eliminate,
    elimination_candidates,
    run_elimination,
    select_best_iteration,
    zero_variance_columns,
)
from bvepls.selection.modes import ClassificationMode, RegressionMode, resolve_mode

__all__ = [
    "bve_pls",
    "eliminate",
    "elimination_candidates",
    "run_elimination",
    "select_best_iteration",
    "zero_variance_columns",
    "ClassificationMode",
    "RegressionMode",
    "resolve_mode",
]
