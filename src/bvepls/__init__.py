from bvepls.pipeline import run_01_backward_elimination, run_02_artifact_audit
from bvepls.selection.engine import bve_pls, run_elimination
from bvepls.types import BVEResult, EliminationConfig, IterationRecord

__all__ = [
    "bve_pls",
    "run_elimination",
    "run_01_backward_elimination",
    "run_02_artifact_audit",
    "BVEResult",
    "EliminationConfig",
    "IterationRecord",
]
