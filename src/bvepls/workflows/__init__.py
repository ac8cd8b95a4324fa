from bvepls.workflows.audit import run_artifact_audit
from bvepls.workflows.elimination import run_bve_workflow

__all__ = [
    "run_bve_workflow",
    "run_artifact_audit",
]
