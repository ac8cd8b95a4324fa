from __future__ import annotations

from pathlib import Path

from bvepls.artifacts import ValidationResult
from bvepls.config import DEFAULT_SEED
from bvepls.types import BVEResult, EliminationConfig
from bvepls.workflows.audit import run_artifact_audit
from bvepls.workflows.elimination import run_bve_workflow


def run_01_backward_elimination(
    input_path: Path,
    output_dir: Path,
    response_column: str,
    project_root: Path,
    config: EliminationConfig | None = None,
    mode: str | None = None,
    seed: int = DEFAULT_SEED,
) -> BVEResult:
    return run_bve_workflow(
        input_path=input_path,
        output_dir=output_dir,
        response_column=response_column,
        project_root=project_root,
        config=config,
        mode=mode,
        seed=seed,
    )


def run_02_artifact_audit(output_dir: Path) -> ValidationResult:
    return run_artifact_audit(output_dir)
