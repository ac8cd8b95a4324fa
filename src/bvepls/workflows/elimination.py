from __future__ import annotations

import logging
import sys
from pathlib import Path

from bvepls.artifacts import ensure_reports_dir, write_manifest, write_result_artifacts
from bvepls.common.meta import git_commit_and_dirty, library_versions
from bvepls.config import ArtifactName, DEFAULT_SEED
from bvepls.io import LoadedDataset, load_dataset
from bvepls.selection.engine import run_elimination
from bvepls.types import BVEResult, EliminationConfig

logger = logging.getLogger(__name__)


def run_bve_workflow(
    input_path: Path,
    output_dir: Path,
    response_column: str,
    project_root: Path,
    config: EliminationConfig | None = None,
    mode: str | None = None,
    seed: int = DEFAULT_SEED,
) -> BVEResult:
    config = EliminationConfig() if config is None else config
    reports = ensure_reports_dir(output_dir)
    loaded: LoadedDataset = load_dataset(input_path, response_column, mode=mode)
    logger.info(
        "Loaded %s: %d samples, %d predictors, response=%s",
        input_path,
        len(loaded.x),
        len(loaded.feature_columns),
        response_column,
    )

    result = run_elimination(loaded.x, loaded.y, rng=seed, mode=mode, config=config)
    write_result_artifacts(result, reports)

    best = result.history[result.best_iteration]
    commit, dirty = git_commit_and_dirty(project_root)
    manifest = {
        "manifest_version": "1.0",
        "input_path": str(input_path),
        "response_column": response_column,
        "git_commit": commit,
        "git_dirty": dirty,
        "python_executable": sys.executable,
        "library_versions": library_versions(),
        "seed": int(seed),
        "mode": result.mode,
        "config": config.to_manifest_payload(),
        "n_samples": len(loaded.x),
        "n_variables": len(loaded.feature_columns),
        "n_calibration": result.partition.n_calibration,
        "n_holdout": result.partition.n_holdout,
        "n_iterations": len(result.history),
        "best_iteration": result.best_iteration,
        "best_performance": best.performance,
        "n_selected": int(result.selection.shape[0]),
    }
    write_manifest(manifest, reports / ArtifactName.MANIFEST)
    logger.info("Wrote artifacts to %s", reports)
    return result
