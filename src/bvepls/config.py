from __future__ import annotations

from typing import Final

DEFAULT_NCOMP: Final[int] = 10
DEFAULT_RATIO: Final[float] = 0.75
DEFAULT_VIP_THRESHOLD: Final[float] = 1.0
DEFAULT_SEED: Final[int] = 42
DEFAULT_N_JOBS: Final[int] = 1


class ResponseModeName:
    REGRESSION = "regression"
    CLASSIFICATION = "classification"
    ALL = [REGRESSION, CLASSIFICATION]


class EliminationPool:
    # Working matrix narrowed to the eliminated columns (reference behaviour).
    ELIMINATED = "eliminated"
    # Working matrix keeps the columns that were not eliminated.
    SURVIVING = "surviving"
    ALL = [ELIMINATED, SURVIVING]


class ArtifactName:
    HISTORY = "bve_iteration_history.csv"
    SELECTION = "bve_selection.csv"
    MANIFEST = "run_manifest.json"


REQUIRED_ARTIFACTS: Final[list[str]] = [
    ArtifactName.HISTORY,
    ArtifactName.SELECTION,
    ArtifactName.MANIFEST,
]

HISTORY_COLUMNS: Final[list[str]] = [
    "iteration",
    "performance",
    "opt_comp",
    "n_working",
    "n_candidates",
    "n_selected",
    "selected",
    "is_best",
]

SELECTION_COLUMNS: Final[list[str]] = ["variable_index", "variable_name"]

MANIFEST_REQUIRED_KEYS: Final[list[str]] = [
    "manifest_version",
    "input_path",
    "response_column",
    "git_commit",
    "git_dirty",
    "python_executable",
    "library_versions",
    "seed",
    "mode",
    "config",
    "n_samples",
    "n_variables",
    "n_calibration",
    "n_holdout",
    "n_iterations",
    "best_iteration",
    "best_performance",
    "n_selected",
]
