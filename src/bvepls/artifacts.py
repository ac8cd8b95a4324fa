from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from bvepls.config import (
    ArtifactName,
    HISTORY_COLUMNS,
    MANIFEST_REQUIRED_KEYS,
    REQUIRED_ARTIFACTS,
    ResponseModeName,
    SELECTION_COLUMNS,
)
from bvepls.types import BVEResult


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    errors: list[str]


def ensure_reports_dir(output_dir: Path) -> Path:
    reports = output_dir / "reports"
    reports.mkdir(parents=True, exist_ok=True)
    return reports


def write_csv(df: pd.DataFrame, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)


def _normalize_float(x: float) -> float | None:
    if x is None:
        return None
    if not np.isfinite(float(x)):
        return None
    return float(f"{float(x):.6g}")


def normalize_for_manifest(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: normalize_for_manifest(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [normalize_for_manifest(v) for v in value]
    if isinstance(value, np.ndarray):
        return [normalize_for_manifest(v) for v in value.tolist()]
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, (np.floating, float)):
        return _normalize_float(float(value))
    if isinstance(value, (np.integer, int)):
        return int(value)
    if isinstance(value, str) or value is None:
        return value
    return str(value)


def write_manifest(manifest: dict[str, Any], path: Path) -> None:
    payload = normalize_for_manifest(manifest)
    missing = [k for k in MANIFEST_REQUIRED_KEYS if k not in payload]
    if missing:
        raise ValueError(f"Manifest missing required keys: {missing}")
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, sort_keys=True, indent=2, ensure_ascii=True)


def selection_frame(result: BVEResult) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "variable_index": result.selection.astype(int),
            "variable_name": result.selected_names(),
        },
        columns=SELECTION_COLUMNS,
    )


def write_result_artifacts(result: BVEResult, reports: Path) -> None:
    write_csv(result.history_frame(), reports / ArtifactName.HISTORY)
    write_csv(selection_frame(result), reports / ArtifactName.SELECTION)


def validate_required_artifacts(output_dir: Path) -> list[str]:
    reports = output_dir / "reports"
    errors: list[str] = []
    for name in REQUIRED_ARTIFACTS:
        if not (reports / name).exists():
            errors.append(f"missing artifact: {name}")
    return errors


def _read_csv_if_exists(path: Path) -> pd.DataFrame | None:
    if not path.exists():
        return None
    return pd.read_csv(path, keep_default_na=False)


def validate_schema(output_dir: Path, mode: str) -> ValidationResult:
    reports = output_dir / "reports"
    errors: list[str] = []

    if mode not in ResponseModeName.ALL:
        errors.append(f"{ArtifactName.MANIFEST}: invalid mode {mode!r}")

    history = _read_csv_if_exists(reports / ArtifactName.HISTORY)
    if history is not None:
        for req in HISTORY_COLUMNS:
            if req not in history.columns:
                errors.append(f"{ArtifactName.HISTORY}: missing {req}")
        if "is_best" in history.columns:
            n_best = int(np.sum(history["is_best"].astype(str).str.lower() == "true"))
            if n_best != 1:
                errors.append(f"{ArtifactName.HISTORY}: {n_best} rows flagged is_best")

    selection = _read_csv_if_exists(reports / ArtifactName.SELECTION)
    if selection is not None:
        for req in SELECTION_COLUMNS:
            if req not in selection.columns:
                errors.append(f"{ArtifactName.SELECTION}: missing {req}")

    return ValidationResult(ok=len(errors) == 0, errors=errors)
