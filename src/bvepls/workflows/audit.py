from __future__ import annotations

import json
from pathlib import Path

import pandas as pd

from bvepls.artifacts import ValidationResult, validate_required_artifacts, validate_schema
from bvepls.config import ArtifactName
from bvepls.qa import validate_elimination_artifacts


def run_artifact_audit(output_dir: Path) -> ValidationResult:
    reports = output_dir / "reports"
    errors = validate_required_artifacts(output_dir=output_dir)
    if errors:
        return ValidationResult(ok=False, errors=errors)

    manifest = json.loads((reports / ArtifactName.MANIFEST).read_text(encoding="utf-8"))
    mode = str(manifest.get("mode", ""))
    schema = validate_schema(output_dir=output_dir, mode=mode)
    errors.extend(schema.errors)
    if errors:
        return ValidationResult(ok=False, errors=errors)

    history_df = pd.read_csv(reports / ArtifactName.HISTORY, keep_default_na=False)
    selection_df = pd.read_csv(reports / ArtifactName.SELECTION, keep_default_na=False)
    try:
        validate_elimination_artifacts(
            history_df=history_df,
            selection_df=selection_df,
            mode=mode,
            n_variables=int(manifest.get("n_variables", 0)),
        )
    except ValueError as exc:
        errors.append(str(exc))

    if int(manifest.get("n_iterations", -1)) != len(history_df):
        errors.append("manifest: n_iterations does not match history rows")
    best_iteration = int(manifest.get("best_iteration", -1))
    if not 0 <= best_iteration < len(history_df):
        errors.append("manifest: best_iteration outside history")
    elif str(history_df.loc[best_iteration, "is_best"]).lower() != "true":
        errors.append("manifest: best_iteration disagrees with history is_best flag")

    return ValidationResult(ok=len(errors) == 0, errors=errors)
