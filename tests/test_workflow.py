from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

import pandas as pd
import pytest

from bvepls.common import meta
from bvepls.config import ArtifactName, ResponseModeName
from bvepls.io import load_dataset
from bvepls.pipeline import run_01_backward_elimination, run_02_artifact_audit
from bvepls.types import EliminationConfig


def _project_root() -> Path:
    return Path(__file__).resolve().parents[1]


def test_regression_workflow_artifacts(synthetic_regression_csv: Path, workspace_tmp_dir: Path) -> None:
    out_dir = workspace_tmp_dir / "out"
    result = run_01_backward_elimination(
        input_path=synthetic_regression_csv,
        output_dir=out_dir,
        response_column="octane",
        project_root=_project_root(),
        config=EliminationConfig(ncomp=3),
        seed=11,
    )
    reports = out_dir / "reports"
    for name in (ArtifactName.HISTORY, ArtifactName.SELECTION, ArtifactName.MANIFEST):
        assert (reports / name).exists()

    manifest = json.loads((reports / ArtifactName.MANIFEST).read_text(encoding="utf-8"))
    assert manifest["mode"] == ResponseModeName.REGRESSION
    assert manifest["n_variables"] == 20
    assert manifest["n_calibration"] + manifest["n_holdout"] == 50
    assert manifest["n_iterations"] == len(result.history)
    assert manifest["config"]["ncomp"] == 3

    selection = pd.read_csv(reports / ArtifactName.SELECTION)
    assert selection["variable_name"].tolist() == result.selected_names()
    assert all(name.startswith("wl") for name in selection["variable_name"])

    audit = run_02_artifact_audit(out_dir)
    assert audit.ok, audit.errors


def test_classification_workflow_artifacts(synthetic_classes_csv: Path, workspace_tmp_dir: Path) -> None:
    out_dir = workspace_tmp_dir / "out"
    result = run_01_backward_elimination(
        input_path=synthetic_classes_csv,
        output_dir=out_dir,
        response_column="group",
        project_root=_project_root(),
        config=EliminationConfig(ncomp=3),
    )
    assert result.mode == ResponseModeName.CLASSIFICATION
    history = pd.read_csv(out_dir / "reports" / ArtifactName.HISTORY)
    assert history["performance"].between(0.0, 100.0).all()
    audit = run_02_artifact_audit(out_dir)
    assert audit.ok, audit.errors


def test_audit_flags_tampered_selection(synthetic_regression_csv: Path, workspace_tmp_dir: Path) -> None:
    out_dir = workspace_tmp_dir / "out"
    run_01_backward_elimination(
        input_path=synthetic_regression_csv,
        output_dir=out_dir,
        response_column="octane",
        project_root=_project_root(),
        config=EliminationConfig(ncomp=3),
    )
    path = out_dir / "reports" / ArtifactName.SELECTION
    selection = pd.read_csv(path)
    tampered = pd.DataFrame(
        {
            "variable_index": [19] + selection["variable_index"].tolist(),
            "variable_name": ["wl019"] + selection["variable_name"].tolist(),
        }
    )
    tampered.to_csv(path, index=False)

    audit = run_02_artifact_audit(out_dir)
    assert not audit.ok
    assert any("selection" in err for err in audit.errors)


def test_audit_flags_best_marker(synthetic_regression_csv: Path, workspace_tmp_dir: Path) -> None:
    out_dir = workspace_tmp_dir / "out"
    run_01_backward_elimination(
        input_path=synthetic_regression_csv,
        output_dir=out_dir,
        response_column="octane",
        project_root=_project_root(),
        config=EliminationConfig(ncomp=3),
    )
    path = out_dir / "reports" / ArtifactName.HISTORY
    history = pd.read_csv(path, keep_default_na=False)
    history["is_best"] = False
    history.to_csv(path, index=False)

    audit = run_02_artifact_audit(out_dir)
    assert not audit.ok
    assert any("is_best" in err for err in audit.errors)


def test_audit_reports_missing_artifacts(workspace_tmp_dir: Path) -> None:
    audit = run_02_artifact_audit(workspace_tmp_dir / "empty")
    assert not audit.ok
    assert len(audit.errors) == 3


def test_load_dataset_rejects_unknown_response(synthetic_regression_csv: Path) -> None:
    with pytest.raises(ValueError, match="not found"):
        load_dataset(synthetic_regression_csv, "ron")


def test_load_dataset_forces_classification(synthetic_regression_csv: Path, workspace_tmp_dir: Path) -> None:
    df = pd.read_csv(synthetic_regression_csv)
    df["octane"] = (df["octane"] > 0).astype(int)
    path = workspace_tmp_dir / "binary.csv"
    df.to_csv(path, index=False)
    loaded = load_dataset(path, "octane", mode=ResponseModeName.CLASSIFICATION)
    assert isinstance(loaded.y.dtype, pd.CategoricalDtype)
    assert len(loaded.feature_columns) == 20


def test_cli_end_to_end(synthetic_classes_csv: Path, workspace_tmp_dir: Path) -> None:
    out_dir = workspace_tmp_dir / "cli"
    run = subprocess.run(
        [
            sys.executable,
            "scripts/run_01_bve.py",
            "--input",
            str(synthetic_classes_csv),
            "--response",
            "group",
            "--output-dir",
            str(out_dir),
            "--ncomp",
            "3",
            "--log-level",
            "WARNING",
        ],
        check=False,
        capture_output=True,
        text=True,
    )
    assert run.returncode == 0, run.stderr
    audit = subprocess.run(
        [sys.executable, "scripts/run_02_audit.py", "--output-dir", str(out_dir)],
        check=False,
        capture_output=True,
        text=True,
    )
    assert audit.returncode == 0, audit.stdout
    assert "QA: PASS" in audit.stdout


@pytest.mark.parametrize(
    ("script", "title"),
    [("scripts/run_01_bve.py", "Runbook 01"), ("scripts/run_02_audit.py", "Runbook 02")],
)
def test_cli_help(script: str, title: str) -> None:
    result = subprocess.run(
        [sys.executable, script, "--help"],
        check=False,
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0
    assert title in result.stdout


def test_git_metadata_outside_checkout(monkeypatch, workspace_tmp_dir: Path) -> None:
    def _no_git(*args, **kwargs):
        raise OSError("git not available")

    monkeypatch.setattr(meta.subprocess, "check_output", _no_git)
    assert meta.git_commit_and_dirty(workspace_tmp_dir) == ("UNKNOWN", True)


def test_library_versions_cover_stack() -> None:
    versions = meta.library_versions()
    assert set(versions) == {"python", "numpy", "pandas", "sklearn", "joblib"}
