from __future__ import annotations

import subprocess
import sys
from pathlib import Path

UNKNOWN_COMMIT = "UNKNOWN"


def _git(project_root: Path, *args: str) -> str:
    return subprocess.check_output(
        ["git", *args], cwd=project_root, text=True, stderr=subprocess.DEVNULL
    ).strip()


def git_commit_and_dirty(project_root: Path) -> tuple[str, bool]:
    # Outside a checkout the run is recorded as unknown and dirty.
    try:
        commit = _git(project_root, "rev-parse", "HEAD")
        status = _git(project_root, "status", "--porcelain")
    except (OSError, subprocess.CalledProcessError):
        return UNKNOWN_COMMIT, True
    return commit, bool(status)


def library_versions() -> dict[str, str]:
    import joblib
    import numpy
    import pandas
    import sklearn

    versions = {"python": sys.version.split()[0]}
    for module in (numpy, pandas, sklearn, joblib):
        versions[module.__name__] = module.__version__
    return versions
