from __future__ import annotations

from pathlib import Path
from uuid import uuid4
import shutil

import numpy as np
import pandas as pd
import pytest


def make_synthetic_regression(
    n_rows: int = 60, n_features: int = 50, seed: int = 7
) -> tuple[np.ndarray, np.ndarray]:
    rng = np.random.default_rng(seed)
    x = rng.normal(size=(n_rows, n_features))
    # Strong signal in the first five variables.
    beta = np.zeros(n_features)
    beta[:5] = [3.0, -3.0, 3.0, -3.0, 3.0]
    y = x @ beta + 0.2 * rng.normal(size=n_rows)
    return x, y


def make_synthetic_classes(
    n_per_class: int = 20, n_features: int = 40, seed: int = 11
) -> tuple[np.ndarray, np.ndarray]:
    rng = np.random.default_rng(seed)
    labels = np.repeat(np.array(["a", "b", "c"]), n_per_class)
    x = rng.normal(size=(labels.shape[0], n_features))
    shifts = {"a": (4.0, 0.0, 0.0), "b": (0.0, 4.0, 0.0), "c": (0.0, 0.0, 4.0)}
    for cls, shift in shifts.items():
        rows = labels == cls
        x[np.ix_(rows, [0, 1, 2])] += np.asarray(shift)
    return x, labels


@pytest.fixture()
def workspace_tmp_dir() -> Path:
    root = Path(".test_tmp") / str(uuid4())
    root.mkdir(parents=True, exist_ok=True)
    try:
        yield root
    finally:
        shutil.rmtree(root, ignore_errors=True)


@pytest.fixture()
def regression_data() -> tuple[np.ndarray, np.ndarray]:
    return make_synthetic_regression()


@pytest.fixture()
def classification_data() -> tuple[np.ndarray, np.ndarray]:
    return make_synthetic_classes()


@pytest.fixture()
def synthetic_regression_csv(workspace_tmp_dir: Path) -> Path:
    x, y = make_synthetic_regression(n_rows=50, n_features=20)
    df = pd.DataFrame(x, columns=[f"wl{i:03d}" for i in range(x.shape[1])])
    df["octane"] = y
    path = workspace_tmp_dir / "data" / "spectra.csv"
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    return path


@pytest.fixture()
def synthetic_classes_csv(workspace_tmp_dir: Path) -> Path:
    x, labels = make_synthetic_classes(n_per_class=15, n_features=16)
    df = pd.DataFrame(x, columns=[f"v{i}" for i in range(x.shape[1])])
    df["group"] = labels
    path = workspace_tmp_dir / "data" / "groups.csv"
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    return path
