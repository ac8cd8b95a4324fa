from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from bvepls.config import ResponseModeName


@dataclass(frozen=True)
class LoadedDataset:
    x: pd.DataFrame
    y: pd.Series
    feature_columns: list[str]


def load_dataset(
    path: Path,
    response_column: str,
    mode: str | None = None,
) -> LoadedDataset:
    if not path.exists():
        raise FileNotFoundError(f"Missing data file: {path}")

    df = pd.read_csv(path)
    if response_column not in df.columns:
        raise ValueError(f"Response column {response_column!r} not found in {path}")

    feature_columns = [c for c in df.columns if c != response_column]
    non_numeric = [c for c in feature_columns if not pd.api.types.is_numeric_dtype(df[c])]
    if non_numeric:
        raise ValueError(f"Non-numeric predictor columns: {non_numeric}")
    if df[feature_columns].isna().any().any():
        raise ValueError("Predictor matrix contains missing values")

    y = df[response_column]
    if mode == ResponseModeName.CLASSIFICATION:
        y = y.astype("category")
    elif mode == ResponseModeName.REGRESSION:
        y = y.astype(float)
    elif mode is not None:
        raise ValueError(f"Unknown response mode: {mode}")
    return LoadedDataset(x=df[feature_columns], y=y, feature_columns=feature_columns)

