from __future__ import annotations

import numpy as np
import pandas as pd

from bvepls.config import ResponseModeName


def parse_selected(value: object) -> list[int]:
    text = "" if value is None else str(value).strip()
    if not text or text.lower() == "nan":
        return []
    return [int(tok) for tok in text.split()]


def validate_elimination_artifacts(
    history_df: pd.DataFrame,
    selection_df: pd.DataFrame,
    mode: str,
    n_variables: int,
) -> None:
    if history_df.empty:
        raise ValueError("history: no iterations recorded")

    iterations = history_df["iteration"].astype(int).tolist()
    if iterations != list(range(len(iterations))):
        raise ValueError(f"history: iterations not consecutive from 0: {iterations}")

    snapshots = [parse_selected(v) for v in history_df["selected"].tolist()]
    sizes = [len(s) for s in snapshots]
    if any(b > a for a, b in zip(sizes, sizes[1:])):
        raise ValueError(f"history: surviving-set sizes increase: {sizes}")
    if sizes != history_df["n_selected"].astype(int).tolist():
        raise ValueError("history: n_selected does not match selected snapshot")
    for i, snap in enumerate(snapshots):
        if any(v < 0 or v >= n_variables for v in snap):
            raise ValueError(f"history: iteration {i} has indices outside [0, {n_variables})")
        if i > 0 and not set(snap).issubset(snapshots[i - 1]):
            raise ValueError(f"history: iteration {i} revives an eliminated variable")

    perf = history_df["performance"].astype(float).to_numpy()
    if not np.all(np.isfinite(perf)):
        raise ValueError("history: non-finite performance values")
    if np.any(perf < 0):
        raise ValueError("history: negative performance values")
    if mode == ResponseModeName.CLASSIFICATION and np.any(perf > 100.0):
        raise ValueError("history: misclassification percentage above 100")

    best = int(np.argmin(perf))
    is_best = history_df["is_best"].astype(str).str.lower() == "true"
    if not bool(is_best.iloc[best]):
        raise ValueError(f"history: is_best flag not on first minimum (iteration {best})")

    selected = selection_df["variable_index"].astype(int).tolist()
    if selected != snapshots[best]:
        raise ValueError("selection: does not match best-iteration snapshot")
