from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pandas as pd

from bvepls.config import (
    DEFAULT_N_JOBS,
    DEFAULT_NCOMP,
    DEFAULT_RATIO,
    DEFAULT_VIP_THRESHOLD,
    EliminationPool,
)


@dataclass(frozen=True)
class EliminationConfig:
    ncomp: int = DEFAULT_NCOMP
    ratio: float = DEFAULT_RATIO
    vip_threshold: float = DEFAULT_VIP_THRESHOLD
    n_jobs: int = DEFAULT_N_JOBS
    pool: str = EliminationPool.ELIMINATED

    def __post_init__(self) -> None:
        if int(self.ncomp) < 1:
            raise ValueError(f"ncomp must be a positive integer, got {self.ncomp}")
        if not 0.0 < float(self.ratio) < 1.0:
            raise ValueError(f"ratio must lie in (0, 1), got {self.ratio}")
        if self.pool not in EliminationPool.ALL:
            raise ValueError(f"Unknown elimination pool: {self.pool}")

    def to_manifest_payload(self) -> dict[str, Any]:
        return {
            "ncomp": int(self.ncomp),
            "ratio": float(self.ratio),
            "vip_threshold": float(self.vip_threshold),
            "n_jobs": int(self.n_jobs),
            "pool": self.pool,
        }


@dataclass(frozen=True)
class Partition:
    calibration: np.ndarray
    holdout: np.ndarray

    @property
    def n_calibration(self) -> int:
        return int(self.calibration.shape[0])

    @property
    def n_holdout(self) -> int:
        return int(self.holdout.shape[0])


@dataclass
class PLSModel:
    estimator: Any
    x_mean: np.ndarray
    y_mean: np.ndarray
    n_components: int
    x_scores: np.ndarray


@dataclass(frozen=True)
class EliminationState:
    is_selected: np.ndarray
    working_columns: np.ndarray
    iteration: int = 0
    terminated: bool = False

    @property
    def n_working(self) -> int:
        return int(self.working_columns.shape[0])

    def surviving(self) -> np.ndarray:
        return np.flatnonzero(self.is_selected)


@dataclass(frozen=True)
class IterationRecord:
    iteration: int
    selected: tuple[int, ...]
    performance: float
    opt_comp: int
    n_working: int
    n_candidates: int


@dataclass(frozen=True)
class BVEResult:
    selection: np.ndarray
    best_iteration: int
    history: list[IterationRecord]
    mode: str
    partition: Partition
    feature_names: list[str] | None = field(default=None)

    def selected_names(self) -> list[str]:
        if self.feature_names is None:
            return [f"X{int(i)}" for i in self.selection.tolist()]
        return [self.feature_names[int(i)] for i in self.selection.tolist()]

    def history_frame(self) -> pd.DataFrame:
        rows = []
        for record in self.history:
            rows.append(
                {
                    "iteration": record.iteration,
                    "performance": record.performance,
                    "opt_comp": record.opt_comp,
                    "n_working": record.n_working,
                    "n_candidates": record.n_candidates,
                    "n_selected": len(record.selected),
                    "selected": " ".join(str(i) for i in record.selected),
                    "is_best": record.iteration == self.best_iteration,
                }
            )
        return pd.DataFrame(rows)
