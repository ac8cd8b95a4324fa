from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

from bvepls.config import ResponseModeName
from bvepls.cv import split_calibration_holdout, stratified_calibration_holdout, validate_partition
from bvepls.metrics import misclassification_percent, rmsep
from bvepls.models import fit_pls, lda_from_pls, predict_pls
from bvepls.selection.tuning import lda_optimal_components, press_optimal_components
from bvepls.types import PLSModel, Partition


class RegressionMode:
    name = ResponseModeName.REGRESSION

    def __init__(self, y: Any) -> None:
        y_arr = np.asarray(y, dtype=float)
        if y_arr.ndim == 2 and y_arr.shape[1] == 1:
            y_arr = y_arr.ravel()
        if y_arr.ndim != 1:
            raise ValueError(f"Regression response must be a vector, got shape {y_arr.shape}")
        self.response = y_arr

    @property
    def n_samples(self) -> int:
        return int(self.response.shape[0])

    def partition(self, ratio: float, rng: np.random.Generator) -> Partition:
        partition = split_calibration_holdout(self.n_samples, ratio, rng)
        validate_partition(partition)
        return partition

    def optimal_components(
        self, x_cal: np.ndarray, cal_idx: np.ndarray, max_comp: int, n_jobs: int = 1
    ) -> int:
        opt_comp, _press = press_optimal_components(
            x_cal, self.response[cal_idx], max_comp=max_comp, n_jobs=n_jobs
        )
        return opt_comp

    def holdout_performance(
        self,
        x_cal: np.ndarray,
        cal_idx: np.ndarray,
        x_test: np.ndarray,
        test_idx: np.ndarray,
        opt_comp: int,
    ) -> tuple[float, PLSModel]:
        model = fit_pls(x_cal, self.response[cal_idx], opt_comp)
        pred = predict_pls(model, x_test, opt_comp)
        return rmsep(self.response[test_idx], pred), model


class ClassificationMode:
    name = ResponseModeName.CLASSIFICATION

    def __init__(self, y: Any) -> None:
        cat = y if isinstance(y, pd.Categorical) else pd.Categorical(np.asarray(y).ravel())
        if np.any(cat.codes < 0):
            raise ValueError("Classification response contains missing labels")
        # Only observed classes take part in stratification and dummy coding.
        cat = cat.remove_unused_categories()
        self.classes = list(cat.categories)
        self.codes = np.asarray(cat.codes, dtype=int)
        self.dummies = pd.get_dummies(cat).to_numpy(dtype=float)

    @property
    def n_samples(self) -> int:
        return int(self.codes.shape[0])

    def partition(self, ratio: float, rng: np.random.Generator) -> Partition:
        class_codes = list(range(len(self.classes)))
        partition = stratified_calibration_holdout(self.codes, class_codes, ratio, rng)
        validate_partition(partition, labels=self.codes, classes=class_codes)
        return partition

    def optimal_components(
        self, x_cal: np.ndarray, cal_idx: np.ndarray, max_comp: int, n_jobs: int = 1
    ) -> int:
        opt_comp, _correct = lda_optimal_components(
            x_cal,
            self.dummies[cal_idx],
            self.codes[cal_idx],
            max_comp=max_comp,
            n_jobs=n_jobs,
        )
        return opt_comp

    def holdout_performance(
        self,
        x_cal: np.ndarray,
        cal_idx: np.ndarray,
        x_test: np.ndarray,
        test_idx: np.ndarray,
        opt_comp: int,
    ) -> tuple[float, PLSModel]:
        model = fit_pls(x_cal, self.dummies[cal_idx], opt_comp)
        classes = lda_from_pls(model, self.codes[cal_idx], x_test, opt_comp)[:, opt_comp - 1]
        return misclassification_percent(self.codes[test_idx], classes), model


ResponseMode = RegressionMode | ClassificationMode


def infer_mode_name(y: Any) -> str:
    if isinstance(y, pd.Categorical):
        return ResponseModeName.CLASSIFICATION
    dtype = getattr(y, "dtype", None)
    if dtype is None:
        dtype = np.asarray(y).dtype
    if isinstance(dtype, pd.CategoricalDtype):
        return ResponseModeName.CLASSIFICATION
    if pd.api.types.is_bool_dtype(dtype) or not pd.api.types.is_numeric_dtype(dtype):
        return ResponseModeName.CLASSIFICATION
    return ResponseModeName.REGRESSION


def resolve_mode(y: Any, mode: str | None = None) -> ResponseMode:
    name = infer_mode_name(y) if mode is None else mode
    if name == ResponseModeName.REGRESSION:
        return RegressionMode(y)
    if name == ResponseModeName.CLASSIFICATION:
        if isinstance(y, pd.Series):
            y = pd.Categorical(y)
        return ClassificationMode(y)
    raise ValueError(f"Unknown response mode: {name}")
