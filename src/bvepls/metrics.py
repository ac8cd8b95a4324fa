from __future__ import annotations

import numpy as np


def first_argmin(values: np.ndarray) -> int:
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        raise ValueError("Cannot take argmin of an empty sequence")
    # np.argmin returns the first occurrence.
    return int(np.argmin(arr))


def first_argmax(values: np.ndarray) -> int:
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        raise ValueError("Cannot take argmax of an empty sequence")
    return int(np.argmax(arr))


def rmsep(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    # Residual norm, not divided by n.
    y_true = np.asarray(y_true, dtype=float).ravel()
    y_pred = np.asarray(y_pred, dtype=float).ravel()
    if y_true.shape != y_pred.shape:
        raise ValueError(f"Shape mismatch: {y_true.shape} vs {y_pred.shape}")
    return float(np.sqrt(np.sum((y_true - y_pred) ** 2)))


def correct_counts(predicted: np.ndarray, y_true: np.ndarray) -> np.ndarray:
    predicted = np.asarray(predicted)
    y_true = np.asarray(y_true).reshape(-1, 1)
    return np.sum(predicted == y_true, axis=0).astype(int)


def misclassification_percent(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    y_true = np.asarray(y_true)
    y_pred = np.asarray(y_pred)
    if y_true.shape[0] == 0:
        raise ValueError("No samples to score")
    accuracy = float(np.sum(y_true == y_pred)) / y_true.shape[0] * 100.0
    return 100.0 - accuracy
