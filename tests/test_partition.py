from __future__ import annotations

import numpy as np
import pytest

from bvepls.cv import (
    split_calibration_holdout,
    stratified_calibration_holdout,
    validate_partition,
)
from bvepls.exceptions import InvalidPartitionError
from bvepls.selection.modes import ClassificationMode, RegressionMode
from bvepls.types import Partition


def test_regression_split_sizes_and_cover() -> None:
    part = split_calibration_holdout(60, 0.75, np.random.default_rng(0))
    assert part.n_calibration == 45
    assert part.n_holdout == 15
    assert set(part.calibration).isdisjoint(part.holdout)
    assert sorted(np.concatenate([part.calibration, part.holdout]).tolist()) == list(range(60))
    assert np.all(np.diff(part.holdout) > 0)


def test_regression_split_floor() -> None:
    part = split_calibration_holdout(10, 0.75, np.random.default_rng(1))
    assert part.n_calibration == 7
    assert part.n_holdout == 3


def test_split_is_deterministic_for_seed() -> None:
    a = split_calibration_holdout(40, 0.6, np.random.default_rng(123))
    b = split_calibration_holdout(40, 0.6, np.random.default_rng(123))
    assert np.array_equal(a.calibration, b.calibration)
    assert np.array_equal(a.holdout, b.holdout)


def test_stratified_split_per_class_floor(classification_data) -> None:
    _x, labels = classification_data
    classes = ["a", "b", "c"]
    part = stratified_calibration_holdout(labels, classes, 0.75, np.random.default_rng(5))
    for cls in classes:
        assert int(np.sum(labels[part.calibration] == cls)) == 15
        assert int(np.sum(labels[part.holdout] == cls)) == 5
    validate_partition(part, labels=labels, classes=classes)


def test_stratified_split_uneven_classes() -> None:
    labels = np.array(["x"] * 9 + ["y"] * 4)
    part = stratified_calibration_holdout(labels, ["x", "y"], 0.5, np.random.default_rng(2))
    assert int(np.sum(labels[part.calibration] == "x")) == 4
    assert int(np.sum(labels[part.calibration] == "y")) == 2
    assert part.n_calibration + part.n_holdout == labels.shape[0]


def test_empty_holdout_is_invalid() -> None:
    part = Partition(calibration=np.arange(5), holdout=np.array([], dtype=int))
    with pytest.raises(InvalidPartitionError):
        validate_partition(part)


def test_missing_class_in_holdout_is_invalid() -> None:
    labels = np.array(["a", "a", "a", "a", "b"])
    mode = ClassificationMode(labels)
    # A single "b" sample cannot land in both splits.
    with pytest.raises(InvalidPartitionError):
        mode.partition(0.75, np.random.default_rng(0))


def test_regression_mode_partition_rejects_tiny_ratio() -> None:
    mode = RegressionMode(np.arange(4, dtype=float))
    with pytest.raises(InvalidPartitionError):
        mode.partition(0.1, np.random.default_rng(0))


def test_invalid_partition_is_a_value_error() -> None:
    assert issubclass(InvalidPartitionError, ValueError)
