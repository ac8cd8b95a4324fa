from __future__ import annotations

import numpy as np

from bvepls.exceptions import InvalidPartitionError
from bvepls.types import Partition


def as_generator(rng: np.random.Generator | int | None) -> np.random.Generator:
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def _complement(n: int, calibration: np.ndarray) -> np.ndarray:
    mask = np.ones(n, dtype=bool)
    mask[calibration] = False
    return np.flatnonzero(mask)


def split_calibration_holdout(
    n: int, ratio: float, rng: np.random.Generator
) -> Partition:
    n_cal = int(np.floor(n * ratio))
    order = rng.permutation(n)
    calibration = np.asarray(order[:n_cal], dtype=int)
    return Partition(calibration=calibration, holdout=_complement(n, calibration))


def stratified_calibration_holdout(
    labels: np.ndarray,
    classes: list,
    ratio: float,
    rng: np.random.Generator,
) -> Partition:
    labels = np.asarray(labels, dtype=object)
    parts: list[np.ndarray] = []
    for cls in classes:
        members = rng.permutation(np.flatnonzero(labels == cls))
        n_cal = int(np.floor(members.shape[0] * ratio))
        parts.append(np.asarray(members[:n_cal], dtype=int))
    calibration = np.concatenate(parts) if parts else np.array([], dtype=int)
    return Partition(
        calibration=calibration,
        holdout=_complement(labels.shape[0], calibration),
    )


def validate_partition(
    partition: Partition,
    labels: np.ndarray | None = None,
    classes: list | None = None,
) -> None:
    if partition.n_calibration == 0 or partition.n_holdout == 0:
        raise InvalidPartitionError(
            f"Empty split: calibration={partition.n_calibration} holdout={partition.n_holdout}"
        )
    if labels is None or classes is None:
        return
    labels = np.asarray(labels, dtype=object)
    cal_labels = labels[partition.calibration]
    hold_labels = labels[partition.holdout]
    for cls in classes:
        n_cal = int(np.sum(cal_labels == cls))
        n_hold = int(np.sum(hold_labels == cls))
        if n_cal == 0 or n_hold == 0:
            raise InvalidPartitionError(
                f"Class {cls!r} missing from a split: calibration={n_cal} holdout={n_hold}"
            )
