from __future__ import annotations

import numpy as np

from bvepls.metrics import correct_counts, first_argmax, first_argmin
from bvepls.models import lda_from_pls_cv, loo_press


def component_cap(ncomp: int, n_working: int) -> int:
    return int(min(int(ncomp), int(n_working) - 1))


def press_optimal_components(
    x_cal: np.ndarray,
    y_cal: np.ndarray,
    max_comp: int,
    n_jobs: int = 1,
) -> tuple[int, np.ndarray]:
    press = loo_press(x_cal, y_cal, max_comp=max_comp, n_jobs=n_jobs)
    return first_argmin(press) + 1, press


def lda_optimal_components(
    x_cal: np.ndarray,
    y_dummy: np.ndarray,
    labels: np.ndarray,
    max_comp: int,
    n_jobs: int = 1,
) -> tuple[int, np.ndarray]:
    classes = lda_from_pls_cv(x_cal, y_dummy, labels, max_comp=max_comp, n_jobs=n_jobs)
    correct = correct_counts(classes, labels)
    return first_argmax(correct) + 1, correct
