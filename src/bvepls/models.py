from __future__ import annotations

import warnings

import numpy as np
from joblib import Parallel, delayed
from sklearn.cross_decomposition import PLSRegression
from sklearn.discriminant_analysis import LinearDiscriminantAnalysis
from sklearn.model_selection import LeaveOneOut

from bvepls.exceptions import ModelFitError
from bvepls.types import PLSModel


def _as_response_matrix(y: np.ndarray) -> np.ndarray:
    y = np.asarray(y, dtype=float)
    if y.ndim == 1:
        return y.reshape(-1, 1)
    return y


def make_pls(n_components: int) -> PLSRegression:
    # Centering only, no unit-variance scaling.
    return PLSRegression(n_components=int(n_components), scale=False, max_iter=1000)


def fit_pls(x: np.ndarray, y: np.ndarray, n_components: int) -> PLSModel:
    x = np.asarray(x, dtype=float)
    y_mat = _as_response_matrix(y)
    if n_components < 1:
        raise ModelFitError(f"PLS needs at least one component, got {n_components}")
    estimator = make_pls(n_components)
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", UserWarning)
            estimator.fit(x, y_mat)
    except (ValueError, np.linalg.LinAlgError) as exc:
        raise ModelFitError(
            f"PLS fit failed with {n_components} components on {x.shape}"
        ) from exc
    x_mean = x.mean(axis=0)
    w = estimator.x_weights_
    p = estimator.x_loadings_
    return PLSModel(
        estimator=estimator,
        x_mean=x_mean,
        y_mean=y_mat.mean(axis=0),
        n_components=int(n_components),
        x_scores=(x - x_mean) @ (w @ np.linalg.pinv(p.T @ w)),
    )


def pls_rotations(model: PLSModel, n_components: int) -> np.ndarray:
    w = model.estimator.x_weights_[:, :n_components]
    p = model.estimator.x_loadings_[:, :n_components]
    return w @ np.linalg.pinv(p.T @ w)


def pls_scores(model: PLSModel, x: np.ndarray, n_components: int | None = None) -> np.ndarray:
    k = model.n_components if n_components is None else int(n_components)
    xc = np.asarray(x, dtype=float) - model.x_mean
    return xc @ pls_rotations(model, k)


def pls_coefficients(model: PLSModel, n_components: int) -> np.ndarray:
    q = model.estimator.y_loadings_[:, :n_components]
    return pls_rotations(model, n_components) @ q.T


def predict_pls(model: PLSModel, x: np.ndarray, n_components: int | None = None) -> np.ndarray:
    k = model.n_components if n_components is None else int(n_components)
    xc = np.asarray(x, dtype=float) - model.x_mean
    return xc @ pls_coefficients(model, k) + model.y_mean


def _loo_residuals(
    x: np.ndarray, y: np.ndarray, train_idx: np.ndarray, test_idx: np.ndarray, max_comp: int
) -> np.ndarray:
    model = fit_pls(x[train_idx], y[train_idx], max_comp)
    out = np.empty(max_comp, dtype=float)
    for k in range(1, max_comp + 1):
        pred = predict_pls(model, x[test_idx], k)
        out[k - 1] = float(np.sum((y[test_idx] - pred) ** 2))
    return out


def loo_press(x: np.ndarray, y: np.ndarray, max_comp: int, n_jobs: int = 1) -> np.ndarray:
    x = np.asarray(x, dtype=float)
    y = _as_response_matrix(y)
    segments = list(LeaveOneOut().split(x))
    per_segment = Parallel(n_jobs=n_jobs)(
        delayed(_loo_residuals)(x, y, train_idx, test_idx, max_comp)
        for train_idx, test_idx in segments
    )
    return np.sum(np.vstack(per_segment), axis=0)


def _lda_predict(
    train_scores: np.ndarray, train_labels: np.ndarray, new_scores: np.ndarray
) -> np.ndarray:
    lda = LinearDiscriminantAnalysis()
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", UserWarning)
            lda.fit(train_scores, train_labels)
    except (ValueError, np.linalg.LinAlgError) as exc:
        raise ModelFitError("LDA on PLS scores failed") from exc
    return lda.predict(new_scores)


def lda_from_pls(
    model: PLSModel,
    train_labels: np.ndarray,
    x_new: np.ndarray,
    n_components: int,
) -> np.ndarray:
    # One column of predicted classes per component count 1..n_components.
    train_labels = np.asarray(train_labels)
    x_new = np.atleast_2d(np.asarray(x_new, dtype=float))
    train_scores = model.x_scores
    new_scores = pls_scores(model, x_new, n_components)
    out = np.empty((x_new.shape[0], n_components), dtype=train_labels.dtype)
    for k in range(1, n_components + 1):
        out[:, k - 1] = _lda_predict(
            train_scores[:, :k], train_labels, new_scores[:, :k]
        )
    return out


def _loo_classes(
    x: np.ndarray,
    y_dummy: np.ndarray,
    labels: np.ndarray,
    train_idx: np.ndarray,
    test_idx: np.ndarray,
    max_comp: int,
) -> np.ndarray:
    model = fit_pls(x[train_idx], y_dummy[train_idx], max_comp)
    return lda_from_pls(model, labels[train_idx], x[test_idx], max_comp)


def lda_from_pls_cv(
    x: np.ndarray,
    y_dummy: np.ndarray,
    labels: np.ndarray,
    max_comp: int,
    n_jobs: int = 1,
) -> np.ndarray:
    # Leave-one-out class predictions, shape (n, max_comp).
    x = np.asarray(x, dtype=float)
    y_dummy = _as_response_matrix(y_dummy)
    labels = np.asarray(labels)
    segments = list(LeaveOneOut().split(x))
    per_segment = Parallel(n_jobs=n_jobs)(
        delayed(_loo_classes)(x, y_dummy, labels, train_idx, test_idx, max_comp)
        for train_idx, test_idx in segments
    )
    out = np.empty((x.shape[0], max_comp), dtype=labels.dtype)
    for (_, test_idx), classes in zip(segments, per_segment):
        out[test_idx] = classes
    return out
