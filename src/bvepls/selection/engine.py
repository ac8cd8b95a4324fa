from __future__ import annotations

import logging
from typing import Any, Callable

import numpy as np
import pandas as pd

from bvepls.config import (
    DEFAULT_NCOMP,
    DEFAULT_RATIO,
    DEFAULT_VIP_THRESHOLD,
    EliminationPool,
)
from bvepls.cv import as_generator
from bvepls.exceptions import DegenerateWorkingMatrixError
from bvepls.feature_select.vip import vip_scores
from bvepls.metrics import first_argmin
from bvepls.selection.modes import ResponseMode, resolve_mode
from bvepls.selection.tuning import component_cap
from bvepls.types import (
    BVEResult,
    EliminationConfig,
    EliminationState,
    IterationRecord,
    PLSModel,
    Partition,
)

logger = logging.getLogger(__name__)

ImportanceScorer = Callable[[PLSModel, int], np.ndarray]


def initial_state(n_variables: int) -> EliminationState:
    return EliminationState(
        is_selected=np.ones(n_variables, dtype=bool),
        working_columns=np.arange(n_variables, dtype=int),
    )


def elimination_candidates(scores: np.ndarray, ncomp: int, threshold: float) -> np.ndarray:
    scores = np.asarray(scores, dtype=float)
    candidates = np.flatnonzero(scores < threshold)
    # Too few below threshold: take the ncomp lowest scores instead. The
    # all-below case falls back too, or the working matrix would never shrink.
    if candidates.shape[0] <= ncomp + 1 or candidates.shape[0] >= scores.shape[0]:
        candidates = np.argsort(scores, kind="stable")[:ncomp]
    return np.asarray(candidates, dtype=int)


def zero_variance_columns(x_cal: np.ndarray, x_test: np.ndarray) -> np.ndarray:
    x_cal = np.asarray(x_cal, dtype=float)
    x_test = np.asarray(x_test, dtype=float)
    # Exact constancy; np.var leaves rounding residue on values like 0.3.
    cal_zero = np.ptp(x_cal, axis=0) == 0 if x_cal.shape[0] > 0 else np.zeros(x_cal.shape[1], dtype=bool)
    test_zero = np.ptp(x_test, axis=0) == 0 if x_test.shape[0] > 0 else np.zeros(x_test.shape[1], dtype=bool)
    return np.flatnonzero(cal_zero | test_zero)


def _clear_mask_positions(
    is_selected: np.ndarray, candidates: np.ndarray, iteration: int
) -> np.ndarray:
    # Candidate positions index the current surviving list, not the working matrix.
    out = is_selected.copy()
    surviving = np.flatnonzero(out)
    in_range = candidates[candidates < surviving.shape[0]]
    n_ignored = int(candidates.shape[0] - in_range.shape[0])
    if n_ignored:
        logger.warning(
            "Iteration %d: %d elimination positions exceed the %d surviving variables and were ignored",
            iteration,
            n_ignored,
            surviving.shape[0],
        )
    out[surviving[in_range]] = False
    return out


def eliminate(
    state: EliminationState,
    scores: np.ndarray,
    performance: float,
    opt_comp: int,
    x: np.ndarray,
    partition: Partition,
    ncomp: int,
    vip_threshold: float,
    pool: str = EliminationPool.ELIMINATED,
) -> tuple[EliminationState, IterationRecord]:
    n_working = state.n_working
    if n_working <= ncomp + 1:
        record = IterationRecord(
            iteration=state.iteration,
            selected=tuple(int(i) for i in state.surviving().tolist()),
            performance=float(performance),
            opt_comp=int(opt_comp),
            n_working=n_working,
            n_candidates=0,
        )
        next_state = EliminationState(
            is_selected=state.is_selected.copy(),
            working_columns=state.working_columns.copy(),
            iteration=state.iteration + 1,
            terminated=True,
        )
        return next_state, record

    candidates = elimination_candidates(scores, ncomp=ncomp, threshold=vip_threshold)

    if pool == EliminationPool.ELIMINATED:
        is_selected = _clear_mask_positions(state.is_selected, candidates, state.iteration)
        working = state.working_columns[candidates]
    elif pool == EliminationPool.SURVIVING:
        is_selected = state.is_selected.copy()
        is_selected[state.working_columns[candidates]] = False
        keep = np.ones(n_working, dtype=bool)
        keep[candidates] = False
        working = state.working_columns[keep]
    else:
        raise ValueError(f"Unknown elimination pool: {pool}")

    record = IterationRecord(
        iteration=state.iteration,
        selected=tuple(int(i) for i in np.flatnonzero(is_selected).tolist()),
        performance=float(performance),
        opt_comp=int(opt_comp),
        n_working=n_working,
        n_candidates=int(candidates.shape[0]),
    )

    zero_var = zero_variance_columns(
        x[np.ix_(partition.calibration, working)],
        x[np.ix_(partition.holdout, working)],
    )
    if zero_var.shape[0] > 0:
        logger.debug(
            "Iteration %d: dropping %d zero-variance columns", state.iteration, zero_var.shape[0]
        )
        if pool == EliminationPool.SURVIVING:
            is_selected[working[zero_var]] = False
        working = np.delete(working, zero_var)

    next_state = EliminationState(
        is_selected=is_selected,
        working_columns=np.asarray(working, dtype=int),
        iteration=state.iteration + 1,
        terminated=working.shape[0] <= ncomp + 1,
    )
    return next_state, record


def run_iteration(
    state: EliminationState,
    mode: ResponseMode,
    x: np.ndarray,
    partition: Partition,
    config: EliminationConfig,
    importance: ImportanceScorer = vip_scores,
) -> tuple[EliminationState, IterationRecord]:
    n_working = state.n_working
    if n_working < 2:
        raise DegenerateWorkingMatrixError(
            f"Iteration {state.iteration}: {n_working} variables left, at least 2 are required"
        )
    x_cal = x[np.ix_(partition.calibration, state.working_columns)]
    x_test = x[np.ix_(partition.holdout, state.working_columns)]

    max_comp = component_cap(config.ncomp, n_working)
    opt_comp = mode.optimal_components(
        x_cal, partition.calibration, max_comp=max_comp, n_jobs=config.n_jobs
    )
    performance, model = mode.holdout_performance(
        x_cal, partition.calibration, x_test, partition.holdout, opt_comp
    )
    scores = np.asarray(importance(model, opt_comp), dtype=float)
    if scores.shape[0] != n_working:
        raise ValueError(
            f"Importance scorer returned {scores.shape[0]} scores for {n_working} variables"
        )

    next_state, record = eliminate(
        state,
        scores,
        performance=performance,
        opt_comp=opt_comp,
        x=x,
        partition=partition,
        ncomp=int(config.ncomp),
        vip_threshold=float(config.vip_threshold),
        pool=config.pool,
    )
    logger.info(
        "Iteration %d | working=%d | opt_comp=%d | performance=%.6g | candidates=%d | selected=%d",
        record.iteration,
        record.n_working,
        record.opt_comp,
        record.performance,
        record.n_candidates,
        len(record.selected),
    )
    return next_state, record


def select_best_iteration(history: list[IterationRecord]) -> IterationRecord:
    if not history:
        raise ValueError("Empty elimination history")
    best = first_argmin([record.performance for record in history])
    return history[best]


def _predictor_matrix(x: Any) -> tuple[np.ndarray, list[str] | None]:
    if isinstance(x, pd.DataFrame):
        return x.to_numpy(dtype=float), [str(c) for c in x.columns]
    arr = np.asarray(x, dtype=float)
    if arr.ndim != 2:
        raise ValueError(f"Predictor matrix must be 2-D, got shape {arr.shape}")
    return arr, None


def run_elimination(
    x: Any,
    y: Any,
    ncomp: int = DEFAULT_NCOMP,
    ratio: float = DEFAULT_RATIO,
    vip_threshold: float = DEFAULT_VIP_THRESHOLD,
    rng: np.random.Generator | int | None = None,
    mode: str | None = None,
    n_jobs: int = 1,
    importance: ImportanceScorer = vip_scores,
    pool: str = EliminationPool.ELIMINATED,
    config: EliminationConfig | None = None,
) -> BVEResult:
    if config is None:
        config = EliminationConfig(
            ncomp=int(ncomp),
            ratio=float(ratio),
            vip_threshold=float(vip_threshold),
            n_jobs=int(n_jobs),
            pool=pool,
        )
    x_arr, feature_names = _predictor_matrix(x)
    response = resolve_mode(y, mode)
    if response.n_samples != x_arr.shape[0]:
        raise ValueError(
            f"Row count mismatch between predictors ({x_arr.shape[0]}) and response ({response.n_samples})"
        )
    n_variables = x_arr.shape[1]
    if n_variables < 2:
        raise DegenerateWorkingMatrixError(f"At least 2 variables are required, got {n_variables}")

    partition = response.partition(config.ratio, as_generator(rng))
    logger.info(
        "Backward elimination (%s): n=%d p=%d calibration=%d holdout=%d ncomp=%d",
        response.name,
        x_arr.shape[0],
        n_variables,
        partition.n_calibration,
        partition.n_holdout,
        config.ncomp,
    )

    state = initial_state(n_variables)
    history: list[IterationRecord] = []
    while not state.terminated:
        state, record = run_iteration(
            state, response, x_arr, partition, config, importance=importance
        )
        history.append(record)

    best = select_best_iteration(history)
    logger.info(
        "Best iteration %d of %d: performance=%.6g with %d variables",
        best.iteration,
        len(history),
        best.performance,
        len(best.selected),
    )
    return BVEResult(
        selection=np.asarray(best.selected, dtype=int),
        best_iteration=best.iteration,
        history=history,
        mode=response.name,
        partition=partition,
        feature_names=feature_names,
    )


def bve_pls(
    y: Any,
    x: Any,
    ncomp: int = DEFAULT_NCOMP,
    ratio: float = DEFAULT_RATIO,
    vip_threshold: float = DEFAULT_VIP_THRESHOLD,
    rng: np.random.Generator | int | None = None,
) -> np.ndarray:
    result = run_elimination(
        x, y, ncomp=ncomp, ratio=ratio, vip_threshold=vip_threshold, rng=rng
    )
    return result.selection
