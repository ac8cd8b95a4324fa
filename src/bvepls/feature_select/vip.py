from __future__ import annotations

import numpy as np

from bvepls.types import PLSModel


def vip_scores(model: PLSModel, opt_comp: int) -> np.ndarray:
    # VIP_j = sqrt(p * sum_a SS_a * (w_ja / ||w_a||)^2 / sum_a SS_a); SS_a summed over responses.
    k = int(opt_comp)
    w = np.asarray(model.estimator.x_weights_, dtype=float)[:, :k]
    q = np.asarray(model.estimator.y_loadings_, dtype=float)[:, :k]
    t = np.asarray(model.x_scores, dtype=float)[:, :k]
    p = w.shape[0]

    ss = np.sum(q**2, axis=0) * np.sum(t**2, axis=0)
    total = float(np.sum(ss))
    if total <= 0 or not np.isfinite(total):
        return np.zeros(p, dtype=float)

    w_norm2 = np.sum(w**2, axis=0)
    w_norm2[w_norm2 <= 0] = 1.0
    ww = w**2 / w_norm2
    return np.sqrt(p * (ww @ ss) / total)
