import sys
from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from bvepls.feature_select.vip import vip_scores  # noqa: E402
from bvepls.models import fit_pls  # noqa: E402
from bvepls.selection.engine import run_elimination  # noqa: E402

rng = np.random.default_rng(12)
n, p = 80, 60

# Response driven by the first 6 variables, the rest is noise.
X = rng.normal(size=(n, p))
beta = np.zeros(p)
beta[:6] = [3.0, -2.5, 2.0, 1.5, -1.0, 0.8]
y = X @ beta + 0.5 * rng.normal(size=n)

model = fit_pls(X, y, n_components=4)
vip = vip_scores(model, opt_comp=4)

result = run_elimination(X, y, ncomp=4, rng=7)
history = result.history_frame()

print("VIP >= 1:", np.flatnonzero(vip >= 1.0).tolist())
print("BVE selection:", result.selection.tolist())
print(history[["iteration", "performance", "opt_comp", "n_working", "n_selected"]])

fig, axes = plt.subplots(1, 3, figsize=(14, 4.5))
fig.suptitle("Backward Variable Elimination Demo", fontsize=13)

colors = ["tab:red" if b != 0 else "tab:gray" for b in beta]
axes[0].bar(np.arange(p), vip, color=colors)
axes[0].axhline(1.0, color="black", linestyle="--", linewidth=1)
axes[0].set_title("VIP on all variables (red = informative)")
axes[0].set_xlabel("variable")

axes[1].plot(history["iteration"], history["performance"], marker="o")
axes[1].axvline(result.best_iteration, color="tab:green", linestyle=":")
axes[1].set_title("Held-out RMSEP per iteration")
axes[1].set_xlabel("iteration")

axes[2].step(history["iteration"], history["n_selected"], where="post", label="surviving (mask)")
axes[2].step(history["iteration"], history["n_working"], where="post", label="working matrix")
axes[2].set_title("Variable counts")
axes[2].set_xlabel("iteration")
axes[2].legend()

fig.text(
    0.5,
    0.01,
    "The surviving set and the working matrix diverge after the first pruning step.",
    ha="center",
)
plt.tight_layout(rect=[0, 0.06, 1, 0.93])
plt.show()
