from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from bvepls.common.logs import configure_logging
from bvepls.config import (
    DEFAULT_N_JOBS,
    DEFAULT_NCOMP,
    DEFAULT_RATIO,
    DEFAULT_SEED,
    DEFAULT_VIP_THRESHOLD,
    EliminationPool,
    ResponseModeName,
)
from bvepls.types import EliminationConfig
from bvepls.workflows.elimination import run_bve_workflow


def main() -> None:
    parser = argparse.ArgumentParser(description="Runbook 01: backward variable elimination (BVE-PLS)")
    parser.add_argument("--input", type=Path, required=True, help="CSV with predictors and response.")
    parser.add_argument("--response", required=True, help="Name of the response column.")
    parser.add_argument("--output-dir", type=Path, default=Path("."))
    parser.add_argument(
        "--mode",
        choices=ResponseModeName.ALL,
        default=None,
        help="Force regression or classification; inferred from the response dtype by default.",
    )
    parser.add_argument("--ncomp", type=int, default=DEFAULT_NCOMP)
    parser.add_argument("--ratio", type=float, default=DEFAULT_RATIO)
    parser.add_argument("--vip-threshold", type=float, default=DEFAULT_VIP_THRESHOLD)
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED)
    parser.add_argument("--n-jobs", type=int, default=DEFAULT_N_JOBS)
    parser.add_argument(
        "--pool",
        choices=EliminationPool.ALL,
        default=EliminationPool.ELIMINATED,
        help="Columns carried into the next iteration (default: the eliminated ones).",
    )
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--log-file", type=Path, default=None)
    args = parser.parse_args()

    configure_logging(args.log_level, args.log_file)
    config = EliminationConfig(
        ncomp=args.ncomp,
        ratio=args.ratio,
        vip_threshold=args.vip_threshold,
        n_jobs=args.n_jobs,
        pool=args.pool,
    )
    result = run_bve_workflow(
        input_path=args.input,
        output_dir=args.output_dir,
        response_column=args.response,
        project_root=PROJECT_ROOT,
        config=config,
        mode=args.mode,
        seed=args.seed,
    )
    print(" ".join(result.selected_names()))


if __name__ == "__main__":
    main()
