# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Command line entry point.

Usage
-----
python -m errorcontrol compare --size 100 --gap 10 --noise 0.003
python -m errorcontrol compare --block --gap 1 --gap 0.1 --plot residuals.png
"""

import argparse
import logging
import sys
from typing import List, Optional

from .comparison import (
    gapped_diagonal_problem,
    noisy_inverse_diagonal,
    results_table,
    run_block_methods,
    run_single_vector_methods,
)

logger = logging.getLogger("errorcontrol")


def _save_plot(results, path: str) -> None:
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    from .plot import plot_residual_history

    fig, ax = plt.subplots(figsize=(8, 5))
    for (name, precon), r in results.items():
        plot_residual_history(r, ax=ax, label=f"{name} ({precon})")
    ax.set_ylim(1e-8, 1e2)
    fig.savefig(path, bbox_inches="tight")
    plt.close(fig)
    logger.info("Saved residual histories to %s", path)


def _cmd_compare(args: argparse.Namespace) -> int:
    gaps = args.gap or ([10.0, 10.0] if args.block else [10.0])
    M = gapped_diagonal_problem(args.size, gaps, seed=args.seed)
    Pinv_noisy = noisy_inverse_diagonal(M, args.noise, seed=args.seed)

    if args.block:
        results = run_block_methods(
            M,
            k=2,
            Pinv_noisy=Pinv_noisy,
            tol=args.tol,
            maxiter=args.maxiter,
            seed=args.seed,
        )
    else:
        results = run_single_vector_methods(
            M,
            Pinv_noisy=Pinv_noisy,
            tol=args.tol,
            maxiter=args.maxiter,
            seed=args.seed,
        )

    print(results_table(results).to_markdown(index=False))
    if args.plot:
        _save_plot(results, args.plot)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(
        prog="errorcontrol", description="Eigensolver convergence studies."
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    sub = p.add_subparsers(dest="cmd", required=True)

    pc = sub.add_parser(
        "compare", help="Compare eigensolvers on a diagonal problem with gaps"
    )
    pc.add_argument("--size", type=int, default=100, help="Problem dimension")
    pc.add_argument(
        "--gap",
        type=float,
        action="append",
        help="Gap between consecutive low eigenvalues (repeatable)",
    )
    pc.add_argument(
        "--noise",
        type=float,
        default=10**-2.5,
        help="Noise level of the perturbed preconditioner",
    )
    pc.add_argument(
        "--block", action="store_true", help="Compare block methods (k = 2)"
    )
    pc.add_argument("--tol", type=float, default=1e-6)
    pc.add_argument("--maxiter", type=int, default=100)
    pc.add_argument("--seed", type=int, default=None)
    pc.add_argument("--plot", metavar="FILE", help="Save residual histories to FILE")
    pc.set_defaults(func=_cmd_compare)

    ns = p.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return int(ns.func(ns))


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
