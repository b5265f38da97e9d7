# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Plotting helpers for convergence histories, Galerkin eigenvalue tables and
eigenvalue error bounds.
"""

from typing import Optional, Sequence

import matplotlib.patches as patches
import matplotlib.pyplot as plt
import numpy as np

from .bounds import bauer_fike_bounds, gershgorin_discs, kato_temple_bounds


def plot_residual_history(
    result,
    ax=None,
    expected_rate: Optional[float] = None,
    label: Optional[str] = None,
    **kwargs,
):
    """
    Semilog plot of the residual norms of an EigenpairResult or
    SubspaceResult, one line per column for block results.

    Parameters
    ----------
    result : EigenpairResult or SubspaceResult
    ax : matplotlib.axes.Axes, optional
        Axes to draw on, by default the current axes.
    expected_rate : float, optional
        If given, also draw r₀ · rateⁱ as a dashed line.
    label : str, optional
        Legend label; block columns get a "λ_j" suffix.
    **kwargs
        Passed to ``ax.semilogy``.

    Returns
    -------
    ax : matplotlib.axes.Axes
    """
    if ax is None:
        ax = plt.gca()

    history = np.asarray(result.residual_history)
    its = np.arange(1, history.shape[0] + 1)
    if history.ndim == 1:
        ax.semilogy(its, history, marker="x", label=label, **kwargs)
        start = history[0]
    else:
        for j in range(history.shape[1]):
            col_label = None if label is None else f"{label} λ{j + 1}"
            ax.semilogy(its, history[:, j], marker="x", label=col_label, **kwargs)
        start = np.max(history[0])

    if expected_rate is not None:
        ax.semilogy(
            its,
            start * expected_rate ** (its - 1),
            linestyle="--",
            color="k",
            label="expected rate",
        )

    ax.set_xlabel("iteration")
    ax.set_ylabel("residual norm")
    if label is not None or expected_rate is not None:
        ax.legend()
    return ax


def plot_galerkin_eigenvalues(
    sizes: Sequence[int],
    table: np.ndarray,
    reference: Optional[Sequence[float]] = None,
    ax=None,
):
    """
    Plot each Galerkin eigenvalue against the basis size. NaN padding is
    skipped. Reference eigenvalues are drawn as horizontal lines.
    """
    if ax is None:
        ax = plt.gca()

    sizes = np.asarray(sizes)
    table = np.asarray(table)
    if table.shape[1] != sizes.size:
        raise ValueError("table must have one column per basis size.")

    for i in range(table.shape[0]):
        row = table[i]
        mask = ~np.isnan(row)
        color = "C0" if np.nanmin(row) < 0 else "C1"
        ax.plot(sizes[mask], row[mask], marker="x", linewidth=0.5, color=color)

    if reference is not None:
        for lam in reference:
            ax.axhline(lam, color="k", linestyle=":", linewidth=0.8)

    ax.set_xlabel("basis size")
    ax.set_ylabel("eigenvalue")
    return ax


def plot_error_bounds(A, eigenvalues, eigenvectors, ax=None):
    """
    Draw the Gershgorin discs of A together with Bauer-Fike and
    Kato-Temple circles around the approximate eigenvalues in the complex
    plane.
    """
    if ax is None:
        ax = plt.gca()

    A = np.asarray(A)
    lam = np.asarray(eigenvalues, dtype=float)
    order = np.argsort(lam)
    lam = lam[order]
    X = np.asarray(eigenvectors)[:, order]

    centres, radii = gershgorin_discs(A)
    for c, r in zip(centres, radii):
        ax.add_patch(
            patches.Circle(
                (np.real(c), np.imag(c)), r, fill=False, color="C2", alpha=0.6
            )
        )

    bf = bauer_fike_bounds(A, lam, X)
    kt = kato_temple_bounds(lam, bf)
    for li, rb, rk in zip(lam, bf, kt):
        ax.add_patch(patches.Circle((li, 0.0), rb, fill=False, color="C0"))
        if np.isfinite(rk):
            ax.add_patch(patches.Circle((li, 0.0), rk, fill=False, color="C3"))
    ax.plot(lam, np.zeros_like(lam), "kx")

    ax.legend(
        handles=[
            patches.Patch(color="C2", label="Gershgorin"),
            patches.Patch(color="C0", label="Bauer-Fike"),
            patches.Patch(color="C3", label="Kato-Temple"),
        ]
    )
    ax.set_aspect("equal")
    ax.autoscale_view()
    ax.set_xlabel("Re")
    ax.set_ylabel("Im")
    return ax
