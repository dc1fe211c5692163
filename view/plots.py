from __future__ import annotations
from pathlib import Path
from typing import Optional, Sequence

import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from engineering.stats import mean_error_rows, t_quantile


def mean_error_plot(x: Optional[Sequence[float]], y, conf_level: float = 0.95, *,
                    xlabel: str = "x", ylabel: str = "y", title: Optional[str] = None,
                    outfile: Optional[str | Path] = None):
    """
    Per ogni x[i] disegna la media di y[i, :] con IC bilaterale.
    Se x è None le righe vengono poste in x = 1..n.
    """
    y = np.asarray(y, dtype=float)
    if x is None:
        x = np.arange(1, y.shape[0] + 1)
    x = np.asarray(x, dtype=float)
    if len(x) != y.shape[0]:
        raise ValueError(f"x ha {len(x)} posizioni, y ha {y.shape[0]} righe")
    means, hws = mean_error_rows(y, conf_level)

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.errorbar(x, means, yerr=hws, fmt="_", markersize=12, capsize=5)
    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    if title:
        ax.set_title(title)
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    if outfile:
        fig.savefig(outfile, dpi=150)
        plt.close(fig)
        print(f"  [plot] {outfile}")
    return fig


def plot_batch_convergence(batch_means: Sequence[float], *, metric_name: str = "R", unit: str = "giorni",
                           conf_level: float = 0.95, title: Optional[str] = None,
                           outfile: Optional[str | Path] = None, color_main: str = "tab:blue"):
    arr = np.asarray(batch_means, dtype=float)
    n = len(arr)
    if n == 0:
        raise ValueError("nessuna media di batch da tracciare")
    indices = np.arange(1, n + 1)
    cum_means = np.cumsum(arr) / indices

    # semi-ampiezza IC sulla media cumulativa dei primi k batch
    cum_cis = np.zeros(n)
    for k in range(2, n + 1):
        sem = np.std(arr[:k], ddof=1) / np.sqrt(k)
        cum_cis[k - 1] = sem * t_quantile(k - 1, conf_level)

    fig, ax = plt.subplots(figsize=(10, 6))
    ax.scatter(indices, arr, color="gray", alpha=0.3, s=15, label=f"Single Batch {metric_name}")
    ax.plot(indices, cum_means, color=color_main, linewidth=2,
            label=rf"Cumulative Mean $\overline{{{metric_name}}}$")
    ax.fill_between(indices, cum_means - cum_cis, cum_means + cum_cis, color=color_main, alpha=0.2,
                    label=f"{int(round(conf_level * 100))}% CI")
    ax.set_title(title or f"Batch Means Convergence ({metric_name})")
    ax.set_xlabel("Number of Batches processed")
    ax.set_ylabel(f"{metric_name} [{unit}]")
    ax.grid(True, alpha=0.3)
    ax.legend()
    fig.tight_layout()
    if outfile:
        fig.savefig(outfile, dpi=150)
        plt.close(fig)
        print(f"  [plot] {outfile}")
    return fig
