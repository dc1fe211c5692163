# controller/replications.py
from __future__ import annotations
from typing import Any, Dict, List, Sequence

import numpy as np

from controller.sim_stats import call_response_stats
from engineering.stats import mean_error_rows
from model.entities import MINUTES_PER_DAY
from model.simulation import Simulation

CONF_LEVEL = 0.95


def replication_table(runs_by_scenario: Dict[str, Sequence[Simulation]], *, use_minutes: bool = False) -> np.ndarray:
    """
    Tabella (scenari x repliche) del tempo di risposta medio per run.
    Tutti gli scenari devono avere lo stesso numero di repliche.
    """
    sizes = {len(runs) for runs in runs_by_scenario.values()}
    if len(sizes) != 1:
        raise ValueError(f"numero di repliche diverso tra scenari: {sorted(sizes)}")
    scale = MINUTES_PER_DAY if use_minutes else 1.0
    rows = []
    for name, runs in runs_by_scenario.items():
        row = []
        for sim in runs:
            st, _ = call_response_stats(sim)
            if st["n"] == 0:
                raise ValueError(f"scenario '{name}': replica senza chiamate servite")
            row.append(st["mean"] * scale)
        rows.append(row)
    return np.asarray(rows, dtype=float)


def run_experiment_replications(
    runs_by_scenario: Dict[str, Sequence[Simulation]],
    *,
    conf_level: float = CONF_LEVEL,
    use_minutes: bool = False,
) -> List[Dict[str, Any]]:
    """
    Metodo delle repliche: per ogni scenario media del tempo di risposta
    sulle repliche indipendenti con IC bilaterale t-Student.
    """
    y = replication_table(runs_by_scenario, use_minutes=use_minutes)
    means, hws = mean_error_rows(y, conf_level)
    out: List[Dict[str, Any]] = []
    for name, m, h in zip(runs_by_scenario.keys(), means, hws):
        out.append({
            "scenario": name,
            "n_reps": y.shape[1],
            "R_mean": float(m),
            "R_hw": float(h),
            "R_ci_low": float(m - h),
            "R_ci_high": float(m + h),
        })
    return out
