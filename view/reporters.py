from __future__ import annotations
import math
from typing import Any, Dict

from controller.sim_stats import ambulance_travel_stats, call_response_stats
from model.entities import MINUTES_PER_DAY
from model.simulation import Simulation


def format_time(t: float) -> str:
    # giorni -> minuti, arrotondato a 2 decimali
    if math.isnan(t):
        return "n/a"
    return f"{round(t * MINUTES_PER_DAY, 2)} minutes"


def _print_descriptive(st: Dict[str, float]) -> None:
    print(f" mean = {format_time(st['mean'])}")
    print(f" std = {format_time(st['std'])}")
    print(f" min = {format_time(st['min'])}")
    print(f" max = {format_time(st['max'])}")


def print_ambs_stats(sim: Simulation) -> None:
    print("Ambulance statistics:")
    print("Travel time: ")
    _print_descriptive(ambulance_travel_stats(sim))


def print_calls_stats(sim: Simulation) -> None:
    st, n_unanswered = call_response_stats(sim)
    print("Call statistics:")
    print(f"Unanswered calls: {n_unanswered}")
    print("Response time: ")
    _print_descriptive(st)


def print_sim_stats(sim: Simulation) -> None:
    print_ambs_stats(sim)
    print()
    print_calls_stats(sim)


def print_batch_means_summary(agg: Dict[str, Any], *, use_minutes: bool = False) -> None:
    scale = MINUTES_PER_DAY if use_minutes else 1.0
    unit = "min" if use_minutes else "giorni"
    print(f"  ---- Sintesi batch-means: {agg['scenario']} ----")
    print(f"  batch={agg['n_batches']} (ampiezza {agg['batch_time']}, chiamate={agg['calls_in_batches']})")
    if agg["n_batches"] == 0:
        print("  [WARN] finestra troppo corta per un batch")
        return
    m = agg["R_batches_mean"] * scale
    lo = agg["R_batches_ci_low"] * scale
    hi = agg["R_batches_ci_high"] * scale
    print(f"  R̄={m:.4f} {unit}  CI=[{lo:.4f}, {hi:.4f}]")
    p = agg["dw_pvalue"]
    if math.isnan(p):
        print("  Durbin-Watson: n/a (meno di 2 batch)")
    else:
        print(f"  Durbin-Watson p-value={p:.4f}")
