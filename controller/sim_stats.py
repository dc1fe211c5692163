# controller/sim_stats.py
from __future__ import annotations
from typing import Dict, List, Optional, Tuple

import numpy as np

from engineering.batch_means import calc_batch_means
from engineering.log import get_logger
from engineering.stats import descriptive
from model.entities import MINUTES_PER_DAY, Call
from model.simulation import Simulation, require_complete, resolve_target_response_times

log = get_logger(__name__)


def _require_all_answered(sim: Simulation) -> None:
    unanswered = [c.index for c in sim.calls if not c.answered]
    if unanswered:
        raise ValueError(f"{len(unanswered)} chiamate senza risposta (es. {unanswered[:5]})")


def get_call_response_times(sim: Simulation) -> List[float]:
    require_complete(sim)
    _require_all_answered(sim)
    return [c.response_time for c in sim.calls]


def get_avg_call_response_time(sim: Simulation, use_minutes: bool = False) -> float:
    times = get_call_response_times(sim)
    if not times:
        raise ValueError("nessuna chiamata nella simulazione")
    avg = float(np.mean(times))
    return avg * MINUTES_PER_DAY if use_minutes else avg


def _reached_in_time(call: Call, targets: List[float]) -> bool:
    if not (1 <= call.priority <= len(targets)):
        raise ValueError(f"priorità {call.priority} fuori tabella target (1..{len(targets)})")
    return call.response_time <= targets[call.priority - 1]


def get_calls_reached_in_time(sim: Simulation, target_response_times: Optional[List[float]] = None) -> List[bool]:
    """
    Per ogni chiamata: True se servita entro il target della sua priorità.
    Se target_response_times è None si usa la tabella della simulazione.
    """
    require_complete(sim)
    _require_all_answered(sim)
    targets = resolve_target_response_times(sim, target_response_times)
    return [_reached_in_time(c, targets) for c in sim.calls]


def count_calls_reached_in_time(sim: Simulation, target_response_times: Optional[List[float]] = None) -> int:
    return sum(get_calls_reached_in_time(sim, target_response_times))


def ambulance_travel_stats(sim: Simulation) -> Dict[str, float]:
    require_complete(sim)
    return descriptive([a.total_travel_time for a in sim.ambulances])


def call_response_stats(sim: Simulation) -> Tuple[Dict[str, float], int]:
    """
    Statistiche dei tempi di risposta delle sole chiamate servite;
    le chiamate senza risposta (run non finita o chiamata cancellata)
    sono escluse dalla distribuzione e contate a parte.
    """
    require_complete(sim)
    answered = [c.response_time for c in sim.calls if c.answered]
    return descriptive(answered), sim.num_calls - len(answered)


def calc_batch_mean_response_times(
    sim: Simulation,
    *,
    batch_time: float,
    warm_up_time: float = 0.0,
    cool_down_time: float = 0.0,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Medie di batch dei tempi di risposta, con batch indicizzati per istante
    di arrivo della chiamata. Finestra di misura:
    [sim.start_time + warm_up_time, sim.end_time - cool_down_time).

    Le chiamate senza risposta vengono scartate prima del batching:
    il tempo nullo non è una misura e non deve entrare nelle medie.
    """
    require_complete(sim)
    if warm_up_time < 0.0 or cool_down_time < 0.0:
        raise ValueError("warm_up_time e cool_down_time devono essere >= 0")

    answered = sim.answered_only().calls
    dropped = sim.num_calls - len(answered)
    if dropped:
        log.warning("batch means: scartate %d chiamate senza risposta su %d", dropped, sim.num_calls)
    if not answered:
        raise ValueError("nessuna chiamata servita: impossibile calcolare le medie di batch")

    start_time = sim.start_time + warm_up_time
    end_time = sim.end_time - cool_down_time
    if end_time < start_time:
        # warm-up + cool-down coprono tutta la run: nessun batch
        log.warning("finestra di misura vuota: start=%.4f end=%.4f", start_time, end_time)
        return np.array([], dtype=float), np.array([], dtype=int)

    times = [c.arrival_time for c in answered]
    values = [c.response_time for c in answered]
    return calc_batch_means(values, times, batch_time=batch_time, start_time=start_time, end_time=end_time)
