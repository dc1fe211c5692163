from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional
import yaml

from model.entities import NULL_TIME, Ambulance, Call

"""
    Record (in sola lettura) di una run di simulazione già conclusa.

    Il motore di simulazione è esterno: qui arriva solo la traccia registrata
    (chiamate, ambulanze, estremi temporali) da cui calcolare le statistiche.
"""


@dataclass(frozen=True)
class Simulation:
    complete: bool
    start_time: float
    end_time: float
    calls: List[Call] = field(default_factory=list)
    ambulances: List[Ambulance] = field(default_factory=list)
    target_response_times: List[float] = field(default_factory=list)  # uno per priorità [giorni]

    @property
    def num_calls(self) -> int:
        return len(self.calls)

    def answered_only(self) -> "Simulation":
        # stessa run, senza le chiamate rimaste senza risposta
        return replace(self, calls=[c for c in self.calls if c.answered])

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Simulation":
        calls = []
        for i, c in enumerate(data.get("calls") or [], start=1):
            rt = c.get("response_time")
            calls.append(Call(
                index=int(c.get("index", i)),
                arrival_time=float(c["arrival_time"]),
                # null nello YAML -> chiamata non servita
                response_time=NULL_TIME if rt is None else float(rt),
                priority=int(c.get("priority", 1)),
            ))
        ambulances = [
            Ambulance(index=int(a.get("index", i)), total_travel_time=float(a.get("total_travel_time", 0.0)))
            for i, a in enumerate(data.get("ambulances") or [], start=1)
        ]
        return Simulation(
            complete=bool(data.get("complete", False)),
            start_time=float(data["start_time"]),
            end_time=float(data["end_time"]),
            calls=calls,
            ambulances=ambulances,
            target_response_times=[float(t) for t in data.get("target_response_times") or []],
        )

    # Legge la traccia .yaml di una run conclusa.
    @staticmethod
    def from_yaml(path: str) -> "Simulation":
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            raise ValueError(f"traccia di simulazione non valida: {path}")
        return Simulation.from_dict(data)


def require_complete(sim: Simulation) -> None:
    if not sim.complete:
        raise ValueError("la simulazione non è conclusa (sim.complete == False)")


def resolve_target_response_times(sim: Simulation, targets: Optional[List[float]] = None) -> List[float]:
    """
    Tabella dei target per priorità: se non passata esplicitamente si usa
    quella registrata nella simulazione.
    """
    table = list(sim.target_response_times if targets is None else targets)
    if not table:
        raise ValueError("nessun tempo di risposta target disponibile")
    return table
