from __future__ import annotations
from dataclasses import dataclass

# Tempo "nullo": non ancora avvenuto / non applicabile (es. chiamata mai servita).
# I tempi validi sono sempre >= 0, quindi -1 è fuori dominio.
NULL_TIME: float = -1.0

# I tempi della simulazione sono in giorni
MINUTES_PER_DAY: float = 60.0 * 24.0


def is_null_time(t: float) -> bool:
    return t == NULL_TIME


@dataclass(frozen=True)
class Call:

    """
    Chiamata registrata durante la run di simulazione.

    Attributi
    ----------
    index : int
        Indice della chiamata (ordine di arrivo).
    arrival_time : float
        Istante di arrivo della chiamata [giorni].
    response_time : float
        Tempo di risposta (arrivo -> ambulanza sul posto) [giorni];
        NULL_TIME se la chiamata non è stata servita (cancellata, oppure
        la run è finita prima della risposta).
    priority : int
        Priorità della chiamata, 1-based: indicizza la tabella dei tempi
        di risposta target (priority=1 -> target_response_times[0]).
    """

    index: int
    arrival_time: float
    response_time: float = NULL_TIME
    priority: int = 1

    @property
    def answered(self) -> bool:
        return not is_null_time(self.response_time)


@dataclass(frozen=True)
class Ambulance:
    index: int
    total_travel_time: float = 0.0  # somma dei tempi di viaggio [giorni]
