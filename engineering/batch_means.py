# engineering/batch_means.py
from __future__ import annotations
import math
from typing import Sequence, Tuple

import numpy as np

from engineering.log import get_logger
from model.entities import is_null_time

log = get_logger(__name__)


class EmptyBatchError(ValueError):
    """Un batch incluso nella finestra non contiene osservazioni (batch_time troppo piccolo)."""


def num_batches(batch_time: float, start_time: float, end_time: float) -> int:
    # numero di finestre intere [start + k*b, start + (k+1)*b) contenute in [start, end)
    return max(0, int(math.floor((end_time - start_time) / batch_time)))


def calc_batch_means(
    values: Sequence[float],
    times: Sequence[float],
    *,
    batch_time: float,
    start_time: float,
    end_time: float,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Medie per batch di 'values', con values[i] osservato all'istante times[i].

    I batch hanno durata batch_time e partono da start_time (incluso) fino a
    end_time (escluso); un'osservazione su un bordo start_time + k*batch_time
    appartiene al batch k. Warm-up e cool-down si escludono spostando
    start_time / end_time verso l'interno.

    Ritorna (batch_means, batch_counts), entrambi di lunghezza
    max(0, floor((end_time - start_time) / batch_time)); se la finestra non
    contiene neanche un batch ritorna due array vuoti.

    Solleva EmptyBatchError se un batch incluso resta vuoto.
    """
    if len(times) != len(values):
        raise ValueError(f"times e values hanno lunghezze diverse ({len(times)} != {len(values)})")
    if len(times) < 1:
        raise ValueError("serie vuota: serve almeno un'osservazione")
    if not (batch_time > 0.0):
        raise ValueError("batch_time deve essere > 0")
    if not (start_time >= 0.0):
        raise ValueError("start_time deve essere >= 0")
    if not (end_time >= start_time):
        raise ValueError("end_time deve essere >= start_time")

    vals = np.asarray(values, dtype=float)
    ts = np.asarray(times, dtype=float)
    if not np.all(np.isfinite(ts)):
        raise ValueError("times contiene valori non finiti")
    # il tempo nullo non è una misura: le chiamate non servite vanno filtrate prima
    bad = [i for i, v in enumerate(vals) if is_null_time(v) or not math.isfinite(v)]
    if bad:
        raise ValueError(f"values contiene tempi nulli o non finiti (indici {bad[:10]})")

    n_b = num_batches(batch_time, start_time, end_time)
    if n_b == 0:
        return np.array([], dtype=float), np.array([], dtype=int)

    totals = np.zeros(n_b, dtype=float)
    counts = np.zeros(n_b, dtype=int)
    idx = np.floor((ts - start_time) / batch_time).astype(int)
    # accumulo nell'ordine della serie (somme riproducibili)
    for i, k in enumerate(idx):
        if 0 <= k < n_b:
            totals[k] += vals[i]
            counts[k] += 1

    empty = np.flatnonzero(counts == 0)
    if empty.size:
        raise EmptyBatchError(
            f"{empty.size} batch vuoti su {n_b} (indici {empty[:10].tolist()}): "
            f"aumentare batch_time={batch_time} o rivedere la finestra [{start_time}, {end_time})"
        )

    excluded = len(vals) - int(counts.sum())
    log.debug("batch means: %d batch, %d osservazioni escluse dalla finestra", n_b, excluded)
    return totals / counts, counts
