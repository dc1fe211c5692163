# engineering/stats.py
from __future__ import annotations
import math
import statistics as stats
from typing import Dict, List, Sequence, Tuple

import numpy as np
from scipy import stats as st


def _check_conf(conf_level: float) -> None:
    if not (0.0 < conf_level < 1.0):
        raise ValueError("conf_level deve essere in (0,1)")


def t_quantile(dof: int, conf_level: float = 0.95) -> float:
    # t critico per IC bilaterale: quantile 1 - (1 - conf)/2 con dof = n - 1
    _check_conf(conf_level)
    if dof < 1:
        raise ValueError("servono almeno 2 campioni (dof >= 1)")
    return float(st.t.ppf(0.5 * (1.0 + conf_level), dof))


# Half-width t-Student: IC = mean ± HW
def halfwidth_t(vals: Sequence[float], conf_level: float = 0.95) -> float:
    n = len(vals)
    if n < 2:
        return float("nan")
    tcrit = t_quantile(n - 1, conf_level)
    # formula standard HW = t * s / sqrt(n)
    return tcrit * stats.stdev(vals) / math.sqrt(n)


def aggregate_vals(key: str, vals: List[float], conf_level: float = 0.95) -> Dict[str, float]:
    """
    Aggrega una lista di float in media, stdev e IC al livello di confidenza dato.
    Restituisce un dict con chiavi f"{key}_mean", f"{key}_stdev", f"{key}_ci_low", f"{key}_ci_high".
    """
    _check_conf(conf_level)
    clean = [float(v) for v in vals if isinstance(v, (int, float, np.number)) and not math.isnan(v)]
    if not clean:
        return {
            f"{key}_mean": float("nan"),
            f"{key}_stdev": 0.0,
            f"{key}_ci_low": float("nan"),
            f"{key}_ci_high": float("nan"),
        }
    m = stats.mean(clean)
    s = stats.stdev(clean) if len(clean) > 1 else 0.0
    h = halfwidth_t(clean, conf_level)
    return {
        f"{key}_mean": m,
        f"{key}_stdev": s,
        f"{key}_ci_low": (m - h) if not math.isnan(h) else float("nan"),
        f"{key}_ci_high": (m + h) if not math.isnan(h) else float("nan"),
    }


def sem_rows(y) -> np.ndarray:
    """Errore standard della media per ciascuna riga di y (repliche sulle colonne)."""
    y = np.asarray(y, dtype=float)
    if y.ndim != 2:
        raise ValueError("y deve essere una tabella 2-D (posizioni x repliche)")
    if y.shape[1] < 2:
        raise ValueError("servono almeno 2 repliche per riga")
    return y.std(axis=1, ddof=1) / math.sqrt(y.shape[1])


def mean_error(values: Sequence[float], conf_level: float = 0.95) -> Tuple[float, float]:
    """
    Media di una singola serie e semi-ampiezza dell'IC bilaterale
    (valori assunti normali con varianza ignota).
    """
    _check_conf(conf_level)
    x = np.asarray(values, dtype=float)
    if x.ndim != 1 or x.size < 2:
        raise ValueError("servono almeno 2 repliche")
    return float(x.mean()), halfwidth_t(x.tolist(), conf_level)


def mean_error_rows(y, conf_level: float = 0.95) -> Tuple[np.ndarray, np.ndarray]:
    """
    Per ogni riga y[i, :] (repliche indipendenti nella posizione i):
    media e semi-ampiezza t * sem dell'IC bilaterale al livello conf_level.
    """
    _check_conf(conf_level)
    y = np.asarray(y, dtype=float)
    sem = sem_rows(y)
    t = t_quantile(y.shape[1] - 1, conf_level)
    return y.mean(axis=1), t * sem


def descriptive(vals: Sequence[float]) -> Dict[str, float]:
    # mean / std campionaria / min / max; nan se non calcolabili
    x = np.asarray(vals, dtype=float)
    n = int(x.size)
    if n == 0:
        nan = float("nan")
        return {"n": 0, "mean": nan, "std": nan, "min": nan, "max": nan}
    return {
        "n": n,
        "mean": float(x.mean()),
        "std": float(x.std(ddof=1)) if n > 1 else float("nan"),
        "min": float(x.min()),
        "max": float(x.max()),
    }
