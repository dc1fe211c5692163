# engineering/durbin_watson.py
"""
Test di Durbin-Watson per autocorrelazione a lag 1 nei residui di una regressione.

Usato sulle medie di batch: si adatta un modello AR(0) (costante = media
campionaria) e si verifica che i residui non siano ancora correlati.
Un p-value basso indica che batch_time va aumentato prima di trattare i
batch come campioni indipendenti.

Distribuzione sotto H0
----------------------
d = e'Ae / e'e con e = M u, M = I - X (X'X)^-1 X' e A la matrice delle
differenze prime. Gli autovalori non nulli di M A M determinano la
distribuzione di d:
  - "exact"  : inversione numerica di Imhof (integrale con scipy.quad)
  - "approx" : approssimazione normale con media e varianza esatte
  - "ndep"   : exact se n <= 100, altrimenti approx
"""
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np
from scipy import integrate
from scipy import stats as st

EXACT_MAX_N = 100


@dataclass(frozen=True)
class DurbinWatsonResult:
    statistic: float
    pvalue: float      # bilaterale
    method: str        # "exact" | "approx"
    n: int


def durbin_watson_statistic(residuals: Sequence[float]) -> float:
    e = np.asarray(residuals, dtype=float)
    ss = float(np.dot(e, e))
    if ss <= 0.0:
        raise ValueError("residui tutti nulli: statistica di Durbin-Watson non definita")
    de = np.diff(e)
    return float(np.dot(de, de)) / ss


def _difference_matrix(n: int) -> np.ndarray:
    # A = D'D, con D matrice (n-1) x n delle differenze prime
    D = np.diff(np.eye(n), axis=0)
    return D.T @ D


def _null_eigenvalues(design: np.ndarray) -> np.ndarray:
    n, k = design.shape
    M = np.eye(n) - design @ np.linalg.pinv(design)
    eig = np.linalg.eigvalsh(M @ _difference_matrix(n) @ M)
    # i k autovalori nulli corrispondono allo spazio colonne di X
    return np.sort(eig)[k:]


def _imhof_cdf(eigs: np.ndarray, d: float) -> float:
    """P(d_H0 <= d) = P(sum (lambda_j - d) z_j^2 <= 0), formula di Imhof."""
    mu = eigs - d
    mu = mu[np.abs(mu) > 1e-12]
    if mu.size == 0:
        return 0.5

    def integrand(u: float) -> float:
        if u == 0.0:
            return 0.5 * float(np.sum(mu))  # limite per u -> 0
        theta = 0.5 * np.sum(np.arctan(mu * u))
        rho = np.prod((1.0 + (mu * u) ** 2) ** 0.25)
        return math.sin(theta) / (u * rho)

    val, _ = integrate.quad(integrand, 0.0, np.inf, limit=200)
    return 0.5 - val / math.pi


def _normal_cdf(eigs: np.ndarray, d: float) -> float:
    m = eigs.size
    mean = float(np.sum(eigs)) / m
    var = 2.0 * float(np.sum((eigs - mean) ** 2)) / (m * (m + 2))
    if var <= 0.0:
        return 0.5
    return float(st.norm.cdf((d - mean) / math.sqrt(var)))


def durbin_watson_test(design, residuals: Sequence[float], p_compute: str = "ndep") -> DurbinWatsonResult:
    """
    Test di Durbin-Watson (bilaterale) per la matrice di design 'design'
    (n x k, oppure vettore di lunghezza n) e i residui del fit.
    """
    e = np.asarray(residuals, dtype=float)
    X = np.asarray(design, dtype=float)
    if X.ndim == 1:
        X = X.reshape(-1, 1)
    n = e.size
    if n < 2:
        raise ValueError("servono almeno 2 residui per il test di Durbin-Watson")
    if X.shape[0] != n:
        raise ValueError(f"design ha {X.shape[0]} righe, residui {n}")
    if X.shape[1] >= n:
        raise ValueError("troppi regressori rispetto al numero di osservazioni")

    d = durbin_watson_statistic(e)
    eigs = _null_eigenvalues(X)

    if p_compute == "ndep":
        p_compute = "exact" if n <= EXACT_MAX_N else "approx"
    if p_compute == "exact":
        p_left = _imhof_cdf(eigs, d)
    elif p_compute == "approx":
        p_left = _normal_cdf(eigs, d)
    else:
        raise ValueError(f"p_compute non supportato: {p_compute}")

    p_left = min(max(p_left, 0.0), 1.0)
    pvalue = min(1.0, 2.0 * min(p_left, 1.0 - p_left))
    return DurbinWatsonResult(statistic=d, pvalue=pvalue, method=p_compute, n=n)


def is_constant_series(x: Sequence[float]) -> bool:
    """
    True se tutti i valori coincidono a meno dell'arrotondamento: in quel caso
    i residui AR(0) sono solo rumore numerico e il test non è definito.
    """
    x = np.asarray(x, dtype=float)
    if x.size == 0:
        return True
    scale = float(np.max(np.abs(x)))
    return float(np.ptp(x)) <= 16.0 * np.finfo(float).eps * scale


def calc_ar0_durbin_watson_pvalue(x: Sequence[float]) -> float:
    """
    Adatta un modello AR(0) (costante = media di x) e ritorna il p-value del
    test di Durbin-Watson sui residui.

    Una serie costante non ha residui: solleva ValueError.
    """
    x = np.asarray(x, dtype=float)
    if x.ndim != 1 or x.size < 2:
        raise ValueError("servono almeno 2 valori (es. 2 medie di batch) per il test")
    if is_constant_series(x):
        raise ValueError("serie costante: residui tutti nulli, statistica di Durbin-Watson non definita")
    x_fit = np.full((x.size, 1), x.mean())
    residuals = x - x_fit[:, 0]
    return durbin_watson_test(x_fit, residuals).pvalue
