# controller/steady_state.py
from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import numpy as np

from controller.sim_stats import calc_batch_mean_response_times
from engineering.durbin_watson import calc_ar0_durbin_watson_pvalue, is_constant_series
from engineering.log import get_logger
from engineering.stats import aggregate_vals
from model.analysis_config import AnalysisConfig
from model.simulation import Simulation

log = get_logger(__name__)


def run_batch_means_analysis(
    sim: Simulation,
    cfg: AnalysisConfig,
    *,
    label: str = "",
    outdir: Optional[str | Path] = None,
) -> Tuple[Dict[str, Any], np.ndarray]:
    """
    Stima a regime del tempo di risposta medio (batch means):
    medie per batch, media delle medie con IC e p-value di Durbin-Watson
    sulle medie di batch (AR(0)).

    Ritorna (agg, batch_means): agg è la riga di sintesi, batch_means la
    serie per-batch (per grafici di convergenza).

    Il test non è applicabile con meno di 2 batch o con medie di batch
    tutte uguali: in quei casi dw_pvalue = nan.
    Se outdir è dato scrive il CSV per-batch e quello delle medie incrementali.
    """
    means, counts = calc_batch_mean_response_times(
        sim,
        batch_time=cfg.batch_time,
        warm_up_time=cfg.warm_up_time,
        cool_down_time=cfg.cool_down_time,
    )
    series = means.tolist()

    if len(series) < 2:
        log.warning("solo %d batch: test di Durbin-Watson non applicabile", len(series))
        pvalue = float("nan")
    elif is_constant_series(series):
        log.warning("medie di batch tutte uguali (%g): test di Durbin-Watson non applicabile", series[0])
        pvalue = float("nan")
    else:
        pvalue = calc_ar0_durbin_watson_pvalue(series)

    agg: Dict[str, Any] = {
        "scenario": label or cfg.name,
        "n_batches": len(series),
        "batch_time": cfg.batch_time,
        "calls_in_batches": int(counts.sum()),
    }
    agg.update(aggregate_vals("R_batches", series, conf_level=cfg.conf_level))
    agg["dw_pvalue"] = pvalue

    if outdir is not None and series:
        from view.csv_view import write_batches_csv, write_incremental_batches_csv
        write_batches_csv(Path(outdir) / f"batch_means_{slug(agg['scenario'])}.csv", series, counts.tolist())
        write_incremental_batches_csv(outdir, slug(agg["scenario"]), {"R_batches": series})

    return agg, means


def slug(s: str) -> str:
    s = s.lower()
    return "".join(ch if ch.isalnum() or ch in "-._" else "_" for ch in s).strip("_")
