# main.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, List

from controller.replications import run_experiment_replications
from controller.sim_stats import count_calls_reached_in_time
from controller.steady_state import run_batch_means_analysis, slug
from model.analysis_config import AnalysisConfig
from model.simulation import Simulation
from view.csv_view import write_csv_row
from view.reporters import print_batch_means_summary, print_sim_stats

DEFAULT_CONFIG = "config/analysis.yaml"
DEFAULT_OUTDIR = "out"


def run_single(sim_path: str, cfg: AnalysisConfig, outdir: Path, plots: bool = False) -> None:
    """
    Analisi di una singola run conclusa:
      - statistiche ambulanze / chiamate
      - chiamate servite entro il target per priorità
      - batch means del tempo di risposta + Durbin-Watson
      - riga di sintesi in out/summary.csv
    """
    sim = Simulation.from_yaml(sim_path)
    label = f"{cfg.name}:{Path(sim_path).stem}"
    print(f"[INFO] analisi run | {sim_path} | chiamate={sim.num_calls}")

    print_sim_stats(sim)
    print()

    served = sim.answered_only()
    if served.num_calls:
        n_ok = count_calls_reached_in_time(served, cfg.target_response_times)
        print(f"Calls reached in time: {n_ok}/{served.num_calls} ({100.0 * n_ok / served.num_calls:.1f}%)")
        print()

    agg, means = run_batch_means_analysis(sim, cfg, label=label, outdir=outdir)
    print_batch_means_summary(agg, use_minutes=cfg.use_minutes)
    write_csv_row(outdir / "summary.csv", agg, header_if_new=True)

    if plots and agg["n_batches"] > 0:
        from view.plots import plot_batch_convergence
        plot_batch_convergence(means, conf_level=cfg.conf_level, title=f"Batch Means Convergence (R) — {label}",
                               outfile=outdir / f"BM_R_convergence_{slug(label)}.png")


def run_replications(root: str, cfg: AnalysisConfig, outdir: Path, plots: bool = False) -> None:
    """Ogni sottocartella di root è uno scenario, ogni .yaml al suo interno una replica."""
    runs: Dict[str, List[Simulation]] = {}
    for scen_dir in sorted(p for p in Path(root).iterdir() if p.is_dir()):
        files = sorted(scen_dir.glob("*.y*ml"))
        if files:
            runs[scen_dir.name] = [Simulation.from_yaml(str(f)) for f in files]
    if not runs:
        print(f"[WARN] Nessuno scenario trovato in '{root}'.")
        return

    rows = run_experiment_replications(runs, conf_level=cfg.conf_level, use_minutes=cfg.use_minutes)
    for r in rows:
        print(f"[REP] {r['scenario']}: R={r['R_mean']:.4f} ± {r['R_hw']:.4f} (n={r['n_reps']})")
        write_csv_row(outdir / "replications.csv", r, header_if_new=True)

    if plots:
        from controller.replications import replication_table
        from view.plots import mean_error_plot
        y = replication_table(runs, use_minutes=cfg.use_minutes)
        mean_error_plot(None, y, cfg.conf_level, xlabel="scenario", ylabel="R medio",
                        title="Tempo di risposta per scenario", outfile=outdir / "replications.png")


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Statistiche post-run della simulazione di dispatch ambulanze")
    parser.add_argument("--sim", nargs="*", default=[], help="tracce .yaml di run concluse")
    parser.add_argument("--replications", default=None, help="cartella con una sottocartella per scenario")
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="file .yaml dei parametri di analisi")
    parser.add_argument("--outdir", default=DEFAULT_OUTDIR)
    parser.add_argument("--plots", action="store_true", help="salva i grafici PNG")
    args = parser.parse_args(argv)

    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)
    try:
        cfg = AnalysisConfig.from_yaml(args.config)
        for path in args.sim:
            run_single(path, cfg, outdir, plots=args.plots)
        if args.replications:
            run_replications(args.replications, cfg, outdir, plots=args.plots)
    except ValueError as e:
        print(f"[ERRORE] {e}")
        return 1
    if not args.sim and not args.replications:
        print("[WARN] niente da analizzare: usare --sim o --replications")
    return 0


if __name__ == "__main__":
    sys.exit(main())
