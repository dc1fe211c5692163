from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional
import yaml

"""
    Ponte tra il file .yaml di analisi e l'oggetto AnalysisConfig:
    parametri del batch-means (ampiezza batch, warm-up, cool-down),
    livello di confidenza e opzioni di reporting.
"""


@dataclass
class AnalysisConfig:
    batch_time: float                     # ampiezza di ciascun batch [giorni]
    warm_up_time: float = 0.0             # escluso all'inizio della run
    cool_down_time: float = 0.0           # escluso alla fine della run
    conf_level: float = 0.95
    use_minutes: bool = False             # report in minuti invece che in giorni
    target_response_times: Optional[List[float]] = None  # None -> tabella della simulazione
    name: str = "analysis"

    def __post_init__(self):
        if not (self.batch_time > 0.0):
            raise ValueError("batch_time deve essere > 0")
        if self.warm_up_time < 0.0 or self.cool_down_time < 0.0:
            raise ValueError("warm_up_time e cool_down_time devono essere >= 0")
        if not (0.0 < self.conf_level < 1.0):
            raise ValueError("conf_level deve essere in (0,1)")

    # Le chiavi del file .yaml DEVONO coincidere con i nomi degli attributi.
    @staticmethod
    def from_yaml(path: str) -> "AnalysisConfig":
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            raise ValueError(f"file di analisi non valido (atteso un mapping YAML): {path}")
        return AnalysisConfig(**data)
