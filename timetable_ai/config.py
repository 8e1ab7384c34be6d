"""
Configuración del algoritmo genético.

Incluye un cargador desde YAML para dejar los parámetros reproducibles y
configurables sin tocar el código.
"""
from dataclasses import dataclass, field, asdict
from numbers import Real
from pathlib import Path
from typing import Any, Dict, List, Optional
import random

import yaml

from .grid import DEFAULT_DAYS, DEFAULT_LUNCH_SLOT, DEFAULT_TIME_SLOTS, SlotGrid
from .model import InvalidInput


@dataclass
class GAConfig:
    # Tiempo
    days: List[str] = field(default_factory=lambda: list(DEFAULT_DAYS))
    time_slots: List[str] = field(default_factory=lambda: list(DEFAULT_TIME_SLOTS))
    lunch_slot: str = DEFAULT_LUNCH_SLOT

    # Algoritmo genético
    population_size: int = 50
    generations: int = 100
    mutation_rate: float = 0.1
    elitism_fraction: float = 0.2
    seed: Optional[int] = 42

    # Fitness
    base_score: float = 100.0
    conflict_penalty: float = 10.0

    # Dominio
    default_hours_per_week: int = 3
    default_subject_type: str = "theory"
    unassigned_room: str = "TBA"

    # Cada cuántas generaciones se imprime el progreso (0 = silencio)
    log_every: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GAConfig":
        merged = asdict(cls())
        for k, v in data.items():
            if k in merged:
                merged[k] = v
        return cls(**merged)

    def __post_init__(self):
        self._check_int("population_size", minimum=1)
        self._check_int("generations", minimum=1)
        self._check_int("default_hours_per_week", minimum=0)
        self._check_int("log_every", minimum=0)
        self._check_real("mutation_rate")
        self._check_real("elitism_fraction")
        self._check_real("base_score")
        self._check_real("conflict_penalty")
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise InvalidInput(f"mutation_rate debe estar en [0, 1]: {self.mutation_rate}")
        if not 0.0 < self.elitism_fraction <= 1.0:
            raise InvalidInput(f"elitism_fraction debe estar en (0, 1]: {self.elitism_fraction}")
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise InvalidInput(f"seed debe ser entero o nulo: {self.seed!r}")

    def _check_int(self, name: str, minimum: int) -> None:
        value = getattr(self, name)
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidInput(f"{name} debe ser entero: {value!r}")
        if value < minimum:
            raise InvalidInput(f"{name} debe ser >= {minimum}: {value}")

    def _check_real(self, name: str) -> None:
        value = getattr(self, name)
        if isinstance(value, bool) or not isinstance(value, Real):
            raise InvalidInput(f"{name} debe ser numérico: {value!r}")

    def grid(self) -> SlotGrid:
        return SlotGrid(self.days, self.time_slots, self.lunch_slot)

    def make_rng(self) -> random.Random:
        return random.Random(self.seed)

    @property
    def elite_size(self) -> int:
        # Al menos un élite para que el mejor nunca se pierda
        return min(self.population_size, max(1, int(self.population_size * self.elitism_fraction)))


def _load_yaml(path: Path) -> Any:
    if not path.exists():
        return {}
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


def load_config(path: str = "config.yaml") -> GAConfig:
    data = _load_yaml(Path(path))
    if not isinstance(data, dict):
        raise InvalidInput("config.yaml debe contener un objeto mapeo")
    return GAConfig.from_dict(data)
