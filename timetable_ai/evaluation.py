# timetable_ai/evaluation.py
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np

from .config import GAConfig
from .grid import Schedule
from .model import Assignment, Subject


@dataclass
class EvaluationResult:
    fitness: float
    conflicts: int          # pares (celda, otro día) con el mismo docente en la misma franja
    conflict_penalty: float
    daily_loads: np.ndarray
    load_variance: float
    violations: List[str]


def _instructor_matrix(schedule: Schedule) -> np.ndarray:
    # Matriz [día][franja] con el docente de cada celda (None si libre o almuerzo)
    grid = schedule.grid
    mat = np.full((grid.n_days, grid.n_slots), None, dtype=object)
    for cell, a in schedule.assignments():
        d, s = grid.position(cell)
        mat[d, s] = a.instructor
    return mat


def evaluate(schedule: Schedule, cfg: Optional[GAConfig] = None) -> EvaluationResult:
    """
    Puntúa un horario partiendo de ``base_score``.

    Por cada celda asignada se cuentan los otros días en los que el mismo
    docente ocupa la misma franja y se restan ``conflict_penalty`` puntos por
    cada uno. Después se resta la varianza poblacional de la carga diaria.
    """
    cfg = cfg or GAConfig()
    grid = schedule.grid
    mat = _instructor_matrix(schedule)

    conflicts = 0
    violations: List[str] = []
    for s in range(grid.n_slots):
        if s == grid.lunch_idx:
            continue
        counts = Counter(x for x in mat[:, s] if x is not None)
        for instructor, n in counts.items():
            if n > 1:
                # cada una de las n celdas ve a las otras n-1
                conflicts += n * (n - 1)
                violations.append(
                    f"Docente {instructor} repite la franja {grid.time_slots[s]} en {n} días"
                )

    daily_loads = np.not_equal(mat, None).sum(axis=1)
    load_variance = float(np.var(daily_loads))

    conflict_penalty = cfg.conflict_penalty * conflicts
    score = cfg.base_score - conflict_penalty - load_variance

    return EvaluationResult(
        fitness=score,
        conflicts=conflicts,
        conflict_penalty=conflict_penalty,
        daily_loads=daily_loads,
        load_variance=load_variance,
        violations=violations,
    )


def fitness(schedule: Schedule, cfg: Optional[GAConfig] = None) -> float:
    return evaluate(schedule, cfg).fitness


def unplaced_hours(schedule: Schedule, subjects: Sequence[Subject]) -> Dict[str, int]:
    """Horas pedidas que no quedaron en el horario, por id de asignatura."""
    placed = Counter(a.subject_id for _, a in schedule.assignments())
    missing: Dict[str, int] = {}
    for subj in subjects:
        gap = subj.hours_per_week - placed.get(subj.id, 0)
        if gap > 0:
            missing[subj.id] = gap
    return missing
