import random
from typing import Sequence

from .grid import Schedule
from .model import Individual


def select_parent(ranked: Sequence[Individual], rng: random.Random) -> Schedule:
    """Selección por ruleta sobre el fitness recortado a cero."""
    total_fitness = sum(max(0.0, ind.fitness) for ind in ranked)
    if total_fitness <= 0:
        return ranked[0].schedule

    pick = rng.random() * total_fitness
    for ind in ranked:
        pick -= max(0.0, ind.fitness)
        if pick <= 0:
            return ind.schedule
    return ranked[0].schedule


def uniform_crossover(p1: Schedule, p2: Schedule, rng: random.Random) -> Schedule:
    """Cruce uniforme: cada celda se hereda de uno u otro padre con probabilidad 1/2."""
    cells = [a if rng.random() < 0.5 else b for a, b in zip(p1, p2)]
    # Ambos padres coinciden en el almuerzo, así que la máscara se conserva
    return Schedule(p1.grid, cells)


def mutate_swap(schedule: Schedule, rng: random.Random, mutation_rate: float = 0.1) -> None:
    """Mutación por intercambio de dos celdas fuera del almuerzo (puede tocar la misma)."""
    if rng.random() < mutation_rate:
        cells = schedule.grid.assignable_cells
        a = rng.choice(cells)
        b = rng.choice(cells)
        schedule.swap(a, b)
