# timetable_ai/initial_population.py
from typing import List, Optional, Sequence
import random

from .config import GAConfig
from .domains import assign_room
from .grid import Schedule, SlotGrid
from .model import Assignment, Room, Subject


def build_random_schedule(
    subjects: Sequence[Subject],
    rooms: Sequence[Room],
    grid: SlotGrid,
    rng: random.Random,
    cfg: Optional[GAConfig] = None,
) -> Schedule:
    unassigned = cfg.unassigned_room if cfg else "TBA"
    schedule = grid.empty_schedule()

    free_cells = list(grid.assignable_cells)
    rng.shuffle(free_cells)

    # Cada asignatura toma las siguientes celdas barajadas; al agotarse la
    # rejilla las restantes se quedan sin horas.
    cursor = 0
    for subj in subjects:
        for _ in range(subj.hours_per_week):
            if cursor >= len(free_cells):
                break
            schedule[free_cells[cursor]] = Assignment(
                subject_id=subj.id,
                subject_name=subj.name,
                instructor=subj.instructor,
                subject_type=subj.type,
                room=assign_room(subj.type, rooms, rng, unassigned),
            )
            cursor += 1
    return schedule


def build_initial_population(
    subjects: Sequence[Subject],
    rooms: Sequence[Room],
    grid: SlotGrid,
    pop_size: int,
    rng: random.Random,
    cfg: Optional[GAConfig] = None,
) -> List[Schedule]:
    return [build_random_schedule(subjects, rooms, grid, rng, cfg) for _ in range(pop_size)]
