# timetable_ai/model.py
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:  # pragma: no cover
    from .grid import Schedule

SUBJECT_TYPES = ("theory", "practical", "tutorial")
ROOM_TYPES = ("classroom", "laboratory", "auditorium")

# Contenido fijo de las celdas de almuerzo
LUNCH_BREAK = "LUNCH_BREAK"


class InvalidInput(ValueError):
    """Entrada mal formada detectada antes de llegar al motor."""


@dataclass(frozen=True)
class Subject:
    id: str
    name: str
    instructor: str
    type: str             # "theory", "practical", "tutorial"
    hours_per_week: int
    code: Optional[str] = None
    department: Optional[str] = None
    semester: Optional[int] = None
    credits: Optional[int] = None


@dataclass(frozen=True)
class Room:
    label: str
    type: str             # "classroom", "laboratory", "auditorium"
    capacity: Optional[int] = None
    building: Optional[str] = None
    floor: Optional[int] = None
    is_active: bool = True


@dataclass(frozen=True)
class Assignment:
    # Inmutable: padres e hijos pueden compartir la misma instancia
    subject_id: str
    subject_name: str
    instructor: str
    subject_type: str
    room: str


CellContent = Union[str, Assignment, None]


@dataclass
class Individual:
    schedule: "Schedule"
    fitness: float = 0.0
