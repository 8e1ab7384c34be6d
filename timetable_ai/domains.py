# timetable_ai/domains.py
import random
from typing import List, Sequence

from .model import Room

# Tipo de asignatura -> tipo de aula requerido. Los tipos ausentes aceptan cualquier aula.
ROOM_TYPE_FOR_SUBJECT = {
    "practical": "laboratory",
    "theory": "classroom",
}


def eligible_rooms(subject_type: str, rooms: Sequence[Room]) -> List[Room]:
    wanted = ROOM_TYPE_FOR_SUBJECT.get(subject_type)
    if wanted is None:
        return list(rooms)
    return [r for r in rooms if r.type == wanted]


def assign_room(
    subject_type: str,
    rooms: Sequence[Room],
    rng: random.Random,
    unassigned: str = "TBA",
) -> str:
    """
    Elige el aula para una sesión según el tipo de asignatura.

    Sin aulas devuelve el marcador ``unassigned``. Si ninguna aula es del tipo
    pedido se usa la primera del listado aunque no coincida; no se revisa
    capacidad ni doble reserva.
    """
    if not rooms:
        return unassigned
    pool = eligible_rooms(subject_type, rooms)
    if pool:
        return rng.choice(pool).label
    return rooms[0].label
