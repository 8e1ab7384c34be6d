"""
Conversión del horario a estructuras serializables.

El documento sigue la forma ``día -> franja -> contenido`` donde el contenido
es ``"LUNCH_BREAK"``, ``None`` o un diccionario con la asignación
(``subjectId``, ``subject``, ``instructor``, ``type``, ``room``).
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from .grid import Schedule, SlotGrid
from .model import LUNCH_BREAK, Assignment, CellContent, Subject


def assignment_to_dict(a: Assignment) -> Dict[str, str]:
    return {
        "subjectId": a.subject_id,
        "subject": a.subject_name,
        "instructor": a.instructor,
        "type": a.subject_type,
        "room": a.room,
    }


def assignment_from_dict(data: Dict[str, Any]) -> Assignment:
    return Assignment(
        subject_id=str(data["subjectId"]),
        subject_name=str(data["subject"]),
        instructor=str(data["instructor"]),
        subject_type=str(data.get("type", "theory")),
        room=str(data["room"]),
    )


def _cell_to_json(content: CellContent):
    if isinstance(content, Assignment):
        return assignment_to_dict(content)
    return content


def schedule_to_dict(schedule: Schedule) -> Dict[str, Dict[str, Any]]:
    grid = schedule.grid
    out: Dict[str, Dict[str, Any]] = {}
    for d, day in enumerate(grid.days):
        out[day] = {slot: _cell_to_json(schedule.at(d, s)) for s, slot in enumerate(grid.time_slots)}
    return out


def schedule_from_dict(doc: Dict[str, Dict[str, Any]], grid: SlotGrid) -> Schedule:
    schedule = grid.empty_schedule()
    for d, day in enumerate(grid.days):
        day_doc = doc.get(day) or {}
        for s, slot in enumerate(grid.time_slots):
            if s == grid.lunch_idx:
                continue
            raw = day_doc.get(slot)
            if raw is None or raw == LUNCH_BREAK:
                continue
            schedule[grid.index(d, s)] = assignment_from_dict(raw)
    return schedule


def build_timetable_document(
    schedule: Schedule,
    subjects: Sequence[Subject],
    course_name: str,
    semester: int,
    department: str,
    academic_year: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Documento listo para persistir, con los metadatos del horario generado."""
    created_at = created_at or datetime.now(timezone.utc)
    stamp = created_at.isoformat()
    return {
        "courseName": course_name,
        "semester": int(semester),
        "department": department,
        "academicYear": academic_year or str(created_at.year),
        "subjects": [s.id for s in subjects],
        "schedule": schedule_to_dict(schedule),
        "createdAt": stamp,
        "updatedAt": stamp,
    }


def schedule_to_frame(schedule: Schedule) -> pd.DataFrame:
    """Una fila por celda asignada."""
    grid = schedule.grid
    rows: List[Dict[str, Any]] = []
    for cell, a in schedule.assignments():
        day, slot = grid.label(cell)
        rows.append(
            {
                "Dia": day,
                "Franja": slot,
                "Asignatura": a.subject_name,
                "ID": a.subject_id,
                "Docente": a.instructor,
                "Tipo": a.subject_type,
                "Aula": a.room,
            }
        )
    return pd.DataFrame(rows, columns=["Dia", "Franja", "Asignatura", "ID", "Docente", "Tipo", "Aula"])


def schedule_to_grid_frame(schedule: Schedule) -> pd.DataFrame:
    """Matriz franjas x días con un texto corto por celda, para mostrar en pantalla."""
    grid = schedule.grid
    data = {}
    for d, day in enumerate(grid.days):
        col = []
        for s in range(grid.n_slots):
            content = schedule.at(d, s)
            if content == LUNCH_BREAK:
                col.append("ALMUERZO")
            elif isinstance(content, Assignment):
                col.append(f"{content.subject_name} ({content.instructor}) [{content.room}]")
            else:
                col.append("")
        data[day] = col
    return pd.DataFrame(data, index=list(grid.time_slots))
