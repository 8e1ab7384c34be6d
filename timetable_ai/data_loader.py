# timetable_ai/data_loader.py
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence

import pandas as pd

from .config import GAConfig
from .model import ROOM_TYPES, SUBJECT_TYPES, InvalidInput, Room, Subject

SUBJECT_COLUMNS = ["id", "name", "code", "instructor", "department", "semester",
                   "credits", "hoursPerWeek", "type"]
ROOM_COLUMNS = ["roomNumber", "type", "capacity", "building", "floor", "isActive"]


@dataclass(frozen=True)
class DataBundle:
    subjects: List[Subject]
    rooms: List[Room]


def _read_table(path: Path) -> pd.DataFrame:
    if path.suffix.lower() == ".json":
        return pd.read_json(path, dtype=False)
    return pd.read_csv(path)


def _get(row: pd.Series, *names: str) -> Any:
    for name in names:
        if name in row.index and not pd.isna(row[name]):
            return row[name]
    return None


def _as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    # pandas lee como float las columnas numéricas con huecos
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _as_int(value: Any, what: str) -> int:
    if isinstance(value, bool):
        raise InvalidInput(f"{what} debe ser entero: {value!r}")
    if isinstance(value, str):
        value = value.strip()
        try:
            return int(value)
        except ValueError:
            raise InvalidInput(f"{what} debe ser entero: {value!r}") from None
    try:
        as_float = float(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"{what} debe ser entero: {value!r}") from None
    if not as_float.is_integer():
        raise InvalidInput(f"{what} debe ser entero: {value!r}")
    return int(as_float)


def _optional_int(value: Any, what: str) -> Optional[int]:
    return None if value is None else _as_int(value, what)


def _as_bool(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().lower() not in ("false", "0", "no", "")
    return bool(value)


def subjects_from_frame(df: pd.DataFrame, cfg: Optional[GAConfig] = None) -> List[Subject]:
    cfg = cfg or GAConfig()
    subjects: List[Subject] = []
    for pos, row in df.iterrows():
        sid = _get(row, "_id", "id", "code")
        hours = _get(row, "hoursPerWeek", "hours_per_week")
        code = _as_str(_get(row, "code"))
        department = _as_str(_get(row, "department"))
        subjects.append(
            Subject(
                id=_as_str(sid) if sid is not None else str(pos),
                name=str(_get(row, "name") or ""),
                instructor=str(_get(row, "instructor") or ""),
                type=str(_get(row, "type") or cfg.default_subject_type).strip().lower(),
                hours_per_week=cfg.default_hours_per_week if hours is None else _as_int(hours, "hoursPerWeek"),
                code=code,
                department=department,
                semester=_optional_int(_get(row, "semester"), "semester"),
                credits=_optional_int(_get(row, "credits"), "credits"),
            )
        )
    validate_subjects(subjects)
    return subjects


def rooms_from_frame(df: pd.DataFrame, active_only: bool = True) -> List[Room]:
    rooms: List[Room] = []
    for _, row in df.iterrows():
        label = _as_str(_get(row, "roomNumber", "label"))
        building = _as_str(_get(row, "building"))
        room = Room(
            label=label or "",
            type=str(_get(row, "type") or "classroom").strip().lower(),
            capacity=_optional_int(_get(row, "capacity"), "capacity"),
            building=building,
            floor=_optional_int(_get(row, "floor"), "floor"),
            is_active=_as_bool(_get(row, "isActive", "is_active")),
        )
        if active_only and not room.is_active:
            continue
        rooms.append(room)
    validate_rooms(rooms)
    return rooms


def validate_subjects(subjects: Sequence[Subject]) -> None:
    seen = set()
    for s in subjects:
        # unplaced_hours cuenta por id: dos asignaturas con el mismo id se mezclarían
        if s.id in seen:
            raise InvalidInput(f"Id de asignatura repetido: {s.id}")
        seen.add(s.id)
        if not s.name.strip():
            raise InvalidInput(f"La asignatura {s.id} no tiene nombre")
        if not s.instructor.strip():
            raise InvalidInput(f"La asignatura {s.id} no tiene docente")
        if s.type not in SUBJECT_TYPES:
            raise InvalidInput(f"Tipo de asignatura desconocido para {s.id}: {s.type!r}")
        if isinstance(s.hours_per_week, bool) or not isinstance(s.hours_per_week, int):
            raise InvalidInput(f"hoursPerWeek de {s.id} debe ser entero")
        if s.hours_per_week < 0:
            raise InvalidInput(f"hoursPerWeek de {s.id} no puede ser negativo: {s.hours_per_week}")


def validate_rooms(rooms: Sequence[Room]) -> None:
    for r in rooms:
        if not r.label.strip():
            raise InvalidInput("Hay un aula sin número")
        if r.type not in ROOM_TYPES:
            raise InvalidInput(f"Tipo de aula desconocido para {r.label}: {r.type!r}")


def filter_subjects(
    subjects: Sequence[Subject],
    department: Optional[str] = None,
    semester: Optional[int] = None,
) -> List[Subject]:
    out = []
    for s in subjects:
        if department is not None and s.department != department:
            continue
        if semester is not None and s.semester != semester:
            continue
        out.append(s)
    return out


def load_subjects(
    path: str,
    cfg: Optional[GAConfig] = None,
    department: Optional[str] = None,
    semester: Optional[int] = None,
) -> List[Subject]:
    subjects = subjects_from_frame(_read_table(Path(path)), cfg)
    return filter_subjects(subjects, department, semester)


def load_rooms(path: str, active_only: bool = True) -> List[Room]:
    return rooms_from_frame(_read_table(Path(path)), active_only)


def load_data(
    data_dir: str,
    cfg: Optional[GAConfig] = None,
    department: Optional[str] = None,
    semester: Optional[int] = None,
) -> DataBundle:
    base = Path(data_dir)
    subjects_path = base / "subjects.csv"
    if not subjects_path.exists():
        subjects_path = base / "subjects.json"
    rooms_path = base / "rooms.csv"
    if not rooms_path.exists():
        rooms_path = base / "rooms.json"

    subjects = load_subjects(str(subjects_path), cfg, department, semester)
    # Sin archivo de aulas todas las sesiones quedan con el marcador de aula libre
    rooms = load_rooms(str(rooms_path)) if rooms_path.exists() else []
    return DataBundle(subjects=subjects, rooms=rooms)
