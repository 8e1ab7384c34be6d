"""
Rejilla semanal de celdas (día, franja).

La semana es un arreglo fijo de ``n_days * n_slots`` celdas indexadas como
``day_idx * n_slots + slot_idx``. Las celdas de almuerzo se calculan una sola
vez en la rejilla y ningún horario puede escribir sobre ellas.
"""
from typing import Iterator, List, Optional, Sequence, Tuple

from .model import LUNCH_BREAK, Assignment, CellContent, InvalidInput

DEFAULT_DAYS: Tuple[str, ...] = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday",
)

DEFAULT_TIME_SLOTS: Tuple[str, ...] = (
    "09:00-10:00", "10:00-11:00", "11:00-12:00",
    "12:00-13:00",  # almuerzo
    "13:00-14:00", "14:00-15:00", "15:00-16:00", "16:00-17:00",
)

DEFAULT_LUNCH_SLOT = "12:00-13:00"


class SlotGrid:
    def __init__(
        self,
        days: Sequence[str] = DEFAULT_DAYS,
        time_slots: Sequence[str] = DEFAULT_TIME_SLOTS,
        lunch_slot: str = DEFAULT_LUNCH_SLOT,
    ):
        if not days or not time_slots:
            raise InvalidInput("La rejilla necesita al menos un día y una franja")
        if len(set(days)) != len(days) or len(set(time_slots)) != len(time_slots):
            raise InvalidInput("Los días y las franjas no pueden repetirse")
        if lunch_slot not in time_slots:
            raise InvalidInput(f"La franja de almuerzo {lunch_slot!r} no está en la lista de franjas")
        self.days = tuple(days)
        self.time_slots = tuple(time_slots)
        self.lunch_slot = lunch_slot
        self.n_days = len(self.days)
        self.n_slots = len(self.time_slots)
        self.lunch_idx = self.time_slots.index(lunch_slot)
        self.size = self.n_days * self.n_slots

        self.lunch_cells = frozenset(self.index(d, self.lunch_idx) for d in range(self.n_days))
        self.assignable_cells: Tuple[int, ...] = tuple(
            i for i in range(self.size) if i not in self.lunch_cells
        )

    @property
    def capacity(self) -> int:
        return len(self.assignable_cells)

    def index(self, day_idx: int, slot_idx: int) -> int:
        return day_idx * self.n_slots + slot_idx

    def position(self, cell: int) -> Tuple[int, int]:
        return divmod(cell, self.n_slots)

    def label(self, cell: int) -> Tuple[str, str]:
        d, s = self.position(cell)
        return self.days[d], self.time_slots[s]

    def is_lunch(self, cell: int) -> bool:
        return cell in self.lunch_cells

    def empty_schedule(self) -> "Schedule":
        return Schedule(self)

    def __eq__(self, other) -> bool:
        if not isinstance(other, SlotGrid):
            return NotImplemented
        return (self.days, self.time_slots, self.lunch_slot) == (
            other.days, other.time_slots, other.lunch_slot
        )

    def __hash__(self) -> int:
        return hash((self.days, self.time_slots, self.lunch_slot))

    def __repr__(self) -> str:
        return f"SlotGrid({self.n_days}x{self.n_slots}, almuerzo={self.lunch_slot})"


class Schedule:
    """Horario completo: una celda por (día, franja)."""

    __slots__ = ("grid", "_cells")

    def __init__(self, grid: SlotGrid, cells: Optional[Sequence[CellContent]] = None):
        self.grid = grid
        if cells is None:
            self._cells: List[CellContent] = [
                LUNCH_BREAK if i in grid.lunch_cells else None for i in range(grid.size)
            ]
            return
        if len(cells) != grid.size:
            raise ValueError(f"Se esperaban {grid.size} celdas, llegaron {len(cells)}")
        for i, content in enumerate(cells):
            if (content == LUNCH_BREAK) != (i in grid.lunch_cells):
                day, slot = grid.label(i)
                raise ValueError(f"Celda {day} {slot} rompe la máscara de almuerzo")
        self._cells = list(cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[CellContent]:
        return iter(self._cells)

    def __getitem__(self, cell: int) -> CellContent:
        return self._cells[cell]

    def __setitem__(self, cell: int, content: CellContent) -> None:
        if cell in self.grid.lunch_cells:
            raise ValueError("Las celdas de almuerzo no se pueden modificar")
        if content == LUNCH_BREAK:
            raise ValueError("LUNCH_BREAK solo puede ocupar la franja de almuerzo")
        self._cells[cell] = content

    def __eq__(self, other) -> bool:
        if not isinstance(other, Schedule):
            return NotImplemented
        return self.grid == other.grid and self._cells == other._cells

    def at(self, day_idx: int, slot_idx: int) -> CellContent:
        return self._cells[self.grid.index(day_idx, slot_idx)]

    def swap(self, a: int, b: int) -> None:
        self[a], self[b] = self._cells[b], self._cells[a]

    def copy(self) -> "Schedule":
        # Las asignaciones son inmutables; basta con copiar la lista
        clone = Schedule.__new__(Schedule)
        clone.grid = self.grid
        clone._cells = list(self._cells)
        return clone

    def assignments(self) -> Iterator[Tuple[int, Assignment]]:
        for i, content in enumerate(self._cells):
            if isinstance(content, Assignment):
                yield i, content

    def assigned_count(self) -> int:
        return sum(1 for _ in self.assignments())
