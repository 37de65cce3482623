"""Generational handles and a slot container that hands them out."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(eq=True, unsafe_hash=True)
class Handle:
    """Reference to a slot in a HandleVec, valid while its generation matches."""

    idx: int = 0
    generation: int = 0

    def is_set(self) -> bool:
        return self.generation > 0

    def reset(self) -> None:
        self.generation = 0


@dataclass
class _Cell(Generic[T]):
    obj: T
    generation: int


class HandleVec(Generic[T]):
    """Container that reuses free slots and guards against stale handles."""

    def __init__(self) -> None:
        self._cells: list[_Cell[T] | None] = []
        self._generation = 0

    def __len__(self) -> int:
        return sum(cell is not None for cell in self._cells)

    def __contains__(self, handle: object) -> bool:
        return isinstance(handle, Handle) and self._cell(handle) is not None

    def add(self, obj: T) -> Handle:
        """Store obj in the first free slot and return a fresh handle to it."""
        self._generation += 1
        cell = _Cell(obj, self._generation)
        idx = next((i for i, c in enumerate(self._cells) if c is None), None)
        if idx is None:
            idx = len(self._cells)
            self._cells.append(cell)
        else:
            self._cells[idx] = cell
        return Handle(idx, cell.generation)

    def remove(self, handle: Handle) -> None:
        """Free the slot if the handle is still current; otherwise do nothing."""
        if self._cell(handle) is not None:
            self._cells[handle.idx] = None

    def get(self, handle: Handle) -> T | None:
        cell = self._cell(handle)
        return cell.obj if cell is not None else None

    def items(self) -> Iterator[tuple[Handle, T]]:
        """Yield (handle, object) pairs for every occupied slot, in slot order."""
        for idx, cell in enumerate(list(self._cells)):
            if cell is not None:
                yield Handle(idx, cell.generation), cell.obj

    def find(self, predicate: Callable[[T], bool]) -> Handle | None:
        """Return the handle of the first object matching predicate."""
        return next((h for h, obj in self.items() if predicate(obj)), None)

    def _cell(self, handle: Handle) -> _Cell[T] | None:
        if not 0 <= handle.idx < len(self._cells):
            return None
        cell = self._cells[handle.idx]
        if cell is None or cell.generation != handle.generation:
            return None
        return cell