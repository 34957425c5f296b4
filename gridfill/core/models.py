"""Data models supporting the grid filler."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, ItemsView, Iterator, Mapping, Optional, Tuple

from .constants import CellState, Direction

Position = Tuple[int, int]


@dataclass
class Cell:
    """Represents a grid cell, carrying a letter once the grid is rendered."""

    row: int
    col: int
    state: CellState = CellState.OPEN
    letter: Optional[str] = None

    def is_open(self) -> bool:
        return self.state == CellState.OPEN

    def is_empty(self) -> bool:
        return self.is_open() and self.letter is None


@dataclass(frozen=True)
class Slot:
    """A maximal run of open cells that must hold a single word."""

    id: str
    number: int
    direction: Direction
    cells: Tuple[Position, ...]

    @property
    def length(self) -> int:
        return len(self.cells)

    @property
    def start(self) -> Position:
        return self.cells[0]


@dataclass(frozen=True)
class Crossing:
    """A cell shared by an across slot and a down slot."""

    slot_a: str
    index_a: int
    slot_b: str
    index_b: int

    def index_in(self, slot_id: str) -> int:
        if slot_id == self.slot_a:
            return self.index_a
        if slot_id == self.slot_b:
            return self.index_b
        raise KeyError(slot_id)

    def other(self, slot_id: str) -> Tuple[str, int]:
        """Return ``(other_slot_id, index_in_other)`` seen from ``slot_id``."""

        if slot_id == self.slot_a:
            return self.slot_b, self.index_b
        if slot_id == self.slot_b:
            return self.slot_a, self.index_a
        raise KeyError(slot_id)


class Assignment:
    """Evolving mapping from slot id to the word currently placed there."""

    def __init__(self, words: Optional[Mapping[str, str]] = None) -> None:
        self._words: Dict[str, str] = dict(words or {})

    def assign(self, slot_id: str, word: str) -> None:
        if slot_id in self._words:
            raise ValueError(f"Slot {slot_id} already holds {self._words[slot_id]!r}")
        self._words[slot_id] = word

    def unassign(self, slot_id: str) -> str:
        return self._words.pop(slot_id)

    def get(self, slot_id: str) -> Optional[str]:
        return self._words.get(slot_id)

    def is_assigned(self, slot_id: str) -> bool:
        return slot_id in self._words

    def items(self) -> ItemsView[str, str]:
        return self._words.items()

    def snapshot(self) -> Tuple[Tuple[str, str], ...]:
        return tuple(sorted(self._words.items()))

    def copy(self) -> "Assignment":
        return Assignment(self._words)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._words)

    def __contains__(self, slot_id: object) -> bool:
        return slot_id in self._words

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __len__(self) -> int:
        return len(self._words)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Assignment):
            return NotImplemented
        return self._words == other._words

    def __repr__(self) -> str:
        return f"Assignment({self._words!r})"
