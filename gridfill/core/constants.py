"""Shared constants and enumerations for the grid filler."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CellState(str, Enum):
    """States a grid cell can be in."""

    BLOCKED = "BLOCKED"
    OPEN = "OPEN"


class Direction(str, Enum):
    """Word directions supported by the grid."""

    ACROSS = "ACROSS"
    DOWN = "DOWN"

    @property
    def suffix(self) -> str:
        return "A" if self is Direction.ACROSS else "D"


DEFAULT_BLOCK_SYMBOLS = "#"
DEFAULT_OPEN_SYMBOLS = "._"
ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


@dataclass(frozen=True)
class Bounds:
    """Simple rectangle bounds helper."""

    rows: int
    cols: int

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols
