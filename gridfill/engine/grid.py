"""Grid representation: open/blocked cells turned into slots and crossings."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..core.constants import (DEFAULT_BLOCK_SYMBOLS, DEFAULT_OPEN_SYMBOLS, Bounds,
                              CellState, Direction)
from ..core.exceptions import GridLoadError, InvalidGridError
from ..core.models import Assignment, Cell, Crossing, Position, Slot
from ..utils.logger import get_logger

LOGGER = get_logger(__name__)

CellValue = Union[CellState, bool]

_HEADER_RE = re.compile(r"^\s*(\d+)\s*[,x ]\s*(\d+)\s*$")

# (index_in_slot, other_slot_id, index_in_other)
CrossRef = Tuple[int, str, int]


@dataclass
class GridConfig:
    """Configuration values driving grid parsing and slot extraction."""

    min_slot_length: int = 2
    block_symbols: str = DEFAULT_BLOCK_SYMBOLS
    open_symbols: str = DEFAULT_OPEN_SYMBOLS


class GridModel:
    """Immutable slot and crossing structure derived from a cell layout."""

    def __init__(
        self,
        states: Sequence[Sequence[CellState]],
        slots: Sequence[Slot],
        crossings: Sequence[Crossing],
    ) -> None:
        self._states: Tuple[Tuple[CellState, ...], ...] = tuple(tuple(row) for row in states)
        self.bounds = Bounds(rows=len(self._states), cols=len(self._states[0]))
        self.slots: Tuple[Slot, ...] = tuple(slots)
        self.crossings: Tuple[Crossing, ...] = tuple(crossings)
        self._slots_by_id: Dict[str, Slot] = {slot.id: slot for slot in self.slots}
        refs: Dict[str, List[CrossRef]] = {slot.id: [] for slot in self.slots}
        for crossing in self.crossings:
            refs[crossing.slot_a].append((crossing.index_a, crossing.slot_b, crossing.index_b))
            refs[crossing.slot_b].append((crossing.index_b, crossing.slot_a, crossing.index_a))
        self._cross_refs: Dict[str, Tuple[CrossRef, ...]] = {
            slot_id: tuple(sorted(items)) for slot_id, items in refs.items()
        }

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def build(
        cls,
        cells: Sequence[Sequence[CellValue]],
        config: Optional[GridConfig] = None,
    ) -> "GridModel":
        """Extract slots and crossings from a 2-D array of cell states.

        ``True`` is accepted for an open cell and ``False`` for a blocked one.
        """

        config = config or GridConfig()
        states = _normalize_states(cells)
        rows, cols = len(states), len(states[0])

        across = _scan_runs(states, Direction.ACROSS, config.min_slot_length)
        down = _scan_runs(states, Direction.DOWN, config.min_slot_length)
        if not across and not down:
            raise InvalidGridError(
                f"Grid {rows}x{cols} has no run of {config.min_slot_length} or more open cells"
            )

        across_starts = {run[0]: run for run in across}
        down_starts = {run[0]: run for run in down}
        slots: List[Slot] = []
        number = 0
        for row in range(rows):
            for col in range(cols):
                position = (row, col)
                if position not in across_starts and position not in down_starts:
                    continue
                number += 1
                if position in across_starts:
                    slots.append(_make_slot(number, Direction.ACROSS, across_starts[position]))
                if position in down_starts:
                    slots.append(_make_slot(number, Direction.DOWN, down_starts[position]))

        crossings = _find_crossings(slots)
        LOGGER.info(
            "Built %dx%d grid with %d slots and %d crossings",
            rows,
            cols,
            len(slots),
            len(crossings),
        )
        return cls(states, slots, crossings)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def slot(self, slot_id: str) -> Slot:
        return self._slots_by_id[slot_id]

    def crossings_for(self, slot_id: str) -> Tuple[CrossRef, ...]:
        return self._cross_refs[slot_id]

    def cell_state(self, row: int, col: int) -> CellState:
        return self._states[row][col]

    def is_open(self, row: int, col: int) -> bool:
        return self.bounds.contains(row, col) and self._states[row][col] == CellState.OPEN

    def cells(self, assignment: Optional[Assignment] = None) -> List[List[Cell]]:
        """Return fresh cells, lettered from ``assignment`` where it covers them."""

        grid = [
            [Cell(row=r, col=c, state=self._states[r][c]) for c in range(self.bounds.cols)]
            for r in range(self.bounds.rows)
        ]
        if assignment is not None:
            for slot_id, word in assignment.items():
                for (row, col), letter in zip(self.slot(slot_id).cells, word):
                    grid[row][col].letter = letter
        return grid

    def __len__(self) -> int:
        return len(self.slots)


# ----------------------------------------------------------------------
# Text decoding
# ----------------------------------------------------------------------
def parse_grid_text(text: str, config: Optional[GridConfig] = None) -> List[List[CellState]]:
    """Decode a character grid into cell states.

    An optional first line ``"width, height"`` declares the dimensions and is
    checked against the rows that follow. Whitespace inside rows is ignored.
    """

    config = config or GridConfig()
    lines = [line for line in text.splitlines() if line.strip()]
    declared: Optional[Tuple[int, int]] = None
    if lines:
        header = _HEADER_RE.match(lines[0])
        if header:
            declared = (int(header.group(1)), int(header.group(2)))
            lines = lines[1:]

    symbols: Mapping[str, CellState] = {
        **{symbol: CellState.OPEN for symbol in config.open_symbols},
        **{symbol: CellState.BLOCKED for symbol in config.block_symbols},
    }
    states: List[List[CellState]] = []
    for line_no, line in enumerate(lines, start=1):
        row: List[CellState] = []
        for char in line:
            if char.isspace():
                continue
            try:
                row.append(symbols[char])
            except KeyError:
                raise InvalidGridError(
                    f"Unknown cell symbol {char!r} on grid row {line_no}"
                ) from None
        states.append(row)

    if declared is not None:
        width, height = declared
        if len(states) != height or any(len(row) != width for row in states):
            raise InvalidGridError(
                f"Grid rows do not match declared size {width}x{height}"
            )
    return states


def load_grid(path: Path | str, config: Optional[GridConfig] = None) -> GridModel:
    """Read a grid file and build its :class:`GridModel`."""

    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise GridLoadError(f"Cannot read grid {source}: {exc}") from exc
    return GridModel.build(parse_grid_text(text, config), config)


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------
def _normalize_states(cells: Sequence[Sequence[CellValue]]) -> List[List[CellState]]:
    if not cells or not cells[0]:
        raise InvalidGridError("Grid is empty")
    width = len(cells[0])
    states: List[List[CellState]] = []
    for r, row in enumerate(cells):
        if len(row) != width:
            raise InvalidGridError(
                f"Grid is not rectangular: row {r} has {len(row)} cells, expected {width}"
            )
        normalized: List[CellState] = []
        for c, value in enumerate(row):
            if isinstance(value, CellState):
                normalized.append(value)
            elif isinstance(value, bool):
                normalized.append(CellState.OPEN if value else CellState.BLOCKED)
            else:
                raise InvalidGridError(f"Unsupported cell value {value!r} at ({r},{c})")
        states.append(normalized)
    return states


def _scan_runs(
    states: Sequence[Sequence[CellState]],
    direction: Direction,
    min_length: int,
) -> List[Tuple[Position, ...]]:
    """Return maximal open runs of at least ``min_length`` cells."""

    rows, cols = len(states), len(states[0])
    if direction == Direction.ACROSS:
        lines = [[(r, c) for c in range(cols)] for r in range(rows)]
    else:
        lines = [[(r, c) for r in range(rows)] for c in range(cols)]

    runs: List[Tuple[Position, ...]] = []
    for line in lines:
        current: List[Position] = []
        for row, col in line:
            if states[row][col] == CellState.OPEN:
                current.append((row, col))
                continue
            if len(current) >= min_length:
                runs.append(tuple(current))
            current = []
        if len(current) >= min_length:
            runs.append(tuple(current))
    return runs


def _make_slot(number: int, direction: Direction, cells: Tuple[Position, ...]) -> Slot:
    return Slot(id=f"{number}{direction.suffix}", number=number, direction=direction, cells=cells)


def _find_crossings(slots: Sequence[Slot]) -> List[Crossing]:
    across_at: Dict[Position, Tuple[Slot, int]] = {}
    for slot in slots:
        if slot.direction == Direction.ACROSS:
            for index, position in enumerate(slot.cells):
                across_at[position] = (slot, index)

    crossings: List[Crossing] = []
    for slot in slots:
        if slot.direction != Direction.DOWN:
            continue
        for index, position in enumerate(slot.cells):
            hit = across_at.get(position)
            if hit is None:
                continue
            across_slot, across_index = hit
            crossings.append(
                Crossing(
                    slot_a=across_slot.id,
                    index_a=across_index,
                    slot_b=slot.id,
                    index_b=index,
                )
            )
    return crossings
