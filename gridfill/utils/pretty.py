"""Pretty-print helpers for filled grids."""

from __future__ import annotations

import sys
from collections import Counter
from typing import TYPE_CHECKING, List, Optional

from ..core.models import Assignment, Cell

if TYPE_CHECKING:
    from ..engine.filler import FillResult
    from ..engine.grid import GridModel


BLOCK_SYMBOL = "#"
SOLID_BLOCK = "█"
EMPTY_SYMBOL = "."


def cell_symbol(cell: Cell, block: str = BLOCK_SYMBOL, empty: str = EMPTY_SYMBOL) -> str:
    if not cell.is_open():
        return block
    return cell.letter or empty


def format_grid(grid: GridModel, assignment: Optional[Assignment] = None) -> str:
    """Render the grid with row and column coordinates."""

    width = grid.bounds.cols
    header_cells = [f"{c:>2}" for c in range(width)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + "-" * (3 * width - 1))
    for r, row in enumerate(grid.cells(assignment)):
        row_render = " ".join(f"{cell_symbol(cell):>2}" for cell in row)
        lines.append(f"{r:>2} | {row_render}")
    return "\n".join(lines)


def format_solution(grid: GridModel, assignment: Optional[Assignment] = None) -> str:
    """Render one line per row: letters, solid blocks and blanks."""

    return "\n".join(
        "".join(cell_symbol(cell, block=SOLID_BLOCK, empty=" ") for cell in row)
        for row in grid.cells(assignment)
    )


def pretty_print_grid(
    grid: GridModel,
    assignment: Optional[Assignment] = None,
    *,
    label: str | None = None,
    stream=None,
) -> None:
    """Print the grid in a human-friendly format."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_grid(grid, assignment), file=stream)


def print_fill_stats(result: FillResult, *, stream=None) -> None:
    """Print grid geometry, word and search statistics for a finished fill."""

    stream = stream or sys.stdout
    grid = result.grid
    total_cells = grid.bounds.rows * grid.bounds.cols
    open_cells = sum(1 for row in grid.cells() for cell in row if cell.is_open())

    print("--- Grid ---", file=stream)
    print(f"  Size:          {grid.bounds.rows} x {grid.bounds.cols} ({total_cells} cells)", file=stream)
    print(f"  Open cells:    {open_cells} ({open_cells / total_cells * 100:.0f}%)", file=stream)
    print(f"  Crossings:     {len(grid.crossings)}", file=stream)

    lengths: List[int] = [slot.length for slot in grid.slots]
    length_dist = Counter(lengths)
    print(file=stream)
    print("--- Words ---", file=stream)
    print(f"  Slots:         {len(grid.slots)}", file=stream)
    print(f"  Length range:  {min(lengths)}-{max(lengths)} (avg {sum(lengths) / len(lengths):.1f})", file=stream)
    dist_parts = [f"{length}:{count}" for length, count in sorted(length_dist.items())]
    print(f"  Distribution:  {' '.join(dist_parts)}", file=stream)
    if result.average_score is not None:
        print(f"  Avg score:     {result.average_score:.3f}", file=stream)

    stats = result.stats
    print(file=stream)
    print("--- Search ---", file=stream)
    print(f"  Attempts:      {result.attempts}", file=stream)
    print(f"  Nodes:         {stats.nodes}", file=stream)
    print(f"  Backtracks:    {stats.backtracks}", file=stream)
    print(f"  Dead ends:     {stats.dead_ends}", file=stream)
    print(f"  Elapsed:       {stats.elapsed:.2f}s", file=stream)

    if result.validation_messages:
        print(file=stream)
        print("--- Validation ---", file=stream)
        for msg in result.validation_messages:
            print(f"  {msg}", file=stream)
