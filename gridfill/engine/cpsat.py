"""CP-SAT grid filling backend using OR-Tools."""

from __future__ import annotations

import time
from collections import defaultdict
from itertools import combinations
from typing import Dict, List

from ortools.sat.python import cp_model

from ..core.constants import ALPHABET
from ..core.models import Assignment, Position, Slot
from ..data.dictionary import WordIndex
from ..utils.logger import get_logger
from .grid import GridModel
from .search import SearchResult, SearchStats, SearchStatus

LOGGER = get_logger(__name__)


def solve_with_cpsat(
    grid: GridModel,
    index: WordIndex,
    allow_repeats: bool = False,
    timeout: float = 30.0,
    workers: int = 4,
) -> SearchResult:
    """Fill every slot via CP-SAT.

    Args:
        grid: GridModel with the fixed layout.
        index: WordIndex providing one allowed-assignments table per slot.
        allow_repeats: When False, same-length slots must hold different words.
        timeout: Solver time limit in seconds.
        workers: Number of CP-SAT search workers.

    Returns:
        A SearchResult with the same status semantics as the backtracking
        engine: INFEASIBLE maps to UNSOLVABLE, a timeout to INCONCLUSIVE.
    """

    started = time.perf_counter()
    stats = SearchStats()

    # ------------------------------------------------------------------
    # Step 1: slot word tables; an empty one settles the question early
    # ------------------------------------------------------------------
    tables: Dict[str, List[List[int]]] = {}
    for slot in grid.slots:
        words = list(index.iter_length(slot.length))
        if not words:
            LOGGER.debug("No candidates for slot %s (length %d)", slot.id, slot.length)
            stats.elapsed = time.perf_counter() - started
            return SearchResult(status=SearchStatus.UNSOLVABLE, stats=stats)
        tables[slot.id] = [[ALPHABET.index(ch) for ch in word] for word in words]

    by_length: Dict[int, List[Slot]] = defaultdict(list)
    for slot in grid.slots:
        by_length[slot.length].append(slot)

    if not allow_repeats:
        for length, group in by_length.items():
            if len(group) > len(tables[group[0].id]):
                LOGGER.debug("%d slots of length %d but fewer distinct words", len(group), length)
                stats.elapsed = time.perf_counter() - started
                return SearchResult(status=SearchStatus.UNSOLVABLE, stats=stats)

    # ------------------------------------------------------------------
    # Step 2: cell letter variables and table constraints
    # ------------------------------------------------------------------
    model = cp_model.CpModel()
    cell_vars: Dict[Position, cp_model.IntVar] = {}
    for slot in grid.slots:
        for row, col in slot.cells:
            if (row, col) not in cell_vars:
                cell_vars[(row, col)] = model.new_int_var(0, len(ALPHABET) - 1, f"L_{row}_{col}")
        model.add_allowed_assignments([cell_vars[cell] for cell in slot.cells], tables[slot.id])

    # ------------------------------------------------------------------
    # Step 3: uniqueness constraints
    # ------------------------------------------------------------------
    if not allow_repeats:
        for group in by_length.values():
            for first, second in combinations(group, 2):
                _add_differ_constraint(model, cell_vars, first, second)

    # ------------------------------------------------------------------
    # Step 4: solve
    # ------------------------------------------------------------------
    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = timeout
    solver.parameters.num_workers = workers

    LOGGER.info(
        "CP-SAT: %d slots, %d cell vars, solving (timeout=%0.1fs)...",
        len(grid.slots),
        len(cell_vars),
        timeout,
    )
    status = solver.solve(model)
    stats.elapsed = time.perf_counter() - started
    stats.nodes = int(solver.num_branches)
    stats.backtracks = int(solver.num_conflicts)

    if status == cp_model.INFEASIBLE:
        LOGGER.info("CP-SAT: proved infeasible in %.2fs", solver.wall_time)
        return SearchResult(status=SearchStatus.UNSOLVABLE, stats=stats)
    if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
        LOGGER.warning("CP-SAT: no solution found (status=%s)", solver.status_name(status))
        return SearchResult(status=SearchStatus.INCONCLUSIVE, stats=stats)

    LOGGER.info("CP-SAT: solution found in %.2fs", solver.wall_time)

    # ------------------------------------------------------------------
    # Step 5: extract solution
    # ------------------------------------------------------------------
    assignment = Assignment()
    for slot in grid.slots:
        word = "".join(ALPHABET[solver.value(cell_vars[cell])] for cell in slot.cells)
        assignment.assign(slot.id, word)
    return SearchResult(status=SearchStatus.SOLVED, assignment=assignment, stats=stats)


def _add_differ_constraint(
    model: cp_model.CpModel,
    cell_vars: Dict[Position, cp_model.IntVar],
    first: Slot,
    second: Slot,
) -> None:
    """Ensure two same-length slots cannot contain identical words."""

    diffs: List[cp_model.IntVar] = []
    for pos, (cell_a, cell_b) in enumerate(zip(first.cells, second.cells)):
        var_a = cell_vars[cell_a]
        var_b = cell_vars[cell_b]
        if cell_a == cell_b:
            continue  # Shared cell, always equal
        differs = model.new_bool_var(f"d_{first.id}_{second.id}_{pos}")
        model.add(var_a != var_b).only_enforce_if(differs)
        model.add(var_a == var_b).only_enforce_if(~differs)
        diffs.append(differs)
    if diffs:
        model.add_bool_or(diffs)
