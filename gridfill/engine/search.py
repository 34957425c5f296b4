"""Depth-first backtracking search with minimum-remaining-candidates ordering.

The search keeps one explicit stack of frames, one per committed slot. Each
frame owns the candidate iterator of its slot and the word currently tried
there. Moving on to a sibling candidate always undoes the current word first,
so the shared assignment and used-word set are restored exactly before any
alternative is explored.
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator, List, Optional

from ..core.exceptions import SearchLimitReached, Unsolvable
from ..core.models import Assignment, Slot
from ..data.dictionary import UsedWords, WordIndex
from ..utils.logger import get_logger
from .constraints import ConstraintEvaluator
from .grid import GridModel

LOGGER = get_logger(__name__)

BacktrackHook = Callable[[str, str], None]


class SearchStatus(str, Enum):
    """Terminal outcomes of a search run."""

    SOLVED = "SOLVED"
    UNSOLVABLE = "UNSOLVABLE"
    INCONCLUSIVE = "INCONCLUSIVE"


@dataclass
class SearchConfig:
    """Policy and safeguards for one search run."""

    allow_repeats: bool = False
    max_nodes: Optional[int] = None
    time_limit: Optional[float] = None
    candidate_limit: Optional[int] = None
    shuffle_seed: Optional[int] = None


@dataclass
class SearchStats:
    nodes: int = 0
    backtracks: int = 0
    dead_ends: int = 0
    elapsed: float = 0.0


@dataclass
class SearchResult:
    status: SearchStatus
    assignment: Optional[Assignment] = None
    stats: SearchStats = field(default_factory=SearchStats)

    @property
    def solved(self) -> bool:
        return self.status == SearchStatus.SOLVED


@dataclass
class _Frame:
    slot: Slot
    candidates: Iterator[str]
    current: Optional[str] = None


class BacktrackingSearch:
    """Finds one complete, consistent assignment or proves there is none."""

    def __init__(
        self,
        grid: GridModel,
        index: WordIndex,
        config: Optional[SearchConfig] = None,
        on_backtrack: Optional[BacktrackHook] = None,
    ) -> None:
        self.grid = grid
        self.index = index
        self.config = config or SearchConfig()
        self.evaluator = ConstraintEvaluator(grid, index, self.config.allow_repeats)
        self.on_backtrack = on_backtrack
        self.assignment = Assignment()
        self.used_words = UsedWords(index)
        self.stats = SearchStats()
        self._order = {slot.id: position for position, slot in enumerate(grid.slots)}
        self._rng: Optional[random.Random] = None
        self._pruned = False
        self._deadline: Optional[float] = None

    # ------------------------------------------------------------------
    # Public entrypoints
    # ------------------------------------------------------------------
    def search(self) -> SearchResult:
        self._reset()
        started = time.perf_counter()
        if self.config.time_limit is not None:
            self._deadline = started + self.config.time_limit

        stack: List[_Frame] = []
        try:
            status = self._run(stack)
        except SearchLimitReached as exc:
            LOGGER.warning("Search stopped early: %s", exc)
            self._unwind(stack)
            status = SearchStatus.INCONCLUSIVE
        finally:
            self.stats.elapsed = time.perf_counter() - started

        if status == SearchStatus.UNSOLVABLE and self._pruned:
            # Some candidates were never tried, so exhaustion proves nothing.
            status = SearchStatus.INCONCLUSIVE

        LOGGER.info(
            "Search %s after %d nodes, %d backtracks in %.2fs",
            status.value,
            self.stats.nodes,
            self.stats.backtracks,
            self.stats.elapsed,
        )
        assignment = self.assignment.copy() if status == SearchStatus.SOLVED else None
        return SearchResult(status=status, assignment=assignment, stats=self.stats)

    def solve(self) -> Assignment:
        """Return a complete assignment or raise the reason there is none."""

        result = self.search()
        if result.assignment is not None:
            return result.assignment
        if result.status == SearchStatus.UNSOLVABLE:
            raise Unsolvable(
                f"No fill exists for {len(self.grid)} slots with {len(self.index)} words"
            )
        raise SearchLimitReached(
            f"Search gave up after {result.stats.nodes} nodes and {result.stats.elapsed:.2f}s"
        )

    # ------------------------------------------------------------------
    # Search loop
    # ------------------------------------------------------------------
    def _run(self, stack: List[_Frame]) -> SearchStatus:
        frame = self._open_frame()
        if frame is None:
            return SearchStatus.SOLVED
        stack.append(frame)

        while stack:
            self._check_limits()
            frame = stack[-1]
            if frame.current is not None:
                self._undo(frame)
            word = next(frame.candidates, None)
            if word is None:
                stack.pop()
                continue
            self._apply(frame, word)
            child = self._open_frame()
            if child is None:
                return SearchStatus.SOLVED
            stack.append(child)
        return SearchStatus.UNSOLVABLE

    def _open_frame(self) -> Optional[_Frame]:
        """Select the most constrained open slot; ``None`` once every slot is filled."""

        best: Optional[Slot] = None
        best_key = None
        for slot in self.grid.slots:
            if self.assignment.is_assigned(slot.id):
                continue
            count = self.evaluator.count_for(slot, self.assignment, self.used_words)
            key = (count, -slot.length, self._order[slot.id])
            if best_key is None or key < best_key:
                best, best_key = slot, key
            if count == 0:
                break
        if best is None:
            return None

        self.stats.nodes += 1
        if best_key[0] == 0:
            self.stats.dead_ends += 1
            LOGGER.debug("Dead end at slot %s after %d assignments", best.id, len(self.assignment))
            return _Frame(slot=best, candidates=iter(()))

        candidates = self.evaluator.candidates_for(best, self.assignment, self.used_words)
        if self._rng is not None:
            self._rng.shuffle(candidates)
        limit = self.config.candidate_limit
        if limit is not None and len(candidates) > limit:
            candidates = candidates[:limit]
            self._pruned = True
        return _Frame(slot=best, candidates=iter(candidates))

    def _apply(self, frame: _Frame, word: str) -> None:
        self.assignment.assign(frame.slot.id, word)
        if not self.config.allow_repeats:
            self.used_words.add(word)
        frame.current = word

    def _undo(self, frame: _Frame) -> None:
        word = self._release(frame)
        self.stats.backtracks += 1
        if self.on_backtrack is not None:
            self.on_backtrack(frame.slot.id, word)

    def _release(self, frame: _Frame) -> str:
        word = self.assignment.unassign(frame.slot.id)
        if not self.config.allow_repeats:
            self.used_words.remove(word)
        frame.current = None
        return word

    def _unwind(self, stack: List[_Frame]) -> None:
        while stack:
            frame = stack.pop()
            if frame.current is not None:
                self._release(frame)

    def _check_limits(self) -> None:
        max_nodes = self.config.max_nodes
        if max_nodes is not None and self.stats.nodes > max_nodes:
            raise SearchLimitReached(f"node limit {max_nodes} reached")
        if self._deadline is not None and time.perf_counter() >= self._deadline:
            raise SearchLimitReached(f"time limit {self.config.time_limit}s reached")

    def _reset(self) -> None:
        self.assignment = Assignment()
        self.used_words = UsedWords(self.index)
        self.stats = SearchStats()
        self._pruned = False
        self._deadline = None
        seed = self.config.shuffle_seed
        self._rng = random.Random(seed) if seed is not None else None
