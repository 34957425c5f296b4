"""High-level orchestration: load inputs, search with restarts, validate."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from ..core.exceptions import InvalidGridError, SearchLimitReached, Unsolvable
from ..core.models import Assignment, Slot
from ..data.dictionary import DictionaryConfig, WordIndex, load_dictionary
from ..utils.logger import get_logger
from .grid import GridConfig, GridModel, load_grid
from .search import BacktrackingSearch, SearchConfig, SearchResult, SearchStats, SearchStatus
from .validator import FillValidator

LOGGER = get_logger(__name__)

BACKENDS = ("backtracking", "cpsat")
DEFAULT_CPSAT_TIMEOUT = 30.0


@dataclass
class FillerConfig:
    grid_path: Path | str | None = None
    dictionary_path: Path | str | None = None
    ranked: bool = False
    allow_repeats: bool = False
    backend: str = "backtracking"
    seed: Optional[int] = None
    time_limit: Optional[float] = None
    max_nodes: Optional[int] = None
    candidate_limit: Optional[int] = None
    restarts: int = 0
    min_slot_length: int = 2
    strip_punctuation: bool = False

    def to_grid_config(self) -> GridConfig:
        return GridConfig(min_slot_length=self.min_slot_length)

    def to_dictionary_config(self) -> DictionaryConfig:
        return DictionaryConfig(
            path=self.dictionary_path,
            ranked=self.ranked,
            strip_punctuation=self.strip_punctuation,
        )

    def to_search_config(self, attempt: int = 0) -> SearchConfig:
        """Search settings for the given attempt.

        The first attempt shuffles only when a seed is configured; every
        restart shuffles with a seed derived from the attempt number, since
        repeating the deterministic order would repeat the same run.
        """

        if attempt == 0:
            shuffle_seed = self.seed
        else:
            shuffle_seed = (self.seed or 0) + attempt
        return SearchConfig(
            allow_repeats=self.allow_repeats,
            max_nodes=self.max_nodes,
            time_limit=self.time_limit,
            candidate_limit=self.candidate_limit,
            shuffle_seed=shuffle_seed,
        )


@dataclass
class FillResult:
    grid: GridModel
    assignment: Assignment
    stats: SearchStats
    attempts: int
    average_score: Optional[float] = None
    validation_messages: List[str] = field(default_factory=list)

    def entries(self) -> List[Tuple[Slot, str]]:
        return [(slot, self.assignment.get(slot.id) or "") for slot in self.grid.slots]


class GridFiller:
    """Wires a grid and a dictionary into the configured search backend."""

    def __init__(
        self,
        config: FillerConfig,
        grid: Optional[GridModel] = None,
        dictionary: Optional[WordIndex] = None,
    ) -> None:
        if config.backend not in BACKENDS:
            raise ValueError(f"Unknown backend {config.backend!r}; expected one of {BACKENDS}")
        self.config = config
        if grid is None:
            if config.grid_path is None:
                raise InvalidGridError("No grid given and no grid path configured")
            grid = load_grid(config.grid_path, config.to_grid_config())
        self.grid = grid
        self.dictionary = dictionary or load_dictionary(config.to_dictionary_config())
        self.validator = FillValidator(self.dictionary, allow_repeats=config.allow_repeats)

    # ------------------------------------------------------------------
    # Public entrypoint
    # ------------------------------------------------------------------
    def fill(self) -> FillResult:
        total = self.config.restarts + 1
        last_nodes = 0
        for attempt in range(total):
            LOGGER.info("Fill attempt %s/%s (%s)", attempt + 1, total, self.config.backend)
            result = self._run_backend(attempt)
            if result.assignment is not None:
                return self._finish(result.assignment, result.stats, attempt + 1)
            if result.status == SearchStatus.UNSOLVABLE:
                raise Unsolvable(
                    f"No fill exists for {len(self.grid)} slots with {len(self.dictionary)} words"
                )
            last_nodes = result.stats.nodes
            LOGGER.warning("Attempt %s/%s was inconclusive", attempt + 1, total)

        raise SearchLimitReached(
            f"No verdict after {total} attempt(s); last run explored {last_nodes} nodes"
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _run_backend(self, attempt: int) -> SearchResult:
        if self.config.backend == "cpsat":
            from .cpsat import solve_with_cpsat

            timeout = self.config.time_limit
            return solve_with_cpsat(
                self.grid,
                self.dictionary,
                allow_repeats=self.config.allow_repeats,
                timeout=DEFAULT_CPSAT_TIMEOUT if timeout is None else timeout,
            )
        search = BacktrackingSearch(self.grid, self.dictionary, self.config.to_search_config(attempt))
        return search.search()

    def _finish(self, assignment: Assignment, stats: SearchStats, attempts: int) -> FillResult:
        validation = self.validator.validate(self.grid, assignment)
        return FillResult(
            grid=self.grid,
            assignment=assignment,
            stats=stats,
            attempts=attempts,
            average_score=self._average_score(assignment),
            validation_messages=validation.messages,
        )

    def _average_score(self, assignment: Assignment) -> Optional[float]:
        if not self.dictionary.ranked:
            return None
        scores = [self.dictionary.score(word) for _, word in assignment.items()]
        known = [score for score in scores if score is not None]
        if not known:
            return None
        return sum(known) / len(known)
