"""Deterministic rule validation for filled grids."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Set

from ..core.exceptions import ValidationError
from ..core.models import Assignment
from ..data.dictionary import WordIndex
from ..utils.logger import get_logger
from .grid import GridModel

LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


class FillValidator:
    """Runs deterministic validation over a finished assignment."""

    def __init__(self, index: WordIndex, allow_repeats: bool = False) -> None:
        self.index = index
        self.allow_repeats = allow_repeats

    def validate(self, grid: GridModel, assignment: Assignment) -> ValidationResult:
        try:
            self._check_complete(grid, assignment)
            self._check_words(grid, assignment)
            self._check_crossings(grid, assignment)
            if not self.allow_repeats:
                self._check_no_duplicate_words(grid, assignment)
        except ValidationError as exc:
            LOGGER.error("Validation failed: %s", exc)
            return ValidationResult(ok=False, messages=[str(exc)])
        return ValidationResult(ok=True, messages=[])

    def _check_complete(self, grid: GridModel, assignment: Assignment) -> None:
        missing = [slot.id for slot in grid.slots if not assignment.is_assigned(slot.id)]
        if missing:
            raise ValidationError(f"Unfilled slots: {', '.join(missing)}")
        known = {slot.id for slot in grid.slots}
        unknown = [slot_id for slot_id in assignment if slot_id not in known]
        if unknown:
            raise ValidationError(f"Assignment names unknown slots: {', '.join(unknown)}")

    def _check_words(self, grid: GridModel, assignment: Assignment) -> None:
        for slot in grid.slots:
            word = assignment.get(slot.id) or ""
            if len(word) != slot.length:
                raise ValidationError(
                    f"Word '{word}' in {slot.id} has length {len(word)}, expected {slot.length}"
                )
            if not self.index.contains(word):
                raise ValidationError(f"Word '{word}' in {slot.id} is not in the dictionary")

    def _check_crossings(self, grid: GridModel, assignment: Assignment) -> None:
        for crossing in grid.crossings:
            across = assignment.get(crossing.slot_a) or ""
            down = assignment.get(crossing.slot_b) or ""
            if across[crossing.index_a] != down[crossing.index_b]:
                raise ValidationError(
                    f"Crossing mismatch between {crossing.slot_a} and {crossing.slot_b}: "
                    f"'{across[crossing.index_a]}' != '{down[crossing.index_b]}'"
                )

    def _check_no_duplicate_words(self, grid: GridModel, assignment: Assignment) -> None:
        seen: Set[str] = set()
        for slot in grid.slots:
            word = assignment.get(slot.id) or ""
            if word in seen:
                raise ValidationError(f"Duplicate word '{word}' at {slot.id}")
            seen.add(word)
