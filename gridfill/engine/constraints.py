"""Candidate filtering for a slot under a partial assignment."""

from __future__ import annotations

from typing import AbstractSet, Collection, Dict, List

from ..core.models import Assignment, Slot
from ..data.dictionary import WordIndex
from .grid import GridModel


class ConstraintEvaluator:
    """Combines the grid's crossings with the dictionary index.

    Letters fixed in a slot come only from crossing partners that already hold
    a word. An empty candidate list is a dead end for the caller to back out
    of, never an error.
    """

    def __init__(self, grid: GridModel, index: WordIndex, allow_repeats: bool = False) -> None:
        self.grid = grid
        self.index = index
        self.allow_repeats = allow_repeats

    def fixed_letters(self, slot_id: str, assignment: Assignment) -> Dict[int, str]:
        fixed: Dict[int, str] = {}
        for index_in_slot, other_id, index_in_other in self.grid.crossings_for(slot_id):
            word = assignment.get(other_id)
            if word is not None:
                fixed[index_in_slot] = word[index_in_other]
        return fixed

    def candidates_for(
        self,
        slot: Slot,
        assignment: Assignment,
        used_words: AbstractSet[str],
    ) -> List[str]:
        fixed = self.fixed_letters(slot.id, assignment)
        return list(self.index.candidates(slot.length, fixed, self._excluded(used_words)))

    def count_for(self, slot: Slot, assignment: Assignment, used_words: AbstractSet[str]) -> int:
        fixed = self.fixed_letters(slot.id, assignment)
        return self.index.count(slot.length, fixed, self._excluded(used_words))

    def is_consistent(self, slot: Slot, word: str, assignment: Assignment) -> bool:
        """Check ``word`` against the letters of assigned crossing partners."""

        if len(word) != slot.length:
            return False
        return all(
            word[index] == letter
            for index, letter in self.fixed_letters(slot.id, assignment).items()
        )

    def _excluded(self, used_words: AbstractSet[str]) -> Collection[str]:
        return () if self.allow_repeats else used_words
