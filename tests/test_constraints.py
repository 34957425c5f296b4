import unittest

from gridfill.core.models import Assignment
from gridfill.data.dictionary import WordIndex
from gridfill.engine.constraints import ConstraintEvaluator
from gridfill.engine.grid import GridModel, parse_grid_text


def build(*rows: str) -> GridModel:
    return GridModel.build(parse_grid_text("\n".join(rows)))


class ConstraintEvaluatorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.plus = build("#.#", "...", "#.#")
        self.index = WordIndex.load(["CAT", "BAT", "DOG", "TAP"])

    def test_fixed_letters_come_from_assigned_partners(self) -> None:
        evaluator = ConstraintEvaluator(self.plus, self.index)
        assignment = Assignment({"2A": "CAT"})
        self.assertEqual(evaluator.fixed_letters("1D", assignment), {1: "A"})
        self.assertEqual(evaluator.fixed_letters("2A", assignment), {})

    def test_fixed_letters_map_into_queried_slot_frame(self) -> None:
        grid = build("..", "#.")
        evaluator = ConstraintEvaluator(grid, WordIndex.load(["AT", "TO"]))
        self.assertEqual(evaluator.fixed_letters("2D", Assignment({"1A": "AT"})), {0: "T"})
        self.assertEqual(evaluator.fixed_letters("1A", Assignment({"2D": "TO"})), {1: "T"})

    def test_candidates_exclude_used_words(self) -> None:
        evaluator = ConstraintEvaluator(self.plus, self.index)
        assignment = Assignment({"2A": "CAT"})
        slot = self.plus.slot("1D")
        self.assertEqual(evaluator.candidates_for(slot, assignment, {"CAT"}), ["BAT", "TAP"])
        self.assertEqual(evaluator.count_for(slot, assignment, {"CAT"}), 2)

    def test_repeats_policy_keeps_used_words(self) -> None:
        evaluator = ConstraintEvaluator(self.plus, self.index, allow_repeats=True)
        assignment = Assignment({"2A": "CAT"})
        slot = self.plus.slot("1D")
        self.assertEqual(evaluator.candidates_for(slot, assignment, {"CAT"}), ["CAT", "BAT", "TAP"])
        self.assertEqual(evaluator.count_for(slot, assignment, {"CAT"}), 3)

    def test_dead_end_is_an_empty_list(self) -> None:
        evaluator = ConstraintEvaluator(self.plus, self.index)
        assignment = Assignment({"2A": "DOG"})
        slot = self.plus.slot("1D")
        self.assertEqual(evaluator.candidates_for(slot, assignment, {"DOG"}), [])
        self.assertEqual(evaluator.count_for(slot, assignment, {"DOG"}), 0)

    def test_unconstrained_slot_gets_whole_length_bucket(self) -> None:
        evaluator = ConstraintEvaluator(self.plus, self.index)
        slot = self.plus.slot("2A")
        self.assertEqual(
            evaluator.candidates_for(slot, Assignment(), set()),
            ["CAT", "BAT", "DOG", "TAP"],
        )

    def test_is_consistent(self) -> None:
        evaluator = ConstraintEvaluator(self.plus, self.index)
        assignment = Assignment({"2A": "CAT"})
        slot = self.plus.slot("1D")
        self.assertTrue(evaluator.is_consistent(slot, "BAT", assignment))
        self.assertFalse(evaluator.is_consistent(slot, "DOG", assignment))
        self.assertFalse(evaluator.is_consistent(slot, "BATS", assignment))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
