import unittest

from gridfill.core.models import Assignment
from gridfill.data.dictionary import WordIndex
from gridfill.engine.grid import GridModel, parse_grid_text
from gridfill.engine.validator import FillValidator


class FillValidatorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.grid = GridModel.build(parse_grid_text("#.#\n...\n#.#"))
        self.index = WordIndex.load(["CAT", "BAT", "TAP", "DOG"])
        self.validator = FillValidator(self.index)

    def test_valid_fill_passes(self) -> None:
        result = self.validator.validate(self.grid, Assignment({"1D": "BAT", "2A": "CAT"}))
        self.assertTrue(result.ok)
        self.assertEqual(result.messages, [])

    def test_unfilled_slot_fails(self) -> None:
        result = self.validator.validate(self.grid, Assignment({"2A": "CAT"}))
        self.assertFalse(result.ok)
        self.assertIn("Unfilled slots: 1D", result.messages[0])

    def test_unknown_slot_fails(self) -> None:
        assignment = Assignment({"1D": "BAT", "2A": "CAT", "9A": "DOG"})
        result = self.validator.validate(self.grid, assignment)
        self.assertFalse(result.ok)
        self.assertIn("9A", result.messages[0])

    def test_word_outside_dictionary_fails(self) -> None:
        result = self.validator.validate(self.grid, Assignment({"1D": "MAT", "2A": "CAT"}))
        self.assertFalse(result.ok)
        self.assertIn("not in the dictionary", result.messages[0])

    def test_wrong_length_fails(self) -> None:
        result = self.validator.validate(self.grid, Assignment({"1D": "BATS", "2A": "CAT"}))
        self.assertFalse(result.ok)
        self.assertIn("expected 3", result.messages[0])

    def test_crossing_mismatch_fails(self) -> None:
        result = self.validator.validate(self.grid, Assignment({"1D": "DOG", "2A": "CAT"}))
        self.assertFalse(result.ok)
        self.assertIn("Crossing mismatch", result.messages[0])

    def test_duplicate_word_depends_on_policy(self) -> None:
        assignment = Assignment({"1D": "CAT", "2A": "CAT"})
        self.assertFalse(self.validator.validate(self.grid, assignment).ok)
        relaxed = FillValidator(self.index, allow_repeats=True)
        self.assertTrue(relaxed.validate(self.grid, assignment).ok)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
