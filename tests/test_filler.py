import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from gridfill.core.exceptions import InvalidGridError, SearchLimitReached, Unsolvable
from gridfill.core.models import Assignment
from gridfill.data.dictionary import WordIndex
from gridfill.engine.filler import DEFAULT_CPSAT_TIMEOUT, FillerConfig, GridFiller
from gridfill.engine.grid import GridModel, parse_grid_text
from gridfill.engine.search import SearchResult, SearchStats, SearchStatus


class FillerConfigTests(unittest.TestCase):
    def test_first_attempt_is_deterministic_without_seed(self) -> None:
        config = FillerConfig(max_nodes=10, allow_repeats=True)
        search_config = config.to_search_config(0)
        self.assertIsNone(search_config.shuffle_seed)
        self.assertEqual(search_config.max_nodes, 10)
        self.assertTrue(search_config.allow_repeats)

    def test_restarts_derive_new_shuffle_seeds(self) -> None:
        self.assertEqual(FillerConfig().to_search_config(2).shuffle_seed, 2)
        self.assertEqual(FillerConfig(seed=40).to_search_config(0).shuffle_seed, 40)
        self.assertEqual(FillerConfig(seed=40).to_search_config(1).shuffle_seed, 41)

    def test_sub_configs(self) -> None:
        config = FillerConfig(dictionary_path="words.txt", ranked=True, min_slot_length=3)
        self.assertEqual(config.to_grid_config().min_slot_length, 3)
        dictionary_config = config.to_dictionary_config()
        self.assertTrue(dictionary_config.ranked)
        self.assertEqual(dictionary_config.path, "words.txt")


class GridFillerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.plus = GridModel.build(parse_grid_text("#.#\n...\n#.#"))

    def test_fill_from_files(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            grid_path = Path(tmpdir) / "grid.txt"
            grid_path.write_text("3, 3\n#.#\n...\n#.#\n", encoding="utf-8")
            dict_path = Path(tmpdir) / "words.txt"
            dict_path.write_text("cat;10\nbat;40\ntap;30\n", encoding="utf-8")
            config = FillerConfig(grid_path=grid_path, dictionary_path=dict_path, ranked=True)
            result = GridFiller(config).fill()

        self.assertEqual(result.attempts, 1)
        self.assertEqual(result.validation_messages, [])
        self.assertEqual(result.assignment.as_dict(), {"1D": "BAT", "2A": "TAP"})
        self.assertAlmostEqual(result.average_score, 35.0)
        self.assertEqual([slot.id for slot, _ in result.entries()], ["1D", "2A"])

    def test_unranked_dictionary_has_no_average_score(self) -> None:
        index = WordIndex.load(["CAT", "BAT"])
        result = GridFiller(FillerConfig(), grid=self.plus, dictionary=index).fill()
        self.assertIsNone(result.average_score)

    def test_unsolvable_grid_raises(self) -> None:
        index = WordIndex.load(["CAT", "DOG", "TIP"])
        filler = GridFiller(FillerConfig(restarts=3), grid=self.plus, dictionary=index)
        with self.assertRaises(Unsolvable):
            filler.fill()

    def test_inconclusive_attempts_raise_after_restarts(self) -> None:
        index = WordIndex.load(["CAT", "DOG", "TIP"])
        config = FillerConfig(max_nodes=2, restarts=2)
        with self.assertRaises(SearchLimitReached):
            GridFiller(config, grid=self.plus, dictionary=index).fill()

    def test_restart_after_inconclusive_attempt(self) -> None:
        grid = GridModel.build(parse_grid_text(".."))
        index = WordIndex.load(["AT", "NO"])
        solved = SearchResult(
            status=SearchStatus.SOLVED,
            assignment=Assignment({"1A": "NO"}),
            stats=SearchStats(nodes=1),
        )
        with patch("gridfill.engine.filler.BacktrackingSearch") as search_cls:
            search_cls.return_value.search.side_effect = [
                SearchResult(status=SearchStatus.INCONCLUSIVE),
                solved,
            ]
            result = GridFiller(FillerConfig(restarts=1), grid=grid, dictionary=index).fill()

        self.assertEqual(result.attempts, 2)
        self.assertEqual(result.assignment.get("1A"), "NO")
        second_config = search_cls.call_args_list[1].args[2]
        self.assertEqual(second_config.shuffle_seed, 1)

    def test_cpsat_backend(self) -> None:
        index = WordIndex.load(["CAT", "BAT", "DOG"])
        config = FillerConfig(backend="cpsat", time_limit=10)
        result = GridFiller(config, grid=self.plus, dictionary=index).fill()
        self.assertEqual(result.validation_messages, [])

    def test_cpsat_timeout_follows_time_limit(self) -> None:
        index = WordIndex.load(["CAT", "BAT"])
        solved = SearchResult(
            status=SearchStatus.SOLVED,
            assignment=Assignment({"1D": "CAT", "2A": "BAT"}),
        )
        with patch("gridfill.engine.cpsat.solve_with_cpsat", return_value=solved) as solver:
            GridFiller(FillerConfig(backend="cpsat", time_limit=0), grid=self.plus, dictionary=index).fill()
            GridFiller(FillerConfig(backend="cpsat"), grid=self.plus, dictionary=index).fill()

        self.assertEqual(solver.call_args_list[0].kwargs["timeout"], 0)
        self.assertEqual(solver.call_args_list[1].kwargs["timeout"], DEFAULT_CPSAT_TIMEOUT)

    def test_unknown_backend_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            GridFiller(FillerConfig(backend="sat"), grid=self.plus, dictionary=WordIndex.load(["AT"]))

    def test_missing_grid_is_invalid(self) -> None:
        with self.assertRaises(InvalidGridError):
            GridFiller(FillerConfig(), dictionary=WordIndex.load(["AT"]))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
