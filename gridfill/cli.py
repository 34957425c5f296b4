"""CLI entrypoint for the crossword grid filler."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .core.exceptions import (DictionaryLoadError, EmptyDictionaryError, InvalidGridError,
                              SearchLimitReached, Unsolvable)
from .engine.filler import BACKENDS, FillerConfig, FillResult, GridFiller
from .utils.logger import configure_logging, get_logger
from .utils.pretty import format_solution, print_fill_stats

LOGGER = get_logger(__name__)

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_UNSOLVABLE = 2
EXIT_INCONCLUSIVE = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fill in empty crossword grids with dictionary words",
    )
    parser.add_argument(
        "-g",
        "--grid",
        type=Path,
        default=Path("./assets/grid1.txt"),
        help="The file to load the grid from ('#' blocked, '.' open)",
    )
    parser.add_argument(
        "-d",
        "--dict",
        dest="dictionary",
        type=Path,
        default=Path("./assets/words.txt"),
        help="The file to load the dictionary from",
    )
    parser.add_argument(
        "-r",
        "--ranked",
        action="store_true",
        help="Use this flag if the dictionary is ranked (WORD;SCORE per line)",
    )
    parser.add_argument(
        "--allow-repeats",
        action="store_true",
        help="Allow the same word in more than one slot",
    )
    parser.add_argument(
        "--backend",
        choices=BACKENDS,
        default="backtracking",
        help="Search backend",
    )
    parser.add_argument("--seed", type=int, default=None, help="Shuffle candidates with this seed")
    parser.add_argument(
        "--time-limit",
        type=float,
        default=None,
        help="Give up an attempt after this many seconds",
    )
    parser.add_argument(
        "--max-nodes",
        type=int,
        default=None,
        help="Give up an attempt after this many search nodes",
    )
    parser.add_argument(
        "--candidate-limit",
        type=int,
        default=None,
        help="Try at most this many candidates per slot (makes the search incomplete)",
    )
    parser.add_argument(
        "--restarts",
        type=int,
        default=0,
        help="Extra reshuffled attempts after an inconclusive one",
    )
    parser.add_argument(
        "--min-slot-length",
        type=int,
        default=2,
        help="Shortest run of open cells treated as a slot",
    )
    parser.add_argument(
        "--strip-punctuation",
        action="store_true",
        help="Remove non-letters from dictionary entries instead of dropping them",
    )
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument("--stats", action="store_true", help="Print fill statistics")
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def result_payload(result: FillResult) -> Dict[str, Any]:
    rows: List[str] = format_solution(result.grid, result.assignment).splitlines()
    return {
        "status": "SOLVED",
        "grid": rows,
        "slots": [
            {
                "id": slot.id,
                "number": slot.number,
                "direction": slot.direction.value,
                "start": list(slot.start),
                "length": slot.length,
                "word": word,
            }
            for slot, word in result.entries()
        ],
        "average_score": result.average_score,
        "attempts": result.attempts,
        "stats": {
            "nodes": result.stats.nodes,
            "backtracks": result.stats.backtracks,
            "dead_ends": result.stats.dead_ends,
            "elapsed": round(result.stats.elapsed, 4),
        },
        "validation": result.validation_messages,
    }


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.WARNING)
    configure_logging(level)

    if args.restarts < 0:
        parser.error("--restarts must be zero or positive")
    if args.candidate_limit is not None and args.candidate_limit < 1:
        parser.error("--candidate-limit must be at least 1")

    config = FillerConfig(
        grid_path=args.grid,
        dictionary_path=args.dictionary,
        ranked=args.ranked,
        allow_repeats=args.allow_repeats,
        backend=args.backend,
        seed=args.seed,
        time_limit=args.time_limit,
        max_nodes=args.max_nodes,
        candidate_limit=args.candidate_limit,
        restarts=args.restarts,
        min_slot_length=args.min_slot_length,
        strip_punctuation=args.strip_punctuation,
    )

    try:
        result = GridFiller(config).fill()
    except (InvalidGridError, EmptyDictionaryError, DictionaryLoadError) as exc:
        LOGGER.debug("Input rejected", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except Unsolvable as exc:
        print(f"unsolvable: {exc}", file=sys.stderr)
        return EXIT_UNSOLVABLE
    except SearchLimitReached as exc:
        print(f"gave up: {exc}", file=sys.stderr)
        return EXIT_INCONCLUSIVE

    if args.output:
        output_text = json.dumps(result_payload(result), ensure_ascii=False, indent=2)
        args.output.write_text(output_text, encoding="utf-8")
    print(format_solution(result.grid, result.assignment))
    if args.stats:
        print()
        print_fill_stats(result)
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
