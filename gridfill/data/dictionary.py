"""Dictionary loading and pattern-constrained candidate retrieval."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import (AbstractSet, Collection, Dict, FrozenSet, Iterable, Iterator, List,
                    Mapping, Optional, Sequence, Set, Tuple)

from ..core.exceptions import DictionaryLoadError, EmptyDictionaryError
from ..utils.logger import get_logger
from .normalization import clean_word

LOGGER = get_logger(__name__)

_EMPTY: FrozenSet[int] = frozenset()


@dataclass
class DictionaryConfig:
    """Configuration for dictionary loading and filtering."""

    path: Path | str | None = None
    ranked: bool = False
    separator: str = ";"
    min_length: int = 2
    max_length: Optional[int] = None
    min_score: Optional[float] = None
    strip_punctuation: bool = False


@dataclass(frozen=True)
class WordEntry:
    """A normalized dictionary entry; ``id`` doubles as its candidate rank."""

    id: int
    surface: str
    score: Optional[float] = None

    @property
    def length(self) -> int:
        return len(self.surface)


class WordIndex:
    """Words partitioned by length with a ``(position, letter)`` index per length.

    Word IDs follow candidate order (best score first for ranked lists, load
    order otherwise), so any query answered in ascending ID order is
    deterministic. All lookup tables are frozen once the index is built.
    """

    def __init__(self, entries: Sequence[WordEntry], ranked: bool = False) -> None:
        if not entries:
            raise EmptyDictionaryError("Dictionary contains no usable words")
        self.ranked = ranked
        self._entries: Tuple[WordEntry, ...] = tuple(entries)
        self._ids: Dict[str, int] = {entry.surface: entry.id for entry in self._entries}

        ids_by_length: Dict[int, List[int]] = defaultdict(list)
        position_index: Dict[int, Dict[Tuple[int, str], Set[int]]] = defaultdict(
            lambda: defaultdict(set)
        )
        for entry in self._entries:
            ids_by_length[entry.length].append(entry.id)
            length_index = position_index[entry.length]
            for pos, char in enumerate(entry.surface):
                length_index[(pos, char)].add(entry.id)

        self._ids_by_length: Dict[int, Tuple[int, ...]] = {
            length: tuple(ids) for length, ids in ids_by_length.items()
        }
        self._bucket_sets: Dict[int, FrozenSet[int]] = {
            length: frozenset(ids) for length, ids in ids_by_length.items()
        }
        self._position_index: Dict[int, Dict[Tuple[int, str], FrozenSet[int]]] = {
            length: {key: frozenset(ids) for key, ids in length_index.items()}
            for length, length_index in position_index.items()
        }

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    @classmethod
    def load(
        cls,
        words: Iterable[str],
        config: Optional[DictionaryConfig] = None,
        scores: Optional[Sequence[float]] = None,
    ) -> "WordIndex":
        """Normalize ``words`` and build an index over the valid ones.

        Malformed entries are dropped, never fatal. ``scores`` (parallel to
        ``words``) turns the index into a ranked one.
        """

        config = config or DictionaryConfig()
        words = list(words)
        if scores is not None and len(scores) != len(words):
            raise ValueError(
                f"Got {len(scores)} scores for {len(words)} words"
            )

        kept: Dict[str, Tuple[int, Optional[float]]] = {}
        dropped = 0
        for position, raw in enumerate(words):
            score = scores[position] if scores is not None else None
            surface = clean_word(raw, config.strip_punctuation) if isinstance(raw, str) else ""
            if not surface or not _length_allowed(len(surface), config):
                dropped += 1
                LOGGER.debug("Dropping dictionary entry %r", raw)
                continue
            if config.min_score is not None and score is not None and score < config.min_score:
                dropped += 1
                continue
            existing = kept.get(surface)
            if existing is None:
                kept[surface] = (position, score)
            elif score is not None and (existing[1] is None or score > existing[1]):
                kept[surface] = (existing[0], score)

        ranked = scores is not None
        ordered = list(kept.items())
        if ranked:
            ordered.sort(key=lambda item: (-(item[1][1] or 0.0), item[1][0]))

        entries = [
            WordEntry(id=word_id, surface=surface, score=score)
            for word_id, (surface, (_, score)) in enumerate(ordered)
        ]
        if not entries:
            raise EmptyDictionaryError(
                f"No usable words after normalization ({dropped} entries dropped)"
            )
        index = cls(entries, ranked=ranked)
        LOGGER.info(
            "Indexed %d words across %d lengths (%d entries dropped)",
            len(entries),
            len(index.lengths()),
            dropped,
        )
        return index

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def candidates(
        self,
        length: int,
        fixed: Optional[Mapping[int, str]] = None,
        exclude: Collection[str] = (),
    ) -> Iterator[str]:
        """Yield words of ``length`` matching ``fixed`` letters, in ID order.

        ``fixed`` maps a position to the letter required there; every other
        position is a wildcard. Words in ``exclude`` are skipped.
        """

        if fixed:
            ids: Iterable[int] = sorted(self._lookup(length, fixed))
        else:
            ids = self._ids_by_length.get(length, ())
        for word_id in ids:
            surface = self._entries[word_id].surface
            if surface in exclude:
                continue
            yield surface

    def count(
        self,
        length: int,
        fixed: Optional[Mapping[int, str]] = None,
        exclude: Collection[str] = (),
    ) -> int:
        """Return the number of :meth:`candidates` without materializing them.

        A :class:`UsedWords` exclusion is resolved through its ids of the same
        length; any other collection is checked word by word.
        """

        matching = self._lookup(length, fixed)
        total = len(matching)
        if not total or not exclude:
            return total
        if isinstance(exclude, UsedWords) and exclude.index is self:
            used = exclude.ids_of_length(length)
            if matching is self._bucket_sets.get(length):
                return total - len(used)
            return total - len(matching & used)
        for word in exclude:
            word_id = self._ids.get(word)
            if word_id is not None and word_id in matching:
                total -= 1
        return total

    def contains(self, word: str) -> bool:
        return clean_word(word) in self._ids

    def get(self, word: str) -> Optional[WordEntry]:
        word_id = self._ids.get(clean_word(word))
        return self._entries[word_id] if word_id is not None else None

    def word_id(self, surface: str) -> Optional[int]:
        """Return the id of an already normalized word, or ``None``."""

        return self._ids.get(surface)

    def score(self, word: str) -> Optional[float]:
        entry = self.get(word)
        return entry.score if entry else None

    def iter_length(self, length: int) -> Iterator[str]:
        return (self._entries[word_id].surface for word_id in self._ids_by_length.get(length, ()))

    def lengths(self) -> List[int]:
        return sorted(self._ids_by_length)

    def __len__(self) -> int:
        return len(self._entries)

    def _lookup(self, length: int, fixed: Optional[Mapping[int, str]]) -> AbstractSet[int]:
        """Intersect the positional index sets for every fixed letter."""

        length_index = self._position_index.get(length)
        if not length_index:
            return _EMPTY
        if not fixed:
            return self._bucket_sets[length]

        constraints: List[FrozenSet[int]] = []
        for pos, letter in fixed.items():
            match_set = length_index.get((pos, letter.upper()))
            if match_set is None:
                return _EMPTY
            constraints.append(match_set)

        # Intersect smallest sets first for speed
        constraints.sort(key=len)
        result = set(constraints[0])
        for other in constraints[1:]:
            result &= other
            if not result:
                break
        return result


class UsedWords(AbstractSet[str]):
    """Words placed so far, also tracked as index ids grouped by length.

    Behaves as a read-only set of words for callers; :meth:`WordIndex.count`
    uses the id groups to discount used words without walking them.
    """

    def __init__(self, index: WordIndex) -> None:
        self.index = index
        self._words: Set[str] = set()
        self._ids_by_length: Dict[int, Set[int]] = defaultdict(set)

    def add(self, word: str) -> None:
        if word in self._words:
            raise ValueError(f"Word {word!r} is already in use")
        self._words.add(word)
        word_id = self.index.word_id(word)
        if word_id is not None:
            self._ids_by_length[len(word)].add(word_id)

    def remove(self, word: str) -> None:
        self._words.remove(word)
        word_id = self.index.word_id(word)
        if word_id is not None:
            self._ids_by_length[len(word)].discard(word_id)

    def ids_of_length(self, length: int) -> AbstractSet[int]:
        return self._ids_by_length.get(length, _EMPTY)

    def __contains__(self, word: object) -> bool:
        return word in self._words

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __len__(self) -> int:
        return len(self._words)

    def __repr__(self) -> str:
        return f"UsedWords({sorted(self._words)!r})"


def _length_allowed(length: int, config: DictionaryConfig) -> bool:
    if length < config.min_length:
        return False
    return config.max_length is None or length <= config.max_length


def read_word_list(config: DictionaryConfig) -> Tuple[List[str], Optional[List[float]]]:
    """Read the word list file named by ``config.path``.

    One entry per line; blank lines and ``#`` comments are skipped. Ranked
    lists carry ``WORD<separator>SCORE`` (tabs are accepted too), and lines
    whose score does not parse are dropped.
    """

    if config.path is None:
        raise DictionaryLoadError("No dictionary path configured")
    source = Path(config.path)
    try:
        text = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DictionaryLoadError(f"Cannot read dictionary {source}: {exc}") from exc

    words: List[str] = []
    scores: List[float] = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if not config.ranked:
            words.append(line)
            continue
        separator = config.separator if config.separator in line else "\t"
        word, _, raw_score = line.rpartition(separator)
        try:
            score = float(raw_score)
        except ValueError:
            LOGGER.debug("Dropping ranked entry without score: %r", line)
            continue
        words.append(word)
        scores.append(score)
    return words, (scores if config.ranked else None)


def load_dictionary(config: DictionaryConfig) -> WordIndex:
    """Read and index the word list described by ``config``."""

    words, scores = read_word_list(config)
    LOGGER.info("Read %d dictionary lines from %s", len(words), config.path)
    return WordIndex.load(words, config=config, scores=scores)
