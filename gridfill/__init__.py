"""Crossword grid filler.

This package exposes the public API surface via:

- ``gridfill.engine.grid.GridModel``: turns a cell layout into slots and crossings.
- ``gridfill.data.dictionary.WordIndex``: normalizes and indexes candidate words.
- ``gridfill.engine.search.BacktrackingSearch``: fills every slot or proves it impossible.
- ``gridfill.engine.filler.GridFiller``: loads files and runs the search with restarts.
"""

from .data.dictionary import DictionaryConfig, WordIndex
from .engine.filler import FillerConfig, FillResult, GridFiller
from .engine.grid import GridConfig, GridModel
from .engine.search import BacktrackingSearch, SearchConfig, SearchResult, SearchStatus

__all__ = [
    "BacktrackingSearch",
    "DictionaryConfig",
    "FillerConfig",
    "FillResult",
    "GridConfig",
    "GridFiller",
    "GridModel",
    "SearchConfig",
    "SearchResult",
    "SearchStatus",
    "WordIndex",
]

__version__ = "0.1.0"
