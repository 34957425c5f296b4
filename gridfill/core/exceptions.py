"""Custom exception hierarchy for grid filling."""


class GridFillError(Exception):
    """Base exception for grid filling failures."""


class InvalidGridError(GridFillError):
    """Raised when the grid is empty, non-rectangular or has no slots."""


class GridLoadError(InvalidGridError):
    """Raised when a grid file cannot be read."""


class EmptyDictionaryError(GridFillError):
    """Raised when no usable word survives dictionary normalization."""


class DictionaryLoadError(GridFillError):
    """Raised when the word list file cannot be read."""


class Unsolvable(GridFillError):
    """Raised when the search space is exhausted without a complete fill."""


class SearchLimitReached(GridFillError):
    """Raised when a node, time or pruning limit stops the search before a verdict."""


class ValidationError(GridFillError):
    """Raised when a finished fill breaks one of the grid rules."""
