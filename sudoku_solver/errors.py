"""Exceptions raised by the Sudoku solver."""

from __future__ import annotations


class SudokuError(Exception):
    """Base class for every solver failure."""

    default_message = "sudoku error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class ConfigurationError(SudokuError, ValueError):
    """Grid size has no exact integer square root."""

    default_message = "grid size must be a perfect square"


class InvalidGridError(SudokuError, ValueError):
    """Supplied grid breaks sudoku rules or has the wrong shape."""

    default_message = "grid breaks sudoku rules"


class UnsolvableError(SudokuError, ValueError):
    """Grid is consistent but no completion exists."""

    default_message = "grid has no solution"


class SearchLimitError(SudokuError):
    """Backtracking gave up after the configured number of placements."""

    default_message = "search step limit exceeded"


__all__ = [
    "SudokuError",
    "ConfigurationError",
    "InvalidGridError",
    "UnsolvableError",
    "SearchLimitError",
]
