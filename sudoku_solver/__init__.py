"""Backtracking Sudoku solver with CLI and web front-ends."""

from .errors import (
    ConfigurationError,
    InvalidGridError,
    SearchLimitError,
    SudokuError,
    UnsolvableError,
)
from .grid import Board, ClueGrid, parse_puzzle, pretty_board, serialize_board
from .solver import Solver, solve_grid, solve_puzzle

__all__ = [
    "Board",
    "ClueGrid",
    "ConfigurationError",
    "InvalidGridError",
    "SearchLimitError",
    "Solver",
    "SudokuError",
    "UnsolvableError",
    "parse_puzzle",
    "pretty_board",
    "serialize_board",
    "solve_grid",
    "solve_puzzle",
]
