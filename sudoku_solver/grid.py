"""Text helpers for reading, writing and checking Sudoku boards."""

from __future__ import annotations

import math
from typing import Iterable, List, Sequence, Tuple

from .errors import ConfigurationError

Board = List[List[int]]
ClueGrid = Tuple[Tuple[int, ...], ...]

DEFAULT_SIZE = 9
EMPTY_MARKERS = {".", "_", "-"}


def box_size_for(size: int) -> int:
    """Return the box edge for an N x N grid, rejecting non-square N."""
    if size < 1:
        raise ConfigurationError(f"invalid grid size: {size}")
    base = math.isqrt(size)
    if base * base != size:
        raise ConfigurationError(
            f"invalid grid size: {size} (only perfect squares such as 4, 9, 16)"
        )
    return base


def parse_puzzle(puzzle: Sequence[str], size: int = DEFAULT_SIZE) -> Board:
    """Convert a flat iterable of characters into a size x size board."""
    if size > 9:
        raise ConfigurationError(
            f"puzzle strings hold one digit per cell; use CSV for size {size}"
        )
    digits = []
    for ch in puzzle:
        if ch.isdecimal():
            digits.append(int(ch))
        elif ch in EMPTY_MARKERS:
            digits.append(0)
    cells = size * size
    if len(digits) != cells:
        raise ValueError(f"Sudoku puzzle must yield {cells} cells, got {len(digits)}")
    return [digits[i : i + size] for i in range(0, cells, size)]


def serialize_board(board: Board) -> str:
    """Return board as a single string for easy comparison."""
    return "".join(str(cell) for row in board for cell in row)


def parse_csv(text: str) -> Board:
    """Read one board row per line; blank fields and 0 are empty cells."""
    board: Board = []
    for line_no, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        row = []
        for field in line.split(","):
            raw = field.strip()
            if raw == "":
                row.append(0)
            elif raw.isdecimal():
                row.append(int(raw))
            else:
                raise ValueError(f"line {line_no}: '{raw}' is not a number")
        board.append(row)
    if not board:
        raise ValueError("CSV contains no rows")
    return board


def board_to_csv(board: Board) -> str:
    lines = [",".join(str(v) for v in row) for row in board]
    return "\n".join(lines) + "\n"


def snapshot(board: Iterable[Iterable[int]]) -> ClueGrid:
    return tuple(tuple(row) for row in board)


def rule_line(size: int) -> str:
    base = box_size_for(size)
    width = len(str(size))
    segment = "-" * (base * (width + 1) - 1)
    return "-+-".join([segment] * base)


def format_row(row: Sequence[str], base: int) -> str:
    chunks = []
    for c, text in enumerate(row):
        if c % base == 0 and c:
            chunks.append("|")
        chunks.append(text)
    return " ".join(chunks)


def pretty_board(board: Board) -> str:
    size = len(board)
    base = box_size_for(size)
    width = len(str(size))
    lines = []
    for r, row in enumerate(board):
        if r % base == 0 and r:
            lines.append(rule_line(size))
        cells = [(str(value) if value else ".").rjust(width) for value in row]
        lines.append(format_row(cells, base))
    return "\n".join(lines)


def is_complete(board: Board) -> bool:
    return all(cell != 0 for row in board for cell in row)


def is_valid_solution(board: Board) -> bool:
    """Check that every row, column and box is a permutation of 1..N."""
    size = len(board)
    if any(len(row) != size for row in board):
        return False
    base = box_size_for(size)
    expected = set(range(1, size + 1))

    for i in range(size):
        if set(board[i]) != expected:
            return False
        if {board[r][i] for r in range(size)} != expected:
            return False

    for box_row in range(0, size, base):
        for box_col in range(0, size, base):
            box = {
                board[r][c]
                for r in range(box_row, box_row + base)
                for c in range(box_col, box_col + base)
            }
            if box != expected:
                return False
    return True


__all__ = [
    "Board",
    "ClueGrid",
    "DEFAULT_SIZE",
    "box_size_for",
    "parse_puzzle",
    "serialize_board",
    "parse_csv",
    "board_to_csv",
    "snapshot",
    "format_row",
    "rule_line",
    "pretty_board",
    "is_complete",
    "is_valid_solution",
]
