"""Terminal output for solve results."""

from __future__ import annotations

from typing import Optional

import typer

from .errors import InvalidGridError, SearchLimitError, SudokuError, UnsolvableError
from .grid import Board, ClueGrid, format_row, rule_line

FILLED_COLOR = typer.colors.BLUE


def format_solution(board: Board, clues: Optional[ClueGrid], box_size: int) -> str:
    """Render the board, styling the digits the solver filled in."""
    size = len(board)
    width = len(str(size))
    lines = []
    for r, row in enumerate(board):
        if r % box_size == 0 and r:
            lines.append(rule_line(size))
        cells = []
        for c, value in enumerate(row):
            text = (str(value) if value else ".").rjust(width)
            if clues is not None and value and not clues[r][c]:
                text = typer.style(text, fg=FILLED_COLOR)
            cells.append(text)
        lines.append(format_row(cells, box_size))
    return "\n".join(lines)


def print_solution(board: Board, clues: Optional[ClueGrid], box_size: int) -> None:
    typer.echo(format_solution(board, clues, box_size))


def describe_failure(error: SudokuError) -> str:
    if isinstance(error, InvalidGridError):
        kind = "Invalid grid"
    elif isinstance(error, UnsolvableError):
        kind = "Unsolvable grid"
    elif isinstance(error, SearchLimitError):
        kind = "Search aborted"
    else:
        kind = "Error"
    return f"{kind}: {error}"


def print_failure(error: SudokuError) -> None:
    typer.echo(describe_failure(error), err=True)
