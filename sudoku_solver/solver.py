"""Backtracking Sudoku solver.

The solver works on the caller's grid in place: values are tried in
ascending order on the first empty cell found in row-major order, and a
cell is reset to 0 once all of its candidates have failed. Only the first
solution found under that order is returned.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from .errors import InvalidGridError, SearchLimitError, UnsolvableError
from .grid import DEFAULT_SIZE, Board, ClueGrid, box_size_for, parse_puzzle, snapshot

logger = logging.getLogger(__name__)


def check_shape(grid: Board, size: int) -> None:
    """Reject grids that are not size x size integers in 0..size."""
    if len(grid) != size:
        raise InvalidGridError(f"grid must have {size} rows, got {len(grid)}")
    for r, row in enumerate(grid):
        if not isinstance(row, list):
            raise InvalidGridError(f"row {r} must be a list, got {type(row).__name__}")
        if len(row) != size:
            raise InvalidGridError(f"row {r} must have {size} cells, got {len(row)}")
        for c, value in enumerate(row):
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidGridError(f"cell ({r},{c}) is not an integer: {value!r}")
            if value < 0 or value > size:
                raise InvalidGridError(
                    f"cell ({r},{c}) out of range: {value} (allowed 0..{size})"
                )


class Solver:
    """Fills the empty cells of one grid.

    ``clue_grid`` keeps the values as they were supplied so callers can tell
    clues apart from the digits written by the search.
    """

    def __init__(
        self,
        grid: Board,
        size: int = DEFAULT_SIZE,
        step_limit: Optional[int] = None,
    ) -> None:
        self.box_size = box_size_for(size)
        check_shape(grid, size)
        self.size = size
        self.grid = grid
        self.clue_grid: ClueGrid = snapshot(grid)
        self.step_limit = step_limit
        self.steps = 0

    def run(self) -> Board:
        """Validate, search and return the completed grid."""
        if self.has_mistakes():
            raise InvalidGridError()
        logger.debug("solving %dx%d grid", self.size, self.size)
        if not self.solve():
            logger.debug("no solution after %d placements", self.steps)
            raise UnsolvableError()
        logger.debug("solved after %d placements", self.steps)
        return self.grid

    def solve(self) -> bool:
        """Find one solution for the clues in the grid using backtracking."""
        empty = self.find_empty()
        if empty is None:
            return True
        row, col = empty

        for value in self.usable_values(row, col):
            self._count_step()
            self.grid[row][col] = value
            if self.solve():
                return True
        self.grid[row][col] = 0
        return False

    def find_empty(self) -> Optional[Tuple[int, int]]:
        for row_idx, row in enumerate(self.grid):
            for col_idx, value in enumerate(row):
                if value == 0:
                    return row_idx, col_idx
        return None

    def usable_values(self, row: int, col: int) -> List[int]:
        """Digits not yet present in the row, column or box of the cell."""
        used = set(self.grid[row])
        used.update(self.grid[r][col] for r in range(self.size))

        start_row = (row // self.box_size) * self.box_size
        start_col = (col // self.box_size) * self.box_size
        for r in range(start_row, start_row + self.box_size):
            used.update(self.grid[r][start_col : start_col + self.box_size])

        return [value for value in range(1, self.size + 1) if value not in used]

    def has_mistakes(self) -> bool:
        """Return True if any placed digit conflicts with another one.

        Each clue is blanked, checked against the candidates of its own
        cell and written back, so the grid is left as it was found.
        """
        for r, row in enumerate(self.grid):
            for c, value in enumerate(row):
                if value == 0:
                    continue
                row[c] = 0
                legal = value in self.usable_values(r, c)
                row[c] = value
                if not legal:
                    logger.debug("digit %d at (%d,%d) breaks the rules", value, r, c)
                    return True
        return False

    def _count_step(self) -> None:
        self.steps += 1
        if self.step_limit is not None and self.steps > self.step_limit:
            raise SearchLimitError(
                f"gave up after {self.step_limit} placements"
            )


def solve_grid(
    grid: Board,
    size: int = DEFAULT_SIZE,
    step_limit: Optional[int] = None,
) -> Board:
    """Solve ``grid`` in place and return it.

    Raises InvalidGridError before searching when the grid breaks the rules
    and UnsolvableError when no completion exists. On failure the contents
    of ``grid`` are unspecified.
    """
    return Solver(grid, size=size, step_limit=step_limit).run()


def solve_puzzle(
    puzzle: Sequence[str],
    size: int = DEFAULT_SIZE,
    step_limit: Optional[int] = None,
) -> Board:
    board = parse_puzzle(puzzle, size=size)
    return solve_grid(board, size=size, step_limit=step_limit)


__all__ = [
    "Solver",
    "check_shape",
    "solve_grid",
    "solve_puzzle",
]
