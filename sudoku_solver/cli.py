"""Command line entry point: solve or check puzzles, or serve the web UI."""

import logging
from pathlib import Path
from typing import Optional, Tuple

import typer

from .errors import InvalidGridError, SearchLimitError, SudokuError, UnsolvableError
from .grid import DEFAULT_SIZE, Board, board_to_csv, is_complete, parse_csv, parse_puzzle
from .reporter import print_failure, print_solution
from .solver import Solver
from .web import run as run_server

logger = logging.getLogger(__name__)

app = typer.Typer(help="Solve Sudoku grids with backtracking search.")

EXIT_INVALID = 1
EXIT_UNSOLVABLE = 3
EXIT_LIMIT = 4

SIZE_HELP = f"Grid size N for an N x N grid [default: {DEFAULT_SIZE}, or the CSV row count]."


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def load_board(
    puzzle: Optional[str], file: Optional[Path], size: Optional[int]
) -> Tuple[Board, int]:
    """Read the grid from a puzzle string or a CSV file.

    A CSV file sets the size from its row count; an explicit ``--size`` must
    agree with it.
    """
    if file is not None:
        if puzzle:
            typer.echo("Give either a PUZZLE string or --file, not both.", err=True)
            raise typer.Exit(code=EXIT_INVALID)
        logger.info("reading %s", file)
        board = parse_csv(file.read_text(encoding="utf-8"))
        if size is not None and size != len(board):
            typer.echo(
                f"--size {size} does not match the {len(board)} rows in {file}.", err=True
            )
            raise typer.Exit(code=EXIT_INVALID)
        return board, len(board)
    if not puzzle:
        typer.echo("Provide a PUZZLE string or --file.", err=True)
        raise typer.Exit(code=EXIT_INVALID)
    if size is None:
        size = DEFAULT_SIZE
    return parse_puzzle(puzzle, size=size), size


def exit_code_for(error: SudokuError) -> int:
    if isinstance(error, UnsolvableError):
        return EXIT_UNSOLVABLE
    if isinstance(error, SearchLimitError):
        return EXIT_LIMIT
    return EXIT_INVALID


@app.command()
def solve(
    puzzle: Optional[str] = typer.Argument(None, help="Cells in row-major order; 0 . _ - mean empty."),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", exists=True, dir_okay=False, help="CSV file, one row per line."
    ),
    size: Optional[int] = typer.Option(
        None, "--size", "-n", help=SIZE_HELP
    ),
    step_limit: Optional[int] = typer.Option(
        None, "--step-limit", min=1, help="Give up after this many placements."
    ),
    as_csv: bool = typer.Option(False, "--csv", help="Print the solution as CSV."),
) -> None:
    """Solve one grid and print the completed board."""
    try:
        board, size = load_board(puzzle, file, size)
        solver = Solver(board, size=size, step_limit=step_limit)
        solver.run()
    except SudokuError as exc:
        logger.info("solve failed: %s", exc)
        print_failure(exc)
        raise typer.Exit(code=exit_code_for(exc))
    except ValueError as exc:
        typer.echo(f"Invalid input: {exc}", err=True)
        raise typer.Exit(code=EXIT_INVALID)

    if as_csv:
        typer.echo(board_to_csv(solver.grid), nl=False)
    else:
        print_solution(solver.grid, solver.clue_grid, solver.box_size)


@app.command()
def validate(
    puzzle: Optional[str] = typer.Argument(None, help="Cells in row-major order; 0 . _ - mean empty."),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", exists=True, dir_okay=False, help="CSV file, one row per line."
    ),
    size: Optional[int] = typer.Option(
        None, "--size", "-n", help=SIZE_HELP
    ),
) -> None:
    """Check a grid against the rules without solving it."""
    try:
        board, size = load_board(puzzle, file, size)
        solver = Solver(board, size=size)
        if solver.has_mistakes():
            raise InvalidGridError()
    except SudokuError as exc:
        print_failure(exc)
        raise typer.Exit(code=EXIT_INVALID)
    except ValueError as exc:
        typer.echo(f"Invalid input: {exc}", err=True)
        raise typer.Exit(code=EXIT_INVALID)

    if is_complete(board):
        typer.echo("Grid is complete and follows the rules.")
    else:
        empty = sum(row.count(0) for row in board)
        typer.echo(f"Grid follows the rules; {empty} empty cells left.")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Host interface for the UI."),
    port: int = typer.Option(8080, "--port", "-p", help="Port for the UI."),
) -> None:
    """Run the browser UI and JSON API."""
    typer.echo(f"Open http://{host}:{port} in a browser to use the solver.")
    run_server(host, port)


if __name__ == "__main__":
    app()
