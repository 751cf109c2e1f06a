"""Browser front-end and JSON endpoint for the solver."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from aiohttp import web
from jinja2 import Environment, FileSystemLoader, select_autoescape

from .errors import (
    ConfigurationError,
    InvalidGridError,
    SearchLimitError,
    SudokuError,
    UnsolvableError,
)
from .grid import DEFAULT_SIZE, Board, ClueGrid, box_size_for
from .solver import Solver

logger = logging.getLogger(__name__)

SUPPORTED_SIZES = (4, 9, 16)
DEFAULT_STEP_LIMIT = 500_000

BASE_DIR = Path(__file__).resolve().parent
TEMPLATE_ENV = Environment(
    loader=FileSystemLoader(str(BASE_DIR)),
    autoescape=select_autoescape(),
)

ERROR_CODES = {
    ConfigurationError: "bad_request",
    InvalidGridError: "invalid_grid",
    UnsolvableError: "unsolvable",
    SearchLimitError: "search_limit",
}


def cell_name(r: int, c: int) -> str:
    return f"cell-{r}-{c}"


def parse_size(raw: object) -> int:
    try:
        size = int(str(raw))
    except ValueError:
        raise web.HTTPBadRequest(text=f"invalid size: {raw!r}")
    if size not in SUPPORTED_SIZES:
        raise web.HTTPBadRequest(text=f"unsupported size: {size}")
    return size


def parse_form_grid(form: Mapping[str, str], size: int) -> Tuple[Board, List[str]]:
    """Build an int board from posted cell fields; blank or 0 is empty."""
    errors: List[str] = []
    board: Board = [[0] * size for _ in range(size)]

    for r in range(size):
        for c in range(size):
            raw = str(form.get(cell_name(r, c), "")).strip()
            if raw == "":
                continue
            if not raw.isdecimal():
                errors.append(f"Cell ({r + 1},{c + 1}) is not a number: '{raw}'")
                continue
            value = int(raw)
            if value > size:
                errors.append(
                    f"Cell ({r + 1},{c + 1}) out of range: {value} (allowed 1..{size})"
                )
                continue
            board[r][c] = value
    return board, errors


def cell_rows(board: Board, clues: Optional[ClueGrid]) -> List[List[Dict[str, object]]]:
    """Template rows; solver-filled digits get the ``filled`` class."""
    rows = []
    for r, row in enumerate(board):
        cells = []
        for c, value in enumerate(row):
            filled = clues is not None and bool(value) and not clues[r][c]
            cells.append({
                "name": cell_name(r, c),
                "value": value or "",
                "cls": "filled" if filled else "clue",
            })
        rows.append(cells)
    return rows


def error_code(error: SudokuError) -> str:
    for kind, code in ERROR_CODES.items():
        if isinstance(error, kind):
            return code
    return "error"


def create_app(step_limit: Optional[int] = DEFAULT_STEP_LIMIT) -> web.Application:
    template = TEMPLATE_ENV.get_template("ui_template.html")

    def render_page(
        size: int,
        board: Board,
        clues: Optional[ClueGrid] = None,
        message: Optional[str] = None,
        error: bool = False,
        status: int = 200,
    ) -> web.Response:
        return web.Response(
            text=template.render(
                size=size,
                base=box_size_for(size),
                sizes=SUPPORTED_SIZES,
                rows=cell_rows(board, clues),
                message=message,
                error=error,
            ),
            status=status,
            content_type="text/html",
        )

    async def handle_index(request: web.Request) -> web.Response:
        size = parse_size(request.query.get("size", DEFAULT_SIZE))
        return render_page(size, [[0] * size for _ in range(size)])

    async def handle_solve(request: web.Request) -> web.Response:
        form = await request.post()
        size = parse_size(form.get("size", DEFAULT_SIZE))
        board, parse_errors = parse_form_grid(form, size)
        if parse_errors:
            return render_page(size, board, message="; ".join(parse_errors), error=True)

        solver = Solver(board, size=size, step_limit=step_limit)
        try:
            await asyncio.to_thread(solver.run)
        except SudokuError as exc:
            logger.info("form solve failed: %s", exc)
            return render_page(
                size, [list(row) for row in solver.clue_grid], message=f"ERROR: {exc}.", error=True
            )
        return render_page(size, solver.grid, solver.clue_grid, message="Solved.")

    async def handle_api_solve(request: web.Request) -> web.Response:
        try:
            payload = await request.json()
        except ValueError:
            return web.json_response(
                {"error": "bad_request", "message": "body must be JSON"}, status=400
            )
        grid = payload.get("grid") if isinstance(payload, dict) else None
        if not isinstance(grid, list) or not all(isinstance(row, list) for row in grid):
            return web.json_response(
                {"error": "bad_request", "message": "expected an object with a 'grid' list of rows"},
                status=400,
            )

        size = payload.get("size", len(grid))
        if not isinstance(size, int):
            return web.json_response(
                {"error": "bad_request", "message": "'size' must be an integer"}, status=400
            )
        try:
            solver = Solver(grid, size=size, step_limit=step_limit)
            await asyncio.to_thread(solver.run)
        except SudokuError as exc:
            code = error_code(exc)
            logger.info("api solve failed (%s): %s", code, exc)
            status = 400 if code == "bad_request" else 422
            return web.json_response({"error": code, "message": str(exc)}, status=status)

        return web.json_response({
            "grid": solver.grid,
            "clues": [list(row) for row in solver.clue_grid],
            "steps": solver.steps,
        })

    web_app = web.Application()
    web_app.router.add_get("/", handle_index)
    web_app.router.add_post("/solve", handle_solve)
    web_app.router.add_post("/api/solve", handle_api_solve)
    return web_app


def run(host: str, port: int, step_limit: Optional[int] = DEFAULT_STEP_LIMIT) -> None:
    web.run_app(create_app(step_limit=step_limit), host=host, port=port)
