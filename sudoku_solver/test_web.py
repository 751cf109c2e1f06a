"""Tests for the aiohttp front-end."""

import asyncio
import threading

from aiohttp.test_utils import TestClient, TestServer

from . import grid, web
from .errors import SearchLimitError
from .test_solver import PUZZLE, SOLUTION
from .web import create_app, parse_form_grid


def run_with_client(scenario, **app_options):
    async def runner():
        async with TestClient(TestServer(create_app(**app_options))) as client:
            return await scenario(client)

    return asyncio.run(runner())


def form_for(board):
    data = {"size": str(len(board))}
    for r, row in enumerate(board):
        for c, value in enumerate(row):
            data[f"cell-{r}-{c}"] = str(value) if value else ""
    return data


def test_parse_form_grid_collects_errors():
    form = {"cell-0-0": "7", "cell-0-1": "x", "cell-1-1": "12", "cell-2-2": "\u00b2"}
    board, errors = parse_form_grid(form, 9)
    assert board[0][0] == 7
    assert board[0][1] == 0
    assert board[2][2] == 0
    assert len(errors) == 3
    assert "not a number" in errors[0]
    assert "out of range" in errors[1]
    assert "not a number" in errors[2]


def test_index_renders_empty_grid():
    async def scenario(client):
        resp = await client.get("/")
        return resp.status, await resp.text()

    status, text = run_with_client(scenario)
    assert status == 200
    assert text.count('name="cell-') == 81


def test_index_rejects_unsupported_size():
    async def scenario(client):
        resp = await client.get("/", params={"size": "5"})
        return resp.status

    assert run_with_client(scenario) == 400


def test_form_solve_marks_filled_cells():
    async def scenario(client):
        resp = await client.post("/solve", data=form_for(grid.parse_puzzle(PUZZLE)))
        return resp.status, await resp.text()

    status, text = run_with_client(scenario)
    assert status == 200
    assert "Solved." in text
    assert 'name="cell-0-0" value="5" class="clue"' in text
    assert 'name="cell-0-2" value="4" class="filled"' in text


def test_form_solve_reports_invalid_grid_and_keeps_input():
    async def scenario(client):
        data = form_for(grid.parse_puzzle("55" + "0" * 79))
        resp = await client.post("/solve", data=data)
        return await resp.text()

    text = run_with_client(scenario)
    assert "grid breaks sudoku rules" in text
    assert 'name="cell-0-1" value="5"' in text


def test_api_solve_returns_solution_and_clues():
    async def scenario(client):
        resp = await client.post("/api/solve", json={"grid": grid.parse_puzzle(PUZZLE)})
        return resp.status, await resp.json()

    status, body = run_with_client(scenario)
    assert status == 200
    assert grid.serialize_board(body["grid"]) == SOLUTION
    assert grid.serialize_board(body["clues"]) == PUZZLE


def test_api_distinguishes_invalid_and_unsolvable():
    unsolvable = [[0] * 9 for _ in range(9)]
    unsolvable[0] = [0, 1, 2, 3, 4, 5, 6, 7, 8]
    unsolvable[3][0] = 9

    async def scenario(client):
        invalid = await client.post("/api/solve", json={"grid": grid.parse_puzzle("55" + "0" * 79)})
        no_solution = await client.post("/api/solve", json={"grid": unsolvable})
        return (invalid.status, await invalid.json()), (no_solution.status, await no_solution.json())

    (invalid_status, invalid_body), (unsolvable_status, unsolvable_body) = run_with_client(scenario)
    assert invalid_status == 422
    assert invalid_body["error"] == "invalid_grid"
    assert unsolvable_status == 422
    assert unsolvable_body["error"] == "unsolvable"


def test_api_rejects_malformed_payloads():
    async def scenario(client):
        results = []
        for payload in ({"grid": "nope"}, [1, 2], {"grid": [[0] * 5] * 5}):
            resp = await client.post("/api/solve", json=payload)
            results.append((resp.status, (await resp.json())["error"]))
        return results

    assert run_with_client(scenario) == [
        (400, "bad_request"),
        (400, "bad_request"),
        (400, "bad_request"),
    ]


def test_api_step_limit():
    async def scenario(client):
        resp = await client.post("/api/solve", json={"grid": [[0] * 9 for _ in range(9)]})
        return resp.status, await resp.json()

    status, body = run_with_client(scenario, step_limit=10)
    assert status == 422
    assert body["error"] == "search_limit"


def test_form_solve_reports_bad_cell_text():
    async def scenario(client):
        resp = await client.post("/solve", data={"size": "9", "cell-0-0": "²"})
        return resp.status, await resp.text()

    status, text = run_with_client(scenario)
    assert status == 200
    assert "Cell (1,1) is not a number" in text


def test_form_solve_reports_unsolvable_grid_and_keeps_input():
    board = [[0] * 9 for _ in range(9)]
    board[0] = [0, 1, 2, 3, 4, 5, 6, 7, 8]
    board[3][0] = 9

    async def scenario(client):
        resp = await client.post("/solve", data=form_for(board))
        return resp.status, await resp.text()

    status, text = run_with_client(scenario)
    assert status == 200
    assert "ERROR: grid has no solution." in text
    assert 'name="cell-0-0" value=""' in text
    assert 'name="cell-0-1" value="1"' in text
    assert 'name="cell-3-0" value="9"' in text


def test_other_requests_are_served_while_a_solve_runs(monkeypatch):
    started = threading.Event()
    release = threading.Event()

    def slow_run(self):
        started.set()
        release.wait(timeout=5)
        raise SearchLimitError()

    monkeypatch.setattr(web.Solver, "run", slow_run)

    async def scenario(client):
        async def post_solve():
            resp = await client.post("/api/solve", json={"grid": [[0] * 9 for _ in range(9)]})
            return resp.status, await resp.json()

        async def get_index():
            resp = await client.get("/")
            return resp.status

        pending = asyncio.ensure_future(post_solve())
        await asyncio.get_running_loop().run_in_executor(None, started.wait, 5)
        try:
            index_status = await asyncio.wait_for(get_index(), timeout=2)
            index_done_first = not pending.done()
        finally:
            release.set()
        return index_status, index_done_first, await pending

    index_status, index_done_first, (status, body) = run_with_client(scenario)
    assert index_status == 200
    assert index_done_first
    assert status == 422
    assert body["error"] == "search_limit"
