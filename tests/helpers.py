from __future__ import annotations

import random
from typing import Sequence

from crunch.components.board import Board
from crunch.components.cookie import Cookie
from crunch.components.cookie_types import CookieType
from crunch.events.bus import EventBus
from crunch.systems.board import BoardSystem
from crunch.systems.match import MatchSystem
from crunch.systems.match_resolution import MatchResolutionSystem
from crunch.world import create_world

B, R, J, W = CookieType.BLEU, CookieType.ROUGE, CookieType.JAUNE, CookieType.BLANC

# Stripes of four types: no run of three anywhere, and no single swap makes one.
STALEMATE_CYCLE = [B, R, J, W]


def stalemate_type(column: int, row: int) -> CookieType:
    return STALEMATE_CYCLE[(column + 2 * row) % 4]


def fill_board(board: Board, pattern) -> None:
    """Replace every cookie on tiled cells with ``pattern(column, row)``."""
    board.cookies.clear()
    for column, row, _ in board.tiles.items():
        board.cookies.set(column, row, Cookie(column=column, row=row, cookie_type=pattern(column, row)))


def set_types(board: Board, cells: Sequence[tuple[int, int, CookieType]]) -> None:
    for column, row, cookie_type in cells:
        board.cookies.set(column, row, Cookie(column=column, row=row, cookie_type=cookie_type))


def make_systems(columns: int = 5, rows: int = 5, seed: int = 1234, layout=None):
    bus = EventBus()
    world = create_world(bus, rng=random.Random(seed))
    board_system = BoardSystem(world, bus, layout, columns, rows)
    MatchSystem(world, bus)
    resolution = MatchResolutionSystem(world, bus)
    return bus, world, board_system, resolution


def has_any_run(board: Board) -> bool:
    for row in range(board.rows):
        for column in range(board.columns - 2):
            types = [board.cookies.get(column + i, row) for i in range(3)]
            if all(types) and len({c.cookie_type for c in types}) == 1:
                return True
    for column in range(board.columns):
        for row in range(board.rows - 2):
            types = [board.cookies.get(column, row + i) for i in range(3)]
            if all(types) and len({c.cookie_type for c in types}) == 1:
                return True
    return False


def snapshot(board: Board):
    return [
        (column, row, cookie.cookie_type, cookie.column, cookie.row, id(cookie))
        for column, row, cookie in board.cookies.items()
    ]


LETTERS = {'B': B, 'R': R, 'J': J, 'W': W}


def fill_rows(board: Board, rows_top_first: Sequence[str]) -> None:
    """Place cookies from letter rows written top row first, like a layout file."""
    assert len(rows_top_first) == board.rows
    board.cookies.clear()
    for authored_row, letters in enumerate(rows_top_first):
        row = board.rows - authored_row - 1
        for column, letter in enumerate(letters):
            if letter == '.':
                continue
            board.cookies.set(column, row, Cookie(column=column, row=row, cookie_type=LETTERS[letter]))


# Row 0 becomes R R R J W after swapping (2,0) with (3,0).
ONE_MOVE_5X5 = [
    "BRJWB",
    "JWBRJ",
    "BRJWB",
    "JWBRJ",
    "RRJRW",
]
