from __future__ import annotations

import logging
import random
from typing import Any, List, Mapping, Optional, Sequence, Set

from esper import World

from crunch.components.board import Board
from crunch.components.chain import Chain, ChainType
from crunch.components.cookie import Cookie
from crunch.components.cookie_types import CookieType, CookieTypes
from crunch.components.swap import Swap
from crunch.components.tile import Tile
from crunch.constants import MAX_SHUFFLE_ATTEMPTS, MIN_CHAIN_LENGTH

logger = logging.getLogger(__name__)

Columns = List[List[Cookie]]


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board not found")


def get_cookie_types(world: World) -> CookieTypes:
    for _, registry in world.get_component(CookieTypes):
        return registry
    raise RuntimeError("CookieTypes definitions not found")


def get_rng(world: World) -> random.Random:
    rng = getattr(world, "random", None)
    if not isinstance(rng, random.Random):
        raise RuntimeError("World has no random source")
    return rng


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------

def full_layout(columns: int, rows: int) -> List[List[int]]:
    return [[1] * columns for _ in range(rows)]


def _layout_rows(layout: Any) -> Optional[Sequence[Sequence[Any]]]:
    if isinstance(layout, Mapping):
        layout = layout.get("tiles")
    if not isinstance(layout, Sequence) or isinstance(layout, (str, bytes)):
        return None
    return layout


def load_layout(board: Board, layout: Any) -> bool:
    """Populate ``board.tiles`` from a rows-by-columns 0/1 matrix.

    Rows arrive top row first, while grid row 0 is the bottom of the field,
    so authored row ``r`` lands on grid row ``rows - 1 - r``. Accepts the
    bare matrix or a parsed level document with a ``tiles`` key. A malformed
    matrix leaves the tile grid empty and returns ``False``.
    """
    board.tiles.clear()
    board.cookies.clear()
    board.possible_swaps = set()
    rows = _layout_rows(layout)
    if rows is None:
        logger.warning("Layout is not a matrix: %r", type(layout).__name__)
        return False
    if len(rows) != board.rows:
        logger.warning("Layout has %d rows, board expects %d", len(rows), board.rows)
        return False
    placed: List[tuple[int, int]] = []
    for authored_row, row_values in enumerate(rows):
        if not isinstance(row_values, Sequence) or isinstance(row_values, (str, bytes)):
            logger.warning("Layout row %d is not a sequence", authored_row)
            return False
        if len(row_values) != board.columns:
            logger.warning(
                "Layout row %d has %d columns, board expects %d",
                authored_row, len(row_values), board.columns,
            )
            return False
        tile_row = board.rows - authored_row - 1
        for column, value in enumerate(row_values):
            if value not in (0, 1):
                logger.warning("Layout cell (%d, %d) has invalid value %r", column, authored_row, value)
                return False
            if value == 1:
                placed.append((column, tile_row))
    # All-or-nothing: only write tiles once the whole matrix validated.
    for column, row in placed:
        board.tiles.set(column, row, Tile())
    logger.debug("Loaded layout with %d tiles", len(placed))
    return True


def tile_at(board: Board, column: int, row: int) -> Optional[Tile]:
    return board.tiles.get(column, row)


def cookie_at(board: Board, column: int, row: int) -> Optional[Cookie]:
    return board.cookies.get(column, row)


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

def _type_at(board: Board, column: int, row: int) -> Optional[CookieType]:
    cookie = board.cookies.get(column, row)
    return cookie.cookie_type if cookie is not None else None


def create_initial_cookies(board: Board, registry: CookieTypes, rng: random.Random) -> Set[Cookie]:
    """Discard every cookie and fill each tile with a fresh one.

    Cells are filled bottom row first, left to right, so the two neighbours
    to the left and the two below are already placed; a type that would
    complete a run with them is never drawn.
    """
    board.cookies.clear()
    # Swaps found on the old cookies no longer apply.
    board.possible_swaps = set()
    created: Set[Cookie] = set()
    for row in range(board.rows):
        for column in range(board.columns):
            if board.tiles.get(column, row) is None:
                continue
            excluded: Set[CookieType] = set()
            if column >= 2:
                left1 = _type_at(board, column - 1, row)
                left2 = _type_at(board, column - 2, row)
                if left1 is not None and left1 == left2:
                    excluded.add(left1)
            if row >= 2:
                down1 = _type_at(board, column, row - 1)
                down2 = _type_at(board, column, row - 2)
                if down1 is not None and down1 == down2:
                    excluded.add(down1)
            cookie = Cookie(column=column, row=row, cookie_type=registry.draw(rng, exclude=excluded))
            board.cookies.set(column, row, cookie)
            created.add(cookie)
    return created


def shuffle(
    board: Board,
    registry: CookieTypes,
    rng: random.Random,
    *,
    max_attempts: int = MAX_SHUFFLE_ATTEMPTS,
) -> Set[Cookie]:
    """Regenerate the cookies until at least one legal swap exists."""
    if not board.has_tiles():
        board.cookies.clear()
        board.possible_swaps = set()
        return set()
    for attempt in range(1, max_attempts + 1):
        created = create_initial_cookies(board, registry, rng)
        if detect_possible_swaps(board):
            logger.debug("Shuffle produced %d legal swaps after %d attempt(s)", len(board.possible_swaps), attempt)
            return created
    raise RuntimeError("Unable to shuffle board into a state with legal swaps")


# ---------------------------------------------------------------------------
# Legality
# ---------------------------------------------------------------------------

def has_chain_at(board: Board, column: int, row: int) -> bool:
    """Return True if the cookie at the cell sits in a run of three or more."""
    cookie = board.cookies.get(column, row)
    if cookie is None:
        raise ValueError(f"No cookie at ({column}, {row})")
    cookie_type = cookie.cookie_type
    horz_length = 1
    i = column - 1
    while i >= 0 and _type_at(board, i, row) == cookie_type:
        i -= 1
        horz_length += 1
    i = column + 1
    while i < board.columns and _type_at(board, i, row) == cookie_type:
        i += 1
        horz_length += 1
    if horz_length >= MIN_CHAIN_LENGTH:
        return True
    vert_length = 1
    i = row - 1
    while i >= 0 and _type_at(board, column, i) == cookie_type:
        i -= 1
        vert_length += 1
    i = row + 1
    while i < board.rows and _type_at(board, column, i) == cookie_type:
        i += 1
        vert_length += 1
    return vert_length >= MIN_CHAIN_LENGTH


def _swap_creates_chain(board: Board, cookie: Cookie, other: Cookie) -> bool:
    # Exchange grid slots only; the cookies keep their own coordinates so the
    # revert below restores the board exactly.
    column, row = cookie.column, cookie.row
    other_column, other_row = other.column, other.row
    board.cookies.set(column, row, other)
    board.cookies.set(other_column, other_row, cookie)
    try:
        return has_chain_at(board, other_column, other_row) or has_chain_at(board, column, row)
    finally:
        board.cookies.set(column, row, cookie)
        board.cookies.set(other_column, other_row, other)


def detect_possible_swaps(board: Board) -> Set[Swap]:
    """Recompute ``board.possible_swaps`` by trying every right and up neighbour."""
    swaps: Set[Swap] = set()
    for row in range(board.rows):
        for column in range(board.columns):
            cookie = board.cookies.get(column, row)
            if cookie is None:
                continue
            if column < board.columns - 1:
                other = board.cookies.get(column + 1, row)
                if other is not None and _swap_creates_chain(board, cookie, other):
                    swaps.add(Swap(cookie, other))
            if row < board.rows - 1:
                other = board.cookies.get(column, row + 1)
                if other is not None and _swap_creates_chain(board, cookie, other):
                    swaps.add(Swap(cookie, other))
    board.possible_swaps = swaps
    return swaps


def is_possible_swap(board: Board, swap: Swap) -> bool:
    return swap in board.possible_swaps


def swap_for_swipe(board: Board, column: int, row: int, horz_delta: int, vert_delta: int) -> Optional[Swap]:
    """Build the candidate swap for a one-step swipe starting at a cell.

    Returns None when the swipe leaves the grid or either cell has no cookie.
    """
    if abs(horz_delta) + abs(vert_delta) != 1:
        return None
    to_column = column + horz_delta
    to_row = row + vert_delta
    if not (0 <= column < board.columns and 0 <= row < board.rows):
        return None
    if not (0 <= to_column < board.columns and 0 <= to_row < board.rows):
        return None
    from_cookie = board.cookies.get(column, row)
    to_cookie = board.cookies.get(to_column, to_row)
    if from_cookie is None or to_cookie is None:
        return None
    return Swap(from_cookie, to_cookie)


def perform_swap(board: Board, swap: Swap) -> None:
    """Exchange the two cookies' slots and coordinates together.

    The cookies moved are the ones the grid holds at the swap's cells.
    """
    column_a, row_a = swap.cookie_a.position
    column_b, row_b = swap.cookie_b.position
    cookie_a = board.cookies.get(column_a, row_a)
    cookie_b = board.cookies.get(column_b, row_b)
    if cookie_a is None or cookie_b is None:
        raise ValueError(f"Cannot perform {swap!r}: a cell holds no cookie")

    board.cookies.set(column_a, row_a, cookie_b)
    cookie_b.column, cookie_b.row = column_a, row_a

    board.cookies.set(column_b, row_b, cookie_a)
    cookie_a.column, cookie_a.row = column_b, row_b


# ---------------------------------------------------------------------------
# Matches
# ---------------------------------------------------------------------------

def detect_horizontal_matches(board: Board) -> Set[Chain]:
    chains: Set[Chain] = set()
    for row in range(board.rows):
        column = 0
        while column < board.columns - 2:
            cookie = board.cookies.get(column, row)
            if cookie is not None:
                match_type = cookie.cookie_type
                if (_type_at(board, column + 1, row) == match_type
                        and _type_at(board, column + 2, row) == match_type):
                    chain = Chain(ChainType.HORIZONTAL)
                    while column < board.columns and _type_at(board, column, row) == match_type:
                        chain.add(board.cookies.get(column, row))
                        column += 1
                    chains.add(chain)
                    continue
            column += 1
    return chains


def detect_vertical_matches(board: Board) -> Set[Chain]:
    chains: Set[Chain] = set()
    for column in range(board.columns):
        row = 0
        while row < board.rows - 2:
            cookie = board.cookies.get(column, row)
            if cookie is not None:
                match_type = cookie.cookie_type
                if (_type_at(board, column, row + 1) == match_type
                        and _type_at(board, column, row + 2) == match_type):
                    chain = Chain(ChainType.VERTICAL)
                    while row < board.rows and _type_at(board, column, row) == match_type:
                        chain.add(board.cookies.get(column, row))
                        row += 1
                    chains.add(chain)
                    continue
            row += 1
    return chains


def remove_matches(board: Board) -> Set[Chain]:
    """Delete every cookie in a horizontal or vertical chain.

    A cookie where a horizontal and a vertical run cross is reported in both
    chains and removed once.
    """
    horizontal = detect_horizontal_matches(board)
    vertical = detect_vertical_matches(board)
    for chain in horizontal | vertical:
        for cookie in chain.cookies:
            board.cookies.set(cookie.column, cookie.row, None)
    return horizontal | vertical


# ---------------------------------------------------------------------------
# Gravity and refill
# ---------------------------------------------------------------------------

def fill_holes(board: Board) -> Columns:
    """Drop cookies into the empty tiles below them.

    Returns one list per column that changed, holding the moved cookies
    lowest first.
    """
    columns: Columns = []
    for column in range(board.columns):
        moved: List[Cookie] = []
        for row in range(board.rows):
            if board.tiles.get(column, row) is None or board.cookies.get(column, row) is not None:
                continue
            for lookup in range(row + 1, board.rows):
                cookie = board.cookies.get(column, lookup)
                if cookie is None:
                    continue
                board.cookies.set(column, lookup, None)
                board.cookies.set(column, row, cookie)
                cookie.row = row
                moved.append(cookie)
                break
        if moved:
            columns.append(moved)
    return columns


def top_up_cookies(board: Board, registry: CookieTypes, rng: random.Random) -> Columns:
    """Create cookies for the empty tiles left at the top of each column.

    Each new type differs from the one generated just before it in this
    pass. Returns one list per column that changed, newest-at-top first.
    """
    columns: Columns = []
    previous: Optional[CookieType] = None
    for column in range(board.columns):
        created: List[Cookie] = []
        row = board.rows - 1
        while row >= 0 and board.cookies.get(column, row) is None:
            if board.tiles.get(column, row) is not None:
                previous = registry.draw(rng, exclude=(previous,))
                cookie = Cookie(column=column, row=row, cookie_type=previous)
                board.cookies.set(column, row, cookie)
                created.append(cookie)
            row -= 1
        if created:
            columns.append(created)
    return columns
