import logging
from typing import Any, Optional, Set

from esper import World

from crunch.components.board import Board
from crunch.components.cookie import Cookie
from crunch.components.swap import Swap
from crunch.constants import MAX_SHUFFLE_ATTEMPTS, NUM_COLUMNS, NUM_ROWS
from crunch.events.bus import (EventBus, EVENT_LAYOUT_LOADED, EVENT_LAYOUT_FAILED, EVENT_SWIPE,
                               EVENT_SWAP_REQUEST, EVENT_SHUFFLE_REQUEST, EVENT_BOARD_SHUFFLED,
                               EVENT_COOKIES_CREATED, EVENT_POSSIBLE_SWAPS_UPDATED)
from crunch.systems.board_ops import (full_layout, get_cookie_types, get_rng, load_layout,
                                      shuffle, swap_for_swipe)

logger = logging.getLogger(__name__)


class BoardSystem:
    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        layout: Any = None,
        columns: int = NUM_COLUMNS,
        rows: int = NUM_ROWS,
        *,
        max_shuffle_attempts: int = MAX_SHUFFLE_ATTEMPTS,
        fill: bool = True,
    ):
        self.world = world
        self.event_bus = event_bus
        self.max_shuffle_attempts = max_shuffle_attempts
        # Single board entity; the grids inside it are only written by board ops.
        self.board_entity = self.world.create_entity()
        self.world.add_component(self.board_entity, Board(columns=columns, rows=rows))
        self.event_bus.subscribe(EVENT_SWIPE, self.on_swipe)
        self.event_bus.subscribe(EVENT_SHUFFLE_REQUEST, self.on_shuffle_request)
        loaded = self.load(full_layout(columns, rows) if layout is None else layout)
        if loaded and fill:
            self.shuffle(reason="initial")

    @property
    def board(self) -> Board:
        return self.world.component_for_entity(self.board_entity, Board)

    def load(self, layout: Any) -> bool:
        board = self.board
        if load_layout(board, layout):
            self.event_bus.emit(EVENT_LAYOUT_LOADED, tiles=len(board.tiles))
            return True
        self.event_bus.emit(EVENT_LAYOUT_FAILED, reason="malformed_layout")
        return False

    def shuffle(self, reason: str = "request") -> Set[Cookie]:
        """Regenerate every cookie, guaranteeing no chains and at least one legal swap."""
        board = self.board
        created = shuffle(
            board,
            get_cookie_types(self.world),
            get_rng(self.world),
            max_attempts=self.max_shuffle_attempts,
        )
        logger.debug("Board shuffled (%s): %d cookies", reason, len(created))
        self.event_bus.emit(EVENT_COOKIES_CREATED, cookies=created, reason=reason)
        self.event_bus.emit(EVENT_POSSIBLE_SWAPS_UPDATED, swaps=set(board.possible_swaps))
        self.event_bus.emit(EVENT_BOARD_SHUFFLED, cookies=created, reason=reason)
        return created

    def on_shuffle_request(self, sender, **kwargs):
        self.shuffle(reason=kwargs.get("reason", "request"))

    def on_swipe(self, sender, **kwargs):
        column = kwargs.get('column')
        row = kwargs.get('row')
        if column is None or row is None:
            return
        swap = self.swap_for_swipe(column, row, kwargs.get('horz_delta', 0), kwargs.get('vert_delta', 0))
        if swap is None:
            return
        self.event_bus.emit(EVENT_SWAP_REQUEST, swap=swap)

    def swap_for_swipe(self, column: int, row: int, horz_delta: int, vert_delta: int) -> Optional[Swap]:
        return swap_for_swipe(self.board, column, row, horz_delta, vert_delta)
