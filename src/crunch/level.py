"""Board core for the cookie-matching puzzle.

``Level`` wires the world, event bus and board systems together and exposes
each board operation as a method. A presentation layer either subscribes to
the bus for per-phase events or drives the phases itself, one call at a time.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Set

from crunch.components.board import Board
from crunch.components.chain import Chain
from crunch.components.cookie import Cookie
from crunch.components.cookie_types import CookieType
from crunch.components.swap import Swap
from crunch.components.tile import Tile
from crunch.components.turn_state import TurnPhase
from crunch.constants import MAX_SHUFFLE_ATTEMPTS, NUM_COLUMNS, NUM_ROWS
from crunch.events.bus import EventBus
from crunch.systems import board_ops
from crunch.systems.board import BoardSystem
from crunch.systems.match import MatchSystem
from crunch.systems.match_resolution import CascadeStep, MatchResolutionSystem
from crunch.systems.turn_state_utils import get_or_create_turn_state
from crunch.world import create_world


@dataclass(slots=True)
class TurnResult:
    """Outcome of one proposed swap."""
    swap: Swap
    valid: bool
    steps: List[CascadeStep] = field(default_factory=list)
    reshuffled: Optional[Set[Cookie]] = None


class Level:
    def __init__(
        self,
        layout: Any = None,
        columns: int = NUM_COLUMNS,
        rows: int = NUM_ROWS,
        *,
        cookie_types: Iterable[CookieType] | None = None,
        rng: random.Random | None = None,
        event_bus: EventBus | None = None,
        max_shuffle_attempts: int = MAX_SHUFFLE_ATTEMPTS,
    ):
        self.event_bus = event_bus or EventBus()
        self.world = create_world(self.event_bus, cookie_types=cookie_types, rng=rng)
        self.board_system = BoardSystem(
            self.world,
            self.event_bus,
            layout,
            columns,
            rows,
            max_shuffle_attempts=max_shuffle_attempts,
            fill=False,
        )
        self.match_system = MatchSystem(self.world, self.event_bus)
        self.match_resolution_system = MatchResolutionSystem(self.world, self.event_bus)

    @property
    def board(self) -> Board:
        return self.board_system.board

    @property
    def is_loaded(self) -> bool:
        """False when the layout was malformed (or had no tiles at all)."""
        return self.board.has_tiles()

    @property
    def phase(self) -> TurnPhase:
        return get_or_create_turn_state(self.world).phase

    @property
    def possible_swaps(self) -> Set[Swap]:
        return set(self.board.possible_swaps)

    def dimensions(self) -> tuple[int, int]:
        return self.board.tiles.dimensions()

    # Queries

    def tile_at(self, column: int, row: int) -> Optional[Tile]:
        return board_ops.tile_at(self.board, column, row)

    def cookie_at(self, column: int, row: int) -> Optional[Cookie]:
        return board_ops.cookie_at(self.board, column, row)

    def cookies(self) -> Set[Cookie]:
        return {cookie for _, _, cookie in self.board.cookies.items()}

    # Setup

    def shuffle(self) -> Set[Cookie]:
        return self.board_system.shuffle()

    def create_initial_cookies(self) -> Set[Cookie]:
        return board_ops.create_initial_cookies(
            self.board, board_ops.get_cookie_types(self.world), board_ops.get_rng(self.world)
        )

    # Legality

    def detect_possible_swaps(self) -> Set[Swap]:
        return set(board_ops.detect_possible_swaps(self.board))

    def is_possible_swap(self, swap: Swap) -> bool:
        return board_ops.is_possible_swap(self.board, swap)

    def has_chain_at(self, column: int, row: int) -> bool:
        return board_ops.has_chain_at(self.board, column, row)

    def hint(self) -> Optional[Swap]:
        if not self.board.possible_swaps:
            return None
        return min(self.board.possible_swaps, key=Swap.key)

    def swap_for_swipe(self, column: int, row: int, horz_delta: int, vert_delta: int) -> Optional[Swap]:
        return self.board_system.swap_for_swipe(column, row, horz_delta, vert_delta)

    # Turn phases

    def perform_swap(self, swap: Swap) -> None:
        board_ops.perform_swap(self.board, swap)

    def detect_horizontal_matches(self) -> Set[Chain]:
        return board_ops.detect_horizontal_matches(self.board)

    def detect_vertical_matches(self) -> Set[Chain]:
        return board_ops.detect_vertical_matches(self.board)

    def remove_matches(self) -> Set[Chain]:
        return board_ops.remove_matches(self.board)

    def fill_holes(self) -> List[List[Cookie]]:
        return board_ops.fill_holes(self.board)

    def top_up_cookies(self) -> List[List[Cookie]]:
        return board_ops.top_up_cookies(
            self.board, board_ops.get_cookie_types(self.world), board_ops.get_rng(self.world)
        )

    # Whole turn

    def handle_swap(self, swap: Swap) -> TurnResult:
        """Validate, apply and fully resolve a proposed swap.

        An illegal swap leaves the board untouched and returns ``valid=False``.
        """
        if not self.match_system.request_swap(swap):
            return TurnResult(swap=swap, valid=False)
        resolution = self.match_resolution_system.last_resolution
        return TurnResult(
            swap=swap,
            valid=True,
            steps=list(resolution.steps),
            reshuffled=resolution.reshuffled,
        )
