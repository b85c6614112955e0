from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set

from esper import World

from crunch.components.chain import Chain
from crunch.components.cookie import Cookie
from crunch.components.turn_state import TurnPhase
from crunch.events.bus import (EventBus, EVENT_SWAP_PERFORMED, EVENT_MATCHES_REMOVED, EVENT_COOKIES_FELL,
                               EVENT_COOKIES_TOPPED_UP, EVENT_CASCADE_COMPLETE, EVENT_POSSIBLE_SWAPS_UPDATED,
                               EVENT_SHUFFLE_REQUEST)
from crunch.systems.board_ops import (Columns, detect_possible_swaps, fill_holes, get_board,
                                      get_cookie_types, get_rng, remove_matches, top_up_cookies)
from crunch.systems.turn_state_utils import get_or_create_turn_state, set_turn_phase

logger = logging.getLogger(__name__)


def _frozen(cookie: Cookie) -> Cookie:
    return Cookie(column=cookie.column, row=cookie.row, cookie_type=cookie.cookie_type)


def _frozen_columns(columns: Columns) -> Columns:
    return [[_frozen(cookie) for cookie in column] for column in columns]


@dataclass(slots=True)
class CascadeStep:
    """What one detect/remove/fall/top-up round changed.

    Holds copies of the cookies as they stood at the end of that round, so a
    later round moving the live cookies does not rewrite the record.
    """
    depth: int
    chains: Set[Chain]
    fallen: Columns
    new_cookies: Columns

    @classmethod
    def record(cls, depth: int, chains: Set[Chain], fallen: Columns, new_cookies: Columns) -> CascadeStep:
        frozen_chains = {Chain(chain.chain_type, [_frozen(cookie) for cookie in chain]) for chain in chains}
        return cls(depth, frozen_chains, _frozen_columns(fallen), _frozen_columns(new_cookies))


@dataclass(slots=True)
class Resolution:
    steps: List[CascadeStep] = field(default_factory=list)
    reshuffled: Optional[Set[Cookie]] = None

    @property
    def depth(self) -> int:
        return len(self.steps)


class MatchResolutionSystem:
    """Runs the cascade after an applied swap until the board is stable.

    Every round removes all chains, lets cookies fall, and tops columns up.
    Once no chain remains the legal swaps are recomputed; a board with none
    is reshuffled before the turn goes back to idle.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_SWAP_PERFORMED, self.on_swap_performed)
        self.last_resolution: Optional[Resolution] = None

    def on_swap_performed(self, sender, **kwargs):
        self.resolve()

    def resolve(self) -> Resolution:
        board = get_board(self.world)
        registry = get_cookie_types(self.world)
        rng = get_rng(self.world)
        state = get_or_create_turn_state(self.world)
        set_turn_phase(self.world, self.event_bus, TurnPhase.RESOLVING)
        state.cascade_depth = 0
        resolution = Resolution()
        try:
            while True:
                chains = remove_matches(board)
                if not chains:
                    break
                state.cascade_depth += 1
                depth = state.cascade_depth
                self.event_bus.emit(EVENT_MATCHES_REMOVED, chains=chains, depth=depth)
                fallen = fill_holes(board)
                self.event_bus.emit(EVENT_COOKIES_FELL, columns=fallen, depth=depth)
                new_cookies = top_up_cookies(board, registry, rng)
                self.event_bus.emit(EVENT_COOKIES_TOPPED_UP, columns=new_cookies, depth=depth)
                logger.debug(
                    "Cascade step %d: %d chain(s), %d column(s) fell, %d column(s) topped up",
                    depth, len(chains), len(fallen), len(new_cookies),
                )
                resolution.steps.append(CascadeStep.record(depth, chains, fallen, new_cookies))
            self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=state.cascade_depth)
            swaps = detect_possible_swaps(board)
            self.event_bus.emit(EVENT_POSSIBLE_SWAPS_UPDATED, swaps=set(swaps))
            if not swaps and board.has_tiles():
                logger.debug("No legal swaps left, reshuffling")
                self.event_bus.emit(EVENT_SHUFFLE_REQUEST, reason="stalemate")
                if board.possible_swaps:
                    resolution.reshuffled = {cookie for _, _, cookie in board.cookies.items()}
        finally:
            # Back to idle even when a reshuffle raises.
            set_turn_phase(self.world, self.event_bus, TurnPhase.IDLE)
        self.last_resolution = resolution
        return resolution
