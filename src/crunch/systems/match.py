import logging

from esper import World

from crunch.components.swap import Swap
from crunch.components.turn_state import TurnPhase
from crunch.events.bus import (EventBus, EVENT_SWAP_REQUEST, EVENT_SWAP_VALID, EVENT_SWAP_INVALID,
                               EVENT_SWAP_PERFORMED)
from crunch.systems.board_ops import get_board, is_possible_swap, perform_swap
from crunch.systems.turn_state_utils import get_or_create_turn_state, set_turn_phase

logger = logging.getLogger(__name__)


class MatchSystem:
    """Checks proposed swaps against the legal set and applies the accepted ones."""

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        event_bus.subscribe(EVENT_SWAP_REQUEST, self.on_swap_request)

    def on_swap_request(self, sender, **kwargs):
        swap = kwargs.get('swap')
        if swap is None:
            return
        self.request_swap(swap)

    def request_swap(self, swap: Swap) -> bool:
        state = get_or_create_turn_state(self.world)
        if state.phase != TurnPhase.IDLE:
            # A cascade is still settling; proposals are ignored until it ends.
            logger.debug("Ignoring %r during %s", swap, state.phase.name)
            return False
        set_turn_phase(self.world, self.event_bus, TurnPhase.VALIDATING)
        board = get_board(self.world)
        if not is_possible_swap(board, swap):
            logger.debug("Rejected %r", swap)
            set_turn_phase(self.world, self.event_bus, TurnPhase.IDLE)
            self.event_bus.emit(EVENT_SWAP_INVALID, swap=swap)
            return False
        self.event_bus.emit(EVENT_SWAP_VALID, swap=swap)
        set_turn_phase(self.world, self.event_bus, TurnPhase.APPLYING)
        perform_swap(board, swap)
        state.last_swap = swap
        state.turns_played += 1
        self.event_bus.emit(EVENT_SWAP_PERFORMED, swap=swap)
        return True
