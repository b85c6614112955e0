from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods alive for systems nobody holds a reference to.
        sig.connect(fn, weak=False)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# LAYOUT
# ============================================================================
EVENT_LAYOUT_LOADED = "layout_loaded"              # payload: tiles=int
EVENT_LAYOUT_FAILED = "layout_failed"              # payload: reason=str


# ============================================================================
# INPUT
# ============================================================================
EVENT_SWIPE = "swipe"                              # payload: column, row, horz_delta, vert_delta


# ============================================================================
# SWAPS
# ============================================================================
EVENT_SWAP_REQUEST = "swap_request"                # payload: swap=Swap
EVENT_SWAP_VALID = "swap_valid"                    # payload: swap=Swap
EVENT_SWAP_INVALID = "swap_invalid"                # payload: swap=Swap
EVENT_SWAP_PERFORMED = "swap_performed"            # payload: swap=Swap
EVENT_POSSIBLE_SWAPS_UPDATED = "possible_swaps_updated"  # payload: swaps=set[Swap]


# ============================================================================
# COOKIES & CASCADE
# ============================================================================
EVENT_COOKIES_CREATED = "cookies_created"          # payload: cookies=set[Cookie], reason=str
EVENT_MATCHES_REMOVED = "matches_removed"          # payload: chains=set[Chain], depth=int
EVENT_COOKIES_FELL = "cookies_fell"                # payload: columns=list[list[Cookie]], depth=int
EVENT_COOKIES_TOPPED_UP = "cookies_topped_up"      # payload: columns=list[list[Cookie]], depth=int
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int


# ============================================================================
# SHUFFLE & TURN FLOW
# ============================================================================
EVENT_SHUFFLE_REQUEST = "shuffle_request"          # payload: reason=str (optional)
EVENT_BOARD_SHUFFLED = "board_shuffled"            # payload: cookies=set[Cookie], reason=str
EVENT_TURN_PHASE_CHANGED = "turn_phase_changed"    # payload: previous=TurnPhase, phase=TurnPhase
