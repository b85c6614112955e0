from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from crunch.components.swap import Swap


class TurnPhase(Enum):
    """Where the board is in handling a proposed swap."""
    IDLE = auto()
    VALIDATING = auto()
    APPLYING = auto()
    RESOLVING = auto()


@dataclass(slots=True)
class TurnState:
    """Tracks current turn-level state shared across systems."""

    phase: TurnPhase = TurnPhase.IDLE
    cascade_depth: int = 0
    last_swap: Optional[Swap] = None
    turns_played: int = 0
