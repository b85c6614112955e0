import random
from typing import Iterable

from esper import World

from crunch.components.cookie_types import CookieType, CookieTypes
from crunch.components.turn_state import TurnState
from crunch.events.bus import EventBus


def create_world(
    event_bus: EventBus,
    *,
    cookie_types: Iterable[CookieType] | None = None,
    rng: random.Random | None = None,
) -> World:
    """Create a world holding the shared random source, cookie types and turn state.

    The board entity itself is created by ``BoardSystem``.
    """
    world = World()
    setattr(world, "random", rng or random.Random())

    registry = CookieTypes(list(cookie_types)) if cookie_types is not None else CookieTypes()
    world.create_entity(registry)
    world.create_entity(TurnState())
    return world
