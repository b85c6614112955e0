from esper import World

from crunch.components.turn_state import TurnPhase, TurnState
from crunch.events.bus import EVENT_TURN_PHASE_CHANGED, EventBus


def get_or_create_turn_state(world: World) -> TurnState:
    """Return the shared TurnState component, creating it if absent."""
    existing = list(world.get_component(TurnState))
    if existing:
        return existing[0][1]
    world.create_entity(TurnState())
    return list(world.get_component(TurnState))[0][1]


def set_turn_phase(world: World, event_bus: EventBus, phase: TurnPhase) -> TurnState:
    state = get_or_create_turn_state(world)
    previous = state.phase
    if previous != phase:
        state.phase = phase
        event_bus.emit(EVENT_TURN_PHASE_CHANGED, previous=previous, phase=phase)
    return state
