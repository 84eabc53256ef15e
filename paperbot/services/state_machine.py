from enum import Enum


class SessionState(str, Enum):
    IDLE = "idle"
    AWAITING_QUERY = "awaiting_query"
    AWAITING_SELECTION = "awaiting_selection"


VALID_TRANSITIONS = {
    SessionState.IDLE: [SessionState.AWAITING_QUERY],
    SessionState.AWAITING_QUERY: [SessionState.IDLE, SessionState.AWAITING_SELECTION],
    SessionState.AWAITING_SELECTION: [SessionState.IDLE, SessionState.AWAITING_QUERY],
}


class InvalidTransitionError(Exception):
    def __init__(self, from_state: SessionState, to_state: SessionState):
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(f"Invalid transition: {from_state.value} -> {to_state.value}")


def can_transition(from_state: SessionState, to_state: SessionState) -> bool:
    """Check if transition is valid."""
    allowed = VALID_TRANSITIONS.get(from_state, [])
    return to_state in allowed


def transition(from_state: SessionState, to_state: SessionState) -> SessionState:
    """Perform state transition. Raises InvalidTransitionError if not allowed."""
    if not can_transition(from_state, to_state):
        raise InvalidTransitionError(from_state, to_state)
    return to_state


def begin_search(current_state: SessionState) -> SessionState:
    """Entry button pressed (or a new query while choosing): wait for a name."""
    if current_state == SessionState.AWAITING_QUERY:
        return current_state
    return transition(current_state, SessionState.AWAITING_QUERY)


def present_choices(current_state: SessionState) -> SessionState:
    """Several candidates found: wait for the user to pick one."""
    return transition(current_state, SessionState.AWAITING_SELECTION)


def resolve(current_state: SessionState) -> SessionState:
    """A single client was shown: the dialogue is over."""
    return transition(current_state, SessionState.IDLE)


def reset(current_state: SessionState) -> SessionState:
    """Abort from any state (start command, expired selection, errors)."""
    return SessionState.IDLE
