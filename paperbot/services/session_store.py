"""Per-user dialogue sessions.

Sessions are volatile. ``InMemorySessionStore`` keeps them in a dict owned
by one process; a shared backend for several instances only has to implement
:class:`SessionStore`.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from paperbot.logging_config import get_logger
from paperbot.models.client import ClientView
from paperbot.services.state_machine import SessionState

logger = get_logger("session_store")


@dataclass
class Session:
    state: SessionState = SessionState.IDLE
    pending_results: list[ClientView] = field(default_factory=list)
    updated_at: float = field(default_factory=time.monotonic)

    @classmethod
    def idle(cls) -> "Session":
        return cls(state=SessionState.IDLE)

    @classmethod
    def awaiting_query(cls) -> "Session":
        return cls(state=SessionState.AWAITING_QUERY)

    @classmethod
    def awaiting_selection(cls, results: Sequence[ClientView]) -> "Session":
        if not results:
            raise ValueError("awaiting_selection requires at least one pending result")
        return cls(state=SessionState.AWAITING_SELECTION, pending_results=list(results))

    def pick(self, index: int) -> Optional[ClientView]:
        """Pending result at ``index``, or None when it does not exist."""
        if self.state != SessionState.AWAITING_SELECTION:
            return None
        if index < 0 or index >= len(self.pending_results):
            return None
        return self.pending_results[index]


def check_invariants(session: Session) -> list[str]:
    """Проверить инварианты сессии. Возвращает список нарушений."""
    violations = []

    if session.state == SessionState.AWAITING_SELECTION and not session.pending_results:
        violations.append("awaiting_selection_without_results")

    if session.state != SessionState.AWAITING_SELECTION and session.pending_results:
        violations.append("results_outside_selection")

    return violations


class SessionStore(ABC):
    """Session storage keyed by user id."""

    @abstractmethod
    async def get(self, user_id: int) -> Optional[Session]:
        ...

    @abstractmethod
    async def set(self, user_id: int, session: Session) -> None:
        ...

    @abstractmethod
    async def delete(self, user_id: int) -> None:
        ...


class InMemorySessionStore(SessionStore):
    """Dict-backed store for a single process, with lazy TTL expiry."""

    def __init__(self, ttl_seconds: float = 900, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._sessions: dict[int, Session] = {}

    async def get(self, user_id: int) -> Optional[Session]:
        session = self._sessions.get(user_id)
        if session is None:
            return None
        if self.ttl_seconds and self._clock() - session.updated_at > self.ttl_seconds:
            logger.info(f"Session expired for user {user_id} in state {session.state.value}")
            del self._sessions[user_id]
            return None
        return session

    async def set(self, user_id: int, session: Session) -> None:
        violations = check_invariants(session)
        if violations:
            raise ValueError(f"Session invariants violated: {violations}")
        session.updated_at = self._clock()
        self._sessions[user_id] = session

    async def delete(self, user_id: int) -> None:
        self._sessions.pop(user_id, None)

    def __len__(self) -> int:
        return len(self._sessions)
