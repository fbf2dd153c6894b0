"""Registry of live attempt sessions shared between API request handlers."""

from __future__ import annotations

import logging
import time
from threading import Lock
from typing import Callable
from uuid import uuid4

from quiz_panel.constants.quiz_constants import TERMINAL_ATTEMPT_TTL_SECONDS
from quiz_panel.core.models import AttemptState
from quiz_panel.core.services.attempt_session import QuizAttemptSession
from quiz_panel.core.services.countdown_timer import ThreadingCountdownTimer, TimerFactory
from quiz_panel.core.services.question_store import QuestionStore

logger = logging.getLogger(__name__)


class AttemptNotFoundError(KeyError):
    """Raised when an attempt id is unknown or was already discarded."""


class AttemptRegistry:
    """Facade that creates, looks up and disposes attempt sessions by id.

    Sessions that reach FINISHED or ERROR are evicted ``terminal_ttl_seconds``
    after that, so tabs closed without a DELETE do not pile up. Eviction runs
    whenever a new attempt is created, or on demand via ``evict_expired``.
    """

    def __init__(
        self,
        question_store: QuestionStore,
        timer_factory: TimerFactory | None = None,
        terminal_ttl_seconds: float = TERMINAL_ATTEMPT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._lock = Lock()
        self._question_store = question_store
        self._timer_factory = timer_factory or ThreadingCountdownTimer
        self._terminal_ttl_seconds = terminal_ttl_seconds
        self._clock = clock
        self._sessions: dict[str, QuizAttemptSession] = {}
        self._terminal_since: dict[str, float] = {}

    @property
    def question_store(self) -> QuestionStore:
        return self._question_store

    def create_attempt(self, quiz_id: str) -> tuple[str, QuizAttemptSession]:
        """Create a session for the quiz and start it; returns the new attempt id."""
        self.evict_expired()
        quiz = self._question_store.get_quiz(quiz_id)
        session = QuizAttemptSession(quiz, self._question_store, self._timer_factory)
        attempt_id = uuid4().hex
        with self._lock:
            self._sessions[attempt_id] = session
        session.subscribe(lambda state: self._track_terminal(attempt_id, state))
        session.start()
        logger.info("Attempt %s created for quiz '%s' (%s)", attempt_id, quiz_id, session.status.name)
        return attempt_id, session

    def get_session(self, attempt_id: str) -> QuizAttemptSession:
        with self._lock:
            session = self._sessions.get(attempt_id)
        if session is None:
            raise AttemptNotFoundError(attempt_id)
        return session

    def get_state(self, attempt_id: str) -> AttemptState:
        return self.get_session(attempt_id).state

    def discard_attempt(self, attempt_id: str) -> None:
        with self._lock:
            session = self._sessions.pop(attempt_id, None)
            self._terminal_since.pop(attempt_id, None)
        if session is None:
            raise AttemptNotFoundError(attempt_id)
        session.dispose()

    def evict_expired(self) -> int:
        """Dispose finished or failed sessions older than the grace period."""
        now = self._clock()
        with self._lock:
            expired = [
                attempt_id
                for attempt_id, since in self._terminal_since.items()
                if now - since >= self._terminal_ttl_seconds
            ]
            sessions = [self._sessions.pop(attempt_id) for attempt_id in expired]
            for attempt_id in expired:
                del self._terminal_since[attempt_id]
        for session in sessions:
            session.dispose()
        if expired:
            logger.info("Evicted %d expired attempt(s)", len(expired))
        return len(expired)

    def attempt_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def shutdown(self) -> None:
        """Dispose every session, stopping their timers."""
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
            self._terminal_since.clear()
        for session in sessions:
            session.dispose()

    def _track_terminal(self, attempt_id: str, state: AttemptState) -> None:
        if not state.is_terminal:
            return
        with self._lock:
            if attempt_id in self._sessions:
                self._terminal_since.setdefault(attempt_id, self._clock())
