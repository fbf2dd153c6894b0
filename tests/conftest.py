"""Shared fixtures for the QuizPanel test suite."""

from __future__ import annotations

import pytest

from quiz_panel.core.models import Question, QuizDefinition
from quiz_panel.core.services.attempt_session import QuizAttemptSession
from quiz_panel.core.services.countdown_timer import TickCallback
from quiz_panel.core.services.question_store import InMemoryQuestionStore


class ManualCountdownTimer:
    """Tick source advanced explicitly by tests."""

    def __init__(self) -> None:
        self.callback: TickCallback | None = None
        self.start_count = 0
        self.stop_count = 0

    def start(self, callback: TickCallback) -> None:
        self.callback = callback
        self.start_count += 1

    def stop(self) -> None:
        self.callback = None
        self.stop_count += 1

    def is_active(self) -> bool:
        return self.callback is not None

    def tick(self, times: int = 1) -> None:
        for _ in range(times):
            if self.callback is None:
                return
            self.callback()


class TimerFactorySpy:
    """Hands out manual timers and remembers them."""

    def __init__(self) -> None:
        self.timers: list[ManualCountdownTimer] = []

    def __call__(self) -> ManualCountdownTimer:
        timer = ManualCountdownTimer()
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> ManualCountdownTimer:
        return self.timers[-1]


def make_question(number: int, correct_option_index: int) -> Question:
    return Question(
        id=f"q{number}",
        text=f"Question {number}?",
        options=("Alpha", "Beta", "Gamma", "Delta"),
        correct_option_index=correct_option_index,
    )


@pytest.fixture
def olympiad_quiz() -> QuizDefinition:
    return QuizDefinition(
        id="olympiad",
        title="Olympiad Warmup",
        total_questions=4,
        duration_minutes=1,
        marks_per_question=5,
    )


@pytest.fixture
def store(olympiad_quiz: QuizDefinition) -> InMemoryQuestionStore:
    question_store = InMemoryQuestionStore()
    question_store.add_quiz(
        olympiad_quiz,
        [make_question(number, index) for number, index in enumerate([1, 0, 3, 2], start=1)],
    )
    question_store.add_quiz(
        QuizDefinition(id="empty", title="Empty Quiz", total_questions=0, duration_minutes=5)
    )
    return question_store


@pytest.fixture
def timer_factory() -> TimerFactorySpy:
    return TimerFactorySpy()


@pytest.fixture
def session(
    olympiad_quiz: QuizDefinition,
    store: InMemoryQuestionStore,
    timer_factory: TimerFactorySpy,
) -> QuizAttemptSession:
    return QuizAttemptSession(olympiad_quiz, store, timer_factory)


@pytest.fixture
def active_session(session: QuizAttemptSession) -> QuizAttemptSession:
    session.start()
    return session
