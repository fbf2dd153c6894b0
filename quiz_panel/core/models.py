"""Domain models for the quiz application."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True, slots=True)
class Question:
    """Multiple-choice quiz question with exactly four options."""

    id: str
    text: str
    options: tuple[str, ...]
    correct_option_index: int


@dataclass(frozen=True, slots=True)
class QuizDefinition:
    """Timed collection of questions with a uniform per-question mark value."""

    id: str
    title: str
    total_questions: int  # Declared count, only used for display and max score
    duration_minutes: int
    marks_per_question: int = 1


class AttemptStatus(Enum):
    """Lifecycle of a single quiz attempt."""

    NOT_STARTED = "not_started"
    LOADING = "loading"
    ACTIVE = "active"
    FINISHED = "finished"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class AttemptState:
    """Immutable snapshot of a quiz attempt handed to observers."""

    quiz: QuizDefinition
    status: AttemptStatus = AttemptStatus.NOT_STARTED
    questions: tuple[Question, ...] = ()
    answers: dict[str, int] = field(default_factory=dict)
    current_index: int = 0
    seconds_remaining: int = 0
    error_message: str | None = None
    correct_count: int = 0
    incorrect_count: int = 0
    unanswered_count: int = 0
    final_score: int = 0

    @property
    def current_question(self) -> Question | None:
        if not self.questions:
            return None
        return self.questions[self.current_index]

    @property
    def answered_count(self) -> int:
        return len(self.answers)

    def selected_option_for(self, question_id: str) -> int | None:
        return self.answers.get(question_id)

    @property
    def is_terminal(self) -> bool:
        return self.status in (AttemptStatus.FINISHED, AttemptStatus.ERROR)
