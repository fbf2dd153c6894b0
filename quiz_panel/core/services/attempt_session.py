"""Service owning the state of a single timed quiz attempt.

Lifecycle::

    NOT_STARTED --start()--> LOADING --questions--> ACTIVE --submit()/timeout--> FINISHED
                                      \\--empty or load failure--> ERROR

FINISHED and ERROR are terminal; a new session is needed to try again. The
question load, the timer tick and user actions all mutate state under one
re-entrant lock, so a manual submit racing the timeout can only finish the
attempt once.
"""

from __future__ import annotations

import logging
from threading import RLock
from typing import Callable

from quiz_panel.constants.quiz_constants import NO_QUESTIONS_MESSAGE
from quiz_panel.core.models import AttemptState, AttemptStatus, Question, QuizDefinition
from quiz_panel.core.services.countdown_timer import CountdownTimer, TimerFactory
from quiz_panel.core.services.question_store import QuestionStore

logger = logging.getLogger(__name__)

StateListener = Callable[[AttemptState], None]


class AttemptStateError(RuntimeError):
    """Raised when an operation is dispatched in a state that does not allow it."""


class QuizAttemptSession:
    """State machine for one student's run through a quiz."""

    def __init__(
        self,
        quiz: QuizDefinition,
        question_store: QuestionStore,
        timer_factory: TimerFactory,
    ) -> None:
        self._lock = RLock()
        self._quiz = quiz
        self._question_store = question_store
        self._timer_factory = timer_factory
        self._timer: CountdownTimer | None = None
        self._listeners: list[StateListener] = []
        self._disposed = False

        self._status = AttemptStatus.NOT_STARTED
        self._questions: tuple[Question, ...] = ()
        self._answers: dict[str, int] = {}
        self._current_index = 0
        self._seconds_remaining = quiz.duration_minutes * 60
        self._error_message: str | None = None
        self._correct_count = 0
        self._incorrect_count = 0
        self._unanswered_count = 0
        self._final_score = 0

    @property
    def quiz(self) -> QuizDefinition:
        return self._quiz

    @property
    def state(self) -> AttemptState:
        with self._lock:
            return self._snapshot()

    @property
    def status(self) -> AttemptStatus:
        with self._lock:
            return self._status

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener and return a callable that removes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # --- Lifecycle ---

    def start(self) -> None:
        """Load the question set and begin the countdown.

        Load failures and empty quizzes end in the ERROR state rather than
        raising, so the presentation layer can show the message.
        """
        with self._lock:
            if self._status is not AttemptStatus.NOT_STARTED:
                raise AttemptStateError("Attempt has already been started; create a new session to retry.")
            self._status = AttemptStatus.LOADING
            loading = self._snapshot()
        self._notify(loading)
        logger.info("Loading questions for quiz '%s'", self._quiz.id)

        try:
            questions = tuple(self._question_store.get_questions(self._quiz.id))
        except Exception as exc:
            logger.exception("Failed to load questions for quiz '%s'", self._quiz.id)
            self._fail(str(exc) or exc.__class__.__name__)
            return

        if not questions:
            logger.warning("Quiz '%s' has no questions", self._quiz.id)
            self._fail(NO_QUESTIONS_MESSAGE)
            return

        with self._lock:
            if self._disposed:
                # Torn down while the load was in flight; never start ticking.
                return
            self._questions = questions
            self._current_index = 0
            self._seconds_remaining = self._quiz.duration_minutes * 60
            self._status = AttemptStatus.ACTIVE
            self._timer = self._timer_factory()
            self._timer.start(self._handle_tick)
            active = self._snapshot()
        logger.info(
            "Attempt started for quiz '%s' with %d questions and %d seconds",
            self._quiz.id,
            len(questions),
            active.seconds_remaining,
        )
        self._notify(active)

    def dispose(self) -> None:
        """Stop the timer and drop listeners when the owning UI goes away."""
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
            self._stop_timer()
            self._listeners.clear()
            status = self._status
        logger.info("Attempt for quiz '%s' disposed in state %s", self._quiz.id, status.name)

    # --- User actions ---

    def select_answer(self, question_id: str, option_index: int) -> None:
        with self._lock:
            self._require_active("select an answer")
            question = next((q for q in self._questions if q.id == question_id), None)
            if question is None:
                raise ValueError(f"Unknown question id '{question_id}'.")
            if not 0 <= option_index < len(question.options):
                raise ValueError(
                    f"Option index must be between 0 and {len(question.options) - 1}."
                )
            self._answers[question_id] = option_index
            snapshot = self._snapshot()
        self._notify(snapshot)

    def next_question(self) -> None:
        self._move_cursor(1)

    def previous_question(self) -> None:
        self._move_cursor(-1)

    def go_to_question(self, index: int) -> None:
        """Jump to a question; out-of-range indices are clamped."""
        with self._lock:
            if self._status is not AttemptStatus.ACTIVE:
                return
            self._set_cursor(index)
            snapshot = self._snapshot()
        self._notify(snapshot)

    def submit(self) -> bool:
        """Grade the attempt. Returns False when the attempt was not active."""
        with self._lock:
            snapshot = self._finish()
        if snapshot is None:
            return False
        self._notify(snapshot)
        return True

    # --- Timer ---

    def _handle_tick(self) -> None:
        with self._lock:
            if self._status is not AttemptStatus.ACTIVE:
                return
            if self._seconds_remaining > 0:
                self._seconds_remaining -= 1
            if self._seconds_remaining == 0:
                logger.info("Time is up for quiz '%s'; submitting automatically", self._quiz.id)
                snapshot = self._finish()
            else:
                snapshot = self._snapshot()
        if snapshot is not None:
            self._notify(snapshot)

    def _finish(self) -> AttemptState | None:
        if self._status is not AttemptStatus.ACTIVE:
            return None
        self._stop_timer()
        self._grade()
        self._status = AttemptStatus.FINISHED
        snapshot = self._snapshot()
        logger.info(
            "Attempt for quiz '%s' finished: %d correct, %d incorrect, %d unanswered, score %d",
            self._quiz.id,
            snapshot.correct_count,
            snapshot.incorrect_count,
            snapshot.unanswered_count,
            snapshot.final_score,
        )
        return snapshot

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None

    # --- Helpers ---

    def _move_cursor(self, step: int) -> None:
        with self._lock:
            if self._status is not AttemptStatus.ACTIVE:
                return
            previous = self._current_index
            self._set_cursor(self._current_index + step)
            if self._current_index == previous:
                return
            snapshot = self._snapshot()
        self._notify(snapshot)

    def _set_cursor(self, index: int) -> None:
        last_index = len(self._questions) - 1
        self._current_index = max(0, min(index, last_index))

    def _grade(self) -> None:
        correct = incorrect = unanswered = 0
        for question in self._questions:
            selected = self._answers.get(question.id)
            if selected is None:
                unanswered += 1
            elif selected == question.correct_option_index:
                correct += 1
            else:
                incorrect += 1
        # No negative marking and no partial credit
        self._correct_count = correct
        self._incorrect_count = incorrect
        self._unanswered_count = unanswered
        self._final_score = correct * self._quiz.marks_per_question
        assert correct + incorrect + unanswered == len(self._questions)

    def _fail(self, message: str) -> None:
        with self._lock:
            self._status = AttemptStatus.ERROR
            self._error_message = message
            snapshot = self._snapshot()
        self._notify(snapshot)

    def _require_active(self, action: str) -> None:
        if self._status is not AttemptStatus.ACTIVE:
            raise AttemptStateError(f"Cannot {action} while the attempt is {self._status.value}.")

    def _snapshot(self) -> AttemptState:
        return AttemptState(
            quiz=self._quiz,
            status=self._status,
            questions=self._questions,
            answers=dict(self._answers),
            current_index=self._current_index,
            seconds_remaining=self._seconds_remaining,
            error_message=self._error_message,
            correct_count=self._correct_count,
            incorrect_count=self._incorrect_count,
            unanswered_count=self._unanswered_count,
            final_score=self._final_score,
        )

    def _notify(self, snapshot: AttemptState) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(snapshot)
