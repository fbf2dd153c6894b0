"""Service for storing quiz definitions and their ordered questions."""

from __future__ import annotations

from typing import Protocol, Sequence
from uuid import uuid4

from quiz_panel.core.models import Question, QuizDefinition

OPTION_COUNT = 4


class QuestionStoreError(Exception):
    """Raised when quiz data cannot be read from or written to a store."""


class QuizNotFoundError(QuestionStoreError):
    """Raised when a quiz id is unknown to the store."""

    def __init__(self, quiz_id: str) -> None:
        super().__init__(f"Quiz '{quiz_id}' was not found.")
        self.quiz_id = quiz_id


class QuestionStore(Protocol):
    """Read-side contract consumed by attempt sessions and the API."""

    def list_quizzes(self) -> list[QuizDefinition]:
        ...

    def get_quiz(self, quiz_id: str) -> QuizDefinition:
        ...

    def get_questions(self, quiz_id: str) -> list[Question]:
        ...


class InMemoryQuestionStore:
    """Manages quizzes and the lifecycle of their questions in memory."""

    def __init__(self) -> None:
        self._quizzes: dict[str, QuizDefinition] = {}
        self._questions: dict[str, list[Question]] = {}

    # --- Quizzes ---

    def add_quiz(self, quiz: QuizDefinition, questions: Sequence[Question] = ()) -> QuizDefinition:
        """Register a quiz, replacing any quiz with the same id."""
        prepared_quiz = self._validate_quiz(quiz)
        prepared_questions = [self._prepare_question(q) for q in questions]
        self._ensure_unique_ids(prepared_questions)
        self._quizzes[prepared_quiz.id] = prepared_quiz
        self._questions[prepared_quiz.id] = prepared_questions
        return prepared_quiz

    def remove_quiz(self, quiz_id: str) -> None:
        self._require_quiz(quiz_id)
        del self._quizzes[quiz_id]
        del self._questions[quiz_id]

    def list_quizzes(self) -> list[QuizDefinition]:
        return sorted(self._quizzes.values(), key=lambda quiz: quiz.title.lower())

    def get_quiz(self, quiz_id: str) -> QuizDefinition:
        return self._require_quiz(quiz_id)

    def has_quiz(self, quiz_id: str) -> bool:
        return quiz_id in self._quizzes

    # --- Questions ---

    def get_questions(self, quiz_id: str) -> list[Question]:
        """Return a copy of the quiz's questions in insertion order."""
        self._require_quiz(quiz_id)
        return list(self._questions[quiz_id])

    def get_question_count(self, quiz_id: str) -> int:
        self._require_quiz(quiz_id)
        return len(self._questions[quiz_id])

    def add_question(self, quiz_id: str, question: Question) -> Question:
        self._require_quiz(quiz_id)
        prepared = self._prepare_question(question)
        self._ensure_unique_ids(self._questions[quiz_id] + [prepared])
        self._questions[quiz_id].append(prepared)
        return prepared

    def update_question(self, quiz_id: str, index: int, question: Question) -> Question:
        questions = self._questions_for_index(quiz_id, index)
        prepared = self._prepare_question(question)
        # Preserve the original ID
        prepared = Question(
            id=questions[index].id,
            text=prepared.text,
            options=prepared.options,
            correct_option_index=prepared.correct_option_index,
        )
        questions[index] = prepared
        return prepared

    def delete_question(self, quiz_id: str, index: int) -> None:
        questions = self._questions_for_index(quiz_id, index)
        questions.pop(index)

    # --- Helpers ---

    def _require_quiz(self, quiz_id: str) -> QuizDefinition:
        quiz = self._quizzes.get(quiz_id)
        if quiz is None:
            raise QuizNotFoundError(quiz_id)
        return quiz

    def _questions_for_index(self, quiz_id: str, index: int) -> list[Question]:
        self._require_quiz(quiz_id)
        questions = self._questions[quiz_id]
        if not 0 <= index < len(questions):
            raise IndexError(f"Question index {index} out of range")
        return questions

    @staticmethod
    def _ensure_unique_ids(questions: Sequence[Question]) -> None:
        seen: set[str] = set()
        for question in questions:
            if question.id in seen:
                raise ValueError(f"Duplicate question id '{question.id}'.")
            seen.add(question.id)

    @staticmethod
    def _validate_quiz(quiz: QuizDefinition) -> QuizDefinition:
        title = quiz.title.strip()
        if not quiz.id.strip():
            raise ValueError("Quiz id must not be empty.")
        if not title:
            raise ValueError("Quiz title must not be empty.")
        for label, value in (
            ("Duration", quiz.duration_minutes),
            ("Marks per question", quiz.marks_per_question),
        ):
            if not isinstance(value, int) or value <= 0:
                raise ValueError(f"{label} must be a positive integer.")
        if not isinstance(quiz.total_questions, int) or quiz.total_questions < 0:
            raise ValueError("Total questions must be a non-negative integer.")
        return QuizDefinition(
            id=quiz.id,
            title=title,
            total_questions=quiz.total_questions,
            duration_minutes=quiz.duration_minutes,
            marks_per_question=quiz.marks_per_question,
        )

    def _prepare_question(self, question: Question) -> Question:
        """Validate and normalize a question before storage."""
        options = self._validate_options(question.options)
        if not 0 <= question.correct_option_index < OPTION_COUNT:
            raise ValueError("Correct option index must be between 0 and 3.")

        cleaned_text = question.text.strip()
        if not cleaned_text:
            raise ValueError("Question text must not be empty.")

        return Question(
            id=question.id.strip() or uuid4().hex,
            text=cleaned_text,
            options=options,
            correct_option_index=question.correct_option_index,
        )

    @staticmethod
    def _validate_options(options: Sequence[str]) -> tuple[str, ...]:
        if len(options) != OPTION_COUNT:
            raise ValueError("Each question must have exactly four options.")
        cleaned = tuple(option.strip() for option in options)
        if any(not option for option in cleaned):
            raise ValueError("Option text cannot be empty.")
        return cleaned
