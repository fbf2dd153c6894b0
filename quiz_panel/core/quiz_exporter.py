"""Utilities for exporting quizzes to the plain-text format used for imports."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from quiz_panel.core.models import Question, QuizDefinition
from quiz_panel.core.quiz_importer import ESCAPE_PREFIX, line_needs_escape

_OPTION_LETTERS = ("A", "B", "C", "D")


def save_quiz_to_file(file_path: Path, quiz: QuizDefinition, questions: Sequence[Question]) -> Path:
    """Persist the quiz header and questions to disk in the text import format."""

    if not questions:
        raise ValueError("Cannot export an empty quiz.")

    file_path = file_path.resolve()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(serialize_quiz(quiz, questions), encoding="utf-8")
    return file_path


def serialize_quiz(quiz: QuizDefinition, questions: Sequence[Question]) -> str:
    header = "\n".join(
        [
            f"TITLE: {quiz.title}",
            f"DURATION: {quiz.duration_minutes}",
            f"MARKS: {quiz.marks_per_question}",
            f"TOTALQUESTIONS: {quiz.total_questions}",
        ]
    )
    blocks = [_serialize_question(question) for question in questions]
    return header + "\n\n" + "\n\n---\n\n".join(blocks) + "\n"


def _serialize_question(question: Question) -> str:
    question_lines = question.text.splitlines() or [question.text]
    lines = [f"Q: {question_lines[0]}", *_continuation(question_lines[1:])]

    for letter, option_text in zip(_OPTION_LETTERS, question.options):
        option_lines = option_text.splitlines() or [option_text]
        lines.append(f"{letter}: {option_lines[0]}")
        lines.extend(_continuation(option_lines[1:]))

    lines.append(f"CORRECT: {_OPTION_LETTERS[question.correct_option_index]}")
    return "\n".join(lines)


def _continuation(lines: list[str]) -> list[str]:
    # The importer reads escaped lines back as literal text
    return [ESCAPE_PREFIX + line.strip() if line_needs_escape(line) else line for line in lines]
