"""Utilities for importing quizzes from a human-friendly text file.

File format: a header followed by question blocks separated by blank lines
or '---'.

    TITLE: Quiz title                       (required)
    DURATION: minutes                       (optional, default 25)
    MARKS: marks per question               (optional, default 1)
    TOTALQUESTIONS: declared question count (optional, default: parsed count)

    Q: Question text (supports markdown + LaTeX). Additional lines until the
       next marker are treated as part of the question.
    A: First option text
    B: Second option text
    C: Third option text
    D: Fourth option text
    CORRECT: A|B|C|D

Inside question or option text, a continuation line that would otherwise be
read as a block separator or a marker is escaped with a leading backslash:
``\\`` alone is a blank line (a Markdown paragraph break), ``\\---`` and
``\\A: ...`` are literal text.

Example:

    TITLE: Warm-up
    DURATION: 5
    MARKS: 2

    Q: What is $2 + 2$?
    A: 3
    B: 4
    C: 5
    D: 22
    CORRECT: B
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from quiz_panel.constants.quiz_constants import (
    DEFAULT_DURATION_MINUTES,
    DEFAULT_MARKS_PER_QUESTION,
)
from quiz_panel.core.models import Question, QuizDefinition


class QuizImportError(Exception):
    """Raised when a quiz definition cannot be parsed."""


@dataclass(slots=True)
class ImportedQuiz:
    """Container for imported quiz metadata and questions."""

    source_path: Path | None
    quiz: QuizDefinition
    questions: list[Question]


_OPTION_ORDER = ["A", "B", "C", "D"]
_HEADER_KEYS = ("TITLE", "DURATION", "MARKS", "TOTALQUESTIONS")
ESCAPE_PREFIX = "\\"


def line_needs_escape(line: str) -> bool:
    """Return True when a text line would be misread as structure by the parser."""
    stripped = line.strip()
    if not stripped or stripped == "---" or _is_marker(stripped):
        return True
    return stripped.startswith(ESCAPE_PREFIX) and line_needs_escape(stripped[1:])


def _is_marker(line: str) -> bool:
    upper = line.upper()
    if upper.startswith("Q:") or upper.startswith("CORRECT:"):
        return True
    return len(line) > 2 and upper[0] in _OPTION_ORDER and line[1] == ":"


def load_quiz_from_file(file_path: Path, quiz_id: str | None = None) -> ImportedQuiz:
    text = file_path.read_text(encoding="utf-8")
    imported = parse_quiz_text(text, quiz_id=quiz_id or file_path.stem)
    imported.source_path = file_path
    return imported


def parse_quiz_text(text: str, quiz_id: str) -> ImportedQuiz:
    header_lines, blocks = _split_blocks(text)
    header = _parse_header(header_lines)

    questions = [
        _parse_block(block, question_id=f"{quiz_id}-q{number}")
        for number, block in enumerate(blocks, start=1)
    ]
    if not questions:
        raise QuizImportError("Quiz file did not contain any questions.")

    total_questions = header.get("TOTALQUESTIONS", len(questions))
    quiz = QuizDefinition(
        id=quiz_id,
        title=header["TITLE"],
        total_questions=total_questions,
        duration_minutes=header.get("DURATION", DEFAULT_DURATION_MINUTES),
        marks_per_question=header.get("MARKS", DEFAULT_MARKS_PER_QUESTION),
    )
    return ImportedQuiz(source_path=None, quiz=quiz, questions=questions)


def _split_blocks(text: str) -> tuple[list[str], list[str]]:
    header_lines: list[str] = []
    blocks: list[str] = []
    current_block: list[str] = []
    in_header = True
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if in_header:
            if not stripped or stripped == "---":
                continue
            if stripped.split(":", 1)[0].upper() in _HEADER_KEYS:
                header_lines.append(stripped)
                continue
            in_header = False
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            # Blank line encountered after content - finalize current block
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())
    return header_lines, [block for block in blocks if block]


def _parse_header(lines: list[str]) -> dict:
    header: dict = {}
    for line in lines:
        key, _, raw_value = line.partition(":")
        key = key.strip().upper()
        raw_value = raw_value.strip()
        if key in header:
            raise QuizImportError(f"{key} is defined more than once.")
        if key == "TITLE":
            if not raw_value:
                raise QuizImportError("TITLE must not be empty.")
            header[key] = raw_value
            continue
        header[key] = _parse_count(key, raw_value, allow_zero=(key == "TOTALQUESTIONS"))
    if "TITLE" not in header:
        raise QuizImportError("Quiz file must start with a TITLE: line.")
    return header


def _parse_count(key: str, raw_value: str, allow_zero: bool = False) -> int:
    if not raw_value:
        raise QuizImportError(f"{key} must include an integer value.")
    try:
        parsed_value = int(raw_value)
    except ValueError as exc:
        raise QuizImportError(f"{key} must be an integer.") from exc
    if parsed_value < 0 or (parsed_value == 0 and not allow_zero):
        raise QuizImportError(f"{key} must be a positive integer.")
    return parsed_value


def _parse_block(block: str, question_id: str) -> Question:
    question_lines: list[str] = []
    options: dict[str, str] = {}
    correct_letter: str | None = None
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        if line.startswith(ESCAPE_PREFIX) and line_needs_escape(line[1:]):
            # Literal continuation text, never a marker
            line = line[1:].strip()
        else:
            upper = line.upper()
            if upper.startswith("Q:"):
                question_lines = [line[2:].strip()]
                current_section = "Q"
                continue

            if upper.startswith("CORRECT:"):
                correct_letter = line.split(":", 1)[1].strip().upper()
                current_section = None
                continue

            if _is_marker(line):
                letter = upper[0]
                options[letter] = line[2:].strip()
                current_section = letter
                continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section in _OPTION_ORDER:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise QuizImportError(
                f"Encountered text outside of a known section: '{line}'."
            )

    if not question_lines:
        raise QuizImportError("Question text missing (Q: ...)")
    if len(options) != 4:
        raise QuizImportError("Each question must define exactly four options (A-D).")

    option_list = tuple(options[letter].strip() for letter in _OPTION_ORDER)
    if any(not opt for opt in option_list):
        raise QuizImportError("Option text cannot be empty.")

    if correct_letter is None:
        raise QuizImportError("Each question needs a CORRECT: line.")
    if correct_letter not in _OPTION_ORDER:
        raise QuizImportError("CORRECT must be one of A, B, C, or D.")

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise QuizImportError("Question text cannot be empty.")

    return Question(
        id=question_id,
        text=question_text,
        options=option_list,
        correct_option_index=_OPTION_ORDER.index(correct_letter),
    )
