"""Directory of quiz files exposed as a question store."""

from __future__ import annotations

import logging
from pathlib import Path

from quiz_panel.constants.quiz_constants import QUIZ_FILE_SUFFIX
from quiz_panel.core.models import Question, QuizDefinition
from quiz_panel.core.quiz_exporter import save_quiz_to_file
from quiz_panel.core.quiz_importer import QuizImportError, load_quiz_from_file
from quiz_panel.core.services.question_store import InMemoryQuestionStore

logger = logging.getLogger(__name__)


class QuizLibrary(InMemoryQuestionStore):
    """In-memory store populated from the ``*.txt`` quiz files of one folder.

    The quiz id is the file stem. Files that fail to parse are skipped and
    reported in ``skipped_files`` so one broken quiz does not hide the rest.
    """

    def __init__(self, directory: Path) -> None:
        super().__init__()
        self.directory = directory
        self.skipped_files: dict[Path, str] = {}

    @classmethod
    def from_directory(cls, directory: Path) -> "QuizLibrary":
        library = cls(directory)
        library.reload()
        return library

    def reload(self) -> int:
        """Re-read every quiz file and return the number of quizzes loaded."""
        for quiz in self.list_quizzes():
            self.remove_quiz(quiz.id)
        self.skipped_files.clear()

        if not self.directory.is_dir():
            logger.warning("Quiz directory %s does not exist", self.directory)
            return 0

        for file_path in sorted(self.directory.glob(f"*{QUIZ_FILE_SUFFIX}")):
            try:
                imported = load_quiz_from_file(file_path)
                self.add_quiz(imported.quiz, imported.questions)
            except (QuizImportError, ValueError, OSError) as exc:
                logger.warning("Skipping quiz file %s: %s", file_path.name, exc)
                self.skipped_files[file_path] = str(exc)
        loaded = len(self.list_quizzes())
        logger.info("Loaded %d quiz(zes) from %s", loaded, self.directory)
        return loaded

    def save_quiz(self, quiz_id: str) -> Path:
        """Write a quiz back to ``<directory>/<quiz_id>.txt``."""
        quiz = self.get_quiz(quiz_id)
        questions: list[Question] = self.get_questions(quiz_id)
        return save_quiz_to_file(self.directory / f"{quiz_id}{QUIZ_FILE_SUFFIX}", quiz, questions)

    def create_quiz(self, quiz: QuizDefinition, questions: list[Question]) -> Path:
        """Register a new quiz and persist it immediately."""
        self.add_quiz(quiz, questions)
        return self.save_quiz(quiz.id)
