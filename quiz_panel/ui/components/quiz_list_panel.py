"""Component listing the quizzes a student can attempt."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from quiz_panel.constants.ui_constants import (
    QUIZ_LIST_EMPTY_STATE,
    QUIZ_LIST_ITEM_TEMPLATE,
    QUIZ_LIST_START_BUTTON,
    QUIZ_LIST_TITLE,
)
from quiz_panel.core.models import QuizDefinition
from quiz_panel.core.services.question_store import QuestionStore
from quiz_panel.styling.styles import Styles
from quiz_panel.ui.dialog_helpers import show_info


class QuizListPanel(QWidget):
    """UI component for choosing a quiz."""

    def __init__(
        self,
        question_store: QuestionStore,
        on_start_quiz: Callable[[QuizDefinition], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.question_store = question_store
        self.on_start_quiz = on_start_quiz
        self._quizzes: list[QuizDefinition] = []

        self._build_ui()
        self.refresh()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        title = QLabel(QUIZ_LIST_TITLE, self)
        title.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(title)

        self.quiz_list = QListWidget(self)
        self.quiz_list.setAlternatingRowColors(True)
        self.quiz_list.itemDoubleClicked.connect(lambda _: self._handle_start_click())
        layout.addWidget(self.quiz_list, stretch=1)

        self.empty_label = QLabel(QUIZ_LIST_EMPTY_STATE, self)
        self.empty_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.empty_label)

        self.start_button = QPushButton(QUIZ_LIST_START_BUTTON, self)
        self.start_button.clicked.connect(self._handle_start_click)
        layout.addWidget(self.start_button)

    def refresh(self) -> None:
        self._quizzes = self.question_store.list_quizzes()
        self.quiz_list.clear()
        for quiz in self._quizzes:
            QListWidgetItem(
                QUIZ_LIST_ITEM_TEMPLATE.format(
                    title=quiz.title,
                    count=quiz.total_questions,
                    minutes=quiz.duration_minutes,
                    marks=quiz.marks_per_question,
                ),
                self.quiz_list,
            )
        has_quizzes = bool(self._quizzes)
        self.empty_label.setVisible(not has_quizzes)
        self.start_button.setEnabled(has_quizzes)
        if has_quizzes:
            self.quiz_list.setCurrentRow(0)

    def _handle_start_click(self) -> None:
        row = self.quiz_list.currentRow()
        if not 0 <= row < len(self._quizzes):
            show_info(self, "No quiz selected", "Select a quiz to start.")
            return
        self.on_start_quiz(self._quizzes[row])
