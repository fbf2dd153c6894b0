"""Qt main window switching between quiz selection, attempt and result views."""

from __future__ import annotations

from enum import Enum, auto

from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import QLabel, QMainWindow, QPushButton, QStackedWidget

from quiz_panel.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION
from quiz_panel.constants.ui_constants import STUDENT_URL_PLACEHOLDER, WINDOW_TITLE
from quiz_panel.core.models import AttemptState, QuizDefinition
from quiz_panel.core.result_report import StudentProfile
from quiz_panel.core.services.question_store import QuestionStore
from quiz_panel.styling.styles import Styles
from quiz_panel.ui.components.attempt_panel import AttemptPanel
from quiz_panel.ui.components.quiz_list_panel import QuizListPanel
from quiz_panel.ui.components.result_panel import ResultPanel
from quiz_panel.ui.dialog_helpers import confirm_leave_attempt, show_info


class StudentMode(Enum):
    """High-level UI mode for the student window."""

    QUIZ_SELECTION = auto()
    QUIZ_ATTEMPT = auto()
    QUIZ_RESULT = auto()


class StudentMainWindow(QMainWindow):
    """Main Qt window orchestrating the three student views."""

    def __init__(
        self,
        question_store: QuestionStore,
        profile: StudentProfile | None = None,
        student_url: str | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.question_store = question_store
        self.profile = profile or StudentProfile()
        self.student_url = student_url or STUDENT_URL_PLACEHOLDER
        self._mode = StudentMode.QUIZ_SELECTION

        self._build_ui()
        self.setStyleSheet(Styles.get_main_window_style())

    def _build_ui(self) -> None:
        self.mode_stack = QStackedWidget(self)
        self.setCentralWidget(self.mode_stack)

        self.quiz_list_panel = QuizListPanel(
            self.question_store,
            on_start_quiz=self._start_attempt,
            parent=self,
        )
        self.attempt_panel = AttemptPanel(
            self.question_store,
            on_finished=self._show_result,
            on_exit=self._show_quiz_list,
            parent=self,
        )
        self.result_panel = ResultPanel(
            self.profile,
            on_done=self._show_quiz_list,
            parent=self,
        )
        self.mode_stack.addWidget(self.quiz_list_panel)
        self.mode_stack.addWidget(self.attempt_panel)
        self.mode_stack.addWidget(self.result_panel)

        self.statusBar().addWidget(QLabel(f"Browser students connect to: {self.student_url}", self))
        self.about_button = QPushButton(f"About {APP_NAME}", self)
        self.about_button.clicked.connect(self._handle_about)
        self.statusBar().addPermanentWidget(self.about_button)
        self._set_mode(StudentMode.QUIZ_SELECTION)

    def _set_mode(self, mode: StudentMode) -> None:
        self._mode = mode
        panels = {
            StudentMode.QUIZ_SELECTION: self.quiz_list_panel,
            StudentMode.QUIZ_ATTEMPT: self.attempt_panel,
            StudentMode.QUIZ_RESULT: self.result_panel,
        }
        self.mode_stack.setCurrentWidget(panels[mode])

    def _start_attempt(self, quiz: QuizDefinition) -> None:
        self._set_mode(StudentMode.QUIZ_ATTEMPT)
        self.attempt_panel.begin_attempt(quiz)

    def _show_result(self, state: AttemptState) -> None:
        self.result_panel.show_result(state)
        self._set_mode(StudentMode.QUIZ_RESULT)

    def _show_quiz_list(self) -> None:
        self.quiz_list_panel.refresh()
        self._set_mode(StudentMode.QUIZ_SELECTION)

    def _handle_about(self) -> None:
        details = f"{APP_NAME} v{APP_VERSION}\nLicense: {APP_LICENSE}\n\n{APP_ABOUT_TEXT}"
        show_info(self, f"About {APP_NAME}", details)

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802 - Qt override
        if self.attempt_panel.has_running_attempt() and not confirm_leave_attempt(self):
            event.ignore()
            return
        self.attempt_panel.end_attempt()
        super().closeEvent(event)
