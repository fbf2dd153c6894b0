"""Component for taking a timed quiz attempt."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt, QTimer
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QButtonGroup,
    QHBoxLayout,
    QLabel,
    QProgressBar,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from quiz_panel.constants.ui_constants import (
    ATTEMPT_ANSWERED_TEMPLATE,
    ATTEMPT_BACK_BUTTON,
    ATTEMPT_LOADING_MESSAGE,
    ATTEMPT_NEXT_BUTTON,
    ATTEMPT_POSITION_TEMPLATE,
    ATTEMPT_PREV_BUTTON,
    ATTEMPT_SUBMIT_BUTTON,
    QUESTION_FONT_SIZE_PT,
)
from quiz_panel.core.markdown_math_renderer import renderer
from quiz_panel.core.models import AttemptState, AttemptStatus, QuizDefinition
from quiz_panel.core.result_report import format_countdown
from quiz_panel.core.services.attempt_session import QuizAttemptSession
from quiz_panel.core.services.question_store import QuestionStore
from quiz_panel.styling.styles import Styles
from quiz_panel.ui.dialog_helpers import confirm_leave_attempt, confirm_submit
from quiz_panel.ui.qt_countdown_timer import QtCountdownTimer


class AttemptPanel(QWidget):
    """UI component rendering one attempt session and forwarding user input."""

    def __init__(
        self,
        question_store: QuestionStore,
        on_finished: Callable[[AttemptState], None],
        on_exit: Callable[[], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.question_store = question_store
        self.on_finished = on_finished
        self.on_exit = on_exit

        self._session: QuizAttemptSession | None = None
        self._unsubscribe: Callable[[], None] | None = None
        self._rendered_key: tuple[str, int | None] | None = None

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        header_row = QHBoxLayout()
        self.title_label = QLabel("", self)
        self.title_label.setStyleSheet(Styles.get_large_label_style())
        header_row.addWidget(self.title_label)
        header_row.addStretch()
        self.countdown_label = QLabel("", self)
        header_row.addWidget(self.countdown_label)
        layout.addLayout(header_row)

        self.countdown_progress = QProgressBar(self)
        self.countdown_progress.setTextVisible(False)
        layout.addWidget(self.countdown_progress)

        info_row = QHBoxLayout()
        self.position_label = QLabel("", self)
        info_row.addWidget(self.position_label)
        info_row.addStretch()
        self.answered_label = QLabel("", self)
        info_row.addWidget(self.answered_label)
        layout.addLayout(info_row)

        self.message_label = QLabel(ATTEMPT_LOADING_MESSAGE, self)
        self.message_label.setAlignment(Qt.AlignCenter)
        self.message_label.setWordWrap(True)
        layout.addWidget(self.message_label)

        self.question_view = QWebEngineView(self)
        layout.addWidget(self.question_view, stretch=1)

        option_row = QHBoxLayout()
        self.option_group = QButtonGroup(self)
        self.option_group.setExclusive(True)
        self.option_buttons: list[QPushButton] = []
        for idx, letter in enumerate(("A", "B", "C", "D")):
            button = QPushButton(letter, self)
            button.setCheckable(True)
            self.option_group.addButton(button, idx)
            self.option_buttons.append(button)
            option_row.addWidget(button)
        self.option_group.idClicked.connect(self._handle_option_clicked)
        layout.addLayout(option_row)

        nav_row = QHBoxLayout()
        self.prev_button = QPushButton(ATTEMPT_PREV_BUTTON, self)
        self.prev_button.clicked.connect(self._handle_previous)
        nav_row.addWidget(self.prev_button)
        self.next_button = QPushButton(ATTEMPT_NEXT_BUTTON, self)
        self.next_button.clicked.connect(self._handle_next)
        nav_row.addWidget(self.next_button)
        nav_row.addStretch()
        self.submit_button = QPushButton(ATTEMPT_SUBMIT_BUTTON, self)
        self.submit_button.clicked.connect(self._handle_submit)
        nav_row.addWidget(self.submit_button)
        self.back_button = QPushButton(ATTEMPT_BACK_BUTTON, self)
        self.back_button.clicked.connect(self._handle_back)
        nav_row.addWidget(self.back_button)
        layout.addLayout(nav_row)

    # --- Session lifecycle ---

    def begin_attempt(self, quiz: QuizDefinition) -> None:
        """Create a fresh session for the quiz and start it on the next event-loop turn."""
        self.end_attempt()
        self._rendered_key = None
        self.title_label.setText(quiz.title)
        self.countdown_progress.setRange(0, max(1, quiz.duration_minutes * 60))
        session = QuizAttemptSession(
            quiz,
            self.question_store,
            timer_factory=lambda: QtCountdownTimer(parent=self),
        )
        self._session = session
        self._unsubscribe = session.subscribe(self._render_state)
        self._render_state(session.state)
        QTimer.singleShot(0, session.start)

    def end_attempt(self) -> None:
        """Stop the countdown and forget the current session."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._session is not None:
            self._session.dispose()
            self._session = None

    def has_running_attempt(self) -> bool:
        return self._session is not None and self._session.status is AttemptStatus.ACTIVE

    # --- Rendering ---

    def _render_state(self, state: AttemptState) -> None:
        active = state.status is AttemptStatus.ACTIVE
        for widget in (*self.option_buttons, self.prev_button, self.next_button, self.submit_button):
            widget.setEnabled(active)
        self.question_view.setVisible(active)
        self.countdown_progress.setVisible(active)

        if state.status in (AttemptStatus.NOT_STARTED, AttemptStatus.LOADING):
            self._show_message(ATTEMPT_LOADING_MESSAGE)
            return
        if state.status is AttemptStatus.ERROR:
            self._show_message(state.error_message or "")
            self.back_button.setVisible(True)
            return
        if state.status is AttemptStatus.FINISHED:
            finished_session = self._session
            self.end_attempt()
            if finished_session is not None:
                self.on_finished(state)
            return

        self.message_label.setVisible(False)
        self.back_button.setVisible(True)
        self._render_countdown(state.seconds_remaining)
        self._render_question(state)

    def _render_countdown(self, seconds_remaining: int) -> None:
        self.countdown_label.setText(format_countdown(seconds_remaining))
        self.countdown_label.setStyleSheet(Styles.get_countdown_style(seconds_remaining))
        self.countdown_progress.setValue(seconds_remaining)

    def _render_question(self, state: AttemptState) -> None:
        question = state.current_question
        if question is None:
            return
        total = len(state.questions)
        self.position_label.setText(
            ATTEMPT_POSITION_TEMPLATE.format(number=state.current_index + 1, total=total)
        )
        self.answered_label.setText(
            ATTEMPT_ANSWERED_TEMPLATE.format(answered=state.answered_count, total=total)
        )
        self.prev_button.setEnabled(state.current_index > 0)
        self.next_button.setEnabled(state.current_index < total - 1)

        selected = state.selected_option_for(question.id)
        self.option_group.setExclusive(False)
        for idx, button in enumerate(self.option_buttons):
            button.setChecked(idx == selected)
        self.option_group.setExclusive(True)

        # Re-rendering the web view on every tick would restart MathJax typesetting.
        key = (question.id, selected)
        if key == self._rendered_key:
            return
        self._rendered_key = key
        fragment = renderer.render_question(question.text, question.options, selected)
        self.question_view.setHtml(
            renderer.wrap_with_mathjax(fragment, title=state.quiz.title, font_size=QUESTION_FONT_SIZE_PT)
        )

    def _show_message(self, text: str) -> None:
        self.message_label.setText(text)
        self.message_label.setVisible(True)
        self.position_label.setText("")
        self.answered_label.setText("")
        self.countdown_label.setText("")

    # --- User actions ---

    def _handle_option_clicked(self, option_index: int) -> None:
        state = self._session.state if self._session else None
        if state is None or state.current_question is None:
            return
        self._session.select_answer(state.current_question.id, option_index)

    def _handle_previous(self) -> None:
        if self._session is not None:
            self._session.previous_question()

    def _handle_next(self) -> None:
        if self._session is not None:
            self._session.next_question()

    def _handle_submit(self) -> None:
        if self._session is None:
            return
        state = self._session.state
        unanswered = len(state.questions) - state.answered_count
        if not confirm_submit(self, unanswered):
            return
        # The timer may have expired while the dialog was open.
        if self._session is not None:
            self._session.submit()

    def _handle_back(self) -> None:
        if self.has_running_attempt() and not confirm_leave_attempt(self):
            return
        self.end_attempt()
        self.on_exit()
