"""Component showing the score breakdown of a finished attempt."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import (
    QFileDialog,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from quiz_panel.constants.ui_constants import (
    RESULT_DONE_BUTTON,
    RESULT_DOWNLOAD_BUTTON,
    RESULT_FAILED_TEXT,
    RESULT_PASSED_TEXT,
    RESULT_SAVE_DIALOG_TITLE,
    RESULT_SAVE_FILE_FILTER,
    RESULT_SHARE_BUTTON,
)
from quiz_panel.core.models import AttemptState
from quiz_panel.core.result_report import (
    AttemptReport,
    StudentProfile,
    build_share_text,
    result_pdf_filename,
    save_result_pdf,
)
from quiz_panel.styling.styles import Styles
from quiz_panel.ui.dialog_helpers import show_error, show_info


class ResultPanel(QWidget):
    """UI component for the post-attempt summary, PDF export and share text."""

    def __init__(
        self,
        profile: StudentProfile,
        on_done: Callable[[], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.profile = profile
        self.on_done = on_done
        self._report: AttemptReport | None = None
        self._last_export_dir: Path = Path.home()

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.banner_label = QLabel("", self)
        self.banner_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.banner_label)

        self.score_label = QLabel("", self)
        self.score_label.setAlignment(Qt.AlignCenter)
        self.score_label.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(self.score_label)

        self.percentage_label = QLabel("", self)
        self.percentage_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.percentage_label)

        breakdown_group = QGroupBox("Score Breakdown", self)
        breakdown_layout = QVBoxLayout()
        breakdown_group.setLayout(breakdown_layout)
        self.correct_label = QLabel("", self)
        self.incorrect_label = QLabel("", self)
        self.unanswered_label = QLabel("", self)
        for label in (self.correct_label, self.incorrect_label, self.unanswered_label):
            breakdown_layout.addWidget(label)
        layout.addWidget(breakdown_group)
        layout.addStretch()

        button_row = QHBoxLayout()
        self.download_button = QPushButton(RESULT_DOWNLOAD_BUTTON, self)
        self.download_button.clicked.connect(self._handle_download)
        button_row.addWidget(self.download_button)
        self.share_button = QPushButton(RESULT_SHARE_BUTTON, self)
        self.share_button.clicked.connect(self._handle_share)
        button_row.addWidget(self.share_button)
        button_row.addStretch()
        self.done_button = QPushButton(RESULT_DONE_BUTTON, self)
        self.done_button.clicked.connect(lambda: self.on_done())
        button_row.addWidget(self.done_button)
        layout.addLayout(button_row)

    def show_result(self, state: AttemptState) -> None:
        report = AttemptReport.from_state(state)
        self._report = report
        self.banner_label.setText(RESULT_PASSED_TEXT if report.passed else RESULT_FAILED_TEXT)
        self.banner_label.setStyleSheet(Styles.get_result_banner_style(report.passed))
        self.score_label.setText(f"{report.score} / {report.max_score}")
        self.percentage_label.setText(f"{report.percentage:.1f}%")
        self.correct_label.setText(f"Correct: {report.correct_count}")
        self.incorrect_label.setText(f"Incorrect: {report.incorrect_count}")
        self.unanswered_label.setText(f"Unanswered: {report.unanswered_count}")

    def _handle_download(self) -> None:
        if self._report is None:
            return
        suggested = self._last_export_dir / result_pdf_filename(self._report.quiz_title)
        file_name, _ = QFileDialog.getSaveFileName(
            self,
            RESULT_SAVE_DIALOG_TITLE,
            str(suggested),
            RESULT_SAVE_FILE_FILTER,
        )
        if not file_name:
            return
        try:
            saved_path = save_result_pdf(Path(file_name), self._report, self.profile)
        except OSError as exc:
            show_error(self, "Download failed", str(exc))
            return
        self._last_export_dir = saved_path.parent
        show_info(self, "Result saved", f"Certificate saved to {saved_path}")

    def _handle_share(self) -> None:
        if self._report is None:
            return
        QGuiApplication.clipboard().setText(build_share_text(self._report))
        show_info(self, "Share", "Caption copied! Paste it wherever you share your result.")
