"""Helper functions for common dialog patterns in the student UI."""

from __future__ import annotations

from PySide6.QtWidgets import QMessageBox, QWidget

from quiz_panel.constants.ui_constants import (
    CONFIRM_LEAVE_MESSAGE,
    CONFIRM_LEAVE_TITLE,
    CONFIRM_SUBMIT_MESSAGE,
    CONFIRM_SUBMIT_TITLE,
)


def _ask(parent: QWidget, title: str, message: str) -> bool:
    reply = QMessageBox.question(
        parent,
        title,
        message,
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No,
    )
    return reply == QMessageBox.Yes


def confirm_submit(parent: QWidget, unanswered: int) -> bool:
    """Ask before a manual submit.

    Args:
        parent: Parent widget for the dialog
        unanswered: Number of questions without a selected option

    Returns:
        True if user confirmed, False otherwise
    """
    return _ask(parent, CONFIRM_SUBMIT_TITLE, CONFIRM_SUBMIT_MESSAGE.format(unanswered=unanswered))


def confirm_leave_attempt(parent: QWidget) -> bool:
    """Ask before abandoning a running attempt."""
    return _ask(parent, CONFIRM_LEAVE_TITLE, CONFIRM_LEAVE_MESSAGE)


def show_error(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.critical(parent, title, message)


def show_info(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.information(parent, title, message)
