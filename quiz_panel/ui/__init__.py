"""Qt UI components for the student application."""

from .dialog_helpers import (
    confirm_leave_attempt,
    confirm_submit,
    show_error,
    show_info,
)
from .student_main_window import StudentMainWindow

__all__ = [
    "StudentMainWindow",
    "confirm_leave_attempt",
    "confirm_submit",
    "show_error",
    "show_info",
]
