"""Application entry point for QuizPanel."""

from __future__ import annotations

import getpass
import socket
import sys

from PySide6.QtWidgets import QApplication

from quiz_panel.constants.about import DEFAULT_QUIZ_DIRECTORY
from quiz_panel.constants.network_constants import API_HOST, API_PORT, LAN_PROBE_ADDRESS, LOOPBACK_ADDRESS
from quiz_panel.core.quiz_library import QuizLibrary
from quiz_panel.core.result_report import StudentProfile
from quiz_panel.core.services.attempt_registry import AttemptRegistry
from quiz_panel.server.api_server import start_api_server
from quiz_panel.ui.student_main_window import StudentMainWindow
from quiz_panel.utils.logging_config import configure_logging


def _determine_student_url(port: int) -> str:
    """Best-effort determination of the local IP for the browser URL."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(LAN_PROBE_ADDRESS)
            ip_address = sock.getsockname()[0]
    except OSError:
        ip_address = LOOPBACK_ADDRESS
    return f"http://{ip_address}:{port}/"


def main() -> None:
    """Load the quiz library, start the API server, and launch the Qt UI."""
    logger = configure_logging()
    logger.info("Starting QuizPanel…")

    library = QuizLibrary.from_directory(DEFAULT_QUIZ_DIRECTORY)
    for path, reason in library.skipped_files.items():
        logger.warning("Quiz file %s was not loaded: %s", path.name, reason)

    registry = AttemptRegistry(library)
    start_api_server(registry=registry, host=API_HOST, port=API_PORT)
    student_url = _determine_student_url(API_PORT)
    logger.info("Student page available at %s", student_url)

    app = QApplication(sys.argv)
    window = StudentMainWindow(
        question_store=library,
        profile=StudentProfile(display_name=getpass.getuser()),
        student_url=student_url,
    )
    window.show()
    exit_code = app.exec()
    registry.shutdown()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
