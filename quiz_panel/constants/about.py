"""Static metadata describing QuizPanel."""

from pathlib import Path

from quiz_panel import __version__

APP_NAME = "QuizPanel"
APP_VERSION = __version__
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "QuizPanel lets students take timed multiple-choice quizzes on the desktop "
    "or from a browser, then download or share their result."
)
REPORT_FOOTER_LEFT = "Pro Olympiad Quiz Panel"
REPORT_FOOTER_RIGHT = "Generated Automatically"

DEFAULT_QUIZ_DIRECTORY: Path = Path(__file__).resolve().parent.parent / "data" / "quizzes"
