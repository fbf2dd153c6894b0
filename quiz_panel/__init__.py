"""QuizPanel: timed multiple-choice quiz attempts."""

__version__ = "0.1.0"
