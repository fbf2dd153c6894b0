"""Quiz-related constants shared across UI, server and core layers."""

DEFAULT_DURATION_MINUTES: int = 25
DEFAULT_MARKS_PER_QUESTION: int = 1
TICK_INTERVAL_SECONDS: float = 1.0
TICK_INTERVAL_MS: int = 1000
PASS_PERCENTAGE: float = 40.0
NO_QUESTIONS_MESSAGE: str = "This quiz has no questions."
SHARE_HASHTAG: str = "#ProOlympiad"
QUIZ_FILE_SUFFIX: str = ".txt"
# Finished or failed browser attempts are kept this long for the result page.
TERMINAL_ATTEMPT_TTL_SECONDS: float = 30 * 60
