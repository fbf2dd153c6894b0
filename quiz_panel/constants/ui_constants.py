"""Qt UI constants used across widgets."""

WINDOW_TITLE: str = "QuizPanel"
STUDENT_URL_PLACEHOLDER: str = "http://<host-ip>:8000/"

QUIZ_LIST_TITLE: str = "Available Quizzes"
QUIZ_LIST_EMPTY_STATE: str = "No quizzes found. Add quiz files to the quiz folder."
QUIZ_LIST_START_BUTTON: str = "Start Quiz"
QUIZ_LIST_ITEM_TEMPLATE: str = "{title} — {count} questions, {minutes} min, {marks} mark(s) each"

ATTEMPT_PREV_BUTTON: str = "Previous"
ATTEMPT_NEXT_BUTTON: str = "Next"
ATTEMPT_SUBMIT_BUTTON: str = "Submit Quiz"
ATTEMPT_BACK_BUTTON: str = "Back to quizzes"
ATTEMPT_LOADING_MESSAGE: str = "Loading questions…"
ATTEMPT_POSITION_TEMPLATE: str = "Question {number} of {total}"
ATTEMPT_ANSWERED_TEMPLATE: str = "{answered} of {total} answered"
QUESTION_FONT_SIZE_PT: int = 14
CONFIRM_SUBMIT_TITLE: str = "Submit Quiz"
CONFIRM_SUBMIT_MESSAGE: str = "Submit your answers now? {unanswered} question(s) are unanswered."
CONFIRM_LEAVE_TITLE: str = "Leave Quiz"
CONFIRM_LEAVE_MESSAGE: str = "Leaving now discards this attempt. Continue?"

RESULT_PASSED_TEXT: str = "CONGRATULATIONS!"
RESULT_FAILED_TEXT: str = "BETTER LUCK NEXT TIME"
RESULT_DOWNLOAD_BUTTON: str = "Download Result"
RESULT_SHARE_BUTTON: str = "Copy Share Text"
RESULT_DONE_BUTTON: str = "Back to quizzes"
RESULT_SAVE_DIALOG_TITLE: str = "Save result"
RESULT_SAVE_FILE_FILTER: str = "PDF files (*.pdf);;All files (*.*)"
