from __future__ import annotations

import pytest

from quiz_panel.core.models import Question, QuizDefinition
from quiz_panel.core.services.question_store import InMemoryQuestionStore, QuizNotFoundError

from tests.conftest import make_question


def test_list_quizzes_is_sorted_by_title(store):
    assert [quiz.id for quiz in store.list_quizzes()] == ["empty", "olympiad"]


def test_get_questions_returns_copy(store):
    questions = store.get_questions("olympiad")
    questions.clear()
    assert store.get_question_count("olympiad") == 4


def test_unknown_quiz_raises(store):
    with pytest.raises(QuizNotFoundError) as excinfo:
        store.get_questions("missing")
    assert excinfo.value.quiz_id == "missing"
    assert not store.has_quiz("missing")


def test_add_quiz_strips_title():
    store = InMemoryQuestionStore()
    stored = store.add_quiz(
        QuizDefinition(id="padded", title="  Padded  ", total_questions=0, duration_minutes=2)
    )
    assert stored.title == "Padded"
    assert store.get_quiz("padded").title == "Padded"


@pytest.mark.parametrize(
    "quiz",
    [
        QuizDefinition(id="x", title="X", total_questions=1, duration_minutes=0),
        QuizDefinition(id="x", title="X", total_questions=1, duration_minutes=5, marks_per_question=0),
        QuizDefinition(id="x", title="X", total_questions=-1, duration_minutes=5),
        QuizDefinition(id="x", title="   ", total_questions=1, duration_minutes=5),
        QuizDefinition(id=" ", title="X", total_questions=1, duration_minutes=5),
    ],
)
def test_add_quiz_rejects_invalid_definitions(quiz):
    with pytest.raises(ValueError):
        InMemoryQuestionStore().add_quiz(quiz)


def test_add_quiz_rejects_duplicate_question_ids(olympiad_quiz):
    with pytest.raises(ValueError, match="Duplicate"):
        InMemoryQuestionStore().add_quiz(olympiad_quiz, [make_question(1, 0), make_question(1, 2)])


@pytest.mark.parametrize(
    "question",
    [
        Question(id="bad", text="Too few?", options=("A", "B", "C"), correct_option_index=0),
        Question(id="bad", text="Blank option?", options=("A", " ", "C", "D"), correct_option_index=0),
        Question(id="bad", text="Index?", options=("A", "B", "C", "D"), correct_option_index=4),
        Question(id="bad", text="  ", options=("A", "B", "C", "D"), correct_option_index=0),
    ],
)
def test_add_question_rejects_invalid_questions(store, question):
    with pytest.raises(ValueError):
        store.add_question("olympiad", question)
    assert store.get_question_count("olympiad") == 4


def test_add_question_generates_missing_id(store):
    added = store.add_question(
        "empty", Question(id="", text="New?", options=("A", "B", "C", "D"), correct_option_index=1)
    )
    assert added.id
    assert store.get_questions("empty") == [added]


def test_update_question_keeps_original_id(store):
    updated = store.update_question(
        "olympiad",
        0,
        Question(id="other", text=" Rewritten? ", options=("W", "X", "Y", "Z"), correct_option_index=3),
    )
    assert updated.id == "q1"
    assert updated.text == "Rewritten?"
    assert store.get_questions("olympiad")[0] == updated


def test_delete_question_and_bad_index(store):
    store.delete_question("olympiad", 0)
    assert [q.id for q in store.get_questions("olympiad")] == ["q2", "q3", "q4"]
    with pytest.raises(IndexError):
        store.delete_question("olympiad", 3)


def test_remove_quiz(store):
    store.remove_quiz("empty")
    assert not store.has_quiz("empty")
    with pytest.raises(QuizNotFoundError):
        store.remove_quiz("empty")
