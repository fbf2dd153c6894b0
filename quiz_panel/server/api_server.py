"""FastAPI server that lets students take attempts from a browser."""

from __future__ import annotations

from contextlib import asynccontextmanager
from threading import Thread

from fastapi import Depends, FastAPI, HTTPException, Response
from fastapi.responses import HTMLResponse
from pydantic import BaseModel
import uvicorn

from quiz_panel import __version__
from quiz_panel.constants.network_constants import API_HOST, API_PORT, API_THREAD_NAME, UVICORN_LOG_LEVEL
from quiz_panel.core.markdown_math_renderer import renderer
from quiz_panel.core.models import AttemptState, AttemptStatus, QuizDefinition
from quiz_panel.core.result_report import (
    AttemptReport,
    StudentProfile,
    build_share_links,
    build_share_text,
    format_countdown,
    render_result_pdf,
    result_pdf_filename,
)
from quiz_panel.core.services.attempt_registry import AttemptNotFoundError, AttemptRegistry
from quiz_panel.core.services.attempt_session import QuizAttemptSession
from quiz_panel.core.services.question_store import QuizNotFoundError

_STUDENT_PAGE_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>QuizPanel</title>
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <style>
      :root { font-family: 'Inter', system-ui, sans-serif; background: #0b1120; color: #f5f7ff; }
      body { margin: 0; padding: 1.5rem; display: flex; flex-direction: column; gap: 1rem; }
      .card { background: #111a30; border-radius: 0.75rem; padding: 1.5rem; }
      .hidden { display: none; }
      button { border: none; border-radius: 0.75rem; padding: 0.75rem 1.25rem; font-size: 1rem; background: #1f9aa5; color: #fff; cursor: pointer; }
      button:disabled { opacity: 0.5; cursor: not-allowed; }
      button.selected { background: #facc15; color: #0b1120; }
      .options-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(180px, 1fr)); gap: 0.75rem; margin: 1rem 0; }
      .row { display: flex; gap: 0.75rem; align-items: center; flex-wrap: wrap; }
      #timer { font-size: 1.25rem; color: #facc15; margin-left: auto; }
    </style>
    <script>
      window.MathJax = { tex: { inlineMath: [['$','$']], displayMath: [['$$','$$']] } };
    </script>
    <script defer src="https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"></script>
  </head>
  <body>
    <section class="card" id="quiz-list-card">
      <h1>Available Quizzes</h1>
      <div id="quiz-list"></div>
    </section>
    <section class="card hidden" id="attempt-card">
      <div class="row"><strong id="position"></strong><span id="timer"></span></div>
      <div id="question"></div>
      <div id="options" class="options-grid"></div>
      <div class="row">
        <button id="prev-button">Previous</button>
        <button id="next-button">Next</button>
        <button id="submit-button">Submit Quiz</button>
      </div>
    </section>
    <section class="card hidden" id="result-card">
      <h2 id="result-banner"></h2>
      <p id="result-score"></p>
      <p id="result-breakdown"></p>
      <p><a id="pdf-link" href="#" download>Download Result</a></p>
      <p id="share-text"></p>
      <p id="share-links"></p>
    </section>
    <p id="status"></p>
    <script>
      let attemptId = null;
      let pollHandle = null;
      let lastQuestionId = null;
      let attemptFinished = false;
      const statusEl = document.getElementById('status');

      function show(id, visible) { document.getElementById(id).classList.toggle('hidden', !visible); }

      async function call(method, path, body) {
        const response = await fetch(path, {
          method, headers: { 'Content-Type': 'application/json' },
          body: body ? JSON.stringify(body) : undefined,
        });
        if (!response.ok) {
          const detail = await response.json().catch(() => ({}));
          throw new Error(detail.detail || response.statusText);
        }
        return response.status === 204 ? null : response.json();
      }

      async function loadQuizzes() {
        const quizzes = await call('GET', '/quizzes');
        const list = document.getElementById('quiz-list');
        list.innerHTML = '';
        for (const quiz of quizzes) {
          const button = document.createElement('button');
          button.textContent = `${quiz.title} (${quiz.duration_minutes} min)`;
          button.onclick = () => startAttempt(quiz.id);
          list.appendChild(button);
        }
      }

      async function startAttempt(quizId) {
        try {
          const state = await call('POST', '/attempts', { quiz_id: quizId });
          attemptId = state.attempt_id;
          render(state);
          pollHandle = setInterval(refresh, 1000);
        } catch (err) { statusEl.textContent = err.message; }
      }

      async function refresh() {
        if (!attemptId) return;
        try { render(await call('GET', `/attempts/${attemptId}`)); }
        catch (err) { statusEl.textContent = err.message; }
      }

      async function act(path, body) {
        try { render(await call('POST', `/attempts/${attemptId}/${path}`, body)); }
        catch (err) { statusEl.textContent = err.message; }
      }

      function render(state) {
        show('quiz-list-card', false);
        if (state.status === 'error') {
          clearInterval(pollHandle);
          statusEl.textContent = state.error_message;
          show('attempt-card', false);
          show('quiz-list-card', true);
          return;
        }
        if (state.status === 'finished') {
          clearInterval(pollHandle);
          attemptFinished = true;
          renderResult();
          return;
        }
        if (state.status !== 'active') return;
        show('attempt-card', true);
        const question = state.current_question;
        document.getElementById('position').textContent = `Question ${state.current_index + 1} of ${state.question_count}`;
        document.getElementById('timer').textContent = state.countdown;
        const questionKey = `${question.id}:${question.selected_option_index}`;
        if (questionKey !== lastQuestionId) {
          document.getElementById('question').innerHTML = question.html;
          if (window.MathJax && window.MathJax.typesetPromise) { window.MathJax.typesetPromise(); }
          lastQuestionId = questionKey;
        }
        const options = document.getElementById('options');
        options.innerHTML = '';
        question.options.forEach((_, idx) => {
          const button = document.createElement('button');
          button.textContent = String.fromCharCode(65 + idx);
          if (question.selected_option_index === idx) button.classList.add('selected');
          button.onclick = () => act('answers', { question_id: question.id, selected_option_index: idx });
          options.appendChild(button);
        });
      }

      async function renderResult() {
        show('attempt-card', false);
        show('result-card', true);
        const report = await call('GET', `/attempts/${attemptId}/report`);
        document.getElementById('result-banner').textContent = report.passed ? 'CONGRATULATIONS!' : 'BETTER LUCK NEXT TIME';
        document.getElementById('result-score').textContent = `${report.score} / ${report.max_score} (${report.percentage.toFixed(1)}%)`;
        document.getElementById('result-breakdown').textContent =
          `Correct: ${report.correct_count} · Incorrect: ${report.incorrect_count} · Unanswered: ${report.unanswered_count}`;
        document.getElementById('pdf-link').href = `/attempts/${attemptId}/report.pdf`;
        document.getElementById('share-text').textContent = report.share_text;
        document.getElementById('share-links').innerHTML = Object.entries(report.share_links)
          .map(([name, url]) => `<a href="${url}" target="_blank" rel="noopener">${name}</a>`).join(' · ');
      }

      document.getElementById('prev-button').onclick = () => act('previous');
      document.getElementById('next-button').onclick = () => act('next');
      document.getElementById('submit-button').onclick = () => act('submit');
      // Finished attempts stay available for the PDF link until the server evicts them.
      window.addEventListener('beforeunload', () => {
        if (attemptId && !attemptFinished) fetch(`/attempts/${attemptId}`, { method: 'DELETE', keepalive: true });
      });
      loadQuizzes();
    </script>
  </body>
</html>
"""


class StartAttemptPayload(BaseModel):
    """Payload schema for starting an attempt."""

    quiz_id: str


class AnswerPayload(BaseModel):
    """Payload schema for selecting an option."""

    question_id: str
    selected_option_index: int


def _serialize_quiz(quiz: QuizDefinition) -> dict[str, object]:
    return {
        "id": quiz.id,
        "title": quiz.title,
        "total_questions": quiz.total_questions,
        "duration_minutes": quiz.duration_minutes,
        "marks_per_question": quiz.marks_per_question,
    }


def _serialize_state(attempt_id: str, state: AttemptState) -> dict[str, object]:
    question = state.current_question
    current = None
    if question is not None and state.status is AttemptStatus.ACTIVE:
        # Never expose correct_option_index while the attempt is running.
        current = {
            "id": question.id,
            "html": renderer.render_question(
                question.text,
                question.options,
                state.selected_option_for(question.id),
            ),
            "options": list(question.options),
            "selected_option_index": state.selected_option_for(question.id),
        }
    return {
        "attempt_id": attempt_id,
        "quiz": _serialize_quiz(state.quiz),
        "status": state.status.value,
        "question_count": len(state.questions),
        "current_index": state.current_index,
        "current_question": current,
        "answers": dict(state.answers),
        "answered_count": state.answered_count,
        "seconds_remaining": state.seconds_remaining,
        "countdown": format_countdown(state.seconds_remaining),
        "error_message": state.error_message,
        "correct_count": state.correct_count,
        "incorrect_count": state.incorrect_count,
        "unanswered_count": state.unanswered_count,
        "final_score": state.final_score,
    }


def _get_registry_dependency(registry: AttemptRegistry):
    def dependency() -> AttemptRegistry:
        return registry

    return dependency


def create_api_app(registry: AttemptRegistry) -> FastAPI:
    """Create a FastAPI application wired to the provided attempt registry."""

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        yield
        registry.shutdown()

    app = FastAPI(title="QuizPanel API", version=__version__, lifespan=lifespan)
    registry_dep = _get_registry_dependency(registry)

    def lookup(attempt_id: str, attempts: AttemptRegistry) -> QuizAttemptSession:
        try:
            return attempts.get_session(attempt_id)
        except AttemptNotFoundError as exc:
            raise HTTPException(status_code=404, detail="Attempt not found.") from exc

    def finished_report(attempt_id: str, attempts: AttemptRegistry) -> AttemptReport:
        state = lookup(attempt_id, attempts).state
        try:
            return AttemptReport.from_state(state)
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc

    @app.get("/", response_class=HTMLResponse)
    def serve_student_page() -> str:
        return _STUDENT_PAGE_HTML

    @app.get("/quizzes")
    def list_quizzes(attempts: AttemptRegistry = Depends(registry_dep)) -> list[dict[str, object]]:
        return [_serialize_quiz(quiz) for quiz in attempts.question_store.list_quizzes()]

    @app.post("/attempts", status_code=201)
    def start_attempt(
        payload: StartAttemptPayload,
        attempts: AttemptRegistry = Depends(registry_dep),
    ) -> dict[str, object]:
        try:
            attempt_id, session = attempts.create_attempt(payload.quiz_id)
        except QuizNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return _serialize_state(attempt_id, session.state)

    @app.get("/attempts/{attempt_id}")
    def get_attempt(attempt_id: str, attempts: AttemptRegistry = Depends(registry_dep)) -> dict[str, object]:
        return _serialize_state(attempt_id, lookup(attempt_id, attempts).state)

    @app.post("/attempts/{attempt_id}/answers")
    def select_answer(
        attempt_id: str,
        payload: AnswerPayload,
        attempts: AttemptRegistry = Depends(registry_dep),
    ) -> dict[str, object]:
        session = lookup(attempt_id, attempts)
        try:
            session.select_answer(payload.question_id, payload.selected_option_index)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return _serialize_state(attempt_id, session.state)

    @app.post("/attempts/{attempt_id}/next")
    def next_question(attempt_id: str, attempts: AttemptRegistry = Depends(registry_dep)) -> dict[str, object]:
        session = lookup(attempt_id, attempts)
        session.next_question()
        return _serialize_state(attempt_id, session.state)

    @app.post("/attempts/{attempt_id}/previous")
    def previous_question(attempt_id: str, attempts: AttemptRegistry = Depends(registry_dep)) -> dict[str, object]:
        session = lookup(attempt_id, attempts)
        session.previous_question()
        return _serialize_state(attempt_id, session.state)

    @app.post("/attempts/{attempt_id}/submit")
    def submit_attempt(attempt_id: str, attempts: AttemptRegistry = Depends(registry_dep)) -> dict[str, object]:
        session = lookup(attempt_id, attempts)
        session.submit()
        return _serialize_state(attempt_id, session.state)

    @app.get("/attempts/{attempt_id}/report")
    def get_report(attempt_id: str, attempts: AttemptRegistry = Depends(registry_dep)) -> dict[str, object]:
        report = finished_report(attempt_id, attempts)
        share_text = build_share_text(report)
        return {
            "quiz_title": report.quiz_title,
            "question_count": report.question_count,
            "correct_count": report.correct_count,
            "incorrect_count": report.incorrect_count,
            "unanswered_count": report.unanswered_count,
            "score": report.score,
            "max_score": report.max_score,
            "percentage": report.percentage,
            "passed": report.passed,
            "share_text": share_text,
            "share_links": build_share_links(share_text),
        }

    @app.get("/attempts/{attempt_id}/report.pdf")
    def download_report(
        attempt_id: str,
        display_name: str | None = None,
        email: str | None = None,
        attempts: AttemptRegistry = Depends(registry_dep),
    ) -> Response:
        report = finished_report(attempt_id, attempts)
        pdf_bytes = render_result_pdf(report, StudentProfile(display_name=display_name, email=email))
        filename = result_pdf_filename(report.quiz_title)
        return Response(
            content=pdf_bytes,
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.delete("/attempts/{attempt_id}", status_code=204)
    def discard_attempt(attempt_id: str, attempts: AttemptRegistry = Depends(registry_dep)) -> Response:
        try:
            attempts.discard_attempt(attempt_id)
        except AttemptNotFoundError as exc:
            raise HTTPException(status_code=404, detail="Attempt not found.") from exc
        return Response(status_code=204)

    return app


def start_api_server(
    registry: AttemptRegistry,
    host: str = API_HOST,
    port: int = API_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(registry)
    config = uvicorn.Config(app=app, host=host, port=port, log_level=UVICORN_LOG_LEVEL)
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name=API_THREAD_NAME, daemon=True)
    thread.start()
    return thread
