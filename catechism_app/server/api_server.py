"""FastAPI server that exposes the learner and admin endpoints."""

from __future__ import annotations

import logging
from threading import Thread
from typing import Callable, TypeVar
from uuid import uuid4

from fastapi import Depends, FastAPI, Header, HTTPException, Request, Response
from fastapi.responses import HTMLResponse
from pydantic import BaseModel
import uvicorn

from catechism_app.constants.about import APP_NAME, APP_VERSION
from catechism_app.constants.network_constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    PLAYER_COOKIE_MAX_AGE_SECONDS,
    PLAYER_COOKIE_NAME,
)
from catechism_app.core.models import GameMode, Question, SelectionResult
from catechism_app.core.services.game_session import (
    FillBlankSession,
    FlashcardSession,
    GameSession,
    MultipleChoiceSession,
)
from catechism_app.core.study_manager import StudyManager

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _ensure_player(request: Request, response: Response) -> str:
    player_id = request.cookies.get(PLAYER_COOKIE_NAME)
    if player_id:
        return player_id
    player_id = uuid4().hex
    response.set_cookie(
        key=PLAYER_COOKIE_NAME,
        value=player_id,
        max_age=PLAYER_COOKIE_MAX_AGE_SECONDS,
        samesite="lax",
        httponly=True,
    )
    return player_id


def _run(action: Callable[[], T]) -> T:
    """Invoke a manager call, translating domain errors into HTTP errors."""
    try:
        return action()
    except IndexError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc).strip("'\"")) from exc
    except (ValueError, RuntimeError) as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc


def _serialize_question(question: Question) -> dict[str, object]:
    return question.to_record()


def _serialize_result(result: SelectionResult | None) -> dict[str, object] | None:
    if result is None:
        return None
    return {
        "question_id": result.question_id,
        "is_correct": result.is_correct,
        "correct_answer": result.correct_answer,
        "points_awarded": result.points_awarded,
    }


def _serialize_session(session: GameSession, points: int) -> dict[str, object]:
    payload: dict[str, object] = {
        "mode": session.mode.value,
        "status": session.status.value,
        "completed": session.completed,
        "index": session.index,
        "question_count": session.question_count,
        "score": session.score,
        "points": points,
        "question": None,
    }
    question = session.current_question
    if question is not None:
        payload["question"] = {"id": question.id, "question": question.question}

    if isinstance(session, MultipleChoiceSession):
        payload["options"] = session.options
        payload["selected"] = session.selected
        payload["result"] = _serialize_result(session.result)
    elif isinstance(session, FillBlankSession):
        puzzle = session.puzzle
        filled = session.filled
        blanks = []
        if puzzle is not None:
            for position, token in enumerate(puzzle.blanks):
                blanks.append(
                    {
                        "position": position,
                        "hidden": token.hidden,
                        "text": filled[position] if token.hidden else token.original,
                    }
                )
        payload["blanks"] = blanks
        payload["options"] = list(puzzle.options) if puzzle is not None else []
        payload["display"] = session.display_sentence()
        payload["result"] = _serialize_result(session.result)
    elif isinstance(session, FlashcardSession):
        payload["show_answer"] = session.show_answer
        payload["answer"] = question.answer if question is not None and session.show_answer else None
    return payload


class NicknamePayload(BaseModel):
    """Payload schema for choosing a nickname."""

    nickname: str | None = None


class SelectPayload(BaseModel):
    option: str


class FillPayload(BaseModel):
    word: str


class ClearSlotPayload(BaseModel):
    position: int


class PassphrasePayload(BaseModel):
    passphrase: str


class UnlockPayload(BaseModel):
    unlocked: bool


class MediaLinkPayload(BaseModel):
    kind: str
    url: str | None = None


def _get_study_manager_dependency(study_manager: StudyManager):
    def dependency() -> StudyManager:
        return study_manager

    return dependency


def create_api_app(study_manager: StudyManager) -> FastAPI:
    """Create a FastAPI application wired to the provided study manager."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    manager_dep = _get_study_manager_dependency(study_manager)

    def require_admin(
        x_admin_passphrase: str = Header(default=""),
        manager: StudyManager = Depends(manager_dep),
    ) -> StudyManager:
        if not manager.verify_admin(x_admin_passphrase):
            raise HTTPException(status_code=403, detail="Invalid PIN")
        return manager

    def game_state(manager: StudyManager, player_id: str, mode: GameMode) -> dict[str, object]:
        return _run(lambda: manager.render_game(player_id, mode, _serialize_session))

    @app.get("/", response_class=HTMLResponse)
    def serve_student_page() -> str:
        return _STUDENT_PAGE_HTML

    # --- Learn ---

    @app.get("/learn")
    def get_learn_cards(manager: StudyManager = Depends(manager_dep)) -> dict[str, object]:
        cards = manager.get_learn_cards()
        return {"count": len(cards), "cards": [_serialize_question(q) for q in cards]}

    # --- Identity ---

    @app.get("/identity")
    def get_identity(
        request: Request,
        response: Response,
        manager: StudyManager = Depends(manager_dep),
    ) -> dict[str, object]:
        player_id = _ensure_player(request, response)
        return {"identity": manager.get_identity(player_id), "points": manager.get_points(player_id)}

    @app.post("/identity")
    def choose_identity(
        payload: NicknamePayload,
        request: Request,
        response: Response,
        manager: StudyManager = Depends(manager_dep),
    ) -> dict[str, object]:
        player_id = _ensure_player(request, response)
        identity = _run(lambda: manager.choose_identity(player_id, payload.nickname))
        return {"identity": identity, "points": manager.get_points(player_id)}

    @app.post("/identity/guest")
    def play_as_guest(
        request: Request,
        response: Response,
        manager: StudyManager = Depends(manager_dep),
    ) -> dict[str, object]:
        player_id = _ensure_player(request, response)
        identity = manager.play_as_guest(player_id)
        return {"identity": identity, "points": manager.get_points(player_id)}

    @app.get("/leaderboard")
    def get_leaderboard(manager: StudyManager = Depends(manager_dep)) -> dict[str, object]:
        rows = manager.get_leaderboard()
        return {
            "rows": [{"rank": row.rank, "user_id": row.user_id, "points": row.points} for row in rows],
        }

    # --- Games ---

    @app.post("/games/{mode}/start", status_code=201)
    def start_game(
        mode: GameMode,
        request: Request,
        response: Response,
        manager: StudyManager = Depends(manager_dep),
    ) -> dict[str, object]:
        player_id = _ensure_player(request, response)
        _run(lambda: manager.start_game(player_id, mode))
        return game_state(manager, player_id, mode)

    @app.get("/games/{mode}")
    def get_game(
        mode: GameMode,
        request: Request,
        response: Response,
        manager: StudyManager = Depends(manager_dep),
    ) -> dict[str, object]:
        player_id = _ensure_player(request, response)
        _run(lambda: manager.get_game(player_id, mode))
        return game_state(manager, player_id, mode)

    @app.post("/games/mcq/select")
    def select_option(
        payload: SelectPayload,
        request: Request,
        response: Response,
        manager: StudyManager = Depends(manager_dep),
    ) -> dict[str, object]:
        player_id = _ensure_player(request, response)
        _run(lambda: manager.select_option(player_id, payload.option))
        return game_state(manager, player_id, GameMode.MULTIPLE_CHOICE)

    @app.post("/games/fill/fill")
    def fill_word(
        payload: FillPayload,
        request: Request,
        response: Response,
        manager: StudyManager = Depends(manager_dep),
    ) -> dict[str, object]:
        player_id = _ensure_player(request, response)
        _run(lambda: manager.fill_word(player_id, payload.word))
        return game_state(manager, player_id, GameMode.FILL_BLANK)

    @app.post("/games/fill/clear")
    def clear_slot(
        payload: ClearSlotPayload,
        request: Request,
        response: Response,
        manager: StudyManager = Depends(manager_dep),
    ) -> dict[str, object]:
        player_id = _ensure_player(request, response)
        _run(lambda: manager.clear_slot(player_id, payload.position))
        return game_state(manager, player_id, GameMode.FILL_BLANK)

    @app.post("/games/fill/check")
    def check_fill_answer(
        request: Request,
        response: Response,
        manager: StudyManager = Depends(manager_dep),
    ) -> dict[str, object]:
        player_id = _ensure_player(request, response)
        _run(lambda: manager.check_fill_answer(player_id))
        return game_state(manager, player_id, GameMode.FILL_BLANK)

    @app.post("/games/flash/toggle")
    def toggle_flashcard(
        request: Request,
        response: Response,
        manager: StudyManager = Depends(manager_dep),
    ) -> dict[str, object]:
        player_id = _ensure_player(request, response)
        _run(lambda: manager.toggle_flashcard(player_id))
        return game_state(manager, player_id, GameMode.FLASHCARD)

    @app.post("/games/{mode}/advance")
    def advance(
        mode: GameMode,
        request: Request,
        response: Response,
        manager: StudyManager = Depends(manager_dep),
    ) -> dict[str, object]:
        player_id = _ensure_player(request, response)
        _run(lambda: manager.advance(player_id, mode))
        return game_state(manager, player_id, mode)

    @app.post("/games/{mode}/restart")
    def restart(
        mode: GameMode,
        request: Request,
        response: Response,
        manager: StudyManager = Depends(manager_dep),
    ) -> dict[str, object]:
        player_id = _ensure_player(request, response)
        _run(lambda: manager.restart(player_id, mode))
        return game_state(manager, player_id, mode)

    @app.delete("/games", status_code=204)
    def end_game(
        request: Request,
        response: Response,
        manager: StudyManager = Depends(manager_dep),
    ) -> Response:
        player_id = _ensure_player(request, response)
        manager.end_game(player_id)
        response.status_code = 204
        return response

    # --- Admin ---

    @app.post("/admin/login")
    def admin_login(payload: PassphrasePayload, manager: StudyManager = Depends(manager_dep)) -> dict[str, object]:
        if not manager.verify_admin(payload.passphrase):
            raise HTTPException(status_code=403, detail="Invalid PIN")
        return {"ok": True}

    @app.get("/admin/questions")
    def admin_questions(manager: StudyManager = Depends(require_admin)) -> dict[str, object]:
        unlocked = manager.get_unlocked_ids()
        return {
            "questions": [
                {**_serialize_question(q), "unlocked": q.id in unlocked} for q in manager.get_questions()
            ],
        }

    @app.post("/admin/unlock-next")
    def admin_unlock_next(manager: StudyManager = Depends(require_admin)) -> dict[str, object]:
        unlocked = manager.unlock_next()
        return {"unlocked_id": unlocked.id if unlocked is not None else None}

    @app.post("/admin/unlock-all")
    def admin_unlock_all(manager: StudyManager = Depends(require_admin)) -> dict[str, object]:
        manager.unlock_all()
        return {"unlocked_ids": sorted(manager.get_unlocked_ids())}

    @app.put("/admin/questions/{question_id}/unlocked")
    def admin_set_unlocked(
        question_id: int,
        payload: UnlockPayload,
        manager: StudyManager = Depends(require_admin),
    ) -> dict[str, object]:
        _run(lambda: manager.set_unlocked(question_id, payload.unlocked))
        return {"id": question_id, "unlocked": payload.unlocked}

    @app.put("/admin/questions/{question_id}/links")
    def admin_set_link(
        question_id: int,
        payload: MediaLinkPayload,
        manager: StudyManager = Depends(require_admin),
    ) -> dict[str, object]:
        updated = _run(lambda: manager.set_media_link(question_id, payload.kind, payload.url))
        return _serialize_question(updated)

    return app


def start_api_server(
    study_manager: StudyManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(study_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="CatechismApiServer", daemon=True)
    thread.start()
    logger.info("API server listening on %s:%d", host, port)
    return thread


_STUDENT_PAGE_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>Catechism Learning Tool</title>
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <style>
      :root { font-family: 'Inter', system-ui, sans-serif; background: #f3f4f6; color: #111827; }
      body { margin: 0; padding: 1.5rem; display: flex; flex-direction: column; gap: 1rem; max-width: 60rem; margin-inline: auto; }
      header { display: flex; justify-content: space-between; align-items: center; gap: 1rem; flex-wrap: wrap; }
      nav button, .mode-row button { margin-right: 0.5rem; }
      button { border: none; border-radius: 0.5rem; padding: 0.5rem 1rem; background: #e5e7eb; cursor: pointer; }
      button.active, button.primary { background: #2563eb; color: #fff; }
      .card { background: #fff; border-radius: 0.75rem; padding: 1rem 1.25rem; box-shadow: 0 0.25rem 0.75rem rgba(0, 0, 0, 0.08); }
      .hidden { display: none; }
      .option { display: block; width: 100%; text-align: left; margin: 0.35rem 0; }
      .option.correct { background: #bbf7d0; }
      .option.wrong { background: #fecaca; }
      .word-bank button { margin: 0.25rem; }
      .blank { border-bottom: 2px solid #2563eb; padding: 0 0.25rem; cursor: pointer; }
      #error { color: #dc2626; }
    </style>
  </head>
  <body>
    <header>
      <h1>Catechism Learning Tool</h1>
      <nav>
        <button data-view="learn" class="active">Learn</button>
        <button data-view="games">Games</button>
        <button data-view="leaderboard">Leaderboard</button>
      </nav>
    </header>
    <section class="card" id="identity-card">
      <span id="identity-label">Choose a nickname to keep your points.</span>
      <input id="nickname" placeholder="Nickname" />
      <button id="nickname-button" class="primary">Save</button>
      <button id="guest-button">Play as guest</button>
    </section>
    <p id="error"></p>
    <section id="learn-view"></section>
    <section id="games-view" class="hidden">
      <div class="mode-row">
        <button data-mode="mcq">Multiple Choice</button>
        <button data-mode="fill">Fill in the Blank</button>
        <button data-mode="flash">Flashcards</button>
      </div>
      <div id="game" class="card hidden"></div>
    </section>
    <section id="leaderboard-view" class="card hidden"></section>
    <script>
      const el = (id) => document.getElementById(id);
      let currentMode = null;

      async function api(method, path, body) {
        const res = await fetch(path, {
          method,
          headers: body ? { 'Content-Type': 'application/json' } : {},
          body: body ? JSON.stringify(body) : undefined,
          credentials: 'same-origin',
        });
        const data = await res.json().catch(() => ({}));
        if (!res.ok) {
          const error = new Error(data.detail || res.statusText);
          error.status = res.status;
          throw error;
        }
        el('error').textContent = '';
        return data;
      }

      function showError(err) { el('error').textContent = err.message; }

      function escapeHtml(text) {
        const div = document.createElement('div');
        div.textContent = text == null ? '' : String(text);
        return div.innerHTML;
      }

      async function refreshIdentity() {
        const data = await api('GET', '/identity');
        el('identity-label').textContent = data.identity
          ? `Playing as ${data.identity} (${data.points} points)`
          : 'Choose a nickname to keep your points.';
      }

      async function renderLearn() {
        const data = await api('GET', '/learn');
        if (data.count === 0) {
          el('learn-view').innerHTML = '<div class="card">No questions unlocked yet. Please unlock in admin.</div>';
          return;
        }
        el('learn-view').innerHTML = data.cards.map((card) => `
          <div class="card">
            <h2>${card.id}. ${escapeHtml(card.question)}</h2>
            <details><summary>Show Answer</summary><p>${escapeHtml(card.answer)}</p></details>
            ${card.youtube ? `<p><a href="${escapeHtml(card.youtube)}" target="_blank">Memory song video</a></p>` : ''}
            ${card.song ? `<p><a href="${escapeHtml(card.song)}" target="_blank">Song</a></p>` : ''}
            ${card.sermon ? `<p><a href="${escapeHtml(card.sermon)}" target="_blank">Sermon</a></p>` : ''}
          </div>`).join('');
      }

      async function renderLeaderboard() {
        const data = await api('GET', '/leaderboard');
        el('leaderboard-view').innerHTML = data.rows.length
          ? '<ol>' + data.rows.map((row) => `<li>${escapeHtml(row.user_id)}: ${row.points}</li>`).join('') + '</ol>'
          : '<p>No points awarded yet.</p>';
      }

      function renderGame(state) {
        const game = el('game');
        game.classList.remove('hidden');
        if (state.completed) {
          const summary = state.mode === 'flash'
            ? "You've gone through all flashcards."
            : `You scored ${state.score} out of ${state.question_count}.`;
          game.innerHTML = `<p>${summary}</p><button class="primary" id="restart">Restart</button>`;
          el('restart').onclick = () => act('POST', `/games/${state.mode}/restart`);
          refreshIdentity().catch(showError);
          return;
        }
        const header = `<p><strong>${state.mode === 'flash' ? 'Card' : 'Question'} ${state.index + 1} of ${state.question_count}</strong></p>`;
        const prompt = `<p>${escapeHtml(state.question.question)}</p>`;
        if (state.mode === 'mcq') {
          const buttons = state.options.map((option, i) => {
            let cls = 'option';
            if (state.result) {
              if (option === state.result.correct_answer) cls += ' correct';
              else if (option === state.selected) cls += ' wrong';
            }
            return `<button class="${cls}" data-option="${i}">${escapeHtml(option)}</button>`;
          }).join('');
          const next = state.result ? '<button class="primary" id="next">Next</button>' : '';
          game.innerHTML = header + prompt + buttons + next;
          game.querySelectorAll('[data-option]').forEach((button) => {
            button.onclick = () => act('POST', '/games/mcq/select', { option: state.options[Number(button.dataset.option)] });
          });
          if (state.result) el('next').onclick = () => act('POST', '/games/mcq/advance');
        } else if (state.mode === 'fill') {
          const sentence = state.blanks.map((blank) => blank.hidden
            ? `<span class="blank" data-position="${blank.position}">${escapeHtml(blank.text || '____')}</span>`
            : escapeHtml(blank.text)).join('');
          const bank = state.options.map((word, i) => `<button data-word="${i}">${escapeHtml(word)}</button>`).join('');
          const outcome = state.result
            ? `<p>${state.result.is_correct ? 'Correct!' : 'Not quite: ' + escapeHtml(state.result.correct_answer)}</p><button class="primary" id="next">Next</button>`
            : '<button class="primary" id="check">Check</button>';
          game.innerHTML = header + prompt + `<p>${sentence}</p><div class="word-bank">${bank}</div>` + outcome;
          game.querySelectorAll('[data-word]').forEach((button) => {
            button.onclick = () => act('POST', '/games/fill/fill', { word: state.options[Number(button.dataset.word)] });
          });
          game.querySelectorAll('[data-position]').forEach((span) => {
            span.onclick = () => act('POST', '/games/fill/clear', { position: Number(span.dataset.position) });
          });
          if (state.result) el('next').onclick = () => act('POST', '/games/fill/advance');
          else el('check').onclick = () => act('POST', '/games/fill/check');
        } else {
          const face = state.show_answer ? escapeHtml(state.answer) : prompt;
          game.innerHTML = header + `<div class="card" id="flashcard">${face}<p><small>Tap card to ${state.show_answer ? 'hide' : 'reveal'} answer</small></p></div>`
            + '<button class="primary" id="next">Next</button>';
          el('flashcard').onclick = () => act('POST', '/games/flash/toggle');
          el('next').onclick = () => act('POST', '/games/flash/advance');
        }
      }

      async function act(method, path, body) {
        try {
          renderGame(await api(method, path, body));
        } catch (err) {
          showError(err);
          if (err.status === 409 && currentMode && !path.endsWith('/start')) {
            api('GET', `/games/${currentMode}`).then(renderGame).catch(showError);
          }
        }
      }

      document.querySelectorAll('nav button').forEach((button) => {
        button.onclick = () => {
          document.querySelectorAll('nav button').forEach((b) => b.classList.toggle('active', b === button));
          ['learn', 'games', 'leaderboard'].forEach((view) => el(`${view}-view`).classList.toggle('hidden', view !== button.dataset.view));
          if (button.dataset.view === 'learn') renderLearn().catch(showError);
          if (button.dataset.view === 'leaderboard') renderLeaderboard().catch(showError);
          if (button.dataset.view !== 'games' && currentMode) {
            currentMode = null;
            el('game').classList.add('hidden');
            document.querySelectorAll('[data-mode]').forEach((b) => b.classList.remove('active'));
            api('DELETE', '/games').catch(showError);
          }
        };
      });

      document.querySelectorAll('[data-mode]').forEach((button) => {
        button.onclick = () => {
          currentMode = button.dataset.mode;
          document.querySelectorAll('[data-mode]').forEach((b) => b.classList.toggle('active', b === button));
          act('POST', `/games/${currentMode}/start`);
        };
      });

      el('nickname-button').onclick = () => api('POST', '/identity', { nickname: el('nickname').value })
        .then(refreshIdentity).catch(showError);
      el('guest-button').onclick = () => api('POST', '/identity/guest').then(refreshIdentity).catch(showError);

      refreshIdentity().catch(showError);
      renderLearn().catch(showError);
    </script>
  </body>
</html>
"""
