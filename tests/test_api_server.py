"""
Tests for the learner and admin HTTP API.
Run: python -m pytest tests/test_api_server.py -v
"""

import pytest
from fastapi.testclient import TestClient

from catechism_app.constants.network_constants import PLAYER_COOKIE_NAME
from catechism_app.core.models import GameMode
from catechism_app.server.api_server import create_api_app

ADMIN_HEADERS = {"X-Admin-Passphrase": "letmein"}


@pytest.fixture
def client(manager):
    return TestClient(create_api_app(manager))


def answer_for(manager, question_id):
    return next(q.answer for q in manager.get_questions() if q.id == question_id)


class TestLearnerApi:

    def test_student_page_served(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]

    def test_learn_lists_unlocked_cards(self, client, manager):
        assert client.get("/learn").json()["count"] == 0
        manager.set_unlocked(2, True)
        body = client.get("/learn").json()
        assert body["count"] == 1
        assert body["cards"][0]["id"] == 2

    def test_identity_uses_player_cookie(self, client):
        response = client.post("/identity", json={"nickname": "Alice"})
        assert response.status_code == 200
        assert PLAYER_COOKIE_NAME in response.cookies
        assert client.get("/identity").json() == {"identity": "Alice", "points": 0}

    def test_guest_identity(self, client):
        assert client.post("/identity/guest").json()["identity"] == "guest"

    def test_punctuation_only_nickname_is_ignored(self, client):
        response = client.post("/identity", json={"nickname": "..."})
        assert response.status_code == 200
        assert response.json()["identity"] is None

    def test_no_game_is_not_found(self, client):
        assert client.get("/games/mcq").status_code == 404

    def test_unknown_mode_is_rejected(self, client):
        assert client.post("/games/bingo/start").status_code == 422

    def test_start_without_unlocked_questions_conflicts(self, client):
        assert client.post("/games/mcq/start").status_code == 409

    def test_multiple_choice_round(self, client, manager):
        manager.unlock_all()
        client.post("/identity", json={"nickname": "Alice"})
        state = client.post("/games/mcq/start").json()
        assert state["status"] == "in_progress"
        assert len(state["options"]) == 4

        answer = answer_for(manager, state["question"]["id"])
        state = client.post("/games/mcq/select", json={"option": answer}).json()
        assert state["result"]["is_correct"] is True
        assert state["points"] == 10

        rows = client.get("/leaderboard").json()["rows"]
        assert rows == [{"rank": 1, "user_id": "Alice", "points": 10}]

        state = client.post("/games/mcq/advance").json()
        assert state["index"] == 1
        assert state["result"] is None

    def test_fill_blank_round(self, client, manager):
        manager.unlock_all()
        state = client.post("/games/fill/start").json()
        hidden = [slot for slot in state["blanks"] if slot["hidden"]]
        assert all(slot["text"] is None for slot in hidden)

        game = manager.get_game(client.cookies[PLAYER_COOKIE_NAME], GameMode.FILL_BLANK)
        for token in game.puzzle.blanks:
            if token.hidden:
                client.post("/games/fill/fill", json={"word": token.original})
        first_blank = hidden[0]["position"]
        client.post("/games/fill/clear", json={"position": first_blank})
        state = client.post("/games/fill/fill", json={"word": game.puzzle.blanks[first_blank].original}).json()
        assert "____" not in state["display"]

        state = client.post("/games/fill/check").json()
        assert state["result"]["is_correct"] is True

    def test_clearing_a_visible_word_is_rejected(self, client, manager):
        manager.unlock_all()
        state = client.post("/games/fill/start").json()
        visible = next(slot for slot in state["blanks"] if not slot["hidden"])
        response = client.post("/games/fill/clear", json={"position": visible["position"]})
        assert response.status_code == 422

    def test_flashcard_toggle_reveals_answer(self, client, manager):
        manager.set_unlocked(1, True)
        state = client.post("/games/flash/start").json()
        assert state["answer"] is None
        state = client.post("/games/flash/toggle").json()
        assert state["show_answer"] is True
        assert state["answer"] == answer_for(manager, 1)

    def test_pool_change_restarts_game(self, client, manager):
        manager.set_unlocked(1, True)
        client.post("/games/flash/start")
        manager.set_unlocked(2, True)
        state = client.get("/games/flash").json()
        assert state["question_count"] == 2
        assert state["index"] == 0

    def test_answer_after_pool_change_conflicts_then_reload_restarts(self, client, manager):
        manager.set_unlocked(1, True)
        client.post("/identity", json={"nickname": "Alice"})
        state = client.post("/games/mcq/start").json()
        manager.set_unlocked(2, True)

        answer = answer_for(manager, state["question"]["id"])
        response = client.post("/games/mcq/select", json={"option": answer})
        assert response.status_code == 409
        assert client.get("/identity").json()["points"] == 0

        state = client.get("/games/mcq").json()
        assert state["index"] == 0
        assert state["question_count"] == 2
        assert state["result"] is None

    def test_guest_browsers_do_not_share_points(self, client, manager):
        manager.set_unlocked(1, True)
        client.post("/identity/guest")
        client.post("/games/mcq/start")
        client.post("/games/mcq/select", json={"option": answer_for(manager, 1)})
        assert client.get("/identity").json()["points"] == 10

        other = TestClient(client.app)
        other.post("/identity/guest")
        assert other.get("/identity").json()["points"] == 0

    def test_ending_game_discards_session(self, client, manager):
        manager.unlock_all()
        client.post("/games/flash/start")
        assert client.delete("/games").status_code == 204
        assert client.get("/games/flash").status_code == 404


class TestAdminApi:

    def test_login(self, client):
        assert client.post("/admin/login", json={"passphrase": "letmein"}).status_code == 200
        assert client.post("/admin/login", json={"passphrase": "nope"}).status_code == 403

    def test_admin_routes_require_passphrase(self, client):
        assert client.get("/admin/questions").status_code == 403
        assert client.get("/admin/questions", headers={"X-Admin-Passphrase": "nope"}).status_code == 403

    def test_unlock_next_and_all(self, client):
        assert client.post("/admin/unlock-next", headers=ADMIN_HEADERS).json() == {"unlocked_id": 1}
        body = client.post("/admin/unlock-all", headers=ADMIN_HEADERS).json()
        assert body["unlocked_ids"] == [1, 2, 3, 4, 5]
        assert client.post("/admin/unlock-next", headers=ADMIN_HEADERS).json() == {"unlocked_id": None}

    def test_set_unlocked_and_list(self, client):
        response = client.put("/admin/questions/3/unlocked", json={"unlocked": True}, headers=ADMIN_HEADERS)
        assert response.status_code == 200
        questions = client.get("/admin/questions", headers=ADMIN_HEADERS).json()["questions"]
        assert [q["id"] for q in questions if q["unlocked"]] == [3]

    def test_set_unlocked_unknown_question(self, client):
        response = client.put("/admin/questions/99/unlocked", json={"unlocked": True}, headers=ADMIN_HEADERS)
        assert response.status_code == 404

    def test_set_media_link(self, client):
        response = client.put(
            "/admin/questions/2/links",
            json={"kind": "song", "url": "https://example.com/song"},
            headers=ADMIN_HEADERS,
        )
        assert response.status_code == 200
        assert response.json()["song"] == "https://example.com/song"

        bad = client.put("/admin/questions/2/links", json={"kind": "podcast", "url": "x"}, headers=ADMIN_HEADERS)
        assert bad.status_code == 409
