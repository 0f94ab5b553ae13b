"""
Unit tests for the scoring ledger and leaderboard.
Run: python -m pytest tests/test_scoring_ledger.py -v
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from catechism_app.core.document_store import InMemoryDocumentStore
from catechism_app.core.services.scoring_ledger import ScoringLedger


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def ledger(store, local_state):
    return ScoringLedger(store, local_state)


class TestScoringLedger:

    def test_award_accumulates_per_identity(self, ledger):
        ledger.award("Alice", 10)
        ledger.award("Alice", 10)
        ledger.award("Bob", 10)
        assert ledger.points_for("Alice") == 20
        assert ledger.points_for("Bob") == 10

    def test_concurrent_awards_lose_no_updates(self, ledger):
        ledger.award("Alice", 40)
        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda _: ledger.award("Alice", 10), range(200)))
        assert ledger.points_for("Alice") == 40 + 10 * 200

    def test_admin_and_anonymous_awards_are_ignored(self, ledger):
        assert ledger.award("admin", 10) == 0
        assert ledger.award(None, 10) == 0
        assert ledger.award("", 10) == 0
        assert ledger.leaderboard() == []

    def test_guest_points_stay_on_the_device(self, ledger, local_state):
        assert ledger.award("guest", 10) == 10
        ledger.award("guest", 10)
        assert ledger.points_for("guest") == 20
        assert local_state.guest_points() == 20
        assert ledger.leaderboard() == []

    def test_negative_points_rejected(self, ledger):
        with pytest.raises(ValueError):
            ledger.award("Alice", -5)

    def test_nickname_is_stored_under_an_escaped_key(self, ledger, store):
        ledger.award("Mary.Jane", 10)
        assert ledger.points_for("Mary.Jane") == 10
        assert store.get("users/Mary%2EJane") == {"name": "Mary.Jane", "points": 10}
        assert ledger.leaderboard()[0].user_id == "Mary.Jane"

    def test_similar_nicknames_keep_separate_totals(self, ledger):
        ledger.award("a.b", 10)
        ledger.award("a b", 20)
        ledger.award("a_b", 30)
        assert ledger.points_for("a.b") == 10
        assert ledger.points_for("a b") == 20
        assert ledger.points_for("a_b") == 30
        assert [row.user_id for row in ledger.leaderboard()] == ["a_b", "a b", "a.b"]

    def test_guest_totals_are_kept_per_player(self, ledger, local_state):
        ledger.award("guest", 10, guest_player="browser-a")
        assert ledger.points_for("guest", guest_player="browser-a") == 10
        assert ledger.points_for("guest", guest_player="browser-b") == 0
        assert ledger.points_for("guest") == 0
        assert local_state.guest_points("browser-a") == 10

    def test_leaderboard_sorted_descending_and_limited(self, ledger):
        for index in range(12):
            ledger.award(f"player{index}", 10 * index)
        rows = ledger.leaderboard(limit=10)
        assert len(rows) == 10
        assert [row.rank for row in rows] == list(range(1, 11))
        assert rows[0].user_id == "player11"
        assert [row.points for row in rows] == sorted((row.points for row in rows), reverse=True)

    def test_leaderboard_ties_keep_store_order(self, ledger):
        ledger.register("Zoe")
        ledger.award("Adam", 10)
        ledger.award("Zoe", 10)
        assert [row.user_id for row in ledger.leaderboard()] == ["Zoe", "Adam"]

    def test_register_creates_zero_entry_without_resetting(self, ledger):
        ledger.register("Alice")
        assert ledger.leaderboard()[0].points == 0
        ledger.award("Alice", 10)
        ledger.register("Alice")
        assert ledger.points_for("Alice") == 10
