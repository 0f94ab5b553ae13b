"""
Unit tests for carrying admin edits across restarts.
Run: python -m pytest tests/test_state_sync.py -v
"""

from catechism_app.core.document_store import InMemoryDocumentStore
from catechism_app.core.question_loader import seed_store
from catechism_app.core.services.question_pool import QuestionPool
from catechism_app.core.state_sync import mirror_admin_state, restore_admin_state

from helpers import make_questions


class TestStateSync:

    def test_restore_applies_saved_links_and_known_unlocked_ids(self, local_state):
        local_state.set("unlockedIds", [2, 7, "x", "1"])
        local_state.set("mediaLinks", {"2": {"sermon": "https://sermon", "podcast": "ignored"}})
        questions, unlocked = restore_admin_state(make_questions("A1", "A2"), local_state)
        assert unlocked == [2, 1]
        assert questions[1].sermon == "https://sermon"
        assert questions[0].sermon is None

    def test_restore_without_saved_state(self, local_state):
        questions = make_questions("A1")
        restored, unlocked = restore_admin_state(questions, local_state)
        assert restored == questions
        assert unlocked == []

    def test_mirror_saves_admin_edits(self, local_state):
        store = InMemoryDocumentStore()
        seed_store(store, make_questions("A1", "A2", "A3"), unlocked_ids=[])
        tokens = mirror_admin_state(store, local_state)
        pool = QuestionPool(store)
        pool.open()
        try:
            pool.unlock_next()
            pool.set_media_link(3, "youtube", "https://youtu.be/q3")
        finally:
            pool.close()
            for token in tokens:
                store.unsubscribe(token)

        assert local_state.get("unlockedIds") == [1]
        assert local_state.get("mediaLinks") == {"3": {"youtube": "https://youtu.be/q3"}}

    def test_restart_round_trip(self, local_state):
        first = InMemoryDocumentStore()
        seed_store(first, make_questions("A1", "A2"), unlocked_ids=[])
        mirror_admin_state(first, local_state)
        first.write("unlockedIds", [2])

        questions, unlocked = restore_admin_state(make_questions("A1", "A2"), local_state)
        second = InMemoryDocumentStore()
        seed_store(second, questions, unlocked)
        assert second.get("unlockedIds") == [2]
