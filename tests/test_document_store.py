"""
Unit tests for the in-memory document store.
Run: python -m pytest tests/test_document_store.py -v
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from catechism_app.core.document_store import InMemoryDocumentStore


class TestInMemoryDocumentStore:

    def test_write_and_get_nested_paths(self):
        store = InMemoryDocumentStore()
        store.write("users/alice/points", 10)
        assert store.get("users/alice/points") == 10
        assert store.get("users") == {"alice": {"points": 10}}
        assert store.get("users/bob/points", 0) == 0

    def test_writing_none_removes_entry(self):
        store = InMemoryDocumentStore({"a": {"b": 1, "c": 2}})
        store.write("a/b", None)
        assert store.get("a") == {"c": 2}

    def test_returned_values_are_copies(self):
        store = InMemoryDocumentStore()
        store.write("unlockedIds", [1, 2])
        value = store.get("unlockedIds")
        value.append(3)
        assert store.get("unlockedIds") == [1, 2]

    def test_empty_path_is_rejected(self):
        with pytest.raises(ValueError):
            InMemoryDocumentStore().get("/")

    def test_subscribe_delivers_current_value_then_changes(self):
        store = InMemoryDocumentStore({"unlockedIds": [1]})
        seen = []
        store.subscribe("unlockedIds", seen.append)
        store.write("unlockedIds", [1, 3])
        assert seen == [[1], [1, 3]]

    def test_subscribers_see_ancestor_and_descendant_writes(self):
        store = InMemoryDocumentStore()
        tree_updates = []
        leaf_updates = []
        store.subscribe("questions", tree_updates.append)
        store.subscribe("questions/2/youtube", leaf_updates.append)

        store.write("questions/2", {"id": 2, "youtube": "https://youtu.be/x"})
        store.write("unlockedIds", [2])

        assert tree_updates[-1] == {"2": {"id": 2, "youtube": "https://youtu.be/x"}}
        assert leaf_updates == [None, "https://youtu.be/x"]
        assert len(tree_updates) == 2

    def test_unsubscribe_stops_updates(self):
        store = InMemoryDocumentStore()
        seen = []
        token = store.subscribe("users", seen.append)
        store.unsubscribe(token)
        store.write("users/alice/points", 1)
        assert seen == [None]
        assert store.subscriber_count() == 0

    def test_failing_subscriber_does_not_block_others(self):
        store = InMemoryDocumentStore()
        seen = []

        def broken(value):
            if value is not None:
                raise RuntimeError("boom")

        store.subscribe("users", broken)
        store.subscribe("users", seen.append)
        store.write("users/alice/points", 1)
        assert seen[-1] == {"alice": {"points": 1}}

    def test_transaction_applies_update_function(self):
        store = InMemoryDocumentStore()
        assert store.transaction("counter", lambda current: (current or 0) + 5) == 5
        assert store.transaction("counter", lambda current: current * 2) == 10

    def test_concurrent_increments_lose_no_updates(self):
        store = InMemoryDocumentStore({"users": {"alice": {"points": 30}}})
        with ThreadPoolExecutor(max_workers=16) as pool:
            list(pool.map(lambda _: store.atomic_increment("users/alice/points", 10), range(500)))
        assert store.get("users/alice/points") == 30 + 10 * 500
