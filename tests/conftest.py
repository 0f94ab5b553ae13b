import random

import pytest

from catechism_app.core.document_store import InMemoryDocumentStore
from catechism_app.core.local_state import LocalStateStorage
from catechism_app.core.question_loader import seed_store
from catechism_app.core.study_manager import StudyManager

from helpers import SAMPLE_ANSWERS, make_questions


@pytest.fixture
def sample_questions():
    return make_questions(*SAMPLE_ANSWERS)


@pytest.fixture
def store(sample_questions):
    store = InMemoryDocumentStore()
    seed_store(store, sample_questions, unlocked_ids=[])
    return store


@pytest.fixture
def local_state(tmp_path):
    return LocalStateStorage(tmp_path / "state.json")


@pytest.fixture
def manager(store, local_state):
    manager = StudyManager(
        store,
        local_state=local_state,
        rng_factory=lambda: random.Random(1234),
        admin_passphrase="letmein",
    )
    yield manager
    manager.close()
