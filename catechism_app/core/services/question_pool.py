"""Service exposing the questions and the global unlocked set kept in the document store."""

from __future__ import annotations

import dataclasses
import logging
from threading import Lock
from typing import Any

from catechism_app.constants.game_constants import MEDIA_LINK_KINDS
from catechism_app.constants.storage_constants import QUESTIONS_PATH_KEY, UNLOCKED_IDS_PATH_KEY
from catechism_app.core.document_store import DocumentStore, SubscriptionToken
from catechism_app.core.models import Question
from catechism_app.core.question_loader import QuestionLoadError, parse_question_records

logger = logging.getLogger(__name__)


class QuestionPool:
    """Local, eventually consistent view of ``questions`` and ``unlockedIds``.

    Reads come from the cached view, which subscriptions keep current. Admin
    edits are written to the store and reach this view (and every other
    subscriber) through the subscription echo.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self._lock = Lock()
        self._questions: list[Question] = []
        self._unlocked_ids: set[int] = set()
        self._version: int = 0
        self._tokens: list[SubscriptionToken] = []

    def open(self) -> None:
        if self._tokens:
            return
        self._tokens = [
            self._store.subscribe(QUESTIONS_PATH_KEY, self._on_questions_changed),
            self._store.subscribe(UNLOCKED_IDS_PATH_KEY, self._on_unlocked_changed),
        ]

    def close(self) -> None:
        for token in self._tokens:
            self._store.unsubscribe(token)
        self._tokens = []

    # --- Subscription callbacks ---

    def _on_questions_changed(self, value: Any) -> None:
        if value is None:
            questions: list[Question] = []
        else:
            try:
                questions = parse_question_records(value)
            except QuestionLoadError as exc:
                logger.error("Ignoring malformed questions update: %s", exc)
                return
        with self._lock:
            self._questions = questions
            self._version += 1

    def _on_unlocked_changed(self, value: Any) -> None:
        unlocked: set[int] = set()
        for raw in value or []:
            try:
                unlocked.add(int(raw))
            except (TypeError, ValueError):
                logger.warning("Ignoring invalid unlocked id %r", raw)
        with self._lock:
            self._unlocked_ids = unlocked
            self._version += 1

    # --- Reads ---

    def get_version(self) -> int:
        with self._lock:
            return self._version

    def get_questions(self) -> list[Question]:
        """Return every question in ascending id order."""
        with self._lock:
            return list(self._questions)

    def get_question_count(self) -> int:
        with self._lock:
            return len(self._questions)

    def get_question(self, question_id: int) -> Question:
        with self._lock:
            for question in self._questions:
                if question.id == question_id:
                    return question
        raise KeyError(f"Unknown question id {question_id}")

    def get_unlocked_ids(self) -> set[int]:
        with self._lock:
            return set(self._unlocked_ids)

    def is_unlocked(self, question_id: int) -> bool:
        with self._lock:
            return question_id in self._unlocked_ids

    def get_eligible_questions(self) -> list[Question]:
        """Unlocked questions in ascending id order; the pool every game draws from."""
        with self._lock:
            return [q for q in self._questions if q.id in self._unlocked_ids]

    # --- Admin writes ---

    def unlock_next(self) -> Question | None:
        """Unlock the lowest-id locked question; ``None`` when everything is unlocked."""
        with self._lock:
            locked = next((q for q in self._questions if q.id not in self._unlocked_ids), None)
            if locked is None:
                return None
            updated = self._unlocked_ids | {locked.id}
        self._write_unlocked(updated)
        logger.info("Unlocked question %d", locked.id)
        return locked

    def unlock_all(self) -> None:
        with self._lock:
            updated = {q.id for q in self._questions}
        self._write_unlocked(updated)

    def lock_all(self) -> None:
        self._write_unlocked(set())

    def set_unlocked(self, question_id: int, unlocked: bool) -> None:
        with self._lock:
            if not any(q.id == question_id for q in self._questions):
                raise KeyError(f"Unknown question id {question_id}")
            updated = set(self._unlocked_ids)
        if unlocked:
            updated.add(question_id)
        else:
            updated.discard(question_id)
        self._write_unlocked(updated)

    def toggle_unlocked(self, question_id: int) -> bool:
        unlocked = not self.is_unlocked(question_id)
        self.set_unlocked(question_id, unlocked)
        return unlocked

    def set_media_link(self, question_id: int, kind: str, url: str | None) -> Question:
        if kind not in MEDIA_LINK_KINDS:
            raise ValueError(f"Unknown media link kind {kind!r}; expected one of {', '.join(MEDIA_LINK_KINDS)}.")
        current = self.get_question(question_id)
        cleaned = url.strip() if url else None
        updated = dataclasses.replace(current, **{kind: cleaned or None})
        self._store.write(f"{QUESTIONS_PATH_KEY}/{question_id}", updated.to_record())
        return updated

    def _write_unlocked(self, unlocked: set[int]) -> None:
        self._store.write(UNLOCKED_IDS_PATH_KEY, sorted(unlocked))
