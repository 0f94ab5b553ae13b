"""Keep admin edits (unlocked ids, media links) across restarts via local device storage."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any

from catechism_app.constants.game_constants import MEDIA_LINK_KINDS
from catechism_app.constants.storage_constants import (
    LOCAL_STATE_MEDIA_LINKS_KEY,
    LOCAL_STATE_UNLOCKED_IDS_KEY,
    QUESTIONS_PATH_KEY,
    UNLOCKED_IDS_PATH_KEY,
)
from catechism_app.core.document_store import DocumentStore, SubscriptionToken
from catechism_app.core.local_state import LocalStateStorage
from catechism_app.core.models import Question

logger = logging.getLogger(__name__)


def restore_admin_state(
    questions: list[Question], local_state: LocalStateStorage
) -> tuple[list[Question], list[int]]:
    """Apply saved media links to ``questions`` and return them with the saved unlocked ids."""
    known_ids = {q.id for q in questions}

    unlocked_ids: list[int] = []
    for raw in local_state.get(LOCAL_STATE_UNLOCKED_IDS_KEY, []) or []:
        try:
            question_id = int(raw)
        except (TypeError, ValueError):
            continue
        if question_id in known_ids:
            unlocked_ids.append(question_id)

    saved_links = local_state.get(LOCAL_STATE_MEDIA_LINKS_KEY, {})
    if not isinstance(saved_links, dict):
        saved_links = {}
    restored = [_apply_links(q, saved_links.get(str(q.id))) for q in questions]
    logger.info("Restored %d unlocked question(s) from %s", len(unlocked_ids), local_state.path)
    return restored, unlocked_ids


def mirror_admin_state(store: DocumentStore, local_state: LocalStateStorage) -> list[SubscriptionToken]:
    """Write unlocked ids and media links to local storage whenever they change in the store."""

    def on_unlocked(value: Any) -> None:
        local_state.set(LOCAL_STATE_UNLOCKED_IDS_KEY, list(value or []))

    def on_questions(value: Any) -> None:
        records = value.values() if isinstance(value, dict) else (value or [])
        links: dict[str, dict[str, str]] = {}
        for record in records:
            if not isinstance(record, dict) or "id" not in record:
                continue
            entry = {kind: record[kind] for kind in MEDIA_LINK_KINDS if record.get(kind)}
            if entry:
                links[str(record["id"])] = entry
        local_state.set(LOCAL_STATE_MEDIA_LINKS_KEY, links)

    return [
        store.subscribe(UNLOCKED_IDS_PATH_KEY, on_unlocked),
        store.subscribe(QUESTIONS_PATH_KEY, on_questions),
    ]


def _apply_links(question: Question, links: Any) -> Question:
    if not isinstance(links, dict):
        return question
    updates = {
        kind: links[kind]
        for kind in MEDIA_LINK_KINDS
        if isinstance(links.get(kind), str) and links[kind].strip()
    }
    return dataclasses.replace(question, **updates) if updates else question
