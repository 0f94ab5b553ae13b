"""Utilities for loading catechism questions from the bundled JSON document.

File format: a JSON array of records::

    [
      {"id": 1, "question": "Who made you?", "answer": "God made me."},
      {"id": 2, "question": "...", "answer": "...", "youtube": "https://..."}
    ]

``id``, ``question`` and ``answer`` are required; ``youtube``, ``song`` and
``sermon`` are optional links kept verbatim. Questions are returned in
ascending id order, which is also the order "Unlock Next" follows.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from catechism_app.constants.game_constants import MEDIA_LINK_KINDS
from catechism_app.constants.storage_constants import QUESTIONS_PATH_KEY, UNLOCKED_IDS_PATH_KEY
from catechism_app.core.document_store import DocumentStore
from catechism_app.core.models import Question

logger = logging.getLogger(__name__)


class QuestionLoadError(Exception):
    """Raised when the question document cannot be read or parsed."""


@dataclass(slots=True)
class LoadedQuestions:
    """Container for the loaded document and its questions."""

    source_path: Path
    questions: list[Question]


def load_questions_from_file(file_path: Path) -> LoadedQuestions:
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise QuestionLoadError(f"Could not read {file_path}: {exc}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise QuestionLoadError(f"{file_path} is not valid JSON: {exc}") from exc

    questions = parse_question_records(data)
    if not questions:
        raise QuestionLoadError("Question file did not contain any questions.")
    logger.info("Loaded %d questions from %s", len(questions), file_path)
    return LoadedQuestions(source_path=file_path, questions=questions)


def parse_question_records(data: Any) -> list[Question]:
    """Validate raw records (a list, or a dict keyed by id) and sort them by id."""
    if isinstance(data, dict):
        data = list(data.values())
    if not isinstance(data, list):
        raise QuestionLoadError("Question data must be a list of records.")

    questions = [_parse_record(record, position) for position, record in enumerate(data)]
    seen: set[int] = set()
    for question in questions:
        if question.id in seen:
            raise QuestionLoadError(f"Duplicate question id {question.id}.")
        seen.add(question.id)
    return sorted(questions, key=lambda q: q.id)


def _parse_record(record: Any, position: int) -> Question:
    if not isinstance(record, dict):
        raise QuestionLoadError(f"Record {position} must be an object.")

    raw_id = record.get("id", 0)
    if isinstance(raw_id, bool) or not isinstance(raw_id, (int, str)):
        raise QuestionLoadError(f"Record {position} has an invalid id {raw_id!r}.")
    try:
        question_id = int(raw_id)
    except ValueError as exc:
        raise QuestionLoadError(f"Record {position} has an invalid id {raw_id!r}.") from exc

    question_text = record.get("question")
    answer_text = record.get("answer")
    if not isinstance(question_text, str) or not question_text.strip():
        raise QuestionLoadError(f"Question {question_id} is missing its question text.")
    if not isinstance(answer_text, str) or not answer_text.strip():
        raise QuestionLoadError(f"Question {question_id} is missing its answer text.")

    links: dict[str, str | None] = {}
    for kind in MEDIA_LINK_KINDS:
        value = record.get(kind)
        links[kind] = value.strip() if isinstance(value, str) and value.strip() else None

    return Question(
        id=question_id,
        question=question_text.strip(),
        answer=answer_text,
        **links,
    )


def seed_store(store: DocumentStore, questions: list[Question], unlocked_ids: list[int] | None = None) -> None:
    """Write questions into the store, keeping an existing unlocked set unless one is given."""
    store.write(QUESTIONS_PATH_KEY, {str(q.id): q.to_record() for q in questions})
    if unlocked_ids is not None:
        store.write(UNLOCKED_IDS_PATH_KEY, sorted(set(unlocked_ids)))
    elif store.get(UNLOCKED_IDS_PATH_KEY) is None:
        store.write(UNLOCKED_IDS_PATH_KEY, [])
