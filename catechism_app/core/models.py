"""Domain models for the catechism application."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(slots=True, frozen=True)
class Question:
    """Catechism question/answer pair with optional media links."""

    id: int
    question: str
    answer: str
    youtube: str | None = None
    song: str | None = None
    sermon: str | None = None

    def to_record(self) -> dict[str, object]:
        record: dict[str, object] = {"id": self.id, "question": self.question, "answer": self.answer}
        for kind in ("youtube", "song", "sermon"):
            value = getattr(self, kind)
            if value:
                record[kind] = value
        return record


@dataclass(slots=True, frozen=True)
class BlankToken:
    """One piece of a tokenized answer: either whitespace or a word that may be hidden."""

    original: str
    hidden: bool = False

    @property
    def is_whitespace(self) -> bool:
        return self.original.isspace()


@dataclass(slots=True)
class FillBlankPuzzle:
    """Tokens reconstructing an answer plus the shuffled word bank for refilling it."""

    blanks: list[BlankToken]
    options: list[str]

    def hidden_positions(self) -> list[int]:
        return [position for position, token in enumerate(self.blanks) if token.hidden]

    def hidden_words(self) -> list[str]:
        return [token.original for token in self.blanks if token.hidden]

    def reconstruct(self) -> str:
        return "".join(token.original for token in self.blanks)


class GameMode(str, Enum):
    """Quiz modes available in the Games view."""

    MULTIPLE_CHOICE = "mcq"
    FILL_BLANK = "fill"
    FLASHCARD = "flash"


class SessionStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(slots=True)
class SelectionResult:
    """Outcome of a multiple choice selection or a fill-in-the-blank check."""

    question_id: int
    is_correct: bool
    correct_answer: str
    points_awarded: int = 0


@dataclass(slots=True)
class LeaderboardRow:
    """Immutable snapshot of one leaderboard entry."""

    rank: int
    user_id: str
    points: int

