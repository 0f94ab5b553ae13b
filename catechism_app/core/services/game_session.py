"""Per-mode game sessions over the eligible question pool."""

from __future__ import annotations

import random
from typing import Callable, Sequence

from catechism_app.constants.game_constants import DEFAULT_BLANK_COUNT, DEFAULT_OPTION_COUNT
from catechism_app.core.models import (
    FillBlankPuzzle,
    GameMode,
    Question,
    SelectionResult,
    SessionStatus,
)
from catechism_app.core.services.blank_generator import generate_blanks
from catechism_app.core.services.distractor_sampler import sample_options
from catechism_app.core.shuffle import RandomSource

# Called with the question answered correctly; returns the points credited.
AwardCallback = Callable[[Question], int]


class GameSession:
    """Shared progression: question index, running score and completion.

    ``advance`` moves forward one question at a time and completes the
    session exactly when the index would reach the pool length, so the index
    always stays inside the pool while the session is in progress.
    """

    mode: GameMode

    def __init__(
        self,
        questions: Sequence[Question],
        rng: RandomSource | None = None,
        on_correct: AwardCallback | None = None,
    ) -> None:
        self._questions: tuple[Question, ...] = tuple(questions)
        self._rng = rng if rng is not None else random.Random()
        self._on_correct = on_correct
        self._status = SessionStatus.NOT_STARTED
        self._index: int = 0
        self._score: int = 0

    def start(self) -> None:
        if not self._questions:
            raise ValueError("No unlocked questions available for games.")
        self._index = 0
        self._score = 0
        self._status = SessionStatus.IN_PROGRESS
        self._prepare_question()

    def restart(self) -> None:
        self.start()

    def advance(self) -> None:
        if self._status is not SessionStatus.IN_PROGRESS:
            return
        if self._index + 1 >= len(self._questions):
            self._status = SessionStatus.COMPLETED
            self._clear_question_state()
            return
        self._index += 1
        self._prepare_question()

    # --- State ---

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def completed(self) -> bool:
        return self._status is SessionStatus.COMPLETED

    @property
    def index(self) -> int:
        return self._index

    @property
    def score(self) -> int:
        return self._score

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    @property
    def question_count(self) -> int:
        return len(self._questions)

    @property
    def current_question(self) -> Question | None:
        if self._status is not SessionStatus.IN_PROGRESS:
            return None
        return self._questions[self._index]

    def _require_in_progress(self) -> Question:
        question = self.current_question
        if question is None:
            raise RuntimeError("Game session is not in progress.")
        return question

    def _credit(self, question: Question) -> int:
        self._score += 1
        if self._on_correct is None:
            return 0
        return self._on_correct(question)

    # --- Per-question hooks ---

    def _prepare_question(self) -> None:
        """Derive per-question data for the current index."""

    def _clear_question_state(self) -> None:
        """Drop per-question data once the session completes."""


class MultipleChoiceSession(GameSession):
    mode = GameMode.MULTIPLE_CHOICE

    def __init__(
        self,
        questions: Sequence[Question],
        rng: RandomSource | None = None,
        on_correct: AwardCallback | None = None,
        option_count: int = DEFAULT_OPTION_COUNT,
    ) -> None:
        super().__init__(questions, rng=rng, on_correct=on_correct)
        self._option_count = option_count
        self._options: list[str] = []
        self._result: SelectionResult | None = None
        self._selected: str | None = None

    @property
    def options(self) -> list[str]:
        return list(self._options)

    @property
    def selected(self) -> str | None:
        return self._selected

    @property
    def result(self) -> SelectionResult | None:
        return self._result

    def select(self, option: str) -> SelectionResult:
        """Score the first selection for the current question; later ones return it unchanged."""
        question = self._require_in_progress()
        if self._result is not None:
            return self._result
        is_correct = option == question.answer
        points = self._credit(question) if is_correct else 0
        self._selected = option
        self._result = SelectionResult(
            question_id=question.id,
            is_correct=is_correct,
            correct_answer=question.answer,
            points_awarded=points,
        )
        return self._result

    def _prepare_question(self) -> None:
        self._options = sample_options(self._questions, self._index, self._option_count, self._rng)
        self._selected = None
        self._result = None

    def _clear_question_state(self) -> None:
        self._options = []
        self._selected = None
        self._result = None


class FillBlankSession(GameSession):
    mode = GameMode.FILL_BLANK

    def __init__(
        self,
        questions: Sequence[Question],
        rng: RandomSource | None = None,
        on_correct: AwardCallback | None = None,
        blank_count: int = DEFAULT_BLANK_COUNT,
    ) -> None:
        super().__init__(questions, rng=rng, on_correct=on_correct)
        self._blank_count = blank_count
        self._puzzle: FillBlankPuzzle | None = None
        self._filled: list[str | None] = []
        self._result: SelectionResult | None = None

    @property
    def puzzle(self) -> FillBlankPuzzle | None:
        return self._puzzle

    @property
    def filled(self) -> list[str | None]:
        return list(self._filled)

    @property
    def result(self) -> SelectionResult | None:
        return self._result

    def display_sentence(self, placeholder: str = "____") -> str:
        if self._puzzle is None:
            return ""
        parts = []
        for token, filled in zip(self._puzzle.blanks, self._filled):
            if not token.hidden:
                parts.append(token.original)
            else:
                parts.append(filled or placeholder)
        return "".join(parts)

    def fill_word(self, word: str) -> int | None:
        """Put ``word`` into the leftmost empty hidden slot and return its position."""
        self._require_in_progress()
        if self._result is not None or self._puzzle is None:
            return None
        for position in self._puzzle.hidden_positions():
            if self._filled[position] is None:
                self._filled[position] = word
                return position
        return None

    def clear_slot(self, position: int) -> None:
        self._require_in_progress()
        if self._result is not None or self._puzzle is None:
            return
        if position not in self._puzzle.hidden_positions():
            raise IndexError(f"Position {position} is not a blank")
        self._filled[position] = None

    def check_answer(self) -> SelectionResult:
        """Credit the question when every blank holds its original word."""
        question = self._require_in_progress()
        if self._result is not None:
            return self._result
        if self._puzzle is None:
            raise RuntimeError("No puzzle prepared for the current question.")
        is_correct = all(
            self._filled[position] == token.original
            for position, token in enumerate(self._puzzle.blanks)
            if token.hidden
        )
        points = self._credit(question) if is_correct else 0
        self._result = SelectionResult(
            question_id=question.id,
            is_correct=is_correct,
            correct_answer=question.answer,
            points_awarded=points,
        )
        return self._result

    def _prepare_question(self) -> None:
        self._puzzle = generate_blanks(self._questions, self._index, self._blank_count, self._rng)
        self._filled = [None] * len(self._puzzle.blanks)
        self._result = None

    def _clear_question_state(self) -> None:
        self._puzzle = None
        self._filled = []
        self._result = None


class FlashcardSession(GameSession):
    mode = GameMode.FLASHCARD

    def __init__(self, questions: Sequence[Question], rng: RandomSource | None = None) -> None:
        super().__init__(questions, rng=rng)
        self._show_answer = False

    @property
    def show_answer(self) -> bool:
        return self._show_answer

    def toggle_answer(self) -> bool:
        self._require_in_progress()
        self._show_answer = not self._show_answer
        return self._show_answer

    def _prepare_question(self) -> None:
        self._show_answer = False

    def _clear_question_state(self) -> None:
        self._show_answer = False


def create_session(
    mode: GameMode,
    questions: Sequence[Question],
    rng: RandomSource | None = None,
    on_correct: AwardCallback | None = None,
) -> GameSession:
    if mode is GameMode.MULTIPLE_CHOICE:
        return MultipleChoiceSession(questions, rng=rng, on_correct=on_correct)
    if mode is GameMode.FILL_BLANK:
        return FillBlankSession(questions, rng=rng, on_correct=on_correct)
    return FlashcardSession(questions, rng=rng)
