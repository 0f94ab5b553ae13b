"""Fill-in-the-blank puzzle generation.

An answer is split into alternating word and whitespace tokens so that
joining the tokens gives back the exact original text. A random subset of
the word tokens is hidden; the learner refills them from a word bank made of
the hidden words plus decoys taken from the other questions' answers.

Hidden words may be any length. Decoys must be longer than three
characters, which keeps short function words ("is", "the") out of the
bank unless they are actually missing from the answer.
"""

from __future__ import annotations

import re
from typing import Sequence

from catechism_app.constants.game_constants import DECOY_MIN_EXCLUSIVE_LENGTH, DEFAULT_BLANK_COUNT
from catechism_app.core.models import BlankToken, FillBlankPuzzle, Question
from catechism_app.core.shuffle import RandomSource, shuffle

_WHITESPACE_SPLIT = re.compile(r"(\s+)")


def tokenize_answer(answer: str) -> list[str]:
    """Split ``answer`` into words and whitespace runs; ``"".join`` reverses it."""
    return [token for token in _WHITESPACE_SPLIT.split(answer) if token]


def generate_blanks(
    questions: Sequence[Question],
    target_index: int,
    blank_count: int = DEFAULT_BLANK_COUNT,
    rng: RandomSource | None = None,
) -> FillBlankPuzzle:
    if not questions:
        raise ValueError("Cannot build a puzzle from an empty question pool.")
    if not 0 <= target_index < len(questions):
        raise IndexError(f"Question index {target_index} out of range")

    tokens = tokenize_answer(questions[target_index].answer)
    word_positions = [position for position, token in enumerate(tokens) if not token.isspace()]
    hide_count = min(max(0, blank_count), len(word_positions))
    hidden_positions = set(shuffle(word_positions, rng)[:hide_count])

    blanks = [
        BlankToken(original=token, hidden=position in hidden_positions and not token.isspace())
        for position, token in enumerate(tokens)
    ]
    hidden_words = [token.original for token in blanks if token.hidden]

    decoys = shuffle(_decoy_candidates(questions, target_index, set(hidden_words)), rng)[: max(0, blank_count)]
    options = shuffle([*hidden_words, *decoys], rng)
    return FillBlankPuzzle(blanks=blanks, options=options)


def _decoy_candidates(questions: Sequence[Question], target_index: int, excluded: set[str]) -> list[str]:
    candidates: list[str] = []
    seen = set(excluded)
    for index, question in enumerate(questions):
        if index == target_index:
            continue
        for word in question.answer.split():
            if len(word) > DECOY_MIN_EXCLUSIVE_LENGTH and word not in seen:
                seen.add(word)
                candidates.append(word)
    return candidates
