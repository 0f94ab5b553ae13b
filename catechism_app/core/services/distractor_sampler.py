"""Multiple choice option sampling."""

from __future__ import annotations

from typing import Sequence

from catechism_app.constants.game_constants import DEFAULT_OPTION_COUNT
from catechism_app.core.models import Question
from catechism_app.core.shuffle import RandomSource, shuffle


def sample_options(
    questions: Sequence[Question],
    target_index: int,
    count: int = DEFAULT_OPTION_COUNT,
    rng: RandomSource | None = None,
) -> list[str]:
    """Return the correct answer for ``questions[target_index]`` mixed with distractors.

    Distractors are the answers of the other questions, with repeats and
    copies of the correct answer removed, so the result holds
    ``min(count, distinct answers)`` distinct strings. The position of the
    correct answer is uniformly random. A pool too small to supply
    ``count - 1`` distractors gives a shorter list; it is never padded.
    """
    if not questions:
        raise ValueError("Cannot sample options from an empty question pool.")
    if not 0 <= target_index < len(questions):
        raise IndexError(f"Question index {target_index} out of range")

    correct_answer = questions[target_index].answer
    seen = {correct_answer}
    other_answers: list[str] = []
    for index, question in enumerate(questions):
        if index == target_index or question.answer in seen:
            continue
        seen.add(question.answer)
        other_answers.append(question.answer)

    distractors = shuffle(other_answers, rng)[: max(0, count - 1)]
    return shuffle([correct_answer, *distractors], rng)
