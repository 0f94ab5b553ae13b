"""Shared helpers for the test suite."""

from catechism_app.core.models import Question


class FixedSequenceRandom:
    """Random source that replays ``values`` (wrapped into range) for every draw."""

    def __init__(self, values):
        self._values = list(values)
        self._position = 0
        self.calls = []

    def randrange(self, stop):
        value = self._values[self._position % len(self._values)] % stop
        self._position += 1
        self.calls.append(stop)
        return value


def make_questions(*answers):
    return [
        Question(id=index, question=f"Question {index}?", answer=answer)
        for index, answer in enumerate(answers, start=1)
    ]


SAMPLE_ANSWERS = (
    "God made me.",
    "God made all things.",
    "For his own glory.",
    "By loving him and doing what he commands.",
    "There is only one God.",
)
