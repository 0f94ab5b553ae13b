"""
Unit tests for fill-in-the-blank puzzle generation.
Run: python -m pytest tests/test_blank_generator.py -v
"""

import random
from collections import Counter

import pytest

from catechism_app.core.services.blank_generator import generate_blanks, tokenize_answer

from helpers import FixedSequenceRandom, make_questions


class TestTokenizeAnswer:

    def test_keeps_whitespace_tokens(self):
        assert tokenize_answer("Jesus Christ is Lord") == ["Jesus", " ", "Christ", " ", "is", " ", "Lord"]

    def test_round_trips_irregular_whitespace(self):
        answer = "  God\tmade   me.\n"
        tokens = tokenize_answer(answer)
        assert "".join(tokens) == answer
        assert "" not in tokens


class TestGenerateBlanks:

    def test_jesus_christ_is_lord_hides_two_words(self):
        questions = make_questions("Jesus Christ is Lord")
        rng = random.Random(3)
        for _ in range(200):
            puzzle = generate_blanks(questions, 0, blank_count=2, rng=rng)
            hidden = puzzle.hidden_words()
            assert len(hidden) == 2
            assert set(hidden) <= {"Jesus", "Christ", "is", "Lord"}
            assert puzzle.reconstruct() == "Jesus Christ is Lord"
            assert all(not token.hidden for token in puzzle.blanks if token.is_whitespace)

    def test_short_words_can_be_hidden(self):
        """Hidden words have no length filter, unlike decoys."""
        questions = make_questions("Jesus Christ is Lord")
        rng = random.Random(0)
        hidden_counts = Counter()
        for _ in range(300):
            hidden_counts.update(generate_blanks(questions, 0, blank_count=2, rng=rng).hidden_words())
        assert hidden_counts["is"] > 0

    def test_hidden_count_is_min_of_blank_count_and_words(self):
        questions = make_questions("God made me.", "For his own glory.")
        rng = random.Random(8)
        for blank_count in range(0, 6):
            puzzle = generate_blanks(questions, 0, blank_count=blank_count, rng=rng)
            assert len(puzzle.hidden_positions()) == min(blank_count, 3)
            assert puzzle.reconstruct() == "God made me."

    def test_independent_draws_keep_invariants(self):
        questions = make_questions("By loving him and doing what he commands.", "God made all things.")
        results = [generate_blanks(questions, 0, rng=random.Random(seed)) for seed in range(50)]
        assert len({tuple(r.hidden_positions()) for r in results}) > 1
        for puzzle in results:
            assert len(puzzle.hidden_positions()) == 3
            assert puzzle.reconstruct() == "By loving him and doing what he commands."

    def test_options_contain_hidden_words_and_long_decoys(self):
        questions = make_questions("God made me.", "For his own glory.", "There is only one God.")
        puzzle = generate_blanks(questions, 0, blank_count=3, rng=random.Random(4))
        hidden = puzzle.hidden_words()
        assert sorted(hidden) == sorted(["God", "made", "me."])

        decoys = list(puzzle.options)
        for word in hidden:
            decoys.remove(word)
        assert len(decoys) == 3
        assert all(len(word) > 3 for word in decoys)
        assert set(decoys) <= {"glory.", "There", "only", "God."}

    def test_decoys_skip_words_equal_to_hidden_words(self):
        questions = make_questions("Holy Spirit", "Holy Father")
        puzzle = generate_blanks(questions, 0, blank_count=2, rng=random.Random(1))
        assert sorted(puzzle.options) == ["Father", "Holy", "Spirit"]

    def test_repeated_hidden_words_appear_once_per_blank(self):
        questions = make_questions("Holy holy holy", "Lord God Almighty")
        puzzle = generate_blanks(questions, 0, blank_count=3, rng=random.Random(2))
        assert puzzle.hidden_words() == ["Holy", "holy", "holy"]
        assert Counter(puzzle.options)["holy"] == 2

    def test_no_other_questions_means_no_decoys(self):
        questions = make_questions("God made all things.")
        puzzle = generate_blanks(questions, 0, blank_count=3, rng=FixedSequenceRandom([0]))
        assert sorted(puzzle.options) == sorted(puzzle.hidden_words())
        assert len(puzzle.options) == 3

    def test_invalid_inputs_raise(self):
        with pytest.raises(ValueError):
            generate_blanks([], 0)
        with pytest.raises(IndexError):
            generate_blanks(make_questions("A b"), -1)
