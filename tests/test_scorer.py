"""Tests for edit-distance scoring and WER."""

import itertools

import pytest

from typescore.scoring import AlignmentResult, normalize, score, score_text


def test_identical_text_scores_zero():
    result = score(normalize("the quick brown fox"), normalize("the quick brown fox"))
    assert result.edits == 0
    assert result.reference_word_count == 4
    assert result.word_error_rate == 0.0


def test_single_substitution():
    result = score(normalize("the quick brown fox"), normalize("the quick brown cat"))
    assert result.edits == 1
    assert result.reference_word_count == 4
    assert result.word_error_rate == 0.25
    assert result.substitutions == 1


def test_single_insertion():
    result = score(normalize("good morning"), normalize("good morning everyone"))
    assert result.edits == 1
    assert result.reference_word_count == 2
    assert result.word_error_rate == 0.5
    assert result.insertions == 1
    assert result.hypothesis_word_count == 3


def test_single_deletion():
    result = score(["a", "b", "c"], ["a", "c"])
    assert result.edits == 1
    assert result.deletions == 1
    assert result.word_error_rate == pytest.approx(1 / 3)


def test_empty_reference_and_hypothesis():
    result = score([], [])
    assert result.edits == 0
    assert result.reference_word_count == 0
    assert result.word_error_rate == 0.0


def test_empty_reference_is_capped_at_one():
    result = score([], ["x", "y"])
    assert result.edits == 2
    assert result.word_error_rate == 1.0
    assert result.insertions == 2


def test_empty_hypothesis_deletes_everything():
    result = score(["a", "b"], [])
    assert result.edits == 2
    assert result.deletions == 2
    assert result.word_error_rate == 1.0


def test_wer_can_exceed_one():
    result = score(["hi"], ["oh", "hello", "there", "friend"])
    assert result.edits == 4
    assert result.word_error_rate == 4.0
    assert result.accuracy == 0.0


def test_tokens_compared_case_sensitively():
    assert score(["Hello"], ["hello"]).edits == 1


def test_tuples_accepted():
    assert score(("a", "b"), ("a", "b")).edits == 0


@pytest.mark.parametrize("tokens", [[], ["a"], ["a", "b", "a"], normalize("she sells sea shells")])
def test_identity_has_zero_distance(tokens):
    result = score(tokens, tokens)
    assert result.edits == 0
    assert result.word_error_rate == 0.0


def test_edits_symmetric_but_wer_not():
    a = ["the", "cat", "sat"]
    b = ["the", "cat", "sat", "on", "the", "mat"]
    forward = score(a, b)
    backward = score(b, a)
    assert forward.edits == backward.edits == 3
    assert forward.word_error_rate == 1.0
    assert backward.word_error_rate == 0.5


SEQUENCES = [
    [],
    ["a"],
    ["a", "b", "c"],
    ["b", "c", "a"],
    ["a", "x", "c", "d"],
    ["d", "d", "d"],
]


def test_triangle_inequality():
    for a, b, c in itertools.product(SEQUENCES, repeat=3):
        assert score(a, b).edits <= score(a, c).edits + score(c, b).edits


def test_operation_breakdown_sums_to_edits():
    for a, b in itertools.product(SEQUENCES, repeat=2):
        result = score(a, b)
        assert result.substitutions + result.insertions + result.deletions == result.edits


def test_correct_word_count():
    result = score(normalize("one two three four"), normalize("one too three"))
    # "two" -> "too" substituted, "four" deleted
    assert result.edits == 2
    assert result.correct == 2


def test_score_text_normalizes_both_sides():
    result = score_text("Good morning!", "good   MORNING, everyone")
    assert result.edits == 1
    assert result.reference_word_count == 2
    assert result.word_error_rate == 0.5


def test_to_dict_round_trips_fields():
    data = score(["a", "b"], ["a", "c"]).to_dict()
    assert data["edits"] == 1
    assert data["reference_word_count"] == 2
    assert data["word_error_rate"] == 0.5
    assert data["accuracy"] == 0.5
    assert data["correct"] == 1


def test_result_is_immutable():
    result = score(["a"], ["a"])
    with pytest.raises(AttributeError):
        result.edits = 3


def test_alignment_result_defaults():
    result = AlignmentResult(edits=0, reference_word_count=0, word_error_rate=0.0)
    assert result.hypothesis_word_count == 0
    assert result.accuracy == 1.0


@pytest.mark.parametrize("bad", ["a b c", None, 42, [1, 2], ["a", None]])
def test_malformed_input_rejected(bad):
    with pytest.raises(TypeError):
        score(bad, ["a"])
    with pytest.raises(TypeError):
        score(["a"], bad)
