import pytest

from src.core.scoring import compute_score


def test_formula():
    assert compute_score(3, 40, 5) == 5000 - 300 - 80
    assert compute_score(1, 0, 7) == 6900


def test_clamped_at_zero():
    assert compute_score(40, 10_000, 5) == 0
    assert compute_score(0, 0, 0) == 0


@pytest.mark.parametrize("length", [5, 6, 7])
def test_strictly_decreasing_in_guesses_and_time(length):
    assert compute_score(2, 10, length) < compute_score(1, 10, length)
    assert compute_score(2, 11, length) < compute_score(2, 10, length)


def test_longer_words_score_more():
    assert compute_score(4, 60, 5) < compute_score(4, 60, 6) < compute_score(4, 60, 7)
