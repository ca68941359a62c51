from src.core.engine import apply_guess, new_round
from src.core.evaluator import evaluate
from src.core.state import GuessRecord
from src.services.coach import filter_candidates, suggest_next_guess
from src.services.hints import llm_hint
from src.services.review import generate_review

WORDS = ["apple", "alarm", "crane", "lemon", "melon", "angle", "ample"]


def played(*guesses, target="apple"):
    state = new_round("easy", lambda _: target)
    for g in guesses:
        state = apply_guess(state, g, lambda w, d: True)
    return state


def test_offline_hint_names_first_letter_and_never_the_word():
    state = played("alarm")
    hint = llm_hint(state.target, state.history)
    assert "'A'" in hint
    assert "apple" not in hint.lower()
    # a and l found; p and e still unseen
    assert "2 of its 4 distinct letters" in hint


def test_filter_candidates_keeps_only_consistent_words():
    history = [GuessRecord("alarm", evaluate("apple", "alarm"))]
    remaining = filter_candidates(history, WORDS)
    assert "apple" in remaining
    assert "alarm" not in remaining
    assert "crane" not in remaining
    for w in remaining:
        assert evaluate(w, "alarm") == history[0].feedback


def test_filter_candidates_without_history_keeps_everything():
    assert filter_candidates([], WORDS) == WORDS


def test_coach_offline_suggestion():
    state = played("crane")
    tip = suggest_next_guess(state.history, WORDS)
    assert tip is not None
    assert not tip.used_llm
    assert tip.word in filter_candidates(state.history, WORDS)
    assert tip.candidates_considered == len(filter_candidates(state.history, WORDS))
    assert tip.word.upper() in tip.text


def test_coach_returns_none_when_nothing_fits():
    history = [GuessRecord("zzzzz", ("exact",) * 5)]
    assert suggest_next_guess(history, WORDS) is None


def test_offline_review_is_deterministic():
    state = played("alarm", "apple")
    text = generate_review(state.history, state.target, elapsed=42, score=4716, difficulty="easy")
    assert text == generate_review(state.history, state.target, elapsed=42, score=4716, difficulty="easy")
    assert "APPLE" in text and "2 guesses" in text and "42s" in text and "4716" in text
