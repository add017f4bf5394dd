from datetime import datetime, timedelta, timezone

import pytest

from leitner.application.stats.progress_calculator import (
    ProgressCalculator,
    compute_progress,
    round_half_up,
)
from leitner.domain.errors import (
    EmptyHistoryError,
    LeitnerError,
    UnknownCardError,
    UnorderedHistoryError,
)
from leitner.domain.models import AnswerAttempt, AnswerDifficulty, Flashcard

EASY = AnswerDifficulty.EASY
HARD = AnswerDifficulty.HARD
WRONG = AnswerDifficulty.WRONG

NOW = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)

ONE = Flashcard("one", "1")
TWO = Flashcard("two", "2")
THREE = Flashcard("three", "3")
FOUR = Flashcard("four", "4")


def days_ago(days: float) -> datetime:
    return NOW - timedelta(days=days)


@pytest.fixture
def calculator():
    return ProgressCalculator()


@pytest.fixture
def deck():
    return {0: {ONE, TWO}, 3: {THREE}, 5: {FOUR}}


# ---------- Preconditions ----------


def test_empty_history_rejected(calculator, deck):
    with pytest.raises(EmptyHistoryError):
        calculator.compute(deck, [], now=NOW)


def test_unknown_card_rejected(calculator, deck):
    stranger = Flashcard("stranger", "?")
    history = [AnswerAttempt(ONE, EASY, days_ago(2)), AnswerAttempt(stranger, EASY, days_ago(1))]

    with pytest.raises(UnknownCardError) as exc:
        calculator.compute(deck, history, now=NOW)
    assert exc.value.card == stranger


def test_unordered_history_rejected(calculator, deck):
    history = [
        AnswerAttempt(ONE, EASY, days_ago(3)),
        AnswerAttempt(TWO, EASY, days_ago(1)),
        AnswerAttempt(ONE, HARD, days_ago(2)),
    ]

    with pytest.raises(UnorderedHistoryError) as exc:
        calculator.compute(deck, history, now=NOW)
    assert exc.value.index == 2


def test_equal_timestamps_are_ordered(calculator, deck):
    at = days_ago(1)
    history = [AnswerAttempt(ONE, EASY, at), AnswerAttempt(TWO, WRONG, at)]
    assert calculator.compute(deck, history, now=NOW).recent.total_attempts == 2


def test_error_classes_are_distinct():
    classes = {EmptyHistoryError, UnknownCardError, UnorderedHistoryError}
    assert len(classes) == 3
    assert all(issubclass(c, LeitnerError) for c in classes)


# ---------- Totals and Difficulty ----------


def test_card_totals(calculator, deck):
    stats = calculator.compute(deck, [AnswerAttempt(ONE, EASY, days_ago(1))], now=NOW)

    assert stats.total_cards == 4
    assert stats.mastered_cards == 1
    assert stats.learning_cards == 3


def test_difficulty_percentages(calculator, deck):
    outcomes = [EASY, EASY, HARD, EASY, WRONG, EASY]
    history = [AnswerAttempt(ONE, o, days_ago(6 - i)) for i, o in enumerate(outcomes)]

    stats = calculator.compute(deck, history, now=NOW)

    assert stats.difficulty_stats[EASY].count == 4
    assert stats.difficulty_stats[EASY].percentage == 66.67
    assert stats.difficulty_stats[HARD].count == 1
    assert stats.difficulty_stats[HARD].percentage == 16.67
    assert stats.difficulty_stats[WRONG].count == 1
    assert stats.difficulty_stats[WRONG].percentage == 16.67


def test_unused_difficulty_reported_as_zero(calculator, deck):
    stats = calculator.compute(deck, [AnswerAttempt(ONE, EASY, days_ago(1))], now=NOW)

    assert set(stats.difficulty_stats) == {EASY, HARD, WRONG}
    assert stats.difficulty_stats[WRONG].count == 0
    assert stats.difficulty_stats[WRONG].percentage == 0.0
    assert stats.difficulty_stats[EASY].percentage == 100.0


def test_percentage_ties_round_away_from_zero(calculator, deck):
    outcomes = [EASY] + [HARD] * 31
    history = [AnswerAttempt(ONE, o, days_ago(1)) for o in outcomes]

    stats = calculator.compute(deck, history, now=NOW)

    assert stats.difficulty_stats[EASY].percentage == 3.13
    assert stats.difficulty_stats[HARD].percentage == 96.88


@pytest.mark.parametrize(
    "value, expected",
    [(3.125, 3.13), (0.125, 0.13), (96.875, 96.88), (66.66666666666667, 66.67), (0.0, 0.0)],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


# ---------- Days to Master ----------


def test_average_days_uses_first_and_last_attempt(calculator, deck):
    history = [
        AnswerAttempt(ONE, WRONG, days_ago(10)),
        AnswerAttempt(TWO, EASY, days_ago(9)),
        AnswerAttempt(ONE, HARD, days_ago(8)),
        AnswerAttempt(ONE, EASY, days_ago(6)),  # ONE: 4 days
        AnswerAttempt(TWO, EASY, days_ago(8.5)),  # TWO: half a day rounds up to 1
    ]
    history.sort(key=lambda a: a.answered_at)

    stats = calculator.compute(deck, history, now=NOW)

    assert stats.average_days_to_master == 2.5


def test_single_attempt_counts_as_zero_days(calculator, deck):
    history = [
        AnswerAttempt(ONE, EASY, days_ago(5)),
        AnswerAttempt(TWO, EASY, days_ago(4)),
        AnswerAttempt(ONE, EASY, days_ago(2)),  # ONE: 3 days, TWO: 0 days
    ]
    stats = calculator.compute(deck, history, now=NOW)

    assert stats.average_days_to_master == 1.5


def test_average_days_rounds_to_two_decimals(calculator, deck):
    history = [
        AnswerAttempt(ONE, EASY, days_ago(3)),
        AnswerAttempt(TWO, EASY, days_ago(3)),
        AnswerAttempt(THREE, EASY, days_ago(3)),
        AnswerAttempt(ONE, EASY, days_ago(2)),  # 1, 0, 0 -> 0.33
    ]
    assert calculator.compute(deck, history, now=NOW).average_days_to_master == 0.33


def test_average_days_tie_rounds_up():
    many = [Flashcard(f"card {i}", str(i)) for i in range(8)]
    deck = {0: set(many)}
    history = [AnswerAttempt(card, EASY, days_ago(2)) for card in many]
    history.append(AnswerAttempt(many[0], EASY, days_ago(1)))  # 1 day over 8 cards

    assert compute_progress(deck, history, now=NOW).average_days_to_master == 0.13


# ---------- Recent Window ----------


def test_recent_window_counts_and_success_rate(calculator, deck):
    history = [
        AnswerAttempt(ONE, WRONG, days_ago(20)),
        AnswerAttempt(TWO, WRONG, days_ago(10)),
        AnswerAttempt(ONE, EASY, days_ago(6)),
        AnswerAttempt(TWO, HARD, days_ago(3)),
        AnswerAttempt(THREE, WRONG, days_ago(2)),
        AnswerAttempt(ONE, EASY, days_ago(1)),
    ]
    stats = calculator.compute(deck, history, now=NOW)

    assert stats.recent.total_attempts == 4
    assert stats.recent.success_rate == 75.0


def test_window_boundary_is_inclusive(calculator, deck):
    history = [AnswerAttempt(ONE, EASY, days_ago(7)), AnswerAttempt(TWO, EASY, days_ago(0))]
    assert calculator.compute(deck, history, now=NOW).recent.total_attempts == 2


def test_empty_window_has_zero_success_rate(calculator, deck):
    history = [AnswerAttempt(ONE, EASY, days_ago(30))]
    stats = calculator.compute(deck, history, now=NOW)

    assert stats.recent.total_attempts == 0
    assert stats.recent.success_rate == 0.0


def test_custom_window_length(deck):
    history = [AnswerAttempt(ONE, EASY, days_ago(10)), AnswerAttempt(ONE, EASY, days_ago(1))]
    stats = ProgressCalculator(window_days=14).compute(deck, history, now=NOW)
    assert stats.recent.total_attempts == 2


def test_now_defaults_to_clock(calculator, deck):
    history = [AnswerAttempt(ONE, EASY, datetime.now(timezone.utc) - timedelta(hours=1))]
    assert calculator.compute(deck, history).recent.total_attempts == 1


# ---------- Most Challenging ----------


def test_challenging_cards_ranked_over_whole_history(calculator, deck):
    history = [
        AnswerAttempt(TWO, WRONG, days_ago(40)),
        AnswerAttempt(ONE, WRONG, days_ago(30)),
        AnswerAttempt(ONE, WRONG, days_ago(20)),
        AnswerAttempt(THREE, EASY, days_ago(2)),
        AnswerAttempt(TWO, HARD, days_ago(1)),
    ]
    ranked = calculator.compute(deck, history, now=NOW).recent.most_challenging_cards

    assert [(c.card, c.wrong_answers) for c in ranked] == [(ONE, 2), (TWO, 1)]


def test_challenging_ties_keep_first_encountered_order(calculator, deck):
    history = [
        AnswerAttempt(THREE, WRONG, days_ago(3)),
        AnswerAttempt(ONE, WRONG, days_ago(2)),
        AnswerAttempt(TWO, WRONG, days_ago(1)),
    ]
    ranked = calculator.compute(deck, history, now=NOW).recent.most_challenging_cards
    assert [c.card for c in ranked] == [THREE, ONE, TWO]


def test_challenging_cards_capped():
    many = [Flashcard(f"card {i}", str(i)) for i in range(8)]
    deck = {0: set(many)}
    history = [AnswerAttempt(card, WRONG, days_ago(8 - i)) for i, card in enumerate(many)]

    ranked = compute_progress(deck, history, now=NOW).recent.most_challenging_cards

    assert len(ranked) == 5
    assert [c.card for c in ranked] == many[:5]

    top_two = ProgressCalculator(max_challenging=2).compute(deck, history, now=NOW)
    assert [c.card for c in top_two.recent.most_challenging_cards] == many[:2]


def test_no_wrong_answers_means_no_challenging_cards(calculator, deck):
    stats = calculator.compute(deck, [AnswerAttempt(ONE, EASY, days_ago(1))], now=NOW)
    assert stats.recent.most_challenging_cards == []


# ---------- Rendering ----------


def test_to_dict_is_plain_data(calculator, deck):
    history = [AnswerAttempt(ONE, WRONG, days_ago(2)), AnswerAttempt(ONE, EASY, days_ago(1))]
    data = calculator.compute(deck, history, now=NOW).to_dict()

    assert data["total_cards"] == 4
    assert data["difficulty_stats"]["wrong"] == {"count": 1, "percentage": 50.0}
    assert data["recent"]["most_challenging_cards"] == [{"front": "one", "wrong_answers": 1}]


def test_inputs_are_not_modified(calculator, deck):
    history = [AnswerAttempt(ONE, WRONG, days_ago(2))]
    snapshot = ({b: set(c) for b, c in deck.items()}, list(history))

    calculator.compute(deck, history, now=NOW)

    assert (deck, history) == snapshot
