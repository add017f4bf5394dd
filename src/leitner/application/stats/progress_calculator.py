"""
Progress calculator for deriving learning statistics from buckets and history.

This is a pure computation module with no I/O.
"""

import math
from collections import Counter
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from leitner.domain.constants import (
    MASTERED_BUCKET,
    MAX_CHALLENGING_CARDS,
    PERCENT_PRECISION,
    REVIEW_WINDOW_DAYS,
    SECONDS_PER_DAY,
)
from leitner.domain.errors import EmptyHistoryError, UnknownCardError, UnorderedHistoryError
from leitner.domain.models import AnswerAttempt, AnswerDifficulty, BucketMap, Flashcard
from leitner.domain.stats.models import (
    ChallengingCard,
    DifficultyStat,
    ProgressStats,
    RecentStats,
)


def round_half_up(value: float, places: int = PERCENT_PRECISION) -> float:
    """Round to `places` decimals, sending exact ties away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _percent(part: int, whole: int) -> float:
    if whole == 0:
        return 0.0
    return round_half_up(part / whole * 100)


class ProgressCalculator:
    """
    Computes progress statistics from a bucket map and a review history.

    Stateless and side-effect free.
    """

    def __init__(
        self,
        window_days: int = REVIEW_WINDOW_DAYS,
        max_challenging: int = MAX_CHALLENGING_CARDS,
    ):
        """
        Args:
            window_days: Length of the trailing window for recent stats.
            max_challenging: How many error-prone cards to report.
        """
        self.window_days = window_days
        self.max_challenging = max_challenging

    def compute(
        self,
        buckets: BucketMap,
        history: list[AnswerAttempt],
        now: datetime | None = None,
    ) -> ProgressStats:
        """
        Compute a fresh progress snapshot.

        Args:
            buckets: Current bucket assignment.
            history: Review attempts, oldest first.
            now: Reference time for the trailing window. Read once from the
                clock if not given, in the timezone of the history.

        Raises:
            EmptyHistoryError: If history is empty.
            UnknownCardError: If history mentions a card that is not bucketed.
            UnorderedHistoryError: If history is not sorted by time.
        """
        all_cards = self._validate(buckets, history)

        if now is None:
            now = datetime.now(tz=history[-1].answered_at.tzinfo)

        total_cards = len(all_cards)
        mastered_cards = len(buckets.get(MASTERED_BUCKET, ()))

        return ProgressStats(
            total_cards=total_cards,
            mastered_cards=mastered_cards,
            learning_cards=total_cards - mastered_cards,
            difficulty_stats=self._compute_difficulty_stats(history),
            average_days_to_master=self._compute_average_days_to_master(all_cards, history),
            recent=self._compute_recent_stats(history, now),
        )

    def _validate(self, buckets: BucketMap, history: list[AnswerAttempt]) -> set[Flashcard]:
        """
        Check preconditions and return the union of all bucketed cards.
        """
        if not history:
            raise EmptyHistoryError("History cannot be empty")

        all_cards: set[Flashcard] = set()
        for cards in buckets.values():
            all_cards.update(cards)

        for attempt in history:
            if attempt.card not in all_cards:
                raise UnknownCardError(attempt.card)

        for i in range(1, len(history)):
            if history[i].answered_at < history[i - 1].answered_at:
                raise UnorderedHistoryError(i)

        return all_cards

    def _compute_difficulty_stats(
        self, history: list[AnswerAttempt]
    ) -> dict[AnswerDifficulty, DifficultyStat]:
        counts = Counter(attempt.difficulty for attempt in history)
        total = len(history)
        return {
            difficulty: DifficultyStat(
                count=counts[difficulty],
                percentage=_percent(counts[difficulty], total),
            )
            for difficulty in AnswerDifficulty
        }

    def _compute_average_days_to_master(
        self, cards: set[Flashcard], history: list[AnswerAttempt]
    ) -> float:
        """
        Average whole days between each card's first and last attempt.

        Cards that were never attempted are left out; a single attempt counts
        as zero days.
        """
        first_seen: dict[Flashcard, datetime] = {}
        last_seen: dict[Flashcard, datetime] = {}
        for attempt in history:
            first_seen.setdefault(attempt.card, attempt.answered_at)
            last_seen[attempt.card] = attempt.answered_at

        spans = [
            math.ceil((last_seen[card] - first_seen[card]).total_seconds() / SECONDS_PER_DAY)
            for card in cards
            if card in first_seen
        ]
        if not spans:
            return 0.0
        return round_half_up(sum(spans) / len(spans))

    def _compute_recent_stats(self, history: list[AnswerAttempt], now: datetime) -> RecentStats:
        window_start = now - timedelta(days=self.window_days)
        recent = [a for a in history if a.answered_at >= window_start]
        successes = sum(1 for a in recent if a.difficulty is not AnswerDifficulty.WRONG)

        return RecentStats(
            total_attempts=len(recent),
            success_rate=_percent(successes, len(recent)),
            most_challenging_cards=self._rank_challenging(history),
        )

    def _rank_challenging(self, history: list[AnswerAttempt]) -> list[ChallengingCard]:
        """
        Cards with the most WRONG answers over the whole history.

        Counter keeps first-seen order and sorted() is stable, so ties stay in
        the order the cards were first answered wrong.
        """
        wrong = Counter(a.card for a in history if a.difficulty is AnswerDifficulty.WRONG)
        ranked = sorted(wrong.items(), key=lambda item: item[1], reverse=True)
        return [
            ChallengingCard(card=card, wrong_answers=count)
            for card, count in ranked[: self.max_challenging]
        ]


def compute_progress(
    buckets: BucketMap,
    history: list[AnswerAttempt],
    now: datetime | None = None,
) -> ProgressStats:
    """Compute progress statistics with the default window and ranking size."""
    return ProgressCalculator().compute(buckets, history, now=now)
