"""
Modified-Leitner scheduling.

Selects the cards due on a given day and moves a card between buckets
after it has been reviewed:
1. Bucket 0 is reviewed every day, bucket i every 2**i days
2. The mastered bucket is never reviewed
3. EASY promotes, HARD demotes, WRONG resets to bucket 0
"""

import logging

from leitner.domain.constants import MASTERED_BUCKET, NEWEST_BUCKET
from leitner.domain.models import AnswerDifficulty, BucketArray, BucketMap, Flashcard

logger = logging.getLogger(__name__)


def is_bucket_due(bucket: int, day: int) -> bool:
    """Whether cards in `bucket` are reviewed on `day`."""
    if bucket == MASTERED_BUCKET:
        return False
    return bucket == NEWEST_BUCKET or day % (2**bucket) == 0


def select_due(bucket_array: BucketArray, day: int) -> set[Flashcard]:
    """
    Select the cards to practice on `day`.

    Args:
        bucket_array: Dense bucket view (see to_bucket_array).
        day: Day number, starting from 0.

    Returns:
        Set of every card whose bucket is due on that day.
    """
    if day < 0:
        raise ValueError(f"day must be non-negative, got {day}")

    due: set[Flashcard] = set()
    for bucket, cards in enumerate(bucket_array):
        if cards and is_bucket_due(bucket, day):
            due.update(cards)
    return due


def find_bucket(buckets: BucketMap, card: Flashcard) -> int | None:
    """
    Locate a card among the reviewable buckets.

    Mastered cards are not searched, so they report None like unknown cards.
    """
    for bucket in range(NEWEST_BUCKET, MASTERED_BUCKET):
        if card in buckets.get(bucket, ()):
            return bucket
    return None


def next_bucket(current: int, outcome: AnswerDifficulty) -> int:
    """Bucket a card moves to from `current` after a review with `outcome`."""
    if outcome is AnswerDifficulty.EASY:
        return min(current + 1, MASTERED_BUCKET)
    if outcome is AnswerDifficulty.HARD:
        return max(current - 1, NEWEST_BUCKET)
    return NEWEST_BUCKET


def apply_outcome(buckets: BucketMap, card: Flashcard, outcome: AnswerDifficulty) -> BucketMap:
    """
    Move a card to its new bucket after a practice trial.

    The input map is left untouched: every bucket set is copied and the
    single move is applied to the copy. A card that is not found in buckets
    0-4 (unknown or already mastered) yields an unchanged copy.
    """
    updated: BucketMap = {bucket: set(cards) for bucket, cards in buckets.items()}

    current = find_bucket(buckets, card)
    if current is None:
        logger.debug(f"Card {card.front!r} not in a reviewable bucket; nothing to move")
        return updated

    target = next_bucket(current, outcome)
    updated[current].discard(card)
    updated.setdefault(target, set()).add(card)

    logger.debug(f"Card {card.front!r}: bucket {current} -> {target} ({outcome.value})")
    return updated
