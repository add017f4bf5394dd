"""
Domain models for Leitner scheduling.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


@dataclass(frozen=True)
class Flashcard:
    """
    A unit of learning content.

    Cards have no separate ID: two cards with identical content are the same
    card as far as the bucket store is concerned.

    Attributes:
        front: The prompt shown to the learner.
        back: The expected answer.
        hint: Base hint text, extended by the hint composer.
        tags: Ordered topic tags (e.g. "geography", "math").
    """

    front: str
    back: str
    hint: str = ""
    tags: tuple[str, ...] = ()

    def __post_init__(self):
        # Lists are accepted for convenience but stored as a hashable tuple.
        if not isinstance(self.tags, tuple):
            object.__setattr__(self, "tags", tuple(self.tags))


class AnswerDifficulty(str, Enum):
    """Outcome of a single review."""

    EASY = "easy"
    HARD = "hard"
    WRONG = "wrong"


@dataclass(frozen=True)
class AnswerAttempt:
    """
    A single entry of the review history.

    Attributes:
        card: The card that was reviewed.
        difficulty: How well the learner did.
        answered_at: When the review happened.
    """

    card: Flashcard
    difficulty: AnswerDifficulty
    answered_at: datetime


@dataclass(frozen=True)
class BucketRange:
    """Lowest and highest bucket indices that hold at least one card."""

    min_bucket: int
    max_bucket: int


# Sparse bucket store: bucket number -> cards in that bucket.
BucketMap = dict[int, set[Flashcard]]

# Dense view of a BucketMap: index is the bucket number.
BucketArray = list[set[Flashcard]]
