"""
Domain models for progress statistics.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from typing import Any

from leitner.domain.models import AnswerDifficulty, Flashcard


@dataclass(frozen=True)
class DifficultyStat:
    """
    How often a given outcome occurred.

    Attributes:
        count: Number of attempts with this outcome.
        percentage: Share of all attempts, 0-100, two decimals.
    """

    count: int
    percentage: float


@dataclass(frozen=True)
class ChallengingCard:
    """A card together with the number of times it was answered wrong."""

    card: Flashcard
    wrong_answers: int


@dataclass(frozen=True)
class RecentStats:
    """
    Performance over the trailing review window.

    Attributes:
        total_attempts: Attempts inside the window.
        success_rate: Percent of in-window attempts that were not WRONG.
        most_challenging_cards: Cards with the most WRONG answers overall.
    """

    total_attempts: int
    success_rate: float
    most_challenging_cards: list[ChallengingCard] = field(default_factory=list)


@dataclass(frozen=True)
class ProgressStats:
    """
    Snapshot of learning progress.

    Recomputed on every request; never updated incrementally.
    """

    # Overall progress
    total_cards: int
    mastered_cards: int  # Cards in the mastered bucket
    learning_cards: int  # Everything else

    # Performance by outcome
    difficulty_stats: dict[AnswerDifficulty, DifficultyStat]

    # Learning speed
    average_days_to_master: float

    # Recent performance
    recent: RecentStats

    def to_dict(self) -> dict[str, Any]:
        """Plain-data rendering suitable for JSON output."""
        return {
            "total_cards": self.total_cards,
            "mastered_cards": self.mastered_cards,
            "learning_cards": self.learning_cards,
            "difficulty_stats": {
                difficulty.value: {"count": stat.count, "percentage": stat.percentage}
                for difficulty, stat in self.difficulty_stats.items()
            },
            "average_days_to_master": self.average_days_to_master,
            "recent": {
                "total_attempts": self.recent.total_attempts,
                "success_rate": self.recent.success_rate,
                "most_challenging_cards": [
                    {"front": c.card.front, "wrong_answers": c.wrong_answers}
                    for c in self.recent.most_challenging_cards
                ],
            },
        }
