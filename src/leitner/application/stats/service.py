"""
Progress Service: Application layer orchestrator.

Coordinates loading a deck from the repository, scheduling reviews and
computing progress statistics.
"""

import logging
from datetime import datetime

from leitner.application.buckets import bucket_range, to_bucket_array
from leitner.application.hints import compose_hint
from leitner.application.scheduler import apply_outcome, find_bucket, select_due
from leitner.domain.constants import MASTERED_BUCKET
from leitner.domain.models import AnswerDifficulty, BucketMap, BucketRange, Flashcard
from leitner.domain.stats.models import ProgressStats
from leitner.domain.stats.ports import DeckRepository

from .progress_calculator import ProgressCalculator

logger = logging.getLogger(__name__)


class ProgressService:
    """
    Application service for reviewing a deck and reporting on it.

    Follows Dependency Inversion: depends on the DeckRepository abstraction,
    not a concrete file format.
    """

    def __init__(
        self,
        deck_repo: DeckRepository,
        calculator: ProgressCalculator | None = None,
    ):
        """
        Args:
            deck_repo: The repository (port) holding buckets and history.
            calculator: Optional custom calculator; uses default if not provided.
        """
        self._repo = deck_repo
        self._calc = calculator or ProgressCalculator()

    def due_cards(self, day: int) -> list[Flashcard]:
        """
        Cards to practice on `day`, ordered by prompt for stable display.
        """
        buckets = self._repo.load_buckets()
        if not buckets:
            return []
        due = select_due(to_bucket_array(buckets), day)
        logger.info(f"{len(due)} card(s) due on day {day}")
        return sorted(due, key=lambda card: card.front)

    def bucket_range(self) -> BucketRange | None:
        buckets = self._repo.load_buckets()
        if not buckets:
            return None
        return bucket_range(to_bucket_array(buckets))

    def hint(self, card_key: str) -> str:
        return compose_hint(self._repo.find_card(card_key))

    def record_answer(
        self, card_key: str, outcome: AnswerDifficulty, dry_run: bool = False
    ) -> tuple[int | None, int | None]:
        """
        Apply a review outcome to a card and persist the new buckets.

        Args:
            card_key: Deck key of the reviewed card.
            outcome: How well the learner did.
            dry_run: Compute the move without saving it.

        Returns:
            (bucket before, bucket after). Mastered cards do not move and
            report the mastered bucket on both sides; unknown cards report None.
        """
        card = self._repo.find_card(card_key)
        buckets = self._repo.load_buckets()

        before = self._locate(buckets, card)
        updated = apply_outcome(buckets, card, outcome)
        after = self._locate(updated, card)

        if dry_run:
            logger.info(f"[DRY RUN] Would move {card_key}: {before} -> {after}")
        else:
            self._repo.save_buckets(updated)
            logger.info(f"Moved {card_key}: {before} -> {after}")

        return before, after

    def progress(self, now: datetime | None = None) -> ProgressStats:
        """
        Compute progress statistics for the whole deck.
        """
        buckets = self._repo.load_buckets()
        history = self._repo.load_history()
        logger.info(f"Computing progress over {len(history)} attempt(s)")
        return self._calc.compute(buckets, history, now=now)

    @staticmethod
    def _locate(buckets: BucketMap, card: Flashcard) -> int | None:
        if card in buckets.get(MASTERED_BUCKET, ()):
            return MASTERED_BUCKET
        return find_bucket(buckets, card)
