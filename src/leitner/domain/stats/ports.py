"""
Ports (interfaces) for deck access.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from leitner.domain.models import AnswerAttempt, BucketMap, Flashcard


class DeckRepository(ABC):
    """
    Port for loading and saving a learner's deck.

    Implementations:
        - YamlDeckRepository: Reads and writes a YAML deck file.
    """

    @abstractmethod
    def load_buckets(self) -> BucketMap:
        """
        Load the current bucket assignment.

        Returns:
            Mapping of bucket number to the cards in that bucket.
        """
        pass

    @abstractmethod
    def load_history(self) -> list[AnswerAttempt]:
        """
        Load the review history.

        Returns:
            List of AnswerAttempt objects in the order they were recorded.
        """
        pass

    @abstractmethod
    def find_card(self, key: str) -> Flashcard:
        """
        Look up a card by the key the deck uses to refer to it.

        Raises:
            KeyError: If no card has that key.
        """
        pass

    @abstractmethod
    def save_buckets(self, buckets: BucketMap) -> None:
        """Persist a new bucket assignment, leaving the history untouched."""
        pass
