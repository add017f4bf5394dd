"""Error taxonomy for the scheduler core.

Every error is a precondition violation detected before any computation
starts, so inputs are never left half-processed.
"""

from .models import Flashcard


class LeitnerError(Exception):
    """Base class for all scheduler errors."""


class InvalidStateError(LeitnerError):
    """The bucket structure is empty or malformed."""


class EmptyHistoryError(LeitnerError):
    """Progress was requested for an empty review history."""


class UnknownCardError(LeitnerError):
    """A history entry references a card that is not in any bucket."""

    def __init__(self, card: Flashcard):
        super().__init__(f"Card not found in any bucket: {card.front!r}")
        self.card = card


class UnorderedHistoryError(LeitnerError):
    """The review history is not sorted by timestamp."""

    def __init__(self, index: int):
        super().__init__(f"History is out of order at entry {index}")
        self.index = index


class DeckFormatError(LeitnerError):
    """A deck file could not be interpreted."""
