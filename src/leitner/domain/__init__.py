# Domain Package
from .errors import (
    DeckFormatError,
    EmptyHistoryError,
    InvalidStateError,
    LeitnerError,
    UnknownCardError,
    UnorderedHistoryError,
)
from .models import (
    AnswerAttempt,
    AnswerDifficulty,
    BucketArray,
    BucketMap,
    BucketRange,
    Flashcard,
)

__all__ = [
    "AnswerAttempt",
    "AnswerDifficulty",
    "BucketArray",
    "BucketMap",
    "BucketRange",
    "Flashcard",
    "LeitnerError",
    "InvalidStateError",
    "EmptyHistoryError",
    "UnknownCardError",
    "UnorderedHistoryError",
    "DeckFormatError",
]
