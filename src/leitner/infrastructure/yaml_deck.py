"""
YAML Deck Repository: Infrastructure adapter for deck files.

Implements DeckRepository on top of a single YAML document:

    cards:
      - key: paris
        front: What is the capital of France?
        back: Paris
        hint: City of Light
        tags: [geography, europe]
        bucket: 0
    history:
      - card: paris
        difficulty: easy
        at: 2024-01-01T09:00:00+00:00
"""

import logging
from datetime import date, datetime, time, timezone
from pathlib import Path
from typing import Any

import yaml  # type: ignore

from leitner.domain.errors import DeckFormatError
from leitner.domain.models import AnswerAttempt, AnswerDifficulty, BucketMap, Flashcard
from leitner.domain.stats.ports import DeckRepository

logger = logging.getLogger(__name__)


def _parse_timestamp(value: Any) -> datetime:
    """
    Turn a history timestamp into an aware datetime.

    PyYAML already parses unquoted ISO values, into `date` for date-only ones
    and naive or aware `datetime` otherwise. Anything without an offset is
    taken as UTC so that every attempt in a deck compares with every other.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time())
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError as e:
            raise DeckFormatError(f"Invalid timestamp: {value!r}") from e
    else:
        raise DeckFormatError(f"Invalid timestamp: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_card(raw: Any) -> tuple[str, Flashcard, int]:
    if not isinstance(raw, dict):
        raise DeckFormatError(f"Card entry must be a mapping, got {type(raw).__name__}")

    for required in ("key", "front", "back"):
        if required not in raw:
            raise DeckFormatError(f"Card entry is missing '{required}': {raw!r}")

    tags = raw.get("tags") or []
    if not isinstance(tags, list):
        raise DeckFormatError(f"Tags of card {raw['key']!r} must be a list")

    bucket = raw.get("bucket", 0)
    if isinstance(bucket, bool) or not isinstance(bucket, int) or bucket < 0:
        raise DeckFormatError(f"Bucket of card {raw['key']!r} must be a non-negative integer")

    card = Flashcard(
        front=str(raw["front"]),
        back=str(raw["back"]),
        hint=str(raw.get("hint", "")),
        tags=tuple(str(t) for t in tags),
    )
    return str(raw["key"]), card, bucket


class YamlDeckRepository(DeckRepository):
    """
    Reads and writes a deck stored as a YAML file.

    The file is re-read on every call, so the repository always reflects
    what is on disk.
    """

    def __init__(self, path: Path):
        self.path = path

    def _read(self) -> dict[str, Any]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise DeckFormatError(f"Deck file not found: {self.path}") from e

        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise DeckFormatError(f"Could not parse {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise DeckFormatError(f"Deck root must be a mapping: {self.path}")
        return data

    def _cards(self, data: dict[str, Any]) -> dict[str, tuple[Flashcard, int]]:
        cards: dict[str, tuple[Flashcard, int]] = {}
        keys_by_card: dict[Flashcard, str] = {}
        for raw in data.get("cards") or []:
            key, card, bucket = _parse_card(raw)
            if key in cards:
                raise DeckFormatError(f"Duplicate card key: {key!r}")
            if card in keys_by_card:
                raise DeckFormatError(
                    f"Cards {keys_by_card[card]!r} and {key!r} have the same content"
                )
            keys_by_card[card] = key
            cards[key] = (card, bucket)
        return cards

    def load_buckets(self) -> BucketMap:
        buckets: BucketMap = {}
        for card, bucket in self._cards(self._read()).values():
            buckets.setdefault(bucket, set()).add(card)

        logger.debug(f"Loaded {sum(len(c) for c in buckets.values())} cards from {self.path}")
        return buckets

    def load_history(self) -> list[AnswerAttempt]:
        data = self._read()
        cards = self._cards(data)

        history: list[AnswerAttempt] = []
        for entry in data.get("history") or []:
            if not isinstance(entry, dict):
                raise DeckFormatError(f"History entry must be a mapping: {entry!r}")

            key = entry.get("card")
            if key not in cards:
                raise DeckFormatError(f"History references unknown card key: {key!r}")

            try:
                difficulty = AnswerDifficulty(str(entry.get("difficulty", "")).lower())
            except ValueError as e:
                raise DeckFormatError(
                    f"Invalid difficulty {entry.get('difficulty')!r} for card {key!r}"
                ) from e

            history.append(
                AnswerAttempt(
                    card=cards[key][0],
                    difficulty=difficulty,
                    answered_at=_parse_timestamp(entry.get("at")),
                )
            )

        logger.debug(f"Loaded {len(history)} history entries from {self.path}")
        return history

    def find_card(self, key: str) -> Flashcard:
        cards = self._cards(self._read())
        if key not in cards:
            raise KeyError(key)
        return cards[key][0]

    def save_buckets(self, buckets: BucketMap) -> None:
        """
        Rewrite the bucket of every card, keeping the rest of the file as is.

        Cards missing from `buckets` keep their stored bucket.
        """
        data = self._read()
        location = {card: bucket for bucket, cards in buckets.items() for card in cards}

        for raw in data.get("cards") or []:
            _, card, _ = _parse_card(raw)
            if card in location:
                raw["bucket"] = location[card]

        self.path.write_text(
            yaml.safe_dump(data, sort_keys=False, allow_unicode=True),
            encoding="utf-8",
        )
        logger.info(f"Saved buckets to {self.path}")
