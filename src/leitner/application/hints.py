"""
Hint composition for flashcards.

A hint starts from the card's own hint text and adds tag-driven detail for
math and general-knowledge cards.
"""

import re

from leitner.domain.constants import KNOWLEDGE_TAGS, MATH_TAGS, MIN_ANSWER_RANGE
from leitner.domain.models import Flashcard

# ---------- Math hints ----------

_LEADING_NUMBER = re.compile(r"^\s*([-+]?\d+)")

# Checked in order; the first marker found in the prompt wins.
_OPERATION_MARKERS = [
    ("addition", ("+",)),
    ("subtraction", ("-",)),
    ("multiplication", ("×", "*")),
    ("division", ("÷", "/")),
    ("square root", ("square root",)),
]


def _parse_number(text: str) -> int | None:
    """Leading integer of `text`, or None if it does not start with one."""
    m = _LEADING_NUMBER.match(text)
    return int(m.group(1)) if m else None


def classify_operation(prompt: str) -> str:
    """
    Name the arithmetic operation a prompt asks about.

    Markers are matched case-insensitively in `_OPERATION_MARKERS` order, so
    "What is 5-3+1?" is an addition. Prompts with no marker are "arithmetic".
    """
    prompt = prompt.lower()
    for operation, markers in _OPERATION_MARKERS:
        if any(marker in prompt for marker in markers):
            return operation
    return "arithmetic"


def _math_hint(card: Flashcard, answer: int) -> str:
    operation = classify_operation(card.front)
    upper = max(MIN_ANSWER_RANGE, answer * 2)
    return (
        f"\nThis is a {operation} problem. "
        f"The answer is between 0 and {upper}. "
        "This is a basic math problem."
    )


# ---------- Knowledge hints ----------


def _knowledge_hint(card: Flashcard) -> str:
    answer = card.back
    return (
        f"\nThe answer is {len(answer)} letters long. "
        f"It starts with '{answer[:1]}'. "
        f"This is a {' or '.join(card.tags)} question."
    )


def compose_hint(card: Flashcard) -> str:
    """Build a domain-aware hint that helps without giving the answer away.

    Math cards with a numeric answer get the operation type, a range for the
    answer and a difficulty level. Geography, history and literature cards get
    the answer length, its first letter and the topic. Anything else gets the
    card's own hint unchanged.
    """
    tags = set(card.tags)
    hint = card.hint

    if tags.intersection(MATH_TAGS):
        answer = _parse_number(card.back)
        if answer is not None:
            hint += _math_hint(card, answer)
    elif tags.intersection(KNOWLEDGE_TAGS):
        hint += _knowledge_hint(card)

    return hint
