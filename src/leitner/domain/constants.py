"""Centralized constants for the Leitner scheduler.

All magic numbers and tag vocabularies live here so every layer
imports from a single source of truth.
"""

# ---------- Buckets ----------
NEWEST_BUCKET = 0
MASTERED_BUCKET = 5

# ---------- Progress ----------
REVIEW_WINDOW_DAYS = 7
MAX_CHALLENGING_CARDS = 5
PERCENT_PRECISION = 2
SECONDS_PER_DAY = 86400

# ---------- Hints ----------
MATH_TAGS = ("math", "arithmetic")
KNOWLEDGE_TAGS = ("geography", "history", "literature")
MIN_ANSWER_RANGE = 10
