import textwrap

import pytest

from leitner.domain.models import Flashcard

# ---------- Sample cards ----------

PARIS = Flashcard(
    "What is the capital of France?", "Paris", "City of Light", ("geography", "europe")
)
TWO_PLUS_TWO = Flashcard("What is 2+2?", "4", "Basic addition", ("math", "arithmetic"))
SHAKESPEARE = Flashcard(
    "Who wrote Romeo and Juliet?",
    "William Shakespeare",
    "Famous English playwright",
    ("literature", "drama"),
)
GOLD = Flashcard(
    "What is the chemical symbol for Gold?", "Au", "Comes from Latin 'aurum'", ("science", "chemistry")
)
TYPESCRIPT = Flashcard(
    "What programming language is TypeScript based on?",
    "JavaScript",
    "Adds static typing",
    ("programming", "web"),
)
TOKYO = Flashcard(
    "What is the capital of Japan?",
    "Tokyo",
    "Largest metropolitan area in the world",
    ("geography", "asia"),
)
SQRT_144 = Flashcard("What is the square root of 144?", "12", "Perfect square", ("math", "arithmetic"))


@pytest.fixture
def buckets():
    """Cards spread over every bucket, with Tokyo already mastered."""
    return {
        0: {PARIS, GOLD},
        1: {TYPESCRIPT},
        2: {TWO_PLUS_TWO},
        3: {SQRT_144},
        4: {SHAKESPEARE},
        5: {TOKYO},
    }


DECK_YAML = textwrap.dedent(
    """\
    cards:
      - key: paris
        front: What is the capital of France?
        back: Paris
        hint: City of Light
        tags: [geography, europe]
        bucket: 0
      - key: add
        front: What is 2+2?
        back: "4"
        hint: Basic addition
        tags: [math, arithmetic]
        bucket: 2
      - key: tokyo
        front: What is the capital of Japan?
        back: Tokyo
        hint: Largest metropolitan area in the world
        tags: [geography, asia]
        bucket: 5
    history:
      - card: paris
        difficulty: wrong
        at: 2024-01-01T09:00:00+00:00
      - card: add
        difficulty: easy
        at: 2024-01-02T09:00:00+00:00
      - card: paris
        difficulty: hard
        at: 2024-01-03T10:00:00+00:00
      - card: tokyo
        difficulty: easy
        at: 2024-01-04T09:00:00+00:00
    """
)


@pytest.fixture
def deck_file(tmp_path):
    """Writes a small three-card deck with history to a temp file."""
    path = tmp_path / "deck.yaml"
    path.write_text(DECK_YAML, encoding="utf-8")
    return path


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config/logs
    monkeypatch.setenv("HOME", str(home))
    return home
