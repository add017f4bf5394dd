"""Modified-Leitner spaced-repetition scheduler."""

VERSION = "0.1.0"
