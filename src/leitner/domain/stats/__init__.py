# Domain Stats Package
from .models import ChallengingCard, DifficultyStat, ProgressStats, RecentStats
from .ports import DeckRepository

__all__ = ["ChallengingCard", "DifficultyStat", "ProgressStats", "RecentStats", "DeckRepository"]
