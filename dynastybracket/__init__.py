"""Dynasty Bracket - seeding, win prediction and match lifecycle for national dynasties."""

from .api import AppwriteAPI, InMemoryStore
from .engine import TournamentOrchestrator, generate_first_round, predict
from .models import Competitor, Match, MatchRow, MatchStatus
from .ui import BracketDisplay

__version__ = "1.0.0"
__all__ = [
    "AppwriteAPI",
    "BracketDisplay",
    "Competitor",
    "InMemoryStore",
    "Match",
    "MatchRow",
    "MatchStatus",
    "TournamentOrchestrator",
    "generate_first_round",
    "predict",
]
