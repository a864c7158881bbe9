"""Seeding, prediction and match lifecycle engine."""

from . import lifecycle
from .orchestrator import TournamentOrchestrator
from .predictor import RATING_SCALE, TIE_FAVORS, FavoredSide, Prediction, predict
from .seeding import SeedingResult, generate_first_round

__all__ = [
    "FavoredSide",
    "Prediction",
    "RATING_SCALE",
    "SeedingResult",
    "TIE_FAVORS",
    "TournamentOrchestrator",
    "generate_first_round",
    "lifecycle",
    "predict",
]
