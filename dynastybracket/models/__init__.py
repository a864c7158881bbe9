"""Data models for competitors, groups, matches and bracket views."""

from .bracket import BracketView, EnrichedMatch, FailedPairing, MatchRow, MissingReference
from .competitor import ApprovalStatus, Competitor, Group, GroupSummary
from .match import DictCompatibleBaseModel, Match, MatchStatus

__all__ = [
    "ApprovalStatus",
    "BracketView",
    "Competitor",
    "DictCompatibleBaseModel",
    "EnrichedMatch",
    "FailedPairing",
    "Group",
    "GroupSummary",
    "Match",
    "MatchRow",
    "MatchStatus",
    "MissingReference",
]
