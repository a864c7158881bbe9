"""Bracket views returned by the orchestrator and display rows for the viewer."""

from .competitor import Competitor
from .match import DictCompatibleBaseModel, Match, MatchStatus

UNKNOWN_PLAYER = "Unknown Player"


class MissingReference(DictCompatibleBaseModel):
    """A match side whose competitor could not be resolved"""

    match_id: str | None
    side: str  # "A" or "B"
    competitor_id: str
    reason: str = ""


class FailedPairing(DictCompatibleBaseModel):
    """A seeded pairing that could not be persisted"""

    side_a: str
    side_b: str
    operation: str
    error: str


class EnrichedMatch(DictCompatibleBaseModel):
    """A match with its competitors attached for display"""

    match: Match
    competitor_a: Competitor | None = None
    competitor_b: Competitor | None = None

    @property
    def is_complete(self) -> bool:
        """Both sides resolved"""
        return self.competitor_a is not None and self.competitor_b is not None

    @property
    def predicted_winner(self) -> Competitor | None:
        if self.match.predicted_winner == self.match.side_a:
            return self.competitor_a
        return self.competitor_b


class BracketView(DictCompatibleBaseModel):
    """Result of loading or generating a group's bracket"""

    group_id: str
    matches: list[EnrichedMatch] = []
    missing_references: list[MissingReference] = []
    failed_pairings: list[FailedPairing] = []
    bye: Competitor | None = None
    generated: bool = False

    @property
    def match_ids(self) -> list[str | None]:
        return [entry.match.id for entry in self.matches]

    def by_round(self, round_number: int) -> list[EnrichedMatch]:
        return [entry for entry in self.matches if entry.match.round == round_number]


class MatchRow:
    """Represents a single match in the bracket viewer"""

    STATE_COLORS: dict[MatchStatus, str] = {
        MatchStatus.PENDING_SCHEDULE: "[dim]⚪[/dim]",
        MatchStatus.SCHEDULED: "[red]🔴[/red]",
        MatchStatus.IN_PROGRESS: "[yellow]🟡[/yellow]",
        MatchStatus.COMPLETED: "[green]✅[/green]",
        MatchStatus.REJECTED: "[dim]✖[/dim]",
    }

    STATE_NAMES: dict[MatchStatus, str] = {
        MatchStatus.PENDING_SCHEDULE: "Pending Schedule",
        MatchStatus.SCHEDULED: "Scheduled",
        MatchStatus.IN_PROGRESS: "In Progress",
        MatchStatus.COMPLETED: "Completed",
        MatchStatus.REJECTED: "Rejected",
    }

    def __init__(self, entry: EnrichedMatch):
        match = entry.match
        self.id: str | None = match.id
        self.round: int = match.round
        self.status: MatchStatus = match.status
        self.is_reviewed: bool = match.is_reviewed
        self.player1: str = entry.competitor_a.name if entry.competitor_a else UNKNOWN_PLAYER
        self.player2: str = entry.competitor_b.name if entry.competitor_b else UNKNOWN_PLAYER
        self.rating1: int | None = entry.competitor_a.rating if entry.competitor_a else None
        self.rating2: int | None = entry.competitor_b.rating if entry.competitor_b else None
        favorite = entry.predicted_winner
        self.favorite: str = favorite.name if favorite else UNKNOWN_PLAYER
        self.win_probability: int = match.win_probability
        self.scheduled_date = match.scheduled_date

    @property
    def status_icon(self) -> str:
        return self.STATE_COLORS.get(self.status, "⚪")

    @property
    def status_text(self) -> str:
        status = self.STATE_NAMES.get(self.status, "Unknown")
        if self.status == MatchStatus.SCHEDULED:
            status += " ✓" if self.is_reviewed else " (unreviewed)"
        return status

    @property
    def match_name(self) -> str:
        """Both players with their ratings, truncated for the table"""
        left = self.player1[:14]
        right = self.player2[:14]
        if self.rating1 is not None:
            left += f" ({self.rating1})"
        if self.rating2 is not None:
            right += f" ({self.rating2})"
        return f"{left} vs {right}"

    @property
    def prediction_text(self) -> str:
        return f"{self.favorite[:14]} {self.win_probability}%"

    @property
    def schedule_text(self) -> str:
        if not self.scheduled_date:
            return "-"
        return self.scheduled_date.strftime("%Y-%m-%d %H:%M")
