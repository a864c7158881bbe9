"""Match data model and related utilities."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator


class DictCompatibleBaseModel(BaseModel):
    """Custom BaseModel with dictionary-style access for backward compatibility"""

    def __getitem__(self, key: str) -> Any:
        """Allow dictionary-style access"""
        return getattr(self, key)

    def __setitem__(self, key: str, value: Any) -> None:
        """Allow dictionary-style assignment"""
        setattr(self, key, value)

    def get(self, key: str, default: Any = None) -> Any:
        """Allow .get() method like dictionaries"""
        return getattr(self, key, default)

    @classmethod
    def document_fields(cls, changes: dict[str, Any]) -> dict[str, Any]:
        """Translate a partial update keyed by field name into document attributes"""
        payload: dict[str, Any] = {}
        for name, value in changes.items():
            field = cls.model_fields.get(name)
            key = field.alias if field and field.alias else name
            if isinstance(value, datetime):
                value = value.isoformat()
            elif isinstance(value, Enum):
                value = value.value
            payload[key] = value
        return payload

    def to_document(self) -> dict[str, Any]:
        """Serialize to document attributes, leaving out the store-assigned id"""
        return self.model_dump(
            mode="json", by_alias=True, exclude={"id"}, exclude_none=True
        )

    model_config = {"extra": "allow", "populate_by_name": True}


class MatchStatus(str, Enum):
    """Match status values as stored in the matches collection"""

    PENDING_SCHEDULE = "pending_schedule"  # Generated, no date yet
    SCHEDULED = "scheduled"  # Date assigned (or approved by an admin)
    IN_PROGRESS = "in_progress"  # Play has started
    COMPLETED = "completed"  # Finished, terminal
    REJECTED = "rejected"  # Rejected by an admin, terminal


TERMINAL_STATUSES = frozenset({MatchStatus.COMPLETED, MatchStatus.REJECTED})


class Match(DictCompatibleBaseModel):
    """A round match between two competitors of one group"""

    # Assigned by the store on create
    id: str | None = Field(default=None, alias="$id")

    # Sides in seeding order, not a ranking
    side_a: str = Field(alias="player1Id")
    side_b: str = Field(alias="player2Id")
    group_id: str = Field(alias="tournamentId")
    round: int = Field(default=1, ge=1)

    status: MatchStatus = MatchStatus.PENDING_SCHEDULE
    is_scheduled: bool = Field(default=False, alias="isScheduled")
    is_reviewed: bool = Field(default=False, alias="isReviewed")
    scheduled_date: datetime | None = Field(default=None, alias="scheduledDate")

    # Snapshot taken at pairing time, never recomputed
    predicted_winner: str = Field(alias="predictedWinnerId")
    win_probability: int = Field(alias="winProbability", ge=50, le=100)

    winner: str | None = Field(default=None, alias="winnerId")

    @model_validator(mode="after")
    def _check_sides(self) -> "Match":
        if self.side_a == self.side_b:
            raise ValueError(f"A match needs two different competitors, got {self.side_a} twice")
        sides = (self.side_a, self.side_b)
        if self.predicted_winner not in sides:
            raise ValueError(
                f"Predicted winner {self.predicted_winner} is not one of {sides}"
            )
        if self.winner is not None and self.winner not in sides:
            raise ValueError(f"Winner {self.winner} is not one of {sides}")
        return self

    @property
    def sides(self) -> tuple[str, str]:
        return (self.side_a, self.side_b)

    @property
    def pairing_key(self) -> tuple[str, int, str, str]:
        """Uniqueness key for round pairings within a group"""
        return (self.group_id, self.round, self.side_a, self.side_b)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES
