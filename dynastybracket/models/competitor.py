"""Competitor and group (dynasty) models."""

from enum import Enum

from pydantic import Field

from .match import DictCompatibleBaseModel


class ApprovalStatus(str, Enum):
    """Registration status set by a dynasty admin"""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Competitor(DictCompatibleBaseModel):
    """A registered player of one dynasty"""

    id: str = Field(alias="$id")
    name: str
    rating: int
    group_id: str = Field(alias="countryId")
    status: ApprovalStatus = ApprovalStatus.PENDING

    @property
    def is_eligible(self) -> bool:
        return self.status == ApprovalStatus.APPROVED


class Group(DictCompatibleBaseModel):
    """A dynasty (country) that runs one independent bracket"""

    id: str = Field(alias="$id")
    name: str
    flag: str = ""


class GroupSummary(DictCompatibleBaseModel):
    """Dashboard counts for a dynasty, for display only"""

    group: Group
    total_competitors: int = 0
    pending_competitors: int = 0
    approved_competitors: int = 0
    rejected_competitors: int = 0
    total_matches: int = 0
    active_matches: int = 0  # scheduled or in progress
    completed_matches: int = 0
    rejected_matches: int = 0
    reviewed_matches: int = 0

    @property
    def eligible_count(self) -> int:
        return self.approved_competitors
