"""Interface the engine expects from an external document store."""

from typing import Any, Protocol

from ..models.competitor import ApprovalStatus, Competitor, Group
from ..models.match import Match


class TournamentStore(Protocol):
    """Async persistence collaborator used by the orchestrator.

    Implementations raise ``PersistenceError`` (or one of its subclasses)
    for every failure. ``create_match`` must reject a second match with the
    same ``(group_id, round, side_a, side_b)`` with ``DuplicateRecordError``.
    Partial updates are keyed by model field name, not document attribute.
    """

    async def list_competitors(
        self, group_id: str, status: ApprovalStatus | None = None
    ) -> list[Competitor]: ...

    async def list_matches(self, group_id: str) -> list[Match]: ...

    async def create_match(self, match: Match) -> Match: ...

    async def update_match(self, match_id: str, changes: dict[str, Any]) -> Match: ...

    async def get_match(self, match_id: str) -> Match: ...

    async def get_competitor(self, competitor_id: str) -> Competitor: ...

    async def update_competitor(
        self, competitor_id: str, changes: dict[str, Any]
    ) -> Competitor: ...

    async def get_group(self, group_id: str) -> Group: ...
