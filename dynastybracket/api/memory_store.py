"""In-memory document store for demo mode and tests."""

import asyncio
import itertools
from typing import Any

from ..exceptions import DuplicateRecordError, RecordNotFoundError
from ..models.competitor import ApprovalStatus, Competitor, Group
from ..models.match import Match
from ..models.mock_data import MOCK_DYNASTIES
from ..utils.logging import log


class InMemoryStore:
    """Drop-in replacement for AppwriteAPI that keeps documents in dictionaries"""

    def __init__(
        self,
        groups: list[Group] | None = None,
        competitors: list[Competitor] | None = None,
        matches: list[Match] | None = None,
        latency: float = 0.0,
    ):
        self.groups: dict[str, Group] = {g.id: g for g in groups or []}
        self.competitors: dict[str, Competitor] = {c.id: c for c in competitors or []}
        self.matches: dict[str, Match] = {}
        # Yield to the event loop on every call so concurrent callers interleave
        self.latency: float = latency
        self._ids = itertools.count(1)
        for match in matches or []:
            stored = match if match.id else match.model_copy(update={"id": self._new_id()})
            self.matches[stored.id] = stored

    @classmethod
    def from_mock_data(cls, data: dict[str, Any] | None = None, **kwargs: Any) -> "InMemoryStore":
        """Build a store from documents shaped like MOCK_DYNASTIES"""
        data = data or MOCK_DYNASTIES
        return cls(
            groups=[Group(**doc) for doc in data.get("groups", [])],
            competitors=[Competitor(**doc) for doc in data.get("players", [])],
            matches=[Match(**doc) for doc in data.get("matches", [])],
            **kwargs,
        )

    def _new_id(self) -> str:
        return f"match-{next(self._ids)}"

    async def _tick(self) -> None:
        await asyncio.sleep(self.latency)

    async def list_competitors(
        self, group_id: str, status: ApprovalStatus | None = None
    ) -> list[Competitor]:
        await self._tick()
        return [
            c.model_copy(deep=True)
            for c in self.competitors.values()
            if c.group_id == group_id and (status is None or c.status == status)
        ]

    async def list_matches(self, group_id: str) -> list[Match]:
        await self._tick()
        return [m.model_copy(deep=True) for m in self.matches.values() if m.group_id == group_id]

    async def create_match(self, match: Match) -> Match:
        await self._tick()
        key = match.pairing_key
        if any(existing.pairing_key == key for existing in self.matches.values()):
            raise DuplicateRecordError(
                "create_match",
                f"a round {match.round} match {match.side_a} vs {match.side_b} already exists",
                status=409,
            )
        stored = match.model_copy(update={"id": self._new_id()}, deep=True)
        self.matches[stored.id] = stored
        log(f"💾 Stored match {stored.id}: {stored.side_a} vs {stored.side_b}")
        return stored.model_copy(deep=True)

    async def update_match(self, match_id: str, changes: dict[str, Any]) -> Match:
        await self._tick()
        current = self._require(self.matches, match_id, "update_match")
        updated = current.model_copy(update=changes)
        self.matches[match_id] = updated
        return updated.model_copy(deep=True)

    async def get_match(self, match_id: str) -> Match:
        await self._tick()
        return self._require(self.matches, match_id, "get_match").model_copy(deep=True)

    async def get_competitor(self, competitor_id: str) -> Competitor:
        await self._tick()
        return self._require(self.competitors, competitor_id, "get_competitor").model_copy(deep=True)

    async def update_competitor(self, competitor_id: str, changes: dict[str, Any]) -> Competitor:
        await self._tick()
        current = self._require(self.competitors, competitor_id, "update_competitor")
        updated = current.model_copy(update=changes)
        self.competitors[competitor_id] = updated
        return updated.model_copy(deep=True)

    async def get_group(self, group_id: str) -> Group:
        await self._tick()
        return self._require(self.groups, group_id, "get_group").model_copy(deep=True)

    @staticmethod
    def _require(records: dict[str, Any], record_id: str, operation: str) -> Any:
        try:
            return records[record_id]
        except KeyError:
            raise RecordNotFoundError(
                operation, "no such document", record_id=record_id, status=404
            ) from None
