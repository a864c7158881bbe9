"""Lazy bracket generation and admin actions on top of a document store."""

import asyncio
from collections import defaultdict
from datetime import datetime
from typing import Any

from ..api.store import TournamentStore
from ..exceptions import (
    DuplicateRecordError,
    MissingReferenceError,
    PersistenceError,
    RecordNotFoundError,
)
from ..models.bracket import BracketView, EnrichedMatch, FailedPairing, MissingReference
from ..models.competitor import ApprovalStatus, Competitor, GroupSummary
from ..models.match import Match, MatchStatus
from ..utils.logging import log
from . import lifecycle
from .seeding import generate_first_round


class TournamentOrchestrator:
    """Coordinate seeding, enrichment and match transitions for dynasty brackets.

    Bracket generation is a read-then-write sequence. Within one process it
    is serialized per group with an ``asyncio.Lock``; across processes the
    store's uniqueness constraint on ``(group, round, side_a, side_b)``
    turns a losing concurrent generation into a reload of the winner's
    matches.
    """

    def __init__(self, store: TournamentStore, immediate_schedule: bool = False):
        self.store: TournamentStore = store
        # Tournament views assign a date to every match at creation
        self.immediate_schedule: bool = immediate_schedule
        self._group_locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._match_locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def get_or_create_bracket(self, group_id: str) -> BracketView:
        """Return the group's bracket, generating round one on first access"""
        async with self._group_locks[group_id]:
            existing = await self.store.list_matches(group_id)
            if existing:
                log(f"📋 Using {len(existing)} existing matches for {group_id}")
                return await self._load_bracket(group_id, existing)

            log(f"🆕 No matches for {group_id}, generating round 1")
            return await self._generate_bracket(group_id)

    async def _load_bracket(self, group_id: str, matches: list[Match]) -> BracketView:
        competitors = await self.store.list_competitors(group_id)
        enriched, missing = await self._enrich(matches, competitors)
        return BracketView(group_id=group_id, matches=enriched, missing_references=missing)

    async def _generate_bracket(self, group_id: str) -> BracketView:
        eligible = await self.store.list_competitors(group_id, ApprovalStatus.APPROVED)
        scheduled_at = datetime.now().astimezone() if self.immediate_schedule else None
        # InsufficientCompetitorsError propagates to the caller
        seeding = generate_first_round(eligible, group_id=group_id, scheduled_at=scheduled_at)

        results = await asyncio.gather(
            *(self._persist_pairing(draft) for draft in seeding.matches)
        )

        saved: list[Match] = []
        failed: list[FailedPairing] = []
        duplicates = 0
        for draft, result in zip(seeding.matches, results):
            if isinstance(result, Match):
                saved.append(result)
                continue
            if isinstance(result, DuplicateRecordError):
                duplicates += 1
                continue
            failed.append(
                FailedPairing(
                    side_a=draft.side_a,
                    side_b=draft.side_b,
                    operation=result.operation,
                    error=str(result),
                )
            )

        if duplicates:
            # Another generator persisted this round first; show its matches
            log(f"⚠️  {duplicates} pairings already existed for {group_id}, reloading")
            existing = await self.store.list_matches(group_id)
            view = await self._load_bracket(group_id, existing)
            view.failed_pairings = failed
            view.bye = seeding.bye
            return view

        if failed:
            log(f"⚠️  {len(failed)} of {len(seeding.matches)} pairings failed to save for {group_id}")

        by_id = {c.id: c for c in eligible}
        enriched = [
            EnrichedMatch(
                match=match,
                competitor_a=by_id.get(match.side_a),
                competitor_b=by_id.get(match.side_b),
            )
            for match in saved
        ]
        return BracketView(
            group_id=group_id,
            matches=enriched,
            failed_pairings=failed,
            bye=seeding.bye,
            generated=True,
        )

    async def _persist_pairing(self, draft: Match) -> Match | PersistenceError:
        """Create one match; failures are returned, not raised, so the batch continues"""
        try:
            return await self.store.create_match(draft)
        except PersistenceError as e:
            log(f"❌ Could not save {draft.side_a} vs {draft.side_b}: {e}")
            return e

    async def _enrich(
        self, matches: list[Match], competitors: list[Competitor]
    ) -> tuple[list[EnrichedMatch], list[MissingReference]]:
        by_id = {c.id: c for c in competitors}
        missing: list[MissingReference] = []
        enriched: list[EnrichedMatch] = []

        for match in sorted(matches, key=lambda m: m.round):
            sides: list[Competitor | None] = []
            for side, competitor_id in (("A", match.side_a), ("B", match.side_b)):
                try:
                    sides.append(await self._resolve(match, side, competitor_id, by_id))
                except MissingReferenceError as e:
                    log(f"⚠️  {e}")
                    missing.append(
                        MissingReference(
                            match_id=match.id,
                            side=side,
                            competitor_id=competitor_id,
                            reason=str(e.__cause__ or e),
                        )
                    )
                    sides.append(None)
            enriched.append(
                EnrichedMatch(match=match, competitor_a=sides[0], competitor_b=sides[1])
            )
        return enriched, missing

    async def _resolve(
        self,
        match: Match,
        side: str,
        competitor_id: str,
        known: dict[str, Competitor],
    ) -> Competitor:
        if competitor_id in known:
            return known[competitor_id]
        try:
            competitor = await self.store.get_competitor(competitor_id)
        except RecordNotFoundError as e:
            raise MissingReferenceError(match.id, side, competitor_id) from e
        known[competitor_id] = competitor
        return competitor

    async def resolve_match(self, match_id: str) -> EnrichedMatch:
        """Load one match with both competitors; unresolved sides raise MissingReferenceError"""
        match = await self.store.get_match(match_id)
        known: dict[str, Competitor] = {}
        competitor_a = await self._resolve(match, "A", match.side_a, known)
        competitor_b = await self._resolve(match, "B", match.side_b, known)
        return EnrichedMatch(match=match, competitor_a=competitor_a, competitor_b=competitor_b)

    async def apply_action(self, match_id: str, action: str, **kwargs: Any) -> Match:
        """Run a lifecycle action against the stored match and persist the change"""
        async with self._match_locks[match_id]:
            match = await self.store.get_match(match_id)
            update = lifecycle.apply_action(match, action, **kwargs)
            if not update.changes:
                log(f"ℹ️  {action} on {match_id} changed nothing")
                return update.record
            saved = await self.store.update_match(match_id, update.changes)
            log(f"✅ {action} on {match_id}: {match.status.value} -> {saved.status.value}")
            return saved

    async def review_competitor(self, competitor_id: str, approve: bool) -> Competitor:
        """Approve or reject a pending registration"""
        competitor = await self.store.get_competitor(competitor_id)
        if approve:
            update = lifecycle.approve_competitor(competitor)
        else:
            update = lifecycle.reject_competitor(competitor)
        saved = await self.store.update_competitor(competitor_id, update.changes)
        log(f"✅ {competitor.name} is now {saved.status.value}")
        return saved

    async def get_group_summary(self, group_id: str) -> GroupSummary:
        """Dashboard counts for a dynasty"""
        group, competitors, matches = await asyncio.gather(
            self.store.get_group(group_id),
            self.store.list_competitors(group_id),
            self.store.list_matches(group_id),
        )

        def count_competitors(status: ApprovalStatus) -> int:
            return sum(1 for c in competitors if c.status == status)

        def count_matches(*statuses: MatchStatus) -> int:
            return sum(1 for m in matches if m.status in statuses)

        return GroupSummary(
            group=group,
            total_competitors=len(competitors),
            pending_competitors=count_competitors(ApprovalStatus.PENDING),
            approved_competitors=count_competitors(ApprovalStatus.APPROVED),
            rejected_competitors=count_competitors(ApprovalStatus.REJECTED),
            total_matches=len(matches),
            active_matches=count_matches(MatchStatus.SCHEDULED, MatchStatus.IN_PROGRESS),
            completed_matches=count_matches(MatchStatus.COMPLETED),
            rejected_matches=count_matches(MatchStatus.REJECTED),
            reviewed_matches=sum(1 for m in matches if m.is_reviewed),
        )
