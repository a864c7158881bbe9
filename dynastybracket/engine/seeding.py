"""First-round seeded pairing: highest seed against lowest seed."""

from datetime import datetime
from typing import Iterable

from ..exceptions import InsufficientCompetitorsError
from ..models.competitor import Competitor
from ..models.match import DictCompatibleBaseModel, Match, MatchStatus
from ..utils.logging import log
from .predictor import FavoredSide, predict

FIRST_ROUND = 1


class SeedingResult(DictCompatibleBaseModel):
    """Pairings for round one plus the competitor left without a match"""

    matches: list[Match]
    seeds: list[Competitor]
    bye: Competitor | None = None


def seed_order(competitors: Iterable[Competitor]) -> list[Competitor]:
    """Rating descending, identifier ascending on equal ratings"""
    return sorted(competitors, key=lambda c: (-c.rating, c.id))


def _check_pool(competitors: list[Competitor], group_id: str | None) -> str | None:
    seen: set[str] = set()
    for competitor in competitors:
        if competitor.id in seen:
            raise ValueError(f"Competitor {competitor.id} appears more than once")
        seen.add(competitor.id)
        if not competitor.is_eligible:
            raise ValueError(
                f"Competitor {competitor.id} is {competitor.status.value}, only approved "
                "competitors can be seeded"
            )

    groups = {competitor.group_id for competitor in competitors}
    if group_id is not None:
        groups.add(group_id)
    if len(groups) > 1:
        raise ValueError(f"Cannot seed competitors from several groups: {sorted(groups)}")
    return next(iter(groups), group_id)


def pair_competitors(
    competitor_a: Competitor,
    competitor_b: Competitor,
    group_id: str,
    scheduled_at: datetime | None = None,
) -> Match:
    """Build an unsaved round-one match with its prediction snapshot"""
    prediction = predict(competitor_a.rating, competitor_b.rating)
    favorite = competitor_a if prediction.favored_side == FavoredSide.A else competitor_b

    return Match(
        side_a=competitor_a.id,
        side_b=competitor_b.id,
        group_id=group_id,
        round=FIRST_ROUND,
        status=MatchStatus.SCHEDULED if scheduled_at else MatchStatus.PENDING_SCHEDULE,
        is_scheduled=False,
        is_reviewed=False,
        scheduled_date=scheduled_at,
        predicted_winner=favorite.id,
        win_probability=prediction.win_probability,
    )


def generate_first_round(
    competitors: Iterable[Competitor],
    group_id: str | None = None,
    scheduled_at: datetime | None = None,
) -> SeedingResult:
    """Pair approved competitors of one group into first-round matches.

    Seed 1 meets seed n, seed 2 meets seed n-1, and so on. With an odd
    number of competitors the median seed gets a bye and no match record.
    Passing ``scheduled_at`` starts every match scheduled on that date;
    ``is_scheduled`` is False on every new match either way.

    Raises:
        InsufficientCompetitorsError: fewer than two competitors
        ValueError: duplicates, unapproved competitors, or mixed groups
    """
    pool = list(competitors)
    requested_group = _check_pool(pool, group_id)

    if len(pool) < 2:
        raise InsufficientCompetitorsError(len(pool), requested_group)
    # Every competitor shares this group once _check_pool has passed
    resolved_group = pool[0].group_id

    seeds = seed_order(pool)
    n = len(seeds)
    matches = [
        pair_competitors(seeds[i], seeds[n - 1 - i], resolved_group, scheduled_at)
        for i in range(n // 2)
    ]

    bye: Competitor | None = None
    if n % 2:
        bye = seeds[n // 2]
        log(f"🎟️  {bye.name} ({bye.id}) has a bye to round 2 in {resolved_group}")

    log(f"🌱 Seeded {n} competitors into {len(matches)} matches for {resolved_group}")
    return SeedingResult(matches=matches, seeds=seeds, bye=bye)
