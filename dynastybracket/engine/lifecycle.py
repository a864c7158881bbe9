"""Allowed state transitions for matches and competitor registrations.

Every transition is a pure function: it validates the current state,
returns the updated record and the partial fields a store must write, and
never touches persistence itself. Invalid actions raise
``IllegalTransitionError`` instead of silently doing nothing.
"""

from datetime import datetime
from typing import Any, Callable, NamedTuple

from ..exceptions import IllegalTransitionError, InvalidResultError
from ..models.competitor import ApprovalStatus, Competitor
from ..models.match import Match, MatchStatus


class LifecycleUpdate(NamedTuple):
    """New record state plus the fields that changed"""

    record: Match | Competitor
    changes: dict[str, Any]


# (current status, action) -> next status
MATCH_TRANSITIONS: dict[tuple[MatchStatus, str], MatchStatus] = {
    (MatchStatus.PENDING_SCHEDULE, "schedule"): MatchStatus.SCHEDULED,
    (MatchStatus.PENDING_SCHEDULE, "approve"): MatchStatus.SCHEDULED,
    (MatchStatus.PENDING_SCHEDULE, "reject"): MatchStatus.REJECTED,
    (MatchStatus.SCHEDULED, "reschedule"): MatchStatus.SCHEDULED,
    (MatchStatus.SCHEDULED, "mark_reviewed"): MatchStatus.SCHEDULED,
    (MatchStatus.SCHEDULED, "advance"): MatchStatus.IN_PROGRESS,
    (MatchStatus.IN_PROGRESS, "finish"): MatchStatus.COMPLETED,
}

COMPETITOR_TRANSITIONS: dict[tuple[ApprovalStatus, str], ApprovalStatus] = {
    (ApprovalStatus.PENDING, "approve"): ApprovalStatus.APPROVED,
    (ApprovalStatus.PENDING, "reject"): ApprovalStatus.REJECTED,
}


def _next_status(match: Match, action: str) -> MatchStatus:
    try:
        return MATCH_TRANSITIONS[(match.status, action)]
    except KeyError:
        raise IllegalTransitionError(action, match.status.value, match.id) from None


def _update(match: Match, changes: dict[str, Any]) -> LifecycleUpdate:
    return LifecycleUpdate(match.model_copy(update=changes), changes)


def allowed_actions(match: Match) -> list[str]:
    """Actions valid from the match's current state, in table order"""
    actions = [action for (status, action) in MATCH_TRANSITIONS if status == match.status]
    if match.is_reviewed and "mark_reviewed" in actions:
        actions.remove("mark_reviewed")
    return actions


def schedule(match: Match, when: datetime) -> LifecycleUpdate:
    """Give a pending match its first date"""
    status = _next_status(match, "schedule")
    return _update(
        match, {"status": status, "scheduled_date": when, "is_scheduled": True}
    )


def reschedule(match: Match, when: datetime) -> LifecycleUpdate:
    """Move a scheduled match; allowed however much time has passed"""
    _next_status(match, "reschedule")
    return _update(match, {"scheduled_date": when})


def approve(match: Match) -> LifecycleUpdate:
    """Admin approval of a pending match without assigning a date"""
    status = _next_status(match, "approve")
    return _update(match, {"status": status})


def reject(match: Match) -> LifecycleUpdate:
    status = _next_status(match, "reject")
    return _update(match, {"status": status})


def mark_reviewed(match: Match, *, confirmed: bool = False) -> LifecycleUpdate:
    """Flag a scheduled match as verified by an admin.

    This cannot be undone, so callers must pass ``confirmed=True``. Marking
    an already reviewed match again succeeds without changes.
    """
    _next_status(match, "mark_reviewed")
    if not confirmed:
        raise ValueError("Marking a match as reviewed cannot be undone; pass confirmed=True")
    if match.is_reviewed:
        return LifecycleUpdate(match, {})
    return _update(match, {"is_reviewed": True})


def advance(match: Match) -> LifecycleUpdate:
    """Play has begun"""
    status = _next_status(match, "advance")
    return _update(match, {"status": status})


def finish(match: Match, winner: str) -> LifecycleUpdate:
    """Record the winner and close the match"""
    status = _next_status(match, "finish")
    if winner not in match.sides:
        raise InvalidResultError(
            f"Winner {winner} did not play match {match.id} ({match.side_a} vs {match.side_b})"
        )
    return _update(match, {"status": status, "winner": winner})


MATCH_ACTIONS: dict[str, Callable[..., LifecycleUpdate]] = {
    "schedule": schedule,
    "reschedule": reschedule,
    "approve": approve,
    "reject": reject,
    "mark_reviewed": mark_reviewed,
    "advance": advance,
    "finish": finish,
}


def apply_action(match: Match, action: str, **kwargs: Any) -> LifecycleUpdate:
    """Dispatch a transition by name"""
    try:
        transition = MATCH_ACTIONS[action]
    except KeyError:
        raise IllegalTransitionError(action, match.status.value, match.id) from None
    return transition(match, **kwargs)


def _review_competitor(competitor: Competitor, action: str) -> LifecycleUpdate:
    try:
        status = COMPETITOR_TRANSITIONS[(competitor.status, action)]
    except KeyError:
        raise IllegalTransitionError(action, competitor.status.value, competitor.id) from None
    changes: dict[str, Any] = {"status": status}
    return LifecycleUpdate(competitor.model_copy(update=changes), changes)


def approve_competitor(competitor: Competitor) -> LifecycleUpdate:
    return _review_competitor(competitor, "approve")


def reject_competitor(competitor: Competitor) -> LifecycleUpdate:
    return _review_competitor(competitor, "reject")
