"""User-facing messages for engine and store errors."""

from ..exceptions import (
    DuplicateRecordError,
    IllegalTransitionError,
    InsufficientCompetitorsError,
    InvalidRatingError,
    InvalidResultError,
    MissingReferenceError,
    PersistenceError,
    RecordNotFoundError,
)

# How each lifecycle action reads in "this match cannot be ..."
ACTION_PHRASES: dict[str, str] = {
    "schedule": "scheduled",
    "reschedule": "rescheduled",
    "approve": "approved",
    "reject": "rejected",
    "mark_reviewed": "marked as reviewed",
    "advance": "started",
    "finish": "finished",
}

STATE_PHRASES: dict[str, str] = {
    "pending_schedule": "waiting to be scheduled",
    "scheduled": "scheduled",
    "in_progress": "in progress",
    "completed": "completed",
    "rejected": "rejected",
    "pending": "pending approval",
    "approved": "approved",
}


def user_message(error: Exception) -> str:
    """Translate an error into a sentence the viewer can show as-is"""
    if isinstance(error, InsufficientCompetitorsError):
        return (
            "Not enough approved players to create a bracket "
            f"({error.competitor_count} approved, at least 2 needed)."
        )
    if isinstance(error, IllegalTransitionError):
        action = ACTION_PHRASES.get(error.action, error.action.replace("_", " "))
        state = STATE_PHRASES.get(error.state, error.state.replace("_", " "))
        return f"This match cannot be {action} in its current state ({state})."
    if isinstance(error, MissingReferenceError):
        return f"A player in this match could not be found (id {error.competitor_id})."
    if isinstance(error, InvalidRatingError):
        return "A player's rating is missing or invalid, so no prediction could be made."
    if isinstance(error, InvalidResultError):
        return "The winner must be one of the two players in the match."
    if isinstance(error, RecordNotFoundError):
        return "The requested record no longer exists. Try refreshing."
    if isinstance(error, DuplicateRecordError):
        return "This bracket was already generated. Refresh to see it."
    if isinstance(error, PersistenceError):
        return f"Could not reach the tournament database ({error.operation}). Please try again."
    return f"Unexpected error: {type(error).__name__}: {error}"
