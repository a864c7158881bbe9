"""Exceptions raised by the bracket engine and its stores."""


# ========== Base Application Exception ==========


class DynastyBracketException(Exception):
    """Base exception for all dynasty bracket errors.

    Catch this to handle any application-specific failure with a single
    except clause.
    """

    pass


# ========== Engine Exceptions ==========


class InvalidRatingError(DynastyBracketException, ValueError):
    """Raised when a rating is missing, non-numeric or non-finite."""

    def __init__(self, rating: object, label: str = "rating"):
        self.rating = rating
        self.label = label
        super().__init__(f"Invalid {label}: {rating!r} (expected a finite number)")


class InsufficientCompetitorsError(DynastyBracketException):
    """Raised when seeding is requested with fewer than two eligible competitors."""

    def __init__(self, competitor_count: int, group_id: str | None = None):
        self.competitor_count = competitor_count
        self.group_id = group_id
        where = f" in group {group_id}" if group_id else ""
        super().__init__(
            f"Need at least 2 approved competitors to seed a bracket{where}, "
            f"found {competitor_count}"
        )


class IllegalTransitionError(DynastyBracketException):
    """Raised when a lifecycle action is not valid from the record's current state."""

    def __init__(self, action: str, state: str, record_id: str | None = None):
        self.action = action
        self.state = state
        self.record_id = record_id
        target = f" on {record_id}" if record_id else ""
        super().__init__(f"Cannot {action}{target} while it is {state}")


class InvalidResultError(DynastyBracketException, ValueError):
    """Raised when a match result names a winner who did not play the match."""

    pass


class MissingReferenceError(DynastyBracketException):
    """Raised when a match references a competitor that cannot be resolved."""

    def __init__(self, match_id: str | None, side: str, competitor_id: str):
        self.match_id = match_id
        self.side = side
        self.competitor_id = competitor_id
        super().__init__(
            f"Match {match_id} side {side} references unknown competitor {competitor_id}"
        )


# ========== Persistence Exceptions ==========


class PersistenceError(DynastyBracketException):
    """Wraps a failure reported by the external store.

    ``operation`` names the store call and ``record_id`` the record it was
    working on, when there is one.
    """

    def __init__(
        self,
        operation: str,
        message: str,
        record_id: str | None = None,
        status: int | None = None,
    ):
        self.operation = operation
        self.record_id = record_id
        self.status = status
        target = f" [{record_id}]" if record_id else ""
        super().__init__(f"{operation}{target} failed: {message}")


class RecordNotFoundError(PersistenceError):
    """Raised when the store has no record with the requested identifier."""

    pass


class DuplicateRecordError(PersistenceError):
    """Raised when a create violates a uniqueness constraint in the store."""

    pass
