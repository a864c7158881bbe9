"""Terminal bracket viewer."""

from .bracket_display import BracketDisplay, ConfirmReviewScreen

__all__ = ["BracketDisplay", "ConfirmReviewScreen"]
