"""Logistic win-probability estimate from a rating differential."""

import math
from enum import Enum
from numbers import Integral, Real

from pydantic import Field

from ..exceptions import InvalidRatingError
from ..models.match import DictCompatibleBaseModel

# Rating gap at which the stronger side is ten times as likely to win
RATING_SCALE = 400

# Gaps this wide are reported as a certain win without evaluating the curve
SATURATION_GAP = RATING_SCALE * RATING_SCALE


class FavoredSide(str, Enum):
    A = "A"
    B = "B"


# Equal ratings favor the first seeded side
TIE_FAVORS = FavoredSide.A


class Prediction(DictCompatibleBaseModel):
    """Probability (percent) that the favored side wins"""

    win_probability: int = Field(ge=50, le=100)
    favored_side: FavoredSide


def _check_rating(rating: object, label: str) -> Real:
    if isinstance(rating, bool) or not isinstance(rating, Real):
        raise InvalidRatingError(rating, label)
    # Integers are exact and unbounded; only floating values can be inf or nan
    if not isinstance(rating, Integral) and not math.isfinite(rating):
        raise InvalidRatingError(rating, label)
    return rating


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def predict(rating_a: float, rating_b: float) -> Prediction:
    """Predict which side is favored and with what probability.

    The reported probability is always the favored side's, so it never
    drops below 50. Ratings are compared exactly, so integers beyond the
    float range are accepted.
    """
    a = _check_rating(rating_a, "rating_a")
    b = _check_rating(rating_b, "rating_b")
    if a == b:
        return Prediction(win_probability=50, favored_side=TIE_FAVORS)

    side = FavoredSide.A if a > b else FavoredSide.B
    try:
        gap = abs(a - b)
    except OverflowError:
        # An integer beyond the float range against a float
        gap = math.inf

    if gap >= SATURATION_GAP:
        favored = 1.0
    else:
        # Evaluated on the non-positive exponent so large gaps cannot overflow
        favored = 1 / (1 + 10 ** (-float(gap) / RATING_SCALE))
    return Prediction(win_probability=_round_half_up(favored * 100), favored_side=side)
