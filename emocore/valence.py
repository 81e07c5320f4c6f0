"""
Valence classification.

Valence is a signed score in [-1, 1]. The scale is split into seven buckets
of equal width whose bounds sit at odd sevenths. Each bucket includes its
lower bound and excludes its upper bound, except the top bucket which also
includes +1.
"""

from bisect import bisect_right
from enum import IntEnum

# Interior boundaries, computed from integer sevenths so they match the
# store's own bucketing bit for bit.
_BOUNDARIES = tuple(k / 7 for k in (-5, -3, -1, 1, 3, 5))

VALENCE_MIN = -7 / 7
VALENCE_MAX = 7 / 7


class ValenceClassification(IntEnum):
    """Seven ordered buckets over the valence scale."""

    VERY_UNPLEASANT = 1
    UNPLEASANT = 2
    SLIGHTLY_UNPLEASANT = 3
    NEUTRAL = 4
    SLIGHTLY_PLEASANT = 5
    PLEASANT = 6
    VERY_PLEASANT = 7

    @classmethod
    def from_code(cls, code: int) -> "ValenceClassification | None":
        try:
            return cls(code)
        except ValueError:
            return None

    @property
    def bounds(self) -> tuple[float, float]:
        """The ``(lower, upper)`` bounds of this bucket."""
        edges = (VALENCE_MIN, *_BOUNDARIES, VALENCE_MAX)
        index = self.value - 1
        return edges[index], edges[index + 1]

    @property
    def display_name(self) -> str:
        return self.name.replace("_", " ").title()


def is_valid_valence(valence: float) -> bool:
    """Whether ``valence`` lies on the scale. NaN is never valid."""
    return VALENCE_MIN <= valence <= VALENCE_MAX


def classify(valence: float) -> ValenceClassification:
    """
    Map a valence score to its bucket.

    The caller is responsible for range checking; values below -1 land in
    the lowest bucket and values above +1 in the highest.
    """
    return ValenceClassification(bisect_right(_BOUNDARIES, valence) + 1)
