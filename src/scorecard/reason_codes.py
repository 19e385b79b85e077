"""
Reason Codes
============

Explanation of which rule groups drove a score.

``ReasonCodePoints`` is the per-call accumulator: an immutable table of
reason code -> summed points. Each ``add`` returns a new table, so a
scorecard pass is a fold over its characteristics and the result is a
plain value that can be compared across calls.

``build_ranking`` filters the final table into a ``ReasonCodeRanking``.
It keeps first-seen order; ordering by magnitude is ``ranked()``.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple


class ReasonCodePoints:
    """Insertion-ordered, immutable running sums keyed by reason code."""

    __slots__ = ("_points",)

    def __init__(self, points: Optional[Mapping[str, float]] = None):
        self._points: Dict[str, float] = dict(points or {})

    def add(self, reason_code: str, points: float) -> "ReasonCodePoints":
        """Return a new table with ``points`` added to ``reason_code``."""
        updated = dict(self._points)
        updated[reason_code] = updated.get(reason_code, 0.0) + points
        return ReasonCodePoints(updated)

    def sum_map(self) -> Mapping[str, float]:
        return MappingProxyType(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def __contains__(self, reason_code: str) -> bool:
        return reason_code in self._points

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ReasonCodePoints):
            return NotImplemented
        return list(self._points.items()) == list(other._points.items())

    def __repr__(self) -> str:
        return f"ReasonCodePoints({self._points!r})"


@dataclass(frozen=True)
class ReasonCodeRanking:
    """Numeric prediction plus its retained reason codes."""
    predicted_value: Any
    entries: Tuple[Tuple[str, float], ...]

    @property
    def reason_codes(self) -> List[str]:
        return [code for code, _ in self.entries]

    def ranked(self) -> List[Tuple[str, float]]:
        """Entries by descending points; ties keep first-seen order."""
        return sorted(self.entries, key=lambda entry: entry[1], reverse=True)

    def get_reason_code(self, rank: int) -> Optional[str]:
        """Reason code at 1-based ``rank`` of ``ranked()``, or None."""
        ranked = self.ranked()
        if rank < 1 or rank > len(ranked):
            return None
        return ranked[rank - 1][0]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "predicted_value": self.predicted_value,
            "reason_codes": [
                {"reason_code": code, "points": points}
                for code, points in self.entries
            ],
        }


def build_ranking(points: ReasonCodePoints, predicted_value: Any) -> ReasonCodeRanking:
    """Drop codes with strictly negative sums; zero and NaN sums are kept."""
    kept = tuple(
        (code, value)
        for code, value in points.sum_map().items()
        if not value < 0
    )
    return ReasonCodeRanking(predicted_value=predicted_value, entries=kept)
