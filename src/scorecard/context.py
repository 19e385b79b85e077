"""
Evaluation Context
==================

Call-scoped field resolution for a single evaluation.

A context wraps the caller's input record and memoizes field lookups.
It is created for one evaluation call and discarded at its end; it is
never shared between calls or threads.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import pandas as pd

from src.scorecard.errors import InvalidFeatureError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldValue:
    """A resolved, non-missing field or expression value."""
    value: Any

    def as_double(self) -> float:
        if isinstance(self.value, bool):
            return 1.0 if self.value else 0.0
        try:
            return float(self.value)
        except (TypeError, ValueError):
            raise InvalidFeatureError(
                f"Value {self.value!r} cannot be converted to a number",
                value=repr(self.value),
            )


def is_missing(value: Any) -> bool:
    """None, NaN and NaT count as missing; collections never do."""
    if value is None:
        return True
    return bool(pd.api.types.is_scalar(value) and pd.isna(value))


class EvaluationContext:
    """
    Per-call view over the input record.

    Args:
        arguments: Field name -> raw value for the entity being scored
    """

    def __init__(self, arguments: Optional[Mapping[str, Any]] = None):
        self.arguments = dict(arguments or {})
        self._cache: Dict[str, Optional[FieldValue]] = {}

    def get_field_value(self, name: str) -> Optional[FieldValue]:
        """Resolve a field, returning None when it is absent or missing."""
        if name in self._cache:
            return self._cache[name]

        raw = self.arguments.get(name)
        value = None if is_missing(raw) else FieldValue(raw)
        if value is None:
            logger.debug(f"[Context] Field '{name}' is missing")

        self._cache[name] = value
        return value

    @property
    def resolved_fields(self) -> Dict[str, Optional[FieldValue]]:
        """Fields looked up so far in this call."""
        return dict(self._cache)
