"""
Characteristic Scanner
======================

Selects the single matching attribute of one characteristic.

Attributes are visited in declared order and the first one whose
predicate is TRUE wins; FALSE and UNKNOWN both move on to the next
attribute. Later attributes are never evaluated once a match is found.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from src.scorecard.context import EvaluationContext
from src.scorecard.errors import InvalidFeatureError
from src.scorecard.expressions import evaluate_expression
from src.scorecard.model import Characteristic
from src.scorecard.predicates import TriState, evaluate_predicate

logger = logging.getLogger(__name__)


class ScanStatus(Enum):
    MATCHED = "matched"
    NO_MATCH = "no_match"
    MISSING_VALUE = "missing_value"


@dataclass(frozen=True)
class ScanResult:
    """Outcome of scanning one characteristic."""
    status: ScanStatus
    partial_score: Optional[float] = None
    reason_code: Optional[str] = None
    attribute_index: Optional[int] = None


NO_MATCH = ScanResult(status=ScanStatus.NO_MATCH)


def scan_characteristic(
    characteristic: Characteristic,
    context: EvaluationContext,
    index: Optional[int] = None,
) -> ScanResult:
    """
    Find the first true attribute and compute its contribution.

    Args:
        characteristic: Characteristic to scan
        context: Call-scoped evaluation context
        index: Position of the characteristic, used in error details

    Returns:
        ScanResult with MATCHED, NO_MATCH or MISSING_VALUE status

    Raises:
        InvalidFeatureError: An attribute lacks a predicate or a score source
    """
    for position, attribute in enumerate(characteristic.attributes):
        if attribute.predicate is None:
            raise InvalidFeatureError(
                "Attribute has no predicate",
                characteristic=index,
                attribute=position,
            )

        status = evaluate_predicate(attribute.predicate, context)
        if status is not TriState.TRUE:
            continue

        complex_partial_score = attribute.complex_partial_score
        if complex_partial_score is not None:
            if complex_partial_score.expression is None:
                raise InvalidFeatureError(
                    "Complex partial score has no expression",
                    characteristic=index,
                    attribute=position,
                )

            computed = evaluate_expression(complex_partial_score.expression, context)
            if computed is None:
                logger.debug(
                    f"[Scanner] Partial score of attribute {position} "
                    f"(characteristic {index}) is missing"
                )
                return ScanResult(status=ScanStatus.MISSING_VALUE, attribute_index=position)

            partial_score = computed.as_double()
        else:
            partial_score = attribute.partial_score

        if partial_score is None:
            raise InvalidFeatureError(
                "Attribute has no partial score",
                characteristic=index,
                attribute=position,
            )

        reason_code = attribute.reason_code
        if reason_code is None:
            reason_code = characteristic.reason_code

        return ScanResult(
            status=ScanStatus.MATCHED,
            partial_score=float(partial_score),
            reason_code=reason_code,
            attribute_index=position,
        )

    return NO_MATCH
