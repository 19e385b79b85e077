"""
Target Value Handling
=====================

Turns a raw additive score into the externally visible prediction.

The transform is applied in a fixed order:
1. clamp to [min, max] when bounds are declared
2. rescale: value * rescale_factor + rescale_constant
3. optional integer cast (round / ceiling / floor)

``resolve_default_prediction`` supplies the prediction used when a
score cannot be computed because input data is missing.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

import numpy as np

from src.scorecard.context import EvaluationContext
from src.scorecard.expressions import round_half_away


class CastInteger(Enum):
    ROUND = "round"
    CEILING = "ceiling"
    FLOOR = "floor"


@dataclass(frozen=True)
class TargetField:
    """Declared target of a regression-style model."""
    name: str
    min: Optional[float] = None
    max: Optional[float] = None
    rescale_factor: float = 1.0
    rescale_constant: float = 0.0
    cast_integer: Optional[CastInteger] = None
    default_value: Optional[float] = None


def apply_target_transform(
    target: Optional[TargetField],
    raw_score: float,
    context: EvaluationContext,
) -> Union[int, float]:
    """Apply the target's bounds, rescaling and casting to a raw score."""
    if target is None:
        return raw_score

    value = raw_score
    if target.min is not None:
        value = max(value, target.min)
    if target.max is not None:
        value = min(value, target.max)

    value = value * target.rescale_factor + target.rescale_constant

    if target.cast_integer is CastInteger.ROUND:
        return int(round_half_away(value))
    if target.cast_integer is CastInteger.CEILING:
        return int(np.ceil(value))
    if target.cast_integer is CastInteger.FLOOR:
        return int(np.floor(value))
    return value


def resolve_default_prediction(
    target_name: str,
    target: Optional[TargetField],
    context: EvaluationContext,
) -> Dict[str, Any]:
    """Prediction map used when the score cannot be computed."""
    default = target.default_value if target is not None else None
    return {target_name: default}
