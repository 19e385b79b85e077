"""
Scorecard Model
===============

Immutable description of an additive scorecard.

A scorecard is built once (see ``schema.build_scorecard``) and shared by
any number of concurrent evaluations; nothing here is mutated after
construction.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from src.scorecard.expressions import Expression
from src.scorecard.outputs import OutputField
from src.scorecard.predicates import Predicate
from src.scorecard.targets import TargetField


class MiningFunction(Enum):
    """Declared scoring mode. Only REGRESSION is evaluated."""
    REGRESSION = "regression"
    CLASSIFICATION = "classification"
    CLUSTERING = "clustering"
    ASSOCIATION_RULES = "associationRules"
    SEQUENCES = "sequences"
    TIME_SERIES = "timeSeries"
    MIXED = "mixed"


class ReasonCodeAlgorithm(Enum):
    POINTS_ABOVE = "pointsAbove"
    POINTS_BELOW = "pointsBelow"


@dataclass(frozen=True)
class ComplexPartialScore:
    expression: Optional[Expression] = None


@dataclass(frozen=True)
class Attribute:
    """One predicate-guarded alternative within a characteristic."""
    predicate: Optional[Predicate] = None
    partial_score: Optional[float] = None
    complex_partial_score: Optional[ComplexPartialScore] = None
    reason_code: Optional[str] = None


@dataclass(frozen=True)
class Characteristic:
    """Mutually exclusive attributes, scanned in declared order."""
    attributes: Tuple[Attribute, ...]
    name: Optional[str] = None
    reason_code: Optional[str] = None
    baseline_score: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, "attributes", tuple(self.attributes))


@dataclass(frozen=True)
class Scorecard:
    characteristics: Tuple[Characteristic, ...]
    model_name: str = "scorecard"
    initial_score: float = 0.0
    use_reason_codes: bool = True
    reason_code_algorithm: ReasonCodeAlgorithm = ReasonCodeAlgorithm.POINTS_BELOW
    baseline_score: Optional[float] = None
    scorable: bool = True
    mining_function: MiningFunction = MiningFunction.REGRESSION
    target: Optional[TargetField] = None
    output_fields: Tuple[OutputField, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "characteristics", tuple(self.characteristics))
        object.__setattr__(self, "output_fields", tuple(self.output_fields))
