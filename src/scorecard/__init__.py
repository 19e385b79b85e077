"""
Scorecard Engine
================

Additive scorecard evaluation with reason-code explanations.

Usage:
    from src.scorecard import build_scorecard, create_evaluator

    scorecard = build_scorecard(definition)
    evaluator = create_evaluator(scorecard)
    result = evaluator.evaluate({"age": 31})
"""

from src.scorecard.context import EvaluationContext, FieldValue
from src.scorecard.errors import (
    ErrorResponse,
    ScorecardError,
    InvalidFeatureError,
    InvalidResultError,
    UnsupportedFeatureError,
)
from src.scorecard.evaluator import (
    EVALUATORS,
    ModelEvaluator,
    ScorecardEvaluator,
    create_evaluator,
)
from src.scorecard.model import (
    Attribute,
    Characteristic,
    ComplexPartialScore,
    MiningFunction,
    ReasonCodeAlgorithm,
    Scorecard,
)
from src.scorecard.predicates import TriState, evaluate_predicate
from src.scorecard.expressions import evaluate_expression
from src.scorecard.reason_codes import ReasonCodePoints, ReasonCodeRanking, build_ranking
from src.scorecard.scanner import ScanResult, ScanStatus, scan_characteristic
from src.scorecard.schema import build_scorecard
from src.scorecard.targets import CastInteger, TargetField
from src.scorecard.outputs import OutputField, ResultFeature

__all__ = [
    # Context
    "EvaluationContext",
    "FieldValue",
    # Errors
    "ErrorResponse",
    "ScorecardError",
    "InvalidFeatureError",
    "InvalidResultError",
    "UnsupportedFeatureError",
    # Evaluation
    "EVALUATORS",
    "ModelEvaluator",
    "ScorecardEvaluator",
    "create_evaluator",
    "ScanResult",
    "ScanStatus",
    "scan_characteristic",
    # Model
    "Attribute",
    "Characteristic",
    "ComplexPartialScore",
    "MiningFunction",
    "ReasonCodeAlgorithm",
    "Scorecard",
    "build_scorecard",
    "TargetField",
    "CastInteger",
    "OutputField",
    "ResultFeature",
    # Collaborators
    "TriState",
    "evaluate_predicate",
    "evaluate_expression",
    # Reason codes
    "ReasonCodePoints",
    "ReasonCodeRanking",
    "build_ranking",
]
