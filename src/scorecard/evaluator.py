"""
Model Evaluators
================

Entry point for scoring an entity against a loaded model.

Evaluation flow (scorecard):
1. Precondition checks (scorable, regression mining function)
2. Characteristic scan in declared order, summing partial scores
3. Reason-code points folded per characteristic (when enabled)
4. Target transform, reason-code ranking, output post-processing

The evaluator for a model is chosen once, when it is created, from a
closed registry keyed by model kind.

Usage:
    evaluator = create_evaluator(scorecard)
    result = evaluator.evaluate({"age": 31, "income": 52000})
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Mapping, Tuple, Type, TypeVar, Union

import pandas as pd

from src.core.config import get_settings
from src.core.monitoring import evaluation_counter, evaluation_duration, track_execution
from src.scorecard.context import EvaluationContext
from src.scorecard.errors import (
    InvalidFeatureError,
    InvalidResultError,
    ScorecardError,
    UnsupportedFeatureError,
)
from src.scorecard.model import MiningFunction, ReasonCodeAlgorithm, Scorecard
from src.scorecard.outputs import post_process_outputs
from src.scorecard.reason_codes import ReasonCodePoints, ReasonCodeRanking, build_ranking
from src.scorecard.scanner import ScanStatus, scan_characteristic
from src.scorecard.targets import apply_target_transform, resolve_default_prediction

logger = logging.getLogger(__name__)

M = TypeVar("M")

Arguments = Union[EvaluationContext, Mapping[str, Any]]


@dataclass(frozen=True)
class EvaluationOutcome:
    """Result map plus whether it is a computed score or the default."""
    result: Dict[str, Any]
    complete: bool

    @property
    def status(self) -> str:
        return "success" if self.complete else "missing_value"


class ModelEvaluator(ABC, Generic[M]):
    """
    Base class for model-kind specific evaluators.

    Args:
        model: Immutable model this evaluator scores against
    """

    def __init__(self, model: M):
        self._model = model

    @property
    def model(self) -> M:
        return self._model

    @property
    @abstractmethod
    def summary(self) -> str:
        """Human-readable model kind."""
        pass

    @abstractmethod
    def evaluate(self, arguments: Arguments) -> Dict[str, Any]:
        """Score one entity."""
        pass

    def evaluate_frame(self, frame: pd.DataFrame) -> pd.DataFrame:
        """
        Score every row of a DataFrame.

        Each row gets its own context. The first failing row aborts the
        batch. Reason-code rankings are split into their numeric value
        and a list column named by ``settings.reason_code_column``.
        """
        reason_code_column = get_settings().reason_code_column

        records: List[Dict[str, Any]] = []
        for row in frame.to_dict(orient="records"):
            flat: Dict[str, Any] = {}
            for name, value in self.evaluate(row).items():
                if isinstance(value, ReasonCodeRanking):
                    flat[name] = value.predicted_value
                    flat[reason_code_column] = value.reason_codes
                else:
                    flat[name] = value
            records.append(flat)

        return pd.DataFrame(records, index=frame.index)


class ScorecardEvaluator(ModelEvaluator[Scorecard]):
    """
    Additive scorecard evaluator with optional reason codes.

    Raises:
        InvalidFeatureError: The scorecard declares no characteristics
    """

    def __init__(self, model: Scorecard):
        super().__init__(model)

        if not model.characteristics:
            raise InvalidFeatureError(
                "Scorecard has no characteristics",
                model=model.model_name,
            )

        settings = get_settings()
        self.target_name = model.target.name if model.target is not None else settings.default_target_name
        self.log_evaluations = settings.log_evaluations

    @property
    def summary(self) -> str:
        return "Scorecard"

    def evaluate(self, arguments: Arguments) -> Dict[str, Any]:
        """
        Score one entity.

        Args:
            arguments: Field values, or a fresh EvaluationContext

        Returns:
            Dict mapping the target name to the prediction (a number, a
            ReasonCodeRanking when reason codes are enabled, or the default
            prediction when a partial score is missing), plus output fields

        Raises:
            InvalidResultError: Model not scorable, or a characteristic
                matched no attribute
            InvalidFeatureError: Malformed characteristic or attribute
            UnsupportedFeatureError: Unsupported mining function or
                reason-code algorithm
        """
        if isinstance(arguments, EvaluationContext):
            context = arguments
        else:
            context = EvaluationContext(arguments)

        outcome = self._evaluate_context(context)

        if self.log_evaluations:
            logger.info(f"[Scorecard] {self.model.model_name}: {outcome.status} -> {outcome.result}")

        return outcome.result

    @track_execution(
        counter=evaluation_counter,
        histogram=evaluation_duration,
        label_fn=lambda self, context: {"model": self.model.model_name},
        status_fn=lambda outcome: outcome.status,
    )
    def _evaluate_context(self, context: EvaluationContext) -> EvaluationOutcome:
        scorecard = self.model
        try:
            if not scorecard.scorable:
                raise InvalidResultError(
                    "Scorecard is not scorable",
                    model=scorecard.model_name,
                )

            if scorecard.mining_function is MiningFunction.REGRESSION:
                predictions, complete = self._evaluate_regression(context)
            else:
                raise UnsupportedFeatureError(
                    f"Mining function {scorecard.mining_function} is not supported",
                    feature=str(scorecard.mining_function),
                    model=scorecard.model_name,
                )

            result = post_process_outputs(predictions, scorecard.output_fields, context)
        except ScorecardError as e:
            logger.warning(f"[Scorecard] {scorecard.model_name}: {e.error_code} - {e.message} {e.details}")
            raise

        return EvaluationOutcome(result=result, complete=complete)

    def _evaluate_regression(self, context: EvaluationContext) -> Tuple[Dict[str, Any], bool]:
        """Return (predictions, complete); complete is False on a missing partial score."""
        scorecard = self.model

        score = scorecard.initial_score
        use_reason_codes = scorecard.use_reason_codes
        points = ReasonCodePoints()

        for index, characteristic in enumerate(scorecard.characteristics):
            baseline_score = characteristic.baseline_score
            if baseline_score is None:
                baseline_score = scorecard.baseline_score

            if use_reason_codes and baseline_score is None:
                raise InvalidFeatureError(
                    "Characteristic has no baseline score",
                    characteristic=index,
                    name=characteristic.name,
                )

            scan = scan_characteristic(characteristic, context, index=index)

            if scan.status is ScanStatus.MISSING_VALUE:
                logger.warning(
                    f"[Scorecard] {scorecard.model_name}: partial score missing in "
                    f"characteristic {index}, returning default prediction"
                )
                return resolve_default_prediction(self.target_name, scorecard.target, context), False

            if scan.status is ScanStatus.NO_MATCH:
                raise InvalidResultError(
                    "No attribute matched",
                    characteristic=index,
                    name=characteristic.name,
                )

            score += scan.partial_score

            if use_reason_codes:
                if scan.reason_code is None:
                    raise InvalidFeatureError(
                        "Matched attribute has no reason code",
                        characteristic=index,
                        attribute=scan.attribute_index,
                    )

                algorithm = scorecard.reason_code_algorithm
                if algorithm is ReasonCodeAlgorithm.POINTS_ABOVE:
                    difference = scan.partial_score - baseline_score
                elif algorithm is ReasonCodeAlgorithm.POINTS_BELOW:
                    difference = baseline_score - scan.partial_score
                else:
                    raise UnsupportedFeatureError(
                        f"Reason code algorithm {algorithm} is not supported",
                        feature=str(algorithm),
                    )

                points = points.add(scan.reason_code, difference)

            logger.debug(
                f"[Scorecard] characteristic {index} matched attribute "
                f"{scan.attribute_index}: {scan.partial_score:+.4f} (score={score:.4f})"
            )

        value = apply_target_transform(scorecard.target, score, context)

        if use_reason_codes:
            value = build_ranking(points, value)

        return {self.target_name: value}, True


# =============================================================================
# DISPATCH
# =============================================================================

EVALUATORS: Dict[Type[Any], Type[ModelEvaluator]] = {
    Scorecard: ScorecardEvaluator,
}


def create_evaluator(model: Any) -> ModelEvaluator:
    """
    Select and build the evaluator for a loaded model.

    Raises:
        UnsupportedFeatureError: No evaluator is registered for the model kind
    """
    evaluator_class = EVALUATORS.get(type(model))
    if evaluator_class is None:
        raise UnsupportedFeatureError(
            f"No evaluator for model type {type(model).__name__}",
            feature=type(model).__name__,
        )

    evaluator = evaluator_class(model)
    logger.info(f"[Evaluator] Created {evaluator.summary} evaluator for {getattr(model, 'model_name', '?')}")
    return evaluator
