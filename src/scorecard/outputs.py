"""
Output Post-Processing
======================

Derives declared output fields from the raw prediction map.

Supported output features:
- predictedValue: the numeric prediction (unwrapped from a reason-code ranking)
- reasonCode: the reason code at a 1-based rank, ordered by descending points
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence

from src.scorecard.context import EvaluationContext
from src.scorecard.errors import InvalidFeatureError
from src.scorecard.reason_codes import ReasonCodeRanking


class ResultFeature(Enum):
    PREDICTED_VALUE = "predictedValue"
    REASON_CODE = "reasonCode"


@dataclass(frozen=True)
class OutputField:
    name: str
    feature: ResultFeature = ResultFeature.PREDICTED_VALUE
    rank: int = 1
    target_field: Optional[str] = None


def unwrap_prediction(value: Any) -> Any:
    """Numeric part of a prediction."""
    if isinstance(value, ReasonCodeRanking):
        return value.predicted_value
    return value


def post_process_outputs(
    predictions: Mapping[str, Any],
    output_fields: Sequence[OutputField],
    context: EvaluationContext,
) -> Dict[str, Any]:
    """
    Append output field values to the prediction map.

    Args:
        predictions: Target name -> prediction (number, ranking or None)
        output_fields: Declared output fields, evaluated in order
        context: Call context

    Returns:
        New dict holding the predictions followed by the output fields
    """
    result: Dict[str, Any] = dict(predictions)

    for output_field in output_fields:
        if output_field.target_field is not None:
            if output_field.target_field not in predictions:
                raise InvalidFeatureError(
                    f"Output field '{output_field.name}' refers to unknown target",
                    output_field=output_field.name,
                    target_field=output_field.target_field,
                )
            prediction = predictions[output_field.target_field]
        else:
            prediction = next(iter(predictions.values()), None)

        if output_field.feature is ResultFeature.PREDICTED_VALUE:
            result[output_field.name] = unwrap_prediction(prediction)
        elif output_field.feature is ResultFeature.REASON_CODE:
            if isinstance(prediction, ReasonCodeRanking):
                result[output_field.name] = prediction.get_reason_code(output_field.rank)
            else:
                result[output_field.name] = None
        else:
            raise InvalidFeatureError(
                f"Unknown output feature for '{output_field.name}'",
                output_field=output_field.name,
            )

    return result
