"""
Derived Expressions
===================

Arithmetic expressions used as complex partial scores.

An expression evaluates to a ``FieldValue`` or to ``None`` when its
value cannot be computed (a referenced field is missing, a division by
zero, or a math domain error). Callers treat ``None`` as "missing".

Usage:
    expr = Apply("*", (FieldRef("income"), Constant(0.01)))
    value = evaluate_expression(expr, context)
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Union

import numpy as np

from src.scorecard.context import EvaluationContext, FieldValue, is_missing
from src.scorecard.errors import InvalidFeatureError, UnsupportedFeatureError


@dataclass(frozen=True)
class Constant:
    value: Any

    def evaluate(self, context: EvaluationContext) -> Optional[FieldValue]:
        if is_missing(self.value):
            return None
        return FieldValue(self.value)


@dataclass(frozen=True)
class FieldRef:
    field: str
    map_missing_to: Any = None

    def evaluate(self, context: EvaluationContext) -> Optional[FieldValue]:
        value = context.get_field_value(self.field)
        if value is None and self.map_missing_to is not None:
            return FieldValue(self.map_missing_to)
        return value


def _reduce(func: Callable[[np.ndarray], Any]) -> Callable[[Sequence[float]], float]:
    def apply(values: Sequence[float]) -> float:
        if not values:
            raise InvalidFeatureError("Aggregate function needs at least one argument")
        return func(np.asarray(values, dtype=float))
    return apply


def _binary(func: Callable[[float, float], float]) -> Callable[[Sequence[float]], float]:
    def apply(values: Sequence[float]) -> float:
        if len(values) != 2:
            raise InvalidFeatureError(f"Binary function got {len(values)} arguments")
        return func(values[0], values[1])
    return apply


def _unary(func: Callable[[float], float]) -> Callable[[Sequence[float]], float]:
    def apply(values: Sequence[float]) -> float:
        if len(values) != 1:
            raise InvalidFeatureError(f"Unary function got {len(values)} arguments")
        return func(values[0])
    return apply


def round_half_away(value: float) -> float:
    """Round to the nearest integer, halves away from zero."""
    return float(np.sign(value) * np.floor(abs(value) + 0.5))


def _divide(left: float, right: float) -> float:
    if right == 0:
        return float("nan")
    return left / right


FUNCTIONS: Dict[str, Callable[[Sequence[float]], float]] = {
    "+": _binary(lambda a, b: a + b),
    "-": _binary(lambda a, b: a - b),
    "*": _binary(lambda a, b: a * b),
    "/": _binary(_divide),
    "pow": _binary(np.power),
    "min": _reduce(np.min),
    "max": _reduce(np.max),
    "sum": _reduce(np.sum),
    "avg": _reduce(np.mean),
    "abs": _unary(np.abs),
    "ln": _unary(np.log),
    "exp": _unary(np.exp),
    "sqrt": _unary(np.sqrt),
    "round": _unary(round_half_away),
    "floor": _unary(np.floor),
    "ceil": _unary(np.ceil),
}


@dataclass(frozen=True)
class Apply:
    function: str
    arguments: Tuple["Expression", ...]
    map_missing_to: Any = None

    def evaluate(self, context: EvaluationContext) -> Optional[FieldValue]:
        func = FUNCTIONS.get(self.function)
        if func is None:
            raise UnsupportedFeatureError(
                f"Function '{self.function}' is not supported",
                feature=self.function,
            )

        values = []
        for argument in self.arguments:
            value = evaluate_expression(argument, context)
            if value is None:
                return self._missing()
            values.append(value.as_double())

        with np.errstate(all="ignore"):
            result = float(func(values))

        if np.isnan(result) or np.isinf(result):
            return self._missing()
        return FieldValue(result)

    def _missing(self) -> Optional[FieldValue]:
        if self.map_missing_to is not None:
            return FieldValue(self.map_missing_to)
        return None


Expression = Union[Constant, FieldRef, Apply]


def evaluate_expression(expression: Expression, context: EvaluationContext) -> Optional[FieldValue]:
    """Evaluate an expression; None means the value is missing."""
    return expression.evaluate(context)
