"""
Predicate Sub-Language
======================

Boolean conditions guarding scorecard attributes.

Evaluation is three-valued: a predicate that cannot be decided because
an input field is missing yields ``TriState.UNKNOWN`` rather than False.

Supported predicates:
- TruePredicate / FalsePredicate
- SimplePredicate: field <operator> value
- SimpleSetPredicate: field isIn / isNotIn a value set
- CompoundPredicate: and / or / xor / surrogate over nested predicates

Usage:
    predicate = SimplePredicate("age", Operator.LESS_THAN, 25)
    status = evaluate_predicate(predicate, context)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Tuple, Union

from src.scorecard.context import EvaluationContext, FieldValue
from src.scorecard.errors import InvalidFeatureError, UnsupportedFeatureError


class TriState(Enum):
    """Outcome of a predicate: decided true, decided false, or undecidable."""
    TRUE = "true"
    FALSE = "false"
    UNKNOWN = "unknown"

    @classmethod
    def from_bool(cls, value: bool) -> "TriState":
        return cls.TRUE if value else cls.FALSE

    def is_true(self) -> bool:
        return self is TriState.TRUE

    def not_(self) -> "TriState":
        if self is TriState.UNKNOWN:
            return self
        return TriState.FALSE if self is TriState.TRUE else TriState.TRUE

    def and_(self, other: "TriState") -> "TriState":
        if self is TriState.FALSE or other is TriState.FALSE:
            return TriState.FALSE
        if self is TriState.UNKNOWN or other is TriState.UNKNOWN:
            return TriState.UNKNOWN
        return TriState.TRUE

    def or_(self, other: "TriState") -> "TriState":
        if self is TriState.TRUE or other is TriState.TRUE:
            return TriState.TRUE
        if self is TriState.UNKNOWN or other is TriState.UNKNOWN:
            return TriState.UNKNOWN
        return TriState.FALSE

    def xor(self, other: "TriState") -> "TriState":
        if self is TriState.UNKNOWN or other is TriState.UNKNOWN:
            return TriState.UNKNOWN
        return TriState.from_bool(self is not other)


class Operator(Enum):
    """SimplePredicate comparison operators."""
    EQUAL = "equal"
    NOT_EQUAL = "notEqual"
    LESS_THAN = "lessThan"
    LESS_OR_EQUAL = "lessOrEqual"
    GREATER_THAN = "greaterThan"
    GREATER_OR_EQUAL = "greaterOrEqual"
    IS_MISSING = "isMissing"
    IS_NOT_MISSING = "isNotMissing"


class SetOperator(Enum):
    IS_IN = "isIn"
    IS_NOT_IN = "isNotIn"


class BooleanOperator(Enum):
    AND = "and"
    OR = "or"
    XOR = "xor"
    SURROGATE = "surrogate"


def _coerce(field_value: FieldValue, literal: Any) -> Tuple[Any, Any]:
    """Bring a field value and a literal to a comparable pair."""
    if isinstance(literal, bool):
        return bool(field_value.value), literal
    if isinstance(literal, (int, float)):
        return field_value.as_double(), float(literal)
    return str(field_value.value), str(literal)


# =============================================================================
# PREDICATES
# =============================================================================

@dataclass(frozen=True)
class TruePredicate:
    def evaluate(self, context: EvaluationContext) -> TriState:
        return TriState.TRUE


@dataclass(frozen=True)
class FalsePredicate:
    def evaluate(self, context: EvaluationContext) -> TriState:
        return TriState.FALSE


@dataclass(frozen=True)
class SimplePredicate:
    field: str
    operator: Operator
    value: Any = None

    def evaluate(self, context: EvaluationContext) -> TriState:
        field_value = context.get_field_value(self.field)

        if self.operator is Operator.IS_MISSING:
            return TriState.from_bool(field_value is None)
        if self.operator is Operator.IS_NOT_MISSING:
            return TriState.from_bool(field_value is not None)

        if field_value is None:
            return TriState.UNKNOWN
        if self.value is None:
            raise InvalidFeatureError(
                f"Operator '{self.operator.value}' requires a value",
                field=self.field,
            )

        left, right = _coerce(field_value, self.value)
        op = self.operator
        if op is Operator.EQUAL:
            return TriState.from_bool(left == right)
        if op is Operator.NOT_EQUAL:
            return TriState.from_bool(left != right)
        if op is Operator.LESS_THAN:
            return TriState.from_bool(left < right)
        if op is Operator.LESS_OR_EQUAL:
            return TriState.from_bool(left <= right)
        if op is Operator.GREATER_THAN:
            return TriState.from_bool(left > right)
        if op is Operator.GREATER_OR_EQUAL:
            return TriState.from_bool(left >= right)

        raise UnsupportedFeatureError(feature=str(op))


@dataclass(frozen=True)
class SimpleSetPredicate:
    field: str
    operator: SetOperator
    values: Tuple[Any, ...]

    def evaluate(self, context: EvaluationContext) -> TriState:
        field_value = context.get_field_value(self.field)
        if field_value is None:
            return TriState.UNKNOWN

        found = any(
            left == right
            for left, right in (_coerce(field_value, v) for v in self.values)
        )
        if self.operator is SetOperator.IS_IN:
            return TriState.from_bool(found)
        return TriState.from_bool(not found)


@dataclass(frozen=True)
class CompoundPredicate:
    boolean_operator: BooleanOperator
    predicates: Tuple["Predicate", ...]

    def evaluate(self, context: EvaluationContext) -> TriState:
        if len(self.predicates) < 2:
            raise InvalidFeatureError(
                "Compound predicate needs at least two operands",
                boolean_operator=self.boolean_operator.value,
            )

        if self.boolean_operator is BooleanOperator.SURROGATE:
            # First operand that can be decided
            for predicate in self.predicates:
                status = evaluate_predicate(predicate, context)
                if status is not TriState.UNKNOWN:
                    return status
            return TriState.UNKNOWN

        result = evaluate_predicate(self.predicates[0], context)
        for predicate in self.predicates[1:]:
            if self.boolean_operator is BooleanOperator.AND:
                if result is TriState.FALSE:
                    return result
                result = result.and_(evaluate_predicate(predicate, context))
            elif self.boolean_operator is BooleanOperator.OR:
                if result is TriState.TRUE:
                    return result
                result = result.or_(evaluate_predicate(predicate, context))
            else:
                result = result.xor(evaluate_predicate(predicate, context))
        return result


Predicate = Union[
    TruePredicate,
    FalsePredicate,
    SimplePredicate,
    SimpleSetPredicate,
    CompoundPredicate,
]


def evaluate_predicate(predicate: Predicate, context: EvaluationContext) -> TriState:
    """Evaluate any predicate against the call context."""
    return predicate.evaluate(context)
