"""
Scorecard Definition Schema
===========================

Pydantic models that validate a nested mapping describing a scorecard
and convert it into the immutable model objects.

Load-time checks:
- at least one characteristic, each with at least one attribute
- every attribute has a predicate and a literal or derived partial score
- predicate and expression nodes carry the fields their type requires

Usage:
    scorecard = build_scorecard({
        "model_name": "credit_v1",
        "baseline_score": 10,
        "reason_code_algorithm": "pointsAbove",
        "characteristics": [...],
    })
"""

import logging
from typing import Any, Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from src.scorecard.errors import InvalidFeatureError
from src.scorecard.expressions import Apply, Constant, Expression, FieldRef
from src.scorecard.model import (
    Attribute,
    Characteristic,
    ComplexPartialScore,
    MiningFunction,
    ReasonCodeAlgorithm,
    Scorecard,
)
from src.scorecard.outputs import OutputField, ResultFeature
from src.scorecard.predicates import (
    BooleanOperator,
    CompoundPredicate,
    FalsePredicate,
    Operator,
    Predicate,
    SetOperator,
    SimplePredicate,
    SimpleSetPredicate,
    TruePredicate,
)
from src.scorecard.targets import CastInteger, TargetField

logger = logging.getLogger(__name__)


class PredicateSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Literal["true", "false", "simple", "simpleSet", "compound"]
    field: Optional[str] = None
    operator: Optional[Operator] = None
    value: Any = None
    set_operator: SetOperator = SetOperator.IS_IN
    values: Optional[List[Any]] = None
    boolean_operator: Optional[BooleanOperator] = None
    predicates: Optional[List["PredicateSchema"]] = None

    @model_validator(mode="after")
    def check_shape(self) -> "PredicateSchema":
        if self.type == "simple":
            if not self.field or self.operator is None:
                raise ValueError("simple predicate needs 'field' and 'operator'")
            if self.operator not in (Operator.IS_MISSING, Operator.IS_NOT_MISSING) and self.value is None:
                raise ValueError(f"operator '{self.operator.value}' needs a 'value'")
        elif self.type == "simpleSet":
            if not self.field or self.values is None:
                raise ValueError("simpleSet predicate needs 'field' and 'values'")
        elif self.type == "compound":
            if self.boolean_operator is None or not self.predicates or len(self.predicates) < 2:
                raise ValueError("compound predicate needs 'boolean_operator' and two or more 'predicates'")
        return self

    def to_predicate(self) -> Predicate:
        if self.type == "true":
            return TruePredicate()
        if self.type == "false":
            return FalsePredicate()
        if self.type == "simple":
            return SimplePredicate(self.field, self.operator, self.value)
        if self.type == "simpleSet":
            return SimpleSetPredicate(self.field, self.set_operator, tuple(self.values))
        return CompoundPredicate(
            self.boolean_operator,
            tuple(p.to_predicate() for p in self.predicates),
        )


class ExpressionSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Literal["constant", "field", "apply"]
    value: Any = None
    field: Optional[str] = None
    function: Optional[str] = None
    arguments: List["ExpressionSchema"] = Field(default_factory=list)
    map_missing_to: Any = None

    @model_validator(mode="after")
    def check_shape(self) -> "ExpressionSchema":
        if self.type == "field" and not self.field:
            raise ValueError("field expression needs 'field'")
        if self.type == "apply" and not self.function:
            raise ValueError("apply expression needs 'function'")
        return self

    def to_expression(self) -> Expression:
        if self.type == "constant":
            return Constant(self.value)
        if self.type == "field":
            return FieldRef(self.field, self.map_missing_to)
        return Apply(
            self.function,
            tuple(a.to_expression() for a in self.arguments),
            self.map_missing_to,
        )


class AttributeSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    predicate: PredicateSchema
    partial_score: Optional[float] = None
    complex_partial_score: Optional[ExpressionSchema] = None
    reason_code: Optional[str] = None

    @model_validator(mode="after")
    def check_score_source(self) -> "AttributeSchema":
        if self.partial_score is None and self.complex_partial_score is None:
            raise ValueError("attribute needs 'partial_score' or 'complex_partial_score'")
        return self

    def to_attribute(self) -> Attribute:
        complex_partial_score = None
        if self.complex_partial_score is not None:
            complex_partial_score = ComplexPartialScore(self.complex_partial_score.to_expression())
        return Attribute(
            predicate=self.predicate.to_predicate(),
            partial_score=self.partial_score,
            complex_partial_score=complex_partial_score,
            reason_code=self.reason_code,
        )


class CharacteristicSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    reason_code: Optional[str] = None
    baseline_score: Optional[float] = None
    attributes: List[AttributeSchema] = Field(min_length=1)

    def to_characteristic(self) -> Characteristic:
        return Characteristic(
            attributes=tuple(a.to_attribute() for a in self.attributes),
            name=self.name,
            reason_code=self.reason_code,
            baseline_score=self.baseline_score,
        )


class TargetSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    min: Optional[float] = None
    max: Optional[float] = None
    rescale_factor: float = 1.0
    rescale_constant: float = 0.0
    cast_integer: Optional[CastInteger] = None
    default_value: Optional[float] = None

    def to_target(self) -> TargetField:
        return TargetField(**self.model_dump())


class OutputFieldSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    feature: ResultFeature = ResultFeature.PREDICTED_VALUE
    rank: int = Field(default=1, ge=1)
    target_field: Optional[str] = None

    def to_output_field(self) -> OutputField:
        return OutputField(**self.model_dump())


class ScorecardSchema(BaseModel):
    model_config = ConfigDict(extra="forbid", protected_namespaces=())

    model_name: str = "scorecard"
    initial_score: float = 0.0
    use_reason_codes: bool = True
    reason_code_algorithm: ReasonCodeAlgorithm = ReasonCodeAlgorithm.POINTS_BELOW
    baseline_score: Optional[float] = None
    scorable: bool = True
    mining_function: MiningFunction = MiningFunction.REGRESSION
    target: Optional[TargetSchema] = None
    output_fields: List[OutputFieldSchema] = Field(default_factory=list)
    characteristics: List[CharacteristicSchema] = Field(min_length=1)

    def to_model(self) -> Scorecard:
        return Scorecard(
            characteristics=tuple(c.to_characteristic() for c in self.characteristics),
            model_name=self.model_name,
            initial_score=self.initial_score,
            use_reason_codes=self.use_reason_codes,
            reason_code_algorithm=self.reason_code_algorithm,
            baseline_score=self.baseline_score,
            scorable=self.scorable,
            mining_function=self.mining_function,
            target=self.target.to_target() if self.target is not None else None,
            output_fields=tuple(o.to_output_field() for o in self.output_fields),
        )


def build_scorecard(definition: Mapping[str, Any]) -> Scorecard:
    """
    Validate a scorecard definition and build the immutable model.

    Raises:
        InvalidFeatureError: The definition is structurally invalid
    """
    try:
        schema = ScorecardSchema.model_validate(dict(definition))
    except ValidationError as e:
        errors: List[Dict[str, Any]] = [
            {"loc": ".".join(str(part) for part in err["loc"]), "msg": err["msg"]}
            for err in e.errors()
        ]
        raise InvalidFeatureError("Invalid scorecard definition", errors=errors) from e

    scorecard = schema.to_model()
    logger.info(
        f"[Schema] Built scorecard '{scorecard.model_name}' with "
        f"{len(scorecard.characteristics)} characteristics"
    )
    return scorecard
