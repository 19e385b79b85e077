"""
Unit tests for scorecard.evaluator module.

Tests cover:
- Additive scoring with and without reason codes
- Baseline and reason-code precedence
- Fail-fast structural and result errors
- Missing-value fallback to the default prediction
- Evaluator dispatch and batch (DataFrame) evaluation
"""

import itertools
from unittest.mock import MagicMock

import pandas as pd
import pytest

from conftest import always, never
from src.scorecard.context import EvaluationContext
from src.scorecard.errors import (
    InvalidFeatureError,
    InvalidResultError,
    UnsupportedFeatureError,
)
from src.scorecard.evaluator import ScorecardEvaluator, create_evaluator
from src.scorecard.expressions import FieldRef
from src.scorecard.model import (
    Attribute,
    Characteristic,
    ComplexPartialScore,
    MiningFunction,
    ReasonCodeAlgorithm,
    Scorecard,
)
from src.scorecard.predicates import TriState, TruePredicate
from src.scorecard.reason_codes import ReasonCodeRanking
from src.scorecard.targets import TargetField


def spy_predicate(status: TriState) -> MagicMock:
    predicate = MagicMock()
    predicate.evaluate.return_value = status
    return predicate


class TestAdditiveScoring:
    """Scores without reason codes."""

    def test_partial_scores_are_summed(self, simple_scorecard):
        result = ScorecardEvaluator(simple_scorecard).evaluate({})

        assert result == {"score": 20.0}

    def test_initial_score_is_included(self):
        scorecard = Scorecard(
            characteristics=(Characteristic(attributes=(always(5.0),)),),
            initial_score=100.0,
            use_reason_codes=False,
        )

        assert ScorecardEvaluator(scorecard).evaluate({})["score"] == 105.0

    def test_target_name_and_transform(self):
        scorecard = Scorecard(
            characteristics=(Characteristic(attributes=(always(7.4),)),),
            use_reason_codes=False,
            target=TargetField(name="points", rescale_factor=10.0, max=5.0),
        )

        result = ScorecardEvaluator(scorecard).evaluate({})

        assert result == {"points": 50.0}

    def test_first_true_attribute_wins(self):
        first = spy_predicate(TriState.FALSE)
        second = spy_predicate(TriState.TRUE)
        third = spy_predicate(TriState.TRUE)
        scorecard = Scorecard(
            characteristics=(
                Characteristic(attributes=(
                    Attribute(predicate=first, partial_score=1.0),
                    Attribute(predicate=second, partial_score=2.0),
                    Attribute(predicate=third, partial_score=3.0),
                )),
            ),
            use_reason_codes=False,
        )

        result = ScorecardEvaluator(scorecard).evaluate({})

        assert result["score"] == 2.0
        third.evaluate.assert_not_called()

    def test_unknown_predicate_is_skipped(self):
        scorecard = Scorecard(
            characteristics=(
                Characteristic(attributes=(
                    Attribute(predicate=spy_predicate(TriState.UNKNOWN), partial_score=1.0),
                    always(4.0),
                )),
            ),
            use_reason_codes=False,
        )

        assert ScorecardEvaluator(scorecard).evaluate({})["score"] == 4.0

    def test_total_score_is_order_independent(self):
        characteristics = [
            Characteristic(attributes=(always(1.5),)),
            Characteristic(attributes=(always(-4.0),)),
            Characteristic(attributes=(always(12.25),)),
        ]

        scores = {
            ScorecardEvaluator(
                Scorecard(characteristics=tuple(order), use_reason_codes=False)
            ).evaluate({})["score"]
            for order in itertools.permutations(characteristics)
        }

        assert scores == {9.75}

    def test_repeated_evaluation_is_deterministic(self, reason_code_scorecard):
        evaluator = ScorecardEvaluator(reason_code_scorecard)

        results = [evaluator.evaluate({}) for _ in range(5)]

        assert all(r == results[0] for r in results)

    def test_accepts_explicit_context(self, simple_scorecard):
        context = EvaluationContext({"unused": 1})

        assert ScorecardEvaluator(simple_scorecard).evaluate(context) == {"score": 20.0}


class TestReasonCodes:
    """Scores with reason-code explanations."""

    def test_zero_sum_reason_code_is_kept(self, reason_code_scorecard):
        result = ScorecardEvaluator(reason_code_scorecard).evaluate({})

        ranking = result["score"]
        assert isinstance(ranking, ReasonCodeRanking)
        assert ranking.predicted_value == 20.0
        assert ranking.entries == (("R1", 0.0),)

    def test_negative_reason_code_is_dropped(self):
        scorecard = Scorecard(
            characteristics=(
                Characteristic(attributes=(always(15.0, "R1"),)),
                Characteristic(attributes=(always(2.0, "R2"),)),
            ),
            reason_code_algorithm=ReasonCodeAlgorithm.POINTS_ABOVE,
            baseline_score=10.0,
        )

        ranking = ScorecardEvaluator(scorecard).evaluate({})["score"]

        assert ranking.predicted_value == 17.0
        assert ranking.entries == (("R1", 5.0),)

    def test_nan_partial_score_keeps_reason_code(self):
        scorecard = Scorecard(
            characteristics=(Characteristic(attributes=(always(float("nan"), "R1"),)),),
            reason_code_algorithm=ReasonCodeAlgorithm.POINTS_ABOVE,
            baseline_score=10.0,
        )

        ranking = ScorecardEvaluator(scorecard).evaluate({})["score"]

        assert ranking.reason_codes == ["R1"]

    def test_points_below(self):
        scorecard = Scorecard(
            characteristics=(Characteristic(attributes=(always(4.0, "LOW"),)),),
            reason_code_algorithm=ReasonCodeAlgorithm.POINTS_BELOW,
            baseline_score=10.0,
        )

        ranking = ScorecardEvaluator(scorecard).evaluate({})["score"]

        assert ranking.entries == (("LOW", 6.0),)

    def test_characteristic_baseline_overrides_model_baseline(self):
        scorecard = Scorecard(
            characteristics=(
                Characteristic(attributes=(always(15.0, "R1"),), baseline_score=12.0),
            ),
            reason_code_algorithm=ReasonCodeAlgorithm.POINTS_ABOVE,
            baseline_score=10.0,
        )

        ranking = ScorecardEvaluator(scorecard).evaluate({})["score"]

        assert ranking.entries == (("R1", 3.0),)

    def test_attribute_reason_code_overrides_characteristic(self):
        scorecard = Scorecard(
            characteristics=(
                Characteristic(attributes=(always(15.0, "ATTR"),), reason_code="CHAR"),
                Characteristic(attributes=(always(11.0),), reason_code="CHAR"),
            ),
            reason_code_algorithm=ReasonCodeAlgorithm.POINTS_ABOVE,
            baseline_score=10.0,
        )

        ranking = ScorecardEvaluator(scorecard).evaluate({})["score"]

        assert ranking.entries == (("ATTR", 5.0), ("CHAR", 1.0))

    def test_reason_codes_keep_first_seen_order(self):
        scorecard = Scorecard(
            characteristics=(
                Characteristic(attributes=(always(11.0, "SMALL"),)),
                Characteristic(attributes=(always(30.0, "BIG"),)),
                Characteristic(attributes=(always(12.0, "SMALL"),)),
            ),
            reason_code_algorithm=ReasonCodeAlgorithm.POINTS_ABOVE,
            baseline_score=10.0,
        )

        ranking = ScorecardEvaluator(scorecard).evaluate({})["score"]

        assert ranking.reason_codes == ["SMALL", "BIG"]
        assert ranking.ranked() == [("BIG", 20.0), ("SMALL", 3.0)]

    def test_missing_baseline_fails_before_later_characteristics(self):
        later = spy_predicate(TriState.TRUE)
        scorecard = Scorecard(
            characteristics=(
                Characteristic(attributes=(always(15.0, "R1"),)),
                Characteristic(attributes=(Attribute(predicate=later, partial_score=1.0, reason_code="R2"),)),
            ),
            reason_code_algorithm=ReasonCodeAlgorithm.POINTS_ABOVE,
        )

        with pytest.raises(InvalidFeatureError) as exc_info:
            ScorecardEvaluator(scorecard).evaluate({})

        assert exc_info.value.details["characteristic"] == 0
        later.evaluate.assert_not_called()

    def test_missing_reason_code_fails(self):
        scorecard = Scorecard(
            characteristics=(Characteristic(attributes=(always(15.0),)),),
            baseline_score=10.0,
        )

        with pytest.raises(InvalidFeatureError, match="reason code"):
            ScorecardEvaluator(scorecard).evaluate({})

    def test_missing_baseline_is_fine_without_reason_codes(self):
        scorecard = Scorecard(
            characteristics=(Characteristic(attributes=(always(15.0),)),),
            use_reason_codes=False,
        )

        assert ScorecardEvaluator(scorecard).evaluate({}) == {"score": 15.0}

    def test_unsupported_algorithm(self):
        scorecard = Scorecard(
            characteristics=(Characteristic(attributes=(always(15.0, "R1"),)),),
            reason_code_algorithm="pointsSideways",
            baseline_score=10.0,
        )

        with pytest.raises(UnsupportedFeatureError):
            ScorecardEvaluator(scorecard).evaluate({})


class TestFailures:
    """Fail-fast error handling."""

    def test_no_matching_attribute_invalidates_result(self):
        scorecard = Scorecard(
            characteristics=(
                Characteristic(attributes=(always(15.0),)),
                Characteristic(attributes=(never(), never())),
            ),
            use_reason_codes=False,
        )

        with pytest.raises(InvalidResultError) as exc_info:
            ScorecardEvaluator(scorecard).evaluate({})

        assert exc_info.value.error_code == "INVALID_RESULT"
        assert exc_info.value.details["characteristic"] == 1

    def test_not_scorable(self, simple_scorecard):
        scorecard = Scorecard(
            characteristics=simple_scorecard.characteristics,
            use_reason_codes=False,
            scorable=False,
        )

        with pytest.raises(InvalidResultError, match="not scorable"):
            ScorecardEvaluator(scorecard).evaluate({})

    def test_unsupported_mining_function(self, simple_scorecard):
        scorecard = Scorecard(
            characteristics=simple_scorecard.characteristics,
            use_reason_codes=False,
            mining_function=MiningFunction.CLASSIFICATION,
        )

        with pytest.raises(UnsupportedFeatureError) as exc_info:
            ScorecardEvaluator(scorecard).evaluate({})

        assert exc_info.value.error_code == "UNSUPPORTED_FEATURE"

    def test_empty_characteristics_rejected_at_construction(self):
        with pytest.raises(InvalidFeatureError):
            ScorecardEvaluator(Scorecard(characteristics=()))

    def test_error_response(self):
        scorecard = Scorecard(
            characteristics=(Characteristic(attributes=(never(),)),),
            use_reason_codes=False,
        )

        with pytest.raises(InvalidResultError) as exc_info:
            ScorecardEvaluator(scorecard).evaluate({})

        response = exc_info.value.to_response()
        assert response.error == "InvalidResultError"
        assert response.error_code == "INVALID_RESULT"
        assert response.details["characteristic"] == 0


class TestMissingValue:
    """Missing derived partial scores."""

    @pytest.fixture
    def derived_scorecard(self):
        derived = Attribute(
            predicate=TruePredicate(),
            complex_partial_score=ComplexPartialScore(FieldRef("bonus")),
            reason_code="BONUS",
        )
        return Scorecard(
            characteristics=(
                Characteristic(attributes=(always(15.0, "R1"),)),
                Characteristic(attributes=(derived, always(99.0, "R9"))),
                Characteristic(attributes=(never(),)),
            ),
            reason_code_algorithm=ReasonCodeAlgorithm.POINTS_ABOVE,
            baseline_score=10.0,
            target=TargetField(name="score", default_value=-1.0),
        )

    def test_missing_partial_score_returns_default(self, derived_scorecard):
        result = ScorecardEvaluator(derived_scorecard).evaluate({})

        # The unmatched third characteristic is never reached
        assert result == {"score": -1.0}

    def test_default_is_none_without_target_default(self):
        derived = Attribute(
            predicate=TruePredicate(),
            complex_partial_score=ComplexPartialScore(FieldRef("bonus")),
        )
        scorecard = Scorecard(
            characteristics=(Characteristic(attributes=(derived,)),),
            use_reason_codes=False,
        )

        assert ScorecardEvaluator(scorecard).evaluate({}) == {"score": None}

    def test_present_value_is_scored(self, derived_scorecard):
        scorecard = Scorecard(
            characteristics=derived_scorecard.characteristics[:2],
            reason_code_algorithm=ReasonCodeAlgorithm.POINTS_ABOVE,
            baseline_score=10.0,
        )

        ranking = ScorecardEvaluator(scorecard).evaluate({"bonus": 12})["score"]

        assert ranking.predicted_value == 27.0
        assert ranking.entries == (("R1", 5.0), ("BONUS", 2.0))


class TestDispatch:
    """Evaluator selection by model kind."""

    def test_create_evaluator_for_scorecard(self, simple_scorecard):
        evaluator = create_evaluator(simple_scorecard)

        assert isinstance(evaluator, ScorecardEvaluator)
        assert evaluator.summary == "Scorecard"
        assert evaluator.model is simple_scorecard

    def test_unknown_model_kind(self):
        with pytest.raises(UnsupportedFeatureError):
            create_evaluator(object())


class TestEvaluateFrame:
    """Batch evaluation over a DataFrame."""

    def test_rows_scored_independently(self, age_income_definition):
        from src.scorecard.schema import build_scorecard

        evaluator = create_evaluator(build_scorecard(age_income_definition))
        frame = pd.DataFrame(
            {"age": [22, 30], "income": [20000.0, None]},
            index=["a", "b"],
        )

        result = evaluator.evaluate_frame(frame)

        assert list(result.index) == ["a", "b"]
        assert result.loc["a", "credit_score"] == 115.0
        assert result.loc["a", "reason_codes"] == ["AGE", "INC"]
        assert result.loc["b", "credit_score"] == 125.0
        assert result.loc["b", "reason_codes"] == ["INC_MISSING"]
        assert result.loc["b", "reason_1"] == "INC_MISSING"

    def test_plain_scores(self, simple_scorecard):
        frame = pd.DataFrame({"x": [1, 2, 3]})

        result = create_evaluator(simple_scorecard).evaluate_frame(frame)

        assert list(result["score"]) == [20.0, 20.0, 20.0]
        assert "reason_codes" not in result.columns
