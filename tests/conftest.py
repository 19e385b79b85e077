"""
Shared test fixtures for the scorecard engine.
"""

import os
import sys

import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.scorecard.model import (
    Attribute,
    Characteristic,
    ReasonCodeAlgorithm,
    Scorecard,
)
from src.scorecard.predicates import FalsePredicate, TruePredicate


# =============================================================================
# MODEL BUILDERS
# =============================================================================

def always(partial_score, reason_code=None):
    """Attribute whose predicate is always true."""
    return Attribute(predicate=TruePredicate(), partial_score=partial_score, reason_code=reason_code)


def never(partial_score=0.0, reason_code=None):
    """Attribute whose predicate is always false."""
    return Attribute(predicate=FalsePredicate(), partial_score=partial_score, reason_code=reason_code)


# =============================================================================
# SCORECARD FIXTURES
# =============================================================================

@pytest.fixture
def simple_scorecard():
    """Two characteristics scoring 15 and 5, no reason codes."""
    return Scorecard(
        characteristics=(
            Characteristic(attributes=(always(15.0),), name="A"),
            Characteristic(attributes=(always(5.0),), name="B"),
        ),
        model_name="simple",
        initial_score=0.0,
        use_reason_codes=False,
    )


@pytest.fixture
def reason_code_scorecard():
    """Points-above scorecard with a model baseline of 10."""
    return Scorecard(
        characteristics=(
            Characteristic(attributes=(always(15.0, "R1"),), name="A"),
            Characteristic(attributes=(always(5.0, "R1"),), name="B"),
        ),
        model_name="reasons",
        use_reason_codes=True,
        reason_code_algorithm=ReasonCodeAlgorithm.POINTS_ABOVE,
        baseline_score=10.0,
    )


@pytest.fixture
def age_income_definition():
    """Credit-style scorecard definition as a plain mapping."""
    return {
        "model_name": "credit_v1",
        "initial_score": 100,
        "use_reason_codes": True,
        "reason_code_algorithm": "pointsBelow",
        "baseline_score": 20,
        "target": {"name": "credit_score", "min": 0, "max": 400},
        "output_fields": [
            {"name": "final_score", "feature": "predictedValue"},
            {"name": "reason_1", "feature": "reasonCode", "rank": 1},
            {"name": "reason_2", "feature": "reasonCode", "rank": 2},
        ],
        "characteristics": [
            {
                "name": "age",
                "reason_code": "AGE",
                "attributes": [
                    {
                        "predicate": {"type": "simple", "field": "age", "operator": "lessThan", "value": 25},
                        "partial_score": 5,
                    },
                    {
                        "predicate": {"type": "simple", "field": "age", "operator": "lessThan", "value": 50},
                        "partial_score": 25,
                    },
                    {"predicate": {"type": "true"}, "partial_score": 30},
                ],
            },
            {
                "name": "income",
                "reason_code": "INC",
                "baseline_score": 15,
                "attributes": [
                    {
                        "predicate": {"type": "simple", "field": "income", "operator": "isMissing"},
                        "partial_score": 0,
                        "reason_code": "INC_MISSING",
                    },
                    {
                        "predicate": {"type": "simple", "field": "income", "operator": "greaterOrEqual", "value": 50000},
                        "complex_partial_score": {
                            "type": "apply",
                            "function": "min",
                            "arguments": [
                                {"type": "constant", "value": 40},
                                {
                                    "type": "apply",
                                    "function": "/",
                                    "arguments": [
                                        {"type": "field", "field": "income"},
                                        {"type": "constant", "value": 2000},
                                    ],
                                },
                            ],
                        },
                    },
                    {"predicate": {"type": "true"}, "partial_score": 10},
                ],
            },
        ],
    }
