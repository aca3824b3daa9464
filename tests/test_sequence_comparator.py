"""
Unit Tests for Sequence Comparator

Scores are computed directly from hand-built results so each bonus rule
can be checked in isolation.
"""

import pytest

from echo_chamber.sequence_comparator import calculate_similarity
from echo_chamber.sequence_model import (
    AnalysisResult,
    ArithmeticParameters,
    GeometricParameters,
    PolynomialParameters,
)


def make_result(pattern, parameters=None, predicted_next=(1,)):
    return AnalysisResult(
        success=True,
        sequence=(1, 2),
        timestamp="2024-01-01T00:00:00",
        analysis_duration_ms=0.1,
        pattern=pattern,
        confidence=100,
        predicted_next=predicted_next,
        parameters=parameters,
    )


def make_failed():
    return AnalysisResult(
        success=False,
        sequence=(),
        timestamp="2024-01-01T00:00:00",
        analysis_duration_ms=0.1,
        error_message="The echo is not a valid sequence array.",
        error_kind="not_an_array",
    )


class TestCalculateSimilarity:

    def test_different_patterns_score_zero(self):
        a = make_result("arithmetic", ArithmeticParameters(2))
        b = make_result("geometric", GeometricParameters(2.0))
        assert calculate_similarity(a, b) == 0

    def test_same_pattern_base_score(self):
        a = make_result("arithmetic", ArithmeticParameters(2))
        b = make_result("arithmetic", ArithmeticParameters(5))
        assert calculate_similarity(a, b) == 50

    def test_equal_difference_bonus(self):
        a = make_result("arithmetic", ArithmeticParameters(3))
        b = make_result("arithmetic", ArithmeticParameters(3.0))
        assert calculate_similarity(a, b) == 75

    @pytest.mark.parametrize("ratio_b,expected", [
        (2.0, 75),
        (2.009, 75),
        (2.02, 50),
        (3.0, 50),
    ])
    def test_ratio_bonus_tolerance(self, ratio_b, expected):
        a = make_result("geometric", GeometricParameters(2.0))
        b = make_result("geometric", GeometricParameters(ratio_b))
        assert calculate_similarity(a, b) == expected

    def test_polynomial_gets_no_bonus(self):
        a = make_result("polynomial", PolynomialParameters(2, 2))
        b = make_result("polynomial", PolynomialParameters(2, 2))
        assert calculate_similarity(a, b) == 50

    def test_fibonacci_same_pattern(self):
        assert calculate_similarity(make_result("fibonacci"), make_result("fibonacci")) == 50

    def test_failed_results_compare_as_same_pattern(self):
        assert calculate_similarity(make_failed(), make_failed()) == 50
        assert calculate_similarity(make_failed(), make_result("unknown", predicted_next=(None,))) == 0

    def test_symmetric(self):
        a = make_result("geometric", GeometricParameters(2.0))
        b = make_result("geometric", GeometricParameters(2.005))
        assert calculate_similarity(a, b) == calculate_similarity(b, a)
