"""
Unit Tests for Sequence Model

Test coverage for:
- Enum values (LOCKED)
- Parameter variants and their pairing with patterns
- AnalysisResult invariants and serialization
- MetricsSnapshot hit rate
"""

import dataclasses
import math

import pytest

from echo_chamber.sequence_model import (
    AnalysisResult,
    ArithmeticParameters,
    ComparisonResult,
    DetectionMatch,
    GeometricParameters,
    MetricsSnapshot,
    PatternType,
    PolynomialParameters,
    ValidationErrorKind,
    ValidationResult,
    history_to_dicts,
    parameters_from_dict,
)

TIMESTAMP = "2024-01-01T00:00:00"


def arithmetic_result(**overrides):
    fields = dict(
        success=True,
        sequence=(3, 6, 9, 12),
        timestamp=TIMESTAMP,
        analysis_duration_ms=0.25,
        pattern="arithmetic",
        confidence=100,
        predicted_next=(15, 18, 21, 24, 27),
        parameters=ArithmeticParameters(common_difference=3),
        formula_description="a_n = a_1 + (n-1)d, where d = 3",
        explanation="This is an arithmetic progression with constant difference",
    )
    fields.update(overrides)
    return AnalysisResult(**fields)


class TestEnums:

    def test_pattern_types_locked(self):
        assert [p.value for p in PatternType] == [
            "arithmetic", "geometric", "polynomial", "fibonacci", "unknown",
        ]

    def test_validation_error_kinds_locked(self):
        assert {k.value for k in ValidationErrorKind} == {
            "not_an_array", "too_short", "non_numeric",
        }

    def test_pattern_type_is_str(self):
        assert PatternType.GEOMETRIC == "geometric"


class TestParameters:

    def test_to_dict(self):
        assert ArithmeticParameters(3).to_dict() == {"common_difference": 3}
        assert GeometricParameters(0.5).to_dict() == {"common_ratio": 0.5}
        assert PolynomialParameters(2, 2).to_dict() == {"degree": 2, "constant_difference": 2}

    def test_polynomial_degree_positive(self):
        with pytest.raises(ValueError):
            PolynomialParameters(degree=0, constant_difference=1)

    def test_frozen(self):
        params = ArithmeticParameters(3)
        with pytest.raises(dataclasses.FrozenInstanceError):
            params.common_difference = 4

    def test_from_dict(self):
        assert parameters_from_dict("geometric", {"common_ratio": 2.0}) == GeometricParameters(2.0)
        assert parameters_from_dict("fibonacci", {"x": 1}) is None
        assert parameters_from_dict("arithmetic", None) is None


class TestDetectionMatch:

    def test_parameters_must_match_pattern(self):
        with pytest.raises(ValueError):
            DetectionMatch("geometric", 100, (1,), "f", "e", ArithmeticParameters(1))

    def test_fibonacci_has_no_parameters(self):
        with pytest.raises(ValueError):
            DetectionMatch("fibonacci", 100, (1,), "f", "e", ArithmeticParameters(1))

    def test_rejects_unknown_pattern_name(self):
        with pytest.raises(ValueError):
            DetectionMatch("quadratic", 100, (1,), "f", "e")

    def test_predictions_must_be_tuple(self):
        with pytest.raises(ValueError):
            DetectionMatch("fibonacci", 100, [1], "f", "e")


class TestValidationResult:

    def test_invalid_requires_known_kind(self):
        with pytest.raises(ValueError):
            ValidationResult(valid=False, error_kind="bad_kind", error_message="x")


class TestAnalysisResult:

    def test_frozen(self):
        result = arithmetic_result()
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.pattern = "geometric"

    def test_parameter_accessors(self):
        result = arithmetic_result()
        assert result.common_difference == 3
        assert result.common_ratio is None
        assert result.degree is None
        assert result.constant_difference is None
        assert result.sequence_length == 4

    def test_sequence_must_be_tuple(self):
        with pytest.raises(ValueError):
            arithmetic_result(sequence=[3, 6, 9, 12])

    def test_confidence_range(self):
        with pytest.raises(ValueError):
            arithmetic_result(confidence=101)

    def test_success_cannot_carry_error(self):
        with pytest.raises(ValueError):
            arithmetic_result(error_message="boom")

    def test_failed_cannot_carry_pattern(self):
        with pytest.raises(ValueError):
            AnalysisResult(
                success=False, sequence=(), timestamp=TIMESTAMP,
                analysis_duration_ms=0.0, pattern="arithmetic", error_message="x",
            )

    def test_failed_requires_message(self):
        with pytest.raises(ValueError):
            AnalysisResult(success=False, sequence=(), timestamp=TIMESTAMP, analysis_duration_ms=0.0)

    def test_to_dict(self):
        data = arithmetic_result().to_dict()
        assert data["success"] is True
        assert data["sequence"] == [3, 6, 9, 12]
        assert data["sequence_length"] == 4
        assert data["pattern"] == "arithmetic"
        assert data["predicted_next"] == [15, 18, 21, 24, 27]
        assert data["parameters"] == {"common_difference": 3}
        assert data["error_message"] is None
        assert data["timestamp"] == TIMESTAMP

    def test_to_dict_is_json_safe_for_failed_input(self):
        failed = AnalysisResult(
            success=False,
            sequence=(1, math.nan, "x", None, object),
            timestamp=TIMESTAMP,
            analysis_duration_ms=0.0,
            error_message="distorted",
            error_kind="non_numeric",
        )
        sequence = failed.to_dict()["sequence"]
        assert sequence[:4] == [1, "nan", "x", None]
        assert isinstance(sequence[4], str)

    def test_non_finite_parameters_serialize_as_strings(self):
        result = arithmetic_result(
            pattern="polynomial",
            confidence=95,
            parameters=PolynomialParameters(degree=2, constant_difference=-math.inf),
        )
        assert result.to_dict()["parameters"] == {"degree": 2, "constant_difference": "-inf"}

    def test_unknown_prediction_serializes_as_null(self):
        result = arithmetic_result(
            pattern="unknown", confidence=0, predicted_next=(None,), parameters=None,
        )
        assert result.to_dict()["predicted_next"] == [None]

    def test_payload_drops_timing(self):
        payload = arithmetic_result().payload()
        assert "timestamp" not in payload
        assert "analysis_duration_ms" not in payload
        assert arithmetic_result(analysis_duration_ms=9.0).payload() == payload

    def test_from_dict(self):
        original = arithmetic_result()
        assert AnalysisResult.from_dict(original.to_dict()) == original


class TestComparisonResult:

    def test_score_range(self):
        result = arithmetic_result()
        with pytest.raises(ValueError):
            ComparisonResult(result, result, True, 125)

    def test_to_dict(self):
        result = arithmetic_result()
        data = ComparisonResult(result, result, True, 75).to_dict()
        assert data["same_pattern"] is True
        assert data["similarity_score"] == 75
        assert data["result_a"]["pattern"] == "arithmetic"


class TestMetricsSnapshot:

    def test_hit_rate_before_first_analysis(self):
        assert MetricsSnapshot(0, 0, 0.0, 0).cache_hit_rate is None

    def test_hit_rate(self):
        assert MetricsSnapshot(4, 1, 0.5, 3).cache_hit_rate == 25.0

    def test_round_trip(self):
        snapshot = MetricsSnapshot(4, 1, 0.5, 3)
        assert MetricsSnapshot.from_dict(snapshot.to_dict()) == snapshot


def test_history_to_dicts():
    assert history_to_dicts([arithmetic_result()])[0]["pattern"] == "arithmetic"
    assert history_to_dicts([]) == []
