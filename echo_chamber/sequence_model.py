"""
Sequence Model & Classification Enums

This module defines the data structures for sequence analysis.
All structures are IMMUTABLE once created.

CRITICAL CONSTRAINTS:
- DETERMINISTIC: Confidence is a fixed value per pattern, never computed
- EXPLICIT UNKNOWN: No match = UNKNOWN pattern, never guessed
- TAGGED PARAMETERS: Each pattern carries only its own parameters
- FAILED RESULTS CARRY NO PATTERN: success=False means error fields only
"""

import math
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional, Dict, Any, List, Union


# -----------------------------------------------------------------------------
# Engine Constants
# -----------------------------------------------------------------------------
PREDICTION_COUNT = 5
MIN_SEQUENCE_LENGTH = 2
MIN_FIBONACCI_LENGTH = 3
MAX_POLYNOMIAL_LEVELS = 5

# Tolerances absorb floating point error, not near-misses
RATIO_TOLERANCE = 1e-4
FIBONACCI_TOLERANCE = 1e-4
GEOMETRIC_ROUNDING_DIGITS = 4

ARITHMETIC_CONFIDENCE = 100
GEOMETRIC_CONFIDENCE = 100
FIBONACCI_CONFIDENCE = 100
POLYNOMIAL_CONFIDENCE = 95
UNKNOWN_CONFIDENCE = 0

# Comparator scoring
BASE_SIMILARITY = 50
PARAMETER_BONUS = 25
MAX_SIMILARITY = 100
RATIO_SIMILARITY_TOLERANCE = 0.01


# -----------------------------------------------------------------------------
# Pattern Type Enum (LOCKED)
# -----------------------------------------------------------------------------
class PatternType(str, Enum):
    """
    Generating rules the detector can recognise.

    This enum is LOCKED - detection order lives in pattern_detector.
    """
    ARITHMETIC = "arithmetic"  # Constant difference
    GEOMETRIC = "geometric"  # Constant ratio
    POLYNOMIAL = "polynomial"  # Constant n-th difference
    FIBONACCI = "fibonacci"  # Each term is the sum of the previous two
    UNKNOWN = "unknown"  # No strategy matched


# -----------------------------------------------------------------------------
# Validation Error Enum (LOCKED)
# -----------------------------------------------------------------------------
class ValidationErrorKind(str, Enum):
    """Reasons a sequence is rejected before detection."""
    NOT_AN_ARRAY = "not_an_array"
    TOO_SHORT = "too_short"
    NON_NUMERIC = "non_numeric"


# -----------------------------------------------------------------------------
# Pattern Parameters (Tagged Union)
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ArithmeticParameters:
    """Parameters of an arithmetic progression."""
    common_difference: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class GeometricParameters:
    """Parameters of a geometric progression."""
    common_ratio: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PolynomialParameters:
    """Parameters of a polynomial sequence."""
    degree: int
    constant_difference: float

    def __post_init__(self):
        if self.degree < 1:
            raise ValueError(f"Polynomial degree must be >= 1, got {self.degree}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


PatternParameters = Union[ArithmeticParameters, GeometricParameters, PolynomialParameters]

# Which parameter variant belongs to which pattern
PARAMETER_TYPES = {
    PatternType.ARITHMETIC.value: ArithmeticParameters,
    PatternType.GEOMETRIC.value: GeometricParameters,
    PatternType.POLYNOMIAL.value: PolynomialParameters,
}


def parameters_from_dict(
    pattern: Optional[str],
    data: Optional[Dict[str, Any]],
) -> Optional[PatternParameters]:
    """Rebuild the parameter variant for a pattern from its dictionary form."""
    if not data or pattern not in PARAMETER_TYPES:
        return None
    return PARAMETER_TYPES[pattern](**data)


def _json_safe(value: Any) -> Any:
    """Make a submitted element or computed value safe for strict JSON encoding."""
    if value is None or isinstance(value, (bool, str, int)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else str(value)
    return repr(value)


def _parameters_dict(parameters: Optional[PatternParameters]) -> Optional[Dict[str, Any]]:
    if parameters is None:
        return None
    return {key: _json_safe(value) for key, value in parameters.to_dict().items()}


# -----------------------------------------------------------------------------
# Detection Match (Immutable)
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class DetectionMatch:
    """
    Output of a single detection strategy.

    Carries the prediction so the analyzer can build a result without
    knowing which strategy fired.
    """
    pattern: str  # PatternType value
    confidence: int
    predicted_next: tuple
    formula_description: str
    explanation: str
    parameters: Optional[PatternParameters] = None

    def __post_init__(self):
        if self.pattern not in [p.value for p in PatternType]:
            raise ValueError(f"Invalid pattern: {self.pattern}")
        if not 0 <= self.confidence <= 100:
            raise ValueError(f"Confidence must be 0-100, got {self.confidence}")
        if not isinstance(self.predicted_next, tuple):
            raise ValueError("predicted_next must be a tuple for immutability")
        expected = PARAMETER_TYPES.get(self.pattern)
        if expected is None and self.parameters is not None:
            raise ValueError(f"Pattern {self.pattern} carries no parameters")
        if expected is not None and not isinstance(self.parameters, expected):
            raise ValueError(f"Pattern {self.pattern} requires {expected.__name__}")


# -----------------------------------------------------------------------------
# Validation Result (Immutable)
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ValidationResult:
    """Outcome of sequence validation."""
    valid: bool
    error_kind: Optional[str] = None  # ValidationErrorKind value
    error_message: Optional[str] = None

    def __post_init__(self):
        if not self.valid and self.error_kind not in [k.value for k in ValidationErrorKind]:
            raise ValueError(f"Invalid validation error kind: {self.error_kind}")


# -----------------------------------------------------------------------------
# Analysis Result (Immutable)
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class AnalysisResult:
    """
    Immutable record of one analysis.

    Successful results are cached and appended to history as-is, so the
    same instance may be handed out many times. Failed results carry only
    the error fields.
    """
    success: bool
    sequence: tuple
    timestamp: str  # ISO format
    analysis_duration_ms: float
    pattern: Optional[str] = None  # PatternType value
    confidence: int = 0
    predicted_next: tuple = ()
    parameters: Optional[PatternParameters] = None
    formula_description: Optional[str] = None
    explanation: Optional[str] = None
    error_message: Optional[str] = None
    error_kind: Optional[str] = None  # ValidationErrorKind value

    def __post_init__(self):
        """Validate result invariants on creation."""
        if not isinstance(self.sequence, tuple):
            raise ValueError("sequence must be a tuple for immutability")
        if not isinstance(self.predicted_next, tuple):
            raise ValueError("predicted_next must be a tuple for immutability")
        if not 0 <= self.confidence <= 100:
            raise ValueError(f"Confidence must be 0-100, got {self.confidence}")
        if self.success:
            if self.pattern not in [p.value for p in PatternType]:
                raise ValueError(f"Invalid pattern: {self.pattern}")
            if self.error_message is not None or self.error_kind is not None:
                raise ValueError("Successful result cannot carry an error")
        else:
            if self.pattern is not None or self.predicted_next or self.parameters is not None:
                raise ValueError("Failed result cannot carry a pattern or predictions")
            if not self.error_message:
                raise ValueError("Failed result requires an error message")

    @property
    def sequence_length(self) -> int:
        return len(self.sequence)

    @property
    def common_difference(self) -> Optional[float]:
        return getattr(self.parameters, "common_difference", None)

    @property
    def common_ratio(self) -> Optional[float]:
        return getattr(self.parameters, "common_ratio", None)

    @property
    def degree(self) -> Optional[int]:
        return getattr(self.parameters, "degree", None)

    @property
    def constant_difference(self) -> Optional[float]:
        return getattr(self.parameters, "constant_difference", None)

    def payload(self) -> Dict[str, Any]:
        """Dictionary form without the per-call timing fields."""
        data = self.to_dict()
        data.pop("timestamp")
        data.pop("analysis_duration_ms")
        return data

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "success": self.success,
            "sequence": [_json_safe(v) for v in self.sequence],
            "sequence_length": self.sequence_length,
            "pattern": self.pattern,
            "confidence": self.confidence,
            "predicted_next": [_json_safe(v) for v in self.predicted_next],
            "parameters": _parameters_dict(self.parameters),
            "formula_description": self.formula_description,
            "explanation": self.explanation,
            "analysis_duration_ms": self.analysis_duration_ms,
            "timestamp": self.timestamp,
            "error_message": self.error_message,
            "error_kind": self.error_kind,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisResult":
        """Create result from dictionary."""
        pattern = data.get("pattern")
        return cls(
            success=data["success"],
            sequence=tuple(data.get("sequence", [])),
            timestamp=data["timestamp"],
            analysis_duration_ms=data.get("analysis_duration_ms", 0.0),
            pattern=pattern,
            confidence=data.get("confidence", 0),
            predicted_next=tuple(data.get("predicted_next", [])),
            parameters=parameters_from_dict(pattern, data.get("parameters")),
            formula_description=data.get("formula_description"),
            explanation=data.get("explanation"),
            error_message=data.get("error_message"),
            error_kind=data.get("error_kind"),
        )


# -----------------------------------------------------------------------------
# Comparison Result (Immutable)
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ComparisonResult:
    """Two analyses and how alike they are."""
    result_a: AnalysisResult
    result_b: AnalysisResult
    same_pattern: bool
    similarity_score: int

    def __post_init__(self):
        if not 0 <= self.similarity_score <= MAX_SIMILARITY:
            raise ValueError(f"Similarity must be 0-100, got {self.similarity_score}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "result_a": self.result_a.to_dict(),
            "result_b": self.result_b.to_dict(),
            "same_pattern": self.same_pattern,
            "similarity_score": self.similarity_score,
        }


# -----------------------------------------------------------------------------
# Metrics Snapshot (Immutable)
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class MetricsSnapshot:
    """Point-in-time copy of the analyzer's performance counters."""
    total_analyses: int
    cache_hits: int
    average_analysis_duration_ms: float
    cache_size: int

    @property
    def cache_hit_rate(self) -> Optional[float]:
        """Cache hits as a percentage of all analyses, None before the first."""
        if self.total_analyses == 0:
            return None
        return self.cache_hits / self.total_analyses * 100

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MetricsSnapshot":
        return cls(
            total_analyses=data.get("total_analyses", 0),
            cache_hits=data.get("cache_hits", 0),
            average_analysis_duration_ms=data.get("average_analysis_duration_ms", 0.0),
            cache_size=data.get("cache_size", 0),
        )


def history_to_dicts(history: List[AnalysisResult]) -> List[Dict[str, Any]]:
    """Serialise a history list, oldest first."""
    return [entry.to_dict() for entry in history]
