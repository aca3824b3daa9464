"""
Pattern Detector & Predictor

This module classifies a validated sequence using deterministic strategies
and extrapolates the next terms for the pattern it finds.

CRITICAL CONSTRAINTS:
- RULE-BASED ONLY: No fitting, no statistics, no probabilistic output
- DETERMINISTIC: Same sequence always produces the same match
- FIRST MATCH WINS: Strategies run in DETECTION_STRATEGIES order
- EXPLICIT UNKNOWN: No match yields PatternType.UNKNOWN, never a guess

Strategies assume a sequence that already passed validation.
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from .sequence_model import (
    DetectionMatch,
    PatternType,
    ArithmeticParameters,
    GeometricParameters,
    PolynomialParameters,
    PREDICTION_COUNT,
    MIN_FIBONACCI_LENGTH,
    MAX_POLYNOMIAL_LEVELS,
    RATIO_TOLERANCE,
    FIBONACCI_TOLERANCE,
    GEOMETRIC_ROUNDING_DIGITS,
    ARITHMETIC_CONFIDENCE,
    GEOMETRIC_CONFIDENCE,
    FIBONACCI_CONFIDENCE,
    POLYNOMIAL_CONFIDENCE,
    UNKNOWN_CONFIDENCE,
)

logger = logging.getLogger("pattern_detector")

Number = float
DetectionStrategy = Callable[[Sequence[Number]], Optional[DetectionMatch]]


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def calculate_differences(sequence: Sequence[Number]) -> List[Number]:
    """Differences between consecutive elements."""
    return [sequence[i] - sequence[i - 1] for i in range(1, len(sequence))]


def format_number(value: Number) -> str:
    """Render integral floats without a trailing .0 for formula text."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _all_equal(values: Sequence[Number]) -> bool:
    return all(v == values[0] for v in values)


# -----------------------------------------------------------------------------
# Predictors
# -----------------------------------------------------------------------------
def predict_arithmetic(
    sequence: Sequence[Number],
    difference: Number,
    count: int = PREDICTION_COUNT,
) -> Tuple[Number, ...]:
    """next_k = last + k*d"""
    last = sequence[-1]
    return tuple(last + k * difference for k in range(1, count + 1))


def predict_geometric(
    sequence: Sequence[Number],
    ratio: Number,
    count: int = PREDICTION_COUNT,
) -> Tuple[Number, ...]:
    """next_k = last * r^k, rounded to suppress floating noise."""
    last = sequence[-1]
    predictions = []
    power = 1.0
    for _ in range(count):
        # float ** int raises OverflowError, repeated multiplication saturates to inf
        power *= ratio
        predictions.append(round(last * power, GEOMETRIC_ROUNDING_DIGITS))
    return tuple(predictions)


def predict_fibonacci(
    sequence: Sequence[Number],
    count: int = PREDICTION_COUNT,
) -> Tuple[Number, ...]:
    """Extend the two-term recurrence from the last two elements."""
    a, b = sequence[-2], sequence[-1]
    predictions = []
    for _ in range(count):
        a, b = b, a + b
        predictions.append(b)
    return tuple(predictions)


def predict_polynomial(
    sequence: Sequence[Number],
    degree: int,
    count: int = PREDICTION_COUNT,
) -> Tuple[Number, ...]:
    """
    Newton forward-difference extrapolation.

    Builds difference table rows 0..degree, where row `degree` is constant.
    Each step repeats the last value of the constant row and sums upward,
    so the new row 0 value is the next term.
    """
    table = [list(sequence)]
    for _ in range(degree):
        table.append(calculate_differences(table[-1]))

    predictions = []
    for _ in range(count):
        table[degree].append(table[degree][-1])
        for row in range(degree - 1, -1, -1):
            table[row].append(table[row][-1] + table[row + 1][-1])
        predictions.append(table[0][-1])

    return tuple(predictions)


# -----------------------------------------------------------------------------
# Detection Strategies (ORDERED, PURE)
# -----------------------------------------------------------------------------
def detect_arithmetic(sequence: Sequence[Number]) -> Optional[DetectionMatch]:
    """Constant difference, compared exactly."""
    differences = calculate_differences(sequence)
    if not differences or not _all_equal(differences):
        return None

    difference = differences[0]
    return DetectionMatch(
        pattern=PatternType.ARITHMETIC.value,
        confidence=ARITHMETIC_CONFIDENCE,
        predicted_next=predict_arithmetic(sequence, difference),
        formula_description=f"a_n = a_1 + (n-1)d, where d = {format_number(difference)}",
        explanation="This is an arithmetic progression with constant difference",
        parameters=ArithmeticParameters(common_difference=difference),
    )


def detect_geometric(sequence: Sequence[Number]) -> Optional[DetectionMatch]:
    """Constant ratio within RATIO_TOLERANCE. Any zero element disqualifies."""
    if any(value == 0 for value in sequence):
        return None

    ratios = [sequence[i] / sequence[i - 1] for i in range(1, len(sequence))]
    if not ratios:
        return None

    ratio = ratios[0]
    if max(abs(r - ratio) for r in ratios) >= RATIO_TOLERANCE:
        return None

    return DetectionMatch(
        pattern=PatternType.GEOMETRIC.value,
        confidence=GEOMETRIC_CONFIDENCE,
        predicted_next=predict_geometric(sequence, ratio),
        formula_description=f"a_n = a_1 * r^(n-1), where r = {ratio:.4f}",
        explanation="This is a geometric progression with constant ratio",
        parameters=GeometricParameters(common_ratio=ratio),
    )


def detect_fibonacci(sequence: Sequence[Number]) -> Optional[DetectionMatch]:
    """Every term from the third on is the sum of the previous two."""
    if len(sequence) < MIN_FIBONACCI_LENGTH:
        return None

    for i in range(2, len(sequence)):
        if abs(sequence[i] - (sequence[i - 1] + sequence[i - 2])) >= FIBONACCI_TOLERANCE:
            return None

    return DetectionMatch(
        pattern=PatternType.FIBONACCI.value,
        confidence=FIBONACCI_CONFIDENCE,
        predicted_next=predict_fibonacci(sequence),
        formula_description="a_n = a_(n-1) + a_(n-2)",
        explanation=(
            "This is a Fibonacci-like sequence where each term is the sum "
            "of the previous two"
        ),
    )


def detect_polynomial(sequence: Sequence[Number]) -> Optional[DetectionMatch]:
    """First difference level (up to MAX_POLYNOMIAL_LEVELS) that is constant."""
    differences = list(sequence)

    for level in range(MAX_POLYNOMIAL_LEVELS):
        differences = calculate_differences(differences)
        if not differences:
            break

        if _all_equal(differences):
            degree = level + 1
            return DetectionMatch(
                pattern=PatternType.POLYNOMIAL.value,
                confidence=POLYNOMIAL_CONFIDENCE,
                predicted_next=predict_polynomial(sequence, degree),
                formula_description=f"Polynomial of degree {degree}",
                explanation=f"This is a polynomial sequence of degree {degree}",
                parameters=PolynomialParameters(
                    degree=degree,
                    constant_difference=differences[0],
                ),
            )

    return None


DETECTION_STRATEGIES: Tuple[DetectionStrategy, ...] = (
    detect_arithmetic,
    detect_geometric,
    detect_fibonacci,  # before polynomial, whose low levels never settle on these
    detect_polynomial,
)

UNKNOWN_MATCH = DetectionMatch(
    pattern=PatternType.UNKNOWN.value,
    confidence=UNKNOWN_CONFIDENCE,
    predicted_next=(None,),
    formula_description="Pattern not recognized",
    explanation="No arithmetic, geometric, Fibonacci or polynomial rule fits this sequence",
)


def detect_pattern(
    sequence: Sequence[Number],
    strategies: Tuple[DetectionStrategy, ...] = DETECTION_STRATEGIES,
) -> DetectionMatch:
    """
    Classify a validated sequence.

    Runs each strategy in order and returns the first match, or
    UNKNOWN_MATCH when none fits.
    """
    for strategy in strategies:
        match = strategy(sequence)
        if match is not None:
            logger.debug(f"{strategy.__name__} matched {match.pattern}")
            return match

    logger.debug(f"No strategy matched sequence of length {len(sequence)}")
    return UNKNOWN_MATCH
