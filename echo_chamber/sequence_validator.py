"""
Sequence Validator

Rejects malformed input before detection runs. Validation failures are
returned as values; nothing here raises on bad user input.
"""

import math
import numbers
from typing import Any

from .sequence_model import (
    ValidationResult,
    ValidationErrorKind,
    MIN_SEQUENCE_LENGTH,
)


# User-facing messages, keyed by error kind
VALIDATION_MESSAGES = {
    ValidationErrorKind.NOT_AN_ARRAY.value: "The echo is not a valid sequence array.",
    ValidationErrorKind.TOO_SHORT.value: (
        f"The echo is too faint - need at least {MIN_SEQUENCE_LENGTH} numbers."
    ),
    ValidationErrorKind.NON_NUMERIC.value: (
        "The echo is distorted - all elements must be valid numbers."
    ),
}

VALID = ValidationResult(valid=True)


def is_finite_number(value: Any) -> bool:
    """
    True for finite real numbers. Booleans are not numbers here, and
    neither are integers too large to convert to a float.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def _invalid(kind: ValidationErrorKind) -> ValidationResult:
    return ValidationResult(
        valid=False,
        error_kind=kind.value,
        error_message=VALIDATION_MESSAGES[kind.value],
    )


def validate_sequence(sequence: Any) -> ValidationResult:
    """
    Validate a submitted sequence.

    Checks, in order:
    1. Input is an ordered list (list or tuple)
    2. At least MIN_SEQUENCE_LENGTH elements
    3. Every element is a finite real number
    """
    if not isinstance(sequence, (list, tuple)):
        return _invalid(ValidationErrorKind.NOT_AN_ARRAY)

    if len(sequence) < MIN_SEQUENCE_LENGTH:
        return _invalid(ValidationErrorKind.TOO_SHORT)

    if not all(is_finite_number(value) for value in sequence):
        return _invalid(ValidationErrorKind.NON_NUMERIC)

    return VALID
