"""
Sequence Analyzer - Engine Interface

This module ties validation, detection, prediction, comparison and the
in-memory store together behind one object.

CRITICAL CONSTRAINTS:
- NO EXCEPTIONS FOR BAD INPUT: Validation failures return success=False
- CACHE FIRST: A repeated sequence returns the cached result unchanged
- EVERY CALL COUNTS: Cache hits and invalid input both update the metrics
- FAILED RESULTS ARE NOT REMEMBERED: Not cached, not in history
- ONE LOCK PER INSTANCE: Calls on the same analyzer never interleave

There is no module-level analyzer. Hosts construct and own their instance.
"""

import logging
import time
from datetime import datetime
from typing import Any, List, Optional

from .analysis_store import AnalysisStore, canonical_key
from .pattern_detector import detect_pattern
from .sequence_comparator import calculate_similarity
from .sequence_model import (
    AnalysisResult,
    ComparisonResult,
    MetricsSnapshot,
    ValidationResult,
)
from .sequence_validator import validate_sequence

logger = logging.getLogger("sequence_analyzer")


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


def _submitted_copy(sequence: Any) -> tuple:
    """Immutable copy of what the caller submitted, empty if not a list."""
    if isinstance(sequence, (list, tuple)):
        return tuple(sequence)
    return ()


# -----------------------------------------------------------------------------
# Sequence Analyzer (Main Interface)
# -----------------------------------------------------------------------------
class SequenceAnalyzer:
    """
    Main engine for sequence pattern analysis.

    Control flow of analyze():
    1. Canonical cache key
    2. Cache lookup (hit -> count and return)
    3. Validation (failure -> count and return error result)
    4. Detection and prediction
    5. Metrics update, cache write, history append
    """

    def __init__(self, store: Optional[AnalysisStore] = None):
        """Initialize the analyzer with its own store."""
        self._store = store or AnalysisStore()

    # -------------------------------------------------------------------------
    # Analysis
    # -------------------------------------------------------------------------

    def analyze(self, sequence: Any) -> AnalysisResult:
        """
        Analyze a sequence and identify its pattern.

        Never raises for bad input; check `result.success`.
        """
        started = time.perf_counter()
        key = canonical_key(sequence)

        with self._store.lock:
            cached = self._store.get_cached(key)
            if cached is not None:
                self._store.record_analysis(_elapsed_ms(started), cache_hit=True)
                logger.debug(f"Cache hit for {key}")
                return cached

            validation = validate_sequence(sequence)
            if not validation.valid:
                duration_ms = _elapsed_ms(started)
                self._store.record_analysis(duration_ms)
                logger.warning(f"Sequence rejected: {validation.error_kind}")
                return self._failed_result(sequence, validation, duration_ms)

            match = detect_pattern(sequence)
            duration_ms = _elapsed_ms(started)

            result = AnalysisResult(
                success=True,
                sequence=tuple(sequence),
                timestamp=datetime.utcnow().isoformat(),
                analysis_duration_ms=duration_ms,
                pattern=match.pattern,
                confidence=match.confidence,
                predicted_next=match.predicted_next,
                parameters=match.parameters,
                formula_description=match.formula_description,
                explanation=match.explanation,
            )

            self._store.record_analysis(duration_ms)
            self._store.cache_result(key, result)
            self._store.append_history(result)

        logger.info(
            f"Analyzed sequence of length {result.sequence_length}: "
            f"{result.pattern} ({result.confidence}%)"
        )
        return result

    def compare(self, sequence_a: Any, sequence_b: Any) -> ComparisonResult:
        """
        Analyze two sequences and score their similarity.

        Both go through analyze(), so they are cached, recorded in history
        and counted in the metrics like any other call.
        """
        with self._store.lock:
            result_a = self.analyze(sequence_a)
            result_b = self.analyze(sequence_b)

        comparison = ComparisonResult(
            result_a=result_a,
            result_b=result_b,
            same_pattern=result_a.pattern == result_b.pattern,
            similarity_score=calculate_similarity(result_a, result_b),
        )
        logger.info(
            f"Compared sequences: same_pattern={comparison.same_pattern}, "
            f"similarity={comparison.similarity_score}"
        )
        return comparison

    # -------------------------------------------------------------------------
    # State Access
    # -------------------------------------------------------------------------

    def get_history(self) -> List[AnalysisResult]:
        """Successful analyses, oldest first. The list is a copy."""
        return self._store.history()

    def get_metrics(self) -> MetricsSnapshot:
        """Current performance counters."""
        return self._store.snapshot()

    def clear(self) -> None:
        """Empty history and cache and reset the metrics."""
        self._store.reset()

    # -------------------------------------------------------------------------
    # Private Helper Methods
    # -------------------------------------------------------------------------

    def _failed_result(
        self,
        sequence: Any,
        validation: ValidationResult,
        duration_ms: float,
    ) -> AnalysisResult:
        """Build a success=False result carrying only the error."""
        return AnalysisResult(
            success=False,
            sequence=_submitted_copy(sequence),
            timestamp=datetime.utcnow().isoformat(),
            analysis_duration_ms=duration_ms,
            error_message=validation.error_message,
            error_kind=validation.error_kind,
        )
