"""
Analysis Store - In-Memory Cache, History & Metrics

This module holds the mutable state of one analyzer instance.

CRITICAL CONSTRAINTS:
- IN-MEMORY ONLY: Nothing is written to disk
- OWNED: Each SequenceAnalyzer creates its own store, no global instance
- APPEND-ONLY HISTORY: Entries are never edited, only cleared by reset()
- NO EXPIRY: Cache entries live until reset()
- SINGLE LOCK: Every read and write goes through one re-entrant lock
"""

import json
import logging
import numbers
import threading
from typing import Any, Dict, List, Optional

from .sequence_model import AnalysisResult, MetricsSnapshot
from .sequence_validator import is_finite_number

logger = logging.getLogger("analysis_store")


# -----------------------------------------------------------------------------
# Cache Keys
# -----------------------------------------------------------------------------
def _canonical_value(value: Any) -> Any:
    if isinstance(value, numbers.Integral):
        return int(value)
    value = float(value)
    if value.is_integer():
        # 2.0 and 2 share a key, and so do -0.0 and 0
        return int(value)
    return value


def canonical_key(sequence: Any) -> Optional[str]:
    """
    Order-and-value-sensitive cache key for a sequence.

    Returns None for input that can never be cached (not a list of finite
    numbers); such input always goes through validation.
    """
    if not isinstance(sequence, (list, tuple)):
        return None
    if not all(is_finite_number(value) for value in sequence):
        return None
    return json.dumps([_canonical_value(v) for v in sequence], separators=(",", ":"))


# -----------------------------------------------------------------------------
# Analysis Store
# -----------------------------------------------------------------------------
class AnalysisStore:
    """
    Cache, history and performance counters for one analyzer.

    Callers that need several operations to appear atomic (a full analysis,
    a comparison) hold `lock` around them; the lock is re-entrant so the
    individual methods can take it again.
    """

    def __init__(self):
        """Initialize an empty store."""
        self.lock = threading.RLock()
        self._cache: Dict[str, AnalysisResult] = {}
        self._history: List[AnalysisResult] = []
        self._total_analyses = 0
        self._cache_hits = 0
        self._average_duration_ms = 0.0

    # -------------------------------------------------------------------------
    # Cache
    # -------------------------------------------------------------------------

    def get_cached(self, key: Optional[str]) -> Optional[AnalysisResult]:
        """Cached result for a key, None on miss or for uncacheable input."""
        if key is None:
            return None
        with self.lock:
            return self._cache.get(key)

    def cache_result(self, key: Optional[str], result: AnalysisResult) -> None:
        """Store a successful result under its key."""
        if key is None or not result.success:
            return
        with self.lock:
            self._cache[key] = result

    @property
    def cache_size(self) -> int:
        with self.lock:
            return len(self._cache)

    # -------------------------------------------------------------------------
    # History (Append-Only)
    # -------------------------------------------------------------------------

    def append_history(self, result: AnalysisResult) -> None:
        """Append a successful result. Failed results are not history."""
        if not result.success:
            return
        with self.lock:
            self._history.append(result)

    def history(self) -> List[AnalysisResult]:
        """Independent copy of the history, oldest first."""
        with self.lock:
            return list(self._history)

    # -------------------------------------------------------------------------
    # Metrics
    # -------------------------------------------------------------------------

    def record_analysis(self, duration_ms: float, cache_hit: bool = False) -> None:
        """Count one completed analyze() call and fold its duration into the mean."""
        with self.lock:
            self._total_analyses += 1
            if cache_hit:
                self._cache_hits += 1
            previous = self._average_duration_ms
            self._average_duration_ms = (
                previous * (self._total_analyses - 1) + duration_ms
            ) / self._total_analyses

    def snapshot(self) -> MetricsSnapshot:
        """Point-in-time metrics."""
        with self.lock:
            return MetricsSnapshot(
                total_analyses=self._total_analyses,
                cache_hits=self._cache_hits,
                average_analysis_duration_ms=self._average_duration_ms,
                cache_size=len(self._cache),
            )

    # -------------------------------------------------------------------------
    # Reset
    # -------------------------------------------------------------------------

    def reset(self) -> None:
        """Empty cache and history and zero the metrics in one step."""
        with self.lock:
            cleared = len(self._history)
            self._cache.clear()
            self._history.clear()
            self._total_analyses = 0
            self._cache_hits = 0
            self._average_duration_ms = 0.0
        logger.info(f"Analysis store reset ({cleared} history entries cleared)")
