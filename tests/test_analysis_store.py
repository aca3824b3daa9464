"""
Unit Tests for Analysis Store

Test coverage for:
- Canonical cache keys
- Cache writes (successful results only)
- Append-only history
- Running mean of analysis durations
- reset()
"""

import math

import pytest

from echo_chamber.analysis_store import canonical_key
from echo_chamber.sequence_model import AnalysisResult


def make_result(success=True, sequence=(1, 2)):
    if success:
        return AnalysisResult(
            success=True, sequence=sequence, timestamp="2024-01-01T00:00:00",
            analysis_duration_ms=1.0, pattern="arithmetic", confidence=100,
            predicted_next=(3,),
        )
    return AnalysisResult(
        success=False, sequence=sequence, timestamp="2024-01-01T00:00:00",
        analysis_duration_ms=1.0, error_message="too faint", error_kind="too_short",
    )


class TestCanonicalKey:

    def test_value_and_order_sensitive(self):
        assert canonical_key([1, 2, 3]) != canonical_key([3, 2, 1])
        assert canonical_key([1, 2, 3]) != canonical_key([1, 2, 4])

    def test_integral_floats_normalised(self):
        assert canonical_key([2.0, 4.0]) == canonical_key([2, 4])
        assert canonical_key([-0.0, 1]) == canonical_key([0, 1])

    def test_list_and_tuple_share_key(self):
        assert canonical_key((1, 2)) == canonical_key([1, 2])

    def test_fractional_values_kept(self):
        assert canonical_key([0.5, 1.5]) == "[0.5,1.5]"

    @pytest.mark.parametrize("sequence", [None, "12", [1, "x"], [1, math.nan], [True, 2]])
    def test_uncacheable_input(self, sequence):
        assert canonical_key(sequence) is None

    def test_short_sequences_still_have_a_key(self):
        assert canonical_key([]) == "[]"


class TestCache:

    def test_round_trip(self, store):
        result = make_result()
        store.cache_result("[1,2]", result)
        assert store.get_cached("[1,2]") is result
        assert store.cache_size == 1

    def test_miss(self, store):
        assert store.get_cached("[9]") is None
        assert store.get_cached(None) is None

    def test_failed_results_not_cached(self, store):
        store.cache_result("[1]", make_result(success=False, sequence=(1,)))
        assert store.cache_size == 0

    def test_none_key_not_cached(self, store):
        store.cache_result(None, make_result())
        assert store.cache_size == 0


class TestHistory:

    def test_append_and_copy(self, store):
        first, second = make_result(sequence=(1, 2)), make_result(sequence=(2, 3))
        store.append_history(first)
        store.append_history(second)

        history = store.history()
        assert history == [first, second]
        history.pop()
        assert len(store.history()) == 2

    def test_failed_results_skipped(self, store):
        store.append_history(make_result(success=False))
        assert store.history() == []


class TestMetrics:

    def test_running_mean(self, store):
        store.record_analysis(2.0)
        store.record_analysis(4.0)
        store.record_analysis(6.0, cache_hit=True)

        snapshot = store.snapshot()
        assert snapshot.total_analyses == 3
        assert snapshot.cache_hits == 1
        assert snapshot.average_analysis_duration_ms == pytest.approx(4.0)

    def test_empty_snapshot(self, store):
        snapshot = store.snapshot()
        assert snapshot.total_analyses == 0
        assert snapshot.average_analysis_duration_ms == 0.0
        assert snapshot.cache_size == 0

    def test_reset(self, store):
        store.cache_result("[1,2]", make_result())
        store.append_history(make_result())
        store.record_analysis(3.0, cache_hit=True)

        store.reset()

        snapshot = store.snapshot()
        assert store.history() == []
        assert snapshot.total_analyses == 0
        assert snapshot.cache_hits == 0
        assert snapshot.cache_size == 0
        assert snapshot.average_analysis_duration_ms == 0.0
