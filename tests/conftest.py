"""
Pytest configuration for Echo Chamber tests.

This module provides:
1. A throwaway log file, set before the package is imported
2. Fresh analyzer instances per test
3. Sample sequences for each pattern
"""

import os
import tempfile
from pathlib import Path

# Hosts configure logging at import time; keep it out of the working tree
_LOG_DIR = Path(tempfile.mkdtemp(prefix="echo_chamber_tests_"))
os.environ.setdefault("ECHO_CHAMBER_LOG_FILE", str(_LOG_DIR / "echo-chamber.log"))

import pytest  # noqa: E402

from echo_chamber.analysis_store import AnalysisStore  # noqa: E402
from echo_chamber.sequence_analyzer import SequenceAnalyzer  # noqa: E402


# -----------------------------------------------------------------------------
# Common Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def analyzer():
    """A fresh analyzer with its own empty store."""
    return SequenceAnalyzer()


@pytest.fixture
def store():
    """A fresh, empty analysis store."""
    return AnalysisStore()


@pytest.fixture
def sample_sequences():
    """One representative sequence per pattern."""
    return {
        "arithmetic": [3, 6, 9, 12],
        "geometric": [2, 4, 8, 16],
        "fibonacci": [1, 1, 2, 3, 5, 8],
        "polynomial": [1, 4, 9, 16, 25],
        "negative": [20, 15, 10, 5, 0],
        "unknown": [1, 5, 2, 8, 3, 9, 1],
    }
