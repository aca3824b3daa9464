"""
Echo Chamber Module

Sequence pattern engine for the Echo Chamber puzzle. Identifies the rule
that generated a finite numeric sequence and extrapolates the next terms.

Core Engine:
- Validator: rejects malformed sequences before detection runs
  * LOCKED enum ValidationErrorKind (not_an_array, too_short, non_numeric)
  * Errors are returned as values, never raised
- Detector: ordered strategies, first match wins
  * Arithmetic -> Geometric -> Fibonacci -> Polynomial
  * LOCKED enum PatternType (EXACTLY 5 values, including UNKNOWN)
  * Fixed confidence per pattern, no statistical inference
- Predictor: next 5 terms per detected pattern
  * Polynomial uses Newton forward-difference extrapolation
- Comparator: similarity score between two analyses
- Store: in-memory cache, history and performance metrics
  * One store per analyzer instance, guarded by a single lock
  * Cache entries never expire, cleared only by explicit reset

Hosts:
- FastAPI server: /api/analyze, /api/compare, /api/history, /api/metrics,
  /api/logs, /api/presets
- httpx API client with retry and backoff for read-only calls
- Interactive CLI menu (local engine or remote server)
"""

__version__ = "1.2.0"

SERVICE_NAME = "Echo Chamber"
SERVICE_DESCRIPTION = "Mystical Sequence Pattern Analysis"
