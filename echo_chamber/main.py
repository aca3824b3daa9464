"""
Echo Chamber Web Server - FastAPI Application

Thin HTTP host around one SequenceAnalyzer instance. Every route only
calls the engine and renders its output.

Endpoints:
- GET    /                 -> Service info
- GET    /health           -> Status and metrics
- POST   /api/analyze      -> Analyze one sequence
- POST   /api/compare      -> Compare two sequences
- GET    /api/history      -> Successful analyses, oldest first
- DELETE /api/history      -> Clear history, cache and metrics
- GET    /api/metrics      -> Performance counters
- GET    /api/logs         -> Tail of the log file
- DELETE /api/logs         -> Truncate the log file
- GET    /api/presets      -> Preset example sequences

Usage:
    uvicorn echo_chamber.main:app --port 3000
"""

import logging
import os
from datetime import datetime
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__, SERVICE_NAME, SERVICE_DESCRIPTION
from .logging_config import setup_logging, read_log_tail, clear_log, DEFAULT_TAIL_LINES
from .presets import load_presets
from .sequence_analyzer import SequenceAnalyzer
from .sequence_model import history_to_dicts

# -----------------------------------------------------------------------------
# Logging Configuration
# -----------------------------------------------------------------------------
setup_logging()
logger = logging.getLogger("echo_chamber")

# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------
HOST = os.getenv("ECHO_CHAMBER_HOST", "127.0.0.1")
PORT = int(os.getenv("ECHO_CHAMBER_PORT", "3000"))
MAX_SEQUENCE_LENGTH = int(os.getenv("ECHO_CHAMBER_MAX_SEQUENCE_LENGTH", "10000"))

# Engine instance owned by this host
analyzer = SequenceAnalyzer()


# -----------------------------------------------------------------------------
# Request Models
# -----------------------------------------------------------------------------
class AnalyzeRequest(BaseModel):
    """Body of POST /api/analyze. Element checks are left to the engine."""
    sequence: Any = None


class CompareRequest(BaseModel):
    """Body of POST /api/compare."""
    sequence1: Any = None
    sequence2: Any = None


# -----------------------------------------------------------------------------
# FastAPI Application
# -----------------------------------------------------------------------------
app = FastAPI(
    title=f"{SERVICE_NAME} - Sequence Pattern Engine",
    description=SERVICE_DESCRIPTION,
    version=__version__,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request line."""
    logger.info(f"{request.method} {request.url.path}")
    return await call_next(request)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors as {success: false, error: ...}."""
    if exc.status_code == 404:
        logger.warning(f"Route not found: {request.url.path}")
        detail = "Route not found"
    else:
        detail = exc.detail
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": detail},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Last-resort handler for anything the endpoints did not expect."""
    logger.error(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error"},
    )


def _check_length(sequence: Any) -> None:
    """Reject oversized input before it reaches the engine."""
    if isinstance(sequence, list) and len(sequence) > MAX_SEQUENCE_LENGTH:
        raise HTTPException(
            status_code=413,
            detail=f"Sequence too long: {len(sequence)} > {MAX_SEQUENCE_LENGTH} elements",
        )


# -----------------------------------------------------------------------------
# API Endpoints - Health
# -----------------------------------------------------------------------------
@app.get("/")
async def root():
    """Service info."""
    return {
        "service": SERVICE_NAME,
        "description": SERVICE_DESCRIPTION,
        "status": "running",
        "version": __version__,
    }


@app.get("/health")
def health():
    """Status with current metrics."""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "metrics": analyzer.get_metrics().to_dict(),
    }


# -----------------------------------------------------------------------------
# API Endpoints - Analysis
# -----------------------------------------------------------------------------
@app.post("/api/analyze")
def analyze_endpoint(request: AnalyzeRequest):
    """
    Analyze a sequence and return the detected pattern and predictions.

    Invalid sequences return 400 with the failed result as body.
    """
    _check_length(request.sequence)

    result = analyzer.analyze(request.sequence)
    if not result.success:
        logger.warning(f"Sequence analysis failed: {result.error_kind}")
        return JSONResponse(status_code=400, content=result.to_dict())

    logger.info(f"Sequence analyzed: {result.pattern} (length {result.sequence_length})")
    return result.to_dict()


@app.post("/api/compare")
def compare_endpoint(request: CompareRequest):
    """Compare two sequences. Both must be lists."""
    if not isinstance(request.sequence1, list) or not isinstance(request.sequence2, list):
        raise HTTPException(status_code=400, detail="Both sequences must be arrays of numbers")
    _check_length(request.sequence1)
    _check_length(request.sequence2)

    comparison = analyzer.compare(request.sequence1, request.sequence2)
    return {"success": True, **comparison.to_dict()}


# -----------------------------------------------------------------------------
# API Endpoints - History & Metrics
# -----------------------------------------------------------------------------
@app.get("/api/history")
def history_endpoint(limit: Optional[int] = None):
    """
    Analysis history, oldest first.

    Query parameters:
    - limit: return only the most recent N entries
    """
    history = analyzer.get_history()
    if limit is not None:
        if limit < 0:
            raise HTTPException(status_code=400, detail="limit must be >= 0")
        history = history[-limit:] if limit else []
    return {
        "success": True,
        "count": len(history),
        "history": history_to_dicts(history),
    }


@app.delete("/api/history")
def clear_history_endpoint():
    """Clear history, cache and metrics."""
    analyzer.clear()
    logger.info("History cleared")
    return {"success": True, "message": "All history and cache cleared"}


@app.get("/api/metrics")
def metrics_endpoint():
    """Performance counters."""
    metrics = analyzer.get_metrics()
    return {
        "success": True,
        "metrics": metrics.to_dict(),
        "cache_hit_rate": metrics.cache_hit_rate,
    }


# -----------------------------------------------------------------------------
# API Endpoints - Logs & Presets
# -----------------------------------------------------------------------------
@app.get("/api/logs")
def logs_endpoint(lines: int = DEFAULT_TAIL_LINES):
    """Last N lines of the log file."""
    return {"success": True, "logs": read_log_tail(lines)}


@app.delete("/api/logs")
def clear_logs_endpoint():
    """Truncate the log file."""
    if not clear_log():
        raise HTTPException(status_code=500, detail="Failed to clear log file")
    return {"success": True, "message": "Log file cleared"}


@app.get("/api/presets")
def presets_endpoint():
    """Preset example sequences."""
    presets = load_presets()
    return {"success": True, "presets": [p.to_dict() for p in presets]}


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn
    logger.info(f"{SERVICE_NAME} web server starting on http://{HOST}:{PORT}")
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    run()
