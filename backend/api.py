"""
FastAPI Backend for the RRL Profile Calculator.

Provides HTTP API access to the profile calculation pipeline.
CLI (main.py) continues to work independently.
"""

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import sys
import os
import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

# Add parent directory to path for imports
parent_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if parent_dir not in sys.path:
    sys.path.insert(0, parent_dir)

from data_models import ErrorCode, RrlError
from backend.models.request import validate_rrl_profile_input
from backend.models.response import RrlProfileCalculateResponse, ApiErrorPayload, ApiError
from backend.services.profile_service import calculate_rrl_profile_with_elevations

# ============================================================================
# LOGGING: console (alongside uvicorn output) + rotating file
# ============================================================================
console_handler = logging.StreamHandler(sys.stdout)
console_handler.setLevel(logging.INFO)
console_handler.setFormatter(logging.Formatter(
    '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%H:%M:%S'
))

log_dir = os.getenv("RRL_LOG_DIR") or os.path.join(parent_dir, "logs")
os.makedirs(log_dir, exist_ok=True)
log_file = os.path.join(log_dir, "backend.log")

# 10MB per file, keep 5 backups
file_handler = RotatingFileHandler(log_file, maxBytes=10*1024*1024, backupCount=5)
file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))

root_logger = logging.getLogger()
root_logger.setLevel(logging.INFO)
if not any(getattr(h, "baseFilename", None) == file_handler.baseFilename for h in root_logger.handlers):
    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

logger = logging.getLogger(__name__)
logger.info(f"RRL profile API starting - logging to console and {log_file}")

# HTTP status per error code
ERROR_STATUS = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.ELEVATION_ERROR: 502,
    ErrorCode.CALCULATION_ERROR: 400,
    ErrorCode.INTERNAL_ERROR: 500,
}

# User-facing messages; exception text goes to details
ERROR_MESSAGES = {
    ErrorCode.ELEVATION_ERROR: "Failed to fetch terrain elevations.",
    ErrorCode.CALCULATION_ERROR: "Engineering calculation failed.",
    ErrorCode.INTERNAL_ERROR: "Internal service error.",
}

app = FastAPI(
    title="RRL Profile Calculator API",
    description="Microwave link line-of-sight and Fresnel clearance profiles",
    version="1.0.0"
)

# Enable CORS for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:3001",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:3001",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def build_error(code: ErrorCode, message: str, details: Optional[str] = None) -> JSONResponse:
    """Build the {error: {code, message, details}} response."""
    payload = ApiErrorPayload(error=ApiError(code=code.value, message=message, details=details))
    return JSONResponse(
        status_code=ERROR_STATUS[code],
        content=payload.model_dump(exclude_none=True),
    )


@app.exception_handler(RrlError)
async def rrl_error_handler(request: Request, exc: RrlError):
    """Map pipeline errors to the API error shape."""
    if exc.code == ErrorCode.VALIDATION_ERROR:
        return build_error(exc.code, str(exc))
    return build_error(exc.code, ERROR_MESSAGES[exc.code], str(exc))


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception):
    """Catch-all: log with traceback and report INTERNAL_ERROR."""
    logger.exception(f"Unhandled error in {request.url.path}: {exc}")
    return build_error(
        ErrorCode.INTERNAL_ERROR,
        ERROR_MESSAGES[ErrorCode.INTERNAL_ERROR],
        str(exc) or exc.__class__.__name__,
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "RRL Profile Calculator API",
        "version": "1.0.0",
        "endpoints": {
            "POST /rrl-profile/calculate": "Calculate line-of-sight and Fresnel profile",
            "GET /health": "Health check"
        }
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post(
    "/rrl-profile/calculate",
    response_model=RrlProfileCalculateResponse,
    responses={400: {"model": ApiErrorPayload}, 500: {"model": ApiErrorPayload}, 502: {"model": ApiErrorPayload}},
)
async def calculate_profile(request: Request):
    """
    Calculate an RRL profile between two sites.

    The body is validated here rather than by FastAPI so that exactly one
    message is reported. Terrain lookup is blocking and runs in the threadpool.
    """
    try:
        payload = await request.json()
    except ValueError:
        payload = None

    validated, message = validate_rrl_profile_input(payload)
    if validated is None:
        logger.info(f"Rejected profile request: {message}")
        return build_error(ErrorCode.VALIDATION_ERROR, message)

    result = await run_in_threadpool(calculate_rrl_profile_with_elevations, validated.to_input())
    return result.to_dict()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
