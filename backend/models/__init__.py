"""
Backend models package.
"""

from backend.models.request import RrlProfileCalculateRequest, validate_rrl_profile_input
from backend.models.response import RrlProfileCalculateResponse, ApiErrorPayload

__all__ = [
    "RrlProfileCalculateRequest",
    "validate_rrl_profile_input",
    "RrlProfileCalculateResponse",
    "ApiErrorPayload",
]
