"""
Response models for the RRL profile API.

Field names are snake_case in Python and camelCase on the wire.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from backend.models.request import RrlProfileCalculateRequest


class CamelModel(BaseModel):
    """Base model serialised with camelCase aliases."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProfileSampleResponse(CamelModel):
    """Single computed sample along the path."""
    index: int
    lat: float
    lon: float
    distance_meters: float = Field(..., description="Distance from A, m")
    terrain: float = Field(..., description="Terrain elevation ASL, m")
    bulge: float = Field(..., description="Earth bulge, m")
    terrain_eff: float = Field(..., description="Terrain + bulge, m")
    los: float = Field(..., description="Line-of-sight height, m")
    fresnel_r1: float = Field(..., description="First Fresnel zone radius, m")
    clearance: float = Field(..., description="LOS minus effective terrain, m")
    clearance60: float = Field(..., description="60% Fresnel line minus effective terrain, m")
    fresnel_limit_line: float = Field(..., description="LOS minus 0.6 R1, m")


class CriticalPointResponse(CamelModel):
    """Sample with the worst 60% Fresnel clearance."""
    index: int
    distance_meters: float
    lat: float
    lon: float


class RecommendedLiftResponse(CamelModel):
    """Antenna lift needed to clear 60% of the first Fresnel zone."""
    only_a: float
    only_b: float
    both_equal: float


class ProfileSummaryResponse(CamelModel):
    """Path verdict."""
    distance_meters: float
    los_ok: bool
    fresnel_ok: bool
    min_clearance: float
    min_clearance60: float
    critical_point: CriticalPointResponse
    recommended_lift: RecommendedLiftResponse


class RrlProfileCalculateResponse(CamelModel):
    """Complete calculation response."""
    input: RrlProfileCalculateRequest
    summary: ProfileSummaryResponse
    samples: List[ProfileSampleResponse]
    elevation_provider: str = Field(..., description="Provider that served the terrain elevations")


class ApiError(BaseModel):
    """Error description."""
    code: Literal["VALIDATION_ERROR", "ELEVATION_ERROR", "CALCULATION_ERROR", "INTERNAL_ERROR"]
    message: str
    details: Optional[str] = None


class ApiErrorPayload(BaseModel):
    """Error response body."""
    error: ApiError
