"""
Request models for the RRL profile API.

The validator accepts an arbitrary payload and returns either a fully
populated request or ONE human-readable message (first failing rule wins).
"""

from typing import Annotated, Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, StringConstraints, model_validator
from pydantic_core import PydanticCustomError

from data_models import Coordinate, RrlProfileInput

MAX_STEP_METERS = 1000.0
MAX_NAME_LENGTH = 120

INVALID_INPUT_MESSAGE = "Invalid input data."
IDENTICAL_POINTS_MESSAGE = "Points A and B coincide: point B must have different coordinates."

PointName = Annotated[str, StringConstraints(strip_whitespace=True, max_length=MAX_NAME_LENGTH)]


def _finite_number(**constraints) -> Any:
    """Real number field: rejects strings, booleans, NaN and infinities."""
    return Field(..., strict=True, allow_inf_nan=False, **constraints)


class CoordinateModel(BaseModel):
    """Geographic coordinate of a link site."""
    name: Optional[PointName] = Field(None, description="Optional site name")
    lat: float = _finite_number(ge=-90, le=90, description="Latitude in degrees")
    lon: float = _finite_number(ge=-180, le=180, description="Longitude in degrees")

    def to_coordinate(self) -> Coordinate:
        return Coordinate(lat=self.lat, lon=self.lon, name=self.name)


def _position(point: Any) -> Optional[Tuple[Any, Any]]:
    if isinstance(point, CoordinateModel):
        return point.lat, point.lon
    if isinstance(point, dict) and "lat" in point and "lon" in point:
        return point["lat"], point["lon"]
    return None


class RrlProfileCalculateRequest(BaseModel):
    """Request model for the profile calculation endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    a: CoordinateModel
    b: CoordinateModel
    antenna_a: float = _finite_number(alias="antennaA", ge=0, description="Antenna A height AGL, m")
    antenna_b: float = _finite_number(alias="antennaB", ge=0, description="Antenna B height AGL, m")
    freq_ghz: float = _finite_number(alias="freqGHz", gt=0, description="Link frequency, GHz")
    k_factor: float = _finite_number(alias="kFactor", gt=0, description="Effective Earth radius factor")
    step_meters: float = _finite_number(
        alias="stepMeters", gt=0, le=MAX_STEP_METERS, description="Sampling step, m"
    )

    @model_validator(mode="before")
    @classmethod
    def check_distinct_points(cls, data: Any) -> Any:
        """Identical A/B is a zero-length path; reported before any range rule."""
        if isinstance(data, dict):
            position_a = _position(data.get("a"))
            position_b = _position(data.get("b"))
            if position_a is not None and position_a == position_b:
                raise PydanticCustomError("identical_points", IDENTICAL_POINTS_MESSAGE)
        return data

    def to_input(self) -> RrlProfileInput:
        """Convert to the engine input dataclass."""
        return RrlProfileInput(
            a=self.a.to_coordinate(),
            b=self.b.to_coordinate(),
            antenna_a=self.antenna_a,
            antenna_b=self.antenna_b,
            freq_ghz=self.freq_ghz,
            k_factor=self.k_factor,
            step_meters=self.step_meters,
        )


def format_first_error(exc: ValidationError) -> str:
    """Render the first validation error as 'field -> path: message'."""
    errors = exc.errors()
    if not errors:
        return INVALID_INPUT_MESSAGE

    error = errors[0]
    field = " -> ".join(str(loc) for loc in error["loc"])
    return f"{field}: {error['msg']}" if field else error["msg"]


def validate_rrl_profile_input(
    payload: Any
) -> Tuple[Optional[RrlProfileCalculateRequest], Optional[str]]:
    """
    Validate a raw calculation payload.

    Args:
        payload: Anything decoded from the request body (may be None)

    Returns:
        Tuple of (request, None) on success or (None, message) on failure
    """
    if not isinstance(payload, dict):
        return None, INVALID_INPUT_MESSAGE

    try:
        return RrlProfileCalculateRequest.model_validate(payload), None
    except ValidationError as e:
        return None, format_first_error(e)
