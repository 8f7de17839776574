"""
Data models for the radio relay line (RRL) profile calculator.

This module defines the core data structures used throughout the system.
All models follow strict separation of concerns: path geometry, terrain
elevations and radio calculations are kept separate.

All distances and heights are in meters.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Any


class ErrorCode(Enum):
    """Error codes reported by the calculation pipeline."""
    VALIDATION_ERROR = "VALIDATION_ERROR"  # Bad input shape or range
    ELEVATION_ERROR = "ELEVATION_ERROR"  # All terrain providers exhausted
    CALCULATION_ERROR = "CALCULATION_ERROR"  # Internal invariant violated
    INTERNAL_ERROR = "INTERNAL_ERROR"  # Anything else


class RrlError(Exception):
    """Base class for errors raised by the profile pipeline."""
    code = ErrorCode.INTERNAL_ERROR


class InputValidationError(RrlError):
    """Raised when request input fails validation."""
    code = ErrorCode.VALIDATION_ERROR


class ElevationError(RrlError):
    """Raised when no elevation provider could resolve the whole path."""
    code = ErrorCode.ELEVATION_ERROR


class CalculationError(RrlError):
    """Raised when path geometry or point/elevation sequences are inconsistent."""
    code = ErrorCode.CALCULATION_ERROR


@dataclass(frozen=True)
class Coordinate:
    """Geographic site coordinate supplied by the caller."""
    lat: float  # degrees, -90..90
    lon: float  # degrees, -180..180
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"lat": self.lat, "lon": self.lon}
        if self.name is not None:
            data["name"] = self.name
        return data


@dataclass(frozen=True)
class RrlProfileInput:
    """
    Validated calculation input.

    Constructed only by the input validator (or tests); the engine
    assumes every range rule already holds.
    """
    a: Coordinate
    b: Coordinate
    antenna_a: float  # antenna height above ground at A
    antenna_b: float  # antenna height above ground at B
    freq_ghz: float
    k_factor: float  # effective Earth radius multiplier
    step_meters: float  # sampling step along the path

    def to_dict(self) -> Dict[str, Any]:
        return {
            "a": self.a.to_dict(),
            "b": self.b.to_dict(),
            "antennaA": self.antenna_a,
            "antennaB": self.antenna_b,
            "freqGHz": self.freq_ghz,
            "kFactor": self.k_factor,
            "stepMeters": self.step_meters,
        }


@dataclass
class ProfilePoint:
    """Sampled point along the great-circle path."""
    index: int  # 0-based position along the path
    lat: float
    lon: float
    distance_meters: float  # distance from A


@dataclass
class ElevationPoint:
    """Terrain elevation for a sampled point (meters above sea level)."""
    lat: float
    lon: float
    elevation: float


@dataclass
class RrlProfileSample:
    """
    Computed radio geometry for one sampled point.

    All numeric fields except lat/lon are rounded to 3 decimals.
    """
    index: int
    lat: float
    lon: float
    distance_meters: float
    terrain: float  # raw terrain elevation
    bulge: float  # Earth-bulge offset
    terrain_eff: float  # terrain + bulge
    los: float  # line-of-sight height
    fresnel_r1: float  # first Fresnel zone radius
    clearance: float  # los - terrain_eff
    clearance60: float  # fresnel_limit_line - terrain_eff
    fresnel_limit_line: float  # los - 0.6 * fresnel_r1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "lat": self.lat,
            "lon": self.lon,
            "distanceMeters": self.distance_meters,
            "terrain": self.terrain,
            "bulge": self.bulge,
            "terrainEff": self.terrain_eff,
            "los": self.los,
            "fresnelR1": self.fresnel_r1,
            "clearance": self.clearance,
            "clearance60": self.clearance60,
            "fresnelLimitLine": self.fresnel_limit_line,
        }


@dataclass
class CriticalPoint:
    """Sample with the worst 60%-Fresnel clearance."""
    index: int
    distance_meters: float
    lat: float
    lon: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "distanceMeters": self.distance_meters,
            "lat": self.lat,
            "lon": self.lon,
        }


@dataclass
class RecommendedLift:
    """
    Antenna height increase needed to clear 60% of the first Fresnel zone.

    Three independent strategies: raise only A, raise only B, or raise
    both antennas by the same amount.
    """
    only_a: float = 0.0
    only_b: float = 0.0
    both_equal: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "onlyA": self.only_a,
            "onlyB": self.only_b,
            "bothEqual": self.both_equal,
        }


@dataclass
class RrlProfileSummary:
    """Aggregated pass/fail verdict for the whole path."""
    distance_meters: float
    los_ok: bool
    fresnel_ok: bool
    min_clearance: float
    min_clearance60: float
    critical_point: CriticalPoint
    recommended_lift: RecommendedLift

    def to_dict(self) -> Dict[str, Any]:
        return {
            "distanceMeters": self.distance_meters,
            "losOk": self.los_ok,
            "fresnelOk": self.fresnel_ok,
            "minClearance": self.min_clearance,
            "minClearance60": self.min_clearance60,
            "criticalPoint": self.critical_point.to_dict(),
            "recommendedLift": self.recommended_lift.to_dict(),
        }


@dataclass
class RrlProfileResult:
    """
    Complete profile calculation result.

    elevation_provider is filled in by the orchestration service; it is
    None when the calculator is called directly with known elevations.
    """
    input: RrlProfileInput
    summary: RrlProfileSummary
    samples: List[RrlProfileSample] = field(default_factory=list)
    elevation_provider: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "input": self.input.to_dict(),
            "summary": self.summary.to_dict(),
            "samples": [sample.to_dict() for sample in self.samples],
        }
        if self.elevation_provider is not None:
            data["elevationProvider"] = self.elevation_provider
        return data
