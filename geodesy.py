"""
Geodesic Sampler Module.

Samples a great-circle path between two sites at a roughly uniform step.

Algorithm:
1. Compute great-circle (haversine) distance A -> B
2. Segment count = max(2, ceil(distance / step)), so at least 3 points
3. Walk the arc at uniform distance increments
4. Pin the last point to B exactly (coordinates and distance)

Also provides degree/minute/second helpers used for coordinate entry.
"""

import math
import re
from typing import List, Tuple

from data_models import Coordinate, ProfilePoint, CalculationError

# Mean Earth radius used for path distances (meters)
EARTH_RADIUS_METERS = 6371008.8
MIN_SEGMENT_COUNT = 2

_DMS_PATTERN = re.compile(
    r"^\s*(?P<sign>[-+])?(?P<deg>\d+(?:\.\d+)?)"
    r"(?:[:°\s]\s*(?P<min>\d+(?:\.\d+)?))?"
    r"(?:[:'′\s]\s*(?P<sec>\d+(?:\.\d+)?))?"
    r"[\"″]?\s*(?P<hem>[NSEWnsew])?\s*$"
)


def calculate_distance_meters(a: Coordinate, b: Coordinate) -> float:
    """
    Great-circle distance between two coordinates using the haversine formula.

    Returns:
        Distance in meters
    """
    lat1, lon1, lat2, lon2 = map(math.radians, [a.lat, a.lon, b.lat, b.lon])

    dlat = lat2 - lat1
    dlon = lon2 - lon1
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

    return c * EARTH_RADIUS_METERS


def intermediate_point(a: Coordinate, b: Coordinate, fraction: float) -> Tuple[float, float]:
    """
    Point at a fraction of the great-circle arc from A to B.

    Args:
        a: Start coordinate
        b: End coordinate
        fraction: 0.0 (at A) .. 1.0 (at B)

    Returns:
        Tuple of (lat, lon) in degrees
    """
    lat1, lon1, lat2, lon2 = map(math.radians, [a.lat, a.lon, b.lat, b.lon])
    delta = calculate_distance_meters(a, b) / EARTH_RADIUS_METERS
    sin_delta = math.sin(delta)

    if sin_delta == 0.0:
        # Coincident endpoints: arc is undefined, interpolate linearly
        return (
            a.lat + fraction * (b.lat - a.lat),
            a.lon + fraction * (b.lon - a.lon),
        )

    wa = math.sin((1 - fraction) * delta) / sin_delta
    wb = math.sin(fraction * delta) / sin_delta

    x = wa * math.cos(lat1) * math.cos(lon1) + wb * math.cos(lat2) * math.cos(lon2)
    y = wa * math.cos(lat1) * math.sin(lon1) + wb * math.cos(lat2) * math.sin(lon2)
    z = wa * math.sin(lat1) + wb * math.sin(lat2)

    lat = math.atan2(z, math.sqrt(x * x + y * y))
    lon = math.atan2(y, x)

    return math.degrees(lat), math.degrees(lon)


def build_profile_points(
    a: Coordinate,
    b: Coordinate,
    step_meters: float
) -> Tuple[List[ProfilePoint], float]:
    """
    Sample the great-circle path between A and B.

    Args:
        a: Site A
        b: Site B
        step_meters: Target spacing between samples

    Returns:
        Tuple of (points, distance_meters). The first point is A at
        distance 0, the last point is B at exactly distance_meters.

    Raises:
        CalculationError: If the path length is not finite or not positive
    """
    distance_meters = calculate_distance_meters(a, b)

    if not math.isfinite(distance_meters) or distance_meters <= 0:
        raise CalculationError("Invalid path length.")

    segments = max(MIN_SEGMENT_COUNT, math.ceil(distance_meters / step_meters))
    segment_length = distance_meters / segments

    points: List[ProfilePoint] = []
    for index in range(segments + 1):
        distance = min(index * segment_length, distance_meters)
        lat, lon = intermediate_point(a, b, distance / distance_meters)
        points.append(ProfilePoint(
            index=index,
            lat=lat,
            lon=lon,
            distance_meters=distance,
        ))

    # Endpoint fidelity: B anchors the antenna-B line of sight
    points[-1] = ProfilePoint(
        index=len(points) - 1,
        lat=b.lat,
        lon=b.lon,
        distance_meters=distance_meters,
    )

    return points, distance_meters


def decimal_to_dms(value: float, is_lat: bool) -> Tuple[int, int, float, str]:
    """
    Convert decimal degrees to (degrees, minutes, seconds, hemisphere).

    Seconds are rounded to 4 decimals.
    """
    magnitude = abs(value)
    degrees = int(math.floor(magnitude))
    remainder = (magnitude - degrees) * 60
    minutes = int(math.floor(remainder))
    seconds = round((remainder - minutes) * 60, 4)

    if is_lat:
        hemisphere = "S" if value < 0 else "N"
    else:
        hemisphere = "W" if value < 0 else "E"

    return degrees, minutes, seconds, hemisphere


def dms_to_decimal(degrees: float, minutes: float, seconds: float, hemisphere: str) -> float:
    """Convert degrees/minutes/seconds plus hemisphere letter to decimal degrees."""
    value = degrees + minutes / 60 + seconds / 3600
    sign = -1 if hemisphere.upper() in ("S", "W") else 1
    return sign * value


def parse_coordinate(text: str, is_lat: bool) -> float:
    """
    Parse a latitude or longitude typed as decimal or DMS text.

    Accepted forms: "55.7558", "-37.5", "55:45:20.88N", "55 45 20.88 N",
    "55°45'20.88\"N".

    Raises:
        ValueError: If the text cannot be parsed or the hemisphere letter
            does not match the axis
    """
    match = _DMS_PATTERN.match(text)
    if not match:
        raise ValueError(f"Cannot parse coordinate: {text!r}")

    hemisphere = (match.group("hem") or "").upper()
    allowed = ("N", "S") if is_lat else ("E", "W")
    if hemisphere and hemisphere not in allowed:
        raise ValueError(f"Hemisphere {hemisphere} is not valid for {'latitude' if is_lat else 'longitude'}")

    degrees = float(match.group("deg"))
    minutes = float(match.group("min") or 0.0)
    seconds = float(match.group("sec") or 0.0)
    if minutes >= 60 or seconds >= 60:
        raise ValueError(f"Minutes and seconds must be below 60: {text!r}")

    if match.group("sign") == "-":
        hemisphere = "S" if is_lat else "W"

    return dms_to_decimal(degrees, minutes, seconds, hemisphere or ("N" if is_lat else "E"))
