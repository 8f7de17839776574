"""
Profile Service Module.

Runs the RRL profile pipeline on validated input:
sampler -> elevation resolver -> radio-link calculator.
Used by both CLI (main.py) and API (api.py).
"""

import logging
from typing import List, Optional, Sequence, Tuple

from data_models import (
    RrlProfileInput, RrlProfileResult, ProfilePoint, ElevationPoint,
    ElevationError, CalculationError
)
from geodesy import build_profile_points
from elevation_provider import ElevationProvider, create_elevation_providers
from radio_engine import calculate_rrl_profile

logger = logging.getLogger(__name__)

MIN_ROUTE_DISTANCE_METERS = 10.0
ELEVATION_FAILURE_PREFIX = "Failed to fetch the elevation profile."


def resolve_elevations(
    points: Sequence[ProfilePoint],
    providers: Optional[Sequence[ElevationProvider]] = None
) -> Tuple[List[ElevationPoint], str]:
    """
    Resolve terrain elevations through the provider fallback chain.

    Providers are tried sequentially. The first one that resolves ALL
    points wins; any failure abandons that provider entirely (no partial
    recovery, no retry) and moves on to the next.

    Args:
        points: Sampled path points
        providers: Ordered providers (built from environment if omitted)

    Returns:
        Tuple of (elevations, provider_name)

    Raises:
        ElevationError: If every provider failed; the message lists each
            provider's reason
    """
    if providers is None:
        providers = create_elevation_providers()

    errors: List[str] = []

    for provider in providers:
        try:
            logger.info(f"Resolving {len(points)} elevations via {provider.name}")
            elevations = provider.fetch_elevations(points)
            if len(elevations) != len(points):
                raise ValueError(
                    f"returned {len(elevations)} elevations for {len(points)} points"
                )
            logger.info(f"Elevation profile served by {provider.name}")
            return elevations, provider.name
        except Exception as e:
            logger.warning(f"Elevation provider {provider.name} failed: {e}")
            errors.append(f"{provider.name}: {e}")

    raise ElevationError(f"{ELEVATION_FAILURE_PREFIX} {' | '.join(errors)}")


def calculate_rrl_profile_with_elevations(
    input: RrlProfileInput,
    providers: Optional[Sequence[ElevationProvider]] = None
) -> RrlProfileResult:
    """
    Calculate the radio profile for a validated input, fetching terrain.

    Args:
        input: Validated calculation input
        providers: Ordered elevation providers (built from environment if omitted)

    Returns:
        RrlProfileResult with elevation_provider set

    Raises:
        CalculationError: Invalid or too short path, inconsistent data
        ElevationError: All elevation providers failed
    """
    points, distance_meters = build_profile_points(input.a, input.b, input.step_meters)

    if distance_meters < MIN_ROUTE_DISTANCE_METERS:
        raise CalculationError(
            f"Path is too short ({distance_meters:.2f} m). "
            f"Minimum: {MIN_ROUTE_DISTANCE_METERS:.0f} m."
        )

    logger.info(
        f"Profile {input.a.name or 'A'} -> {input.b.name or 'B'}: "
        f"{distance_meters:.1f} m, {len(points)} samples"
    )

    elevations, provider_name = resolve_elevations(points, providers)
    result = calculate_rrl_profile(input, points, elevations, distance_meters)
    result.elevation_provider = provider_name

    logger.info(
        f"Profile calculated: losOk={result.summary.los_ok}, "
        f"fresnelOk={result.summary.fresnel_ok}, "
        f"minClearance60={result.summary.min_clearance60:.2f} m"
    )
    return result
