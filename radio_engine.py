"""
Radio-Link Calculation Engine.

Combines sampled path geometry and terrain elevations into a microwave
line-of-sight profile:
- Line-of-sight height between antenna A and antenna B
- Earth-bulge correction for the effective (k-scaled) Earth radius
- First Fresnel zone radius and the 60% clearance limit line
- Pass/fail summary, critical point and recommended antenna lift

CRITICAL PRINCIPLES:
- Pure function of its inputs (deterministic, no I/O)
- Numeric outputs rounded to 3 decimals (round half up)
- Inconsistent inputs are a hard failure, never defaulted
"""

import math
from typing import List, Sequence

from data_models import (
    RrlProfileInput, ProfilePoint, ElevationPoint, RrlProfileSample,
    RrlProfileSummary, RrlProfileResult, CriticalPoint, RecommendedLift,
    CalculationError
)

SPEED_OF_LIGHT = 299_792_458.0  # m/s
EARTH_RADIUS_METERS = 6_371_000.0  # radius scaled by k for refraction
FRESNEL_CLEARANCE_RATIO = 0.6
EPS = 1e-9

# Typical k-factor scenarios
K_FACTOR_PRESETS = {
    "standard": 1.33,  # Standard atmosphere (4/3 Earth)
    "neutral": 1.0,  # No refraction
    "subrefraction": 0.67,  # Worst-case sub-refraction
}


def round_to(value: float, digits: int = 3) -> float:
    """Round half up (towards +inf) to the given number of decimals."""
    base = 10 ** digits
    return math.floor(value * base + 0.5) / base


def resolve_recommended_lift(
    samples: Sequence[RrlProfileSample],
    distance_meters: float
) -> RecommendedLift:
    """
    Antenna height increase needed to clear the worst 60%-Fresnel deficit.

    Raising an endpoint raises the line of sight at distance d by
    lift * influence, where influence is 1 - d/D for A and d/D for B.
    Each deficient sample is solved independently and the maximum is
    taken per strategy; raising an endpoint never lowers the line of
    sight anywhere, so that maximum clears every sample.

    Args:
        samples: Computed samples (clearance60 already rounded)
        distance_meters: Total path length

    Returns:
        RecommendedLift (all zero when the path already clears)
    """
    only_a = 0.0
    only_b = 0.0
    both_equal = 0.0

    for sample in samples:
        deficit = max(0.0, -sample.clearance60)
        if deficit <= 0:
            continue

        ratio = sample.distance_meters / distance_meters
        influence_a = 1 - ratio
        influence_b = ratio

        # Endpoint samples have no leverage from the far antenna
        if influence_a > EPS:
            only_a = max(only_a, deficit / influence_a)

        if influence_b > EPS:
            only_b = max(only_b, deficit / influence_b)

        both_equal = max(both_equal, deficit)

    return RecommendedLift(
        only_a=round_to(only_a),
        only_b=round_to(only_b),
        both_equal=round_to(both_equal),
    )


def calculate_rrl_profile(
    input: RrlProfileInput,
    points: Sequence[ProfilePoint],
    elevations: Sequence[ElevationPoint],
    distance_meters: float
) -> RrlProfileResult:
    """
    Compute the radio profile for a sampled path.

    Args:
        input: Validated calculation input (antenna heights, frequency, k)
        points: Sampled path points, first at A, last at B
        elevations: Terrain elevations aligned index-for-index with points
        distance_meters: Total path length

    Returns:
        RrlProfileResult with summary and per-sample geometry

    Raises:
        CalculationError: On fewer than 2 points, a point/elevation count
            mismatch, or a non-positive path length
    """
    if len(points) < 2 or len(elevations) < 2:
        raise CalculationError("Not enough points to calculate the profile.")

    if len(points) != len(elevations):
        raise CalculationError("Path point and elevation counts do not match.")

    if not math.isfinite(distance_meters) or distance_meters <= 0:
        raise CalculationError("Invalid path length.")

    # Absolute antenna heights above sea level
    height_a = elevations[0].elevation + input.antenna_a
    height_b = elevations[-1].elevation + input.antenna_b

    wavelength = SPEED_OF_LIGHT / (input.freq_ghz * 1e9)
    effective_earth_radius = input.k_factor * EARTH_RADIUS_METERS

    samples: List[RrlProfileSample] = []
    for point, elevation in zip(points, elevations):
        terrain = elevation.elevation
        d = point.distance_meters
        remaining = distance_meters - d

        los = height_a + (height_b - height_a) * d / distance_meters
        bulge = d * remaining / (2 * effective_earth_radius)
        terrain_eff = terrain + bulge
        # max() guards the sqrt against -0.0 drift at the far endpoint
        fresnel_r1 = math.sqrt(max(0.0, wavelength * d * remaining / distance_meters))
        fresnel_limit_line = los - FRESNEL_CLEARANCE_RATIO * fresnel_r1
        clearance = los - terrain_eff
        clearance60 = fresnel_limit_line - terrain_eff

        samples.append(RrlProfileSample(
            index=point.index,
            lat=point.lat,
            lon=point.lon,
            distance_meters=round_to(d),
            terrain=round_to(terrain),
            bulge=round_to(bulge),
            terrain_eff=round_to(terrain_eff),
            los=round_to(los),
            fresnel_r1=round_to(fresnel_r1),
            clearance=round_to(clearance),
            clearance60=round_to(clearance60),
            fresnel_limit_line=round_to(fresnel_limit_line),
        ))

    min_clearance = math.inf
    min_clearance60 = math.inf
    critical_index = 0

    for position, sample in enumerate(samples):
        if sample.clearance < min_clearance:
            min_clearance = sample.clearance

        # Strict comparison keeps the first occurrence on ties
        if sample.clearance60 < min_clearance60:
            min_clearance60 = sample.clearance60
            critical_index = position

    critical = samples[critical_index]

    summary = RrlProfileSummary(
        distance_meters=round_to(distance_meters),
        los_ok=min_clearance >= 0,
        fresnel_ok=min_clearance60 >= 0,
        min_clearance=round_to(min_clearance),
        min_clearance60=round_to(min_clearance60),
        critical_point=CriticalPoint(
            index=critical.index,
            distance_meters=critical.distance_meters,
            lat=critical.lat,
            lon=critical.lon,
        ),
        recommended_lift=resolve_recommended_lift(samples, distance_meters),
    )

    return RrlProfileResult(input=input, summary=summary, samples=samples)


def format_profile_report(result: RrlProfileResult, max_rows: int = 20) -> str:
    """
    Format a profile result as a human-readable text report.

    Args:
        result: Calculation result
        max_rows: Maximum number of sample rows to print (0 prints none,
            negative prints all)

    Returns:
        Multi-line report string
    """
    summary = result.summary
    lift = summary.recommended_lift
    critical = summary.critical_point
    name_a = result.input.a.name or "A"
    name_b = result.input.b.name or "B"

    lines = [
        "=" * 72,
        f"RRL PROFILE: {name_a} -> {name_b}",
        "=" * 72,
        f"Path length:          {summary.distance_meters / 1000:.3f} km",
        f"Frequency:            {result.input.freq_ghz:g} GHz",
        f"k-factor:             {result.input.k_factor:g}",
        f"Antennas (AGL):       A {result.input.antenna_a:.2f} m | B {result.input.antenna_b:.2f} m",
    ]
    if result.elevation_provider:
        lines.append(f"Elevation source:     {result.elevation_provider}")

    lines.extend([
        "",
        f"Line of sight:        {'OK' if summary.los_ok else 'BLOCKED'} "
        f"(min clearance {summary.min_clearance:.2f} m)",
        f"Fresnel 60%:          {'OK' if summary.fresnel_ok else 'VIOLATED'} "
        f"(min clearance {summary.min_clearance60:.2f} m)",
        f"Critical point:       #{critical.index} at {critical.distance_meters / 1000:.3f} km "
        f"| lat {critical.lat:.6f} | lon {critical.lon:.6f}",
    ])

    if not summary.fresnel_ok:
        lines.extend([
            "",
            "Recommended antenna lift:",
            f"  Only A:             +{lift.only_a:.2f} m",
            f"  Only B:             +{lift.only_b:.2f} m",
            f"  Both equally:       +{lift.both_equal:.2f} m",
        ])

    samples = result.samples if max_rows < 0 else result.samples[:max_rows]
    if samples:
        lines.extend([
            "",
            f"{'#':>4} {'d, m':>10} {'terrain':>9} {'bulge':>7} {'LOS':>9} "
            f"{'R1':>7} {'clr':>9} {'clr60':>9}",
        ])
        for sample in samples:
            lines.append(
                f"{sample.index:>4} {sample.distance_meters:>10.1f} {sample.terrain:>9.2f} "
                f"{sample.bulge:>7.2f} {sample.los:>9.2f} {sample.fresnel_r1:>7.2f} "
                f"{sample.clearance:>9.2f} {sample.clearance60:>9.2f}"
            )
        hidden = len(result.samples) - len(samples)
        if hidden > 0:
            lines.append(f"... {hidden} more samples")

    return "\n".join(lines)
