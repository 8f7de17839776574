"""
Main Entry Point for the RRL Profile Calculator.

This module runs a profile calculation from the command line:
1. Accepts site coordinates and link parameters
2. Validates them with the same rules as the API
3. Samples the path and fetches terrain elevations
4. Outputs line-of-sight / Fresnel verdict and antenna lift

THIS IS A DECISION-SUPPORT TOOL.
FINAL LINK DESIGNS MUST BE CONFIRMED BY A SITE SURVEY.
"""

import argparse
import json
import logging
import sys
from typing import Dict, Any

from data_models import RrlError
from geodesy import parse_coordinate
from radio_engine import K_FACTOR_PRESETS, format_profile_report
from elevation_provider import create_elevation_providers, DEFAULT_PROVIDER_ORDER
from backend.models.request import validate_rrl_profile_input
from backend.services.profile_service import calculate_rrl_profile_with_elevations


def parse_site(text: str, name: str = None) -> Dict[str, Any]:
    """
    Parse a "lat,lon" site argument.

    Each half may be decimal degrees or DMS text (e.g. 55:45:20.9N).
    """
    parts = text.split(",")
    if len(parts) != 2:
        raise ValueError(f"Site must be given as 'lat,lon', got: {text!r}")

    site = {
        "lat": parse_coordinate(parts[0], is_lat=True),
        "lon": parse_coordinate(parts[1], is_lat=False),
    }
    if name:
        site["name"] = name
    return site


def parse_k_factor(value: str) -> float:
    """Parse a k-factor given as a number or a preset name."""
    preset = K_FACTOR_PRESETS.get(value.lower())
    if preset is not None:
        return preset
    try:
        return float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"k-factor must be a number or one of: {', '.join(K_FACTOR_PRESETS)}"
        )


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='RRL (microwave link) line-of-sight and Fresnel zone profile calculator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
This is a DECISION-SUPPORT TOOL.
Terrain data comes from public DEM services and does not include buildings or vegetation.

Example usage:
  python main.py --a 55.7558,37.6173 --b 55.7600,37.6300 --antenna-a 30 --antenna-b 30 --freq-ghz 18
  python main.py --a 52:04:20.9N,113:22:35.1E --b 52:04:27.6N,113:23:08.8E --antenna-a 30 --antenna-b 20 \\
      --freq-ghz 18 --k-factor subrefraction --step 30
        """
    )

    # Required arguments
    parser.add_argument('--a', type=str, required=True, help='Site A as "lat,lon" (decimal or DMS)')
    parser.add_argument('--b', type=str, required=True, help='Site B as "lat,lon" (decimal or DMS)')
    parser.add_argument('--antenna-a', type=float, required=True, help='Antenna A height above ground, m')
    parser.add_argument('--antenna-b', type=float, required=True, help='Antenna B height above ground, m')
    parser.add_argument('--freq-ghz', type=float, required=True, help='Link frequency, GHz')

    # Optional arguments
    parser.add_argument('--name-a', type=str, default=None, help='Site A name')
    parser.add_argument('--name-b', type=str, default=None, help='Site B name')
    parser.add_argument(
        '--k-factor',
        type=parse_k_factor,
        default=K_FACTOR_PRESETS["standard"],
        help=f'Effective Earth radius factor or preset ({", ".join(K_FACTOR_PRESETS)}); default: 1.33'
    )
    parser.add_argument('--step', type=float, default=50.0, help='Sampling step, m (default: 50, max 1000)')
    parser.add_argument(
        '--provider',
        type=str,
        choices=DEFAULT_PROVIDER_ORDER,
        default=None,
        help='Preferred elevation provider (overrides ELEVATION_PROVIDER)'
    )
    parser.add_argument('--json', action='store_true', help='Print the full result as JSON')
    parser.add_argument('--max-rows', type=int, default=20, help='Sample rows in the text report (-1 for all)')
    parser.add_argument('--verbose', action='store_true', help='Log provider activity')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    # Parse inputs
    try:
        payload = {
            "a": parse_site(args.a, args.name_a),
            "b": parse_site(args.b, args.name_b),
            "antennaA": args.antenna_a,
            "antennaB": args.antenna_b,
            "freqGHz": args.freq_ghz,
            "kFactor": args.k_factor,
            "stepMeters": args.step,
        }
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    validated, message = validate_rrl_profile_input(payload)
    if validated is None:
        print(f"VALIDATION_ERROR: {message}", file=sys.stderr)
        sys.exit(1)

    providers = create_elevation_providers(args.provider)

    try:
        result = calculate_rrl_profile_with_elevations(validated.to_input(), providers)
    except RrlError as e:
        print(f"{e.code.value}: {e}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(format_profile_report(result, max_rows=args.max_rows))

    return result


if __name__ == "__main__":
    main()
