"""
Elevation Provider Module.

Terrain elevation sources for the profile calculator, in fallback order.
The provider list is a fallback chain, not a load-balancing pool: at most
one provider serves a request.

Configuration (read once, when the provider list is built):
- ELEVATION_PROVIDER: preferred provider ("opentopodata" default, or "openmeteo")
- OPENTOPODATA_BASE_URL, OPENTOPODATA_DATASET
- OPEN_METEO_BASE_URL
"""

import logging
import os
from typing import List, Optional

from elevation_provider.base import (
    ElevationProvider, ElevationProviderError, chunk_points, fetch_json_with_timeout,
    DEFAULT_TIMEOUT_SECONDS, BATCH_SIZE,
)
from elevation_provider.opentopodata_provider import OpenTopoDataProvider
from elevation_provider.openmeteo_provider import OpenMeteoElevationProvider

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER = "opentopodata"
DEFAULT_PROVIDER_ORDER = ["opentopodata", "openmeteo"]


def resolve_provider_order(preferred: Optional[str] = None) -> List[str]:
    """
    Provider names in the order they should be tried.

    The preferred provider is moved to the front; an unknown name keeps
    the default order.
    """
    selected = (preferred or "").strip().lower() or DEFAULT_PROVIDER
    if selected not in DEFAULT_PROVIDER_ORDER:
        logger.warning(f"Unknown ELEVATION_PROVIDER '{selected}', using default order")
        return list(DEFAULT_PROVIDER_ORDER)

    return [selected] + [name for name in DEFAULT_PROVIDER_ORDER if name != selected]


def create_elevation_providers(preferred: Optional[str] = None) -> List[ElevationProvider]:
    """
    Build the ordered provider list from environment configuration.

    Args:
        preferred: Overrides ELEVATION_PROVIDER when given

    Returns:
        Fresh provider instances, preferred provider first
    """
    if preferred is None:
        preferred = os.getenv("ELEVATION_PROVIDER")

    factories = {
        "opentopodata": lambda: OpenTopoDataProvider(
            base_url=os.getenv("OPENTOPODATA_BASE_URL"),
            dataset=os.getenv("OPENTOPODATA_DATASET"),
        ),
        "openmeteo": lambda: OpenMeteoElevationProvider(
            base_url=os.getenv("OPEN_METEO_BASE_URL"),
        ),
    }

    return [factories[name]() for name in resolve_provider_order(preferred)]


__all__ = [
    'ElevationProvider',
    'ElevationProviderError',
    'OpenTopoDataProvider',
    'OpenMeteoElevationProvider',
    'chunk_points',
    'fetch_json_with_timeout',
    'create_elevation_providers',
    'resolve_provider_order',
    'DEFAULT_TIMEOUT_SECONDS',
    'BATCH_SIZE',
]
