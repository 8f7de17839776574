"""
Open-Meteo Elevation Provider.

Wire contract:
    GET {base}?latitude=lat,lat,...&longitude=lon,lon,...
    -> {"elevation": [number, ...]}  (positionally aligned with the request)
"""

import logging
from typing import List, Optional, Sequence

from data_models import ElevationPoint, ProfilePoint
from elevation_provider.base import (
    ElevationProvider, ElevationProviderError, chunk_points, is_valid_elevation
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.open-meteo.com/v1/elevation"


class OpenMeteoElevationProvider(ElevationProvider):
    """Elevation provider backed by the Open-Meteo elevation API (Copernicus 90 m DEM)."""

    name = "openmeteo"

    def __init__(self, base_url: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.base_url = base_url or DEFAULT_BASE_URL

    def fetch_elevations(self, points: Sequence[ProfilePoint]) -> List[ElevationPoint]:
        results: List[ElevationPoint] = []

        for chunk in chunk_points(points, self.batch_size):
            params = {
                "latitude": ",".join(str(point.lat) for point in chunk),
                "longitude": ",".join(str(point.lon) for point in chunk),
            }
            payload = self._get_json(self.base_url, params)

            elevations = payload.get("elevation") if isinstance(payload, dict) else None
            if not isinstance(elevations, list) or len(elevations) != len(chunk):
                raise ElevationProviderError("Open-Meteo returned an invalid elevation set.")

            for point, elevation in zip(chunk, elevations):
                if not is_valid_elevation(elevation):
                    raise ElevationProviderError("Open-Meteo returned a NaN/empty elevation value.")

                results.append(ElevationPoint(lat=point.lat, lon=point.lon, elevation=float(elevation)))

        logger.info(f"Open-Meteo: resolved {len(results)} elevations")
        return results
