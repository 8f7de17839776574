"""
OpenTopoData Elevation Provider.

Wire contract:
    GET {base}/{dataset}?locations=lat,lon|lat,lon|...
    -> {"status": "OK", "results": [{"elevation": ..., "location": {...}}]}

Default dataset is ASTER 30 m global DEM.
"""

import logging
from typing import List, Optional, Sequence
from urllib.parse import quote

from data_models import ElevationPoint, ProfilePoint
from elevation_provider.base import (
    ElevationProvider, ElevationProviderError, chunk_points, is_valid_elevation
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.opentopodata.org/v1"
DEFAULT_DATASET = "aster30m"


class OpenTopoDataProvider(ElevationProvider):
    """Elevation provider backed by an OpenTopoData server."""

    name = "opentopodata"

    def __init__(
        self,
        base_url: Optional[str] = None,
        dataset: Optional[str] = None,
        **kwargs
    ):
        super().__init__(**kwargs)
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.dataset = dataset or DEFAULT_DATASET

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{quote(self.dataset, safe='')}"

    def fetch_elevations(self, points: Sequence[ProfilePoint]) -> List[ElevationPoint]:
        results: List[ElevationPoint] = []

        for chunk in chunk_points(points, self.batch_size):
            locations = "|".join(f"{point.lat},{point.lon}" for point in chunk)
            payload = self._get_json(self.endpoint, {"locations": locations})

            if not isinstance(payload, dict) or payload.get("status") != "OK" \
                    or not isinstance(payload.get("results"), list):
                error = payload.get("error") if isinstance(payload, dict) else None
                raise ElevationProviderError(error or "OpenTopoData returned an invalid response.")

            items = payload["results"]
            if len(items) != len(chunk):
                raise ElevationProviderError(
                    f"OpenTopoData returned an incomplete elevation set "
                    f"({len(items)} of {len(chunk)})."
                )

            for point, item in zip(chunk, items):
                elevation = item.get("elevation") if isinstance(item, dict) else None
                if not is_valid_elevation(elevation):
                    raise ElevationProviderError("OpenTopoData returned a NaN/empty elevation value.")

                results.append(ElevationPoint(lat=point.lat, lon=point.lon, elevation=float(elevation)))

        logger.info(f"OpenTopoData ({self.dataset}): resolved {len(results)} elevations")
        return results
