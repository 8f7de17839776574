"""
Shared test fixtures.

Elevation providers are replaced by in-memory stubs: tests never touch
the network.
"""

import os
import tempfile
from typing import Callable, List, Optional, Sequence
from unittest.mock import MagicMock

import pytest

# Keep the API's rotating log file out of the working tree
os.environ.setdefault("RRL_LOG_DIR", tempfile.mkdtemp(prefix="rrl-logs-"))

from data_models import ElevationPoint, ProfilePoint
from elevation_provider import ElevationProvider


class StubProvider(ElevationProvider):
    """Provider returning canned elevations or raising a canned error."""

    def __init__(
        self,
        name: str,
        elevation: float = 100.0,
        error: Optional[Exception] = None,
        elevation_fn: Optional[Callable[[ProfilePoint], float]] = None,
        drop_last: bool = False,
    ):
        super().__init__(session=MagicMock())
        self.name = name
        self.elevation = elevation
        self.error = error
        self.elevation_fn = elevation_fn
        self.drop_last = drop_last
        self.calls = 0

    def fetch_elevations(self, points: Sequence[ProfilePoint]) -> List[ElevationPoint]:
        self.calls += 1
        if self.error is not None:
            raise self.error

        results = [
            ElevationPoint(
                lat=point.lat,
                lon=point.lon,
                elevation=self.elevation_fn(point) if self.elevation_fn else self.elevation,
            )
            for point in points
        ]
        return results[:-1] if self.drop_last else results


@pytest.fixture
def stub_provider():
    """Factory for StubProvider instances."""
    return StubProvider
