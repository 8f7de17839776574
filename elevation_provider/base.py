"""
Base Elevation Provider Abstract Class.

This defines the interface that all terrain elevation providers must implement.
A provider is responsible ONLY for turning sampled path points into terrain
elevations - no fallback logic, no radio calculations.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, TypeVar

import requests

from data_models import ElevationPoint, ProfilePoint

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0
BATCH_SIZE = 100  # Upstream request-size limit (points per call)
USER_AGENT = "RrlProfileCalculator/1.0"

T = TypeVar("T")


class ElevationProviderError(Exception):
    """Raised when a provider returns an unusable response."""
    pass


def chunk_points(items: Sequence[T], chunk_size: int) -> List[List[T]]:
    """
    Split a sequence into consecutive chunks of at most chunk_size items.

    Args:
        items: Sequence to split
        chunk_size: Maximum chunk length (must be positive)

    Returns:
        List of chunks in original order
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    return [list(items[i:i + chunk_size]) for i in range(0, len(items), chunk_size)]


def fetch_json_with_timeout(
    session: requests.Session,
    url: str,
    params: Optional[Dict[str, str]] = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> Any:
    """
    GET a JSON document with a bounded timeout.

    Timeouts and connection errors propagate as requests exceptions.

    Raises:
        ElevationProviderError: On a non-2xx HTTP status
        ValueError: If the body is not valid JSON
    """
    response = session.get(url, params=params, timeout=timeout)

    if not response.ok:
        text = response.text or ""
        raise ElevationProviderError(f"HTTP {response.status_code}: {text or response.reason}")

    return response.json()


def is_valid_elevation(value: Any) -> bool:
    """True for real numbers that are not NaN (JSON null and booleans are rejected)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return value == value


class ElevationProvider(ABC):
    """
    Abstract base class for terrain elevation providers.

    Each implementation wraps one external data source:
    - OpenTopoData
    - Open-Meteo

    RESPONSIBILITIES:
    - Resolve elevations for ALL requested points, or fail
    - Respect upstream batch size limits
    - Reject malformed, incomplete or NaN responses

    NOT RESPONSIBLE FOR:
    - Falling back to other providers
    - Retrying
    """

    name: str = ""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        batch_size: int = BATCH_SIZE,
    ):
        """
        Initialize provider.

        Args:
            session: Optional HTTP session (a new one is created if omitted)
            timeout: Per-request timeout in seconds
            batch_size: Maximum points per upstream request
        """
        if session is None:
            session = requests.Session()
            session.headers.update({"User-Agent": USER_AGENT})
        self.session = session
        self.timeout = timeout
        self.batch_size = batch_size

    @abstractmethod
    def fetch_elevations(self, points: Sequence[ProfilePoint]) -> List[ElevationPoint]:
        """
        Resolve terrain elevations for every point.

        This is the PRIMARY method of the provider.

        Args:
            points: Sampled path points (anything with lat/lon attributes)

        Returns:
            One ElevationPoint per input point, in the same order and with
            the same coordinates

        Raises:
            Exception: Any failure; the caller abandons this provider
        """
        pass

    def _get_json(self, url: str, params: Dict[str, str]) -> Any:
        logger.debug(f"{self.name}: GET {url} ({len(params)} params)")
        return fetch_json_with_timeout(self.session, url, params=params, timeout=self.timeout)
