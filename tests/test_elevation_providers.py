"""
Unit Tests for Elevation Providers.

Upstream HTTP is replaced by MagicMock sessions; tests check the wire
contract, batching and rejection of malformed responses.
"""

from unittest.mock import MagicMock

import pytest
import requests
from data_models import ProfilePoint
from elevation_provider import (
    OpenTopoDataProvider, OpenMeteoElevationProvider, ElevationProviderError,
    chunk_points, create_elevation_providers, resolve_provider_order,
    DEFAULT_TIMEOUT_SECONDS,
)


def make_points(count):
    return [
        ProfilePoint(index=i, lat=round(55.0 + i * 1e-4, 6), lon=round(37.0 + i * 1e-4, 6), distance_meters=10.0 * i)
        for i in range(count)
    ]


def make_response(payload, ok=True, status_code=200, text="", reason="OK"):
    response = MagicMock()
    response.ok = ok
    response.status_code = status_code
    response.text = text
    response.reason = reason
    response.json.return_value = payload
    return response


def make_session(*responses):
    session = MagicMock()
    session.get.side_effect = list(responses)
    return session


def opentopodata_payload(count, elevation=120.5):
    return {
        "status": "OK",
        "results": [{"elevation": elevation, "location": {"lat": 0.0, "lng": 0.0}} for _ in range(count)],
    }


class TestChunkPoints:
    """Test suite for batching helper."""

    def test_chunks_preserve_order(self):
        assert chunk_points(list(range(7)), 3) == [[0, 1, 2], [3, 4, 5], [6]]

    def test_empty_input(self):
        assert chunk_points([], 100) == []

    def test_rejects_non_positive_size(self):
        with pytest.raises(ValueError):
            chunk_points([1, 2], 0)


class TestOpenTopoDataProvider:
    """Test suite for the OpenTopoData adapter."""

    def test_request_format(self):
        """Locations are sent as lat,lon pairs joined by '|'."""
        points = make_points(3)
        session = make_session(make_response(opentopodata_payload(3)))
        provider = OpenTopoDataProvider(session=session)

        elevations = provider.fetch_elevations(points)

        args, kwargs = session.get.call_args
        assert args[0] == "https://api.opentopodata.org/v1/aster30m"
        assert kwargs["params"] == {"locations": "55.0,37.0|55.0001,37.0001|55.0002,37.0002"}
        assert kwargs["timeout"] == DEFAULT_TIMEOUT_SECONDS
        assert [e.elevation for e in elevations] == [120.5, 120.5, 120.5]

    def test_results_align_with_request(self):
        points = make_points(3)
        provider = OpenTopoDataProvider(session=make_session(make_response(opentopodata_payload(3))))

        elevations = provider.fetch_elevations(points)

        for point, elevation in zip(points, elevations):
            assert (elevation.lat, elevation.lon) == (point.lat, point.lon)

    def test_batches_of_one_hundred(self):
        """150 points are fetched in two requests (100 + 50)."""
        session = make_session(
            make_response(opentopodata_payload(100)),
            make_response(opentopodata_payload(50)),
        )
        provider = OpenTopoDataProvider(session=session)

        elevations = provider.fetch_elevations(make_points(150))

        assert session.get.call_count == 2
        second_locations = session.get.call_args_list[1].kwargs["params"]["locations"]
        assert len(second_locations.split("|")) == 50
        assert len(elevations) == 150

    def test_custom_base_url_and_dataset(self):
        session = make_session(make_response(opentopodata_payload(3)))
        provider = OpenTopoDataProvider(base_url="http://localhost:5000/v1//", dataset="srtm90m", session=session)

        provider.fetch_elevations(make_points(3))

        assert session.get.call_args.args[0] == "http://localhost:5000/v1/srtm90m"

    def test_status_not_ok_uses_error_text(self):
        session = make_session(make_response({"status": "INVALID_REQUEST", "error": "Too many locations"}))
        provider = OpenTopoDataProvider(session=session)

        with pytest.raises(ElevationProviderError, match="Too many locations"):
            provider.fetch_elevations(make_points(3))

    def test_incomplete_results_rejected(self):
        provider = OpenTopoDataProvider(session=make_session(make_response(opentopodata_payload(2))))

        with pytest.raises(ElevationProviderError, match="incomplete"):
            provider.fetch_elevations(make_points(3))

    @pytest.mark.parametrize("bad_value", [None, "12", float("nan"), True])
    def test_missing_or_nan_elevation_rejected(self, bad_value):
        payload = opentopodata_payload(3)
        payload["results"][1]["elevation"] = bad_value
        provider = OpenTopoDataProvider(session=make_session(make_response(payload)))

        with pytest.raises(ElevationProviderError, match="NaN/empty"):
            provider.fetch_elevations(make_points(3))

    def test_http_error_reported_with_status(self):
        response = make_response(None, ok=False, status_code=429, text="Too many requests")
        provider = OpenTopoDataProvider(session=make_session(response))

        with pytest.raises(ElevationProviderError, match="HTTP 429: Too many requests"):
            provider.fetch_elevations(make_points(3))

    def test_http_error_falls_back_to_reason(self):
        response = make_response(None, ok=False, status_code=503, text="", reason="Service Unavailable")
        provider = OpenTopoDataProvider(session=make_session(response))

        with pytest.raises(ElevationProviderError, match="HTTP 503: Service Unavailable"):
            provider.fetch_elevations(make_points(3))

    def test_timeout_propagates(self):
        session = MagicMock()
        session.get.side_effect = requests.exceptions.Timeout("read timed out")
        provider = OpenTopoDataProvider(session=session)

        with pytest.raises(requests.exceptions.Timeout):
            provider.fetch_elevations(make_points(3))


class TestOpenMeteoElevationProvider:
    """Test suite for the Open-Meteo adapter."""

    def test_request_format(self):
        """Latitudes and longitudes are sent as parallel comma lists."""
        session = make_session(make_response({"elevation": [10.0, 11.0, 12.5]}))
        provider = OpenMeteoElevationProvider(session=session)

        elevations = provider.fetch_elevations(make_points(3))

        args, kwargs = session.get.call_args
        assert args[0] == "https://api.open-meteo.com/v1/elevation"
        assert kwargs["params"] == {
            "latitude": "55.0,55.0001,55.0002",
            "longitude": "37.0,37.0001,37.0002",
        }
        assert [e.elevation for e in elevations] == [10.0, 11.0, 12.5]

    def test_integer_elevations_accepted(self):
        provider = OpenMeteoElevationProvider(session=make_session(make_response({"elevation": [10, 11, 12]})))

        elevations = provider.fetch_elevations(make_points(3))

        assert [e.elevation for e in elevations] == [10.0, 11.0, 12.0]

    def test_batches_of_one_hundred(self):
        session = make_session(
            make_response({"elevation": [1.0] * 100}),
            make_response({"elevation": [2.0] * 100}),
            make_response({"elevation": [3.0] * 1}),
        )
        provider = OpenMeteoElevationProvider(session=session)

        elevations = provider.fetch_elevations(make_points(201))

        assert session.get.call_count == 3
        assert elevations[-1].elevation == 3.0

    @pytest.mark.parametrize("payload", [
        {},
        {"elevation": [1.0, 2.0]},
        {"elevation": "1,2,3"},
        {"error": True, "reason": "Latitude must be in range"},
        None,
    ])
    def test_invalid_payload_rejected(self, payload):
        provider = OpenMeteoElevationProvider(session=make_session(make_response(payload)))

        with pytest.raises(ElevationProviderError, match="invalid elevation set"):
            provider.fetch_elevations(make_points(3))

    def test_nan_elevation_rejected(self):
        provider = OpenMeteoElevationProvider(
            session=make_session(make_response({"elevation": [1.0, float("nan"), 3.0]}))
        )

        with pytest.raises(ElevationProviderError, match="NaN/empty"):
            provider.fetch_elevations(make_points(3))


class TestProviderConfiguration:
    """Test suite for environment-driven provider ordering."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ("ELEVATION_PROVIDER", "OPENTOPODATA_BASE_URL", "OPENTOPODATA_DATASET", "OPEN_METEO_BASE_URL"):
            monkeypatch.delenv(name, raising=False)

    def test_default_order(self):
        providers = create_elevation_providers()

        assert [p.name for p in providers] == ["opentopodata", "openmeteo"]
        assert providers[0].dataset == "aster30m"

    def test_preferred_provider_moves_to_front(self, monkeypatch):
        monkeypatch.setenv("ELEVATION_PROVIDER", " OpenMeteo ")

        providers = create_elevation_providers()

        assert [p.name for p in providers] == ["openmeteo", "opentopodata"]

    def test_explicit_preference_overrides_env(self, monkeypatch):
        monkeypatch.setenv("ELEVATION_PROVIDER", "openmeteo")

        providers = create_elevation_providers("opentopodata")

        assert providers[0].name == "opentopodata"

    def test_unknown_provider_keeps_default_order(self):
        assert resolve_provider_order("srtm-local") == ["opentopodata", "openmeteo"]

    def test_urls_and_dataset_from_env(self, monkeypatch):
        monkeypatch.setenv("OPENTOPODATA_BASE_URL", "http://dem.internal/v1/")
        monkeypatch.setenv("OPENTOPODATA_DATASET", "eudem25m")
        monkeypatch.setenv("OPEN_METEO_BASE_URL", "http://meteo.internal/v1/elevation")

        topo, meteo = create_elevation_providers()

        assert topo.endpoint == "http://dem.internal/v1/eudem25m"
        assert meteo.base_url == "http://meteo.internal/v1/elevation"
