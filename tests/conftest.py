"""Shared test fixtures for the climate options dashboard.

Upstream APIs are never contacted here: Nominatim and Open-Meteo are faked
with ``httpx.MockTransport`` handlers, and route tests patch the service
layer directly.  Live-API tests live under tests/integration/ and are
marked @pytest.mark.integration.
"""

from typing import Any, Callable

import httpx
import pytest


MIAMI_SEARCH_RESULT = [
    {
        "lat": "25.7741728",
        "lon": "-80.19362",
        "display_name": "Miami, Miami-Dade County, Florida, United States",
    }
]


# ── Factory helpers ───────────────────────────────────────────────────────────


def make_current(
    temperature_2m: float | None = 70.0,
    wind_speed_10m: float | None = 10.0,
    wind_gusts_10m: float | None = 20.0,
    precipitation: float | None = 0.0,
    surface_pressure: float | None = 1015.0,
    cloud_cover: float | None = 40,
    soil_temperature_6cm: float | None = 60.0,
) -> dict[str, Any]:
    """An Open-Meteo ``current`` block; the defaults describe a calm day."""
    return {
        "time": "2025-08-14T14:00",
        "interval": 900,
        "temperature_2m": temperature_2m,
        "wind_speed_10m": wind_speed_10m,
        "wind_gusts_10m": wind_gusts_10m,
        "precipitation": precipitation,
        "surface_pressure": surface_pressure,
        "cloud_cover": cloud_cover,
        "soil_temperature_6cm": soil_temperature_6cm,
    }


def make_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class FakeUpstreams:
    """Routes requests to canned Nominatim / Open-Meteo responses and records them."""

    def __init__(
        self,
        search: Any = MIAMI_SEARCH_RESULT,
        current: dict[str, Any] | None = None,
        search_status: int = 200,
        forecast_status: int = 200,
    ):
        self.search = search
        self.current = current if current is not None else make_current()
        self.search_status = search_status
        self.forecast_status = forecast_status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/search":
            return httpx.Response(self.search_status, json=self.search)
        if request.url.path == "/v1/forecast":
            if self.forecast_status != 200:
                return httpx.Response(self.forecast_status, json={"error": True, "reason": "upstream"})
            return httpx.Response(200, json={"latitude": 25.77, "longitude": -80.19, "current": self.current})
        return httpx.Response(404)

    @property
    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


# ── Fixtures ──────────────────────────────────────────────────────────────────


@pytest.fixture
def upstreams() -> FakeUpstreams:
    """Healthy upstreams: Miami resolves and reports calm weather."""
    return FakeUpstreams()


@pytest.fixture
def calm_current() -> dict[str, Any]:
    return make_current()


@pytest.fixture
def storm_current() -> dict[str, Any]:
    """Hurricane-strength readings that saturate most sub-scores."""
    return make_current(
        temperature_2m=80.0,
        wind_speed_10m=80.0,
        wind_gusts_10m=100.0,
        precipitation=2.0,
        surface_pressure=980.0,
        cloud_cover=95,
        soil_temperature_6cm=85.0,
    )
