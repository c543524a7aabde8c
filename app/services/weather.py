"""Open-Meteo client: current atmospheric conditions at a coordinate.

Readings come back in US units (°F, mph, inches) because the scoring
thresholds are expressed in those units.  Open-Meteo may return null for
any variable (soil temperature is often missing over water); the raw
``current`` block is passed through untouched and defaults are applied by
the scoring layer.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)

_BASE = settings.open_meteo_base_url.rstrip("/")

CURRENT_VARIABLES = (
    "temperature_2m",
    "wind_speed_10m",
    "wind_gusts_10m",
    "precipitation",
    "surface_pressure",
    "cloud_cover",
    "soil_temperature_6cm",
)


class WeatherServiceError(Exception):
    def __init__(self, status: int, detail: str = "Climate API error"):
        self.status = status
        self.detail = detail
        super().__init__(detail)


def build_params(lat: float, lon: float) -> dict[str, str]:
    return {
        "latitude": str(lat),
        "longitude": str(lon),
        "current": ",".join(CURRENT_VARIABLES),
        "wind_speed_unit": "mph",
        "temperature_unit": "fahrenheit",
        "timezone": "auto",
        "precipitation_unit": "inch",
    }


async def fetch_current_conditions(
    lat: float,
    lon: float,
    client: httpx.AsyncClient | None = None,
) -> dict[str, Any]:
    """GET /v1/forecast?current=... and return the ``current`` block."""
    url = f"{_BASE}/v1/forecast"
    params = build_params(lat, lon)

    try:
        if client is not None:
            resp = await client.get(url, params=params)
        else:
            async with httpx.AsyncClient(timeout=settings.request_timeout_seconds) as owned:
                resp = await owned.get(url, params=params)
    except httpx.TransportError as exc:
        logger.warning("Open-Meteo unreachable for (%s, %s): %s", lat, lon, exc)
        raise WeatherServiceError(0) from exc

    if not resp.is_success:
        logger.warning("Open-Meteo returned %d for (%s, %s)", resp.status_code, lat, lon)
        raise WeatherServiceError(resp.status_code)

    try:
        payload = resp.json()
    except ValueError as exc:
        logger.warning("Open-Meteo returned invalid JSON for (%s, %s)", lat, lon)
        raise WeatherServiceError(resp.status_code) from exc

    current = payload.get("current")
    if not isinstance(current, dict):
        logger.warning("Open-Meteo response for (%s, %s) has no current block", lat, lon)
        raise WeatherServiceError(resp.status_code)
    return current
