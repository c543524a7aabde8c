"""HTTP client for OpenStreetMap Nominatim (forward and reverse geocoding).

Nominatim needs no API key but its usage policy requires an identifying
User-Agent and at most one request per second, so every call sends the
configured agent and the dashboard issues a single lookup per run.

Docs: https://nominatim.org/release-docs/latest/api/Overview/
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)

_BASE = settings.nominatim_base_url.rstrip("/")

NOT_FOUND_MESSAGE = "Location not found. Try a different city name."
BLANK_QUERY_MESSAGE = "Please enter a city or region for climate data."
DEFAULT_REVERSE_LABEL = "My Location"


class GeocodingError(Exception):
    def __init__(self, status: int, detail: str):
        self.status = status
        self.detail = detail
        super().__init__(detail)


class BlankLocationError(GeocodingError):
    def __init__(self):
        super().__init__(400, BLANK_QUERY_MESSAGE)


class LocationNotFoundError(GeocodingError):
    def __init__(self, query: str):
        self.query = query
        super().__init__(404, NOT_FOUND_MESSAGE)


@dataclass(frozen=True)
class GeoLocation:
    lat: float
    lon: float
    display: str


def _headers() -> dict[str, str]:
    return {"User-Agent": settings.user_agent, "Accept-Language": settings.accept_language}


def _wrap_transport_error(exc: httpx.TransportError) -> GeocodingError:
    return GeocodingError(0, f"Cannot reach geocoding service at {_BASE}: {exc}")


@asynccontextmanager
async def _session(client: httpx.AsyncClient | None) -> AsyncIterator[httpx.AsyncClient]:
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=settings.request_timeout_seconds) as owned:
        yield owned


def short_display_name(display_name: str) -> str:
    """Keep the first two comma-separated parts: 'Miami, Miami-Dade County, ...' -> 'Miami, Miami-Dade County'."""
    parts = [p.strip() for p in display_name.split(",")]
    return ", ".join(parts[:2])


async def geocode(query: str, client: httpx.AsyncClient | None = None) -> GeoLocation:
    """GET /search: resolve a free-text place name to its best match."""
    query = query.strip()
    if not query:
        raise BlankLocationError()

    params = {"q": query, "format": "json", "limit": "1"}
    try:
        async with _session(client) as http:
            resp = await http.get(f"{_BASE}/search", params=params, headers=_headers())
    except httpx.TransportError as exc:
        logger.warning("Nominatim unreachable for %r: %s", query, exc)
        raise _wrap_transport_error(exc) from exc

    if resp.status_code >= 400:
        logger.warning("Nominatim search failed for %r: %d", query, resp.status_code)
        raise GeocodingError(resp.status_code, f"Geocoding service error ({resp.status_code})")

    try:
        results: list[dict[str, Any]] = resp.json()
    except ValueError as exc:
        logger.warning("Nominatim returned invalid JSON for %r", query)
        raise GeocodingError(resp.status_code, "Geocoding service returned invalid JSON") from exc

    if not results:
        raise LocationNotFoundError(query)

    top = results[0]
    location = GeoLocation(
        lat=float(top["lat"]),
        lon=float(top["lon"]),
        display=short_display_name(top.get("display_name", query)),
    )
    logger.debug("Geocoded %r -> (%.4f, %.4f) %s", query, location.lat, location.lon, location.display)
    return location


async def reverse_geocode(lat: float, lon: float, client: httpx.AsyncClient | None = None) -> str:
    """GET /reverse: turn coordinates into a 'City, CC' label.

    Never raises for upstream trouble: the raw coordinates are returned
    instead so the caller always has something to put in the location field.
    """
    params = {"lat": str(lat), "lon": str(lon), "format": "json"}
    try:
        async with _session(client) as http:
            resp = await http.get(f"{_BASE}/reverse", params=params, headers=_headers())
        resp.raise_for_status()
        data = resp.json()
    except (httpx.HTTPError, ValueError):
        logger.warning("Reverse geocoding failed for (%s, %s), using coordinates", lat, lon, exc_info=True)
        return coordinates_label(lat, lon)

    return reverse_label(data)


def reverse_label(data: dict[str, Any]) -> str:
    address = data.get("address") or {}
    city = address.get("city") or address.get("town") or address.get("county") or DEFAULT_REVERSE_LABEL
    country_code = (address.get("country_code") or "").upper()
    return f"{city}, {country_code}" if country_code else city


def coordinates_label(lat: float, lon: float) -> str:
    return f"{lat:.4f}, {lon:.4f}"
