"""JSON API, v1 routes.

Each endpoint exposes one step of the dashboard pipeline (pricing,
geocoding, climate risk) plus the combined dashboard run, so the page and
any scripted client see exactly the same numbers.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query, status

from app.core.errors import to_http_exception
from app.models.schemas import (
    ClimateRiskResponse,
    DashboardRequest,
    DashboardResponse,
    GeoLocationResponse,
    OptionPriceResponse,
    ReverseGeocodeResponse,
    SamplesResponse,
)
from app.services import dashboard, geocoding
from app.services.pricing import InvalidOptionParameters, black_scholes, parse_option_inputs
from app.services.weather import WeatherServiceError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["dashboard"])


# ── GET /v1/option_price ──────────────────────────────────────────────────────


@router.get(
    "/option_price",
    response_model=OptionPriceResponse,
    tags=["pricing"],
    summary="Black-Scholes call and put prices",
)
async def get_option_price(
    stock: str | None = Query(default=None, description="Spot price (S)"),
    strike: str | None = Query(default=None, description="Strike price (K)"),
    time: str | None = Query(default=None, description="Time to expiry in years (T)"),
    rate: str | None = Query(default=None, description="Risk-free rate (r), e.g. 0.05"),
    vol: str | None = Query(default=None, description="Volatility (σ), e.g. 0.2"),
) -> OptionPriceResponse:
    raw = {"stock": stock, "strike": strike, "time": time, "rate": rate, "vol": vol}
    try:
        prices = black_scholes(*parse_option_inputs(raw))
    except InvalidOptionParameters as exc:
        raise to_http_exception(exc)
    return dashboard.price_response(prices)


# ── GET /v1/geocode ───────────────────────────────────────────────────────────


@router.get(
    "/geocode",
    response_model=GeoLocationResponse,
    tags=["location"],
    summary="Resolve a place name to coordinates",
)
async def get_geocode(
    q: str = Query(description="Free-text city or region, e.g. 'Miami, FL'"),
) -> GeoLocationResponse:
    try:
        location = await geocoding.geocode(q)
    except geocoding.GeocodingError as exc:
        raise to_http_exception(exc)
    return GeoLocationResponse(lat=location.lat, lon=location.lon, display=location.display)


# ── GET /v1/reverse_geocode ───────────────────────────────────────────────────


@router.get(
    "/reverse_geocode",
    response_model=ReverseGeocodeResponse,
    tags=["location"],
    summary="Turn coordinates into a 'City, CC' label",
    description="Falls back to the raw coordinates when the lookup fails.",
)
async def get_reverse_geocode(
    lat: float = Query(ge=-90, le=90),
    lon: float = Query(ge=-180, le=180),
) -> ReverseGeocodeResponse:
    label = await geocoding.reverse_geocode(lat, lon)
    return ReverseGeocodeResponse(label=label)


# ── GET /v1/climate_risk ──────────────────────────────────────────────────────


@router.get(
    "/climate_risk",
    response_model=ClimateRiskResponse,
    tags=["climate"],
    summary="Climate risk scores for a location",
    description=(
        "Geocodes the location, fetches current Open-Meteo conditions and "
        "derives the four 0–100 risk scores plus the composite verdict."
    ),
)
async def get_climate_risk(
    location: str = Query(description="Free-text city or region"),
) -> ClimateRiskResponse:
    try:
        return await dashboard.assess_location(location)
    except (geocoding.GeocodingError, WeatherServiceError) as exc:
        raise to_http_exception(exc)


# ── POST /v1/dashboard ────────────────────────────────────────────────────────


@router.post(
    "/dashboard",
    response_model=DashboardResponse,
    status_code=status.HTTP_200_OK,
    summary="Price an option and score the climate risk of a location",
    description=(
        "Option prices are always returned once the inputs validate; if the "
        "location lookup or weather fetch fails, `error` explains why and "
        "`climate` is null."
    ),
)
async def post_dashboard(body: DashboardRequest) -> DashboardResponse:
    try:
        return await dashboard.run_dashboard(body.model_dump(), body.location)
    except (InvalidOptionParameters, geocoding.BlankLocationError) as exc:
        raise to_http_exception(exc)


# ── GET /v1/samples ───────────────────────────────────────────────────────────


@router.get(
    "/samples",
    response_model=SamplesResponse,
    summary="Sample inputs for a quick demo run",
)
async def get_samples() -> SamplesResponse:
    return dashboard.load_samples()
