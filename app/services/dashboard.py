"""Dashboard orchestration: price the option, then geocode, fetch and score.

The steps run strictly in sequence.  Invalid option inputs or a blank
location stop the run before any network call.  Once the option is
priced, upstream failures no longer abort the run: the prices are kept
and the failure is reported in ``error``, mirroring the location bar that
shows "Error: ..." next to a still-valid price panel.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping

import httpx

from app.core.config import settings
from app.models.schemas import (
    RISK_DIMENSION_LABELS,
    ClimateRiskResponse,
    CompositeVerdict,
    DashboardResponse,
    GeoLocationResponse,
    OptionPriceResponse,
    ReadingDisplay,
    RiskScore,
    SamplesResponse,
)
from app.services import geocoding, weather
from app.services.pricing import OptionPrices, black_scholes, parse_option_inputs
from app.services.scoring import (
    ClimateScores,
    composite_color,
    composite_verdict,
    compute_scores,
    reading_rows,
    risk_level,
)

logger = logging.getLogger(__name__)


def load_samples() -> SamplesResponse:
    return SamplesResponse(
        stock=settings.sample_stock,
        strike=settings.sample_strike,
        time=settings.sample_time_years,
        rate=settings.sample_rate,
        vol=settings.sample_volatility,
        location=settings.sample_location,
    )


def price_response(prices: OptionPrices) -> OptionPriceResponse:
    return OptionPriceResponse(
        call=prices.call,
        put=prices.put,
        call_display=prices.call_display,
        put_display=prices.put_display,
    )


def updated_label(now: datetime | None = None) -> str:
    now = now or datetime.now().astimezone()
    return f"Updated {now:%H:%M}"


def build_climate_response(
    location: geocoding.GeoLocation,
    scores: ClimateScores,
    now: datetime | None = None,
) -> ClimateRiskResponse:
    verdict = composite_verdict(scores.composite)

    return ClimateRiskResponse(
        location=GeoLocationResponse(lat=location.lat, lon=location.lon, display=location.display),
        scores=[
            RiskScore(
                dimension=dimension,
                label=RISK_DIMENSION_LABELS[dimension],
                score=score,
                level=risk_level(score),
            )
            for dimension, score in scores.by_dimension().items()
        ],
        composite=CompositeVerdict(
            score=scores.composite,
            color=composite_color(scores.composite),
            label=verdict.label,
            label_color=verdict.color,
            description=verdict.description,
        ),
        readings=[
            ReadingDisplay(name=name, value=value, text=text, flag=flag)
            for name, value, text, flag in reading_rows(scores.raw)
        ],
        updated=updated_label(now),
    )


async def assess_location(
    query: str,
    client: httpx.AsyncClient | None = None,
    now: datetime | None = None,
) -> ClimateRiskResponse:
    """Geocode ``query``, fetch its current weather and score it.

    Raises GeocodingError or WeatherServiceError on upstream failure.
    """
    location = await geocoding.geocode(query, client=client)
    current = await weather.fetch_current_conditions(location.lat, location.lon, client=client)
    scores = compute_scores(current)

    logger.info(
        "Climate risk for %s: weather=%d carbon=%d agri=%d sea=%d composite=%d",
        location.display,
        scores.weather,
        scores.carbon,
        scores.agri,
        scores.sea,
        scores.composite,
    )
    return build_climate_response(location, scores, now)


async def run_dashboard(
    inputs: Mapping[str, Any],
    location: str | None,
    client: httpx.AsyncClient | None = None,
    now: datetime | None = None,
) -> DashboardResponse:
    """Full dashboard run for raw form-like inputs.

    Raises InvalidOptionParameters or BlankLocationError before any network
    call; later failures are reported on the response.
    """
    S, K, T, r, v = parse_option_inputs(inputs)
    prices = price_response(black_scholes(S, K, T, r, v))

    if location is None or not location.strip():
        raise geocoding.BlankLocationError()

    try:
        climate = await assess_location(location, client=client, now=now)
    except (geocoding.GeocodingError, weather.WeatherServiceError) as exc:
        logger.warning("Dashboard climate lookup failed for %r: %s", location, exc)
        return DashboardResponse(prices=prices, error=f"Error: {exc}")

    return DashboardResponse(prices=prices, climate=climate)
