"""Pydantic schemas for the climate options dashboard API."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


# ── Enums ─────────────────────────────────────────────────────────────────────


class RiskLevel(str, Enum):
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


class ReadingFlag(str, Enum):
    """Highlight applied to a raw atmospheric reading."""

    NORMAL = ""
    HIGH = "hi"
    LOW = "lo"


class RiskDimension(str, Enum):
    WEATHER = "weather"
    CARBON = "carbon"
    AGRI = "agri"
    SEA = "sea"


RISK_DIMENSION_LABELS: dict[RiskDimension, str] = {
    RiskDimension.WEATHER: "Extreme Weather",
    RiskDimension.CARBON: "Carbon / Heat",
    RiskDimension.AGRI: "Agricultural",
    RiskDimension.SEA: "Sea Level / Coastal",
}


# ── Option pricing ────────────────────────────────────────────────────────────


class OptionParameters(BaseModel):
    stock: float = Field(description="Spot price of the underlying (S)")
    strike: float = Field(description="Strike price (K)")
    time: float = Field(description="Time to expiry in years (T)")
    rate: float = Field(description="Continuously compounded risk-free rate (r)")
    vol: float = Field(description="Annualised volatility (σ)")

    model_config = {"json_schema_extra": {"example": {
        "stock": 100, "strike": 100, "time": 1, "rate": 0.05, "vol": 0.2,
    }}}


class OptionPriceResponse(BaseModel):
    call: float = Field(description="Black-Scholes European call price")
    put: float = Field(description="Black-Scholes European put price")
    call_display: str = Field(description="Call price formatted for display, e.g. $10.45")
    put_display: str = Field(description="Put price formatted for display, e.g. $5.57")


# ── Geocoding ─────────────────────────────────────────────────────────────────


class GeoLocationResponse(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)
    display: str = Field(description="Short place label (first two name parts)")


class ReverseGeocodeResponse(BaseModel):
    label: str = Field(description="Location label suitable for the location field, e.g. 'Miami, US'")


# ── Climate risk ──────────────────────────────────────────────────────────────


class RiskScore(BaseModel):
    dimension: RiskDimension
    label: str
    score: int = Field(ge=0, le=100)
    level: RiskLevel


class CompositeVerdict(BaseModel):
    score: int = Field(ge=0, le=100)
    color: str = Field(description="Ring colour for the composite score")
    label: str
    label_color: str
    description: str


class ReadingDisplay(BaseModel):
    name: str
    value: float
    text: str
    flag: ReadingFlag = ReadingFlag.NORMAL


class ClimateRiskResponse(BaseModel):
    location: GeoLocationResponse
    scores: list[RiskScore]
    composite: CompositeVerdict
    readings: list[ReadingDisplay]
    updated: str = Field(description="Local update time, e.g. 'Updated 14:05'")


# ── Dashboard ─────────────────────────────────────────────────────────────────


class DashboardRequest(BaseModel):
    """Raw dashboard inputs.

    Option fields are left loosely typed so that blank, missing or
    non-numeric values reach the pricing validation and produce its
    single "fill all fields" message instead of a per-field 422.
    """

    stock: float | str | None = Field(default=None, description="Spot price of the underlying (S)")
    strike: float | str | None = Field(default=None, description="Strike price (K)")
    time: float | str | None = Field(default=None, description="Time to expiry in years (T)")
    rate: float | str | None = Field(default=None, description="Continuously compounded risk-free rate (r)")
    vol: float | str | None = Field(default=None, description="Annualised volatility (σ)")
    location: str | None = Field(default=None, description="Free-text city or region", examples=["Miami, FL"])


class DashboardResponse(BaseModel):
    prices: OptionPriceResponse
    climate: ClimateRiskResponse | None = None
    error: str | None = Field(
        default=None,
        description="Set when geocoding or the weather fetch failed; prices are still returned",
    )


class SamplesResponse(OptionParameters):
    location: str = Field(description="Free-text city or region")
