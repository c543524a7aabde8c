"""Heuristic climate risk scoring from a single current-conditions snapshot.

Four dimensions, each 0–100:

- Extreme weather: sustained wind against the hurricane threshold (74 mph),
  gusts against 90 mph, and hourly precipitation against 1 in/hr.
- Carbon / heat: distance from a temperate 65 °F baseline, saturating at 45 °F.
- Agricultural: soil temperature outside the 50–75 °F growing band, plus
  stress from overcast (>90 %) or near-cloudless (<15 %) skies and rain.
- Sea level / coastal: pressure drop below 1013 hPa (storm-surge proxy)
  combined with wind and rain.

The composite is the plain average of the four.  All rounding is
half-up (12.5 -> 13, -0.5 -> 0), never banker's rounding.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

from app.core.config import settings
from app.models.schemas import ReadingFlag, RiskDimension, RiskLevel

HURRICANE_WIND_MPH = 74.0
SEVERE_GUST_MPH = 90.0
HEAVY_PRECIP_IN_HR = 1.0
HEAT_SATURATION_F = 45.0
SOIL_OPTIMAL_F = (50.0, 75.0)
PRESSURE_DROP_SATURATION_HPA = 30.0

LOW_COLOR = "#3dffa0"
MODERATE_COLOR = "#f5c518"
HIGH_COLOR = "#ff4d4d"

# (lo, hi, label, colour, description); lo inclusive, hi exclusive
VERDICT_BANDS: tuple[tuple[int, int, str, str, str], ...] = (
    (0, 25, "Minimal Climate Stress", LOW_COLOR,
     "Benign atmospheric conditions — minimal disruption risk across all four climate dimensions."),
    (25, 45, "Low-to-Moderate Risk", LOW_COLOR,
     "Mild weather anomalies detected. Climate-sensitive sectors may see minor volatility impact."),
    (45, 65, "Elevated Climate Exposure", MODERATE_COLOR,
     "Meaningful atmospheric stress across multiple dimensions. Relevant for energy, agriculture & insurance sectors."),
    (65, 80, "High Climate Risk", MODERATE_COLOR,
     "Significant weather events or anomalies present. Option pricing in climate-sensitive stocks may need adjustment."),
    (80, 101, "Extreme Climate Conditions", HIGH_COLOR,
     "Severe atmospheric readings. High potential for supply disruption, physical asset damage & volatility spikes."),
)


@dataclass(frozen=True)
class RawReadings:
    wind: float
    gust: float
    precip: float
    temp: float
    pressure: float
    soil: float
    cloud: float


@dataclass(frozen=True)
class ClimateScores:
    weather: int
    carbon: int
    agri: int
    sea: int
    composite: int
    raw: RawReadings

    def by_dimension(self) -> dict[RiskDimension, int]:
        return {
            RiskDimension.WEATHER: self.weather,
            RiskDimension.CARBON: self.carbon,
            RiskDimension.AGRI: self.agri,
            RiskDimension.SEA: self.sea,
        }


@dataclass(frozen=True)
class Verdict:
    label: str
    color: str
    description: str


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _reading(current: Mapping[str, Any], key: str, default: float) -> float:
    value = current.get(key)
    return default if value is None else float(value)


def extract_readings(current: Mapping[str, Any]) -> RawReadings:
    """Pull the seven variables out of an Open-Meteo ``current`` block.

    Missing or null values fall back to neutral defaults; an explicit 0 is
    kept as 0.
    """
    return RawReadings(
        wind=_reading(current, "wind_speed_10m", 0.0),
        gust=_reading(current, "wind_gusts_10m", 0.0),
        precip=_reading(current, "precipitation", 0.0),
        temp=_reading(current, "temperature_2m", 60.0),
        pressure=_reading(current, "surface_pressure", settings.reference_pressure_hpa),
        soil=_reading(current, "soil_temperature_6cm", 55.0),
        cloud=_reading(current, "cloud_cover", 50.0),
    )


def compute_scores(current: Mapping[str, Any]) -> ClimateScores:
    raw = extract_readings(current)

    w_score = min(100.0, raw.wind / HURRICANE_WIND_MPH * 100)
    g_score = min(100.0, raw.gust / SEVERE_GUST_MPH * 100)
    p_score = min(100.0, raw.precip / HEAVY_PRECIP_IN_HR * 100)
    weather = round_half_up(w_score * 0.35 + g_score * 0.35 + p_score * 0.30)

    temp_dev = abs(raw.temp - settings.temperate_baseline_f)
    carbon = round_half_up(min(100.0, temp_dev / HEAT_SATURATION_F * 100))

    soil_lo, soil_hi = SOIL_OPTIMAL_F
    if soil_lo <= raw.soil <= soil_hi:
        soil_stress = 0.0
    else:
        mid = (soil_lo + soil_hi) / 2
        half_band = (soil_hi - soil_lo) / 2
        soil_stress = min(100.0, (abs(raw.soil - mid) - half_band) / 30 * 100)
    cloud_stress = 25 if raw.cloud > 90 else 20 if raw.cloud < 15 else 0
    agri = round_half_up(min(100.0, soil_stress * 0.65 + cloud_stress + p_score * 0.15))

    pressure_drop = max(0.0, settings.reference_pressure_hpa - raw.pressure)
    press_score = min(100.0, pressure_drop / PRESSURE_DROP_SATURATION_HPA * 100)
    sea = round_half_up(min(100.0, press_score * 0.45 + w_score * 0.35 + p_score * 0.20))

    composite = round_half_up((weather + carbon + agri + sea) / 4)

    return ClimateScores(
        weather=weather,
        carbon=carbon,
        agri=agri,
        sea=sea,
        composite=composite,
        raw=raw,
    )


def risk_level(score: int) -> RiskLevel:
    if score < 35:
        return RiskLevel.LOW
    if score < 65:
        return RiskLevel.MODERATE
    return RiskLevel.HIGH


def composite_color(score: int) -> str:
    if score < 35:
        return LOW_COLOR
    if score < 65:
        return MODERATE_COLOR
    return HIGH_COLOR


def composite_verdict(score: int) -> Verdict:
    for lo, hi, label, color, description in VERDICT_BANDS:
        if lo <= score < hi:
            return Verdict(label=label, color=color, description=description)
    raise ValueError(f"composite score out of range: {score}")


# ── Raw reading presentation ──────────────────────────────────────────────────


def _flag(high: bool, low: bool = False) -> ReadingFlag:
    if high:
        return ReadingFlag.HIGH
    if low:
        return ReadingFlag.LOW
    return ReadingFlag.NORMAL


def reading_rows(raw: RawReadings) -> list[tuple[str, float, str, ReadingFlag]]:
    """(name, value, display text, flag) for each raw reading, in dashboard order."""
    pressure_drop = settings.reference_pressure_hpa - raw.pressure
    return [
        ("temp", raw.temp, f"{raw.temp:.1f}°F", _flag(raw.temp > 90, raw.temp < 32)),
        ("wind", raw.wind, f"{raw.wind:.1f} mph", _flag(raw.wind >= 50, raw.wind < 5)),
        ("gust", raw.gust, f"{raw.gust:.1f} mph", _flag(raw.gust >= 65)),
        ("precip", raw.precip, f"{raw.precip:.2f} in/hr", _flag(raw.precip > 0.5, raw.precip == 0)),
        ("pressure", raw.pressure, f"{raw.pressure:.1f} hPa", _flag(pressure_drop > 15, pressure_drop < -5)),
        ("soil", raw.soil, f"{raw.soil:.1f}°F", _flag(raw.soil > 80, raw.soil < 35)),
        ("cloud", raw.cloud, f"{raw.cloud:g}%", ReadingFlag.NORMAL),
    ]
