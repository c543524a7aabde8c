"""Climate Options Dashboard: Black-Scholes pricing next to live climate risk.

Prices European options from user inputs and, for a chosen location,
geocodes it via OpenStreetMap Nominatim, pulls current conditions from
Open-Meteo and turns them into four heuristic 0–100 climate risk scores
plus a composite verdict.  Served both as a JSON API under ``/v1`` and as
a server-rendered dashboard at ``/``.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.ui.routes import router as ui_router
from app.api.v1.routes import router as v1_router
from app.core.config import settings
from app.core.errors import register_error_handlers
from app.core.middleware import RequestLoggingMiddleware

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s — %(message)s",
)

logger = logging.getLogger(__name__)


DESCRIPTION = """\
Black-Scholes option pricing alongside **location-based climate risk**.

---

### Dashboard flow

| Step | Endpoint | Description |
|------|----------|-------------|
| 1 | `GET /v1/option_price` | Call and put prices from S, K, T, r, σ |
| 2 | `GET /v1/geocode` | Place name → coordinates (Nominatim) |
| 3 | `GET /v1/climate_risk` | Current conditions (Open-Meteo) → risk scores |
| * | `POST /v1/dashboard` | All of the above in one call |

Risk scores are heuristics derived from a single current-conditions
snapshot: extreme weather, carbon/heat, agricultural and sea level/coastal,
each 0–100, plus their average as the composite.
"""


TAGS_METADATA = [
    {"name": "dashboard", "description": "Combined pricing + climate risk runs."},
    {"name": "pricing", "description": "Black-Scholes European option pricing."},
    {"name": "location", "description": "Forward and reverse geocoding."},
    {"name": "climate", "description": "Climate risk scoring from live weather."},
    {"name": "ops", "description": "Health checks and operational endpoints."},
]


app = FastAPI(
    title="Climate Options Dashboard",
    version="0.1.0",
    description=DESCRIPTION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=TAGS_METADATA,
)

register_error_handlers(app)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router)
app.include_router(ui_router)


@app.get("/health", tags=["ops"])
async def health() -> dict[str, str]:
    return {"status": "ok", "service": "climate-options"}
