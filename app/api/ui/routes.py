"""Server-rendered dashboard page."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from app.models.schemas import RiskDimension
from app.services import dashboard
from app.services.geocoding import BlankLocationError
from app.services.pricing import InvalidOptionParameters, OPTION_FIELDS, black_scholes, parse_option_inputs

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parents[2] / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(tags=["ui"])


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def dashboard_page(
    request: Request,
    stock: str | None = None,
    strike: str | None = None,
    time: str | None = None,
    rate: str | None = None,
    vol: str | None = None,
    location: str | None = None,
    samples: bool = Query(default=False, description="Pre-fill the sample inputs and run"),
):
    """Render the dashboard, running the pipeline when the form was submitted."""
    form: dict[str, str | None] = {
        "stock": stock,
        "strike": strike,
        "time": time,
        "rate": rate,
        "vol": vol,
        "location": location,
    }
    if samples:
        form = {k: str(v) for k, v in dashboard.load_samples().model_dump().items()}

    context = {
        "form": {k: v or "" for k, v in form.items()},
        "dimensions": list(RiskDimension),
        "result": None,
        "prices": None,
        "alert": None,
    }

    submitted = any(form[name] is not None for name in (*OPTION_FIELDS, "location"))
    if not submitted:
        return templates.TemplateResponse(request, "dashboard.html", context)

    try:
        result = await dashboard.run_dashboard(form, form["location"])
    except InvalidOptionParameters as exc:
        context["alert"] = str(exc)
    except BlankLocationError as exc:
        # Inputs were valid, so the price panel still updates.
        context["prices"] = dashboard.price_response(black_scholes(*parse_option_inputs(form)))
        context["alert"] = exc.detail
    else:
        context["result"] = result
        context["prices"] = result.prices

    return templates.TemplateResponse(request, "dashboard.html", context)
