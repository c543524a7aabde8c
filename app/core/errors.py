"""Structured error responses and service-error translation.

Every error response has the same shape:

    {
      "error": {
        "code": "DESCRIPTIVE_CODE",
        "message": "Human-readable explanation of what went wrong.",
        "request_id": "abc123...",
        ...extra fields when relevant
      }
    }
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.services.geocoding import BlankLocationError, GeocodingError, LocationNotFoundError
from app.services.pricing import InvalidOptionParameters
from app.services.weather import WeatherServiceError

logger = logging.getLogger(__name__)

_STATUS_CODE_MAP: dict[int, str] = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    422: "VALIDATION_ERROR",
    502: "UPSTREAM_ERROR",
    503: "SERVICE_UNAVAILABLE",
}


def to_http_exception(exc: Exception) -> HTTPException:
    """Map a service-layer exception onto the HTTP error it should produce."""
    if isinstance(exc, InvalidOptionParameters):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "INVALID_OPTION_PARAMETERS", "message": str(exc)},
        )
    if isinstance(exc, BlankLocationError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "LOCATION_REQUIRED", "message": exc.detail},
        )
    if isinstance(exc, LocationNotFoundError):
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "LOCATION_NOT_FOUND", "message": exc.detail, "query": exc.query},
        )
    if isinstance(exc, GeocodingError):
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"code": "GEOCODING_UPSTREAM_ERROR", "message": exc.detail, "upstream_status": exc.status},
        )
    if isinstance(exc, WeatherServiceError):
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"code": "WEATHER_UPSTREAM_ERROR", "message": exc.detail, "upstream_status": exc.status},
        )
    raise TypeError(f"No HTTP mapping for {type(exc).__name__}")


def _error_response(
    request: Request,
    status_code: int,
    error: dict,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Render ``error`` in the shared envelope and note its code on the request.

    The code is kept on ``request.state`` so the access log line can carry it.
    """
    request_id = getattr(request.state, "request_id", None)
    request.state.error_code = error["code"]
    if status_code >= 500:
        logger.warning(
            "%s %s -> %d %s: %s (req=%s)",
            request.method, request.url.path, status_code, error["code"], error.get("message"), request_id,
        )
    else:
        logger.info(
            "%s %s -> %d %s (req=%s)",
            request.method, request.url.path, status_code, error["code"], request_id,
        )
    return JSONResponse(
        status_code=status_code,
        content={"error": {**error, "request_id": request_id}},
        headers=headers,
    )


def register_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(InvalidOptionParameters)
    @app.exception_handler(GeocodingError)
    @app.exception_handler(WeatherServiceError)
    async def service_error_handler(request: Request, exc: Exception) -> JSONResponse:
        # Service errors that escape a route still get their specific code.
        http_exc = to_http_exception(exc)
        return _error_response(request, http_exc.status_code, http_exc.detail)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        if isinstance(exc.detail, dict):
            error = dict(exc.detail)
        else:
            error = {"code": _STATUS_CODE_MAP.get(exc.status_code, "ERROR"), "message": str(exc.detail)}
        return _error_response(request, exc.status_code, error, getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        fields = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
        error = {
            "code": "VALIDATION_ERROR",
            "message": "Request could not be read: " + "; ".join(f["field"] for f in fields),
            "details": fields,
        }
        return _error_response(request, status.HTTP_422_UNPROCESSABLE_ENTITY, error)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        error = {
            "code": "INTERNAL_ERROR",
            "message": "The dashboard hit an unexpected error. Quote the request_id when reporting it.",
        }
        return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, error)
