"""Shared fixtures for live integration tests.

These tests call the public Nominatim and Open-Meteo APIs and, optionally,
a running instance of this service.
Run with: pytest tests/integration/ -m integration -v
"""

import os

import httpx
import pytest


SERVICE_URL = os.getenv("CLIMATE_OPTIONS_URL", "http://localhost:8000")


@pytest.fixture(scope="session")
def service_client():
    """HTTP client pointed at a running climate-options service."""
    with httpx.Client(base_url=SERVICE_URL, timeout=30.0) as client:
        try:
            resp = client.get("/health")
        except httpx.HTTPError:
            pytest.skip(f"climate-options service is not running at {SERVICE_URL}")
        if resp.status_code != 200:
            pytest.skip("climate-options service is unhealthy")
        yield client
