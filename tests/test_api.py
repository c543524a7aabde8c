"""Tests for the REST API and the rendered dashboard page.

These tests use FastAPI's TestClient with the upstream clients patched out,
so request/response contracts are checked without any network access.
"""

import logging
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.services.geocoding import GeoLocation, GeocodingError, LocationNotFoundError
from app.services.weather import WeatherServiceError
from tests.conftest import make_current

MIAMI = GeoLocation(lat=25.7741728, lon=-80.19362, display="Miami, Miami-Dade County")
SAMPLE_QUERY = {"stock": 100, "strike": 100, "time": 1, "rate": 0.05, "vol": 0.2}


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def healthy_upstreams():
    with patch("app.services.geocoding.geocode", new=AsyncMock(return_value=MIAMI)) as geocode, \
         patch("app.services.weather.fetch_current_conditions", new=AsyncMock(return_value=make_current())) as fetch:
        yield geocode, fetch


# ── Ops ───────────────────────────────────────────────────────────────────────


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "service": "climate-options"}

    def test_request_id_header(self, client):
        response = client.get("/health")
        assert len(response.headers["X-Request-ID"]) == 12

    def test_access_log_carries_error_code(self, client, caplog):
        caplog.set_level(logging.INFO, logger="climate_options.access")
        response = client.get("/v1/option_price", params={**SAMPLE_QUERY, "vol": 0})
        assert response.status_code == 400
        access = [r.getMessage() for r in caplog.records if r.name == "climate_options.access"]
        assert any(
            "/v1/option_price 400 INVALID_OPTION_PARAMETERS" in line
            and response.headers["X-Request-ID"] in line
            for line in access
        )

    def test_access_log_has_no_code_on_success(self, client, caplog):
        caplog.set_level(logging.INFO, logger="climate_options.access")
        client.get("/health")
        access = [r.getMessage() for r in caplog.records if r.name == "climate_options.access"]
        assert access and access[-1].startswith("GET /health 200 ")
        assert "ERROR" not in access[-1]

    @patch("app.services.geocoding.geocode", new_callable=AsyncMock)
    def test_upstream_error_is_logged_with_code(self, mock_geocode, client, caplog):
        caplog.set_level(logging.INFO, logger="app.core.errors")
        mock_geocode.side_effect = GeocodingError(503, "Geocoding service error (503)")
        client.get("/v1/geocode", params={"q": "Miami"})
        warnings = [r for r in caplog.records if r.name == "app.core.errors" and r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "502 GEOCODING_UPSTREAM_ERROR" in warnings[0].getMessage()


# ── Pricing ───────────────────────────────────────────────────────────────────


class TestOptionPrice:
    """Test GET /v1/option_price."""

    def test_reference_prices(self, client):
        response = client.get("/v1/option_price", params=SAMPLE_QUERY)
        assert response.status_code == 200
        data = response.json()
        assert data["call"] == pytest.approx(10.4506, abs=1e-3)
        assert data["put"] == pytest.approx(5.5735, abs=1e-3)
        assert data["call_display"] == "$10.45"
        assert data["put_display"] == "$5.57"

    def test_zero_volatility_is_bad_request(self, client):
        response = client.get("/v1/option_price", params={**SAMPLE_QUERY, "vol": 0})
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "INVALID_OPTION_PARAMETERS"
        assert "vol" in error["message"]
        assert error["request_id"]

    def test_missing_parameter_is_bad_request(self, client):
        params = {k: v for k, v in SAMPLE_QUERY.items() if k != "strike"}
        response = client.get("/v1/option_price", params=params)
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "INVALID_OPTION_PARAMETERS"
        assert error["message"] == "Please fill all option parameter fields."

    @pytest.mark.parametrize("rate", ["five", "", "nan"])
    def test_unreadable_parameter_is_bad_request(self, client, rate):
        response = client.get("/v1/option_price", params={**SAMPLE_QUERY, "rate": rate})
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Please fill all option parameter fields."


# ── Location ──────────────────────────────────────────────────────────────────


class TestGeocode:
    """Test GET /v1/geocode."""

    @patch("app.services.geocoding.geocode", new_callable=AsyncMock)
    def test_success(self, mock_geocode, client):
        mock_geocode.return_value = MIAMI
        response = client.get("/v1/geocode", params={"q": "Miami, FL"})
        assert response.status_code == 200
        assert response.json() == {"lat": 25.7741728, "lon": -80.19362, "display": "Miami, Miami-Dade County"}
        mock_geocode.assert_awaited_once_with("Miami, FL")

    @patch("app.services.geocoding.geocode", new_callable=AsyncMock)
    def test_not_found(self, mock_geocode, client):
        mock_geocode.side_effect = LocationNotFoundError("Atlantis")
        response = client.get("/v1/geocode", params={"q": "Atlantis"})
        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "LOCATION_NOT_FOUND"
        assert error["message"] == "Location not found. Try a different city name."
        assert error["query"] == "Atlantis"

    def test_blank_query(self, client):
        response = client.get("/v1/geocode", params={"q": "  "})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "LOCATION_REQUIRED"

    @patch("app.services.geocoding.geocode", new_callable=AsyncMock)
    def test_upstream_failure_is_bad_gateway(self, mock_geocode, client):
        mock_geocode.side_effect = GeocodingError(503, "Geocoding service error (503)")
        response = client.get("/v1/geocode", params={"q": "Miami"})
        assert response.status_code == 502
        assert response.json()["error"]["code"] == "GEOCODING_UPSTREAM_ERROR"
        assert response.json()["error"]["upstream_status"] == 503


class TestReverseGeocode:
    """Test GET /v1/reverse_geocode."""

    @patch("app.services.geocoding.reverse_geocode", new_callable=AsyncMock)
    def test_label(self, mock_reverse, client):
        mock_reverse.return_value = "Miami, US"
        response = client.get("/v1/reverse_geocode", params={"lat": 25.76, "lon": -80.19})
        assert response.status_code == 200
        assert response.json() == {"label": "Miami, US"}

    def test_latitude_out_of_range(self, client):
        response = client.get("/v1/reverse_geocode", params={"lat": 95, "lon": 0})
        assert response.status_code == 422


# ── Climate risk ──────────────────────────────────────────────────────────────


class TestClimateRisk:
    """Test GET /v1/climate_risk."""

    def test_scores(self, client, healthy_upstreams):
        response = client.get("/v1/climate_risk", params={"location": "Miami, FL"})
        assert response.status_code == 200
        data = response.json()
        assert data["location"]["display"] == "Miami, Miami-Dade County"
        assert [s["dimension"] for s in data["scores"]] == ["weather", "carbon", "agri", "sea"]
        assert [s["score"] for s in data["scores"]] == [13, 11, 0, 5]
        assert data["scores"][0]["label"] == "Extreme Weather"
        assert data["scores"][0]["level"] == "Low"
        assert data["composite"]["score"] == 7
        assert data["composite"]["label"] == "Minimal Climate Stress"
        assert data["readings"][0] == {"name": "temp", "value": 70.0, "text": "70.0°F", "flag": ""}
        assert data["updated"].startswith("Updated ")

        geocode, fetch = healthy_upstreams
        fetch.assert_awaited_once()
        assert fetch.await_args.args[:2] == (MIAMI.lat, MIAMI.lon)

    @patch("app.services.weather.fetch_current_conditions", new_callable=AsyncMock)
    @patch("app.services.geocoding.geocode", new_callable=AsyncMock)
    def test_weather_failure(self, mock_geocode, mock_fetch, client):
        mock_geocode.return_value = MIAMI
        mock_fetch.side_effect = WeatherServiceError(500)
        response = client.get("/v1/climate_risk", params={"location": "Miami"})
        assert response.status_code == 502
        error = response.json()["error"]
        assert error["code"] == "WEATHER_UPSTREAM_ERROR"
        assert error["message"] == "Climate API error"


# ── Dashboard ─────────────────────────────────────────────────────────────────


class TestDashboardEndpoint:
    """Test POST /v1/dashboard."""

    def test_full_run(self, client, healthy_upstreams):
        response = client.post("/v1/dashboard", json={**SAMPLE_QUERY, "location": "Miami, FL"})
        assert response.status_code == 200
        data = response.json()
        assert data["error"] is None
        assert data["prices"]["call_display"] == "$10.45"
        assert data["climate"]["composite"]["score"] == 7

    @patch("app.services.geocoding.geocode", new_callable=AsyncMock)
    def test_location_not_found_keeps_prices(self, mock_geocode, client):
        mock_geocode.side_effect = LocationNotFoundError("Atlantis")
        response = client.post("/v1/dashboard", json={**SAMPLE_QUERY, "location": "Atlantis"})
        assert response.status_code == 200
        data = response.json()
        assert data["climate"] is None
        assert data["error"] == "Error: Location not found. Try a different city name."
        assert data["prices"]["put_display"] == "$5.57"

    def test_blank_location(self, client):
        response = client.post("/v1/dashboard", json={**SAMPLE_QUERY, "location": ""})
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Please enter a city or region for climate data."

    def test_negative_time(self, client):
        response = client.post("/v1/dashboard", json={**SAMPLE_QUERY, "time": -1, "location": "Miami"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_OPTION_PARAMETERS"

    def test_missing_field(self, client):
        response = client.post("/v1/dashboard", json={"stock": 100, "location": "Miami"})
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "INVALID_OPTION_PARAMETERS"
        assert error["message"] == "Please fill all option parameter fields."

    def test_non_numeric_field(self, client):
        response = client.post("/v1/dashboard", json={**SAMPLE_QUERY, "vol": "high", "location": "Miami"})
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Please fill all option parameter fields."

    def test_form_strings_are_accepted(self, client, healthy_upstreams):
        body = {k: str(v) for k, v in SAMPLE_QUERY.items()}
        response = client.post("/v1/dashboard", json={**body, "location": "Miami, FL"})
        assert response.status_code == 200
        assert response.json()["prices"]["call_display"] == "$10.45"


class TestSamples:

    def test_samples(self, client):
        response = client.get("/v1/samples")
        assert response.status_code == 200
        assert response.json() == {
            "stock": 100.0,
            "strike": 100.0,
            "time": 1.0,
            "rate": 0.05,
            "vol": 0.2,
            "location": "Miami, FL",
        }


# ── HTML page ─────────────────────────────────────────────────────────────────


class TestDashboardPage:
    """Test GET / (server-rendered dashboard)."""

    def test_empty_form(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert 'id="call-val">—<' in response.text
        assert "No location yet" in response.text

    def test_samples_run(self, client, healthy_upstreams):
        response = client.get("/", params={"samples": 1})
        assert response.status_code == 200
        html = response.text
        assert 'value="Miami, FL"' in html
        assert "$10.45" in html
        assert "$5.57" in html
        assert "Miami, Miami-Dade County" in html
        assert 'class="dot live"' in html
        assert "Minimal Climate Stress" in html
        assert 'id="fill-weather" style="width: 13%"' in html
        assert '<span class="status-badge badge-low">Low</span>' in html

    def test_invalid_inputs_alert(self, client):
        response = client.get("/", params={"stock": "", "strike": "100", "time": "1", "rate": "0.05", "vol": "0.2", "location": "Miami"})
        assert response.status_code == 200
        assert "Please fill all option parameter fields." in response.text
        assert 'id="call-val">—<' in response.text

    def test_blank_location_alert_still_prices(self, client):
        response = client.get("/", params={**SAMPLE_QUERY, "location": ""})
        assert response.status_code == 200
        assert "Please enter a city or region for climate data." in response.text
        assert "$10.45" in response.text

    @patch("app.services.geocoding.geocode", new_callable=AsyncMock)
    def test_location_error_shown_in_location_bar(self, mock_geocode, client):
        mock_geocode.side_effect = LocationNotFoundError("Atlantis")
        response = client.get("/", params={**SAMPLE_QUERY, "location": "Atlantis"})
        assert response.status_code == 200
        assert "Error: Location not found. Try a different city name." in response.text
        assert 'class="dot"' in response.text
        assert "$10.45" in response.text
