"""Application configuration loaded from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Upstream APIs (both keyless)
    nominatim_base_url: str = "https://nominatim.openstreetmap.org"
    open_meteo_base_url: str = "https://api.open-meteo.com"
    request_timeout_seconds: float = 10.0
    user_agent: str = "climate-options-dashboard/0.1 (contact@example.com)"
    accept_language: str = "en"

    # Scoring baselines
    reference_pressure_hpa: float = 1013.0
    temperate_baseline_f: float = 65.0

    # Sample inputs served by /v1/samples and the "Load samples" link
    sample_stock: float = 100.0
    sample_strike: float = 100.0
    sample_time_years: float = 1.0
    sample_rate: float = 0.05
    sample_volatility: float = 0.2
    sample_location: str = "Miami, FL"

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
