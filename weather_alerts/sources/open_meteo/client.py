"""
Open-Meteo API client.

Official API documentation:
https://open-meteo.com/en/docs
https://open-meteo.com/en/docs/air-quality-api

Two endpoints are used:
- Forecast: current + hourly temperature, apparent temperature, wind, weather code
- Air quality: current + hourly US AQI

No API key is required for non-commercial use.
"""
import logging
from typing import Any, Dict

import httpx

from weather_alerts.core.http_client import BaseAPIClient

logger = logging.getLogger(__name__)

WEATHER_VARIABLES = "temperature_2m,apparent_temperature,wind_speed_10m,weather_code"


class OpenMeteoClient(BaseAPIClient):
    """
    HTTP client for the Open-Meteo forecast and air-quality APIs.

    Inherits retry logic, backoff, and error handling from BaseAPIClient.
    """

    SOURCE_NAME = "open_meteo"
    BASE_URL = "https://api.open-meteo.com/v1"
    AIR_QUALITY_URL = "https://air-quality-api.open-meteo.com/v1/air-quality"

    # Three days guarantees at least 48 forward hours from any time of day
    FORECAST_DAYS = 3

    def _error_detail(self, response: httpx.Response) -> str:
        # Errors arrive as {"error": true, "reason": "..."}
        try:
            body = response.json()
        except ValueError:
            return super()._error_detail(response)
        if isinstance(body, dict) and body.get("reason"):
            return str(body["reason"])
        return super()._error_detail(response)

    async def fetch_forecast(self, latitude: float, longitude: float) -> Dict[str, Any]:
        """
        Fetch current conditions and the hourly forecast.

        Units are °F and mph; times are site-local (timezone=auto).
        """
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "current": WEATHER_VARIABLES,
            "hourly": WEATHER_VARIABLES,
            "forecast_days": self.FORECAST_DAYS,
            "temperature_unit": "fahrenheit",
            "wind_speed_unit": "mph",
            "timezone": "auto",
        }
        return await self.get(
            "forecast", params=params, resource_id=f"forecast:{latitude},{longitude}"
        )

    async def fetch_air_quality(self, latitude: float, longitude: float) -> Dict[str, Any]:
        """Fetch current and hourly US AQI."""
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "current": "us_aqi",
            "hourly": "us_aqi",
            "forecast_days": self.FORECAST_DAYS,
            "timezone": "auto",
        }
        return await self.get(
            self.AIR_QUALITY_URL,
            params=params,
            resource_id=f"air_quality:{latitude},{longitude}",
        )
