"""
Open-Meteo source module.

Provides current conditions and hourly forecasts (temperature, apparent
temperature, wind, WMO weather code) and US AQI from the air-quality API.

No API key is required.
"""

__all__ = ["client", "metadata"]
