"""
Open-Meteo metadata utilities.

Handles:
- WMO weather code descriptions
- Winter-weather and severe-storm code classification
- US AQI category labels
- Timestamp parsing using the response's UTC offset
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

# WMO weather interpretation codes used by Open-Meteo
WEATHER_CODE_DESCRIPTIONS = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Foggy",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snow",
    73: "Moderate snow",
    75: "Heavy snow",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}

# Freezing rain, snow, snow grains, snow showers
WINTER_WEATHER_CODES = frozenset({66, 67, 71, 73, 75, 77, 85, 86})

# Thunderstorm, with or without hail
SEVERE_STORM_CODES = frozenset({95, 96, 99})


def get_weather_description(code: Optional[int]) -> str:
    return WEATHER_CODE_DESCRIPTIONS.get(code, "Unknown")


def is_winter_weather(code: Optional[int]) -> bool:
    return code in WINTER_WEATHER_CODES


def is_severe_storm(code: Optional[int]) -> bool:
    return code in SEVERE_STORM_CODES


def get_aqi_label(aqi: Optional[float]) -> str:
    """
    US EPA AQI category for a value.

    Args:
        aqi: US AQI value, or None when unavailable

    Returns:
        Category label ("N/A" when aqi is None)
    """
    if aqi is None:
        return "N/A"
    if aqi <= 50:
        return "Good"
    if aqi <= 100:
        return "Moderate"
    if aqi <= 150:
        return "Unhealthy for Sensitive Groups"
    if aqi <= 200:
        return "Unhealthy"
    if aqi <= 300:
        return "Very Unhealthy"
    return "Hazardous"


def parse_local_time(value: str, utc_offset_seconds: int) -> datetime:
    """
    Parse an Open-Meteo local ISO timestamp ("2024-07-01T15:00").

    With timezone=auto the API returns wall-clock times without an offset;
    the offset comes separately as utc_offset_seconds.
    """
    tz = timezone(timedelta(seconds=utc_offset_seconds))
    return datetime.fromisoformat(value).replace(tzinfo=tz)
