"""
Conditions provider.

Combines the Open-Meteo forecast, Open-Meteo air quality and NWS active
alerts into one ConditionsSnapshot per site. The weather forecast is
required; air quality and advisories degrade to "unavailable" (aqi=None,
no advisories) when their source fails.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from weather_alerts.alerts.types import (
    Advisory,
    ConditionsSnapshot,
    CurrentConditions,
    HourlyConditions,
)
from weather_alerts.core.api_errors import APIError, TransientFetchError
from weather_alerts.sources.nws.client import NWSClient
from weather_alerts.sources.open_meteo.client import OpenMeteoClient
from weather_alerts.sources.open_meteo.metadata import (
    get_aqi_label,
    get_weather_description,
    is_severe_storm,
    is_winter_weather,
    parse_local_time,
)

logger = logging.getLogger(__name__)


class ConditionsProvider(ABC):
    """Supplies current and forecast hazard data for a coordinate."""

    @abstractmethod
    async def fetch(self, latitude: float, longitude: float) -> ConditionsSnapshot:
        """
        Fetch a fresh snapshot.

        Raises:
            TransientFetchError: If the primary weather source fails
        """


def _build_current(weather: Dict[str, Any], aqi_data: Optional[Dict[str, Any]]) -> CurrentConditions:
    current = weather["current"]
    offset = weather.get("utc_offset_seconds", 0)
    code = current.get("weather_code")
    aqi = (aqi_data or {}).get("current", {}).get("us_aqi")

    return CurrentConditions(
        temperature=current.get("temperature_2m"),
        apparent_temperature=current.get("apparent_temperature"),
        wind_speed=current.get("wind_speed_10m"),
        weather_code=code,
        weather_description=get_weather_description(code),
        aqi=aqi,
        aqi_label=get_aqi_label(aqi),
        is_winter_weather=is_winter_weather(code),
        is_severe_storm=is_severe_storm(code),
        time=parse_local_time(current["time"], offset) if current.get("time") else None,
    )


def _build_hourly(
    weather: Dict[str, Any], aqi_data: Optional[Dict[str, Any]]
) -> List[HourlyConditions]:
    hourly = weather.get("hourly") or {}
    offset = weather.get("utc_offset_seconds", 0)

    # AQI hours are matched by timestamp; the two APIs may cover different spans
    aqi_by_time: Dict[str, Optional[float]] = {}
    if aqi_data and aqi_data.get("hourly"):
        aqi_hourly = aqi_data["hourly"]
        aqi_by_time = dict(zip(aqi_hourly.get("time", []), aqi_hourly.get("us_aqi", [])))

    hours = []
    for i, stamp in enumerate(hourly.get("time", [])):
        temperature = hourly["temperature_2m"][i]
        apparent = hourly["apparent_temperature"][i]
        wind = hourly["wind_speed_10m"][i]
        if temperature is None or apparent is None or wind is None:
            continue
        code = hourly["weather_code"][i]
        aqi = aqi_by_time.get(stamp)
        hours.append(HourlyConditions(
            time=parse_local_time(stamp, offset),
            temperature=temperature,
            apparent_temperature=apparent,
            wind_speed=wind,
            weather_code=code,
            weather_description=get_weather_description(code),
            aqi=aqi,
            aqi_label=get_aqi_label(aqi),
            is_winter_weather=is_winter_weather(code),
            is_severe_storm=is_severe_storm(code),
        ))
    return hours


def build_snapshot(
    weather: Dict[str, Any],
    aqi_data: Optional[Dict[str, Any]] = None,
    advisories: Optional[List[Advisory]] = None,
) -> ConditionsSnapshot:
    """Assemble a snapshot from raw Open-Meteo payloads and parsed advisories."""
    return ConditionsSnapshot(
        current=_build_current(weather, aqi_data),
        hourly=_build_hourly(weather, aqi_data),
        advisories=list(advisories or []),
        timezone=weather.get("timezone"),
    )


class LiveConditionsProvider(ConditionsProvider):
    """
    Fetches weather, air quality and advisories concurrently.

    Args:
        weather_client: Open-Meteo client (forecast and air quality)
        advisory_client: NWS client, or None to skip advisories
    """

    def __init__(
        self,
        weather_client: OpenMeteoClient,
        advisory_client: Optional[NWSClient] = None,
    ):
        self.weather_client = weather_client
        self.advisory_client = advisory_client

    async def _fetch_advisories(self, latitude: float, longitude: float) -> List[Advisory]:
        if self.advisory_client is None:
            return []
        return await self.advisory_client.fetch_active_alerts(latitude, longitude)

    async def fetch(self, latitude: float, longitude: float) -> ConditionsSnapshot:
        weather, aqi_data, advisories = await asyncio.gather(
            self.weather_client.fetch_forecast(latitude, longitude),
            self.weather_client.fetch_air_quality(latitude, longitude),
            self._fetch_advisories(latitude, longitude),
            return_exceptions=True,
        )

        for result in (weather, aqi_data, advisories):
            if isinstance(result, BaseException) and not isinstance(result, Exception):
                raise result

        if isinstance(weather, APIError):
            raise TransientFetchError(
                message=f"Weather unavailable for {latitude},{longitude}: {weather.message}",
                source=weather.source,
                status_code=weather.status_code,
            ) from weather
        if isinstance(weather, Exception):
            raise weather

        if isinstance(aqi_data, Exception):
            logger.warning(f"Air quality unavailable for {latitude},{longitude}: {aqi_data}")
            aqi_data = None

        if isinstance(advisories, Exception):
            logger.warning(f"Advisories unavailable for {latitude},{longitude}: {advisories}")
            advisories = []

        try:
            return build_snapshot(weather, aqi_data, advisories)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise TransientFetchError(
                message=f"Malformed weather response for {latitude},{longitude}: {e!r}",
                source=self.weather_client.SOURCE_NAME,
            ) from e

    async def close(self) -> None:
        await self.weather_client.close()
        if self.advisory_client is not None:
            await self.advisory_client.close()
