"""
Unit tests for weather_alerts/sources/conditions.py and the Open-Meteo
metadata helpers it relies on.

Upstream clients are mocked; no network.
"""
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from weather_alerts.alerts.evaluator import evaluate_all
from weather_alerts.alerts.types import Thresholds
from weather_alerts.core.api_errors import FatalError, RetryableError, TransientFetchError
from weather_alerts.sources.conditions import LiveConditionsProvider, build_snapshot
from weather_alerts.sources.nws.client import parse_alert_features
from weather_alerts.sources.open_meteo.metadata import (
    get_aqi_label,
    get_weather_description,
    is_severe_storm,
    is_winter_weather,
)


def _forecast_payload():
    return {
        "timezone": "America/Phoenix",
        "utc_offset_seconds": -25200,
        "current": {
            "time": "2025-07-01T11:00",
            "temperature_2m": 101.2,
            "apparent_temperature": 106.4,
            "wind_speed_10m": 9.1,
            "weather_code": 0,
        },
        "hourly": {
            "time": ["2025-07-01T11:00", "2025-07-01T12:00", "2025-07-01T13:00"],
            "temperature_2m": [101.2, 103.0, None],
            "apparent_temperature": [106.4, 108.1, 109.0],
            "wind_speed_10m": [9.1, 10.4, 11.0],
            "weather_code": [0, 95, 1],
        },
    }


def _aqi_payload():
    return {
        "current": {"us_aqi": 88},
        "hourly": {
            "time": ["2025-07-01T12:00", "2025-07-01T13:00"],
            "us_aqi": [160, 170],
        },
    }


def _alerts_payload():
    return {
        "features": [
            {
                "properties": {
                    "event": "Excessive Heat Warning",
                    "severity": "Extreme",
                    "headline": "Excessive Heat Warning until 8 PM",
                    "instruction": "Stay hydrated.",
                    "senderName": "NWS Phoenix AZ",
                }
            },
            {"properties": {"severity": "Minor"}},
        ]
    }


def _provider(weather=None, aqi=None, advisories=None):
    weather_client = MagicMock()
    weather_client.SOURCE_NAME = "open_meteo"
    weather_client.fetch_forecast = AsyncMock(
        side_effect=weather if isinstance(weather, Exception) else None,
        return_value=weather if not isinstance(weather, Exception) else None,
    )
    weather_client.fetch_air_quality = AsyncMock(
        side_effect=aqi if isinstance(aqi, Exception) else None,
        return_value=aqi if not isinstance(aqi, Exception) else None,
    )
    weather_client.close = AsyncMock()

    advisory_client = MagicMock()
    advisory_client.fetch_active_alerts = AsyncMock(
        side_effect=advisories if isinstance(advisories, Exception) else None,
        return_value=advisories if not isinstance(advisories, Exception) else [],
    )
    advisory_client.close = AsyncMock()
    return LiveConditionsProvider(weather_client, advisory_client)


@pytest.mark.unit
class TestBuildSnapshot:

    def test_current_conditions(self):
        snapshot = build_snapshot(_forecast_payload(), _aqi_payload())

        current = snapshot.current
        assert current.temperature == 101.2
        assert current.apparent_temperature == 106.4
        assert current.weather_description == "Clear sky"
        assert current.aqi == 88
        assert current.aqi_label == "Moderate"
        assert current.time.utcoffset() == timedelta(hours=-7)
        assert snapshot.timezone == "America/Phoenix"

    def test_hours_with_missing_values_are_dropped(self):
        snapshot = build_snapshot(_forecast_payload(), _aqi_payload())
        assert [h.time.hour for h in snapshot.hourly] == [11, 12]

    def test_hourly_aqi_is_matched_by_timestamp(self):
        snapshot = build_snapshot(_forecast_payload(), _aqi_payload())
        first, second = snapshot.hourly
        assert first.aqi is None
        assert first.aqi_label == "N/A"
        assert second.aqi == 160
        assert second.is_severe_storm is True

    def test_null_current_values_do_not_block_evaluation(self):
        weather = _forecast_payload()
        weather["current"]["temperature_2m"] = None
        weather["current"]["apparent_temperature"] = 99.0
        advisories = parse_alert_features(_alerts_payload())

        snapshot = build_snapshot(weather, _aqi_payload(), advisories)
        thresholds = Thresholds(heat_index=95.0, cold_temp=20.0, wind_speed=45.0, aqi=150.0)
        candidates = evaluate_all(
            snapshot, thresholds, thresholds, snapshot.current.time + timedelta(days=3)
        )

        assert snapshot.current.temperature is None
        assert [c.hazard_type.value for c in candidates] == ["heat_index", "external_advisory"]

    def test_without_air_quality(self):
        snapshot = build_snapshot(_forecast_payload())
        assert snapshot.current.aqi is None
        assert snapshot.current.aqi_label == "N/A"
        assert all(h.aqi is None for h in snapshot.hourly)


@pytest.mark.unit
class TestLiveConditionsProvider:

    @pytest.mark.asyncio
    async def test_combines_all_sources(self):
        provider = _provider(
            weather=_forecast_payload(),
            aqi=_aqi_payload(),
            advisories=parse_alert_features(_alerts_payload()),
        )

        snapshot = await provider.fetch(33.45, -112.07)

        assert snapshot.current.aqi == 88
        [advisory] = snapshot.advisories
        assert advisory.event == "Excessive Heat Warning"
        assert advisory.sender_name == "NWS Phoenix AZ"

    @pytest.mark.asyncio
    async def test_weather_failure_is_transient_fetch_error(self):
        provider = _provider(
            weather=RetryableError("Server error", source="open_meteo", status_code=503),
            aqi=_aqi_payload(),
        )

        with pytest.raises(TransientFetchError) as exc_info:
            await provider.fetch(33.45, -112.07)

        assert exc_info.value.status_code == 503
        assert exc_info.value.retryable is True

    @pytest.mark.asyncio
    async def test_air_quality_failure_degrades_to_unavailable(self):
        provider = _provider(
            weather=_forecast_payload(),
            aqi=FatalError("Access denied", source="open_meteo", status_code=403),
        )

        snapshot = await provider.fetch(33.45, -112.07)

        assert snapshot.current.aqi is None
        assert snapshot.current.aqi_label == "N/A"

    @pytest.mark.asyncio
    async def test_advisory_failure_degrades_to_none(self):
        provider = _provider(
            weather=_forecast_payload(),
            aqi=_aqi_payload(),
            advisories=FatalError("Not found", source="nws", status_code=404),
        )

        snapshot = await provider.fetch(33.45, -112.07)

        assert snapshot.advisories == []

    @pytest.mark.asyncio
    async def test_malformed_payload_is_transient_fetch_error(self):
        provider = _provider(weather={"hourly": {}}, aqi=_aqi_payload())

        with pytest.raises(TransientFetchError):
            await provider.fetch(33.45, -112.07)

    @pytest.mark.asyncio
    async def test_close_closes_both_clients(self):
        provider = _provider(weather=_forecast_payload())
        await provider.close()
        provider.weather_client.close.assert_awaited_once()
        provider.advisory_client.close.assert_awaited_once()


@pytest.mark.unit
class TestMetadata:

    def test_weather_codes(self):
        assert get_weather_description(75) == "Heavy snow"
        assert get_weather_description(12345) == "Unknown"
        assert is_winter_weather(66) and is_winter_weather(86)
        assert not is_winter_weather(61)
        assert is_severe_storm(99)
        assert not is_severe_storm(82)

    @pytest.mark.parametrize("aqi,label", [
        (None, "N/A"),
        (50, "Good"),
        (51, "Moderate"),
        (150, "Unhealthy for Sensitive Groups"),
        (200, "Unhealthy"),
        (300, "Very Unhealthy"),
        (301, "Hazardous"),
    ])
    def test_aqi_labels(self, aqi, label):
        assert get_aqi_label(aqi) == label

    def test_nws_features_without_event_are_skipped(self):
        advisories = parse_alert_features(_alerts_payload())
        assert [a.event for a in advisories] == ["Excessive Heat Warning"]
        assert advisories[0].severity == "Extreme"
