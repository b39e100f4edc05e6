"""
Builders for conditions test data.

Defaults describe a mild, hazard-free summer afternoon so each test only
sets the values it is about.
"""
from datetime import datetime, timedelta, timezone

from weather_alerts.alerts.types import (
    Advisory,
    ConditionsSnapshot,
    CurrentConditions,
    HourlyConditions,
)

# UTC-7, the Phoenix offset Open-Meteo reports in summer
SITE_TZ = timezone(timedelta(hours=-7))


def make_current(**overrides) -> CurrentConditions:
    values = dict(
        temperature=78.0,
        apparent_temperature=80.0,
        wind_speed=8.0,
        weather_code=1,
        weather_description="Mainly clear",
        aqi=42.0,
        aqi_label="Good",
        is_winter_weather=False,
        is_severe_storm=False,
        time=datetime(2025, 7, 1, 11, 0, tzinfo=SITE_TZ),
    )
    values.update(overrides)
    return CurrentConditions(**values)


def make_hour(time: datetime, **overrides) -> HourlyConditions:
    values = dict(
        time=time,
        temperature=78.0,
        apparent_temperature=80.0,
        wind_speed=8.0,
        weather_code=1,
        weather_description="Mainly clear",
        aqi=42.0,
        aqi_label="Good",
        is_winter_weather=False,
        is_severe_storm=False,
    )
    values.update(overrides)
    return HourlyConditions(**values)


def make_hours(start: datetime, count: int, **overrides):
    """`count` consecutive hours beginning at `start`, all with the same values."""
    return [make_hour(start + timedelta(hours=i), **overrides) for i in range(count)]


def make_advisory(**overrides) -> Advisory:
    values = dict(
        event="Excessive Heat Warning",
        severity="Extreme",
        headline="Excessive Heat Warning issued July 1 by NWS Phoenix AZ",
        description="Dangerously hot conditions with temperatures up to 116.",
        instruction="Drink plenty of fluids and stay out of the sun.",
        onset="2025-07-01T10:00:00-07:00",
        expires="2025-07-02T20:00:00-07:00",
        sender_name="NWS Phoenix AZ",
    )
    values.update(overrides)
    return Advisory(**values)


def make_snapshot(current=None, hourly=None, advisories=None) -> ConditionsSnapshot:
    return ConditionsSnapshot(
        current=current or make_current(),
        hourly=list(hourly or []),
        advisories=list(advisories or []),
        timezone="America/Phoenix",
    )
