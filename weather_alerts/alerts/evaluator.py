"""
Hazard evaluation.

Turns a conditions snapshot into alert candidates. Three independent
evaluations, all pure (no I/O, no mutation of inputs):

- Current conditions  -> WATCH, or WARNING past the extreme breakpoint
- Forecast lookahead  -> ADVISORY, two disjoint windows ahead of `now`
- External advisories -> WARNING for Extreme/Severe, WATCH otherwise

Canonical output order is current, 48-hour window, 24-hour window,
advisories. Order only affects logs and display.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Sequence

from weather_alerts.alerts.types import (
    Advisory,
    AdvisoryDetail,
    AlertCandidate,
    ConditionsSnapshot,
    CurrentConditions,
    HazardType,
    HourlyConditions,
    Severity,
    Thresholds,
)

# Extreme breakpoints: strictly past these a live hazard escalates to WARNING
EXTREME_HEAT_INDEX_F = 105.0
EXTREME_COLD_TEMP_F = 0.0
EXTREME_WIND_SPEED_MPH = 60.0
EXTREME_AQI = 200.0

HIGH_SEVERITY_ADVISORY_LEVELS = frozenset({"Extreme", "Severe"})

NEAR_WINDOW = "24-Hour"
FAR_WINDOW = "48-Hour"


# =============================================================================
# Current conditions
# =============================================================================


def evaluate_current(
    current: CurrentConditions, thresholds: Thresholds
) -> List[AlertCandidate]:
    """
    Compare live values against the configured thresholds.

    Threshold crossings are strict (value > threshold, or < for cold), and
    so are the extreme breakpoints: 105°F apparent temperature is a WATCH,
    105.01°F a WARNING.
    """
    candidates: List[AlertCandidate] = []

    if current.apparent_temperature is not None and current.apparent_temperature > thresholds.heat_index:
        extreme = current.apparent_temperature > EXTREME_HEAT_INDEX_F
        candidates.append(AlertCandidate(
            hazard_type=HazardType.HEAT_INDEX,
            severity=Severity.WARNING if extreme else Severity.WATCH,
            label="Extreme Heat Warning" if extreme else "Heat Index Watch",
            threshold=thresholds.heat_index,
            actual=current.apparent_temperature,
            unit="°F",
        ))

    if current.temperature is not None and current.temperature < thresholds.cold_temp:
        extreme = current.temperature < EXTREME_COLD_TEMP_F
        candidates.append(AlertCandidate(
            hazard_type=HazardType.COLD_TEMP,
            severity=Severity.WARNING if extreme else Severity.WATCH,
            label="Extreme Cold Warning" if extreme else "Cold Temperature Watch",
            threshold=thresholds.cold_temp,
            actual=current.temperature,
            unit="°F",
        ))

    if current.wind_speed is not None and current.wind_speed > thresholds.wind_speed:
        extreme = current.wind_speed > EXTREME_WIND_SPEED_MPH
        candidates.append(AlertCandidate(
            hazard_type=HazardType.WIND_SPEED,
            severity=Severity.WARNING if extreme else Severity.WATCH,
            label="Extreme Wind Warning" if extreme else "High Wind Watch",
            threshold=thresholds.wind_speed,
            actual=current.wind_speed,
            unit="mph",
        ))

    if current.aqi is not None and current.aqi > thresholds.aqi:
        extreme = current.aqi > EXTREME_AQI
        candidates.append(AlertCandidate(
            hazard_type=HazardType.AQI,
            severity=Severity.WARNING if extreme else Severity.WATCH,
            label="Hazardous Air Quality Warning" if extreme else "Air Quality Watch",
            threshold=thresholds.aqi,
            actual=current.aqi,
            unit="AQI",
        ))

    if current.is_winter_weather:
        candidates.append(AlertCandidate(
            hazard_type=HazardType.WINTER_WEATHER,
            severity=Severity.WATCH,
            label="Winter Weather Watch",
            threshold=0.0,
            actual=float(current.weather_code),
            unit="",
            description=f"{current.weather_description} occurring now",
        ))

    if current.is_severe_storm:
        candidates.append(AlertCandidate(
            hazard_type=HazardType.SEVERE_STORM,
            severity=Severity.WARNING,
            label="Severe Thunderstorm Warning",
            threshold=0.0,
            actual=float(current.weather_code),
            unit="",
            description=f"{current.weather_description} occurring now",
        ))

    return candidates


# =============================================================================
# Forecast lookahead
# =============================================================================


@dataclass(frozen=True)
class _ThresholdMetric:
    """How one numeric metric is scanned inside a forecast window."""

    suffix: str
    label: str
    unit: str
    value: Callable[[HourlyConditions], Optional[float]]
    threshold: Callable[[Thresholds], float]
    rising: bool  # True: worst is max and crossing is >, False: worst is min and crossing is <
    describe: str


_THRESHOLD_METRICS = (
    _ThresholdMetric(
        suffix="heat",
        label="Heat Index Advisory",
        unit="°F",
        value=lambda h: h.apparent_temperature,
        threshold=lambda t: t.heat_index,
        rising=True,
        describe="Heat index projected to reach {value}°F at {time}",
    ),
    _ThresholdMetric(
        suffix="cold",
        label="Cold Temperature Advisory",
        unit="°F",
        value=lambda h: h.temperature,
        threshold=lambda t: t.cold_temp,
        rising=False,
        describe="Temperature projected to drop to {value}°F at {time}",
    ),
    _ThresholdMetric(
        suffix="wind",
        label="High Wind Advisory",
        unit="mph",
        value=lambda h: h.wind_speed,
        threshold=lambda t: t.wind_speed,
        rising=True,
        describe="Wind speed projected to reach {value} mph at {time}",
    ),
    _ThresholdMetric(
        suffix="aqi",
        label="Air Quality Advisory",
        unit="AQI",
        value=lambda h: h.aqi,
        threshold=lambda t: t.aqi,
        rising=True,
        describe="AQI projected to reach {value} at {time}",
    ),
)

# (suffix, label, flag accessor)
_FLAG_METRICS = (
    ("winter", "Winter Weather Advisory", lambda h: h.is_winter_weather),
    ("storm", "Severe Storm Advisory", lambda h: h.is_severe_storm),
)


def format_local_time(moment: datetime) -> str:
    """'3:00 PM' in the timestamp's own offset."""
    return moment.strftime("%I:%M %p").lstrip("0")


def _format_value(value: float) -> str:
    return f"{value:g}"


def split_forecast_windows(
    hourly: Sequence[HourlyConditions], now: datetime
) -> "tuple[List[HourlyConditions], List[HourlyConditions]]":
    """
    Bucket forecast hours into the near and far lookahead windows.

    near: 0h < ahead < 24h
    far:  24h < ahead <= 48h

    An hour exactly 24h ahead falls in neither window.
    """
    day = timedelta(hours=24)
    two_days = timedelta(hours=48)
    near: List[HourlyConditions] = []
    far: List[HourlyConditions] = []

    for hour in hourly:
        ahead = hour.time - now
        # Strict at 24h on both sides on purpose; do not widen the near
        # window to `<= day` (see test_hour_at_exactly_24h_is_in_neither_window).
        if timedelta(0) < ahead < day:
            near.append(hour)
        elif day < ahead <= two_days:
            far.append(hour)

    return near, far


def scan_window(
    hours: Sequence[HourlyConditions],
    type_prefix: str,
    label_prefix: str,
    thresholds: Thresholds,
) -> List[AlertCandidate]:
    """
    Produce advisories for one forecast window.

    Numeric metrics report the single most extreme hour that crosses the
    threshold. Winter and storm flags report the first hour they appear.
    """
    advisories: List[AlertCandidate] = []

    for metric in _THRESHOLD_METRICS:
        limit = metric.threshold(thresholds)
        crossing = []
        for hour in hours:
            value = metric.value(hour)
            if value is None:
                continue
            if (metric.rising and value > limit) or (not metric.rising and value < limit):
                crossing.append((value, hour))
        if not crossing:
            continue

        pick = max if metric.rising else min
        worst_value, worst_hour = pick(crossing, key=lambda pair: pair[0])
        advisories.append(AlertCandidate(
            hazard_type=HazardType(type_prefix + metric.suffix),
            severity=Severity.ADVISORY,
            label=f"{label_prefix} {metric.label}",
            threshold=limit,
            actual=worst_value,
            unit=metric.unit,
            description=metric.describe.format(
                value=_format_value(worst_value),
                time=format_local_time(worst_hour.time),
            ),
        ))

    for suffix, label, flag in _FLAG_METRICS:
        first = next((hour for hour in hours if flag(hour)), None)
        if first is None:
            continue
        advisories.append(AlertCandidate(
            hazard_type=HazardType(type_prefix + suffix),
            severity=Severity.ADVISORY,
            label=f"{label_prefix} {label}",
            threshold=0.0,
            actual=0.0,
            unit="",
            description=f"{first.weather_description} expected at {format_local_time(first.time)}",
        ))

    return advisories


def evaluate_forecast(
    hourly: Sequence[HourlyConditions], thresholds: Thresholds, now: datetime
) -> List[AlertCandidate]:
    """
    Advisory candidates for the far (24-48h) window followed by the near (0-24h) one.

    Args:
        hourly: Forecast hours with timezone-aware timestamps
        thresholds: Forecast thresholds
        now: Evaluation time (timezone-aware)
    """
    near, far = split_forecast_windows(hourly, now)
    advisories: List[AlertCandidate] = []
    if far:
        advisories.extend(scan_window(far, "48hr_", FAR_WINDOW, thresholds))
    if near:
        advisories.extend(scan_window(near, "forecast_", NEAR_WINDOW, thresholds))
    return advisories


# =============================================================================
# External advisories
# =============================================================================


def evaluate_advisories(advisories: Sequence[Advisory]) -> List[AlertCandidate]:
    """Wrap each active third-party advisory as an external_advisory candidate."""
    candidates = []
    for advisory in advisories:
        high = advisory.severity in HIGH_SEVERITY_ADVISORY_LEVELS
        candidates.append(AlertCandidate(
            hazard_type=HazardType.EXTERNAL_ADVISORY,
            severity=Severity.WARNING if high else Severity.WATCH,
            label=advisory.event,
            threshold=0.0,
            actual=0.0,
            unit="",
            description=advisory.headline,
            advisory_detail=AdvisoryDetail(
                instruction=advisory.instruction,
                onset=advisory.onset,
                expires=advisory.expires,
                sender_name=advisory.sender_name,
                full_description=advisory.description,
            ),
        ))
    return candidates


def evaluate_all(
    conditions: ConditionsSnapshot,
    current_thresholds: Thresholds,
    forecast_thresholds: Thresholds,
    now: datetime,
) -> List[AlertCandidate]:
    """All candidates for one site in canonical order."""
    return (
        evaluate_current(conditions.current, current_thresholds)
        + evaluate_forecast(conditions.hourly, forecast_thresholds, now)
        + evaluate_advisories(conditions.advisories)
    )
