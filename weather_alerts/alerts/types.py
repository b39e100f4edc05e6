"""
Domain types for hazard evaluation and alert dispatch.

Everything here is plain data: conditions snapshots fetched per cycle,
immutable alert candidates produced by the evaluator, and the run summary
returned by the fan-out.
"""

import enum
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict, List, Optional


class Severity(str, enum.Enum):
    """Severity tier, ordered advisory < watch < warning."""

    ADVISORY = "advisory"
    WATCH = "watch"
    WARNING = "warning"

    @property
    def rank(self) -> int:
        """Display rank: warnings sort first."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.WARNING: 1,
    Severity.WATCH: 2,
    Severity.ADVISORY: 3,
}


class HazardType(str, enum.Enum):
    """Every alert type the evaluator can emit."""

    # Live conditions
    HEAT_INDEX = "heat_index"
    COLD_TEMP = "cold_temp"
    WIND_SPEED = "wind_speed"
    AQI = "aqi"
    WINTER_WEATHER = "winter_weather"
    SEVERE_STORM = "severe_storm"

    # Third-party severe-weather advisories
    EXTERNAL_ADVISORY = "external_advisory"

    # 24-hour forecast window
    FORECAST_HEAT = "forecast_heat"
    FORECAST_COLD = "forecast_cold"
    FORECAST_WIND = "forecast_wind"
    FORECAST_AQI = "forecast_aqi"
    FORECAST_WINTER = "forecast_winter"
    FORECAST_STORM = "forecast_storm"

    # 24-48 hour forecast window
    FAR_HEAT = "48hr_heat"
    FAR_COLD = "48hr_cold"
    FAR_WIND = "48hr_wind"
    FAR_AQI = "48hr_aqi"
    FAR_WINTER = "48hr_winter"
    FAR_STORM = "48hr_storm"

    @property
    def base(self) -> "HazardType":
        """The live hazard this type maps back to; used for cooldown keys and lookups."""
        return base_hazard_type(self.value)

    @property
    def is_forecast(self) -> bool:
        return self.value.startswith(FORECAST_PREFIXES)


FORECAST_PREFIXES = ("forecast_", "48hr_")

# Forecast suffix (after stripping the window prefix) -> live hazard
_FORECAST_SUFFIX_TO_BASE = {
    "heat": HazardType.HEAT_INDEX,
    "cold": HazardType.COLD_TEMP,
    "wind": HazardType.WIND_SPEED,
    "aqi": HazardType.AQI,
    "winter": HazardType.WINTER_WEATHER,
    "storm": HazardType.SEVERE_STORM,
}

BASE_HAZARD_TYPES = (
    HazardType.HEAT_INDEX,
    HazardType.COLD_TEMP,
    HazardType.WIND_SPEED,
    HazardType.AQI,
    HazardType.WINTER_WEATHER,
    HazardType.SEVERE_STORM,
    HazardType.EXTERNAL_ADVISORY,
)


def base_hazard_type(alert_type: str) -> HazardType:
    """
    Strip the forecast window prefix and resolve to the live hazard type.

    "forecast_heat", "48hr_heat" and "heat_index" all resolve to
    HazardType.HEAT_INDEX so they share one cooldown slot.

    Raises:
        ValueError: If the string is not a known hazard type
    """
    for prefix in FORECAST_PREFIXES:
        if alert_type.startswith(prefix):
            suffix = alert_type[len(prefix):]
            if suffix not in _FORECAST_SUFFIX_TO_BASE:
                raise ValueError(f"Unknown forecast hazard type: {alert_type}")
            return _FORECAST_SUFFIX_TO_BASE[suffix]
    return HazardType(alert_type)


@dataclass(frozen=True)
class Thresholds:
    """Per-metric trigger values. Units: °F, °F, mph, US AQI."""

    heat_index: float
    cold_temp: float
    wind_speed: float
    aqi: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class AdvisoryDetail:
    """Detail carried through from a third-party advisory for rendering."""

    instruction: Optional[str] = None
    onset: Optional[str] = None
    expires: Optional[str] = None
    sender_name: Optional[str] = None
    full_description: Optional[str] = None


@dataclass(frozen=True)
class AlertCandidate:
    """A detected hazard, not yet gated or dispatched."""

    hazard_type: HazardType
    severity: Severity
    label: str
    threshold: float
    actual: float
    unit: str
    description: Optional[str] = None
    advisory_detail: Optional[AdvisoryDetail] = None

    @property
    def cooldown_key(self) -> HazardType:
        return self.hazard_type.base

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.hazard_type.value,
            "severity": self.severity.value,
            "label": self.label,
            "threshold": self.threshold,
            "actual": self.actual,
            "unit": self.unit,
            "description": self.description,
            "advisory_detail": asdict(self.advisory_detail) if self.advisory_detail else None,
        }


@dataclass
class CurrentConditions:
    """Live values. A metric the source reported as null is None and is not evaluated."""

    temperature: Optional[float]
    apparent_temperature: Optional[float]
    wind_speed: Optional[float]
    weather_code: Optional[int]
    weather_description: str
    aqi: Optional[float] = None
    aqi_label: str = "N/A"
    is_winter_weather: bool = False
    is_severe_storm: bool = False
    time: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["time"] = self.time.isoformat() if self.time else None
        return data


@dataclass
class HourlyConditions:
    """One forecast hour. time is timezone-aware (site-local offset)."""

    time: datetime
    temperature: float
    apparent_temperature: float
    wind_speed: float
    weather_code: int
    weather_description: str
    aqi: Optional[float] = None
    aqi_label: str = "N/A"
    is_winter_weather: bool = False
    is_severe_storm: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["time"] = self.time.isoformat()
        return data


@dataclass(frozen=True)
class Advisory:
    """An active third-party severe-weather advisory (e.g. NWS)."""

    event: str
    severity: str
    headline: Optional[str] = None
    description: Optional[str] = None
    instruction: Optional[str] = None
    onset: Optional[str] = None
    expires: Optional[str] = None
    sender_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ConditionsSnapshot:
    """Fresh conditions for one site, fetched once per evaluation cycle."""

    current: CurrentConditions
    hourly: List[HourlyConditions] = field(default_factory=list)
    advisories: List[Advisory] = field(default_factory=list)
    timezone: Optional[str] = None

    @property
    def display_hourly(self) -> List[HourlyConditions]:
        """Every third hour of the first 24, for email tables and audit rows."""
        return self.hourly[:24:3]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current": self.current.to_dict(),
            "hourly": [h.to_dict() for h in self.display_hourly],
            "advisories": [a.to_dict() for a in self.advisories],
            "timezone": self.timezone,
        }


@dataclass(frozen=True)
class SiteRef:
    """Read-only view of a job site as seen by the alert engine."""

    id: int
    name: str
    latitude: float
    longitude: float
    city: Optional[str] = None
    state: Optional[str] = None
    manager_name: Optional[str] = None
    manager_email: Optional[str] = None

    @property
    def location(self) -> str:
        parts = [p for p in (self.city, self.state) if p]
        return ", ".join(parts)


@dataclass
class RunResult:
    """Summary of one fan-out run."""

    sites_checked: int = 0
    notifications_sent: int = 0
    errors: int = 0
    elapsed_seconds: float = 0.0
    suppressed: int = 0
    trigger: str = "manual"
    skipped: bool = False

    @property
    def alerts_sent(self) -> int:
        return self.notifications_sent

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
