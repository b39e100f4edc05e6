"""
Cooldown gate.

Suppresses repeat notifications for the same (site, hazard) pair inside the
cooldown window. Keys are always the base hazard type, so live and forecast
variants of one hazard share a single slot.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional, Union

from weather_alerts.alerts.store import AlertStore
from weather_alerts.alerts.types import HazardType, base_hazard_type
from weather_alerts.core.models import utcnow

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_HOURS = 4.0


def cooldown_key(hazard_type: Union[HazardType, str]) -> str:
    """'forecast_heat', '48hr_heat' and 'heat_index' all map to 'heat_index'."""
    value = hazard_type.value if isinstance(hazard_type, HazardType) else hazard_type
    return base_hazard_type(value).value


class CooldownGate:
    """
    Decides whether a notification for (site, hazard) is currently suppressed.

    Active while now - last_notified < window; equal or greater allows.
    """

    def __init__(
        self,
        store: AlertStore,
        window: Optional[timedelta] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.window = window if window is not None else timedelta(hours=DEFAULT_COOLDOWN_HOURS)
        self._clock = clock

    def is_active(self, site_id: int, hazard_type: Union[HazardType, str]) -> bool:
        return self.store.is_cooldown_active(
            site_id, cooldown_key(hazard_type), self.window, now=self._clock()
        )

    def set(self, site_id: int, hazard_type: Union[HazardType, str]) -> None:
        """Record a notification attempt at the current time (idempotent upsert)."""
        key = cooldown_key(hazard_type)
        self.store.set_cooldown(site_id, key, at=self._clock())
        logger.debug(f"Cooldown set for site {site_id} / {key}")
