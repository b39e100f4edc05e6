"""
National Weather Service alerts API client.

Official API documentation:
https://www.weather.gov/documentation/services-web-api

Only the active-alerts-by-point endpoint is used. NWS requires a
User-Agent that identifies the application and a contact address.
Coverage is limited to the United States and its territories.
"""
import logging
from typing import Any, Dict, List

import httpx

from weather_alerts.alerts.types import Advisory
from weather_alerts.core.http_client import BaseAPIClient

logger = logging.getLogger(__name__)


def parse_alert_features(payload: Dict[str, Any]) -> List[Advisory]:
    """Convert a GeoJSON alerts response into Advisory objects."""
    advisories = []
    for feature in payload.get("features") or []:
        props = feature.get("properties") or {}
        event = props.get("event")
        if not event:
            continue
        advisories.append(Advisory(
            event=event,
            severity=props.get("severity") or "Unknown",
            headline=props.get("headline"),
            description=props.get("description"),
            instruction=props.get("instruction"),
            onset=props.get("onset"),
            expires=props.get("expires"),
            sender_name=props.get("senderName"),
        ))
    return advisories


class NWSClient(BaseAPIClient):
    """
    HTTP client for api.weather.gov active alerts.

    Inherits retry logic, backoff, and error handling from BaseAPIClient.
    """

    SOURCE_NAME = "nws"
    BASE_URL = "https://api.weather.gov"

    def __init__(self, user_agent: str, **kwargs):
        self.user_agent = user_agent
        super().__init__(**kwargs)

    def _build_headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/geo+json",
            "User-Agent": self.user_agent,
        }

    def _error_detail(self, response: httpx.Response) -> str:
        """Errors are application/problem+json; prefer `detail`, then `title`."""
        try:
            problem = response.json()
        except ValueError:
            return super()._error_detail(response)
        if not isinstance(problem, dict):
            return super()._error_detail(response)
        return str(problem.get("detail") or problem.get("title") or super()._error_detail(response))

    async def fetch_active_alerts(self, latitude: float, longitude: float) -> List[Advisory]:
        """
        Active alerts covering a point.

        Returns:
            Advisories in response order (possibly empty)
        """
        payload = await self.get(
            "alerts/active",
            params={"point": f"{latitude:.4f},{longitude:.4f}"},
            resource_id=f"alerts:{latitude},{longitude}",
        )
        advisories = parse_alert_features(payload)
        logger.debug(f"NWS returned {len(advisories)} active alerts for {latitude},{longitude}")
        return advisories
