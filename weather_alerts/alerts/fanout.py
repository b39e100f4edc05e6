"""
Site fan-out.

One run reads the active sites once, then processes every site as an
independent concurrent task: fetch conditions, evaluate, and for each
candidate in order gate -> dispatch -> persist -> set cooldown.

A failure inside one site's pipeline is caught at the site boundary,
logged and counted; it never affects the other sites in the run.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional

from weather_alerts.alerts.cooldown import CooldownGate
from weather_alerts.alerts.evaluator import evaluate_all
from weather_alerts.alerts.store import AlertStore
from weather_alerts.alerts.types import (
    AlertCandidate,
    ConditionsSnapshot,
    RunResult,
    SiteRef,
    Thresholds,
)
from weather_alerts.core.api_errors import APIError, PersistenceError
from weather_alerts.notifications.dispatcher import NotificationDispatcher
from weather_alerts.notifications.renderer import build_subject, render_alert_email
from weather_alerts.sources.conditions import ConditionsProvider

logger = logging.getLogger(__name__)

Renderer = Callable[[AlertCandidate, SiteRef, ConditionsSnapshot], str]


def _aware_utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SiteOutcome:
    """What happened for one site within a run."""

    site_id: int
    candidates: int = 0
    notifications_sent: int = 0
    suppressed: int = 0
    error: Optional[str] = None


class SiteFanOut:
    """
    Runs the evaluation pipeline across all active sites.

    Args:
        store: Alert store (site registry, history, cooldowns)
        provider: Conditions provider for a coordinate
        dispatcher: Notification delivery
        gate: Cooldown gate
        current_thresholds: Thresholds for live conditions
        forecast_thresholds: Thresholds for the lookahead windows
        renderer: Builds notification content for a candidate
        max_concurrency: Maximum sites processed at once
        site_timeout: Seconds allowed for fetching one site's conditions before
            the site counts as failed. Dispatch is bounded by the dispatcher's
            own request timeout.
        now: Returns the current timezone-aware time for forecast windows
    """

    def __init__(
        self,
        store: AlertStore,
        provider: ConditionsProvider,
        dispatcher: NotificationDispatcher,
        gate: CooldownGate,
        current_thresholds: Thresholds,
        forecast_thresholds: Thresholds,
        renderer: Renderer = render_alert_email,
        max_concurrency: int = 10,
        site_timeout: Optional[float] = 90.0,
        now: Callable[[], datetime] = _aware_utcnow,
    ):
        self.store = store
        self.provider = provider
        self.dispatcher = dispatcher
        self.gate = gate
        self.current_thresholds = current_thresholds
        self.forecast_thresholds = forecast_thresholds
        self.renderer = renderer
        self.max_concurrency = max_concurrency
        self.site_timeout = site_timeout
        self._now = now

    async def run(self, trigger: str = "manual") -> RunResult:
        """
        Evaluate every active site once.

        Never raises: failures are reflected in the error count.
        """
        started = time.monotonic()
        logger.info(f"Weather check started (trigger={trigger})")

        try:
            sites = self.store.list_active_sites()
        except PersistenceError as e:
            logger.error(f"Weather check aborted, could not load sites: {e}")
            return RunResult(
                errors=1,
                elapsed_seconds=round(time.monotonic() - started, 3),
                trigger=trigger,
            )

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def bounded(site: SiteRef) -> SiteOutcome:
            async with semaphore:
                return await self._process_site(site)

        outcomes: List[SiteOutcome] = list(
            await asyncio.gather(*(bounded(site) for site in sites))
        )

        result = RunResult(
            sites_checked=len(sites),
            notifications_sent=sum(o.notifications_sent for o in outcomes),
            errors=sum(1 for o in outcomes if o.error is not None),
            suppressed=sum(o.suppressed for o in outcomes),
            elapsed_seconds=round(time.monotonic() - started, 3),
            trigger=trigger,
        )
        logger.info(
            f"Weather check complete: {result.sites_checked} sites, "
            f"{result.notifications_sent} alerts, {result.suppressed} suppressed, "
            f"{result.errors} errors in {result.elapsed_seconds}s"
        )
        return result

    async def _process_site(self, site: SiteRef) -> SiteOutcome:
        """Site boundary: nothing raised below this point escapes the run."""
        try:
            return await self.check_site(site)
        except asyncio.TimeoutError:
            logger.error(
                f"Conditions fetch for {site.name} ({site.id}) timed out after {self.site_timeout}s"
            )
            return SiteOutcome(site_id=site.id, error="timeout")
        except APIError as e:
            logger.warning(f"Conditions unavailable for {site.name} ({site.id}): {e}")
            return SiteOutcome(site_id=site.id, error=type(e).__name__)
        except PersistenceError as e:
            logger.error(f"Store failure while processing {site.name} ({site.id}): {e}")
            return SiteOutcome(site_id=site.id, error=type(e).__name__)
        except Exception as e:
            logger.error(
                f"Unexpected error processing {site.name} ({site.id}): {e}",
                exc_info=True,
            )
            return SiteOutcome(site_id=site.id, error=type(e).__name__)

    async def check_site(self, site: SiteRef) -> SiteOutcome:
        """
        Fetch, evaluate and notify for one site.

        Candidates are handled strictly in order so a cooldown written for
        one candidate is visible to the next.
        """
        outcome = SiteOutcome(site_id=site.id)

        conditions = await self._fetch_conditions(site)
        candidates = evaluate_all(
            conditions,
            self.current_thresholds,
            self.forecast_thresholds,
            self._now(),
        )
        outcome.candidates = len(candidates)

        if not candidates:
            logger.info(f"{site.name}: all clear")
            return outcome

        for candidate in candidates:
            logger.info(
                f"{site.name}: [{candidate.severity.value.upper()}] {candidate.label}"
            )

            if self.gate.is_active(site.id, candidate.hazard_type):
                logger.info(
                    f"{site.name}: {candidate.hazard_type.value} suppressed by cooldown"
                )
                outcome.suppressed += 1
                continue

            await self._notify(site, candidate, conditions)
            outcome.notifications_sent += 1

        return outcome

    async def _fetch_conditions(self, site: SiteRef) -> ConditionsSnapshot:
        fetch = self.provider.fetch(site.latitude, site.longitude)
        if self.site_timeout:
            return await asyncio.wait_for(fetch, self.site_timeout)
        return await fetch

    async def _notify(
        self,
        site: SiteRef,
        candidate: AlertCandidate,
        conditions: ConditionsSnapshot,
    ) -> None:
        recipient = (site.manager_email or "").strip()
        email_sent = False

        if recipient:
            subject = build_subject(candidate, site)
            content = self.renderer(candidate, site, conditions)
            result = await self.dispatcher.send(recipient, subject, content)
            email_sent = result.sent
            if result.sent:
                logger.info(f"{site.name}: alert sent to {recipient}")
            else:
                logger.warning(f"{site.name}: alert not delivered ({result.reason})")
        else:
            logger.info(f"{site.name}: no manager email configured, alert logged only")

        self.store.insert_alert_record(
            site.id,
            candidate,
            email_sent=email_sent,
            email_recipient=recipient,
            conditions=conditions.current.to_dict(),
            forecast=[h.to_dict() for h in conditions.display_hourly],
        )
        # Failed deliveries still consume the cooldown
        self.gate.set(site.id, candidate.hazard_type)
