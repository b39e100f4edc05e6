"""
Unit tests for weather_alerts/notifications/renderer.py
"""
from datetime import datetime, timedelta, timezone

import pytest

from weather_alerts.alerts.evaluator import evaluate_advisories
from weather_alerts.alerts.types import AlertCandidate, HazardType, Severity, SiteRef
from weather_alerts.notifications.renderer import build_subject, render_alert_email

from factories import make_advisory, make_current, make_hours, make_snapshot

SITE = SiteRef(
    id=1,
    name="North Yard",
    latitude=33.45,
    longitude=-112.07,
    city="Phoenix",
    state="AZ",
    manager_email="jordan@example.com",
)

GENERATED_AT = datetime(2025, 7, 1, 18, 0, tzinfo=timezone.utc)


def _heat(severity=Severity.WARNING, hazard_type=HazardType.HEAT_INDEX, label="Extreme Heat Warning"):
    return AlertCandidate(
        hazard_type=hazard_type,
        severity=severity,
        label=label,
        threshold=95.0,
        actual=106.0,
        unit="°F",
    )


def _render(candidate, snapshot=None):
    return render_alert_email(
        candidate,
        SITE,
        snapshot or make_snapshot(current=make_current(apparent_temperature=106.0)),
        generated_at=GENERATED_AT,
    )


@pytest.mark.unit
class TestSubject:

    def test_subject_format(self):
        assert build_subject(_heat(), SITE) == "[WARNING] Extreme Heat Warning - North Yard"

    def test_advisory_subject(self):
        candidate = _heat(Severity.ADVISORY, HazardType.FORECAST_HEAT, "24-Hour Heat Index Advisory")
        assert build_subject(candidate, SITE) == "[ADVISORY] 24-Hour Heat Index Advisory - North Yard"


@pytest.mark.unit
class TestRenderAlertEmail:

    def test_warning_email_sections(self):
        html = _render(_heat())

        assert "Weather Safety WARNING" in html
        assert "North Yard</strong> - Phoenix, AZ" in html
        assert "Threshold: 95°F" in html
        assert "Actual: <strong>106°F</strong>" in html
        assert "Emergency Response: Heat Stroke Risk" in html
        assert "PPE Requirements" in html
        assert "Hydration Schedule" in html
        assert "Workers' Comp Reminder" in html
        assert "Generated: 2025-07-01 18:00 UTC" in html

    def test_forecast_candidate_gets_preparation_protocol(self):
        candidate = _heat(Severity.ADVISORY, HazardType.FAR_HEAT, "48-Hour Heat Index Advisory")
        html = _render(candidate)

        assert "Advance Preparation: Heat Conditions Forecasted" in html
        assert "Hydration Schedule" in html
        assert "Workers' Comp Reminder" not in html

    def test_non_heat_hazard_has_no_hydration_schedule(self):
        candidate = AlertCandidate(
            hazard_type=HazardType.WIND_SPEED,
            severity=Severity.WATCH,
            label="High Wind Watch",
            threshold=45.0,
            actual=52.0,
            unit="mph",
        )
        html = _render(candidate)

        assert "Hydration Schedule" not in html
        assert "Threshold: 45mph" in html

    def test_advisory_instructions_only_when_present(self):
        [with_instruction] = evaluate_advisories([make_advisory()])
        [without_instruction] = evaluate_advisories([make_advisory(instruction=None)])

        assert "NWS Instructions" in _render(with_instruction)
        assert "Source: NWS Phoenix AZ" in _render(with_instruction)
        assert "NWS Instructions" not in _render(without_instruction)

    def test_forecast_table_shows_every_third_hour(self):
        start = datetime(2025, 7, 1, 12, 0, tzinfo=timezone(timedelta(hours=-7)))
        snapshot = make_snapshot(hourly=make_hours(start, 30))

        html = _render(_heat(), snapshot)

        for shown in ("12:00 PM", "3:00 PM", "6:00 PM", "9:00 PM", "12:00 AM", "9:00 AM"):
            assert f">{shown}</td>" in html
        assert ">1:00 PM</td>" not in html

    def test_user_text_is_escaped(self):
        site = SiteRef(id=2, name="Yard <B> & Co", latitude=0.0, longitude=0.0)
        html = render_alert_email(_heat(), site, make_snapshot(), generated_at=GENERATED_AT)

        assert "Yard &lt;B&gt; &amp; Co" in html
        assert "Yard <B>" not in html
