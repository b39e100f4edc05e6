"""
Unit tests for weather_alerts/alerts/protocols.py
"""
import pytest

from weather_alerts.alerts.protocols import (
    HYDRATION_SCHEDULE,
    RESPONSE_PROTOCOLS,
    CardColor,
    ProtocolTier,
    get_hydration_schedule,
    get_ppe_reminders,
    get_response_protocol,
    protocol_tier,
)
from weather_alerts.alerts.types import BASE_HAZARD_TYPES, HazardType, Severity


@pytest.mark.unit
class TestProtocolTier:

    @pytest.mark.parametrize("hazard,severity,tier", [
        (HazardType.HEAT_INDEX, Severity.WARNING, ProtocolTier.EMERGENCY),
        (HazardType.HEAT_INDEX, Severity.WATCH, ProtocolTier.OPERATIONAL),
        (HazardType.EXTERNAL_ADVISORY, Severity.WARNING, ProtocolTier.EMERGENCY),
        (HazardType.EXTERNAL_ADVISORY, Severity.WATCH, ProtocolTier.OPERATIONAL),
        (HazardType.FORECAST_COLD, Severity.ADVISORY, ProtocolTier.PREPARATION),
        (HazardType.FAR_STORM, Severity.ADVISORY, ProtocolTier.PREPARATION),
    ])
    def test_tier_selection(self, hazard, severity, tier):
        assert protocol_tier(hazard, severity) == tier


@pytest.mark.unit
class TestReferenceTables:

    def test_every_base_hazard_has_every_tier(self):
        for hazard in BASE_HAZARD_TYPES:
            assert set(RESPONSE_PROTOCOLS[hazard]) == set(ProtocolTier)

    def test_every_hazard_type_resolves_a_protocol_and_ppe(self):
        for hazard in HazardType:
            severity = Severity.ADVISORY if hazard.is_forecast else Severity.WATCH
            protocol = get_response_protocol(hazard, severity)
            assert protocol.title
            assert protocol.actions
            assert get_ppe_reminders(hazard)

    def test_emergency_cards_are_red(self):
        assert get_response_protocol(HazardType.HEAT_INDEX, Severity.WARNING).card_color == CardColor.RED
        assert get_response_protocol(HazardType.WIND_SPEED, Severity.WARNING).card_color == CardColor.RED

    def test_forecast_uses_base_hazard_table(self):
        assert get_response_protocol(HazardType.FAR_WIND, Severity.ADVISORY) is (
            RESPONSE_PROTOCOLS[HazardType.WIND_SPEED][ProtocolTier.PREPARATION]
        )

    def test_hydration_is_heat_only(self):
        assert get_hydration_schedule(HazardType.HEAT_INDEX) == HYDRATION_SCHEDULE
        assert get_hydration_schedule(HazardType.FAR_HEAT) == HYDRATION_SCHEDULE
        assert get_hydration_schedule(HazardType.COLD_TEMP) == ()
        assert get_hydration_schedule(HazardType.EXTERNAL_ADVISORY) == ()
        assert len(HYDRATION_SCHEDULE) == 5

