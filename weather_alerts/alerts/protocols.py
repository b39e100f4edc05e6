"""
Hazard reference tables.

Operational response protocols, PPE reminders and the heat hydration
schedule, keyed by base hazard type. Every base hazard must have an entry
for every protocol tier; the module refuses to import otherwise.

Tier selection:
- forecast candidates (48hr_/forecast_)  -> PREPARATION
- live WARNING                           -> EMERGENCY
- live WATCH                             -> OPERATIONAL
"""
import enum
from dataclasses import dataclass
from typing import Dict, Tuple

from weather_alerts.alerts.types import BASE_HAZARD_TYPES, HazardType, Severity


class ProtocolTier(str, enum.Enum):
    EMERGENCY = "emergency"
    OPERATIONAL = "operational"
    PREPARATION = "preparation"


class CardColor(str, enum.Enum):
    RED = "red"
    AMBER = "amber"
    GREEN = "green"


@dataclass(frozen=True)
class ResponseProtocol:
    title: str
    description: str
    card_color: CardColor
    actions: Tuple[str, ...]
    watch_for: str
    work_modification: str
    gear: str


@dataclass(frozen=True)
class HydrationStep:
    range: str
    instruction: str


# =============================================================================
# Heat
# =============================================================================

_HEAT_EMERGENCY = ResponseProtocol(
    title="Emergency Response: Heat Stroke Risk",
    description=(
        "Extreme heat is a life-threatening emergency. Heat stroke can be fatal "
        "in minutes without immediate intervention."
    ),
    card_color=CardColor.RED,
    actions=(
        "Call 911 immediately if any worker shows confusion, hot dry skin, or loss of consciousness",
        "Begin active cooling NOW: ice packs on neck, armpits, and groin; cold water immersion if available",
        "Do NOT give fluids if the person is confused or unconscious",
        "Move all workers to cool, shaded area or air-conditioned space",
        "Do not leave affected person unattended; monitor continuously until EMS arrives",
    ),
    watch_for=(
        "Body temp 104°F+, hot DRY skin (no sweating), confusion or altered mental state, "
        "slurred speech, loss of consciousness, seizures, rapid strong pulse. If no improvement "
        "in 30 min or symptoms worsen, call 911."
    ),
    work_modification=(
        "Suspend heavy outdoor work immediately. If work must continue, enforce 30-45 min "
        "work/rest cycles. Ensure 1 cup (8 oz) water every 15-20 min per OSHA/NIOSH. "
        "New/returning workers: apply 20% acclimatization rule."
    ),
    gear=(
        "Cooling vests or towels, light-colored loose clothing, wide-brimmed hard hat with "
        "neck shade, sunscreen SPF 30+ (reapply every 2 hours)"
    ),
)

_HEAT_OPERATIONAL = ResponseProtocol(
    title="Occupational Response: Heat Exhaustion Risk",
    description=(
        "Heat exhaustion can progress to heat stroke quickly. Implement work/rest cycles "
        "and mandatory hydration immediately."
    ),
    card_color=CardColor.AMBER,
    actions=(
        "Implement work/rest cycles: breaks every 30-45 minutes in shaded or air-conditioned areas",
        "Ensure cool drinking water is within easy access: 1 cup (8 oz) every 15-20 minutes per OSHA",
        "Station a trained observer to monitor all workers for heat illness symptoms",
        "New or returning workers: apply 20% acclimatization rule (20% workload Day 1, increase 20% daily)",
        "Schedule heavy labor during cooler hours (early morning or late afternoon)",
    ),
    watch_for=(
        "Heavy sweating, weakness, dizziness, headache, nausea/vomiting, cool pale clammy skin, "
        "fast weak pulse, fainting. If no improvement in 30 min or symptoms worsen, call 911."
    ),
    work_modification=(
        "Breaks every 30-45 min when heat index exceeds 103°F. Adjust schedules to cooler hours. "
        "Reduce physical demands. Provide additional staff to rotate workload."
    ),
    gear=(
        "Cooling vests, light-colored loose-fitting clothing, wide-brimmed hard hat, "
        "UV-protective sunglasses (ANSI Z87.1), sunscreen SPF 30+ (reapply every 2 hours)"
    ),
)

_HEAT_PREPARATION = ResponseProtocol(
    title="Advance Preparation: Heat Conditions Forecasted",
    description=(
        "High heat index is expected. Prepare work/rest cycles, hydration stations, and "
        "cooling equipment before conditions arrive."
    ),
    card_color=CardColor.GREEN,
    actions=(
        "Brief crew during toolbox talk on forecasted heat conditions and expected timing",
        "Pre-stage hydration stations with cool water: plan for 1 cup (8 oz) per worker every 15-20 min",
        "Set up shade structures and cooling areas at all active work zones",
        "Review acclimatization schedule for new or returning workers (20% rule)",
        "Confirm emergency contacts are current and heat illness response plan is reviewed",
    ),
    watch_for=(
        "Heavy sweating, weakness, dizziness, headache, nausea, cool pale clammy skin. "
        "Personal warning: if you feel confused, can't think clearly, or stop sweating, "
        "stop work immediately."
    ),
    work_modification=(
        "Plan ahead: schedule heavy outdoor work before peak heat arrives. Pre-position "
        "supplies. Prepare alternate indoor tasks."
    ),
    gear=(
        "Ensure cooling vests, sunscreen, and wide-brimmed hard hats will be available "
        "when conditions arrive"
    ),
)

# =============================================================================
# Cold
# =============================================================================

_COLD_EMERGENCY = ResponseProtocol(
    title="Emergency Response: Severe Hypothermia/Frostbite Risk",
    description=(
        "Extreme cold is life-threatening. Hypothermia can cause cardiac arrest. "
        "Handle all affected workers gently."
    ),
    card_color=CardColor.RED,
    actions=(
        "Call 911 immediately if any worker shows confusion, slurred speech, loss of "
        "consciousness, or has stopped shivering",
        "Move person to warm area and handle VERY gently (rough movement can cause cardiac "
        "arrest in hypothermia)",
        "Remove wet clothing, replace with dry layers and blankets, cover head",
        "Warm gradually with blankets and body heat; do NOT use direct heat (heating pads, fire)",
        "If conscious, give warm sweet drinks; do NOT give alcohol or caffeine",
    ),
    watch_for=(
        "Severe hypothermia: NO shivering (danger sign), unconscious, weak/no pulse, rigid "
        "muscles; continue CPR. Frostbite: numbness, white/gray waxy skin, skin feels hard "
        "or frozen. Do NOT rub. Warm gently in 98-105°F water."
    ),
    work_modification=(
        "Suspend outdoor work if wind chill is -40°F or lower (frostbite in 10 min). At "
        "-60°F wind chill, outdoor work MUST stop. Cover ALL exposed skin when wind chill "
        "is below 0°F."
    ),
    gear=(
        "Three-layer system (synthetic base, NEVER cotton), insulated waterproof "
        "gloves/mittens, insulated waterproof boots with thick wool socks, balaclava or "
        "face mask, ice cleats for icy surfaces"
    ),
)

_COLD_OPERATIONAL = ResponseProtocol(
    title="Occupational Response: Frostbite/Hypothermia Risk",
    description=(
        "Cold conditions require mandatory warm-up breaks and buddy system monitoring. "
        "Wet skin loses heat 25x faster than dry skin."
    ),
    card_color=CardColor.AMBER,
    actions=(
        "Implement warm-up break rotation: minimum 10-15 min warm break every 1-2 hours",
        "Ensure heated break areas, warming huts, or heated vehicles are accessible nearby",
        "Implement buddy system: monitor coworkers for white/gray skin patches, stumbling, "
        "slurred speech, confusion",
        "Remove wet clothing immediately",
        "Ensure emergency warming supplies are stocked and accessible on-site",
    ),
    watch_for=(
        "Mild hypothermia: shivering, confusion, fatigue, slurred speech, loss of "
        "coordination. Frostbite: numbness or tingling in fingers, toes, ears, nose, face; "
        "skin color changes to white/gray."
    ),
    work_modification=(
        "Increase warm-up breaks in extreme cold. At wind chill -18°F frostbite is possible "
        "in 30 min on exposed skin, so limit outdoor work. Rotate workers more frequently."
    ),
    gear=(
        "Three-layer system (synthetic or wool base, NEVER cotton), insulated waterproof "
        "boots, insulated waterproof gloves (carry extras), insulated hat covering ears, "
        "ice cleats for icy surfaces (remove before entering buildings)"
    ),
)

_COLD_PREPARATION = ResponseProtocol(
    title="Advance Preparation: Cold Conditions Forecasted",
    description=(
        "Cold temperatures are expected. Prepare warm break areas, PPE, and buddy system "
        "before conditions arrive."
    ),
    card_color=CardColor.GREEN,
    actions=(
        "Brief crew during toolbox talk on forecasted cold conditions and expected timing",
        "Pre-stage warming supplies: heated break areas, warm beverages, extra dry clothing",
        "Verify all workers have proper cold weather PPE (three-layer system, insulated "
        "boots, gloves, hat)",
        "Distribute ice cleats if icy conditions are expected and brief on removal before "
        "entering buildings",
        "Review buddy system protocol and hypothermia/frostbite recognition signs",
    ),
    watch_for="Shivering, numbness in extremities, white/gray skin patches, confusion, slurred speech.",
    work_modification=(
        "Plan ahead: schedule outdoor work during warmest part of day. Pre-position warming "
        "supplies. Prepare indoor alternate tasks."
    ),
    gear=(
        "Ensure three-layer clothing system, insulated boots, gloves, hat, and ice cleats "
        "are available before conditions arrive"
    ),
)

# =============================================================================
# Wind
# =============================================================================

_WIND_EMERGENCY = ResponseProtocol(
    title="Emergency Response: Extreme Wind Hazard",
    description=(
        "Extreme winds create struck-by and structural collapse hazards. All outdoor "
        "operations must stop immediately."
    ),
    card_color=CardColor.RED,
    actions=(
        "Suspend ALL outdoor operations immediately",
        "Evacuate workers from elevated and exposed positions to designated shelter areas",
        "Secure or lower crane booms and tall equipment",
        "Conduct full headcount at shelter location and account for all workers",
        "Do not resume outdoor work until all-clear given and winds confirmed below threshold",
    ),
    watch_for=(
        "Struck-by hazards from airborne debris, structural collapse of unsecured "
        "structures, downed power lines, falling trees/branches."
    ),
    work_modification=(
        "All outdoor work suspended. No crane operations, scaffolding, or elevated work. "
        "Workers must stay away from unsecured structures, trees, and power lines."
    ),
    gear=(
        "Snug-fitting hard hat with chin strap secured, full-body harness if any elevated "
        "transit required, windproof outer layer"
    ),
)

_WIND_OPERATIONAL = ResponseProtocol(
    title="Operational Restriction: High Wind Hazard",
    description=(
        "High winds require immediate cessation of all elevated work and securing of "
        "loose materials."
    ),
    card_color=CardColor.AMBER,
    actions=(
        "Cease all elevated work: no crane operations, scaffolding use, or ladder work",
        "Secure all loose materials, tools, and equipment immediately",
        "Evaluate scaffolding stability and tie-off all unsecured structures",
        "Keep workers away from unsecured structures, trees, and power lines",
        "Monitor conditions; if gusts exceed 60 mph, suspend all outdoor operations",
    ),
    watch_for=(
        "Airborne debris, unsecured materials becoming projectiles, scaffolding "
        "instability, ladder tip-over."
    ),
    work_modification=(
        "No work at heights. Ground-level operations may continue with caution. Review "
        "what can be moved indoors."
    ),
    gear=(
        "Hard hat with chin strap, safety glasses with side shields, windproof outer layer, "
        "hearing protection if wind noise exceeds safe levels"
    ),
)

_WIND_PREPARATION = ResponseProtocol(
    title="Advance Preparation: High Wind Forecasted",
    description="High winds are expected. Secure materials and prepare for potential work restrictions.",
    card_color=CardColor.GREEN,
    actions=(
        "Brief crew on forecasted wind conditions and expected timing",
        "Pre-secure all loose materials, tools, and equipment on-site",
        "Review elevated work plans and prepare to cease crane/scaffolding operations",
        "Verify all scaffolding is properly braced and anchored",
        "Confirm shelter locations and emergency communication plan",
    ),
    watch_for="Sudden gusts exceeding forecast, unsecured materials, scaffolding movement.",
    work_modification=(
        "Plan to move work indoors or to ground level when conditions arrive. "
        "Pre-position materials."
    ),
    gear="Ensure hard hats with chin straps and safety glasses are available for all outdoor workers",
)

# =============================================================================
# Air quality
# =============================================================================

_AQI_EMERGENCY = ResponseProtocol(
    title="Emergency Response: Hazardous Air Quality",
    description=(
        "AQI exceeds 200 (Hazardous). All outdoor operations must be suspended and "
        "workers moved indoors."
    ),
    card_color=CardColor.RED,
    actions=(
        "Suspend all non-essential outdoor operations immediately",
        "Move all workers indoors",
        "P100 respirators required if any outdoor transit is necessary",
        "Monitor all workers for respiratory distress; call 911 for breathing difficulty, "
        "chest pain, or persistent coughing",
        "Workers with asthma, COPD, or respiratory conditions must NOT work outdoors",
    ),
    watch_for=(
        "Persistent coughing, shortness of breath, chest tightness, throat irritation, "
        "eye burning, dizziness."
    ),
    work_modification=(
        "All outdoor work suspended. Indoor operations only. Ensure building HVAC is "
        "filtering outdoor air."
    ),
    gear=(
        "NIOSH-approved P100 respirator (fit-tested) for any outdoor transit, safety "
        "goggles if particulate irritation"
    ),
)

_AQI_OPERATIONAL = ResponseProtocol(
    title="Operational Restriction: Unhealthy Air Quality",
    description="AQI exceeds 150 (Unhealthy). N95 respirators are mandatory for all outdoor work.",
    card_color=CardColor.AMBER,
    actions=(
        "N95 respirators mandatory for all outdoor workers (must be fit-tested)",
        "Reduce outdoor physical workload intensity and assign lighter duties",
        "Increase break frequency and duration with more indoor time",
        "Move work activities indoors where possible",
        "Monitor workers with respiratory conditions closely and reassign indoors if needed",
    ),
    watch_for="Coughing, throat irritation, eye burning, shortness of breath on exertion.",
    work_modification=(
        "Limit prolonged outdoor exertion. Increase breaks. If AQI continues rising toward "
        "200, prepare to suspend all outdoor operations."
    ),
    gear=(
        "NIOSH-approved N95 respirator (fit-tested), safety goggles if eye irritation, "
        "long sleeves, spare respirator filters accessible"
    ),
)

# =============================================================================
# Winter weather
# =============================================================================

_WINTER_ACTIVE = ResponseProtocol(
    title="Operational Response: Winter Weather Active",
    description=(
        "Active winter precipitation creates slip/fall and cold injury hazards. Ice cleats "
        "are required for all outdoor movement."
    ),
    card_color=CardColor.AMBER,
    actions=(
        "Pre-treat walkways and work surfaces with salt/sand before precipitation",
        "Clear snow and ice from all walking and working surfaces immediately",
        "Ice cleats REQUIRED for all workers walking outdoors; remove before entering buildings",
        "Inspect scaffolding and elevated platforms for ice accumulation before any use",
        "Delay non-essential outdoor work during active winter precipitation",
    ),
    watch_for=(
        "Slip/fall: black ice (assume all wet-looking surfaces are ice in winter), snow "
        "hiding underlying hazards, freeze/thaw cycles at entrances, loading docks, ramps "
        "and shaded areas. Cold injury: numbness/tingling in extremities, white/gray skin "
        "patches, shivering, confusion."
    ),
    work_modification=(
        "Delay non-essential outdoor work. Use designated clear walkways only. No elevated "
        "work on icy surfaces. Ensure all vehicles have winter emergency kits (blankets, "
        "chains, flashlight)."
    ),
    gear=(
        "Ice cleats outdoors (remove before entering buildings), insulated waterproof boots "
        "with aggressive tread, insulated waterproof gloves, high-visibility vest, "
        "three-layer clothing (no cotton)"
    ),
)

_WINTER_PREPARATION = ResponseProtocol(
    title="Advance Preparation: Winter Weather Forecasted",
    description=(
        "Winter precipitation is expected. Pre-treat surfaces, distribute ice cleats, and "
        "prepare for cold conditions."
    ),
    card_color=CardColor.GREEN,
    actions=(
        "Brief crew on forecasted winter conditions and expected timing",
        "Pre-treat all walkways, parking lots, and work surfaces with salt/sand",
        "Distribute ice cleats to all workers and brief on removal before entering buildings",
        "Stage snow/ice removal equipment and verify winter emergency kits in all vehicles",
        "Review cold injury recognition signs and buddy system protocol",
    ),
    watch_for="Black ice formation, accumulating snow on elevated surfaces, ice on scaffolding.",
    work_modification=(
        "Plan ahead: schedule outdoor work before conditions arrive if possible. "
        "Pre-position salt/sand and removal equipment."
    ),
    gear=(
        "Ensure ice cleats, insulated waterproof boots, gloves, and high-visibility vests "
        "are available for all outdoor workers"
    ),
)

# =============================================================================
# Severe storm
# =============================================================================

_STORM_ACTIVE = ResponseProtocol(
    title="Emergency Response: Severe Storm Active",
    description=(
        "Severe thunderstorm with potential lightning, flash flooding, and high winds. "
        "Evacuate all outdoor positions immediately."
    ),
    card_color=CardColor.RED,
    actions=(
        "Evacuate workers from elevated and exposed positions immediately",
        "All personnel to designated severe weather shelter: interior room, no windows, "
        "away from exterior walls",
        "Secure or lower crane booms and tall equipment if time permits and safe to do so",
        "Conduct full headcount at shelter and report missing persons immediately",
        "Do not resume outdoor work until all-clear; inspect all work areas for damage first",
    ),
    watch_for=(
        "Lightning (cease outdoor work at first sign), flash flooding, downed power lines, "
        "structural damage, flying debris."
    ),
    work_modification=(
        "All outdoor operations suspended. Shelter-in-place until all-clear. Never use "
        "elevators during evacuation. Do not go back for belongings."
    ),
    gear=(
        "Hard hat required when moving to shelter, high-visibility vest for accountability, "
        "waterproof outer layer, personal flashlight in case of power loss"
    ),
)

_STORM_PREPARATION = ResponseProtocol(
    title="Advance Preparation: Severe Storm Forecasted",
    description=(
        "Severe storm is expected. Review emergency action plan and prepare for potential "
        "shelter-in-place."
    ),
    card_color=CardColor.GREEN,
    actions=(
        "Brief crew on forecasted storm conditions, expected timing, and shelter locations",
        "Review emergency action plan and confirm all workers know evacuation routes",
        "Pre-secure all loose materials, tools, and equipment on-site",
        "Verify all communication devices are charged and emergency contacts are current",
        "Identify work that can be moved indoors and prepare contingency schedule",
    ),
    watch_for=(
        "Darkening skies, increasing wind, thunder/lightning in the distance, sudden "
        "temperature drop."
    ),
    work_modification=(
        "Plan to suspend all outdoor operations when conditions arrive. Pre-position "
        "emergency supplies."
    ),
    gear=(
        "Ensure hard hats, high-visibility vests, waterproof layers, and flashlights are "
        "accessible for all workers"
    ),
)

# =============================================================================
# External advisories (NWS)
# =============================================================================

_ADVISORY_EMERGENCY = ResponseProtocol(
    title="Emergency Response: National Weather Service Alert",
    description=(
        "The National Weather Service has issued a severe alert for this area. Follow all "
        "NWS instructions immediately."
    ),
    card_color=CardColor.RED,
    actions=(
        "Follow ALL instructions from the National Weather Service alert (see NWS details above)",
        "Ensure all workers are immediately aware of the active alert and its severity",
        "Activate your site-specific emergency action plan and designate an evacuation coordinator",
        "Monitor NWS updates continuously for changes in alert status",
        "Do not resume normal operations until the NWS alert has expired or been cancelled",
    ),
    watch_for=(
        "Conditions specific to the NWS alert type. Monitor for rapid deterioration: "
        "lightning, flooding, wind damage, or other hazards described in the alert."
    ),
    work_modification=(
        "Activate emergency action plan. Assign floor wardens and accountability "
        "coordinator. Prepare for evacuation or shelter-in-place per NWS guidance."
    ),
    gear=(
        "As appropriate for the specific NWS event. Hard hat, high-visibility vest, "
        "communication devices charged and accessible."
    ),
)

_ADVISORY_OPERATIONAL = ResponseProtocol(
    title="Operational Awareness: NWS Weather Advisory",
    description=(
        "The National Weather Service has issued an advisory for this area. Heightened "
        "awareness and preparation required."
    ),
    card_color=CardColor.AMBER,
    actions=(
        "Brief all workers on the NWS advisory and what it means for site operations",
        "Review site emergency action plan and confirm evacuation routes and shelter locations",
        "Pre-stage emergency supplies and verify emergency contacts are current",
        "Monitor NWS updates for escalation from watch to warning",
        "Identify what work can move indoors if operations need to change",
    ),
    watch_for=(
        "Conditions described in the NWS advisory. Watch for escalation from advisory to "
        "warning and for sudden changes."
    ),
    work_modification=(
        "Continue operations with heightened awareness. Prepare contingency plan for "
        "suspension if conditions escalate. Ensure all communication devices are charged."
    ),
    gear="Per the specific NWS event type. Ensure communication devices (radio/phone) are charged and accessible.",
)


RESPONSE_PROTOCOLS: Dict[HazardType, Dict[ProtocolTier, ResponseProtocol]] = {
    HazardType.HEAT_INDEX: {
        ProtocolTier.EMERGENCY: _HEAT_EMERGENCY,
        ProtocolTier.OPERATIONAL: _HEAT_OPERATIONAL,
        ProtocolTier.PREPARATION: _HEAT_PREPARATION,
    },
    HazardType.COLD_TEMP: {
        ProtocolTier.EMERGENCY: _COLD_EMERGENCY,
        ProtocolTier.OPERATIONAL: _COLD_OPERATIONAL,
        ProtocolTier.PREPARATION: _COLD_PREPARATION,
    },
    HazardType.WIND_SPEED: {
        ProtocolTier.EMERGENCY: _WIND_EMERGENCY,
        ProtocolTier.OPERATIONAL: _WIND_OPERATIONAL,
        ProtocolTier.PREPARATION: _WIND_PREPARATION,
    },
    HazardType.AQI: {
        ProtocolTier.EMERGENCY: _AQI_EMERGENCY,
        ProtocolTier.OPERATIONAL: _AQI_OPERATIONAL,
        ProtocolTier.PREPARATION: _AQI_OPERATIONAL,
    },
    HazardType.WINTER_WEATHER: {
        ProtocolTier.EMERGENCY: _WINTER_ACTIVE,
        ProtocolTier.OPERATIONAL: _WINTER_ACTIVE,
        ProtocolTier.PREPARATION: _WINTER_PREPARATION,
    },
    HazardType.SEVERE_STORM: {
        ProtocolTier.EMERGENCY: _STORM_ACTIVE,
        ProtocolTier.OPERATIONAL: _STORM_ACTIVE,
        ProtocolTier.PREPARATION: _STORM_PREPARATION,
    },
    HazardType.EXTERNAL_ADVISORY: {
        ProtocolTier.EMERGENCY: _ADVISORY_EMERGENCY,
        ProtocolTier.OPERATIONAL: _ADVISORY_OPERATIONAL,
        ProtocolTier.PREPARATION: _ADVISORY_OPERATIONAL,
    },
}


PPE_REMINDERS: Dict[HazardType, Tuple[str, ...]] = {
    HazardType.HEAT_INDEX: (
        "Lightweight, light-colored, loose-fitting clothing",
        "Wide-brimmed hard hat or hat with neck shade",
        "UV-protective sunglasses (ANSI Z87.1 rated)",
        "Sunscreen SPF 30+ (reapply every 2 hours)",
        "Cooling vests or towels for high-exertion tasks",
    ),
    HazardType.COLD_TEMP: (
        "Insulated, layered clothing (moisture-wicking base layer)",
        "Insulated, waterproof gloves with grip",
        "Insulated, waterproof boots with slip-resistant soles",
        "Balaclava or face covering to protect against wind chill",
        "Hand and toe warmers for extended outdoor exposure",
    ),
    HazardType.WIND_SPEED: (
        "Snug-fitting hard hat with chin strap secured",
        "Safety glasses with side shields (secure fit)",
        "Windproof outer layer to maintain core temperature",
        "Full-body harness and tie-off for any elevated work",
        "Hearing protection if wind noise exceeds safe levels",
    ),
    HazardType.AQI: (
        "NIOSH-approved N95 or P100 respirator (fit-tested)",
        "Safety goggles if particulate matter causes eye irritation",
        "Long sleeves to reduce skin exposure to airborne irritants",
        "Keep spare respirator filters accessible on-site",
        "Ensure all workers have been fit-tested for their respirator size",
    ),
    HazardType.WINTER_WEATHER: (
        "Insulated, waterproof boots with aggressive tread",
        "Insulated, waterproof gloves with grip for tool handling",
        "Layered clothing with waterproof outer shell",
        "High-visibility vest or jacket (visibility reduced in snow)",
        "Ice cleats/traction devices for boots",
    ),
    HazardType.SEVERE_STORM: (
        "Hard hat (required when moving to shelter)",
        "High-visibility vest for accountability",
        "Waterproof outer layer",
        "Sturdy, closed-toe footwear",
        "Personal flashlight in case of power loss",
    ),
    HazardType.EXTERNAL_ADVISORY: (
        "Follow PPE guidance specific to the alert type",
        "High-visibility vest for all outdoor workers",
        "Hard hat required in all work areas",
        "Ensure communication devices (radio/phone) are charged and accessible",
    ),
}


HYDRATION_SCHEDULE: Tuple[HydrationStep, ...] = (
    HydrationStep("Heat Index 80-90°F", "Drink at least 1 cup (8 oz) of water every 20 minutes"),
    HydrationStep("Heat Index 91-95°F", "Drink 1 cup every 15-20 minutes"),
    HydrationStep("Heat Index 96-100°F", "Drink 1 cup every 15 minutes, mandatory shade breaks every hour"),
    HydrationStep("Heat Index 101-105°F", "Drink 1 cup every 10-15 minutes, 15-min break per hour minimum"),
    HydrationStep("Heat Index > 105°F", "Drink 1 cup every 10 minutes, reschedule non-essential outdoor work"),
)


def _check_exhaustive() -> None:
    for hazard in BASE_HAZARD_TYPES:
        tiers = RESPONSE_PROTOCOLS.get(hazard, {})
        missing = [tier.value for tier in ProtocolTier if tier not in tiers]
        if missing:
            raise RuntimeError(f"No response protocol for {hazard.value}: {missing}")
        if hazard not in PPE_REMINDERS:
            raise RuntimeError(f"No PPE reminders for {hazard.value}")


_check_exhaustive()


def protocol_tier(hazard_type: HazardType, severity: Severity) -> ProtocolTier:
    if hazard_type.is_forecast:
        return ProtocolTier.PREPARATION
    if severity == Severity.WARNING:
        return ProtocolTier.EMERGENCY
    return ProtocolTier.OPERATIONAL


def get_response_protocol(hazard_type: HazardType, severity: Severity) -> ResponseProtocol:
    """Protocol card for a candidate; forecast variants use their base hazard's table."""
    return RESPONSE_PROTOCOLS[hazard_type.base][protocol_tier(hazard_type, severity)]


def get_ppe_reminders(hazard_type: HazardType) -> Tuple[str, ...]:
    return PPE_REMINDERS[hazard_type.base]


def get_hydration_schedule(hazard_type: HazardType) -> Tuple[HydrationStep, ...]:
    """Hydration guidance applies to heat hazards only."""
    if hazard_type.base == HazardType.HEAT_INDEX:
        return HYDRATION_SCHEDULE
    return ()
