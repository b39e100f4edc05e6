"""
Alert email rendering.

Pure functions that turn an alert candidate plus the site's conditions into
an HTML email body and subject line. Inline styles only, since most mail
clients strip <style> blocks.
"""

from datetime import datetime, timezone
from typing import Optional

from weather_alerts.alerts.evaluator import format_local_time
from weather_alerts.alerts.protocols import (
    CardColor,
    get_hydration_schedule,
    get_ppe_reminders,
    get_response_protocol,
)
from weather_alerts.alerts.types import (
    AlertCandidate,
    ConditionsSnapshot,
    Severity,
    SiteRef,
)

BRAND = "Job Site Weather Monitoring"

SEVERITY_COLORS = {
    Severity.WARNING: {"bg": "#fef2f2", "border": "#dc2626", "banner": "#dc2626"},
    Severity.WATCH: {"bg": "#fff7ed", "border": "#ea580c", "banner": "#ea580c"},
    Severity.ADVISORY: {"bg": "#fefce8", "border": "#ca8a04", "banner": "#ca8a04"},
}

CARD_COLORS = {
    CardColor.RED: {"bg": "#fef2f2", "border": "#ef4444", "title": "#dc2626"},
    CardColor.AMBER: {"bg": "#fffbeb", "border": "#f59e0b", "title": "#d97706"},
    CardColor.GREEN: {"bg": "#f0fdf4", "border": "#22c55e", "title": "#16a34a"},
}

ESCALATION_STEPS = (
    "Notify your Site Supervisor or on-duty Security",
    "Supervisor &rarr; Safety Manager &rarr; Site Leadership (phone)",
    "Safety Manager &rarr; EHS, HR, and relevant management",
    "Share: <strong>WHO, WHAT, WHEN, WHERE, WHY</strong>",
    "Begin documentation within 1 hour",
)

WORKERS_COMP_STEPS = (
    "Notify HR immediately for workers' comp processing",
    "Provide employee with claim forms before leaving site",
    "Route to approved Occupational Clinic",
    "Submit all workers' comp paperwork within 24 hours",
)


def _esc(text) -> str:
    """Minimal HTML escaping."""
    return (
        str(text)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _num(value) -> str:
    if value is None:
        return "N/A"
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def _aqi_cell(aqi, label: str) -> str:
    return f"{_num(aqi)} ({_esc(label)})" if aqi is not None else "N/A"


def build_subject(candidate: AlertCandidate, site: SiteRef) -> str:
    """'[WARNING] Extreme Heat Warning - North Yard'"""
    return f"[{candidate.severity.value.upper()}] {candidate.label} - {site.name}"


def _threshold_line(candidate: AlertCandidate) -> str:
    if not candidate.threshold or not candidate.unit:
        return ""
    unit = _esc(candidate.unit)
    return f"""
    <p style="margin:0;font-size:14px;color:#475569;">
      Threshold: {_num(candidate.threshold)}{unit} &nbsp;|&nbsp; Actual: <strong>{_num(candidate.actual)}{unit}</strong>
    </p>"""


def _advisory_block(candidate: AlertCandidate) -> str:
    detail = candidate.advisory_detail
    if detail is None or not detail.instruction:
        return ""
    source = (
        f'<p style="font-size:12px;color:#94a3b8;margin:8px 0 0;">Source: {_esc(detail.sender_name)}</p>'
        if detail.sender_name else ""
    )
    expires = (
        f'<p style="font-size:12px;color:#94a3b8;margin:4px 0 0;">Expires: {_esc(detail.expires)}</p>'
        if detail.expires else ""
    )
    return f"""
  <div style="padding:18px;margin:16px 20px 0;background:#fef2f2;border-left:5px solid #dc2626;">
    <h3 style="margin:0 0 10px;font-size:16px;color:#dc2626;">NWS Instructions</h3>
    <p style="font-size:14px;color:#334155;line-height:1.6;margin:0;">{_esc(detail.instruction)}</p>
    {source}
    {expires}
  </div>"""


def _current_table(conditions: ConditionsSnapshot) -> str:
    c = conditions.current
    rows = (
        ("Temperature:", f"<strong>{_num(c.temperature)}°F</strong>"),
        ("Feels Like (Heat Index):", f"<strong>{_num(c.apparent_temperature)}°F</strong>"),
        ("Wind Speed:", f"<strong>{_num(c.wind_speed)} mph</strong>"),
        ("Air Quality (AQI):", f"<strong>{_aqi_cell(c.aqi, c.aqi_label)}</strong>"),
        ("Conditions:", _esc(c.weather_description)),
    )
    body = "".join(
        f'<tr><td style="padding:4px 0;width:45%;">{label}</td><td>{value}</td></tr>'
        for label, value in rows
    )
    return f"""
  <div style="padding:18px;margin:0 20px;background:#f8fafc;border:1px solid #e2e8f0;">
    <h3 style="margin:0 0 12px;font-size:16px;color:#1e293b;">Current Conditions</h3>
    <table style="width:100%;font-size:14px;color:#334155;">{body}</table>
  </div>"""


def _forecast_table(conditions: ConditionsSnapshot) -> str:
    cell = 'style="padding:6px 10px;border-bottom:1px solid #e2e8f0;"'
    rows = "".join(
        f"<tr><td {cell}>{format_local_time(h.time)}</td>"
        f"<td {cell}>{_num(h.temperature)}°F</td>"
        f"<td {cell}>{_num(h.apparent_temperature)}°F</td>"
        f"<td {cell}>{_num(h.wind_speed)} mph</td>"
        f"<td {cell}>{_aqi_cell(h.aqi, h.aqi_label)}</td></tr>"
        for h in conditions.display_hourly
    )
    head = "".join(
        f'<th style="padding:6px 10px;text-align:left;">{name}</th>'
        for name in ("Time", "Temp", "Feels Like", "Wind", "AQI")
    )
    return f"""
  <div style="padding:18px;margin:16px 20px 0;background:#f8fafc;border:1px solid #e2e8f0;">
    <h3 style="margin:0 0 12px;font-size:16px;color:#1e293b;">24-Hour Forecast</h3>
    <table style="width:100%;font-size:12px;color:#334155;border-collapse:collapse;">
      <thead><tr style="background:#e2e8f0;">{head}</tr></thead>
      <tbody>{rows}</tbody>
    </table>
  </div>"""


def _protocol_card(candidate: AlertCandidate) -> str:
    protocol = get_response_protocol(candidate.hazard_type, candidate.severity)
    pc = CARD_COLORS[protocol.card_color]
    actions = "".join(f'<li style="margin-bottom:4px;">{_esc(a)}</li>' for a in protocol.actions)
    section = 'style="padding:18px;border-bottom:1px solid #e2e8f0;"'
    heading = 'style="margin:0 0 10px;font-size:15px;color:#1e293b;"'
    text = 'style="margin:0;font-size:14px;color:#334155;line-height:1.7;"'
    return f"""
  <div style="margin:20px;border:2px solid {pc['border']};">
    <div style="background:{pc['bg']};padding:18px;border-bottom:1px solid {pc['border']};">
      <h2 style="margin:0 0 6px;font-size:18px;color:{pc['title']};">{_esc(protocol.title)}</h2>
      <p style="margin:0;font-size:13px;color:#475569;line-height:1.5;">{_esc(protocol.description)}</p>
    </div>
    <div {section}>
      <h3 {heading}>Immediate Actions</h3>
      <ol style="margin:0;padding-left:20px;font-size:14px;color:#334155;line-height:1.8;">{actions}</ol>
    </div>
    <div {section}>
      <h3 {heading}>Watch For These Symptoms</h3>
      <p {text}>{_esc(protocol.watch_for)}</p>
    </div>
    <div {section}>
      <h3 {heading}>Work Modification</h3>
      <p {text}>{_esc(protocol.work_modification)}</p>
    </div>
    <div style="padding:18px;">
      <h3 {heading}>Gear Reminders</h3>
      <p {text}>{_esc(protocol.gear)}</p>
    </div>
  </div>"""


def _ppe_block(candidate: AlertCandidate) -> str:
    items = "".join(f"<li>{_esc(p)}</li>" for p in get_ppe_reminders(candidate.hazard_type))
    return f"""
  <div style="padding:18px;margin:16px 20px 0;background:#eff6ff;border-left:5px solid #3b82f6;">
    <h3 style="margin:0 0 10px;font-size:16px;color:#1e40af;">PPE Requirements</h3>
    <ul style="margin:0;padding-left:20px;font-size:14px;color:#334155;line-height:1.7;">{items}</ul>
  </div>"""


def _hydration_block(candidate: AlertCandidate) -> str:
    schedule = get_hydration_schedule(candidate.hazard_type)
    if not schedule:
        return ""
    rows = "".join(
        f'<tr><td style="padding:5px 0;width:40%;font-weight:600;">{_esc(step.range)}</td>'
        f'<td style="padding:5px 0;">{_esc(step.instruction)}</td></tr>'
        for step in schedule
    )
    return f"""
  <div style="padding:18px;margin:16px 20px 0;background:#ecfdf5;border-left:5px solid #22c55e;">
    <h3 style="margin:0 0 10px;font-size:16px;color:#166534;">Hydration Schedule</h3>
    <table style="width:100%;font-size:13px;color:#334155;border-collapse:collapse;">{rows}</table>
  </div>"""


def _list_box(title: str, items) -> str:
    lis = "".join(f"<li>{item}</li>" for item in items)
    return f"""
  <div style="padding:16px;margin:16px 20px 0;background:rgba(37,99,235,0.05);border:1px solid rgba(37,99,235,0.2);">
    <h4 style="margin:0 0 8px;font-size:13px;color:#2563eb;text-transform:uppercase;">{title}</h4>
    <ul style="margin:0;padding-left:18px;font-size:13px;color:#334155;line-height:1.7;">{lis}</ul>
  </div>"""


def render_alert_email(
    candidate: AlertCandidate,
    site: SiteRef,
    conditions: ConditionsSnapshot,
    generated_at: Optional[datetime] = None,
    poll_interval_minutes: int = 30,
) -> str:
    """
    Render the full HTML alert email.

    Sections: severity banner, threshold/actual, description, NWS
    instructions (external advisories only), current conditions, 24-hour
    forecast, response protocol card, PPE, hydration (heat only),
    escalation, and the workers' comp reminder for watches and warnings.
    """
    colors = SEVERITY_COLORS[candidate.severity]
    generated_at = generated_at or datetime.now(timezone.utc)
    location = f" - {_esc(site.location)}" if site.location else ""

    description = (
        f'<p style="margin:8px 0 0;font-size:14px;color:#334155;font-style:italic;">'
        f"{_esc(candidate.description)}</p>"
        if candidate.description else ""
    )

    workers_comp = ""
    if candidate.severity in (Severity.WARNING, Severity.WATCH):
        workers_comp = _list_box("Workers' Comp Reminder", (_esc(s) for s in WORKERS_COMP_STEPS))

    return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"></head>
<body style="margin:0;padding:0;background:#f1f5f9;font-family:Arial,Helvetica,sans-serif;">
<div style="max-width:640px;margin:0 auto;background:#ffffff;">

  <div style="background:{colors['banner']};color:#ffffff;padding:24px;text-align:center;">
    <h1 style="margin:0;font-size:22px;">Weather Safety {candidate.severity.value.upper()}</h1>
    <p style="margin:6px 0 0;font-size:13px;opacity:0.9;">{BRAND}</p>
  </div>

  <div style="background:{colors['bg']};border-left:5px solid {colors['border']};padding:18px;margin:20px;">
    <h2 style="margin:0 0 8px;font-size:18px;color:{colors['border']};">{_esc(candidate.label)}</h2>
    <p style="margin:0 0 4px;font-size:15px;"><strong>{_esc(site.name)}</strong>{location}</p>
    {_threshold_line(candidate)}
    {description}
  </div>
{_advisory_block(candidate)}
{_current_table(conditions)}
{_forecast_table(conditions)}
{_protocol_card(candidate)}
{_ppe_block(candidate)}
{_hydration_block(candidate)}
{_list_box("Escalation (Within 10 Min)", ESCALATION_STEPS)}
{workers_comp}

  <div style="padding:20px;text-align:center;color:#94a3b8;font-size:12px;margin-top:20px;border-top:1px solid #e2e8f0;">
    <p style="margin:0 0 4px;">Automated alert from the {BRAND} System</p>
    <p style="margin:0;">Generated: {generated_at.strftime("%Y-%m-%d %H:%M UTC")} &nbsp;|&nbsp; Next check in {poll_interval_minutes} minutes</p>
  </div>

</div>
</body>
</html>"""
