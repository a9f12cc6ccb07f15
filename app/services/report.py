"""Plain-text report rendering for a MetricsRecord."""

from __future__ import annotations

from datetime import timezone
from email.utils import format_datetime
from typing import Optional

from app.services.body_metrics import MetricsRecord

RULE = "=" * 40
TITLE = "BODY MEASUREMENT REPORT"
LABEL_WIDTH = 24


def _line(label: str, value: str) -> str:
    return f"{label + ':':<{LABEL_WIDTH}}{value}"


def _num(value: float) -> str:
    return f"{value:.2f}"


def _raw(value: float) -> str:
    # Caller-supplied measurements keep full precision, minus a trailing ".0"
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


def _body_fat(value: Optional[float]) -> str:
    return "N/A" if value is None else f"{_num(value)} %"


def format_timestamp(record: MetricsRecord) -> str:
    """RFC 1123 UTC string, e.g. ``Thu, 02 Jan 2025 03:04:05 GMT``."""
    return format_datetime(record.timestamp.astimezone(timezone.utc), usegmt=True)


def render_report(record: MetricsRecord) -> str:
    """Fixed-layout report. Pure; the same record always renders the same text."""
    m = record.metrics
    lines = [RULE, TITLE, RULE, "", "-- Identity --", _line("Name", record.name)]
    if record.email:
        lines.append(_line("Email", record.email))
    lines += [
        _line("Sex", record.sex.value.capitalize()),
        "",
        "-- Measurements --",
        _line("Height", f"{_raw(record.height_cm)} cm"),
        _line("Weight", f"{_raw(record.weight_lbs)} lbs ({_num(record.weight_kg)} kg)"),
        _line("Waist", f"{_raw(record.waist_cm)} cm"),
        _line("Neck", f"{_raw(record.neck_cm)} cm"),
        "",
        "-- Metrics --",
        _line("BMI", _num(m.bmi)),
        _line("BMI Category", m.bmi_category.value),
        _line("Waist-to-Height Ratio", _num(m.waist_height_ratio)),
        _line("Body Fat", _body_fat(m.body_fat_percentage)),
        "",
        _line("Generated (UTC)", format_timestamp(record)),
        RULE,
    ]
    return "\n".join(lines) + "\n"
