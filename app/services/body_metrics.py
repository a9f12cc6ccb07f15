"""Body metrics engine.

Turns a raw measurement submission into a validated, rounded MetricsRecord.
Pure: no I/O, and the clock is only read when ``now`` is not supplied.
Invalid input is returned as a classified MeasurementError, never raised.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from app.core.constants import (
    BMI_NORMAL_BELOW,
    BMI_OVERWEIGHT_BELOW,
    BMI_UNDERWEIGHT_BELOW,
    CM_PER_M,
    EMAIL_PATTERN,
    LB_TO_KG,
    MAX_DERIVED_VALUE,
    MEASUREMENT_FIELDS,
    METRIC_DECIMALS,
    NAVY_MALE_HEIGHT_COEF,
    NAVY_MALE_OFFSET,
    NAVY_MALE_WAIST_NECK_COEF,
    REQUIRED_FIELDS,
)
from app.core.enums import BmiCategory, ErrorKind, Sex

_EMAIL_RE = re.compile(EMAIL_PATTERN)
_QUANTUM = Decimal(1).scaleb(-METRIC_DECIMALS)

ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.MISSING_FIELD: "Missing required fields",
    ErrorKind.INVALID_EMAIL: "Please provide a valid email address",
    ErrorKind.INVALID_SEX: "Sex must be 'male' or 'female'",
    ErrorKind.INVALID_MEASUREMENT: "All measurements must be positive numbers",
    ErrorKind.UNDEFINED_BODY_FAT: (
        "Waist must be larger than neck to estimate body fat percentage"
    ),
}


# ── Types ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class MeasurementError:
    kind: ErrorKind
    message: str
    field: Optional[str] = None

    @classmethod
    def of(cls, kind: ErrorKind, field: Optional[str] = None) -> "MeasurementError":
        return cls(kind=kind, message=ERROR_MESSAGES[kind], field=field)


@dataclass(frozen=True)
class MeasurementInput:
    """A validated submission. Only built by ``validate_submission``."""

    name: str
    sex: Sex
    height_cm: float
    weight_lbs: float
    waist_cm: float
    neck_cm: float
    email: Optional[str] = None


@dataclass(frozen=True)
class Metrics:
    bmi: float
    bmi_category: BmiCategory
    waist_height_ratio: float
    body_fat_percentage: Optional[float]

    def to_dict(self) -> dict[str, Any]:
        return {
            "bmi": self.bmi,
            "bmi_category": self.bmi_category.value,
            "waist_height_ratio": self.waist_height_ratio,
            "body_fat_percentage": self.body_fat_percentage,
        }


@dataclass(frozen=True)
class MetricsRecord:
    """Everything persisted for one submission."""

    name: str
    email: Optional[str]
    sex: Sex
    height_cm: float
    weight_lbs: float
    weight_kg: float
    waist_cm: float
    neck_cm: float
    metrics: Metrics
    timestamp: datetime

    @property
    def timestamp_iso(self) -> str:
        """ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
        utc = self.timestamp.astimezone(timezone.utc)
        return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name}
        if self.email is not None:
            data["email"] = self.email
        data.update(
            sex=self.sex.value,
            height_cm=self.height_cm,
            weight_lbs=self.weight_lbs,
            weight_kg=self.weight_kg,
            waist_cm=self.waist_cm,
            neck_cm=self.neck_cm,
            metrics=self.metrics.to_dict(),
            timestamp=self.timestamp_iso,
        )
        return data


@dataclass(frozen=True)
class MetricsResult:
    """Either ``record`` or ``error`` is set, never both."""

    record: Optional[MetricsRecord] = None
    error: Optional[MeasurementError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


# ── Core formulas ────────────────────────────────────────────────────────

def round_metric(value: float) -> float:
    """Round half away from zero to METRIC_DECIMALS, using the float's shortest repr."""
    if not math.isfinite(value):
        raise ValueError(f"cannot round non-finite value {value!r}")
    return float(Decimal(repr(value)).quantize(_QUANTUM, rounding=ROUND_HALF_UP))


def lbs_to_kg(weight_lbs: float) -> float:
    return weight_lbs * LB_TO_KG


def calc_bmi(weight_kg: float, height_cm: float) -> float:
    """Body Mass Index: kg / m²."""
    height_m = height_cm / CM_PER_M
    return weight_kg / (height_m * height_m)


def classify_bmi(bmi: float) -> BmiCategory:
    if bmi < BMI_UNDERWEIGHT_BELOW:
        return BmiCategory.UNDERWEIGHT
    if bmi < BMI_NORMAL_BELOW:
        return BmiCategory.NORMAL
    if bmi < BMI_OVERWEIGHT_BELOW:
        return BmiCategory.OVERWEIGHT
    return BmiCategory.OBESE


def calc_waist_height_ratio(waist_cm: float, height_cm: float) -> float:
    return waist_cm / height_cm


def calc_navy_bf_male(height_cm: float, waist_cm: float, neck_cm: float) -> float:
    """U.S. Navy body fat % for men, applied to centimetre inputs.

    86.010×log10(waist−neck) − 70.041×log10(height) + 36.76
    Caller guarantees waist_cm > neck_cm.
    """
    return (
        NAVY_MALE_WAIST_NECK_COEF * math.log10(waist_cm - neck_cm)
        - NAVY_MALE_HEIGHT_COEF * math.log10(height_cm)
        + NAVY_MALE_OFFSET
    )


# ── Validation ───────────────────────────────────────────────────────────

def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _to_positive_number(value: Any) -> Optional[float]:
    """Coerce JSON numbers and numeric form strings; None if not a finite positive."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number


def _reportable(value: float) -> bool:
    return math.isfinite(value) and value <= MAX_DERIVED_VALUE


def _first_unreportable(numbers: dict[str, float]) -> Optional[str]:
    """Field whose value pushes a derived metric out of range, or None.

    Positive but extreme inputs can overflow, or underflow height² to zero.
    """
    height_m = numbers["height_cm"] / CM_PER_M
    if height_m * height_m == 0:
        return "height_cm"
    weight_kg = lbs_to_kg(numbers["weight_lbs"])
    if not _reportable(weight_kg):
        return "weight_lbs"
    if not _reportable(calc_bmi(weight_kg, numbers["height_cm"])):
        return "height_cm"
    if not _reportable(calc_waist_height_ratio(numbers["waist_cm"], numbers["height_cm"])):
        return "waist_cm"
    return None


def validate_submission(
    payload: Mapping[str, Any],
    *,
    require_email: bool = False,
) -> tuple[Optional[MeasurementInput], Optional[MeasurementError]]:
    """Check a raw payload in fixed order; the first failing check wins."""
    required = REQUIRED_FIELDS + (("email",) if require_email else ())
    for field in required:
        if _is_blank(payload.get(field)):
            return None, MeasurementError.of(ErrorKind.MISSING_FIELD, field)
    name = payload["name"]
    if not isinstance(name, str):
        return None, MeasurementError.of(ErrorKind.MISSING_FIELD, "name")

    email = payload.get("email")
    if _is_blank(email):
        email = None
    elif not isinstance(email, str) or not _EMAIL_RE.match(email.strip()):
        return None, MeasurementError.of(ErrorKind.INVALID_EMAIL, "email")
    else:
        email = email.strip()

    raw_sex = payload["sex"]
    normalized = raw_sex.strip().lower() if isinstance(raw_sex, str) else None
    if normalized not in (Sex.MALE.value, Sex.FEMALE.value):
        return None, MeasurementError.of(ErrorKind.INVALID_SEX, "sex")
    sex = Sex(normalized)

    numbers: dict[str, float] = {}
    for field in MEASUREMENT_FIELDS:
        number = _to_positive_number(payload[field])
        if number is None:
            return None, MeasurementError.of(ErrorKind.INVALID_MEASUREMENT, field)
        numbers[field] = number

    field = _first_unreportable(numbers)
    if field is not None:
        return None, MeasurementError.of(ErrorKind.INVALID_MEASUREMENT, field)

    if sex is Sex.MALE and numbers["waist_cm"] <= numbers["neck_cm"]:
        return None, MeasurementError.of(ErrorKind.UNDEFINED_BODY_FAT, "waist_cm")

    return MeasurementInput(name=name.strip(), sex=sex, email=email, **numbers), None


# ── Master compute function ─────────────────────────────────────────────

def build_record(measurement: MeasurementInput, now: datetime) -> MetricsRecord:
    """Derive every metric from an already validated input."""
    weight_kg = lbs_to_kg(measurement.weight_lbs)
    bmi = calc_bmi(weight_kg, measurement.height_cm)

    body_fat: Optional[float] = None
    if measurement.sex is Sex.MALE:
        body_fat = round_metric(
            calc_navy_bf_male(measurement.height_cm, measurement.waist_cm, measurement.neck_cm)
        )

    metrics = Metrics(
        bmi=round_metric(bmi),
        # Category uses the unrounded BMI
        bmi_category=classify_bmi(bmi),
        waist_height_ratio=round_metric(
            calc_waist_height_ratio(measurement.waist_cm, measurement.height_cm)
        ),
        body_fat_percentage=body_fat,
    )
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return MetricsRecord(
        name=measurement.name,
        email=measurement.email,
        sex=measurement.sex,
        height_cm=measurement.height_cm,
        weight_lbs=measurement.weight_lbs,
        weight_kg=round_metric(weight_kg),
        waist_cm=measurement.waist_cm,
        neck_cm=measurement.neck_cm,
        metrics=metrics,
        timestamp=now,
    )


def compute_metrics(
    payload: Mapping[str, Any],
    *,
    require_email: bool = False,
    now: Optional[datetime] = None,
) -> MetricsResult:
    """Validate a submission and compute its MetricsRecord.

    ``now`` pins the record timestamp; it is captured once here otherwise.
    """
    measurement, error = validate_submission(payload, require_email=require_email)
    if error is not None:
        return MetricsResult(error=error)
    timestamp = now if now is not None else datetime.now(timezone.utc)
    return MetricsResult(record=build_record(measurement, timestamp))
