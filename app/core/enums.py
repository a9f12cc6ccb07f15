"""Shared enums for the metrics engine and API."""

from enum import Enum


class Sex(str, Enum):
    """Biological sex as accepted by the body-fat formula."""

    MALE = "male"
    FEMALE = "female"


class BmiCategory(str, Enum):
    UNDERWEIGHT = "Underweight"
    NORMAL = "Normal"
    OVERWEIGHT = "Overweight"
    OBESE = "Obese"


class ErrorKind(str, Enum):
    """Failure classification surfaced in error payloads."""

    MISSING_FIELD = "missing_field"
    INVALID_EMAIL = "invalid_email"
    INVALID_SEX = "invalid_sex"
    INVALID_MEASUREMENT = "invalid_measurement"
    UNDEFINED_BODY_FAT = "undefined_body_fat"
    # Request / collaborator failures (not produced by the engine)
    MALFORMED_REQUEST = "malformed_request"
    RATE_LIMITED = "rate_limited"
    STORAGE_FAILURE = "storage_failure"
    DELIVERY_FAILURE = "delivery_failure"


class ReportFormat(str, Enum):
    """On-disk format of a saved report."""

    JSON = "json"  # Pretty-printed record
    TEXT = "text"  # Rendered plain-text report
