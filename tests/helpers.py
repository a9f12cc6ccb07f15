"""Shared test data and doubles."""

from datetime import datetime, timezone

from app.services.mailer import ReportDeliveryError

FIXED_NOW = datetime(2025, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)

VALID_MALE = {
    "name": "John Doe",
    "sex": "male",
    "height_cm": 180,
    "weight_lbs": 160,
    "waist_cm": 85,
    "neck_cm": 38,
}


class RecordingMailer:
    """Mailer double: remembers what it was asked to send, optionally fails."""

    def __init__(self, enabled: bool = True, fail: bool = False):
        self.enabled = enabled
        self.fail = fail
        self.sent: list[tuple[str, str, str]] = []

    def send_report(self, recipient: str, name: str, report_text: str) -> None:
        if self.fail:
            raise ReportDeliveryError("relay refused connection")
        self.sent.append((recipient, name, report_text))
