"""Request-scoped access to collaborators built once in the lifespan."""

from fastapi import Request

from app.core.config import Settings
from app.services.mailer import Mailer
from app.services.rate_limit import RateLimiter
from app.services.report_store import ReportStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_report_store(request: Request) -> ReportStore:
    return request.app.state.report_store


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


def get_rate_limiter(request: Request) -> RateLimiter | None:
    """None when rate limiting is disabled."""
    return request.app.state.rate_limiter
