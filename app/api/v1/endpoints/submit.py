"""Measurement form submission: compute metrics, save the report, optionally email it."""

from __future__ import annotations

import logging
import math
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from app.api.deps import get_app_settings, get_mailer, get_rate_limiter, get_report_store
from app.core.config import Settings
from app.core.enums import ErrorKind
from app.schemas.submission import (
    ErrorResponse,
    MetricsRead,
    SubmissionCreate,
    SubmissionResponse,
)
from app.services.body_metrics import compute_metrics
from app.services.mailer import Mailer, ReportDeliveryError
from app.services.rate_limit import RateLimiter
from app.services.report import render_report
from app.services.report_store import ReportStorageError, ReportStore

logger = logging.getLogger(__name__)
router = APIRouter()


def _error(
    status_code: int,
    kind: ErrorKind,
    message: str,
    field: Optional[str] = None,
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    body = ErrorResponse(error=message, kind=kind, field=field)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


@router.post(
    "/submit",
    response_model=SubmissionResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid submission"},
        429: {"model": ErrorResponse, "description": "Rate limited"},
        500: {"model": ErrorResponse, "description": "Report could not be saved"},
        502: {"model": ErrorResponse, "description": "Report saved but not emailed"},
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": SubmissionCreate.model_json_schema()}},
        }
    },
)
async def submit(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    store: ReportStore = Depends(get_report_store),
    mailer: Mailer = Depends(get_mailer),
    limiter: Optional[RateLimiter] = Depends(get_rate_limiter),
):
    """
    Validate the form, compute BMI / waist-to-height / body fat, save the report.
    Only the computed metrics are returned; the full record stays on disk.
    """
    if limiter is not None:
        client = request.client.host if request.client else "unknown"
        retry_after = limiter.hit(client)
        if retry_after > 0:
            logger.warning("Rate limited submission from %s", client)
            return _error(
                429,
                ErrorKind.RATE_LIMITED,
                "Too many submissions. Please try again later.",
                headers={"Retry-After": str(max(1, math.ceil(retry_after)))},
            )

    # Parse by hand so validation order (and its messages) stays with the engine
    try:
        payload = await request.json()
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        return _error(400, ErrorKind.MALFORMED_REQUEST, "Request body must be a JSON object")

    result = compute_metrics(payload, require_email=settings.require_email)
    if not result.ok:
        err = result.error
        logger.warning("Rejected submission: %s (field=%s)", err.kind.value, err.field)
        return _error(400, err.kind, err.message, field=err.field)

    record = result.record
    try:
        await run_in_threadpool(store.save, record)
    except ReportStorageError:
        logger.exception("Storing report for %r failed", record.name)
        return _error(
            500, ErrorKind.STORAGE_FAILURE, "Could not save your report. Please try again."
        )

    if mailer.enabled and record.email:
        try:
            await run_in_threadpool(
                mailer.send_report, record.email, record.name, render_report(record)
            )
        except ReportDeliveryError:
            logger.exception("Emailing report for %r failed", record.name)
            return _error(
                502,
                ErrorKind.DELIVERY_FAILURE,
                "Your report was saved but could not be emailed.",
            )

    return SubmissionResponse(data=MetricsRead(**record.metrics.to_dict()))
