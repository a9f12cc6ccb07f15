"""Health check endpoint for load balancers and monitoring."""

import os

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.api.deps import get_report_store
from app.services.report_store import ReportStore

router = APIRouter()


@router.get("")
async def health():
    """Simple liveness check. Optionally includes built_at if BACKEND_BUILT_AT env is set."""
    payload: dict = {"status": "ok"}
    built_at = os.environ.get("BACKEND_BUILT_AT") or os.environ.get("RENDER_GIT_COMMIT_TIMESTAMP")
    if built_at:
        payload["built_at"] = built_at
    return payload


@router.get("/ready")
async def readiness(store: ReportStore = Depends(get_report_store)):
    """Readiness: app + report directory writable."""
    if store.is_writable():
        return {"status": "ok", "storage": "writable"}
    return JSONResponse(
        status_code=503,
        content={"status": "error", "storage": f"{store.data_dir} is not writable"},
    )
