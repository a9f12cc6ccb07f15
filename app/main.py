"""FastAPI application factory and lifespan."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.api.v1 import api_router, form_router
from app.core.config import Settings, get_settings
from app.services.mailer import build_mailer
from app.services.rate_limit import RateLimiter
from app.services.report_store import ReportStore

logger = logging.getLogger(__name__)


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup: build collaborators once and share them via app.state."""
        logging.basicConfig(
            level=settings.log_level.upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        app.state.settings = settings
        app.state.report_store = ReportStore(settings.data_dir, settings.report_format)
        app.state.mailer = build_mailer(settings)
        app.state.rate_limiter = (
            RateLimiter(settings.rate_limit_max_requests, settings.rate_limit_window_seconds)
            if settings.rate_limit_enabled
            else None
        )
        logger.info(
            "Reports go to %s (%s); mail %s; rate limit %s",
            settings.data_dir,
            settings.report_format.value,
            "on" if settings.mail_enabled else "off",
            "on" if settings.rate_limit_enabled else "off",
        )
        yield

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    # CORS: allow localhost in dev; in production use CORS_ORIGINS env (comma-separated)
    if settings.debug:
        cors_origins = ["*"]
    elif settings.environment == "development":
        cors_origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
    else:
        cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix=settings.api_v1_prefix)
    app.include_router(form_router, tags=["submit"])

    # Static frontend at "/" when present; it must be mounted last so routes win
    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
    else:
        @app.get("/")
        def root():
            return {"status": "ok", "message": "Server is running"}

    return app


app = create_application()
