"""API v1 router aggregation."""

from fastapi import APIRouter

from app.api.v1.endpoints import health, submit

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])

# The form posts to /submit at the site root, next to the static frontend
form_router = submit.router
