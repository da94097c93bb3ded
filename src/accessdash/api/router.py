"""Master API router."""

from fastapi import APIRouter

from accessdash.api.routes import health, reports

api_router = APIRouter()
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(reports.router)
