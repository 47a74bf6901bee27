"""API v1 router aggregator."""

from fastapi import APIRouter

from briefsync.api.v1.briefs.routes import router as briefs_router

api_router = APIRouter()

api_router.include_router(briefs_router, prefix="/briefs", tags=["Briefs"])
