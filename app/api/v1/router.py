"""
API v1 router.

Aggregates all v1 endpoints.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import analytics, fatigue, progression

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(
    fatigue.router, prefix="/fatigue", tags=["Fatigue"]
)
api_router.include_router(
    progression.router, prefix="/progression", tags=["Progression"]
)
api_router.include_router(
    analytics.router, prefix="/analytics", tags=["Analytics"]
)
