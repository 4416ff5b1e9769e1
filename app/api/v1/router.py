"""
API v1 router setup
All routes live under /dashboard and require a JWT bearer token
"""
from fastapi import APIRouter

from app.api.v1.dashboard import appointments, provider_schedules, calendar

api_v1_router = APIRouter()

# ============================================================================
# DASHBOARD ROUTES (JWT authentication required)
# ============================================================================
api_v1_router.include_router(
    appointments.router,
    prefix="/dashboard",
    tags=["Dashboard"]
)

api_v1_router.include_router(
    provider_schedules.router,
    prefix="/dashboard",
    tags=["Dashboard"]
)

api_v1_router.include_router(
    calendar.router,
    prefix="/dashboard",
    tags=["Dashboard"]
)


# ============================================================================
# ROOT ENDPOINT - API Info
# ============================================================================
@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """
    API information and available endpoints.
    """
    return {
        "version": "1.0",
        "authentication": {
            "dashboard": "JWT Bearer token carrying a business_id claim"
        },
        "resources": [
            "/dashboard/appointments",
            "/dashboard/provider-schedules",
            "/dashboard/calendar"
        ]
    }
