"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from jobboard.api.routes.auth_routes import router as auth_router
from jobboard.api.routes.admin_routes import router as admin_router
from jobboard.api.routes.provider_routes import router as provider_router
from jobboard.api.routes.seeker_routes import router as seeker_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(admin_router)
api_router.include_router(provider_router)
api_router.include_router(seeker_router)
