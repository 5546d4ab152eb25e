"""Little Stars - API v1 Router."""
from fastapi import APIRouter

from littlestars.api.v1.profile import router as profile_router
from littlestars.api.v1.progress import router as progress_router

api_router = APIRouter()

api_router.include_router(progress_router)
api_router.include_router(profile_router)
