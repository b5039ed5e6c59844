from fastapi import APIRouter

from app.features.health.routes.health import router as health_router
from app.features.seo_analysis.routes.analyze import router as seo_analysis_router

api_router = APIRouter()

# Register all feature routes
api_router.include_router(seo_analysis_router)
api_router.include_router(health_router)
