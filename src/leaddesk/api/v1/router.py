"""
Main API router for v1 endpoints
"""
from fastapi import APIRouter

from leaddesk.api.v1.endpoints import analytics, categories, imports, leads

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(imports.router, tags=["imports"])
api_router.include_router(categories.router, tags=["categories"])
api_router.include_router(leads.router, tags=["leads"])
api_router.include_router(analytics.router, tags=["analytics"])
