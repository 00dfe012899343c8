"""
API v1 router that aggregates all endpoint routers.
"""

from fastapi import APIRouter

from ooh_billing.api.v1.endpoints import (
    health,
    pricing,
    line_items,
    documents,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(pricing.router, prefix="/pricing", tags=["pricing"])
api_router.include_router(line_items.router, prefix="/line-items", tags=["line-items"])
api_router.include_router(documents.router, prefix="/documents", tags=["documents"])
