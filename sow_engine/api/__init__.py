"""API router for v1 endpoints."""

from fastapi import APIRouter

from sow_engine.api import service_catalog, sow

router = APIRouter()

# SOW preview and drafting
router.include_router(sow.router, prefix="/sow", tags=["sow"])

# Service catalog reads and seeding
router.include_router(service_catalog.router, prefix="/service-catalog", tags=["service_catalog"])
