"""Service catalog API endpoints."""

from typing import Any

from fastapi import APIRouter, HTTPException, Query

from sow_engine.core.logging import get_logger
from sow_engine.core.schemas_sow import CatalogEntry, SeedFromStaticRequest
from sow_engine.data.services_catalog import static_catalog_rows
from sow_engine.db import service_catalog as catalog_db

logger = get_logger(__name__)

router = APIRouter()


@router.get("", response_model=list[CatalogEntry])
def list_services(
    category: str | None = Query(None, description="Filter by category"),
    active: bool | None = Query(None, description="Filter by active flag"),
    search: str | None = Query(None, description="Name substring"),
):
    """List catalog services."""
    try:
        return catalog_db.list_services(category=category, active=active, search=search)
    except Exception as e:
        raise HTTPException(status_code=500, detail="Failed to list services") from e


@router.get("/{service_id}", response_model=CatalogEntry)
def get_service(service_id: str):
    """Get one catalog service."""
    try:
        service = catalog_db.get_service(service_id)
    except Exception as e:
        logger.error(f"Error getting service {service_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to get service") from e

    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    return service


@router.post("/seed-from-static")
def seed_from_static(request: SeedFromStaticRequest) -> dict[str, Any]:
    """Upsert the static strategic-project table into the catalog, keyed on slug."""
    rows = static_catalog_rows()

    try:
        written = catalog_db.upsert_services_by_slug(rows, clear=request.clear)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Seed from static failed: {e}") from e

    return {"success": True, "count": len(written), "requested": len(rows)}
