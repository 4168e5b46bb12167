"""FastAPI application entry point."""

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from sow_engine.api import router as api_router
from sow_engine.core.sow_constants import TIERS
from sow_engine.data.services_catalog import STATIC_CATALOG

app = FastAPI(
    title="SOW Engine",
    description="Engagement and Statement-of-Work recommendations from GTM diagnostics",
    version="0.1.0",
)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Liveness plus the offline pricing data previews fall back to."""
    return JSONResponse(
        content={
            "status": "ok",
            "service": "sow-engine",
            "static_catalog_entries": len(STATIC_CATALOG),
            "tiers": [tier["id"] for tier in TIERS],
        },
        status_code=200,
    )


# Include v1 API router
app.include_router(api_router, prefix="/v1", tags=["v1"])
