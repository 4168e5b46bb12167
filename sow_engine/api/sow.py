"""SOW preview and drafting API endpoints.

The diagnostic UI calls the preview endpoint (debounced on its side) whenever
process statuses or engagement flags change, and the draft endpoint when a
consultant generates a SOW from a diagnostic.
"""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException

from sow_engine.core.config import get_settings
from sow_engine.core.logging import get_logger, log_with_context
from sow_engine.core.engagement_engine import compute_recommendation
from sow_engine.core.schemas_sow import (
    EngagementRecommendationRequest,
    EngagementRecommendationResponse,
    SowDraftRequest,
    SowDraftResponse,
    SowPreviewRequest,
    SowPreviewResponse,
    Tier,
)
from sow_engine.core.sow_constants import TIERS
from sow_engine.core.sow_preview_engine import compute_sow_preview
from sow_engine.core.sow_sections import draft_sow
from sow_engine.data.services_catalog import STATIC_CATALOG
from sow_engine.db import service_catalog as catalog_db

logger = get_logger(__name__)

router = APIRouter()


def load_catalog(use_live: bool = True) -> tuple[list[dict[str, Any]], str]:
    """
    Load the catalog used for pricing.

    Falls back to the static catalog when the live one is disabled, empty or
    unreachable.

    Returns:
        (catalog entries, "live" or "static")
    """
    if use_live:
        try:
            live = catalog_db.list_active_services_for_pricing()
            if live:
                return live, "live"
            logger.info("Live service catalog is empty, using static catalog")
        except Exception as e:
            logger.warning(f"Live service catalog unavailable, using static catalog: {e}")

    return STATIC_CATALOG, "static"


# =========================
# Endpoints
# =========================


@router.get("/tiers", response_model=list[Tier])
def list_tiers():
    """Engagement tiers, smallest commitment first."""
    return [Tier(**tier) for tier in TIERS]


@router.post("/preview", response_model=SowPreviewResponse)
def preview_sow(request: SowPreviewRequest):
    """Preview the SOW that would be generated from the current diagnostic.

    Args:
        request: Diagnostic processes and catalog preference

    Returns:
        SowPreviewResponse with sections, hour and investment ranges, and tier

    Raises:
        HTTPException: If the preview cannot be computed
    """
    processes = [item.to_process() for item in request.processes]
    catalog, source = load_catalog(request.use_live_catalog)

    try:
        preview = compute_sow_preview(processes, catalog, fallback_catalog=STATIC_CATALOG)
    except Exception as e:
        logger.error(f"Error computing SOW preview: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to compute SOW preview") from e

    log_with_context(
        logger,
        logging.INFO,
        "SOW preview computed",
        process_count=len(processes),
        item_count=preview["item_count"],
        recommended_tier=preview["recommended_tier"]["id"],
        catalog_source=source,
    )

    return SowPreviewResponse(**preview, catalog_source=source)


@router.post("/draft", response_model=SowDraftResponse)
def draft_sow_sections(request: SowDraftRequest):
    """Draft SOW sections and an executive summary from a diagnostic.

    The draft is returned, not saved; the caller persists the sections it
    keeps.

    Raises:
        HTTPException: If drafting fails
    """
    processes = [item.to_process() for item in request.processes]
    catalog, source = load_catalog(request.use_live_catalog)

    try:
        draft = draft_sow(
            processes,
            catalog,
            customer_name=request.customer_name,
            diagnostic_type=request.diagnostic_type,
            default_rate=get_settings().SOW_DEFAULT_RATE,
            sow_start_date=request.sow_start_date,
        )
    except Exception as e:
        logger.error(f"Error drafting SOW: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to draft SOW") from e

    log_with_context(
        logger,
        logging.INFO,
        "SOW sections drafted",
        diagnostic_type=request.diagnostic_type,
        catalog_source=source,
        customer_name=request.customer_name,
        process_count=len(processes),
        section_count=len(draft["sections"]),
    )

    return SowDraftResponse(
        executive_summary=draft["executive_summary"],
        status_counts=draft["status_counts"],
        priority_item_count=len(draft["priority_items"]),
        sections=draft["sections"],
        catalog_source=source,
    )


@router.post("/recommendation", response_model=EngagementRecommendationResponse)
def recommend_engagement(request: EngagementRecommendationRequest):
    """Score, group and sequence the engagement projects and pick a tier.

    Only processes added to the engagement count as projects; managed
    services reserve their monthly hours out of each tier.

    Raises:
        HTTPException: If the recommendation cannot be computed
    """
    diagnostic = {
        "id": request.diagnostic_result_id,
        "customer_id": request.customer_id,
        "diagnostic_type": request.diagnostic_type,
        "processes": [item.to_process() for item in request.processes],
    }
    managed = [service.to_service() for service in request.managed_services]
    catalog, source = load_catalog(request.use_live_catalog)

    try:
        recommendation = compute_recommendation(
            diagnostic, catalog, managed, fallback_catalog=STATIC_CATALOG
        )
    except Exception as e:
        logger.error(f"Error computing engagement recommendation: {e}", exc_info=True)
        raise HTTPException(
            status_code=500, detail="Failed to compute engagement recommendation"
        ) from e

    summary = recommendation["summary"]
    log_with_context(
        logger,
        logging.INFO,
        "Engagement recommendation computed",
        customer_id=request.customer_id,
        diagnostic_result_id=request.diagnostic_result_id,
        diagnostic_type=request.diagnostic_type,
        catalog_source=source,
        project_count=summary["project_count"],
        managed_hours_per_month=summary["managed_hours_per_month"],
        recommended_tier=summary["recommended_tier"]["id"],
    )

    return EngagementRecommendationResponse(**recommendation, catalog_source=source)
