"""SOW preview engine.

Turns the current diagnostic processes into a priced outline: priority items,
hour and investment ranges, proposal sections and a recommended tier. Pure and
synchronous; callers own catalog loading and any debouncing of recomputation.
"""

from typing import Any, Sequence

from sow_engine.core.engagement_engine import (
    build_tier_options,
    enrich_with_catalog,
    recommend_tier,
    round_half_up,
    select_priority_items,
)
from sow_engine.core.logging import get_logger
from sow_engine.core.service_catalog import resolve_catalog
from sow_engine.core.sow_constants import TIERS
from sow_engine.core.sow_sections import build_preview_sections

logger = get_logger(__name__)


def empty_preview(tiers: Sequence[dict[str, Any]] = TIERS) -> dict[str, Any]:
    """Canonical zero result, recommending the smallest tier."""
    return {
        "sections": [],
        "total_hours_low": 0,
        "total_hours_high": 0,
        "estimated_investment_low": 0,
        "estimated_investment_high": 0,
        "recommended_tier": dict(tiers[0]),
        "tier_options": build_tier_options(0, tiers),
        "item_count": 0,
        "section_count": 0,
    }


def compute_sow_preview(
    processes: list[dict[str, Any]] | None,
    catalog: list[dict[str, Any]] | None = None,
    *,
    fallback_catalog: list[dict[str, Any]] | None = None,
    tiers: Sequence[dict[str, Any]] = TIERS,
) -> dict[str, Any]:
    """
    Compute a SOW preview from diagnostic processes.

    Args:
        processes: Diagnostic process dicts (never mutated)
        catalog: Live catalog entries; when empty, fallback_catalog is used
        fallback_catalog: Static catalog injected by the caller
        tiers: Tier table, smallest commitment first

    Returns:
        Dict with sections, total_hours_low/high, estimated_investment_low/high,
        recommended_tier, tier_options, item_count and section_count

    Raises:
        TypeError: If processes or a catalog is not a list
        ValueError: If the tier table is empty
    """
    if not tiers:
        raise ValueError("At least one tier must be configured")

    priority_items = select_priority_items(processes)
    if not priority_items:
        return empty_preview(tiers)

    enriched = enrich_with_catalog(priority_items, resolve_catalog(catalog, fallback_catalog))

    total_hours_low = sum(item["hours_low"] for item in enriched)
    total_hours_high = sum(item["hours_high"] for item in enriched)

    # Plain mean of per-item rates, not weighted by hours
    avg_rate = sum(item["rate"] for item in enriched) / len(enriched)

    sections = build_preview_sections(priority_items)

    avg_hours = round_half_up((total_hours_low + total_hours_high) / 2)
    recommended = recommend_tier(avg_hours, tiers)

    logger.debug(
        f"Preview computed: {len(priority_items)} items, {len(sections)} sections, "
        f"tier={recommended.get('id')}"
    )

    return {
        "sections": sections,
        "total_hours_low": total_hours_low,
        "total_hours_high": total_hours_high,
        "estimated_investment_low": round_half_up(total_hours_low * avg_rate),
        "estimated_investment_high": round_half_up(total_hours_high * avg_rate),
        "recommended_tier": dict(recommended),
        "tier_options": build_tier_options(avg_hours, tiers),
        "item_count": len(priority_items),
        "section_count": len(sections),
    }
