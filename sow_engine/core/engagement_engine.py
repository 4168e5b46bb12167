"""Engagement engine: priority selection, catalog enrichment, tier choice and roadmap.

Pure functions over diagnostic process dicts. Inputs are never mutated;
enriched items are fresh copies.
"""

import math
from datetime import datetime, timezone
from typing import Any, Sequence

from sow_engine.core.logging import get_logger
from sow_engine.core.service_catalog import (
    entry_estimates,
    normalize_catalog,
    parse_number_or_default,
    resolve_catalog,
    slugify,
)
from sow_engine.core.sow_constants import (
    DEFAULT_PRIORITY_SCORE,
    FUNCTION_ORDER,
    HEALTH_STATUSES,
    HIGH_PRIORITY_MIN_SCORE,
    MAX_DELIVERY_MONTHS,
    MIN_NAME_MATCH_TOKENS,
    MIN_PROJECT_WEEKS,
    NEEDS_ATTENTION_STATUSES,
    OTHER_GROUP,
    PRIORITY_SCORES,
    SERVICE_TYPE_MANAGED,
    TIERS,
    WEEKLY_DELIVERY_HOURS,
)

logger = get_logger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def _require_list(items: Any, name: str) -> list[dict[str, Any]]:
    if items is None:
        return []
    if not isinstance(items, list):
        raise TypeError(f"{name} must be a list, got {type(items).__name__}")
    return items


def group_label(value: Any) -> str:
    """Grouping label for a field value; missing or blank values become "Other"."""
    if value is None:
        return OTHER_GROUP
    return str(value).strip() or OTHER_GROUP


def function_sort_key(function: str) -> tuple[int, int]:
    """Known functions in display order, then unknown ones, then "Other"."""
    if function == OTHER_GROUP:
        return (2, 0)
    if function in FUNCTION_ORDER:
        return (0, FUNCTION_ORDER.index(function))
    return (1, 0)


# =========================
# Priority selection
# =========================


def is_priority_item(item: dict[str, Any]) -> bool:
    """True if the item needs attention or was flagged for the engagement."""
    return item.get("status") in NEEDS_ATTENTION_STATUSES or bool(item.get("addToEngagement"))


def select_priority_items(items: list[dict[str, Any]] | None) -> list[dict[str, Any]]:
    """
    Select the diagnostic items relevant to a proposal.

    An item is selected when its status is warning/unable, or when the user
    flagged it with addToEngagement regardless of status. Input order is kept.

    Args:
        items: Diagnostic process dicts (None is treated as empty)

    Returns:
        The selected items, same objects as the input

    Raises:
        TypeError: If items is not a list
    """
    items = _require_list(items, "items")
    return [item for item in items if is_priority_item(item)]


def count_statuses(items: list[dict[str, Any]] | None) -> dict[str, int]:
    """Count items per health status; unknown statuses are not counted."""
    counts = {status: 0 for status in HEALTH_STATUSES}
    for item in _require_list(items, "items"):
        status = item.get("status")
        if status in counts:
            counts[status] += 1
    return counts


# =========================
# Catalog enrichment
# =========================


def _same_function(entry: dict[str, Any], function: str | None) -> bool:
    if not function or not entry.get("primary_function"):
        return False
    return str(entry["primary_function"]).strip().lower() == str(function).strip().lower()


def _name_tokens(name: str | None) -> list[str]:
    slug = slugify(name)
    return slug.split("-") if slug else []


def _tokens_overlap(item_tokens: list[str], entry_tokens: list[str]) -> bool:
    """True if the shorter token run appears whole and contiguous in the longer."""
    shorter, longer = sorted((item_tokens, entry_tokens), key=len)
    if len(shorter) < MIN_NAME_MATCH_TOKENS:
        return False
    size = len(shorter)
    return any(longer[i : i + size] == shorter for i in range(len(longer) - size + 1))


def find_catalog_match(
    item: dict[str, Any],
    catalog: list[dict[str, Any]],
) -> dict[str, Any] | None:
    """
    Find the catalog entry for a diagnostic item.

    The explicit serviceId link wins (matched against id, slug or slugified
    name). Otherwise entries tagged with the item's function are compared by
    name slug: exact first, then a run of at least two whole slug tokens
    contained in the other name, in either direction. "lead-routing" matches
    "lead-routing-automation"; "sales" alone does not match "sales-lifecycle".

    Args:
        item: Diagnostic process dict
        catalog: Normalized catalog entries

    Returns:
        Matching entry or None
    """
    service_id = item.get("serviceId")
    if service_id:
        service_id = str(service_id)
        for entry in catalog:
            if service_id in (str(entry["id"]), entry["slug"], slugify(entry["name"])):
                return entry

    item_tokens = _name_tokens(item.get("name"))
    if not item_tokens:
        return None

    candidates = [e for e in catalog if _same_function(e, item.get("function"))]

    for entry in candidates:
        if _name_tokens(entry["name"]) == item_tokens:
            return entry

    for entry in candidates:
        entry_tokens = _name_tokens(entry["name"])
        if entry_tokens and _tokens_overlap(item_tokens, entry_tokens):
            return entry

    return None


def enrich_with_catalog(
    items: list[dict[str, Any]] | None,
    catalog: list[dict[str, Any]] | None,
) -> list[dict[str, Any]]:
    """
    Attach hour and rate estimates to each item.

    Every enriched item carries numeric hours_low, hours_high and rate.
    Unmatched items, and matched entries missing estimate fields, get the
    30/60 hour and 200/hour defaults.

    Args:
        items: Diagnostic process dicts
        catalog: Catalog entries (live or static); None is treated as empty

    Returns:
        New dicts: the item fields plus hours_low, hours_high, rate, catalog_id
    """
    items = _require_list(items, "items")
    normalized = normalize_catalog(catalog)

    enriched = []
    matched = 0
    for item in items:
        entry = find_catalog_match(item, normalized)
        estimates = entry_estimates(entry)
        if entry:
            matched += 1
        enriched.append(
            {
                **item,
                "hours_low": estimates["hours_low"],
                "hours_high": estimates["hours_high"],
                "rate": estimates["default_rate"],
                "catalog_id": entry["id"] if entry else None,
            }
        )

    logger.debug(f"Enriched {len(enriched)} items, {matched} matched to catalog")
    return enriched


# =========================
# Tier recommendation
# =========================


def _project_hours(tier: dict[str, Any], reserved_hours: float) -> float:
    return (tier.get("hours") or 0) - reserved_hours


def _tier_qualifies(avg_hours: float, tier: dict[str, Any], reserved_hours: float = 0) -> bool:
    hours = _project_hours(tier, reserved_hours)
    if hours <= 0:
        return False
    return avg_hours / hours <= MAX_DELIVERY_MONTHS


def recommend_tier(
    avg_hours: float,
    tiers: Sequence[dict[str, Any]],
    reserved_hours: float = 0,
) -> dict[str, Any]:
    """
    Pick the smallest tier that can absorb the backlog within six months.

    Tiers are walked in the given (ascending) order; the first one where
    avg_hours / (tier hours - reserved_hours) <= 6 is chosen. When none
    qualifies the largest tier is returned.

    Args:
        avg_hours: Midpoint of the total low/high hour estimate
        tiers: Tier dicts {id, label, hours, ...}, smallest commitment first
        reserved_hours: Monthly hours already committed to managed services

    Returns:
        The recommended tier dict

    Raises:
        ValueError: If no tiers are configured
    """
    if not tiers:
        raise ValueError("At least one tier must be configured")

    for tier in tiers:
        if _tier_qualifies(avg_hours, tier, reserved_hours):
            return tier
    return tiers[-1]


def build_tier_options(
    avg_hours: float,
    tiers: Sequence[dict[str, Any]],
    reserved_hours: float = 0,
) -> list[dict[str, Any]]:
    """Every tier with its delivery estimate in months and the recommended flag."""
    recommended = recommend_tier(avg_hours, tiers, reserved_hours)
    options = []
    for tier in tiers:
        hours = _project_hours(tier, reserved_hours)
        months = max(1, math.ceil(avg_hours / hours)) if hours > 0 else None
        options.append(
            {
                **tier,
                "estimated_months": months,
                "is_recommended": tier is recommended,
            }
        )
    return options


# =========================
# Engagement roadmap
# =========================


def score_priority(item: dict[str, Any]) -> dict[str, Any]:
    """Priority score (unable 4 .. healthy 1) and its High/Medium label."""
    score = PRIORITY_SCORES.get(item.get("status"), DEFAULT_PRIORITY_SCORE)
    return {
        "priority_score": score,
        "priority_label": "High" if score >= HIGH_PRIORITY_MIN_SCORE else "Medium",
    }


def filter_engagement_items(items: list[dict[str, Any]] | None) -> list[dict[str, Any]]:
    """Items the user explicitly added to the engagement."""
    return [item for item in _require_list(items, "items") if item.get("addToEngagement")]


def is_managed_service(item: dict[str, Any]) -> bool:
    return item.get("serviceType") == SERVICE_TYPE_MANAGED


def duration_weeks(hours: float | None) -> int:
    """Roadmap weeks for a block of work at the assumed weekly pace."""
    if not hours or hours <= 0:
        return MIN_PROJECT_WEEKS
    return max(MIN_PROJECT_WEEKS, math.ceil(hours / WEEKLY_DELIVERY_HOURS))


def _midpoint_hours(item: dict[str, Any]) -> float:
    low = parse_number_or_default(item.get("hours_low"), 0)
    high = parse_number_or_default(item.get("hours_high"), 0)
    return (low + high) / 2


def group_and_sequence(
    scored: list[dict[str, Any]],
) -> tuple[dict[str, list[dict[str, Any]]], list[dict[str, Any]]]:
    """
    Group scored projects by function and lay them out week by week.

    Groups follow the function display order and list the highest priority
    first (ties keep input order). The sequence walks the groups in that
    order and schedules projects back to back: the first starts in week 1
    and each runs duration_weeks(midpoint hours).

    Args:
        scored: Enriched items carrying priority_score

    Returns:
        (function -> projects, flat sequence with start_week and duration_weeks)
    """
    groups: dict[str, list[dict[str, Any]]] = {}
    for item in scored:
        groups.setdefault(group_label(item.get("function")), []).append(item)

    groups = {
        function: sorted(groups[function], key=lambda i: -(i.get("priority_score") or 0))
        for function in sorted(groups, key=function_sort_key)
    }

    sequence = []
    week = 1
    for function, projects in groups.items():
        for project in projects:
            weeks = duration_weeks(_midpoint_hours(project))
            sequence.append(
                {
                    **project,
                    "function": function,
                    "start_week": week,
                    "duration_weeks": weeks,
                }
            )
            week += weeks

    return groups, sequence


def sum_managed_hours(managed_services: list[dict[str, Any]] | None) -> tuple[float, int]:
    """Monthly hours and count of the managed services added to the engagement."""
    selected = filter_engagement_items(managed_services)
    hours = sum(parse_number_or_default(s.get("hoursPerMonth"), 0) for s in selected)
    return hours, len(selected)


def compute_recommendation(
    diagnostic: dict[str, Any],
    catalog: list[dict[str, Any]] | None = None,
    managed_services: list[dict[str, Any]] | None = None,
    *,
    fallback_catalog: list[dict[str, Any]] | None = None,
    tiers: Sequence[dict[str, Any]] = TIERS,
    generated_at: datetime | None = None,
) -> dict[str, Any]:
    """
    Build the engagement recommendation for a diagnostic result.

    Projects are the processes added to the engagement that are not managed
    services. They are enriched from the catalog, scored, grouped and
    sequenced. Managed-service hours are reserved out of every tier's monthly
    hours before the tier is chosen.

    Args:
        diagnostic: Diagnostic result dict {id, customer_id, diagnostic_type, processes}
        catalog: Live catalog entries
        managed_services: Managed service dicts {name, addToEngagement, hoursPerMonth}
        fallback_catalog: Catalog used when the live one is empty
        tiers: Tier table, smallest commitment first
        generated_at: Timestamp to stamp on the result (defaults to now, UTC)

    Returns:
        Dict with metadata, summary, groups, project_sequence and tiers
    """
    processes = _require_list(diagnostic.get("processes"), "processes")
    projects = [i for i in filter_engagement_items(processes) if not is_managed_service(i)]

    enriched = enrich_with_catalog(projects, resolve_catalog(catalog, fallback_catalog))
    scored = [{**item, **score_priority(item)} for item in enriched]
    groups, sequence = group_and_sequence(scored)

    total_low = sum(item["hours_low"] for item in scored)
    total_high = sum(item["hours_high"] for item in scored)
    avg_hours = round_half_up((total_low + total_high) / 2)

    managed_hours, managed_count = sum_managed_hours(managed_services)
    tier_options = build_tier_options(avg_hours, tiers, managed_hours)
    recommended = next(option for option in tier_options if option["is_recommended"])

    logger.debug(
        f"Recommended {recommended['id']} for {len(scored)} projects "
        f"and {managed_hours} managed hours/month"
    )

    return {
        "customer_id": diagnostic.get("customer_id"),
        "diagnostic_result_id": diagnostic.get("id"),
        "diagnostic_type": diagnostic.get("diagnostic_type"),
        "generated_at": (generated_at or datetime.now(timezone.utc)).isoformat(),
        "summary": {
            "project_count": len(scored),
            "high_priority_count": sum(1 for i in scored if i["priority_label"] == "High"),
            "total_hours_low": total_low,
            "total_hours_high": total_high,
            "avg_project_hours": avg_hours,
            "managed_hours_per_month": managed_hours,
            "managed_service_count": managed_count,
            "recommended_tier": recommended,
            "total_weeks": sum(p["duration_weeks"] for p in sequence),
        },
        "groups": groups,
        "project_sequence": sequence,
        "tiers": tier_options,
    }
