"""Proposal sectioning and SOW section drafting from diagnostic items."""

from datetime import date, timedelta
from typing import Any

from sow_engine.core.engagement_engine import (
    count_statuses,
    duration_weeks,
    function_sort_key,
    group_label,
    round_half_up,
    select_priority_items,
)
from sow_engine.core.service_catalog import build_catalog_map, parse_number_or_default
from sow_engine.core.sow_constants import (
    DEFAULT_RATE,
    DIAGNOSTIC_TYPE_LABELS,
    GROUPED_SECTION_SUFFIX,
    ITEM_SECTION_THRESHOLD,
    MAX_SECTION_DELIVERABLES,
    SEVERITY_RANK,
    UNKNOWN_SEVERITY_RANK,
)

# =========================
# Grouping
# =========================


def _severity(item: dict[str, Any]) -> int:
    return SEVERITY_RANK.get(item.get("status"), UNKNOWN_SEVERITY_RANK)


def group_items(
    items: list[dict[str, Any]],
    key: str = "function",
) -> dict[str, list[dict[str, Any]]]:
    """
    Group items by a field, most severe first within each group.

    Groups appear in first-seen order. Items with a missing or blank value
    land in the "Other" group.

    Args:
        items: Diagnostic process dicts
        key: Field to group by (function, outcome, ...)

    Returns:
        Dict of group name -> items
    """
    if not isinstance(items, list):
        raise TypeError(f"items must be a list, got {type(items).__name__}")

    groups: dict[str, list[dict[str, Any]]] = {}
    for item in items:
        groups.setdefault(group_label(item.get(key)), []).append(item)

    # sorted() is stable, so equal severities keep input order
    return {group: sorted(members, key=_severity) for group, members in groups.items()}


def should_use_item_sections(items: list[dict[str, Any]]) -> bool:
    """One section per item for short lists, grouped sections above the threshold."""
    return len(items) <= ITEM_SECTION_THRESHOLD


def grouped_section_title(function: str) -> str:
    return f"{function}{GROUPED_SECTION_SUFFIX}"


def build_preview_sections(priority_items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Outline rows for the preview: per item, or per function above the threshold."""
    if should_use_item_sections(priority_items):
        return [
            {
                "title": item.get("name"),
                "item_count": 1,
                "function": group_label(item.get("function")),
            }
            for item in priority_items
        ]

    grouped = group_items(priority_items, "function")
    return [
        {
            "title": grouped_section_title(function),
            "item_count": len(members),
            "function": function,
        }
        for function, members in grouped.items()
    ]


# =========================
# SOW drafting
# =========================


def _catalog_entry(item: dict[str, Any], catalog_map: dict[str, dict[str, Any]]) -> dict[str, Any] | None:
    service_id = item.get("serviceId")
    return catalog_map.get(str(service_id)) if service_id else None


def _key_steps(entry: dict[str, Any] | None) -> list[str]:
    if not entry:
        return []
    return [step for step in entry.get("key_steps") or [] if isinstance(step, str)]


def _summarize_statuses(items: list[dict[str, Any]]) -> str:
    counts = count_statuses(items)
    parts = [
        f"{counts[status]} {status}"
        for status in ("unable", "warning", "careful", "healthy")
        if counts[status]
    ]
    return ", ".join(parts)


def _parse_start_date(value: date | str | None) -> date | None:
    if value is None or isinstance(value, date):
        return value
    if not str(value).strip():
        return None
    return date.fromisoformat(str(value).strip())


def schedule_sections(
    sections: list[dict[str, Any]],
    sow_start_date: date | str | None = None,
) -> list[dict[str, Any]]:
    """
    Set start_date/end_date on drafted sections, run back to back from the SOW start.

    Each section lasts duration_weeks(hours); sections without hours get the
    minimum. Without a start date both fields are None.

    Raises:
        ValueError: If sow_start_date is not an ISO date
    """
    start = _parse_start_date(sow_start_date)
    for section in sections:
        if start is None:
            section["start_date"] = None
            section["end_date"] = None
            continue
        end = start + timedelta(weeks=duration_weeks(section.get("hours")), days=-1)
        section["start_date"] = start.isoformat()
        section["end_date"] = end.isoformat()
        start = end + timedelta(days=1)
    return sections


def draft_item_sections(
    items: list[dict[str, Any]],
    catalog_map: dict[str, dict[str, Any]],
    default_rate: float = DEFAULT_RATE,
    sow_start_date: date | str | None = None,
) -> list[dict[str, Any]]:
    """
    Draft one SOW section per diagnostic item.

    Hours are the rounded midpoint of the matched catalog range, or None when
    the item has no catalog entry so the consultant fills it in.

    Args:
        items: Priority items
        catalog_map: serviceId/slug -> catalog entry
        default_rate: Rate for items without a catalog rate
        sow_start_date: First day of the engagement; sections get start/end dates

    Returns:
        List of drafted section dicts
    """
    sections = []
    for index, item in enumerate(items):
        entry = _catalog_entry(item, catalog_map)
        hours = None
        rate = default_rate
        if entry:
            low = parse_number_or_default(entry.get("hours_low"), 0)
            high = parse_number_or_default(entry.get("hours_high"), 0)
            if low or high:
                hours = round_half_up((low + high) / 2)
            rate = parse_number_or_default(entry.get("default_rate"), default_rate)

        description = (entry or {}).get("description") or item.get("outcome") or ""
        sections.append(
            {
                "title": item.get("name"),
                "description": description,
                "function": group_label(item.get("function")),
                "deliverables": _key_steps(entry) or [item.get("name")],
                "hours": hours,
                "rate": rate,
                "diagnostic_items": [item.get("name")],
                "sort_order": index,
            }
        )
    return schedule_sections(sections, sow_start_date)


def draft_grouped_sections(
    grouped: dict[str, list[dict[str, Any]]],
    catalog_map: dict[str, dict[str, Any]],
    default_rate: float = DEFAULT_RATE,
    sow_start_date: date | str | None = None,
) -> list[dict[str, Any]]:
    """
    Draft one SOW section per function group, in function order.

    Hours are aggregated across the group's matched catalog entries and
    deliverables are de-duplicated and capped.

    Args:
        grouped: Function -> items, as returned by group_items
        catalog_map: serviceId/slug -> catalog entry
        default_rate: Rate for groups with no catalog rates
        sow_start_date: First day of the engagement; sections get start/end dates

    Returns:
        List of drafted section dicts
    """
    sections = []
    for index, function in enumerate(sorted(grouped, key=function_sort_key)):
        items = grouped[function]
        total_low = 0.0
        total_high = 0.0
        rates = []
        deliverables: list[str] = []

        for item in items:
            entry = _catalog_entry(item, catalog_map)
            if not entry:
                continue
            total_low += parse_number_or_default(entry.get("hours_low"), 0)
            total_high += parse_number_or_default(entry.get("hours_high"), 0)
            if entry.get("default_rate") is not None:
                rates.append(parse_number_or_default(entry.get("default_rate"), default_rate))
            for step in _key_steps(entry):
                if step not in deliverables:
                    deliverables.append(step)

        hours = round_half_up((total_low + total_high) / 2) if (total_low or total_high) else None
        rate = round_half_up(sum(rates) / len(rates)) if rates else default_rate
        plural = "" if len(items) == 1 else "s"

        sections.append(
            {
                "title": grouped_section_title(function),
                "description": (
                    f"{function} improvements: {_summarize_statuses(items)}. "
                    f"Covers {len(items)} diagnostic item{plural}."
                ),
                "function": function,
                "deliverables": (deliverables or [i.get("name") for i in items])[
                    :MAX_SECTION_DELIVERABLES
                ],
                "hours": hours,
                "rate": rate,
                "diagnostic_items": [i.get("name") for i in items],
                "sort_order": index,
            }
        )
    return schedule_sections(sections, sow_start_date)


def generate_executive_summary(
    items: list[dict[str, Any]],
    customer_name: str | None,
    diagnostic_type: str | None,
    status_counts: dict[str, int] | None = None,
) -> str:
    """Narrative opening paragraph for a drafted SOW."""
    organization = customer_name or "your organization"
    label = DIAGNOSTIC_TYPE_LABELS.get(diagnostic_type or "", "Operations")
    total = len(items)

    if total == 0:
        return (
            f"The {label} diagnostic for {organization} surfaced no processes that "
            f"need attention, indicating a healthy operational state. This SOW "
            f"focuses on sustaining that baseline."
        )

    counts = status_counts if status_counts is not None else count_statuses(items)
    critical = counts.get("warning", 0) + counts.get("unable", 0)
    careful = counts.get("careful", 0)
    critical_pct = round_half_up(critical / total * 100)

    if critical_pct > 50:
        severity = "require immediate attention"
    elif critical_pct > 25:
        severity = "need focused improvement"
    else:
        severity = "are largely sound, with targeted gaps"

    return (
        f"{organization} completed a {label} diagnostic with {total} processes evaluated. "
        f"{critical} processes ({critical_pct}%) are at warning or unable status and "
        f"{careful} warrant caution, so core {label} workflows {severity}. "
        f"This SOW sequences the work to close those gaps."
    )


def draft_sow(
    items: list[dict[str, Any]] | None,
    catalog: list[dict[str, Any]] | None = None,
    customer_name: str | None = None,
    diagnostic_type: str | None = "gtm",
    default_rate: float = DEFAULT_RATE,
    sow_start_date: date | str | None = None,
) -> dict[str, Any]:
    """
    Draft SOW content (sections and executive summary) from diagnostic items.

    Nothing is persisted; callers decide whether to save the sections. With a
    sow_start_date the sections are scheduled back to back from that day.

    Returns:
        Dict with priority_items, status_counts, executive_summary, sections
    """
    priority_items = select_priority_items(items)
    all_items = items or []
    status_counts = count_statuses(all_items)
    summary = generate_executive_summary(all_items, customer_name, diagnostic_type, status_counts)

    if not priority_items:
        return {
            "priority_items": [],
            "status_counts": status_counts,
            "executive_summary": summary,
            "sections": [],
        }

    catalog_map = build_catalog_map(catalog)
    if should_use_item_sections(priority_items):
        sections = draft_item_sections(priority_items, catalog_map, default_rate, sow_start_date)
    else:
        sections = draft_grouped_sections(
            group_items(priority_items, "function"), catalog_map, default_rate, sow_start_date
        )

    return {
        "priority_items": priority_items,
        "status_counts": status_counts,
        "executive_summary": summary,
        "sections": sections,
    }
