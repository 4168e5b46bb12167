"""Service catalog normalization.

Live catalog rows (from the service_catalog table) and the static fallback
table are mapped to one canonical entry shape so enrichment never has to care
where an entry came from.
"""

import math
import re
from typing import Any

from sow_engine.core.sow_constants import (
    DEFAULT_HOURS_HIGH,
    DEFAULT_HOURS_LOW,
    DEFAULT_RATE,
    ESTIMATE_DEFAULTS,
)

_SLUG_STRIP = re.compile(r"[^a-z0-9]+")


def parse_number_or_default(value: Any, default: float) -> float:
    """
    Parse an optional numeric field, falling back to a default.

    Missing, non-numeric, non-finite and negative values resolve to the
    default. Zero is kept as zero.

    Args:
        value: Raw field value (number, numeric string, None, ...)
        default: Value to use when the field is unusable

    Returns:
        Parsed float or the default
    """
    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default

    try:
        number = float(value)
    except (TypeError, ValueError):
        return default

    if not math.isfinite(number) or number < 0:
        return default
    return number


def slugify(text: str | None) -> str:
    """Lowercase slug with '&' spelled out and punctuation collapsed to dashes."""
    if not text:
        return ""
    lowered = str(text).lower().replace("&", " and ")
    return _SLUG_STRIP.sub("-", lowered).strip("-")


def normalize_catalog_entry(entry: dict[str, Any]) -> dict[str, Any]:
    """
    Map a catalog row or static entry to the canonical catalog shape.

    Estimate fields are left as given; defaulting happens at enrichment time
    so that an entry with missing estimates stays distinguishable.
    """
    name = entry.get("name") or ""
    slug = entry.get("slug") or slugify(name)
    key_steps = entry.get("key_steps")

    return {
        "id": entry.get("id") or slug,
        "slug": slug,
        "name": name,
        "description": entry.get("description") or "",
        "primary_function": entry.get("primary_function"),
        "hours_low": entry.get("hours_low"),
        "hours_high": entry.get("hours_high"),
        "default_rate": entry.get("default_rate"),
        "key_steps": list(key_steps) if isinstance(key_steps, list) else [],
    }


def normalize_catalog(entries: list[dict[str, Any]] | None) -> list[dict[str, Any]]:
    """
    Normalize a whole catalog.

    Args:
        entries: Catalog rows; None is treated as an empty catalog

    Returns:
        List of canonical catalog entries

    Raises:
        TypeError: If entries is not a list
    """
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise TypeError(f"catalog must be a list, got {type(entries).__name__}")
    return [normalize_catalog_entry(e) for e in entries if isinstance(e, dict)]


def build_static_catalog(
    projects_by_function: dict[str, list[dict[str, Any]]],
    function_labels: dict[str, str],
) -> list[dict[str, Any]]:
    """
    Flatten the static strategic-project table into catalog entries.

    Static entries carry no measured estimates, so every entry gets the
    standard 30-60 hour range at the default rate.

    Args:
        projects_by_function: Function key -> list of {id, name, description}
        function_labels: Function key -> display label

    Returns:
        List of canonical catalog entries
    """
    catalog = []
    for func_key, services in projects_by_function.items():
        func_label = function_labels.get(func_key, func_key)
        for svc in services:
            catalog.append(
                normalize_catalog_entry(
                    {
                        "id": svc["id"],
                        "slug": svc["id"],
                        "name": svc["name"],
                        "description": svc.get("description", ""),
                        "primary_function": func_label,
                        "hours_low": DEFAULT_HOURS_LOW,
                        "hours_high": DEFAULT_HOURS_HIGH,
                        "default_rate": DEFAULT_RATE,
                        "key_steps": svc.get("key_steps", []),
                    }
                )
            )
    return catalog


def resolve_catalog(
    live: list[dict[str, Any]] | None,
    fallback: list[dict[str, Any]] | None,
) -> list[dict[str, Any]]:
    """Pick the live catalog when it has entries, otherwise the fallback."""
    if live:
        return normalize_catalog(live)
    return normalize_catalog(fallback)


def build_catalog_map(catalog: list[dict[str, Any]] | None) -> dict[str, dict[str, Any]]:
    """Index catalog entries by slug and id for direct serviceId lookups."""
    catalog_map: dict[str, dict[str, Any]] = {}
    for entry in normalize_catalog(catalog):
        for key in (entry["slug"], str(entry["id"])):
            if key and key not in catalog_map:
                catalog_map[key] = entry
    return catalog_map


def _whole(number: float) -> int | float:
    return int(number) if float(number).is_integer() else number


def entry_estimates(entry: dict[str, Any] | None) -> dict[str, int | float]:
    """Return hours_low/hours_high/default_rate for an entry with defaults applied.

    Hours are returned as ints when whole; the rate is always a float.
    """
    entry = entry or {}
    estimates: dict[str, int | float] = {
        field: parse_number_or_default(entry.get(field), default)
        for field, default in ESTIMATE_DEFAULTS.items()
    }
    estimates["hours_low"] = _whole(estimates["hours_low"])
    estimates["hours_high"] = _whole(estimates["hours_high"])
    estimates["default_rate"] = float(estimates["default_rate"])
    return estimates
