"""Service catalog database operations."""

from typing import Any

from sow_engine.core.config import get_settings
from sow_engine.core.logging import get_logger
from sow_engine.db.supabase_client import get_supabase

logger = get_logger(__name__)

# Columns needed to price a SOW
ESTIMATE_COLUMNS = (
    "id, slug, name, description, category, primary_function, "
    "hours_low, hours_high, default_rate, key_steps, active"
)


def _table() -> str:
    return get_settings().SERVICE_CATALOG_TABLE


def list_services(
    category: str | None = None,
    active: bool | None = None,
    search: str | None = None,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    """
    List catalog services with optional filters.

    Args:
        category: Filter by category (Strategic, Managed Services, ...)
        active: Filter by active flag
        search: Case-insensitive name substring
        limit: Maximum rows to return (defaults to CATALOG_FETCH_LIMIT)

    Returns:
        List of catalog rows ordered by sort_order then name

    Raises:
        Exception: If database operation fails
    """
    supabase = get_supabase()

    try:
        query = supabase.table(_table()).select("*")

        if category:
            query = query.eq("category", category)
        if active is not None:
            query = query.eq("active", active)
        if search:
            query = query.ilike("name", f"%{search}%")

        response = (
            query.order("sort_order")
            .order("name")
            .limit(limit or get_settings().CATALOG_FETCH_LIMIT)
            .execute()
        )
        return response.data or []

    except Exception as e:
        logger.error(f"Error listing services: {e}", exc_info=True)
        raise


def list_active_services_for_pricing() -> list[dict[str, Any]]:
    """Active services with only the columns used for estimates."""
    supabase = get_supabase()

    response = (
        supabase.table(_table())
        .select(ESTIMATE_COLUMNS)
        .eq("active", True)
        .limit(get_settings().CATALOG_FETCH_LIMIT)
        .execute()
    )
    return response.data or []


def get_service(service_id: str) -> dict[str, Any] | None:
    """
    Get a single service by id.

    Args:
        service_id: Catalog row id

    Returns:
        Catalog row or None if not found
    """
    supabase = get_supabase()

    response = (
        supabase.table(_table())
        .select("*")
        .eq("id", service_id)
        .maybe_single()
        .execute()
    )
    # maybe_single() returns None instead of a response when no row matches
    return response.data if response else None


def upsert_services_by_slug(
    services: list[dict[str, Any]],
    clear: bool = False,
) -> list[dict[str, Any]]:
    """
    Upsert catalog rows keyed on slug.

    Args:
        services: Rows to write
        clear: Delete every existing row first

    Returns:
        Written rows (id, slug, name)

    Raises:
        Exception: If database operation fails
    """
    supabase = get_supabase()

    try:
        if clear:
            supabase.table(_table()).delete().neq(
                "id", "00000000-0000-0000-0000-000000000000"
            ).execute()
            logger.info("Cleared service catalog before seeding")

        response = (
            supabase.table(_table())
            .upsert(services, on_conflict="slug")
            .execute()
        )
        rows = response.data or []

        logger.info(
            f"Upserted {len(rows)} catalog services",
            extra={"requested": len(services), "cleared": clear},
        )
        return [{"id": r.get("id"), "slug": r.get("slug"), "name": r.get("name")} for r in rows]

    except Exception as e:
        logger.error(f"Error seeding service catalog: {e}", exc_info=True)
        raise
