"""Supabase client for the service catalog tables."""

from functools import lru_cache
from urllib.parse import urlparse

from supabase import Client, create_client

from sow_engine.core.config import get_settings
from sow_engine.core.logging import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    """
    Service-role Supabase client, created once per process.

    Raises:
        RuntimeError: If the URL or key is missing or the client cannot be created
    """
    settings = get_settings()
    if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
        raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must both be set")

    try:
        client = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
    except Exception as e:
        raise RuntimeError(f"Failed to initialize Supabase client: {e}") from e

    logger.info(
        f"Supabase client ready for {urlparse(settings.SUPABASE_URL).netloc or settings.SUPABASE_URL}, "
        f"catalog table {settings.SERVICE_CATALOG_TABLE}"
    )
    return client
