"""
Database connection management.

Provides Supabase client singleton for catalog operations.
"""

from supabase import create_client, Client
from functools import lru_cache
from typing import Optional
import structlog

from config.settings import settings
from exceptions import ConfigurationError, DatabaseError

logger = structlog.get_logger(__name__)


@lru_cache()
def get_supabase_client() -> Client:
    """
    Get cached Supabase client instance.

    Uses lru_cache to ensure only one client is created.
    Call get_supabase_client.cache_clear() to reconnect.

    Returns:
        Client: Supabase client

    Raises:
        ConfigurationError: If SUPABASE_URL / SUPABASE_KEY are not set
        DatabaseError: If the client cannot be created
    """
    if not settings.supabase_configured:
        raise ConfigurationError(
            "Supabase is not configured (set SUPABASE_URL and SUPABASE_KEY "
            "or CATALOG_SOURCE=fixture)"
        )

    try:
        logger.info(
            "connecting_to_supabase",
            url=settings.supabase_url[:30] + "..."  # Log partial URL only
        )

        client = create_client(
            settings.supabase_url,
            settings.supabase_key
        )

        logger.info(
            "supabase_connected",
            status="success"
        )

        return client

    except Exception as e:
        logger.error(
            "supabase_connection_failed",
            error=str(e),
            error_type=type(e).__name__
        )
        raise DatabaseError("connect", f"could not create Supabase client: {e}") from e


def get_admin_client() -> Optional[Client]:
    """
    Get Supabase client with service role key (admin access).

    Only available if SUPABASE_SERVICE_KEY is configured.
    Used by catalog writes when row-level security blocks the anon key.

    Returns:
        Client: Admin Supabase client, or None if not configured
    """
    if not settings.supabase_url or not settings.supabase_service_key:
        logger.warning("admin_client_not_configured")
        return None

    try:
        return create_client(
            settings.supabase_url,
            settings.supabase_service_key
        )
    except Exception as e:
        logger.error(
            "admin_client_failed",
            error=str(e)
        )
        return None




# ===================
# HELPER FUNCTIONS
# ===================

def check_connection() -> dict:
    """
    Check database connection health.

    Returns:
        dict: Connection status with details
    """
    if settings.use_fixture_catalog:
        return {"status": "healthy", "source": "fixture"}

    try:
        client = get_supabase_client()

        products = (
            client.table(settings.products_table)
            .select("id", count="exact")
            .execute()
        )

        return {
            "status": "healthy",
            "source": "remote",
            "products_count": products.count
        }

    except Exception as e:
        return {
            "status": "unhealthy",
            "source": "remote",
            "error": str(e)
        }


def reset_connection():
    """
    Reset the cached database connection.

    Call this if connection becomes stale or after config changes.
    """
    get_supabase_client.cache_clear()
    logger.info("database_connection_reset")
