"""Supabase client initialization."""

from collections.abc import Callable
from functools import lru_cache
from typing import Any

from supabase import Client, create_client

from app.core.config import get_settings


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    """
    Get Supabase client instance (cached singleton).

    Only the application boundary (FastAPI dependencies, ``get_coordinator``)
    should call this; engine code receives the client it reads through.

    Returns:
        Supabase client configured with service role key

    Raises:
        RuntimeError: If client initialization fails
    """
    try:
        settings = get_settings()
        return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
    except Exception as e:
        raise RuntimeError(f"Failed to initialize Supabase client: {e}") from e


PAGE_SIZE = 1000


def select_all(build_query: Callable[[], Any], page_size: int = PAGE_SIZE) -> list[dict[str, Any]]:
    """
    Read every row of a select, paging past the PostgREST row limit.

    Args:
        build_query: Returns a fresh filtered select builder for each page
        page_size: Rows per request

    Returns:
        All rows (empty list when none match)
    """
    rows: list[dict[str, Any]] = []
    start = 0
    while True:
        response = build_query().range(start, start + page_size - 1).execute()
        batch = response.data or []
        rows.extend(batch)
        if len(batch) < page_size:
            return rows
        start += page_size
