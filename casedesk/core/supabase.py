from typing import Optional
import httpx
from fastapi import Request
from supabase import AsyncClient, AsyncClientOptions, acreate_client
from casedesk.core.config import Settings, settings as default_settings

async def get_supabase_client(
    settings: Optional[Settings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> AsyncClient:
    """
    Create the async Supabase client used for tables, storage and auth.

    With ``http_client`` every sub-client shares that connection pool and the
    caller is responsible for closing it.
    """
    settings = settings or default_settings
    return await acreate_client(
        settings.SUPABASE_URL,
        settings.SUPABASE_KEY,
        options=AsyncClientOptions(
            postgrest_client_timeout=settings.SUPABASE_TIMEOUT,
            storage_client_timeout=settings.SUPABASE_TIMEOUT,
            auto_refresh_token=True,
            persist_session=False,
            httpx_client=http_client,
        )
    )

def get_supabase(request: Request) -> AsyncClient:
    """
    FastAPI dependency returning the client created during application startup.
    """
    return request.app.state.supabase
