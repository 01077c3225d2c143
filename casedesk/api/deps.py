from typing import AsyncGenerator
import logging

import httpx
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from supabase import AsyncClient

from casedesk.core.auth import AuthProvider
from casedesk.core.config import settings
from casedesk.core.errors import AuthError, NotFound
from casedesk.core.supabase import get_supabase, get_supabase_client
from casedesk.schemas.user import Identity
from casedesk.services.workspace import Repositories, Workspace

logger = logging.getLogger(__name__)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login")


def get_repositories(client: AsyncClient = Depends(get_supabase)) -> Repositories:
    return Repositories(client, tz=settings.office_tz)


async def get_auth_provider() -> AsyncGenerator[AuthProvider, None]:
    """
    A fresh client per auth request, so a user's sign-in never changes the
    credentials of the shared data client. Its connections are released
    when the request finishes.
    """
    async with httpx.AsyncClient(timeout=settings.SUPABASE_TIMEOUT, follow_redirects=True) as http_client:
        client = await get_supabase_client(http_client=http_client)
        yield AuthProvider(client)


async def get_current_identity(
    token: str = Depends(oauth2_scheme),
    client: AsyncClient = Depends(get_supabase),
    repositories: Repositories = Depends(get_repositories),
) -> Identity:
    user_id = await AuthProvider(client).get_user_id(token)
    try:
        return await repositories.profiles.get(user_id)
    except NotFound as e:
        logger.warning(f"User {user_id} authenticated but has no profile")
        raise AuthError("Could not validate credentials") from e


def get_workspace(
    identity: Identity = Depends(get_current_identity),
    repositories: Repositories = Depends(get_repositories),
) -> Workspace:
    return Workspace(identity, repositories, bucket=settings.STORAGE_BUCKET)
