from typing import Any, List
from fastapi import APIRouter, Depends
from casedesk.api.deps import get_current_identity, get_repositories
from casedesk.schemas.user import Identity, IdentityUpdate
from casedesk.services.workspace import Repositories

router = APIRouter()

@router.get("/me", response_model=Identity)
async def read_current_user(current_user: Identity = Depends(get_current_identity)) -> Any:
    return current_user

@router.patch("/me", response_model=Identity)
async def update_current_user(
    *,
    profile_in: IdentityUpdate,
    current_user: Identity = Depends(get_current_identity),
    repositories: Repositories = Depends(get_repositories)
) -> Any:
    """
    Change the caller's display name or avatar. Roles cannot be changed.
    """
    return await repositories.profiles.update(current_user.id, profile_in)

@router.get("/", response_model=List[Identity])
async def read_users(
    current_user: Identity = Depends(get_current_identity),
    repositories: Repositories = Depends(get_repositories)
) -> Any:
    return await repositories.profiles.list()
