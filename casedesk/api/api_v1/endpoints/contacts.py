from typing import Any, List
from fastapi import APIRouter, Depends, Path, status
from casedesk.api.deps import get_workspace
from casedesk.schemas.contact import Contact, ContactCreate, ContactUpdate
from casedesk.services.workspace import Workspace

router = APIRouter()

@router.get("/", response_model=List[Contact])
async def read_contacts(workspace: Workspace = Depends(get_workspace)) -> Any:
    return await workspace.repositories.contacts.list()

@router.post("/", response_model=Contact, status_code=status.HTTP_201_CREATED)
async def create_contact(
    *,
    contact_in: ContactCreate,
    workspace: Workspace = Depends(get_workspace)
) -> Any:
    """
    Create new contact. Requires admin role.
    """
    return await workspace.add_contact(contact_in)

@router.patch("/{contact_id}", response_model=Contact)
async def update_contact(
    *,
    contact_id: str = Path(..., description="The ID of the contact to update"),
    contact_in: ContactUpdate,
    workspace: Workspace = Depends(get_workspace)
) -> Any:
    return await workspace.update_contact(contact_id, contact_in)
