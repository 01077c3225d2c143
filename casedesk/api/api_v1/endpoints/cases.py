from typing import Any, List
from fastapi import APIRouter, Depends, File, Form, Path, UploadFile, status
import logging
from casedesk.api.deps import get_workspace
from casedesk.schemas.case import Case, CaseCreate, CaseUpdate
from casedesk.schemas.document import CaseDocument
from casedesk.services.workspace import Workspace

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("/", response_model=List[Case])
async def read_cases(workspace: Workspace = Depends(get_workspace)) -> Any:
    """
    Retrieve all cases, newest first.
    """
    return await workspace.repositories.cases.list()

@router.post("/", response_model=Case, status_code=status.HTTP_201_CREATED)
async def create_case(
    *,
    case_in: CaseCreate,
    workspace: Workspace = Depends(get_workspace)
) -> Any:
    """
    Create new case.

    Requires admin role.
    """
    logger.info(f"Case creation requested by user: {workspace.identity.id}")
    return await workspace.add_case(case_in)

@router.patch("/{case_id}", response_model=Case)
async def update_case(
    *,
    case_id: str = Path(..., description="The ID of the case to update"),
    case_in: CaseUpdate,
    workspace: Workspace = Depends(get_workspace)
) -> Any:
    """
    Update the fields present in the body, leaving the others untouched.
    """
    return await workspace.update_case(case_id, case_in)

@router.get("/{case_id}/documents", response_model=List[CaseDocument])
async def read_case_documents(
    case_id: str = Path(..., description="The ID of the case"),
    workspace: Workspace = Depends(get_workspace)
) -> Any:
    return await workspace.list_documents(case_id)

@router.post("/{case_id}/documents", response_model=CaseDocument, status_code=status.HTTP_201_CREATED)
async def attach_case_document(
    case_id: str = Path(..., description="The ID of the case"),
    file: UploadFile = File(...),
    name: str = Form(None),
    workspace: Workspace = Depends(get_workspace)
) -> Any:
    """
    Upload a file to storage and attach it to the case.
    """
    content = await file.read()
    return await workspace.attach_document(case_id, content, name or file.filename, file.content_type)
