from typing import Any
import asyncio
from fastapi import APIRouter, Depends
from casedesk.api.deps import get_workspace
from casedesk.schemas.dashboard import DashboardSummary
from casedesk.services.workspace import Workspace

router = APIRouter()

@router.get("/summary", response_model=DashboardSummary)
async def read_summary(workspace: Workspace = Depends(get_workspace)) -> Any:
    """
    Counters for the dashboard home: open cases, tasks due today and
    unfinished tasks visible to the caller.
    """
    cases, tasks = await asyncio.gather(
        workspace.repositories.cases.list(),
        workspace.repositories.tasks.list(),
    )
    return workspace.summary(cases, tasks)
