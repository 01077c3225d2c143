from typing import Any, List, Optional
from datetime import date
from fastapi import APIRouter, Depends, Path, Query, status
import logging
from casedesk.api.deps import get_workspace
from casedesk.schemas.task import Comment, CommentRequest, MoveRequest, Task, TaskCreate, TaskUpdate, WeekDay
from casedesk.services.scheduling import week_start_for
from casedesk.services.workspace import Workspace

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("/", response_model=List[Task])
async def read_tasks(workspace: Workspace = Depends(get_workspace)) -> Any:
    """
    Tasks visible to the caller, ordered by due date.

    Interns only see the tasks assigned to them.
    """
    return await workspace.list_tasks()

@router.get("/week", response_model=List[WeekDay])
async def read_week(
    start: Optional[date] = Query(None, description="Any day of the week to show, defaults to today"),
    workspace: Workspace = Depends(get_workspace)
) -> Any:
    """
    Monday to Friday agenda for the week containing ``start``.
    """
    week_start = week_start_for(start) if start else None
    tasks = await workspace.repositories.tasks.list()
    buckets = workspace.week(tasks, week_start)
    return [WeekDay(day=day, tasks=day_tasks) for day, day_tasks in buckets.items()]

@router.post("/", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(
    *,
    task_in: TaskCreate,
    workspace: Workspace = Depends(get_workspace)
) -> Any:
    logger.info(f"Task creation requested by user: {workspace.identity.id}")
    return await workspace.add_task(task_in)

@router.patch("/{task_id}", response_model=Task)
async def update_task(
    *,
    task_id: str = Path(..., description="The ID of the task to update"),
    task_in: TaskUpdate,
    workspace: Workspace = Depends(get_workspace)
) -> Any:
    return await workspace.update_task(task_id, task_in)

@router.post("/{task_id}/move", response_model=Task)
async def move_task(
    *,
    task_id: str = Path(..., description="The ID of the task to move"),
    move_in: MoveRequest,
    workspace: Workspace = Depends(get_workspace)
) -> Any:
    """
    Move a task to another day, keeping its time of day.
    """
    return await workspace.move_task(task_id, move_in.target_date)

@router.get("/{task_id}/comments", response_model=List[Comment])
async def read_comments(
    task_id: str = Path(..., description="The ID of the task"),
    workspace: Workspace = Depends(get_workspace)
) -> Any:
    return await workspace.thread(task_id)

@router.post("/{task_id}/comments", response_model=Comment, status_code=status.HTTP_201_CREATED)
async def create_comment(
    *,
    task_id: str = Path(..., description="The ID of the task"),
    comment_in: CommentRequest,
    workspace: Workspace = Depends(get_workspace)
) -> Any:
    return await workspace.append_comment(task_id, comment_in.content)
