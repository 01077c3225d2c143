from datetime import tzinfo
from typing import Any, Optional
from supabase import AsyncClient
from casedesk.crud.base import CreatableRepository, Payload, UpdatableRepository
from casedesk.crud.mapping import TASK_COLUMNS, TASK_SELECT, row_to_task
from casedesk.schemas.task import Task, TaskCreate, TaskUpdate

class TaskRepository(CreatableRepository[Task], UpdatableRepository[Task]):
    """
    Tasks ordered by due date, each loaded with its discussion thread and the
    comment authors' names in a single request.
    """
    table = "tasks"
    columns = TASK_COLUMNS
    select_columns = TASK_SELECT
    order_by = "due_date"
    create_schema = TaskCreate
    update_schema = TaskUpdate

    def __init__(self, client: AsyncClient, tz: Optional[tzinfo] = None):
        super().__init__(client)
        self.tz = tz

    def from_row(self, row):
        return row_to_task(row, tz=self.tz)

    def _select(self) -> Any:
        # Embedded rows have no order of their own
        return super()._select().order("timestamp", foreign_table="comments")

    async def update(self, entity_id: str, payload: Payload) -> Task:
        # The update response carries no comments; re-read the full task
        await super().update(entity_id, payload)
        return await self.get(entity_id)
