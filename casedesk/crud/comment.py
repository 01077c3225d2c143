from typing import List
from casedesk.crud.base import CreatableRepository
from casedesk.crud.mapping import COMMENT_COLUMNS, COMMENT_SELECT, row_to_comment
from casedesk.schemas.task import Comment, CommentCreate

class CommentRepository(CreatableRepository[Comment]):
    """
    Append-only task comments.
    """
    table = "comments"
    columns = COMMENT_COLUMNS
    select_columns = COMMENT_SELECT
    order_by = "timestamp"
    create_schema = CommentCreate

    def from_row(self, row):
        return row_to_comment(row)

    async def list_for_task(self, task_id: str) -> List[Comment]:
        query = self._ordered(self._select().eq("task_id", task_id))
        response = await self._execute(query, "list_for_task")
        return [self._to_entity(row) for row in response.data or []]
