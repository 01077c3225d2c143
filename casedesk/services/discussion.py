from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, Iterable, List, Optional
import logging

from casedesk.core.errors import EmptyContent, PolicyDenied
from casedesk.schemas.task import Comment, CommentCreate
from casedesk.schemas.user import Identity

if TYPE_CHECKING:
    from casedesk.crud.comment import CommentRepository

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def order_thread(comments: Iterable[Comment]) -> List[Comment]:
    """Oldest first. ``sorted`` is stable, so equal timestamps keep their order."""
    return sorted(comments, key=lambda comment: comment.timestamp)


class DiscussionService:
    """
    Per-task comment threads. Comments are append-only.
    """

    def __init__(self, comments: "CommentRepository", clock: Optional[Callable[[], datetime]] = None):
        self.comments = comments
        self.clock = clock or utcnow

    async def append_comment(self, identity: Identity, task_id: str, content: str) -> Comment:
        if identity is None:
            raise PolicyDenied("Sign in to comment.")
        text = (content or "").strip()
        if not text:
            raise EmptyContent()

        comment = await self.comments.create(
            CommentCreate(
                task_id=task_id,
                user_id=identity.id,
                content=text,
                timestamp=self.clock(),
            )
        )
        logger.info(f"Comment {comment.id} added to task {task_id} by {identity.id}")
        return comment.model_copy(update={"user_name": identity.name})

    async def thread(self, task_id: str) -> List[Comment]:
        return order_thread(await self.comments.list_for_task(task_id))
