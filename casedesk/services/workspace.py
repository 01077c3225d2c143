from datetime import date, datetime, tzinfo
from typing import Callable, Dict, Iterable, List, Optional
import logging

from supabase import AsyncClient

from casedesk.core.errors import EmptyContent, NotFound, PolicyDenied, ValidationError
from casedesk.crud.base import Payload, validate_payload
from casedesk.crud.case import CaseRepository
from casedesk.crud.comment import CommentRepository
from casedesk.crud.contact import ContactRepository
from casedesk.crud.document import DocumentRepository
from casedesk.crud.task import TaskRepository
from casedesk.crud.user import ProfileRepository
from casedesk.schemas.case import Case, CaseStatus
from casedesk.schemas.contact import Contact
from casedesk.schemas.dashboard import DashboardSummary
from casedesk.schemas.document import CaseDocument
from casedesk.schemas.task import Comment, Task, TaskCreate, TaskStatus, TaskUpdate
from casedesk.schemas.user import Identity
from casedesk.services.attachments import DEFAULT_BUCKET, DocumentAttachmentService
from casedesk.services.discussion import DiscussionService
from casedesk.services.policy import (
    can_drag_task,
    can_edit_case,
    can_edit_global,
    is_task_visible,
    visible_tasks,
)
from casedesk.services.scheduling import TaskScheduler, current_week_start, visible_week

logger = logging.getLogger(__name__)


class Repositories:
    """One repository per table, sharing a Supabase client."""

    def __init__(self, client: AsyncClient, tz: Optional[tzinfo] = None):
        self.client = client
        self.profiles = ProfileRepository(client)
        self.cases = CaseRepository(client)
        self.tasks = TaskRepository(client, tz=tz)
        self.comments = CommentRepository(client)
        self.contacts = ContactRepository(client)
        self.documents = DocumentRepository(client)


def summarize(identity: Optional[Identity], cases: Iterable[Case], tasks: Iterable[Task], today: Optional[date] = None) -> DashboardSummary:
    today = today or date.today()
    mine = visible_tasks(identity, tasks)
    return DashboardSummary(
        active_cases=sum(1 for case in cases if case.status == CaseStatus.OPEN),
        tasks_today=sum(1 for task in mine if task.due_date.date() == today),
        pending_tasks=sum(1 for task in mine if task.status != TaskStatus.COMPLETED),
    )


class Workspace:
    """
    Operations available to one signed-in identity.

    Permission checks happen here, before any request reaches the store;
    a refusal raises ``PolicyDenied``.
    """

    def __init__(
        self,
        identity: Identity,
        repositories: Repositories,
        bucket: str = DEFAULT_BUCKET,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.identity = identity
        self.repositories = repositories
        self.scheduler = TaskScheduler(repositories.tasks)
        self.discussion = DiscussionService(repositories.comments, clock=clock)
        self.attachments = DocumentAttachmentService(repositories.client, repositories.documents, bucket=bucket)

    @property
    def can_edit(self) -> bool:
        return can_edit_global(self.identity)

    def _require(self, allowed: bool, action: str):
        if not allowed:
            logger.warning(f"Refused {action} for user {self.identity.id} ({self.identity.role.value})")
            raise PolicyDenied()

    async def _require_assignee(self, user_id: str):
        try:
            await self.repositories.profiles.get(user_id)
        except NotFound as e:
            raise ValidationError("The assigned user does not exist.") from e

    async def _visible_task(self, task_id: str, action: str) -> Task:
        task = await self.repositories.tasks.get(task_id)
        self._require(is_task_visible(self.identity, task), f"{action} of task {task_id}")
        return task

    # Reads

    async def list_tasks(self) -> List[Task]:
        return visible_tasks(self.identity, await self.repositories.tasks.list())

    def visible_tasks(self, tasks: Iterable[Task]) -> List[Task]:
        return visible_tasks(self.identity, tasks)

    def week(self, tasks: Iterable[Task], week_start: Optional[date] = None) -> Dict[date, List[Task]]:
        return visible_week(self.identity, tasks, week_start or current_week_start())

    def summary(self, cases: Iterable[Case], tasks: Iterable[Task], today: Optional[date] = None) -> DashboardSummary:
        return summarize(self.identity, cases, tasks, today)

    # Cases

    async def add_case(self, payload: Payload) -> Case:
        self._require(can_edit_global(self.identity), "case creation")
        return await self.repositories.cases.create(payload)

    async def update_case(self, case_id: str, payload: Payload) -> Case:
        self._require(can_edit_case(self.identity), f"update of case {case_id}")
        return await self.repositories.cases.update(case_id, payload)

    # Tasks

    async def add_task(self, payload: Payload) -> Task:
        task_in = validate_payload(TaskCreate, payload)
        await self._require_assignee(task_in.assigned_to)
        return await self.repositories.tasks.create(task_in)

    async def update_task(self, task_id: str, payload: Payload) -> Task:
        """
        Edit a task the caller can see. Changing the due date follows the same
        rule as dragging it on the calendar.
        """
        changes = validate_payload(TaskUpdate, payload)
        task = await self._visible_task(task_id, "update")
        if "due_date" in changes.model_fields_set:
            self._require(can_drag_task(self.identity, task), f"rescheduling of task {task_id}")
        if changes.assigned_to:
            await self._require_assignee(changes.assigned_to)
        return await self.repositories.tasks.update(task_id, changes)

    async def move_task(self, task_id: str, target_date: date) -> Task:
        return await self.scheduler.move_task(self.identity, task_id, target_date)

    async def append_comment(self, task_id: str, content: str) -> Comment:
        if not (content or "").strip():
            raise EmptyContent()
        await self._visible_task(task_id, "comment")
        return await self.discussion.append_comment(self.identity, task_id, content)

    async def thread(self, task_id: str) -> List[Comment]:
        await self._visible_task(task_id, "reading the thread")
        return await self.discussion.thread(task_id)

    # Contacts

    async def add_contact(self, payload: Payload) -> Contact:
        self._require(can_edit_global(self.identity), "contact creation")
        return await self.repositories.contacts.create(payload)

    async def update_contact(self, contact_id: str, payload: Payload) -> Contact:
        self._require(can_edit_global(self.identity), f"update of contact {contact_id}")
        return await self.repositories.contacts.update(contact_id, payload)

    # Documents

    async def attach_document(self, case_id: str, file_bytes: bytes, file_name: str, mime_type: Optional[str] = None) -> CaseDocument:
        return await self.attachments.attach(case_id, file_bytes, file_name, mime_type)

    async def list_documents(self, case_id: str) -> List[CaseDocument]:
        return await self.attachments.list_documents(case_id)
