"""
Application state for one dashboard session.

``DashboardState`` owns the signed-in identity and read-through copies of
the users, cases, tasks and contacts tables. Collections are only ever
replaced by a fetch from the store, which happens after every successful
write and whenever the auth session changes.
"""

from datetime import date, datetime, tzinfo
from typing import Awaitable, Callable, Dict, List, Optional, TypeVar
import asyncio
import logging

from pydantic import BaseModel
from supabase import AsyncClient

from casedesk.core.auth import AuthProvider
from casedesk.core.config import settings
from casedesk.core.errors import CaseDeskError, PolicyDenied
from casedesk.crud.base import Payload
from casedesk.schemas.case import Case
from casedesk.schemas.contact import Contact
from casedesk.schemas.dashboard import DashboardSummary
from casedesk.schemas.document import CaseDocument
from casedesk.schemas.task import Comment, Task
from casedesk.schemas.user import Identity, Role
from casedesk.services.attachments import DEFAULT_BUCKET
from casedesk.services.policy import can_edit_global, visible_tasks
from casedesk.services.scheduling import current_week_start, visible_week
from casedesk.services.workspace import Repositories, Workspace, summarize
from casedesk.utils.logging import log_debug, log_error, log_info

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SignupOutcome(BaseModel):
    signed_in: bool
    message: Optional[str] = None


class DashboardState:
    def __init__(
        self,
        client: AsyncClient,
        *,
        bucket: str = DEFAULT_BUCKET,
        tz: Optional[tzinfo] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.client = client
        self.auth = AuthProvider(client)
        self.repositories = Repositories(client, tz=tz if tz is not None else settings.office_tz)
        self.bucket = bucket
        self.clock = clock

        self.current_user: Optional[Identity] = None
        self.loading: bool = True
        self.error: Optional[str] = None
        self.users: List[Identity] = []
        self.cases: List[Case] = []
        self.tasks: List[Task] = []
        self.contacts: List[Contact] = []

        self._subscription = None

    # Lifecycle

    async def init(self):
        """
        Follow auth changes, then load the existing session, if any.

        A failed initial load is reported through ``error`` like any later
        one; the subscription stays in place so the next sign-in still loads.
        """
        self._subscription = self.auth.subscribe(self._on_session_change)
        session = await self.auth.get_session()
        if session is not None and session.user is not None:
            await self._on_session_change(session)
        else:
            self.loading = False

    async def teardown(self):
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        await self.settle()

    async def settle(self):
        """Wait until reloads triggered by auth events have finished."""
        await self.auth.settle()

    async def _on_session_change(self, session):
        try:
            await self.handle_session_change(session)
        except CaseDeskError as e:
            self.error = e.user_message

    async def handle_session_change(self, session):
        if session is None or getattr(session, "user", None) is None:
            self.clear()
            return
        await self.load(session.user.id)

    def clear(self):
        self.current_user = None
        self.users = []
        self.cases = []
        self.tasks = []
        self.contacts = []
        self.loading = False

    async def load(self, user_id: str):
        self.loading = True
        self.error = None
        try:
            identity = await self.repositories.profiles.get(user_id)
            users, cases, contacts, tasks = await asyncio.gather(
                self.repositories.profiles.list(),
                self.repositories.cases.list(),
                self.repositories.contacts.list(),
                self.repositories.tasks.list(),
            )
        except CaseDeskError as e:
            log_error(e, context="Error loading data")
            # Nothing from a previous user survives a failed load
            self.clear()
            raise
        finally:
            self.loading = False

        self.current_user = identity
        self.users, self.cases, self.contacts, self.tasks = users, cases, contacts, tasks
        log_info(f"Loaded dashboard for {identity.id}", context="DashboardState")

    # Fetchers

    async def refresh_users(self):
        self.users = await self.repositories.profiles.list()

    async def refresh_cases(self):
        self.cases = await self.repositories.cases.list()

    async def refresh_contacts(self):
        self.contacts = await self.repositories.contacts.list()

    async def refresh_tasks(self):
        self.tasks = await self.repositories.tasks.list()

    # Read helpers

    @property
    def workspace(self) -> Optional[Workspace]:
        if self.current_user is None:
            return None
        return Workspace(self.current_user, self.repositories, bucket=self.bucket, clock=self.clock)

    @property
    def can_edit(self) -> bool:
        return can_edit_global(self.current_user)

    def get_visible_tasks(self) -> List[Task]:
        if self.current_user is None:
            return []
        return visible_tasks(self.current_user, self.tasks)

    def visible_week(self, week_start: Optional[date] = None) -> Dict[date, List[Task]]:
        return visible_week(self.current_user, self.tasks, week_start or current_week_start())

    def summary(self, today: Optional[date] = None) -> DashboardSummary:
        return summarize(self.current_user, self.cases, self.tasks, today)

    # Auth actions

    async def login(self, email: str, password: str):
        await self.auth.sign_in(email, password)
        await self.settle()

    async def signup(self, name: str, email: str, password: str, role: Role) -> SignupOutcome:
        session, message = await self.auth.sign_up_and_sign_in(email, password, name=name, role=role)
        await self.settle()
        return SignupOutcome(signed_in=session is not None, message=message)

    async def logout(self):
        await self.auth.sign_out()
        await self.settle()

    # Mutations

    async def _run(self, action: Callable[[Workspace], Awaitable[T]], description: str) -> Optional[T]:
        workspace = self.workspace
        if workspace is None:
            log_debug(f"Ignored {description}: nobody is signed in", context="DashboardState")
            return None
        try:
            return await action(workspace)
        except PolicyDenied:
            log_debug(f"Ignored {description}: not permitted for {workspace.identity.role.value}", context="DashboardState")
            return None

    async def add_case(self, payload: Payload) -> Optional[Case]:
        case = await self._run(lambda ws: ws.add_case(payload), "add_case")
        if case is not None:
            await self.refresh_cases()
        return case

    async def update_case(self, case_id: str, payload: Payload) -> Optional[Case]:
        case = await self._run(lambda ws: ws.update_case(case_id, payload), "update_case")
        if case is not None:
            await self.refresh_cases()
        return case

    async def add_task(self, payload: Payload) -> Optional[Task]:
        task = await self._run(lambda ws: ws.add_task(payload), "add_task")
        if task is not None:
            await self.refresh_tasks()
        return task

    async def update_task(self, task_id: str, payload: Payload) -> Optional[Task]:
        task = await self._run(lambda ws: ws.update_task(task_id, payload), "update_task")
        if task is not None:
            await self.refresh_tasks()
        return task

    async def move_task_to_date(self, task_id: str, target_date: date) -> Optional[Task]:
        task = await self._run(lambda ws: ws.move_task(task_id, target_date), "move_task_to_date")
        if task is not None:
            await self.refresh_tasks()
        return task

    async def add_comment(self, task_id: str, content: str) -> Optional[Comment]:
        comment = await self._run(lambda ws: ws.append_comment(task_id, content), "add_comment")
        if comment is not None:
            await self.refresh_tasks()
        return comment

    async def add_contact(self, payload: Payload) -> Optional[Contact]:
        contact = await self._run(lambda ws: ws.add_contact(payload), "add_contact")
        if contact is not None:
            await self.refresh_contacts()
        return contact

    async def update_contact(self, contact_id: str, payload: Payload) -> Optional[Contact]:
        contact = await self._run(lambda ws: ws.update_contact(contact_id, payload), "update_contact")
        if contact is not None:
            await self.refresh_contacts()
        return contact

    async def attach_document(self, case_id: str, file_bytes: bytes, file_name: str, mime_type: Optional[str] = None) -> Optional[CaseDocument]:
        return await self._run(
            lambda ws: ws.attach_document(case_id, file_bytes, file_name, mime_type), "attach_document"
        )
