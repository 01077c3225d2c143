import os

os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-service-key")
os.environ.setdefault("ENABLE_RESPONSE_COMPRESSION", "false")

from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from casedesk.api.deps import get_auth_provider
from casedesk.core.auth import AuthProvider
from casedesk.core.supabase import get_supabase
from casedesk.schemas.user import Identity, Role
from casedesk.services.workspace import Repositories, Workspace
from fakes import FIXED_NOW, FakeSupabase


@pytest.fixture
def supabase() -> FakeSupabase:
    """A fake Supabase project with one user per role."""
    fake = FakeSupabase()
    fake.add_profile("admin-1", "Ana Admin", "ADMIN", email="admin@office.test")
    fake.add_profile("lawyer-1", "Luis Lawyer", "LAWYER", email="lawyer@office.test")
    fake.add_profile("intern-1", "Iris Intern", "INTERN", email="intern@office.test")
    fake.add_profile("intern-2", "Igor Intern", "INTERN", email="intern2@office.test")
    return fake


@pytest.fixture
def repositories(supabase) -> Repositories:
    return Repositories(supabase)


@pytest.fixture
def admin() -> Identity:
    return Identity(id="admin-1", name="Ana Admin", email="admin@office.test", role=Role.ADMIN)


@pytest.fixture
def lawyer() -> Identity:
    return Identity(id="lawyer-1", name="Luis Lawyer", email="lawyer@office.test", role=Role.LAWYER)


@pytest.fixture
def intern() -> Identity:
    return Identity(id="intern-1", name="Iris Intern", email="intern@office.test", role=Role.INTERN)


@pytest.fixture
def other_intern() -> Identity:
    return Identity(id="intern-2", name="Igor Intern", email="intern2@office.test", role=Role.INTERN)


@pytest.fixture
def make_workspace(repositories):
    def factory(identity: Identity) -> Workspace:
        return Workspace(identity, repositories, clock=lambda: FIXED_NOW)
    return factory


@pytest.fixture
def task_row():
    """Build a ``tasks`` row as the database stores it."""
    def factory(task_id: str, assigned_to: str, due_date: str, **overrides):
        row = {
            "id": task_id,
            "title": f"Task {task_id}",
            "description": "",
            "case_id": None,
            "assigned_to": assigned_to,
            "due_date": due_date,
            "status": "PENDING",
            "priority": "MEDIUM",
        }
        row.update(overrides)
        return row
    return factory


@pytest.fixture
async def client(supabase) -> AsyncGenerator[AsyncClient, None]:
    """API client wired to the fake Supabase project."""
    from main import app

    app.dependency_overrides[get_supabase] = lambda: supabase
    app.dependency_overrides[get_auth_provider] = lambda: AuthProvider(supabase)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(supabase):
    def factory(user_id: str) -> dict:
        return {"Authorization": f"Bearer {supabase.auth.issue_token(user_id)}"}
    return factory


@pytest.fixture
def test_user_data() -> dict:
    return {
        "name": "Nina Novak",
        "email": "nina.novak@example.com",
        "password": "testpassword123",
        "role": "LAWYER",
    }
