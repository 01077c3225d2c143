from datetime import date, datetime

import pytest

from casedesk.core.auth import SIGNUP_NEEDS_CONFIRMATION
from casedesk.core.config import settings
from casedesk.core.errors import AlreadyRegistered, InvalidCredentials
from casedesk.schemas.case import CaseStatus
from casedesk.schemas.user import Role
from casedesk.services.dashboard import DashboardState
from fakes import FIXED_NOW

pytestmark = pytest.mark.asyncio


@pytest.fixture
async def dashboard(supabase):
    state = DashboardState(supabase, clock=lambda: FIXED_NOW)
    await state.init()
    yield state
    await state.teardown()


async def signed_in(supabase, email):
    """A dashboard on its own client, signed in as ``email``."""
    state = DashboardState(supabase.connect(), clock=lambda: FIXED_NOW)
    await state.init()
    await state.login(email, "secret123")
    return state


async def test_init_without_session_is_idle(dashboard):
    assert dashboard.loading is False
    assert dashboard.current_user is None
    assert dashboard.tasks == []
    assert dashboard.get_visible_tasks() == []


async def test_login_loads_identity_and_collections(supabase, dashboard):
    supabase.tables["contacts"] = [{"id": "k1", "name": "Maria Silva", "type": "CLIENT"}]
    await dashboard.login("lawyer@office.test", "secret123")

    assert dashboard.current_user.id == "lawyer-1"
    assert dashboard.current_user.role == Role.LAWYER
    assert {u.id for u in dashboard.users} == {"admin-1", "lawyer-1", "intern-1", "intern-2"}
    assert [c.name for c in dashboard.contacts] == ["Maria Silva"]
    assert dashboard.loading is False
    assert dashboard.error is None


async def test_init_picks_up_existing_session(supabase):
    await supabase.auth.sign_in_with_password({"email": "admin@office.test", "password": "secret123"})
    state = DashboardState(supabase)
    await state.init()
    assert state.current_user.id == "admin-1"
    assert state.can_edit is True
    await state.teardown()


async def test_wrong_password_raises_and_keeps_state(dashboard):
    with pytest.raises(InvalidCredentials):
        await dashboard.login("lawyer@office.test", "wrong")
    assert dashboard.current_user is None


async def test_sign_out_clears_everything(supabase, task_row):
    supabase.tables["tasks"] = [task_row("t1", "admin-1", "2024-06-10T09:00:00")]
    state = await signed_in(supabase, "admin@office.test")
    assert state.tasks

    await state.logout()
    assert state.current_user is None
    assert state.users == state.cases == state.tasks == state.contacts == []
    await state.teardown()


async def test_load_failure_is_reported(supabase, dashboard):
    supabase.fail_next("cases", "connection refused")
    await dashboard.login("admin@office.test", "secret123")
    assert dashboard.error == "Could not reach the database. Check your connection."
    assert dashboard.loading is False


async def test_failed_initial_load_still_follows_sign_ins(supabase):
    await supabase.auth.sign_in_with_password({"email": "admin@office.test", "password": "secret123"})
    supabase.fail_next("cases")
    state = DashboardState(supabase, clock=lambda: FIXED_NOW)
    await state.init()

    assert state.error == "Could not reach the database. Check your connection."
    assert state.current_user is None
    assert state.loading is False
    assert len(supabase.auth.listeners) == 1

    await state.login("lawyer@office.test", "secret123")
    assert state.current_user.id == "lawyer-1"
    assert state.error is None
    await state.teardown()


async def test_failed_reload_drops_previous_user(supabase, dashboard):
    await dashboard.login("admin@office.test", "secret123")
    assert dashboard.current_user.id == "admin-1"

    supabase.fail_next("tasks")
    await dashboard.login("lawyer@office.test", "secret123")
    assert dashboard.error is not None
    assert dashboard.current_user is None
    assert dashboard.can_edit is False
    assert dashboard.users == dashboard.cases == dashboard.tasks == []


async def test_unknown_role_neither_blocks_others_nor_signs_in(supabase, dashboard):
    supabase.add_profile("para-1", "Pat Paralegal", "PARALEGAL")
    await dashboard.login("admin@office.test", "secret123")
    assert dashboard.error is None
    assert {u.id for u in dashboard.users} == {"admin-1", "lawyer-1", "intern-1", "intern-2"}

    await dashboard.login("para-1@office.test", "secret123")
    assert dashboard.error == "Your account has no role with access to CaseDesk."
    assert dashboard.current_user is None


async def test_due_dates_follow_office_timezone(supabase, task_row, monkeypatch):
    monkeypatch.setattr(settings, "OFFICE_TIMEZONE", "America/Sao_Paulo")
    supabase.tables["tasks"] = [task_row("t1", "admin-1", "2024-06-11T01:30:00+00:00")]
    admin = await signed_in(supabase, "admin@office.test")

    [task] = admin.tasks
    assert (task.due_date.date(), task.due_date.hour) == (date(2024, 6, 10), 22)
    week = admin.visible_week(date(2024, 6, 10))
    assert [t.id for t in week[date(2024, 6, 10)]] == ["t1"]
    assert week[date(2024, 6, 11)] == []
    await admin.teardown()


async def test_case_and_task_scenario(supabase):
    admin = await signed_in(supabase, "admin@office.test")

    case = await admin.add_case({
        "number": "0001/2024", "title": "Silva v. Costa", "client_name": "Maria Silva",
        "responsible_lawyer_id": "lawyer-1",
    })
    assert [c.number for c in admin.cases] == ["0001/2024"]
    assert admin.cases[0].status == CaseStatus.OPEN

    task = await admin.add_task({
        "title": "File motion", "case_id": case.id, "assigned_to": "intern-1",
        "due_date": datetime(2024, 6, 10, 9, 0),
    })
    assert [t.title for t in admin.tasks] == ["File motion"]

    owner = await signed_in(supabase, "intern@office.test")
    assert [t.id for t in owner.get_visible_tasks()] == [task.id]
    assert [t.id for t in owner.visible_week(date(2024, 6, 10))[date(2024, 6, 10)]] == [task.id]

    stranger = await signed_in(supabase, "intern2@office.test")
    assert stranger.get_visible_tasks() == []

    moved = await admin.move_task_to_date(task.id, date(2024, 6, 12))
    assert moved.due_date == datetime(2024, 6, 12, 9, 0)
    week = admin.visible_week(date(2024, 6, 10))
    assert week[date(2024, 6, 10)] == []
    assert [t.id for t in week[date(2024, 6, 12)]] == [task.id]

    for state in (admin, owner, stranger):
        await state.teardown()


async def test_denied_actions_are_silent(supabase, task_row):
    supabase.tables["tasks"] = [task_row("t1", "intern-1", "2024-06-10T09:00:00")]
    lawyer = await signed_in(supabase, "lawyer@office.test")
    supabase.requests.clear()

    assert await lawyer.add_case({"number": "2/2024", "title": "Nope"}) is None
    assert await lawyer.add_contact({"name": "Nobody"}) is None
    assert await lawyer.move_task_to_date("t1", date(2024, 6, 11)) is None
    assert supabase.writes() == []
    assert lawyer.tasks[0].due_date == datetime(2024, 6, 10, 9, 0)
    await lawyer.teardown()


async def test_mutations_without_identity_are_ignored(supabase, dashboard):
    assert await dashboard.add_case({"number": "1", "title": "x"}) is None
    assert await dashboard.add_comment("t1", "hello") is None
    assert supabase.writes() == []


async def test_comment_refreshes_tasks(supabase, task_row):
    supabase.tables["tasks"] = [task_row("t1", "intern-1", "2024-06-10T09:00:00")]
    intern = await signed_in(supabase, "intern@office.test")

    comment = await intern.add_comment("t1", "Draft attached")
    assert comment.user_name == "Iris Intern"
    assert [c.content for c in intern.tasks[0].comments] == ["Draft attached"]
    await intern.teardown()


async def test_contact_update_refreshes_contacts(supabase):
    admin = await signed_in(supabase, "admin@office.test")
    contact = await admin.add_contact({"name": "Maria Silva", "phone": "111"})
    await admin.update_contact(contact.id, {"phone": "222"})
    assert [c.phone for c in admin.contacts] == ["222"]
    await admin.teardown()


async def test_signup_signs_straight_in(supabase, dashboard):
    outcome = await dashboard.signup("Nina New", "nina@office.test", "secret123", Role.INTERN)

    assert outcome.signed_in is True
    assert outcome.message is None
    assert dashboard.current_user.name == "Nina New"
    assert dashboard.current_user.role == Role.INTERN
    assert dashboard.current_user.avatar_ref.startswith("https://ui-avatars.com/api/?name=Nina%20New")


async def test_signup_needing_confirmation_falls_back(supabase, dashboard):
    supabase.auth.require_confirmation = True
    outcome = await dashboard.signup("Nina New", "nina@office.test", "secret123", Role.LAWYER)

    assert outcome.signed_in is False
    assert outcome.message == SIGNUP_NEEDS_CONFIRMATION
    assert dashboard.current_user is None


async def test_duplicate_signup_is_rejected(dashboard):
    with pytest.raises(AlreadyRegistered):
        await dashboard.signup("Iris", "intern@office.test", "secret123", Role.INTERN)


async def test_summary_counts_visible_work(supabase, task_row):
    supabase.tables["cases"] = [
        {"id": "c1", "number": "1/2024", "title": "A", "status": "OPEN", "created_at": "2024-01-01T00:00:00Z"},
        {"id": "c2", "number": "2/2024", "title": "B", "status": "ARCHIVED", "created_at": "2024-01-02T00:00:00Z"},
    ]
    supabase.tables["tasks"] = [
        task_row("t1", "intern-1", "2024-06-10T09:00:00"),
        task_row("t2", "intern-1", "2024-06-11T09:00:00", status="COMPLETED"),
        task_row("t3", "intern-2", "2024-06-10T15:00:00"),
    ]
    intern = await signed_in(supabase, "intern@office.test")
    lawyer = await signed_in(supabase, "lawyer@office.test")

    mine = intern.summary(today=date(2024, 6, 10))
    assert (mine.active_cases, mine.tasks_today, mine.pending_tasks) == (1, 1, 1)
    everyone = lawyer.summary(today=date(2024, 6, 10))
    assert (everyone.active_cases, everyone.tasks_today, everyone.pending_tasks) == (1, 2, 2)

    await intern.teardown()
    await lawyer.teardown()
