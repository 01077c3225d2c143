from datetime import datetime, timedelta, timezone

import pytest

from casedesk.core.errors import EmptyContent, PolicyDenied
from casedesk.services.discussion import DiscussionService

pytestmark = pytest.mark.asyncio

T1 = datetime(2024, 6, 10, 9, 0, tzinfo=timezone.utc)
T2 = T1 + timedelta(minutes=5)


@pytest.fixture
def with_task(supabase, task_row):
    supabase.tables["tasks"] = [task_row("t1", "intern-1", "2024-06-10T09:00:00")]
    return supabase


def ticking_clock(*instants):
    remaining = list(instants)
    return lambda: remaining.pop(0)


async def test_comment_is_stored_with_author(with_task, repositories, intern):
    service = DiscussionService(repositories.comments, clock=lambda: T1)
    comment = await service.append_comment(intern, "t1", "  Draft ready for review  ")

    assert comment.content == "Draft ready for review"
    assert comment.user_id == "intern-1"
    assert comment.user_name == "Iris Intern"
    assert comment.timestamp == T1

    [write] = with_task.writes("comments")
    assert write.payload["content"] == "Draft ready for review"
    assert write.payload["task_id"] == "t1"
    assert "user_name" not in write.payload


@pytest.mark.parametrize("content", ["", "   ", "\n\t"])
async def test_blank_comment_is_rejected_before_any_request(with_task, repositories, intern, content):
    service = DiscussionService(repositories.comments)
    with pytest.raises(EmptyContent):
        await service.append_comment(intern, "t1", content)
    assert with_task.requests == []


async def test_anonymous_comment_is_refused(with_task, repositories):
    with pytest.raises(PolicyDenied):
        await DiscussionService(repositories.comments).append_comment(None, "t1", "hello")
    assert with_task.requests == []


async def test_thread_is_ordered_by_timestamp(with_task, repositories, intern, lawyer):
    # The later comment reaches the store first
    service = DiscussionService(repositories.comments, clock=ticking_clock(T2, T1))
    await service.append_comment(lawyer, "t1", "second")
    await service.append_comment(intern, "t1", "first")

    thread = await service.thread("t1")
    assert [c.content for c in thread] == ["first", "second"]
    assert [c.user_name for c in thread] == ["Iris Intern", "Luis Lawyer"]


async def test_task_carries_ordered_thread(with_task, repositories, intern, lawyer):
    service = DiscussionService(repositories.comments, clock=ticking_clock(T2, T1))
    await service.append_comment(lawyer, "t1", "second")
    await service.append_comment(intern, "t1", "first")

    task = await repositories.tasks.get("t1")
    assert [c.content for c in task.comments] == ["first", "second"]


async def test_author_name_falls_back_when_profile_missing(with_task, repositories):
    with_task.tables["comments"] = [{
        "id": "c1", "task_id": "t1", "user_id": "ghost", "content": "hi", "timestamp": T1.isoformat(),
    }]
    [comment] = await DiscussionService(repositories.comments).thread("t1")
    assert comment.user_name == "User"
