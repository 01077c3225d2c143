"""
Weekly agenda: buckets tasks into the Monday to Friday work week and moves
tasks between days.
"""

from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Union
import logging

from casedesk.core.errors import PolicyDenied
from casedesk.schemas.task import Task, TaskUpdate
from casedesk.schemas.user import Identity
from casedesk.services.policy import can_drag_task, visible_tasks

if TYPE_CHECKING:
    from casedesk.crud.task import TaskRepository

logger = logging.getLogger(__name__)

WORK_WEEK_DAYS = 5

DateLike = Union[date, datetime]


def _as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def week_start_for(day: DateLike) -> date:
    """Monday of the week containing ``day``."""
    day = _as_date(day)
    return day - timedelta(days=day.weekday())


def current_week_start(today: Optional[date] = None) -> date:
    return week_start_for(today or date.today())


def previous_week(week_start: DateLike) -> date:
    return _as_date(week_start) - timedelta(days=7)


def next_week(week_start: DateLike) -> date:
    return _as_date(week_start) + timedelta(days=7)


def week_days(week_start: DateLike) -> List[date]:
    start = _as_date(week_start)
    return [start + timedelta(days=offset) for offset in range(WORK_WEEK_DAYS)]


def visible_week(identity: Optional[Identity], tasks: Iterable[Task], week_start: DateLike) -> Dict[date, List[Task]]:
    """
    Map each of the five days starting at ``week_start`` to the tasks due that
    calendar day, earliest first. Days without tasks map to an empty list.
    """
    buckets: Dict[date, List[Task]] = {day: [] for day in week_days(week_start)}
    for task in sorted(visible_tasks(identity, tasks), key=lambda t: t.due_date):
        bucket = buckets.get(task.due_date.date())
        if bucket is not None:
            bucket.append(task)
    return buckets


def reschedule(due_date: datetime, target: DateLike) -> datetime:
    """Same time of day as ``due_date``, on the calendar day of ``target``."""
    target = _as_date(target)
    return due_date.replace(year=target.year, month=target.month, day=target.day)


class TaskScheduler:
    def __init__(self, tasks: "TaskRepository"):
        self.tasks = tasks

    async def move_task(self, identity: Identity, task_id: str, target_date: DateLike) -> Task:
        """
        Move a task to another day, keeping its time of day.

        Raises ``NotFound`` when the task is gone and ``PolicyDenied`` when the
        identity may not reschedule it. The returned task is the one read back
        from the store.
        """
        task = await self.tasks.get(task_id)
        if not can_drag_task(identity, task):
            logger.info(f"Move of task {task_id} refused for {getattr(identity, 'id', None)}")
            raise PolicyDenied()

        new_due = reschedule(task.due_date, target_date)
        if new_due == task.due_date:
            return task

        moved = await self.tasks.update(task_id, TaskUpdate(due_date=new_due))
        logger.info(f"Task {task_id} moved from {task.due_date.date()} to {new_due.date()}")
        return moved
