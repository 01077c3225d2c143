"""
Role-based visibility and permission rules.

Every function is pure and total: a missing identity or an unknown role gets
no access, nothing here raises.
"""

from typing import Iterable, List, Optional

from casedesk.schemas.user import Identity, Role
from casedesk.schemas.task import Task


def _role(identity: Optional[Identity]) -> Optional[Role]:
    if identity is None:
        return None
    role = getattr(identity, "role", None)
    return role if isinstance(role, Role) else None


def can_edit_global(identity: Optional[Identity]) -> bool:
    """Creation of cases and contacts is reserved to administrators."""
    match _role(identity):
        case Role.ADMIN:
            return True
        case Role.LAWYER | Role.INTERN:
            return False
        case _:
            return False


def can_edit_case(identity: Optional[Identity]) -> bool:
    # TODO: the case screen shows lawyers an edit button; open this to
    # Role.LAWYER once lawyer write access to cases is confirmed.
    return can_edit_global(identity)


def is_task_visible(identity: Optional[Identity], task: Task) -> bool:
    match _role(identity):
        case Role.ADMIN | Role.LAWYER:
            return True
        case Role.INTERN:
            return task.assigned_to == identity.id
        case _:
            return False


def can_drag_task(identity: Optional[Identity], task: Task) -> bool:
    """Whether ``identity`` may change the due date of ``task``."""
    match _role(identity):
        case Role.ADMIN:
            return True
        case Role.INTERN:
            return task.assigned_to == identity.id
        case Role.LAWYER:
            return False
        case _:
            return False


def visible_tasks(identity: Optional[Identity], tasks: Iterable[Task]) -> List[Task]:
    return [task for task in tasks if is_task_visible(identity, task)]
