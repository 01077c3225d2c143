from casedesk.schemas.user import (
    Role, Identity, IdentityUpdate, LoginRequest, SignupRequest, Token, SignupResult
)
from casedesk.schemas.case import Case, CaseCreate, CaseUpdate, CaseStatus
from casedesk.schemas.task import (
    Task, TaskCreate, TaskUpdate, TaskStatus, TaskPriority,
    Comment, CommentCreate, CommentRequest, MoveRequest, WeekDay
)
from casedesk.schemas.contact import Contact, ContactCreate, ContactUpdate, ContactType
from casedesk.schemas.document import CaseDocument, CaseDocumentCreate
from casedesk.schemas.dashboard import DashboardSummary

# Export all schemas
__all__ = [
    'Role', 'Identity', 'IdentityUpdate', 'LoginRequest', 'SignupRequest', 'Token', 'SignupResult',
    'Case', 'CaseCreate', 'CaseUpdate', 'CaseStatus',
    'Task', 'TaskCreate', 'TaskUpdate', 'TaskStatus', 'TaskPriority',
    'Comment', 'CommentCreate', 'CommentRequest', 'MoveRequest', 'WeekDay',
    'Contact', 'ContactCreate', 'ContactUpdate', 'ContactType',
    'CaseDocument', 'CaseDocumentCreate',
    'DashboardSummary',
]
