"""
Translation between entity fields and Supabase table columns.

Entity field names are chosen for the Python side; this module is the only
place that knows how they are spelled in the database. Each map goes from
entity field to column.
"""

from datetime import tzinfo
from typing import Any, Dict, Optional

from casedesk.schemas.user import Identity
from casedesk.schemas.case import Case
from casedesk.schemas.task import Comment, Task
from casedesk.schemas.contact import Contact
from casedesk.schemas.document import CaseDocument
from casedesk.services.discussion import order_thread

PROFILE_COLUMNS = {
    "id": "id",
    "name": "name",
    "email": "email",
    "role": "role",
    "avatar_ref": "avatar",
}

CASE_COLUMNS = {
    "id": "id",
    "number": "number",
    "title": "title",
    "client_name": "client_name",
    "opposing_party": "opposing_party",
    "status": "status",
    "responsible_lawyer_id": "responsible_lawyer_id",
    "observations": "observations",
    "created_at": "created_at",
}

TASK_COLUMNS = {
    "id": "id",
    "title": "title",
    "description": "description",
    "case_id": "case_id",
    "assigned_to": "assigned_to",
    "due_date": "due_date",
    "status": "status",
    "priority": "priority",
}

COMMENT_COLUMNS = {
    "id": "id",
    "task_id": "task_id",
    "user_id": "user_id",
    "content": "content",
    "timestamp": "timestamp",
}

CONTACT_COLUMNS = {
    "id": "id",
    "name": "name",
    "type": "type",
    "email": "email",
    "phone": "phone",
    "notes": "notes",
}

DOCUMENT_COLUMNS = {
    "id": "id",
    "case_id": "case_id",
    "name": "name",
    "url": "url",
    "file_type": "file_type",
    "created_at": "created_at",
}

# Comment author names come from a join on profiles, never from a stored copy
TASK_SELECT = "*, comments(id, task_id, content, timestamp, user_id, profiles(name))"
COMMENT_SELECT = "id, task_id, content, timestamp, user_id, profiles(name)"

DEFAULT_AUTHOR_NAME = "User"


def to_columns(fields: Dict[str, Any], columns: Dict[str, str]) -> Dict[str, Any]:
    """
    Rename entity fields to columns. Fields absent from ``fields`` stay absent,
    so partial updates never overwrite columns the caller did not set.
    """
    unknown = set(fields) - set(columns)
    if unknown:
        raise KeyError(f"No column mapping for fields: {sorted(unknown)}")
    return {columns[field]: value for field, value in fields.items()}


def from_row(row: Dict[str, Any], columns: Dict[str, str]) -> Dict[str, Any]:
    return {field: row[column] for field, column in columns.items() if column in row}


def row_to_identity(row: Dict[str, Any]) -> Identity:
    data = from_row(row, PROFILE_COLUMNS)
    data["name"] = data.get("name") or ""
    data["email"] = data.get("email") or ""
    return Identity.model_validate(data)


def row_to_case(row: Dict[str, Any]) -> Case:
    data = from_row(row, CASE_COLUMNS)
    data["client_name"] = data.get("client_name") or ""
    data["opposing_party"] = data.get("opposing_party") or ""
    return Case.model_validate(data)


def row_to_comment(row: Dict[str, Any]) -> Comment:
    data = from_row(row, COMMENT_COLUMNS)
    author = row.get("profiles") or {}
    data["user_name"] = author.get("name") or DEFAULT_AUTHOR_NAME
    return Comment.model_validate(data)


def row_to_task(row: Dict[str, Any], tz: Optional[tzinfo] = None) -> Task:
    data = from_row(row, TASK_COLUMNS)
    data["description"] = data.get("description") or ""
    task = Task.model_validate(data)
    if tz is not None and task.due_date.tzinfo is not None:
        task.due_date = task.due_date.astimezone(tz)
    task.comments = order_thread(row_to_comment(c) for c in row.get("comments") or [])
    return task


def row_to_contact(row: Dict[str, Any]) -> Contact:
    data = from_row(row, CONTACT_COLUMNS)
    data["email"] = data.get("email") or ""
    data["phone"] = data.get("phone") or ""
    return Contact.model_validate(data)


def row_to_document(row: Dict[str, Any]) -> CaseDocument:
    return CaseDocument.model_validate(from_row(row, DOCUMENT_COLUMNS))
