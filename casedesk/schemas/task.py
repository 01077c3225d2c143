from enum import Enum
from typing import List, Optional
from datetime import date, datetime
from pydantic import BaseModel, Field, validator

class TaskStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"

class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

class Comment(BaseModel):
    id: str
    task_id: Optional[str] = None
    user_id: str
    user_name: str = "User"
    content: str
    timestamp: datetime

    class Config:
        from_attributes = True

class CommentCreate(BaseModel):
    task_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    timestamp: datetime

class CommentRequest(BaseModel):
    content: str

class TaskBase(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    case_id: Optional[str] = None
    assigned_to: str = Field(..., min_length=1)
    due_date: datetime
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM

    @validator('case_id', pre=True)
    def blank_case_is_none(cls, v):
        return v or None

class TaskCreate(TaskBase):
    pass

class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    case_id: Optional[str] = None
    assigned_to: Optional[str] = Field(None, min_length=1)
    due_date: Optional[datetime] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None

    @validator('case_id', pre=True)
    def blank_case_is_none(cls, v):
        return v or None

class Task(TaskBase):
    id: str
    comments: List[Comment] = []

    class Config:
        from_attributes = True

class MoveRequest(BaseModel):
    target_date: date

class WeekDay(BaseModel):
    day: date
    tasks: List[Task]
