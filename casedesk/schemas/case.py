from enum import Enum
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, validator

class CaseStatus(str, Enum):
    OPEN = "OPEN"
    ARCHIVED = "ARCHIVED"
    SUSPENDED = "SUSPENDED"

class CaseBase(BaseModel):
    number: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    client_name: str = ""
    opposing_party: str = ""
    status: CaseStatus = CaseStatus.OPEN
    responsible_lawyer_id: Optional[str] = None
    observations: Optional[str] = None

    @validator('status', pre=True)
    def validate_status(cls, v):
        if isinstance(v, str):
            try:
                return CaseStatus(v.upper())
            except ValueError:
                raise ValueError(f"Invalid status value: {v}. Valid values are: {[e.value for e in CaseStatus]}")
        return v

    @validator('responsible_lawyer_id', pre=True)
    def blank_lawyer_is_none(cls, v):
        return v or None

class CaseCreate(CaseBase):
    pass

class CaseUpdate(BaseModel):
    number: Optional[str] = Field(None, min_length=1)
    title: Optional[str] = Field(None, min_length=1)
    client_name: Optional[str] = None
    opposing_party: Optional[str] = None
    status: Optional[CaseStatus] = None
    responsible_lawyer_id: Optional[str] = None
    observations: Optional[str] = None

class Case(CaseBase):
    id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
