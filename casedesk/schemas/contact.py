from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

class ContactType(str, Enum):
    CLIENT = "CLIENT"
    OPPOSING = "OPPOSING"
    PARTNER = "PARTNER"

class ContactBase(BaseModel):
    name: str = Field(..., min_length=1)
    type: ContactType = ContactType.CLIENT
    email: str = ""
    phone: str = ""
    notes: Optional[str] = None

class ContactCreate(ContactBase):
    pass

class ContactUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    type: Optional[ContactType] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None

class Contact(ContactBase):
    id: str

    class Config:
        from_attributes = True
