from enum import Enum
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

class Role(str, Enum):
    ADMIN = "ADMIN"
    LAWYER = "LAWYER"
    INTERN = "INTERN"

    @classmethod
    def _missing_(cls, value):
        # Profiles written by older clients store lowercase roles
        if isinstance(value, str):
            for member in cls:
                if member.value == value.upper():
                    return member
        return None

class Identity(BaseModel):
    """An authenticated user profile."""
    id: str
    name: str
    email: str = ""
    role: Role
    avatar_ref: Optional[str] = None

    class Config:
        from_attributes = True

class IdentityUpdate(BaseModel):
    # Role is fixed at sign-up
    name: Optional[str] = Field(None, min_length=1)
    avatar_ref: Optional[str] = None

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class SignupRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: Role = Role.INTERN

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    refresh_token: Optional[str] = None

class SignupResult(BaseModel):
    signed_in: bool
    message: Optional[str] = None
    token: Optional[Token] = None
