from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field

class CaseDocumentCreate(BaseModel):
    """Metadata row written once the file is in storage."""
    case_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    file_type: str

class CaseDocument(CaseDocumentCreate):
    id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
