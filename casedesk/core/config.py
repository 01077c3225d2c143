from datetime import tzinfo
from typing import List, Optional
from zoneinfo import ZoneInfo
from pydantic_settings import BaseSettings
from pydantic import validator

class Settings(BaseSettings):
    PROJECT_NAME: str = "CaseDesk"
    VERSION: str = "0.1.0"
    DESCRIPTION: str = "Case, task and contact management for law offices"
    API_V1_STR: str = "/api/v1"

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",  # Dashboard development
        "http://localhost:8000",  # Backend development
    ]

    # Supabase
    SUPABASE_URL: str
    SUPABASE_KEY: str
    SUPABASE_TIMEOUT: int = 10  # seconds, applies to PostgREST and Storage calls
    STORAGE_BUCKET: str = "case-documents"

    # Calendar
    # IANA zone used to localize task due dates, e.g. "America/Sao_Paulo"
    OFFICE_TIMEZONE: Optional[str] = None

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    # Performance
    ENABLE_RESPONSE_COMPRESSION: bool = True

    @validator("BACKEND_CORS_ORIGINS", pre=True)
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    @validator("LOG_LEVEL")
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def office_tz(self) -> Optional[tzinfo]:
        return ZoneInfo(self.OFFICE_TIMEZONE) if self.OFFICE_TIMEZONE else None

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
