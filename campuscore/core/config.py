from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import Any, List
from pathlib import Path


def parse_export_formats(v: Any) -> List[str]:
    """Parse export formats from string or list"""
    if isinstance(v, list):
        return [fmt.strip().lower() for fmt in v if str(fmt).strip()]
    if isinstance(v, str):
        return [fmt.strip().lower() for fmt in v.split(',') if fmt.strip()]
    return []


class Settings(BaseSettings):
    """Application settings - all configurable via environment variables"""

    # ==========================================
    # Application
    # ==========================================
    APP_NAME: str = "CampusCore"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # ==========================================
    # Record Service
    # ==========================================
    RECORDS_API_URL: str = ""
    RECORDS_PROJECT_ID: str = ""
    RECORDS_PUBLIC_KEY: str = ""
    RECORDS_REQUEST_TIMEOUT: float = 30.0  # seconds
    RECORDS_CONNECT_TIMEOUT: float = 10.0  # seconds

    # ==========================================
    # Notifications
    # ==========================================
    NOTIFICATION_DURATION_MS: int = 3000
    NOTIFICATION_MAX_QUEUE: int = 50

    # ==========================================
    # Export
    # ==========================================
    EXPORT_DIR: str = "exports"
    EXPORT_FORMATS_STR: str = "csv,json"

    @property
    def EXPORT_FORMATS(self) -> List[str]:
        return parse_export_formats(self.EXPORT_FORMATS_STR)

    @property
    def EXPORT_PATH(self) -> Path:
        return Path(self.EXPORT_DIR)

    # ==========================================
    # Logging
    # ==========================================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""  # Empty disables the file handler

    @field_validator("RECORDS_API_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def records_configured(self) -> bool:
        return bool(self.RECORDS_API_URL and self.RECORDS_PROJECT_ID)

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
