# src/drive_files_api/config/settings.py
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONTAINER_NAME = "uploads"
DEFAULT_UPLOAD_CHUNK_SIZE = 64 * 1024


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from drive_files_api.config.settings import get_settings
        settings = get_settings()
        root_folder = settings.google_drive_folder_id
    """

    # Application Settings
    app_name: str = Field(
        default="drive-files-api",
        description="Application name"
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    cors_allow_origins: List[str] = Field(
        default=["http://localhost:3000"],
        description="Origins allowed to call the API from a browser"
    )

    # Google Drive (service account)
    google_service_account_email: Optional[str] = Field(
        default=None,
        alias="GOOGLE_SERVICE_ACCOUNT_EMAIL",
        description="Service account email used to sign Drive API requests"
    )

    google_private_key: Optional[str] = Field(
        default=None,
        alias="GOOGLE_PRIVATE_KEY",
        description="PEM private key of the service account"
    )

    google_drive_folder_id: Optional[str] = Field(
        default=None,
        alias="GOOGLE_DRIVE_FOLDER_ID",
        description="Root folder used when a request names no parent folder"
    )

    # Azure Blob Storage
    azure_storage_connection_string: Optional[str] = Field(
        default=None,
        alias="AZURE_STORAGE_CONNECTION_STRING",
        description="Connection string of the storage account used for downloads"
    )

    azure_container_name: str = Field(
        default=DEFAULT_CONTAINER_NAME,
        alias="AZURE_CONTAINER_NAME",
        description="Blob container holding downloadable files"
    )

    # Client side
    api_base_url: str = Field(
        default="http://localhost:8000",
        alias="API_BASE_URL",
        description="Base URL the CLI uses to reach the API"
    )

    upload_chunk_size: int = Field(
        default=DEFAULT_UPLOAD_CHUNK_SIZE,
        gt=0,
        description="Bytes handed to the connection per progress tick"
    )

    @field_validator("google_private_key")
    @classmethod
    def normalize_private_key(cls, v: Optional[str]) -> Optional[str]:
        """Keys pasted into .env files usually carry literal \\n sequences."""
        if v:
            return v.replace("\\n", "\n")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def drive_configured(self) -> bool:
        return bool(self.google_service_account_email and self.google_private_key)

    @property
    def blob_configured(self) -> bool:
        return bool(self.azure_storage_connection_string)

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
