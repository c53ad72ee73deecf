from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    PROJECT_NAME: str = "coursehub"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = f"sqlite:///{BASE_DIR}/coursehub.db"

    # Uploaded attachments are written here and served under UPLOAD_URL_PREFIX
    UPLOAD_DIR: str = str(BASE_DIR / "uploads" / "assignments")
    UPLOAD_URL_PREFIX: str = "/uploads/assignments"
    MAX_UPLOAD_BYTES: int = 25 * 1024 * 1024

    # Late policy
    LATE_PENALTY_MAX_PERCENT: float = 100.0  # cap on total deduction

    model_config = SettingsConfigDict(
        env_prefix="COURSEHUB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()

MAX_UPLOAD_BYTES = settings.MAX_UPLOAD_BYTES
LATE_PENALTY_MAX_PERCENT = settings.LATE_PENALTY_MAX_PERCENT

ALLOWED_MIME_TYPES = frozenset(
    {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.ms-powerpoint",
        "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        "text/plain",
        "text/markdown",
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
        "image/svg+xml",
        "application/zip",
        "application/x-zip-compressed",
    }
)
