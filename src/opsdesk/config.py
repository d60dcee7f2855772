from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="OPSDESK_",
        case_sensitive=False,
    )

    # App
    env: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    default_user_id: int = 1

    # Database
    db_url: str = "sqlite+aiosqlite:///./opsdesk.db"

    # Availability drafts
    draft_backend: str = Field(default="file", pattern=r"^(file|memory)$")
    draft_dir: Path = Field(default=Path(".drafts"))

    # Availability live updates
    availability_poll_seconds: float = Field(default=2.0, gt=0)


def get_settings() -> Settings:
    return Settings()
