"""Application settings and configuration."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Environment
    env: str = Field(default="dev", alias="ENV")

    # Storage
    storage_backend: str = Field(default="sql", alias="STORAGE_BACKEND")  # 'sql' or 'memory'
    database_url: str = Field(
        default="sqlite:///./campus_portal.db", alias="DATABASE_URL"
    )

    # Storage watcher
    watch_storage: bool = Field(default=False, alias="WATCH_STORAGE")
    watch_interval_seconds: int = Field(default=5, alias="WATCH_INTERVAL_SECONDS")

    # Security
    secret_key: str = Field(default="change-me", alias="SECRET_KEY")
    access_token_expire_minutes: int = Field(
        default=4320, alias="ACCESS_TOKEN_EXPIRE_MINUTES"
    )

    # Sample accounts
    admin_username: str = Field(default="admin", alias="ADMIN_USERNAME")
    admin_password: str = Field(default="svit2023", alias="ADMIN_PASSWORD")
    faculty_username: str = Field(default="faculty", alias="FACULTY_USERNAME")
    faculty_password: str = Field(default="faculty2023", alias="FACULTY_PASSWORD")
    student_username: str = Field(default="student", alias="STUDENT_USERNAME")
    student_password: str = Field(default="student2023", alias="STUDENT_PASSWORD")

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
