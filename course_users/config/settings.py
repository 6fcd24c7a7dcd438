"""Course Users configuration.

Values come from the process environment or a ``.env`` file; names are
case-insensitive (``STORE_BACKEND`` and ``store_backend`` are the same key).
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the report service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Service identity
    app_name: str = Field(default="course-users", description="Name in logs/probes")
    app_version: str = Field(default="0.1.0", description="Reported version")
    environment: Literal["development", "staging", "production", "testing"] = Field(
        default="development", description="Deployment stage"
    )

    # Uvicorn
    api_host: str = Field(default="0.0.0.0", description="Bind address")
    api_port: int = Field(default=8000, description="Bind port")
    api_workers: int = Field(default=1, description="Worker processes")
    api_reload: bool = Field(default=False, description="Reload on code changes")

    # Learning store
    store_backend: Literal["cassandra", "memory"] = Field(
        default="cassandra", description="Backend holding courses, users, progress"
    )
    store_seed_path: str | None = Field(
        default=None, description="JSON file used to seed the memory store"
    )

    cassandra_hosts: list[str] = Field(
        default=["localhost"], description="Contact points"
    )
    cassandra_port: int = Field(default=9042, description="Native protocol port")
    cassandra_keyspace: str = Field(
        default="course_users", description="Keyspace holding the store tables"
    )
    cassandra_username: str | None = Field(default=None, description="Login")
    cassandra_password: str | None = Field(default=None, description="Login secret")
    cassandra_protocol_version: int = Field(
        default=4, description="Native protocol version"
    )
    cassandra_connect_timeout: float = Field(
        default=10.0, description="Seconds to wait for a contact point"
    )

    # Report page
    report_page_slug: str = Field(
        default="ld-course-users", description="Slug echoed by the course selector"
    )
    default_export_filename: str = Field(
        default="course_users.csv", description="CSV name used when none is given"
    )

    # Access
    admin_api_key: str | None = Field(
        default=None,
        description="Shared key required in X-API-Key (unset: trust the host)",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Root logger level"
    )
    log_format: Literal["json", "console"] = Field(
        default="console", description="Console renderer; files are always JSON"
    )
    log_include_caller_info: bool = Field(
        default=True, description="Add file, line and function to events"
    )
    log_dir: str = Field(default="logs", description="Where rotating files go")
    log_file_max_bytes: int = Field(
        default=10 * 1024 * 1024, description="Rotate after this many bytes"
    )
    log_file_backup_count: int = Field(
        default=5, description="Rotated files kept per log"
    )
    log_requests: bool = Field(
        default=True, description="Emit request_started/request_completed"
    )
    log_exclude_paths: list[str] = Field(
        default=["/health"],
        description="Path prefixes never request-logged (probes)",
    )

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_testing(self) -> bool:
        return self.environment == "testing"

    @property
    def admin_key_configured(self) -> bool:
        """Whether the report routes require X-API-Key."""
        return bool(self.admin_api_key)


@lru_cache
def get_settings() -> Settings:
    """Settings read once per process."""
    return Settings()
