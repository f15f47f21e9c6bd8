"""
Settings Module for URL Keep-Alive

Every tunable of the service, read from environment variables (with an
optional .env file) through pydantic-settings. Each section has its own
env prefix: DB_, MONITOR_ and LOG_.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from config.constants import Defaults


class Environment(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class DatabaseType(str, Enum):
    """Backends the target store can run on."""
    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"


class BaseSettingsConfig(BaseSettings):
    """Shared .env handling for every settings section."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True
    )


def _section_config(prefix: str) -> SettingsConfigDict:
    return SettingsConfigDict(
        env_prefix=prefix,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


class DatabaseSettings(BaseSettingsConfig):
    """
    Target store connection (DB_*).

    SQLite is the default. The PostgreSQL and pool fields only matter
    when ``type`` is ``postgresql``.
    """

    model_config = _section_config("DB_")

    type: DatabaseType = Field(
        default=DatabaseType.SQLITE,
        description="Store backend"
    )

    sqlite_path: Path = Field(
        default=Path("data/keepalive.db"),
        description="SQLite file holding the targets table"
    )

    host: str = Field(default="localhost", description="PostgreSQL host")
    port: int = Field(default=5432, ge=1, le=65535, description="PostgreSQL port")
    name: str = Field(
        default="keepalive",
        min_length=1,
        max_length=64,
        description="PostgreSQL database name"
    )
    user: str = Field(
        default="postgres",
        min_length=1,
        max_length=64,
        description="PostgreSQL role"
    )
    password: SecretStr = Field(default=SecretStr(""), description="PostgreSQL password")

    pool_size: int = Field(default=5, ge=1, le=100)
    max_overflow: int = Field(default=10, ge=0, le=100)
    pool_timeout: int = Field(default=30, ge=1, le=300, description="Seconds to wait for a pooled connection")
    pool_recycle: int = Field(default=1800, ge=60, le=7200, description="Seconds before a connection is recycled")
    pool_pre_ping: bool = Field(default=True)

    echo: bool = Field(
        default=False,
        description="Log every SQL statement"
    )

    @property
    def is_sqlite(self) -> bool:
        return self.type == DatabaseType.SQLITE

    @property
    def url(self) -> str:
        """SQLAlchemy async URL for the configured backend."""
        if self.is_sqlite:
            return f"sqlite+aiosqlite:///{self.sqlite_path}"

        if self.type == DatabaseType.POSTGRESQL:
            return (
                f"postgresql+asyncpg://{self.user}:{self.password.get_secret_value()}"
                f"@{self.host}:{self.port}/{self.name}"
            )

        raise ValueError(f"Unsupported database type: {self.type}")

    @field_validator("sqlite_path")
    @classmethod
    def default_db_suffix(cls, v: Path) -> Path:
        return v if v.suffix else v.with_suffix(".db")


class MonitoringSettings(BaseSettingsConfig):
    """
    Keep-alive cadence and ping client (MONITOR_*).

    ``pacing_delay`` is the pause after each target within a tick;
    ``settle_delay`` is how long stop/delete hold the caller so an
    in-flight tick can move past the URL. Both may be 0.
    """

    model_config = _section_config("MONITOR_")

    tick_interval_minutes: float = Field(
        default=Defaults.TICK_INTERVAL_MINUTES,
        gt=0,
        le=1440,
        description="Minutes between keep-alive ticks"
    )
    run_on_start: bool = Field(
        default=True,
        description="Tick once as soon as the scheduler starts"
    )

    request_timeout: float = Field(default=30, gt=0, le=300, description="Ping timeout in seconds")
    follow_redirects: bool = Field(default=True)
    user_agent: str = Field(default="KeepAlive/1.0 (Compatible; URL Keep-Alive Service)")

    pacing_delay: float = Field(default=1.0, ge=0, le=60)
    settle_delay: float = Field(default=1.0, ge=0, le=60)

    @property
    def tick_interval_seconds(self) -> float:
        return self.tick_interval_minutes * 60


class LoggingSettings(BaseSettingsConfig):
    """loguru sinks (LOG_*)."""

    model_config = _section_config("LOG_")

    level: LogLevel = Field(default=LogLevel.INFO)

    console_enabled: bool = Field(default=True)
    console_colored: bool = Field(default=True)

    file_enabled: bool = Field(
        default=False,
        description="Also write to a rotating log file"
    )
    file_path: Path = Field(default=Path("logs/keepalive.log"))
    file_rotation: str = Field(
        default="10 MB",
        description="loguru rotation rule, e.g. '10 MB' or '1 day'"
    )
    file_retention: str = Field(default="30 days")
    file_compression: str = Field(default="zip")
    json_enabled: bool = Field(
        default=False,
        description="Write file records as serialized JSON"
    )

    @property
    def logs_dir(self) -> Path:
        return self.file_path.parent


class Settings(BaseSettingsConfig):
    """
    Root settings object handed to every component.

    The web_* fields bind the command/query API; the nested sections are
    loaded from their own prefixes.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    environment: Environment = Field(default=Environment.DEVELOPMENT)
    debug: bool = Field(default=False)

    app_name: str = Field(default="URL Keep-Alive")
    app_version: str = Field(default="1.0.0")

    web_host: str = Field(default="0.0.0.0", description="API bind address")
    web_port: int = Field(default=8080, ge=1, le=65535, description="API port")

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    @model_validator(mode="after")
    def apply_environment_overrides(self) -> "Settings":
        """Production never echoes SQL; development logs at DEBUG."""
        if self.is_production:
            self.debug = False
            self.database.echo = False
        elif self.is_development and self.logging.level == LogLevel.INFO:
            self.logging.level = LogLevel.DEBUG
        return self

    def to_dict(self, *, exclude_secrets: bool = True) -> Dict[str, Any]:
        """Plain-JSON dump, with password-like keys dropped by default."""
        data = self.model_dump(mode="json")
        if not exclude_secrets:
            return data

        def scrub(obj: Any) -> Any:
            if isinstance(obj, dict):
                return {
                    k: scrub(v)
                    for k, v in obj.items()
                    if "password" not in k.lower() and "secret" not in k.lower()
                }
            return obj

        return scrub(data)


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings, loaded once."""
    return Settings()
