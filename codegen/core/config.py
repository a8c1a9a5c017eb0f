"""Service configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Generation defaults and named patterns are validated
at load time, so a bad pattern definition fails fast on first use.
"""

from functools import lru_cache
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from codegen.core.constants import BUILTIN_PATTERNS


class Settings(BaseSettings):
    """Service settings loaded from environment and .env.

    All settings are optional. Without database_url the service can still
    generate non-sequential codes; sequential ones raise SqlNotConfiguredException.
    """

    # App
    app_name: str = "codegen"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Database (SQLAlchemy async URL, e.g. postgresql+asyncpg://... or sqlite+aiosqlite:///...)
    database_url: str = ""
    database_echo: bool = False
    # Optional pool/driver overrides (None = use defaults in database.py)
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Code generation defaults (lowest precedence layer)
    codegen_default_type: str = "GEN"
    codegen_default_location: str = "XX"
    codegen_default_sequence_length: int = Field(default=4, ge=1, le=20)
    codegen_date_format: str = "ymd"
    codegen_time_format: str = "Hi"
    codegen_default_code_length: int | None = Field(default=None, ge=1)
    codegen_max_attempts: int = Field(default=5, ge=1, le=50)
    codegen_retry_delay_ms: int = Field(default=150, ge=0)
    codegen_default_pattern: str = "{TYPE}-{DATE:ymd}-{SEQUENCE:4}"
    codegen_timezone: str = "UTC"
    # Named pattern definitions (JSON in env: CODEGEN_PATTERNS='{"order": {...}}')
    codegen_patterns: dict[str, dict[str, Any]] = Field(
        default_factory=lambda: {k: dict(v) for k, v in BUILTIN_PATTERNS.items()}
    )

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_jaeger_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator("codegen_default_type", "codegen_default_location")
    @classmethod
    def validate_code_part(cls, value: str) -> str:
        """TYPE/LOCATION defaults: 1-20 letters or digits, stored upper-case."""
        if not value.isalnum() or not value.isascii() or len(value) > 20:
            raise ValueError("must be 1-20 ASCII letters or digits")
        return value.upper()

    @field_validator("codegen_timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Timezone must be a known IANA name."""
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone {value!r}") from e
        return value

    @model_validator(mode="after")
    def validate_patterns(self) -> "Settings":
        """Validate every named pattern definition (unknown keys are rejected)."""
        from codegen.application.dtos.generation import PatternOverrides

        for key, definition in self.codegen_patterns.items():
            try:
                PatternOverrides.model_validate(definition)
            except ValidationError as e:
                raise ValueError(
                    f"Invalid pattern definition codegen_patterns.{key}: {e}"
                ) from e
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
