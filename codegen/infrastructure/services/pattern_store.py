"""Configuration store backed by pydantic-settings (codegen_* settings)."""

from typing import Any

from codegen.application.dtos.generation import GenerationDefaults
from codegen.core.config import Settings


class SettingsPatternStore:
    """IPatternConfigStore reading global defaults and named patterns from Settings.

    Definitions are returned as copies so callers cannot mutate settings.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._defaults = GenerationDefaults(
            type_code=settings.codegen_default_type,
            location_code=settings.codegen_default_location,
            sequence_length=settings.codegen_default_sequence_length,
            date_format=settings.codegen_date_format,
            time_format=settings.codegen_time_format,
            code_length=settings.codegen_default_code_length,
            max_attempts=settings.codegen_max_attempts,
            retry_delay_ms=settings.codegen_retry_delay_ms,
            pattern=settings.codegen_default_pattern,
        )

    def defaults(self) -> GenerationDefaults:
        return self._defaults

    def get_definition(self, pattern_key: str) -> dict[str, Any] | None:
        definition = self._settings.codegen_patterns.get(pattern_key)
        return dict(definition) if definition is not None else None

    def pattern_keys(self) -> list[str]:
        return sorted(self._settings.codegen_patterns)
