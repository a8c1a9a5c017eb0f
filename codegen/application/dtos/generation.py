"""DTOs for code generation configuration.

GenerationDefaults is what the configuration store provides globally,
PatternOverrides is the validated shape of a named pattern definition or a
per-call override set, and GenerationConfig is the immutable snapshot one
generate() call runs with.
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from codegen.application.services.pattern_compiler import compile_pattern
from codegen.domain.enums import PlaceholderKind
from codegen.domain.value_objects import COUNTER_KEY_MAX_LENGTH, CompiledPattern

# TYPE and LOCATION values must survive the parser's letters-and-digits class.
CODE_PART_PATTERN = r"^[A-Za-z0-9]+$"


@dataclass(frozen=True)
class GenerationDefaults:
    """Global defaults (lowest precedence layer)."""

    type_code: str = "GEN"
    location_code: str = "XX"
    sequence_length: int = 4
    date_format: str = "ymd"
    time_format: str = "Hi"
    code_length: int | None = None
    max_attempts: int = 5
    retry_delay_ms: int = 150
    pattern: str = "{TYPE}-{DATE:ymd}-{SEQUENCE:4}"


class PatternOverrides(BaseModel):
    """Named pattern definition or per-call overrides. Unknown keys are rejected.

    Only explicitly provided fields are applied (see model_fields_set), so
    ``code_length: null`` clears an inherited total length.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    pattern: str | None = Field(default=None, min_length=1, max_length=500)
    type: str | None = Field(
        default=None, max_length=COUNTER_KEY_MAX_LENGTH, pattern=CODE_PART_PATTERN
    )
    location: str | None = Field(
        default=None, max_length=COUNTER_KEY_MAX_LENGTH, pattern=CODE_PART_PATTERN
    )
    sequence_length: int | None = Field(default=None, ge=1, le=20)
    date_format: str | None = Field(default=None, min_length=1, max_length=32)
    time_format: str | None = Field(default=None, min_length=1, max_length=32)
    code_length: int | None = Field(default=None, ge=1)
    max_attempts: int | None = Field(default=None, ge=1, le=50)
    retry_delay: int | None = Field(default=None, ge=0)
    use_sequence: bool | None = None


@dataclass(frozen=True)
class GenerationConfig:
    """Effective configuration for one generation or confirmation call."""

    type_code: str
    location_code: str
    sequence_length: int
    date_format: str
    time_format: str
    code_length: int | None
    max_attempts: int
    retry_delay_ms: int
    use_sequence: bool
    pattern: str

    @property
    def compiled(self) -> CompiledPattern:
        """Compiled form of pattern (cached by template string)."""
        return compile_pattern(self.pattern)

    def date_format_for(self, kind: PlaceholderKind, param: str | None) -> str:
        """Effective format of a DATE/TIME placeholder: its parameter, else the default."""
        if param:
            return param
        return self.date_format if kind is PlaceholderKind.DATE else self.time_format
