"""Effective configuration resolution for one generation call.

Layers, lowest precedence first: global defaults <- named pattern definition
(or an inline template) <- per-call overrides. Definitions and overrides are
validated against PatternOverrides, so unknown keys are a hard error.
"""

from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from pydantic import ValidationError

from codegen.application.dtos.generation import (
    GenerationConfig,
    GenerationDefaults,
    PatternOverrides,
)
from codegen.application.interfaces.services import IPatternConfigStore
from codegen.application.services.pattern_compiler import (
    compile_pattern,
    contains_placeholder,
)
from codegen.domain.enums import PlaceholderKind
from codegen.domain.exceptions import ConfigurationException, ValidationException

# PatternOverrides field -> GenerationConfig field
_FIELD_MAP = {
    "pattern": "pattern",
    "type": "type_code",
    "location": "location_code",
    "sequence_length": "sequence_length",
    "date_format": "date_format",
    "time_format": "time_format",
    "code_length": "code_length",
    "max_attempts": "max_attempts",
    "retry_delay": "retry_delay_ms",
}


def to_overrides(
    raw: Mapping[str, Any] | PatternOverrides | None, source: str
) -> PatternOverrides:
    """Validate raw override data; raise ValidationException naming source on failure."""
    if raw is None:
        return PatternOverrides()
    if isinstance(raw, PatternOverrides):
        return raw
    try:
        return PatternOverrides.model_validate(dict(raw))
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise ValidationException(
            f"Invalid {source}: {field}: {first.get('msg')}",
            field=f"{source}.{field}" if field else source,
        ) from e


def _base_config(defaults: GenerationDefaults) -> GenerationConfig:
    return GenerationConfig(
        type_code=defaults.type_code.upper(),
        location_code=defaults.location_code.upper(),
        sequence_length=defaults.sequence_length,
        date_format=defaults.date_format,
        time_format=defaults.time_format,
        code_length=defaults.code_length,
        max_attempts=defaults.max_attempts,
        retry_delay_ms=defaults.retry_delay_ms,
        use_sequence=False,
        pattern=defaults.pattern,
    )


def _apply(config: GenerationConfig, layer: PatternOverrides) -> GenerationConfig:
    changes: dict[str, Any] = {}
    for name in layer.model_fields_set:
        if name not in _FIELD_MAP:
            continue
        value = getattr(layer, name)
        if value is None and name != "code_length":
            continue
        if name in ("type", "location"):
            value = value.upper()
        changes[_FIELD_MAP[name]] = value
    return replace(config, **changes) if changes else config


class GenerationConfigResolver:
    """Builds immutable GenerationConfig snapshots from the configuration store."""

    def __init__(self, store: IPatternConfigStore) -> None:
        self.store = store

    def resolve(
        self,
        pattern_key_or_template: str | None = None,
        overrides: Mapping[str, Any] | PatternOverrides | None = None,
    ) -> GenerationConfig:
        """Resolve the effective configuration.

        Args:
            pattern_key_or_template: Configured pattern key, an inline template
                containing placeholders, or None for the default pattern.
            overrides: Per-call overrides (highest precedence).

        Returns:
            Effective GenerationConfig. use_sequence is the explicit flag when
            one applies, else whether the final pattern contains SEQUENCE.

        Raises:
            ConfigurationException: If the selector is neither a configured key
                nor a template.
            ValidationException: If a definition or the overrides are invalid.
        """
        config = _base_config(self.store.defaults())
        explicit_sequence: bool | None = None

        if pattern_key_or_template is not None:
            raw = self.store.get_definition(pattern_key_or_template)
            if raw is not None:
                named = to_overrides(raw, f"patterns.{pattern_key_or_template}")
                config = _apply(config, named)
                if "use_sequence" in named.model_fields_set:
                    explicit_sequence = named.use_sequence
            elif contains_placeholder(pattern_key_or_template):
                config = replace(config, pattern=pattern_key_or_template)
            else:
                raise ConfigurationException(pattern_key_or_template)

        layer = to_overrides(overrides, "overrides")
        config = _apply(config, layer)
        if "pattern" in layer.model_fields_set:
            explicit_sequence = None
        if layer.use_sequence is not None:
            explicit_sequence = layer.use_sequence

        if explicit_sequence is None:
            explicit_sequence = compile_pattern(config.pattern).has(
                PlaceholderKind.SEQUENCE
            )
        return replace(config, use_sequence=explicit_sequence)

    def named_patterns(self) -> dict[str, str]:
        """Return configured pattern key -> template (default template when unset)."""
        default_pattern = self.store.defaults().pattern
        result: dict[str, str] = {}
        for key in self.store.pattern_keys():
            raw = self.store.get_definition(key) or {}
            result[key] = str(raw.get("pattern") or default_pattern)
        return result
