"""Domain value objects and shared value types."""

from codegen.domain.value_objects.core import (
    COUNTER_KEY_MAX_LENGTH,
    CompiledPattern,
    CounterKey,
    LiteralSegment,
    Placeholder,
    Segment,
)

__all__ = [
    "COUNTER_KEY_MAX_LENGTH",
    "CompiledPattern",
    "CounterKey",
    "LiteralSegment",
    "Placeholder",
    "Segment",
]
