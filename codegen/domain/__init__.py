"""Domain layer: value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from codegen.domain.enums import PlaceholderKind, ReservationStatus
from codegen.domain.exceptions import (
    AllocationExhaustedException,
    CodeGenException,
    ConfigurationException,
    PatternMismatchException,
    SqlNotConfiguredException,
    ValidationException,
)
from codegen.domain.value_objects import (
    CompiledPattern,
    CounterKey,
    LiteralSegment,
    Placeholder,
)

__all__ = [
    "AllocationExhaustedException",
    "CodeGenException",
    "CompiledPattern",
    "ConfigurationException",
    "CounterKey",
    "LiteralSegment",
    "PatternMismatchException",
    "Placeholder",
    "PlaceholderKind",
    "ReservationStatus",
    "SqlNotConfiguredException",
    "ValidationException",
]
