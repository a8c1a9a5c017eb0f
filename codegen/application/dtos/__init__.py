"""Application DTOs (no ORM dependency)."""

from codegen.application.dtos.generation import (
    GenerationConfig,
    GenerationDefaults,
    PatternOverrides,
)
from codegen.application.dtos.sequence_counter import (
    ReservationOutcome,
    SequenceCounterResult,
)

__all__ = [
    "GenerationConfig",
    "GenerationDefaults",
    "PatternOverrides",
    "ReservationOutcome",
    "SequenceCounterResult",
]
