"""Persistence repositories. Re-exports for dependency injection."""

from codegen.infrastructure.persistence.repositories.base import BaseRepository
from codegen.infrastructure.persistence.repositories.sequence_counter_repo import (
    SequenceCounterRepository,
)

__all__ = [
    "BaseRepository",
    "SequenceCounterRepository",
]
