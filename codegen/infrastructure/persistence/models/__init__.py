"""Persistence models: ORM entities and mixins."""

from codegen.infrastructure.persistence.models.code_sequence import CodeSequence
from codegen.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin

__all__ = [
    "CodeSequence",
    "CuidMixin",
    "TimestampMixin",
]
