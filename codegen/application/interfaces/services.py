"""Service interfaces (ports) for the application layer.

Protocols define contracts for collaborators the generator consumes: the
configuration store, the clock, and the random/unique-value source (DIP).
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from codegen.application.dtos.generation import GenerationDefaults


# Configuration store interface
class IPatternConfigStore(Protocol):
    """Protocol for global defaults and named pattern definitions (key -> value lookup)."""

    def defaults(self) -> GenerationDefaults:
        """Return global generation defaults."""

    def get_definition(self, pattern_key: str) -> dict[str, Any] | None:
        """Return the raw definition for a named pattern, or None if undefined."""

    def pattern_keys(self) -> list[str]:
        """Return all configured pattern keys."""


# Clock interface
class IClock(Protocol):
    """Protocol for the current timestamp."""

    def now(self) -> datetime:
        """Return the current timezone-aware datetime."""


# Random / unique value source interface
class IEntropySource(Protocol):
    """Protocol for cryptographically random strings and version-4 UUIDs."""

    def random_string(self, length: int) -> str:
        """Return a random alphanumeric string of exactly length characters."""

    def uuid4(self) -> str:
        """Return a new version-4 UUID in canonical 36-character form."""
