"""Domain enumerations for the code generator.

Enums represent fixed sets of domain values (placeholder kinds, reservation
outcomes).
"""

from enum import Enum


class PlaceholderKind(str, Enum):
    """Typed substitution marker kinds understood by the pattern language.

    The enum value is the literal keyword used inside braces, e.g. ``{DATE:ymd}``.
    """

    TYPE = "TYPE"
    LOCATION = "LOCATION"
    DATE = "DATE"
    TIME = "TIME"
    SEQUENCE = "SEQUENCE"
    RANDOM = "RANDOM"
    UUID = "UUID"

    @classmethod
    def from_keyword(cls, keyword: str) -> "PlaceholderKind | None":
        """Return the kind for a keyword, or None when the keyword is unknown."""
        try:
            return cls(keyword)
        except ValueError:
            return None


class ReservationStatus(str, Enum):
    """Outcome of a single sequence reservation attempt."""

    RESERVED = "reserved"
    CONFLICT = "conflict"
