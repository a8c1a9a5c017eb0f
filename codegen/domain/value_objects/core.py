"""Domain value objects for the code generator.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

from dataclasses import dataclass, field

from codegen.domain.enums import PlaceholderKind

# Column bound shared by every part of the counter key (see code_sequence table).
COUNTER_KEY_MAX_LENGTH = 20


@dataclass(frozen=True)
class LiteralSegment:
    """Literal text run inside a pattern, copied verbatim into codes."""

    text: str


@dataclass(frozen=True)
class Placeholder:
    """Typed placeholder inside a pattern, e.g. ``{SEQUENCE:4}``.

    param is None when the placeholder has no parameter or when its parameter
    was rejected and the configured default applies.
    """

    kind: PlaceholderKind
    param: str | None = None
    raw: str = ""

    @property
    def width(self) -> int | None:
        """Numeric parameter (SEQUENCE width / RANDOM length), if any."""
        if self.param is None or not self.param.isdigit():
            return None
        return int(self.param)


Segment = LiteralSegment | Placeholder


@dataclass(frozen=True)
class CompiledPattern:
    """Ordered literal and placeholder segments compiled from a template.

    Shared by the formatter, the parser and date key derivation so that all
    three agree on what the template means.
    """

    template: str
    segments: tuple[Segment, ...] = field(default_factory=tuple)

    @property
    def placeholders(self) -> tuple[Placeholder, ...]:
        return tuple(s for s in self.segments if isinstance(s, Placeholder))

    def has(self, kind: PlaceholderKind) -> bool:
        """Return True if the pattern contains at least one placeholder of kind."""
        return any(p.kind is kind for p in self.placeholders)

    def first(self, kind: PlaceholderKind) -> Placeholder | None:
        """Return the first placeholder of kind, or None."""
        for placeholder in self.placeholders:
            if placeholder.kind is kind:
                return placeholder
        return None


@dataclass(frozen=True)
class CounterKey:
    """Composite key of a sequence counter row: (date_key, type, location).

    Each part must be non-empty and fit the persisted column bound.
    """

    date_key: str
    type_code: str
    location_code: str

    def __post_init__(self) -> None:
        for name, value in (
            ("date_key", self.date_key),
            ("type", self.type_code),
            ("location", self.location_code),
        ):
            if not value:
                raise ValueError(f"Counter key {name} must be a non-empty string")
            if len(value) > COUNTER_KEY_MAX_LENGTH:
                raise ValueError(
                    f"Counter key {name} must not exceed {COUNTER_KEY_MAX_LENGTH} characters"
                )

    def __str__(self) -> str:
        return f"{self.date_key}/{self.type_code}/{self.location_code}"
