"""DTOs for sequence counter rows and reservation outcomes."""

from dataclasses import dataclass

from codegen.domain.enums import ReservationStatus
from codegen.domain.value_objects import CounterKey


@dataclass(frozen=True)
class SequenceCounterResult:
    """Sequence counter read-model: snapshot of one row at lock time."""

    id: str
    date_key: str
    type_code: str
    location_code: str
    confirmed: int
    pending: int | None

    @property
    def key(self) -> CounterKey:
        return CounterKey(self.date_key, self.type_code, self.location_code)

    @property
    def next_value(self) -> int:
        """Next candidate: one past the furthest confirmed or pending value."""
        return max(self.confirmed, self.pending or 0) + 1


@dataclass(frozen=True)
class ReservationOutcome:
    """Result of one reservation attempt: Reserved(value) or Conflict(detail).

    Fatal errors are not represented here; they propagate as exceptions.
    """

    status: ReservationStatus
    value: int | None = None
    detail: str | None = None

    @classmethod
    def reserved(cls, value: int) -> "ReservationOutcome":
        return cls(ReservationStatus.RESERVED, value=value)

    @classmethod
    def conflict(cls, detail: str) -> "ReservationOutcome":
        return cls(ReservationStatus.CONFLICT, detail=detail)

    @property
    def is_reserved(self) -> bool:
        return self.status is ReservationStatus.RESERVED
