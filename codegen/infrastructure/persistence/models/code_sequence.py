"""Sequence counter ORM model (table code_sequence)."""

from sqlalchemy import BigInteger, CheckConstraint, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from codegen.domain.value_objects import COUNTER_KEY_MAX_LENGTH
from codegen.infrastructure.persistence.database import Base
from codegen.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class CodeSequence(CuidMixin, TimestampMixin, Base):
    """One counter per (date_key, type, location).

    confirmed is the last value whose use was confirmed; pending is the
    outstanding reservation, if any. Rows are never deleted.
    """

    __tablename__ = "code_sequence"

    date_key: Mapped[str] = mapped_column(
        String(COUNTER_KEY_MAX_LENGTH), nullable=False
    )
    type: Mapped[str] = mapped_column(String(COUNTER_KEY_MAX_LENGTH), nullable=False)
    location: Mapped[str] = mapped_column(
        String(COUNTER_KEY_MAX_LENGTH), nullable=False
    )
    confirmed: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0, server_default="0"
    )
    pending: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "date_key", "type", "location", name="uq_code_sequence_date_type_location"
        ),
        CheckConstraint("confirmed >= 0", name="ck_code_sequence_confirmed_non_negative"),
    )

    def __repr__(self) -> str:
        return (
            f"<CodeSequence {self.date_key}/{self.type}/{self.location} "
            f"confirmed={self.confirmed} pending={self.pending}>"
        )
