"""
Envelope model.

An envelope is a budget category holding a running allocated
amount. The amount only changes through a stash, so it always
equals the net of the stash log for that envelope.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, DateTime, Integer, Index, Enum as SAEnum, text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from envelope_budget.models.base import Base
from envelope_budget.models.types import Money
from envelope_budget.models.enums import EnvelopeKind


class Envelope(Base):
    __tablename__ = "envelopes"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[Decimal] = mapped_column(
        Money, nullable=False, default=Decimal("0")
    )
    kind: Mapped[EnvelopeKind] = mapped_column(
        SAEnum(EnvelopeKind, name="envelope_kind_enum", create_constraint=True),
        nullable=False,
        default=EnvelopeKind.ORDINARY,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    # Bumped on every UPDATE; a stale version fails the flush
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    accounts: Mapped[list["Account"]] = relationship(
        back_populates="envelope"
    )

    __table_args__ = (
        # Only one envelope may hold the un-budgeted funds
        Index(
            "uq_envelopes_single_available",
            "kind",
            unique=True,
            sqlite_where=text("kind = 'AVAILABLE'"),
            postgresql_where=text("kind = 'AVAILABLE'"),
        ),
    )
    __mapper_args__ = {"version_id_col": version}

    @property
    def is_available(self) -> bool:
        return self.kind == EnvelopeKind.AVAILABLE

    def __repr__(self) -> str:
        return f"<Envelope {self.name} {self.amount} ({self.kind.value})>"
