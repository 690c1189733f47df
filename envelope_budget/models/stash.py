"""
Stash model.

Audit record of money moved between two envelopes. Rows are
only ever inserted; the envelope amounts are updated in the
same unit of work by EnvelopeService.stash.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from envelope_budget.models.base import Base
from envelope_budget.models.types import Money


class Stash(Base):
    __tablename__ = "stashes"

    id: Mapped[int] = mapped_column(primary_key=True)
    from_envelope_id: Mapped[int] = mapped_column(
        ForeignKey("envelopes.id"), nullable=False, index=True
    )
    to_envelope_id: Mapped[int] = mapped_column(
        ForeignKey("envelopes.id"), nullable=False, index=True
    )
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    from_envelope: Mapped["Envelope"] = relationship(
        foreign_keys=[from_envelope_id]
    )
    to_envelope: Mapped["Envelope"] = relationship(
        foreign_keys=[to_envelope_id]
    )

    def __repr__(self) -> str:
        return (
            f"<Stash {self.from_envelope_id} -> {self.to_envelope_id} "
            f"{self.amount}>"
        )
