"""
Transaction model.

A transaction is a dated event with a note and one or more
entries. The entries of a transaction sum to zero; the check
happens in LedgerStore.create_transaction before anything is
written.
"""

import datetime as dt

from sqlalchemy import String, Date, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from envelope_budget.models.base import Base


class Transaction(Base):
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(primary_key=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    note: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, nullable=False, default=dt.datetime.utcnow
    )

    entries: Mapped[list["Entry"]] = relationship(
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="Entry.position",
    )

    def __repr__(self) -> str:
        return f"<Transaction {self.date} {self.note!r}>"
