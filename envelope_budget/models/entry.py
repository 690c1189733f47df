"""
Entry model.

One signed posting against one account inside a transaction.
Entries are immutable once posted.

Deleting an account does not delete its entries. The account_id
of such an entry points at nothing; every query that joins
through it must drop the row instead of failing.
"""

from decimal import Decimal

from sqlalchemy import Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from envelope_budget.models.base import Base
from envelope_budget.models.types import Money


class Entry(Base):
    __tablename__ = "entries"

    id: Mapped[int] = mapped_column(primary_key=True)
    transaction_id: Mapped[int] = mapped_column(
        ForeignKey("transactions.id"), nullable=False, index=True
    )
    account_id: Mapped[int | None] = mapped_column(
        ForeignKey("accounts.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    transaction: Mapped["Transaction"] = relationship(back_populates="entries")
    account: Mapped["Account | None"] = relationship()

    def __repr__(self) -> str:
        return f"<Entry account={self.account_id} {self.amount}>"
