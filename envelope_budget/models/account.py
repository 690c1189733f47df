"""
Account model.

An account is a named ledger account such as "assets:cash" or
"credit:visa". The name is a colon-delimited path; accounts whose
name starts with "assets" count as asset accounts.

An account may be bound to one envelope. Spending on a bound
account is charged against that envelope's budget.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from envelope_budget.models.base import Base

ASSET_PREFIX = "assets"


class Account(Base):
    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    envelope_id: Mapped[int | None] = mapped_column(
        ForeignKey("envelopes.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    envelope: Mapped["Envelope | None"] = relationship(
        back_populates="accounts"
    )

    # Never reuse the id of a deleted account; old entries still point at it
    __table_args__ = {"sqlite_autoincrement": True}
    __mapper_args__ = {"version_id_col": version}

    @property
    def is_asset(self) -> bool:
        return self.name.startswith(ASSET_PREFIX)

    def __repr__(self) -> str:
        return f"<Account {self.name}>"
