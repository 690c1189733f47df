"""
Audit log model.

Records every mutation of the budget so the history of
bindings, transfers and postings can be traced.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column

from envelope_budget.models.base import Base


class AuditLog(Base):
    """
    Immutable record of a system event.

    Like stashes, audit logs are append-only.
    """

    __tablename__ = "audit_log"

    id: Mapped[int] = mapped_column(primary_key=True)
    event_type: Mapped[str] = mapped_column(String(100), nullable=False)
    details: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
