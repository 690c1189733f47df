"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from envelope_budget.models.base import Base
from envelope_budget.models.enums import EnvelopeKind, AuditEvent
from envelope_budget.models.audit_log import AuditLog
from envelope_budget.models.envelope import Envelope
from envelope_budget.models.account import Account, ASSET_PREFIX
from envelope_budget.models.transaction import Transaction
from envelope_budget.models.entry import Entry
from envelope_budget.models.stash import Stash

__all__ = [
    "Base",
    "EnvelopeKind",
    "AuditEvent",
    "AuditLog",
    "Envelope",
    "Account",
    "ASSET_PREFIX",
    "Transaction",
    "Entry",
    "Stash",
]
