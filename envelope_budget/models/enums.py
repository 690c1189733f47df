"""
Shared enumerations for database models.
"""

import enum


class EnvelopeKind(str, enum.Enum):
    """
    Distinguishes the single envelope holding un-budgeted funds
    from ordinary spending categories.
    """
    ORDINARY = "ORDINARY"
    AVAILABLE = "AVAILABLE"


class AuditEvent(str, enum.Enum):
    ACCOUNT_CREATED = "ACCOUNT_CREATED"
    ACCOUNT_BOUND = "ACCOUNT_BOUND"
    ACCOUNT_DELETED = "ACCOUNT_DELETED"
    ENVELOPE_CREATED = "ENVELOPE_CREATED"
    TRANSACTION_CREATED = "TRANSACTION_CREATED"
    STASH = "STASH"
    SEED = "SEED"
