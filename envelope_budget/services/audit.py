"""Helpers for writing audit log rows."""

import json

from sqlalchemy.orm import Session

from envelope_budget.models.audit_log import AuditLog
from envelope_budget.models.enums import AuditEvent


def record_audit(db: Session, event: AuditEvent, **details) -> AuditLog:
    """Add an audit row to the session. The caller's flush/commit writes it."""
    entry = AuditLog(
        event_type=event.value,
        details=json.dumps(details, default=str, sort_keys=True),
    )
    db.add(entry)
    return entry
