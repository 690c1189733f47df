"""
First-run data.

A fresh budget needs the Available envelope and at least one
ordinary envelope to stash into. Seeding only happens while the
database holds no accounts and no envelopes, so running it on
every startup is safe.
"""

from decimal import Decimal

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from envelope_budget.config import Settings, get_settings
from envelope_budget.models.account import Account
from envelope_budget.models.envelope import Envelope
from envelope_budget.models.enums import AuditEvent, EnvelopeKind
from envelope_budget.services.audit import record_audit
from envelope_budget.services.unit_of_work import unit_of_work

logger = structlog.get_logger(__name__)

DEFAULT_SEED_ENVELOPE = "🍞 Groceries"


def has_data(db: Session) -> bool:
    envelope = db.execute(select(Envelope.id).limit(1)).first()
    account = db.execute(select(Account.id).limit(1)).first()
    return envelope is not None or account is not None


def seed_defaults(db: Session, settings: Settings | None = None) -> bool:
    """
    Create the built-in envelopes on an empty database.

    Returns True if anything was created. The caller commits.
    """
    settings = settings or get_settings()

    if has_data(db):
        logger.info("seed_skipped")
        return False

    names = settings.SEED_ENVELOPES or [DEFAULT_SEED_ENVELOPE]

    with unit_of_work(db, "seed"):
        db.add(Envelope(
            name=settings.AVAILABLE_ENVELOPE_NAME,
            amount=Decimal("0"),
            kind=EnvelopeKind.AVAILABLE,
        ))
        for name in names:
            db.add(Envelope(
                name=name,
                amount=Decimal("0"),
                kind=EnvelopeKind.ORDINARY,
            ))
        record_audit(
            db, AuditEvent.SEED,
            available=settings.AVAILABLE_ENVELOPE_NAME, envelopes=names,
        )

    logger.info("seed_created", envelopes=len(names) + 1)
    return True
