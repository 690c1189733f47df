"""
Envelope service: moves budgeted money between envelopes.

A stash has three effects:
1. A Stash row is appended to the log
2. The source envelope's amount goes down by the stash amount
3. The destination envelope's amount goes up by the same amount

All three are written inside one unit_of_work(), so either all
of them reach the database or none do. Envelopes are
versioned; if either one changed since it was loaded the flush
fails and a ConflictError is raised instead of overwriting.
"""

import structlog
from sqlalchemy import select, or_
from sqlalchemy.orm import Session

from envelope_budget.models.envelope import Envelope
from envelope_budget.models.enums import AuditEvent
from envelope_budget.models.stash import Stash
from envelope_budget.schemas.envelope import StashCreate
from envelope_budget.services.audit import record_audit
from envelope_budget.services.errors import NotFoundError, ValidationError
from envelope_budget.services.unit_of_work import unit_of_work

logger = structlog.get_logger(__name__)


class EnvelopeService:

    def __init__(self, db: Session):
        self.db = db

    def stash(self, request: StashCreate) -> Stash:
        """
        Move request.amount from one envelope to another.

        A negative amount moves money the other way. A zero amount
        is rejected, as is moving money from an envelope into
        itself. The caller is responsible for calling db.commit()
        afterwards.
        """
        if request.from_envelope_id == request.to_envelope_id:
            raise ValidationError("Cannot stash into the same envelope")
        if request.amount == 0:
            raise ValidationError("Stash amount must be non-zero")

        source = self.db.get(Envelope, request.from_envelope_id)
        destination = self.db.get(Envelope, request.to_envelope_id)
        missing = [
            envelope_id
            for envelope_id, envelope in (
                (request.from_envelope_id, source),
                (request.to_envelope_id, destination),
            )
            if envelope is None
        ]
        if missing:
            raise NotFoundError(f"Envelopes not found: {missing}")

        with unit_of_work(self.db, "stash"):
            stash = Stash(
                from_envelope_id=source.id,
                to_envelope_id=destination.id,
                amount=request.amount,
            )
            self.db.add(stash)
            # The log row goes first; the envelope UPDATEs follow it
            self.db.flush()
            source.amount -= request.amount
            destination.amount += request.amount
            record_audit(
                self.db, AuditEvent.STASH,
                stash_id=stash.id,
                from_envelope_id=source.id,
                to_envelope_id=destination.id,
                amount=request.amount,
            )

        logger.info(
            "stash_recorded",
            stash_id=stash.id,
            from_envelope=source.name,
            to_envelope=destination.name,
            amount=str(request.amount),
        )
        return stash

    def list_stashes(self, envelope: Envelope | None = None) -> list[Stash]:
        """Return the stash log, newest first, optionally for one envelope."""
        query = select(Stash).order_by(Stash.id.desc())
        if envelope is not None:
            query = query.where(or_(
                Stash.from_envelope_id == envelope.id,
                Stash.to_envelope_id == envelope.id,
            ))
        return list(self.db.execute(query).scalars().all())
