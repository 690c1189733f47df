"""
Envelope API endpoints, including stashing money between them.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from envelope_budget.api.errors import to_http_exception
from envelope_budget.models.base import get_db
from envelope_budget.schemas.account import AccountResponse
from envelope_budget.schemas.envelope import (
    EnvelopeCreate,
    EnvelopeResponse,
    EnvelopeSummaryResponse,
    EnvelopeDetailResponse,
    StashCreate,
    StashResponse,
)
from envelope_budget.services.envelope_service import EnvelopeService
from envelope_budget.services.errors import LedgerError
from envelope_budget.services.ledger_store import LedgerStore

router = APIRouter(prefix="/envelopes", tags=["Envelopes"])


@router.get("", response_model=list[EnvelopeSummaryResponse])
def list_envelopes(db: Session = Depends(get_db)):
    store = LedgerStore(db)
    return [
        EnvelopeSummaryResponse(
            envelope=EnvelopeResponse.model_validate(envelope),
            spending_total=store.get_spending_total(envelope),
        )
        for envelope in store.list_envelopes()
    ]


@router.post("", response_model=EnvelopeResponse, status_code=201)
def create_envelope(
    request: EnvelopeCreate,
    db: Session = Depends(get_db),
):
    store = LedgerStore(db)
    try:
        envelope = store.create_envelope(request)
        db.commit()
        return envelope
    except LedgerError as e:
        db.rollback()
        raise to_http_exception(e)


@router.post("/stash", response_model=StashResponse, status_code=201)
def stash(
    request: StashCreate,
    db: Session = Depends(get_db),
):
    """
    Move money from one envelope to another.

    Returns 404 for an unknown envelope, 400 for an invalid
    request and 409 if an envelope was changed concurrently.
    """
    service = EnvelopeService(db)
    try:
        record = service.stash(request)
        db.commit()
        return record
    except LedgerError as e:
        db.rollback()
        raise to_http_exception(e)


@router.get("/{envelope_id}", response_model=EnvelopeDetailResponse)
def get_envelope(envelope_id: int, db: Session = Depends(get_db)):
    store = LedgerStore(db)
    envelope = store.get_envelope(envelope_id)
    if envelope is None:
        raise HTTPException(
            status_code=404, detail=f"Envelope {envelope_id} not found"
        )

    return EnvelopeDetailResponse(
        envelope=EnvelopeResponse.model_validate(envelope),
        spending_total=store.get_spending_total(envelope),
        bound_accounts=[
            AccountResponse.model_validate(a)
            for a in store.get_bound_accounts(envelope)
        ],
        stashes=[
            StashResponse.model_validate(s)
            for s in EnvelopeService(db).list_stashes(envelope)
        ],
    )
