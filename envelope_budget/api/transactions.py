"""
Transaction API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from envelope_budget.api.errors import to_http_exception
from envelope_budget.models.base import get_db
from envelope_budget.schemas.transaction import (
    TransactionCreate,
    TransactionResponse,
)
from envelope_budget.services.errors import LedgerError
from envelope_budget.services.ledger_store import LedgerStore

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.post("", response_model=TransactionResponse, status_code=201)
def create_transaction(
    request: TransactionCreate,
    db: Session = Depends(get_db),
):
    """
    Record a transaction. Its entry amounts must sum to zero.
    """
    store = LedgerStore(db)
    try:
        transaction = store.create_transaction(request)
        db.commit()
        return store.get_transaction(transaction.id)
    except LedgerError as e:
        db.rollback()
        raise to_http_exception(e)


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(transaction_id: int, db: Session = Depends(get_db)):
    transaction = LedgerStore(db).get_transaction(transaction_id)
    if transaction is None:
        raise HTTPException(
            status_code=404,
            detail=f"Transaction {transaction_id} not found",
        )
    return transaction
