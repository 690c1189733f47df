"""
Account API endpoints.

The API layer is thin. It handles HTTP concerns and delegates
to the LedgerStore. Each request commits or rolls back once.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from envelope_budget.api.errors import to_http_exception
from envelope_budget.models.base import get_db
from envelope_budget.schemas.account import (
    AccountCreate,
    AccountBinding,
    AccountResponse,
    AccountBalanceResponse,
    AccountDetailResponse,
    RegisterLineResponse,
)
from envelope_budget.services.errors import LedgerError
from envelope_budget.services.ledger_store import (
    LedgerStore,
    balances_with_zero_fill,
)
from envelope_budget.services.register import build_register, for_display

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.get("", response_model=list[AccountBalanceResponse])
def list_accounts(db: Session = Depends(get_db)):
    """Every account with its balance, accounts without entries at zero."""
    store = LedgerStore(db)
    accounts = store.list_accounts()
    balances = balances_with_zero_fill(accounts, store.get_account_balances())
    return [
        AccountBalanceResponse(
            account=AccountResponse.model_validate(account),
            balance=balances[account],
        )
        for account in accounts
    ]


@router.post("", response_model=AccountResponse, status_code=201)
def create_account(
    request: AccountCreate,
    db: Session = Depends(get_db),
):
    store = LedgerStore(db)
    try:
        account = store.create_account(request)
        db.commit()
        return account
    except LedgerError as e:
        db.rollback()
        raise to_http_exception(e)


@router.get("/{account_id}", response_model=AccountDetailResponse)
def get_account(account_id: int, db: Session = Depends(get_db)):
    """
    An account and its register, newest line first.

    The balance of the top line is the account's current balance.
    """
    store = LedgerStore(db)
    account = store.get_account(account_id)
    if account is None:
        raise HTTPException(
            status_code=404, detail=f"Account {account_id} not found"
        )

    lines = build_register(
        account, store.get_transactions_with_account(account)
    )
    balance = lines[-1].balance if lines else 0
    return AccountDetailResponse(
        account=AccountResponse.model_validate(account),
        balance=balance,
        lines=[
            RegisterLineResponse.model_validate(line)
            for line in for_display(lines)
        ],
    )


@router.put("/{account_id}/binding", response_model=AccountResponse)
def bind_account(
    account_id: int,
    request: AccountBinding,
    db: Session = Depends(get_db),
):
    store = LedgerStore(db)
    try:
        account = store.bind_account(account_id, request.envelope_id)
        db.commit()
        return account
    except LedgerError as e:
        db.rollback()
        raise to_http_exception(e)


@router.delete("/{account_id}", status_code=204)
def delete_account(account_id: int, db: Session = Depends(get_db)):
    """Delete an account. Its entries are kept."""
    store = LedgerStore(db)
    try:
        store.delete_account(account_id)
        db.commit()
    except LedgerError as e:
        db.rollback()
        raise to_http_exception(e)
