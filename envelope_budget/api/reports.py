"""
Report endpoints: available funds, balances, integrity.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from envelope_budget.config import get_settings
from envelope_budget.models.base import get_db
from envelope_budget.schemas.account import (
    AccountResponse,
    AccountBalanceResponse,
)
from envelope_budget.schemas.report import (
    AvailableResponse,
    IntegrityResponse,
)
from envelope_budget.services.availability import AvailabilityCalculator
from envelope_budget.services.ledger_store import LedgerStore

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/available", response_model=AvailableResponse)
def get_available(db: Session = Depends(get_db)):
    exclude = get_settings().AVAILABLE_EXCLUDES_BOUND_INFLOWS
    calculator = AvailabilityCalculator(db, exclude_bound_inflows=exclude)
    return AvailableResponse(
        available=calculator.get_available(),
        excludes_bound_inflows=exclude,
    )


@router.get("/balances", response_model=list[AccountBalanceResponse])
def get_balances(db: Session = Depends(get_db)):
    """Balances of accounts that have entries, by account name."""
    balances = LedgerStore(db).get_account_balances()
    return [
        AccountBalanceResponse(
            account=AccountResponse.model_validate(account),
            balance=balance,
        )
        for account, balance in sorted(
            balances.items(), key=lambda item: item[0].name
        )
    ]


@router.get("/integrity", response_model=IntegrityResponse)
def get_integrity(db: Session = Depends(get_db)):
    return LedgerStore(db).check_integrity()
