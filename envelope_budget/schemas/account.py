"""
Pydantic schemas for accounts and the account register.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field


class AccountCreate(BaseModel):
    """Request to create a ledger account, e.g. "assets:cash"."""
    name: str = Field(min_length=1, max_length=200)
    envelope_id: int | None = None


class AccountBinding(BaseModel):
    """Bind an account to an envelope, or unbind it with null."""
    envelope_id: int | None = None


class AccountResponse(BaseModel):
    id: int
    name: str
    envelope_id: int | None
    created_at: dt.datetime

    model_config = {"from_attributes": True}


class AccountBalanceResponse(BaseModel):
    account: AccountResponse
    balance: Decimal


class RegisterLineResponse(BaseModel):
    date: dt.date
    note: str
    amount: Decimal
    balance: Decimal

    model_config = {"from_attributes": True}


class AccountDetailResponse(BaseModel):
    """An account with its register, newest line first."""
    account: AccountResponse
    balance: Decimal
    lines: list[RegisterLineResponse]
