"""
Pydantic schemas for transactions and their entries.

Entry amounts are signed. The entries of a transaction must
sum to zero; that rule is checked by the LedgerStore so that
the result can be reported as a typed validation error.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field

from envelope_budget.models.types import MAX_DIGITS, SCALE


class EntryCreate(BaseModel):
    account_id: int
    amount: Decimal = Field(max_digits=MAX_DIGITS, decimal_places=SCALE)


class TransactionCreate(BaseModel):
    date: dt.date
    note: str = Field(default="", max_length=255)
    entries: list[EntryCreate] = Field(min_length=1)


class EntryResponse(BaseModel):
    id: int
    account_id: int | None
    amount: Decimal

    model_config = {"from_attributes": True}


class TransactionResponse(BaseModel):
    id: int
    date: dt.date
    note: str
    entries: list[EntryResponse]
    created_at: dt.datetime

    model_config = {"from_attributes": True}
