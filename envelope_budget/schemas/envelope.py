"""
Pydantic schemas for envelopes and stashes.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from envelope_budget.models.enums import EnvelopeKind
from envelope_budget.models.types import MAX_DIGITS, SCALE
from envelope_budget.schemas.account import AccountResponse


class EnvelopeCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class EnvelopeResponse(BaseModel):
    id: int
    name: str
    amount: Decimal
    kind: EnvelopeKind
    created_at: dt.datetime

    model_config = {"from_attributes": True}


class EnvelopeSummaryResponse(BaseModel):
    """Envelope with what has been spent from its bound accounts."""
    envelope: EnvelopeResponse
    spending_total: Decimal


class StashCreate(BaseModel):
    """
    Move an amount from one envelope to another.

    Negative amounts are allowed and behave like swapping
    the two envelopes. Zero is rejected.
    """
    from_envelope_id: int
    to_envelope_id: int
    amount: Decimal = Field(max_digits=MAX_DIGITS, decimal_places=SCALE)

    @field_validator("amount")
    @classmethod
    def amount_must_be_non_zero(cls, v: Decimal) -> Decimal:
        if v == 0:
            raise ValueError("amount must be non-zero")
        return v


class StashResponse(BaseModel):
    id: int
    from_envelope_id: int
    to_envelope_id: int
    amount: Decimal
    created_at: dt.datetime

    model_config = {"from_attributes": True}


class EnvelopeDetailResponse(BaseModel):
    envelope: EnvelopeResponse
    spending_total: Decimal
    bound_accounts: list[AccountResponse]
    stashes: list[StashResponse]
