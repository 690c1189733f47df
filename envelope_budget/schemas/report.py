"""
Pydantic schemas for report endpoints.
"""

from decimal import Decimal

from pydantic import BaseModel


class AvailableResponse(BaseModel):
    available: Decimal
    excludes_bound_inflows: bool


class IntegrityResponse(BaseModel):
    is_consistent: bool
    unbalanced_transaction_ids: list[int]
    dangling_entry_ids: list[int]
