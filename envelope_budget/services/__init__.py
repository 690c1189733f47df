"""Business logic services."""

from envelope_budget.services.ledger_store import LedgerStore
from envelope_budget.services.envelope_service import EnvelopeService
from envelope_budget.services.availability import AvailabilityCalculator

__all__ = ["LedgerStore", "EnvelopeService", "AvailabilityCalculator"]
