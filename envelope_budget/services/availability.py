"""
Availability calculator: how much money is not yet budgeted.

    available = inflow + net stashed into Available

inflow is every positive entry on an asset account (name starting
with "assets"). Net stashed is the stash log as seen from the
Available envelope: plus when it receives, minus when it gives.

Nothing is cached; the figure is recomputed from the full entry
and stash history on every call.

By default inflow counts a deposit even when the same transaction
already put it on an envelope-bound account, so such money is
counted twice once it is also stashed. With
exclude_bound_inflows=True an asset entry is left out of inflow
whenever another entry of its transaction is on a bound account.
"""

from decimal import Decimal

import structlog
from sqlalchemy import select, func, case, or_
from sqlalchemy.orm import Session, aliased

from envelope_budget.models.account import Account, ASSET_PREFIX
from envelope_budget.models.entry import Entry
from envelope_budget.models.stash import Stash
from envelope_budget.services.ledger_store import LedgerStore

logger = structlog.get_logger(__name__)


class AvailabilityCalculator:

    def __init__(self, db: Session, exclude_bound_inflows: bool = False):
        self.db = db
        self.exclude_bound_inflows = exclude_bound_inflows

    def get_inflow(self) -> Decimal:
        # substr rather than LIKE: LIKE is case-insensitive on SQLite
        is_asset = (
            func.substr(Account.name, 1, len(ASSET_PREFIX)) == ASSET_PREFIX
        )
        query = (
            select(func.coalesce(func.sum(Entry.amount), 0))
            .join(Account, Entry.account_id == Account.id)
            .where(is_asset, Entry.amount > 0)
        )

        if self.exclude_bound_inflows:
            other = aliased(Entry)
            bound = aliased(Account)
            allocated = (
                select(other.id)
                .join(bound, other.account_id == bound.id)
                .where(
                    other.transaction_id == Entry.transaction_id,
                    other.id != Entry.id,
                    bound.envelope_id.is_not(None),
                )
                .exists()
            )
            query = query.where(~allocated)

        return self.db.execute(query).scalar()

    def get_net_stashed(self) -> Decimal:
        available = LedgerStore(self.db).get_available_envelope()
        if available is None:
            return Decimal("0")

        signed = case(
            (Stash.to_envelope_id == available.id, Stash.amount),
            else_=-Stash.amount,
        )
        total = self.db.execute(
            select(func.coalesce(func.sum(signed), 0)).where(or_(
                Stash.to_envelope_id == available.id,
                Stash.from_envelope_id == available.id,
            ))
        ).scalar()
        return total

    def get_available(self) -> Decimal:
        inflow = self.get_inflow()
        net_stashed = self.get_net_stashed()
        logger.debug(
            "available_computed",
            inflow=str(inflow),
            net_stashed=str(net_stashed),
            exclude_bound_inflows=self.exclude_bound_inflows,
        )
        return inflow + net_stashed
