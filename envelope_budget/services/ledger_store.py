"""
Ledger store: read and write access to the budget ledger.

This service owns:
1. Lookups of accounts, envelopes and transactions
2. Balance and spending aggregations over entries
3. Creation of accounts, envelopes and balanced transactions

Balances are never stored. They are re-summed from the entries
on every call, so they are correct as long as the entries are.

Read methods return None (or an empty list) when a row does not
exist. Write methods raise NotFoundError / ValidationError /
ConflictError. Relations are loaded with selectinload, which
fetches each relation for the whole result in one IN query.
"""

from dataclasses import dataclass
from decimal import Decimal

import structlog
from sqlalchemy import select, func, case
from sqlalchemy.orm import Session, selectinload

from envelope_budget.models.account import Account
from envelope_budget.models.entry import Entry
from envelope_budget.models.envelope import Envelope
from envelope_budget.models.enums import AuditEvent, EnvelopeKind
from envelope_budget.models.transaction import Transaction
from envelope_budget.schemas.account import AccountCreate
from envelope_budget.schemas.envelope import EnvelopeCreate
from envelope_budget.schemas.transaction import TransactionCreate
from envelope_budget.services.audit import record_audit
from envelope_budget.services.errors import (
    NotFoundError,
    ValidationError,
    UnbalancedTransactionError,
)
from envelope_budget.services.unit_of_work import unit_of_work

logger = structlog.get_logger(__name__)

ZERO = Decimal("0")


# --- Balance check result ---

@dataclass(frozen=True)
class Balanced:
    pass


@dataclass(frozen=True)
class Unbalanced:
    total: Decimal


BalanceCheck = Balanced | Unbalanced


def check_balance(amounts) -> BalanceCheck:
    """Entries balance when their signed amounts sum to exactly zero."""
    total = sum(amounts, ZERO)
    if total == 0:
        return Balanced()
    return Unbalanced(total=total)


def balances_with_zero_fill(
    accounts: list[Account], balances: dict[Account, Decimal]
) -> dict[Account, Decimal]:
    """
    Give every account a balance.

    get_account_balances() only reports accounts that have
    entries; accounts without any have a balance of zero.
    """
    return {account: balances.get(account, ZERO) for account in accounts}


class LedgerStore:
    """
    The caller controls the transaction boundary: methods flush
    but never commit.
    """

    def __init__(self, db: Session):
        self.db = db

    # --- Accounts ---

    def get_account(self, account_id: int) -> Account | None:
        """Return the account with its bound envelope loaded."""
        return self.db.execute(
            select(Account)
            .options(selectinload(Account.envelope))
            .where(Account.id == account_id)
        ).scalar_one_or_none()

    def get_bound_accounts(self, envelope: Envelope) -> list[Account]:
        """Return the accounts bound to an envelope, by name."""
        accounts = self.db.execute(
            select(Account)
            .where(Account.envelope_id == envelope.id)
            .order_by(Account.name)
        ).scalars().all()
        return list(accounts)

    def list_accounts(self) -> list[Account]:
        accounts = self.db.execute(
            select(Account)
            .options(selectinload(Account.envelope))
            .order_by(Account.name)
        ).scalars().all()
        return list(accounts)

    def create_account(self, request: AccountCreate) -> Account:
        """
        Create a new account.

        Raises ValidationError if the name is already taken and
        NotFoundError if the envelope to bind to does not exist.
        """
        existing = self.db.execute(
            select(Account.id).where(Account.name == request.name).limit(1)
        ).first()
        if existing is not None:
            raise ValidationError(
                f"Account with name '{request.name}' already exists"
            )

        if request.envelope_id is not None:
            self._require_envelope(request.envelope_id)

        with unit_of_work(self.db, "create_account"):
            account = Account(
                name=request.name,
                envelope_id=request.envelope_id,
            )
            self.db.add(account)
            self.db.flush()
            record_audit(
                self.db, AuditEvent.ACCOUNT_CREATED,
                account_id=account.id, name=account.name,
                envelope_id=account.envelope_id,
            )

        logger.info(
            "account_created", account_id=account.id, name=account.name
        )
        return account

    def bind_account(
        self, account_id: int, envelope_id: int | None
    ) -> Account:
        """Bind an account to an envelope, or unbind it with None."""
        account = self.db.get(Account, account_id)
        if not account:
            raise NotFoundError(f"Account {account_id} not found")
        if envelope_id is not None:
            self._require_envelope(envelope_id)

        with unit_of_work(self.db, "bind_account"):
            previous = account.envelope_id
            account.envelope_id = envelope_id
            record_audit(
                self.db, AuditEvent.ACCOUNT_BOUND,
                account_id=account.id, previous_envelope_id=previous,
                envelope_id=envelope_id,
            )

        logger.info(
            "account_bound", account_id=account.id, envelope_id=envelope_id
        )
        return account

    def delete_account(self, account_id: int) -> None:
        """
        Delete an account.

        Entries posted against it are kept. They no longer resolve
        to an account and are skipped by every aggregation.
        """
        account = self.db.get(Account, account_id)
        if not account:
            raise NotFoundError(f"Account {account_id} not found")

        with unit_of_work(self.db, "delete_account"):
            self.db.delete(account)
            record_audit(
                self.db, AuditEvent.ACCOUNT_DELETED,
                account_id=account_id, name=account.name,
            )

        logger.info("account_deleted", account_id=account_id)

    # --- Transactions ---

    def get_transaction(self, transaction_id: int) -> Transaction | None:
        """Return a transaction with its entries and their accounts."""
        return self.db.execute(
            select(Transaction)
            .options(
                selectinload(Transaction.entries)
                .selectinload(Entry.account)
            )
            .where(Transaction.id == transaction_id)
        ).scalar_one_or_none()

    def get_transactions_with_account(
        self, account: Account
    ) -> list[Transaction]:
        """
        Return every transaction with at least one entry on the
        account, oldest first. Ties on date keep insertion order.
        """
        touches_account = (
            select(Entry.id)
            .where(
                Entry.transaction_id == Transaction.id,
                Entry.account_id == account.id,
            )
            .exists()
        )
        transactions = self.db.execute(
            select(Transaction)
            .options(
                selectinload(Transaction.entries)
                .selectinload(Entry.account)
            )
            .where(touches_account)
            .order_by(Transaction.date, Transaction.id)
        ).scalars().all()
        return list(transactions)

    def create_transaction(self, request: TransactionCreate) -> Transaction:
        """
        Record a transaction and its entries as one unit.

        The entries must sum to zero and every account must exist.
        If either check fails nothing is written.
        """
        check = check_balance(e.amount for e in request.entries)
        if isinstance(check, Unbalanced):
            raise UnbalancedTransactionError(check.total)

        account_ids = {e.account_id for e in request.entries}
        found = set(self.db.execute(
            select(Account.id).where(Account.id.in_(account_ids))
        ).scalars().all())
        missing = account_ids - found
        if missing:
            raise NotFoundError(f"Accounts not found: {sorted(missing)}")

        with unit_of_work(self.db, "create_transaction"):
            transaction = Transaction(
                date=request.date,
                note=request.note,
                entries=[
                    Entry(
                        account_id=entry.account_id,
                        amount=entry.amount,
                        position=position,
                    )
                    for position, entry in enumerate(request.entries)
                ],
            )
            self.db.add(transaction)
            self.db.flush()
            record_audit(
                self.db, AuditEvent.TRANSACTION_CREATED,
                transaction_id=transaction.id,
                date=transaction.date,
                entries=len(transaction.entries),
            )

        logger.info(
            "transaction_created",
            transaction_id=transaction.id,
            date=str(transaction.date),
            entries=len(transaction.entries),
        )
        return transaction

    # --- Envelopes ---

    def get_envelope(self, envelope_id: int) -> Envelope | None:
        return self.db.get(Envelope, envelope_id)

    def get_available_envelope(self) -> Envelope | None:
        """Return the envelope that holds un-budgeted funds."""
        return self.db.execute(
            select(Envelope)
            .where(Envelope.kind == EnvelopeKind.AVAILABLE)
            .order_by(Envelope.id)
            .limit(1)
        ).scalar_one_or_none()

    def list_envelopes(self) -> list[Envelope]:
        """Available first, then ordinary envelopes by name."""
        envelopes = self.db.execute(
            select(Envelope).order_by(
                case((Envelope.kind == EnvelopeKind.AVAILABLE, 0), else_=1),
                Envelope.name,
            )
        ).scalars().all()
        return list(envelopes)

    def create_envelope(self, request: EnvelopeCreate) -> Envelope:
        """Create an ordinary envelope with nothing in it."""
        with unit_of_work(self.db, "create_envelope"):
            envelope = Envelope(
                name=request.name,
                amount=ZERO,
                kind=EnvelopeKind.ORDINARY,
            )
            self.db.add(envelope)
            self.db.flush()
            record_audit(
                self.db, AuditEvent.ENVELOPE_CREATED,
                envelope_id=envelope.id, name=envelope.name,
            )

        logger.info(
            "envelope_created", envelope_id=envelope.id, name=envelope.name
        )
        return envelope

    def _require_envelope(self, envelope_id: int) -> Envelope:
        envelope = self.db.get(Envelope, envelope_id)
        if not envelope:
            raise NotFoundError(f"Envelope {envelope_id} not found")
        return envelope

    # --- Reports ---

    def get_account_balances(self) -> dict[Account, Decimal]:
        """
        Sum every entry per account.

        Only accounts with at least one entry are reported; use
        balances_with_zero_fill() to cover the rest. Entries whose
        account has been deleted are skipped.
        """
        totals = self.db.execute(
            select(Entry.account_id, func.sum(Entry.amount))
            .where(Entry.account_id.is_not(None))
            .group_by(Entry.account_id)
        ).all()

        account_ids = [account_id for account_id, _ in totals]
        accounts = self.db.execute(
            select(Account).where(Account.id.in_(account_ids))
        ).scalars().all()
        accounts_by_id = {a.id: a for a in accounts}

        balances: dict[Account, Decimal] = {}
        dangling = []
        for account_id, total in totals:
            account = accounts_by_id.get(account_id)
            if account is None:
                dangling.append(account_id)
                continue
            balances[account] = total

        if dangling:
            logger.warning("dangling_entries_skipped", account_ids=dangling)
        return balances

    def get_spending_total(self, envelope: Envelope) -> Decimal:
        """
        Sum the positive entries on accounts bound to the envelope.

        Negative entries (refunds, transfers out) are not spending
        and are left out.
        """
        total = self.db.execute(
            select(func.coalesce(func.sum(Entry.amount), 0))
            .join(Account, Entry.account_id == Account.id)
            .where(
                Account.envelope_id == envelope.id,
                Entry.amount > 0,
            )
        ).scalar()
        return total

    def check_integrity(self) -> dict:
        """
        Look for rows that break the ledger's rules.

        Reports transactions whose entries do not sum to zero and
        entries whose account no longer exists.
        """
        totals = self.db.execute(
            select(Entry.transaction_id, func.sum(Entry.amount))
            .group_by(Entry.transaction_id)
            .order_by(Entry.transaction_id)
        ).all()
        unbalanced = [
            transaction_id for transaction_id, total in totals
            if total != 0
        ]

        dangling = list(self.db.execute(
            select(Entry.id)
            .outerjoin(Account, Entry.account_id == Account.id)
            .where(Account.id.is_(None))
            .order_by(Entry.id)
        ).scalars().all())

        return {
            "is_consistent": not unbalanced and not dangling,
            "unbalanced_transaction_ids": unbalanced,
            "dangling_entry_ids": dangling,
        }
