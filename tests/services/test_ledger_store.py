"""
Tests for the LedgerStore.

Tests cover:
- Account lookup, creation, binding and deletion
- Balanced transaction creation and rejection of unbalanced ones
- Transaction history per account (ordering, no side effects)
- Balance aggregation, zero fill and dangling entries
- Spending totals (positive entries only)
- Integrity report
"""

import datetime as dt
from decimal import Decimal

import pytest
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from envelope_budget.models import Entry, Envelope, EnvelopeKind, Transaction
from envelope_budget.schemas.account import AccountCreate
from envelope_budget.schemas.envelope import EnvelopeCreate
from envelope_budget.schemas.transaction import EntryCreate, TransactionCreate
from envelope_budget.services.errors import (
    NotFoundError,
    ValidationError,
    UnbalancedTransactionError,
)
from envelope_budget.services.ledger_store import (
    LedgerStore,
    Balanced,
    Unbalanced,
    check_balance,
    balances_with_zero_fill,
)


# --- Helpers to reduce repetition ---

def make_envelope(store, name):
    return store.create_envelope(EnvelopeCreate(name=name))


def make_account(store, name, envelope=None):
    return store.create_account(AccountCreate(
        name=name,
        envelope_id=envelope.id if envelope else None,
    ))


def post(store, day, note, *postings):
    """Post a transaction from (account, amount) pairs."""
    return store.create_transaction(TransactionCreate(
        date=dt.date(2024, 1, day),
        note=note,
        entries=[
            EntryCreate(account_id=account.id, amount=Decimal(amount))
            for account, amount in postings
        ],
    ))


# --- Balance check ---

class TestCheckBalance:

    def test_entries_summing_to_zero_are_balanced(self):
        result = check_balance([Decimal("100"), Decimal("-60"), Decimal("-40")])
        assert result == Balanced()

    def test_unbalanced_entries_report_their_total(self):
        result = check_balance([Decimal("100"), Decimal("-60")])
        assert result == Unbalanced(total=Decimal("40"))


# --- Accounts ---

class TestAccounts:

    def test_create_account_succeeds(self, db_session):
        store = LedgerStore(db_session)
        account = make_account(store, "assets:cash")
        db_session.commit()

        assert account.id is not None
        assert account.name == "assets:cash"
        assert account.envelope_id is None
        assert account.is_asset is True

    def test_duplicate_name_rejected(self, db_session):
        store = LedgerStore(db_session)
        make_account(store, "assets:cash")
        db_session.commit()

        with pytest.raises(ValidationError, match="already exists"):
            make_account(store, "assets:cash")

    def test_binding_to_missing_envelope_rejected(self, db_session):
        store = LedgerStore(db_session)

        with pytest.raises(NotFoundError, match="Envelope 999"):
            store.create_account(AccountCreate(name="food", envelope_id=999))

    def test_get_account_resolves_envelope(self, db_session):
        store = LedgerStore(db_session)
        groceries = make_envelope(store, "Groceries")
        food_id = make_account(store, "food", groceries).id
        db_session.commit()
        db_session.expunge_all()

        account = store.get_account(food_id)
        assert account.envelope.name == "Groceries"

    def test_get_missing_account_returns_none(self, db_session):
        assert LedgerStore(db_session).get_account(999) is None

    def test_get_bound_accounts(self, db_session):
        store = LedgerStore(db_session)
        groceries = make_envelope(store, "Groceries")
        rent = make_envelope(store, "Rent")
        make_account(store, "food:market", groceries)
        make_account(store, "food:bakery", groceries)
        make_account(store, "assets:cash")
        db_session.commit()

        names = [a.name for a in store.get_bound_accounts(groceries)]
        assert names == ["food:bakery", "food:market"]
        assert store.get_bound_accounts(rent) == []

    def test_bind_and_unbind(self, db_session):
        store = LedgerStore(db_session)
        groceries = make_envelope(store, "Groceries")
        food = make_account(store, "food")
        db_session.commit()

        store.bind_account(food.id, groceries.id)
        db_session.commit()
        assert store.get_bound_accounts(groceries) == [food]

        store.bind_account(food.id, None)
        db_session.commit()
        assert store.get_bound_accounts(groceries) == []

    def test_bind_missing_account_rejected(self, db_session):
        store = LedgerStore(db_session)
        groceries = make_envelope(store, "Groceries")

        with pytest.raises(NotFoundError, match="Account 999"):
            store.bind_account(999, groceries.id)

    def test_delete_account_keeps_entries(self, db_session):
        store = LedgerStore(db_session)
        cash = make_account(store, "assets:cash")
        income = make_account(store, "income:salary")
        db_session.commit()
        post(store, 1, "Salary", (cash, "100"), (income, "-100"))
        db_session.commit()

        income_id = income.id
        store.delete_account(income_id)
        db_session.commit()

        assert store.get_account(income_id) is None
        count = db_session.execute(select(func.count(Entry.id))).scalar()
        assert count == 2

    def test_delete_missing_account_rejected(self, db_session):
        with pytest.raises(NotFoundError):
            LedgerStore(db_session).delete_account(999)


# --- Transactions ---

class TestTransactions:

    def test_balanced_transaction_succeeds(self, db_session):
        store = LedgerStore(db_session)
        cash = make_account(store, "assets:cash")
        food = make_account(store, "food")
        db_session.commit()

        txn = post(store, 1, "Market", (cash, "-42.50"), (food, "42.50"))
        db_session.commit()

        loaded = store.get_transaction(txn.id)
        assert loaded.note == "Market"
        assert [e.amount for e in loaded.entries] == [
            Decimal("-42.50"), Decimal("42.50"),
        ]
        assert [e.account.name for e in loaded.entries] == [
            "assets:cash", "food",
        ]

    def test_unbalanced_transaction_rejected(self, db_session):
        store = LedgerStore(db_session)
        cash = make_account(store, "assets:cash")
        food = make_account(store, "food")
        db_session.commit()

        with pytest.raises(UnbalancedTransactionError) as excinfo:
            post(store, 1, "Typo", (cash, "-50"), (food, "30"))

        assert excinfo.value.total == Decimal("-20")
        count = db_session.execute(select(func.count(Transaction.id))).scalar()
        assert count == 0

    def test_unknown_account_rejected(self, db_session):
        store = LedgerStore(db_session)
        cash = make_account(store, "assets:cash")
        db_session.commit()

        with pytest.raises(NotFoundError, match="999"):
            store.create_transaction(TransactionCreate(
                date=dt.date(2024, 1, 1),
                entries=[
                    EntryCreate(account_id=cash.id, amount=Decimal("10")),
                    EntryCreate(account_id=999, amount=Decimal("-10")),
                ],
            ))

    def test_get_missing_transaction_returns_none(self, db_session):
        assert LedgerStore(db_session).get_transaction(999) is None

    def test_transactions_with_account_ordered_by_date(self, db_session):
        store = LedgerStore(db_session)
        cash = make_account(store, "assets:cash")
        food = make_account(store, "food")
        rent = make_account(store, "rent")
        db_session.commit()

        post(store, 15, "Late", (cash, "-30"), (food, "30"))
        post(store, 3, "Early", (cash, "-10"), (food, "10"))
        post(store, 9, "Rent", (cash, "-500"), (rent, "500"))
        post(store, 3, "Same day", (cash, "-5"), (food, "5"))
        db_session.commit()

        notes = [t.note for t in store.get_transactions_with_account(food)]
        assert notes == ["Early", "Same day", "Late"]

        notes = [t.note for t in store.get_transactions_with_account(rent)]
        assert notes == ["Rent"]

    def test_transactions_with_account_has_no_side_effects(self, db_session):
        store = LedgerStore(db_session)
        cash = make_account(store, "assets:cash")
        food = make_account(store, "food")
        db_session.commit()
        post(store, 2, "B", (cash, "-2"), (food, "2"))
        post(store, 1, "A", (cash, "-1"), (food, "1"))
        db_session.commit()

        first = [t.id for t in store.get_transactions_with_account(food)]
        second = [t.id for t in store.get_transactions_with_account(food)]
        assert first == second


# --- Balances ---

class TestAccountBalances:

    def test_scenario_deposit_into_food(self, db_session):
        store = LedgerStore(db_session)
        groceries = make_envelope(store, "Groceries")
        cash = make_account(store, "assets:cash")
        food = make_account(store, "food", groceries)
        db_session.commit()

        post(store, 1, "T1", (cash, "100"), (food, "-100"))
        db_session.commit()

        balances = store.get_account_balances()
        assert balances == {cash: Decimal("100"), food: Decimal("-100")}

    def test_balance_is_exact_sum_of_entries(self, db_session):
        store = LedgerStore(db_session)
        cash = make_account(store, "assets:cash")
        food = make_account(store, "food")
        db_session.commit()

        amounts = ["0.10", "0.20", "19.99", "1234.5678"]
        for day, amount in enumerate(amounts, start=1):
            post(store, day, "Spend", (cash, f"-{amount}"), (food, amount))
        db_session.commit()

        balances = store.get_account_balances()
        expected = sum((Decimal(a) for a in amounts), Decimal("0"))
        assert balances[food] == expected
        assert balances[cash] == -expected

    def test_largest_amount_is_kept_exactly(self, db_session):
        store = LedgerStore(db_session)
        cash = make_account(store, "assets:cash")
        income = make_account(store, "income:salary")
        db_session.commit()

        largest = "99999999999999.9999"
        post(store, 1, "Windfall", (cash, largest), (income, f"-{largest}"))
        post(store, 2, "Windfall", (cash, largest), (income, f"-{largest}"))
        db_session.commit()

        balances = store.get_account_balances()
        assert balances[cash] == Decimal("199999999999999.9998")
        assert balances[income] == Decimal("-199999999999999.9998")
        assert store.check_integrity()["is_consistent"]

    def test_amount_past_largest_is_rejected(self):
        with pytest.raises(SchemaValidationError):
            EntryCreate(account_id=1, amount=Decimal("123456789012345.6789"))

    def test_accounts_without_entries_are_not_reported(self, db_session):
        store = LedgerStore(db_session)
        make_account(store, "assets:savings")
        db_session.commit()

        assert store.get_account_balances() == {}

    def test_zero_fill(self, db_session):
        store = LedgerStore(db_session)
        cash = make_account(store, "assets:cash")
        food = make_account(store, "food")
        savings = make_account(store, "assets:savings")
        db_session.commit()
        post(store, 1, "Spend", (cash, "-8"), (food, "8"))
        db_session.commit()

        balances = balances_with_zero_fill(
            store.list_accounts(), store.get_account_balances()
        )
        assert balances[savings] == Decimal("0")
        assert balances[food] == Decimal("8")

    def test_entries_of_deleted_account_are_skipped(self, db_session):
        store = LedgerStore(db_session)
        cash = make_account(store, "assets:cash")
        income = make_account(store, "income:salary")
        db_session.commit()
        post(store, 1, "Salary", (cash, "100"), (income, "-100"))
        db_session.commit()

        store.delete_account(income.id)
        db_session.commit()

        assert store.get_account_balances() == {cash: Decimal("100")}


# --- Spending ---

class TestSpendingTotal:

    def test_only_positive_entries_count(self, db_session):
        store = LedgerStore(db_session)
        groceries = make_envelope(store, "Groceries")
        cash = make_account(store, "assets:cash")
        food = make_account(store, "food", groceries)
        db_session.commit()

        post(store, 1, "Market", (food, "50"), (cash, "-50"))
        post(store, 2, "Refund", (food, "-10"), (cash, "10"))
        post(store, 3, "Bakery", (food, "5"), (cash, "-5"))
        db_session.commit()

        assert store.get_spending_total(groceries) == Decimal("55")

    def test_spread_over_several_bound_accounts(self, db_session):
        store = LedgerStore(db_session)
        groceries = make_envelope(store, "Groceries")
        cash = make_account(store, "assets:cash")
        market = make_account(store, "food:market", groceries)
        bakery = make_account(store, "food:bakery", groceries)
        db_session.commit()

        post(store, 1, "Both", (market, "20"), (bakery, "7"), (cash, "-27"))
        db_session.commit()

        assert store.get_spending_total(groceries) == Decimal("27")

    def test_envelope_without_accounts_is_zero(self, db_session):
        store = LedgerStore(db_session)
        rent = make_envelope(store, "Rent")
        db_session.commit()

        assert store.get_spending_total(rent) == Decimal("0")


# --- Envelopes ---

class TestEnvelopes:

    def test_create_envelope_starts_empty(self, db_session):
        store = LedgerStore(db_session)
        envelope = make_envelope(store, "Fun")
        db_session.commit()

        assert envelope.amount == Decimal("0")
        assert envelope.kind == EnvelopeKind.ORDINARY

    def test_get_missing_envelope_returns_none(self, db_session):
        assert LedgerStore(db_session).get_envelope(999) is None

    def test_list_envelopes_puts_available_first(self, db_session):
        store = LedgerStore(db_session)
        make_envelope(store, "Books")
        db_session.add(Envelope(
            name="Zz Available", amount=Decimal("0"),
            kind=EnvelopeKind.AVAILABLE,
        ))
        make_envelope(store, "Auto")
        db_session.commit()

        names = [e.name for e in store.list_envelopes()]
        assert names == ["Zz Available", "Auto", "Books"]
        assert store.get_available_envelope().name == "Zz Available"

    def test_second_available_envelope_is_rejected(self, db_session):
        db_session.add(Envelope(
            name="Available", amount=Decimal("0"),
            kind=EnvelopeKind.AVAILABLE,
        ))
        db_session.commit()

        db_session.add(Envelope(
            name="Also available", amount=Decimal("0"),
            kind=EnvelopeKind.AVAILABLE,
        ))
        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_no_available_envelope(self, db_session):
        assert LedgerStore(db_session).get_available_envelope() is None


# --- Integrity ---

class TestIntegrity:

    def test_clean_ledger_is_consistent(self, db_session):
        store = LedgerStore(db_session)
        cash = make_account(store, "assets:cash")
        food = make_account(store, "food")
        db_session.commit()
        post(store, 1, "Spend", (cash, "-0.10"), (cash, "-0.20"), (food, "0.30"))
        db_session.commit()

        result = store.check_integrity()
        assert result["is_consistent"] is True
        assert result["unbalanced_transaction_ids"] == []
        assert result["dangling_entry_ids"] == []

    def test_reports_dangling_and_unbalanced(self, db_session):
        store = LedgerStore(db_session)
        cash = make_account(store, "assets:cash")
        income = make_account(store, "income")
        db_session.commit()
        txn = post(store, 1, "Salary", (cash, "100"), (income, "-100"))
        db_session.commit()
        dangling_id = txn.entries[1].id

        # A row written behind the store's back
        broken = Transaction(date=dt.date(2024, 1, 2), note="Broken")
        broken.entries = [Entry(account_id=cash.id, amount=Decimal("5"))]
        db_session.add(broken)
        store.delete_account(income.id)
        db_session.commit()

        result = store.check_integrity()
        assert result["is_consistent"] is False
        assert result["unbalanced_transaction_ids"] == [broken.id]
        assert result["dangling_entry_ids"] == [dangling_id]
