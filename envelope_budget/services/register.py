"""
Account register: the running-balance history of one account.

The register is accumulated oldest first, because a running
balance only makes sense in date order. Showing it newest first
is a separate step (for_display); the two orders must not be
mixed up or the balances come out wrong.
"""

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal

from envelope_budget.models.account import Account
from envelope_budget.models.transaction import Transaction


@dataclass(frozen=True)
class RegisterLine:
    date: dt.date
    note: str
    amount: Decimal
    balance: Decimal


def build_register(
    account: Account, transactions: list[Transaction]
) -> list[RegisterLine]:
    """
    One line per entry on the account, oldest first, each
    carrying the balance after that entry.
    """
    lines = []
    balance = Decimal("0")
    for transaction in sorted(transactions, key=lambda t: (t.date, t.id)):
        for entry in transaction.entries:
            if entry.account_id != account.id:
                continue
            balance += entry.amount
            lines.append(RegisterLine(
                date=transaction.date,
                note=transaction.note,
                amount=entry.amount,
                balance=balance,
            ))
    return lines


def for_display(lines: list[RegisterLine]) -> list[RegisterLine]:
    """Newest line first."""
    return list(reversed(lines))
