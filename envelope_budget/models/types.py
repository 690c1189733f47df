"""
Column types shared by the models.

Amounts are kept as whole ten-thousandths in a BIGINT column.
SQLite stores NUMERIC values as 8-byte floats, which silently
rounds anything past ~15 significant digits; integers are exact
there and on every other backend, and so are their SUMs.
"""

from decimal import Decimal

from sqlalchemy import BigInteger
from sqlalchemy.types import TypeDecorator

# Digits after the decimal point
SCALE = 4
# Largest digit count that still fits a signed 64-bit integer once scaled
MAX_DIGITS = 18

QUANTUM = Decimal(1).scaleb(-SCALE)


class Money(TypeDecorator):
    """Decimal amount with SCALE places, stored as an integer."""

    impl = BigInteger
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        units = Decimal(value).scaleb(SCALE)
        if units != units.to_integral_value():
            raise ValueError(
                f"Amount {value} has more than {SCALE} decimal places"
            )
        return int(units)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value).scaleb(-SCALE).quantize(QUANTUM)
