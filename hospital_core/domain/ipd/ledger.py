"""
Ledger arithmetic

Balances are never stored; they are folded from the admission's
transactions every time they are read.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from hospital_core.domain.ipd.models import TransactionType

ZERO = Decimal("0.00")
CENTS = Decimal("0.01")


def to_money(value) -> Decimal:
    """Quantize to two decimal places."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class LedgerSummary:
    total_charges: Decimal = ZERO
    total_deposits: Decimal = ZERO
    total_payments: Decimal = ZERO
    total_refunds: Decimal = ZERO
    total_adjustments: Decimal = ZERO

    @property
    def total_paid(self) -> Decimal:
        return self.total_deposits + self.total_payments - self.total_refunds

    @property
    def balance(self) -> Decimal:
        return self.total_charges - self.total_adjustments - self.total_paid

    @property
    def net_due(self) -> Decimal:
        return max(ZERO, self.balance)

    def as_dict(self) -> dict:
        return {
            "total_charges": self.total_charges,
            "total_deposits": self.total_deposits,
            "total_payments": self.total_payments,
            "total_refunds": self.total_refunds,
            "total_adjustments": self.total_adjustments,
            "total_paid": self.total_paid,
            "balance": self.balance,
            "net_due": self.net_due,
        }


_BUCKETS = {
    TransactionType.CHARGE: "total_charges",
    TransactionType.DEPOSIT: "total_deposits",
    TransactionType.PAYMENT: "total_payments",
    TransactionType.REFUND: "total_refunds",
    TransactionType.ADJUSTMENT: "total_adjustments",
}


def summarize_ledger(transactions: Iterable) -> LedgerSummary:
    """
    Fold ledger transactions into totals.

    Accepts anything with ``type`` and ``amount`` attributes.
    """
    totals = {name: ZERO for name in _BUCKETS.values()}
    for txn in transactions:
        bucket = _BUCKETS[TransactionType(txn.type)]
        totals[bucket] += to_money(txn.amount)
    return LedgerSummary(**totals)
