"""
Transaction Module

Transaction records posted against accounts. Amounts are unsigned
magnitudes; direction is implied by the transaction type. Each record keeps
the owning account's balance right after it was applied.
"""

from decimal import Decimal
from datetime import datetime
from dataclasses import dataclass
from typing import Dict
from enum import Enum

from .storage import StorageRecord


class TransactionType(Enum):
    """Types of ledger postings"""
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    TRANSFER_IN = "transfer_in"
    TRANSFER_OUT = "transfer_out"
    INTEREST = "interest"

    @property
    def is_credit(self) -> bool:
        """Whether this posting adds to the balance"""
        return self in CREDIT_TYPES

    @property
    def is_debit(self) -> bool:
        """Whether this posting subtracts from the balance"""
        return self in DEBIT_TYPES


CREDIT_TYPES = frozenset({TransactionType.DEPOSIT, TransactionType.TRANSFER_IN, TransactionType.INTEREST})
DEBIT_TYPES = frozenset({TransactionType.WITHDRAWAL, TransactionType.TRANSFER_OUT})

# Types a caller may post directly; the others are produced by transfers and interest
POSTABLE_TYPES = frozenset({TransactionType.DEPOSIT, TransactionType.WITHDRAWAL})


@dataclass
class Transaction(StorageRecord):
    """
    A single posting against one account
    """
    account_id: int
    type: TransactionType
    amount: Decimal
    timestamp: datetime
    balance_after: Decimal
    description: str = ""

    @property
    def signed_amount(self) -> Decimal:
        """The balance delta this transaction applied"""
        return self.amount if self.type.is_credit else -self.amount

    @property
    def balance_before(self) -> Decimal:
        """The owning account's balance right before this transaction"""
        return self.balance_after - self.signed_amount

    @classmethod
    def from_dict(cls, data: Dict) -> 'Transaction':
        """Convert a storage dictionary back to a Transaction"""
        return cls(
            id=data['id'],
            account_id=data['account_id'],
            type=TransactionType(data['type']),
            amount=Decimal(data['amount']),
            timestamp=datetime.fromisoformat(data['timestamp']),
            balance_after=Decimal(data['balance_after']),
            description=data.get('description') or ""
        )
