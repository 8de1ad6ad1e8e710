"""
Account Module

Account records, their product types and lifecycle states, and account
number generation. Balances are only changed by the ledger's posting path.
"""

from decimal import Decimal
from datetime import datetime
from dataclasses import dataclass
from typing import Dict, Optional
from enum import Enum
import secrets

from .storage import StorageRecord


class AccountType(Enum):
    """Banking product types"""
    CHECKING = "checking"
    SAVINGS = "savings"


class AccountStatus(Enum):
    """Account lifecycle states"""
    ACTIVE = "active"      # Normal operation
    FROZEN = "frozen"      # Temporarily suspended, read-only
    CLOSED = "closed"      # Permanently closed, invisible to lookups


@dataclass
class Account(StorageRecord):
    """
    Bank account scoped to a team
    """
    team_id: str
    account_number: str
    account_holder: str
    created_at: datetime
    balance: Decimal = Decimal('0')
    account_type: AccountType = AccountType.CHECKING
    status: AccountStatus = AccountStatus.ACTIVE
    frozen_at: Optional[datetime] = None
    freeze_reason: Optional[str] = None
    unfrozen_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE

    @property
    def is_frozen(self) -> bool:
        return self.status == AccountStatus.FROZEN

    @property
    def is_closed(self) -> bool:
        return self.status == AccountStatus.CLOSED

    @property
    def is_savings(self) -> bool:
        return self.account_type == AccountType.SAVINGS

    def belongs_to(self, team_id: Optional[str]) -> bool:
        """True when no team filter is given or the team matches"""
        return not team_id or self.team_id == team_id

    @classmethod
    def from_dict(cls, data: Dict) -> 'Account':
        """Convert a storage dictionary back to an Account"""
        return cls(
            id=data['id'],
            team_id=data['team_id'],
            account_number=data['account_number'],
            account_holder=data['account_holder'],
            created_at=datetime.fromisoformat(data['created_at']),
            balance=Decimal(data['balance']),
            account_type=AccountType(data['account_type']),
            status=AccountStatus(data['status']),
            frozen_at=_parse_optional(data.get('frozen_at')),
            freeze_reason=data.get('freeze_reason'),
            unfrozen_at=_parse_optional(data.get('unfrozen_at')),
            closed_at=_parse_optional(data.get('closed_at'))
        )


def _parse_optional(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def generate_account_number(length: int = 10) -> str:
    """Generate a random numeric account number of ``length`` digits"""
    # Leading digit is never zero so the number keeps its length as an int
    first = str(secrets.randbelow(9) + 1)
    rest = "".join(str(secrets.randbelow(10)) for _ in range(length - 1))
    return first + rest
