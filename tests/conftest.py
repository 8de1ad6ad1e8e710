"""
Shared fixtures for the ledger test suite
"""

import pytest
from datetime import datetime, timezone, timedelta

from bank_ledger.config import LedgerConfig
from bank_ledger.ledger import LedgerService


class FakeClock:
    """Deterministic clock; every call returns the current fake time"""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def ledger(clock):
    return LedgerService(config=LedgerConfig(), clock=clock)
