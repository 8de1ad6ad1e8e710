"""
Interest Module

Simple periodic interest on savings balances. The annual rate is scaled to
the posting period and applied once to the current balance.
"""

from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Union

from .exceptions import ValidationError


class InterestPeriod(Enum):
    """How much of a year one interest posting covers"""
    MONTHLY = "monthly"       # 12 times per year
    QUARTERLY = "quarterly"   # 4 times per year
    YEARLY = "yearly"         # 1 time per year

    @property
    def periods_per_year(self) -> int:
        return _PERIODS_PER_YEAR[self]


_PERIODS_PER_YEAR = {
    InterestPeriod.MONTHLY: 12,
    InterestPeriod.QUARTERLY: 4,
    InterestPeriod.YEARLY: 1,
}


def parse_period(period: Union[str, InterestPeriod, None]) -> InterestPeriod:
    if isinstance(period, InterestPeriod):
        return period
    try:
        return InterestPeriod(period)
    except ValueError:
        raise ValidationError(
            f"Invalid interest period: {period}. Use monthly, quarterly or yearly"
        ) from None


def calculate_interest(balance: Decimal, annual_rate: Decimal, period: InterestPeriod) -> Decimal:
    """
    Interest earned on ``balance`` over one period: the annual rate divided
    by the number of periods per year. The result is not rounded.
    """
    return balance * annual_rate / Decimal(period.periods_per_year)


def describe_interest(annual_rate: Decimal, period: InterestPeriod) -> str:
    """Human readable description, e.g. "Monthly interest - 5.0% APR" """
    percent = (annual_rate * 100).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)
    return f"{period.value.capitalize()} interest - {percent}% APR"
