"""
Statement Module

Builds read-only account statements over a transaction window.
"""

from decimal import Decimal
from datetime import datetime, timezone
from dataclasses import dataclass, field
from typing import List

from .accounts import Account
from .exceptions import ValidationError
from .transactions import Transaction


@dataclass
class StatementSummary:
    opening_balance: Decimal
    closing_balance: Decimal
    total_deposits: Decimal
    total_withdrawals: Decimal
    transaction_count: int


@dataclass
class AccountStatement:
    """Statement for one account over ``[start_date, end_date]``"""
    account: Account
    start_date: str
    end_date: str
    summary: StatementSummary
    transactions: List[Transaction] = field(default_factory=list)


def parse_statement_date(value: str, name: str) -> datetime:
    """Parse an ISO-8601 date or datetime; naive values are taken as UTC"""
    if not value or not str(value).strip():
        raise ValidationError("Start date and end date are required")
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Invalid {name}: {value}") from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def build_statement(
    account: Account,
    transactions: List[Transaction],
    start_date: str,
    end_date: str
) -> AccountStatement:
    """
    Build a statement from the account's full transaction history.

    Args:
        account: The account the statement is for
        transactions: Every transaction of the account, in any order
        start_date: Inclusive window start, echoed back as given
        end_date: Inclusive window end, echoed back as given

    Returns:
        AccountStatement whose closing balance is the account's current
        balance and whose opening balance is the balance before the first
        transaction in the window (the current balance if the window is empty)
    """
    start = parse_statement_date(start_date, "start date")
    end = parse_statement_date(end_date, "end date")

    if start >= end:
        raise ValidationError("Start date must be before end date")

    period_transactions = sorted(
        (t for t in transactions if start <= t.timestamp <= end),
        key=lambda t: (t.timestamp, t.id)
    )

    if period_transactions:
        opening_balance = period_transactions[0].balance_before
    else:
        opening_balance = account.balance

    total_deposits = sum(
        (t.amount for t in period_transactions if t.type.is_credit), Decimal('0')
    )
    total_withdrawals = sum(
        (t.amount for t in period_transactions if t.type.is_debit), Decimal('0')
    )

    return AccountStatement(
        account=account,
        start_date=start_date,
        end_date=end_date,
        summary=StatementSummary(
            opening_balance=opening_balance,
            closing_balance=account.balance,
            total_deposits=total_deposits,
            total_withdrawals=total_withdrawals,
            transaction_count=len(period_transactions)
        ),
        transactions=period_transactions
    )
