"""
Pydantic schemas for API requests and the JSON shapes of API responses
"""

from decimal import Decimal
from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..accounts import Account
from ..ledger import InterestResult, PostingResult, TransferResult
from ..statements import AccountStatement
from ..transactions import Transaction


class CamelModel(BaseModel):
    """Request body accepting camelCase keys, as the web client sends them"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Account schemas
class CreateAccountRequest(CamelModel):
    team_id: Optional[str] = None
    account_holder: Optional[str] = None
    initial_balance: Optional[Decimal] = None
    account_type: Optional[str] = Field(None, description="Account type (checking, savings)")


class UpdateAccountRequest(CamelModel):
    team_id: str = Field(..., min_length=1)
    account_holder: Optional[str] = None
    account_type: Optional[str] = Field(None, description="Account type (checking, savings)")


class FreezeAccountRequest(CamelModel):
    team_id: str = Field(..., min_length=1)
    reason: str = Field(..., description="Why the account is being frozen")


class TeamRequest(CamelModel):
    team_id: str = Field(..., min_length=1)


# Transaction schemas
class CreateTransactionRequest(CamelModel):
    type: Optional[str] = Field(None, description="Transaction type (deposit, withdrawal)")
    amount: Optional[Decimal] = None
    description: Optional[str] = None
    team_id: Optional[str] = None


class TransferRequest(CamelModel):
    from_account_id: int
    to_account_id: int
    amount: Optional[Decimal] = None
    description: Optional[str] = None
    team_id: Optional[str] = None


class InterestRequest(CamelModel):
    interest_rate: Optional[Decimal] = None
    period: Optional[str] = Field(None, description="Interest period (monthly, quarterly, yearly)")
    team_id: Optional[str] = None


# Response shapes

def money(value: Decimal) -> float:
    return float(value)


def timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def account_to_dict(account: Account) -> Dict[str, Any]:
    result = {
        "id": account.id,
        "teamId": account.team_id,
        "accountNumber": account.account_number,
        "accountHolder": account.account_holder,
        "balance": money(account.balance),
        "accountType": account.account_type.value,
        "status": account.status.value,
        "createdAt": timestamp(account.created_at),
    }
    optional = {
        "frozenAt": timestamp(account.frozen_at),
        "freezeReason": account.freeze_reason,
        "unfrozenAt": timestamp(account.unfrozen_at),
        "closedAt": timestamp(account.closed_at),
    }
    result.update({key: value for key, value in optional.items() if value is not None})
    return result


def transaction_to_dict(transaction: Transaction) -> Dict[str, Any]:
    return {
        "id": transaction.id,
        "accountId": transaction.account_id,
        "type": transaction.type.value,
        "amount": money(transaction.amount),
        "description": transaction.description,
        "timestamp": timestamp(transaction.timestamp),
        "balanceAfter": money(transaction.balance_after),
    }


def posting_to_dict(result: PostingResult) -> Dict[str, Any]:
    return {
        "transaction": transaction_to_dict(result.transaction),
        "newBalance": money(result.new_balance),
    }


def transfer_to_dict(result: TransferResult) -> Dict[str, Any]:
    return {
        "message": result.message,
        "fromAccount": {"id": result.from_account.id, "newBalance": money(result.from_account.balance)},
        "toAccount": {"id": result.to_account.id, "newBalance": money(result.to_account.balance)},
        "transactions": [transaction_to_dict(t) for t in result.transactions],
    }


def interest_to_dict(result: InterestResult) -> Dict[str, Any]:
    account = result.account
    return {
        "account": {
            "id": account.id,
            "accountNumber": account.account_number,
            "accountHolder": account.account_holder,
            "previousBalance": money(result.previous_balance),
            "newBalance": money(result.new_balance),
            "accountType": account.account_type.value,
        },
        "interest": {
            "rate": money(result.rate),
            "period": result.period.value,
            "amount": money(result.amount),
            "appliedAt": timestamp(result.applied_at),
        },
        "transaction": transaction_to_dict(result.transaction),
    }


def statement_to_dict(statement: AccountStatement) -> Dict[str, Any]:
    account = statement.account
    summary = statement.summary
    return {
        "account": {
            "id": account.id,
            "accountNumber": account.account_number,
            "accountHolder": account.account_holder,
            "accountType": account.account_type.value,
        },
        "period": {
            "startDate": statement.start_date,
            "endDate": statement.end_date,
        },
        "summary": {
            "openingBalance": money(summary.opening_balance),
            "closingBalance": money(summary.closing_balance),
            "totalDeposits": money(summary.total_deposits),
            "totalWithdrawals": money(summary.total_withdrawals),
            "transactionCount": summary.transaction_count,
        },
        "transactions": [transaction_to_dict(t) for t in statement.transactions],
    }
