"""
Account management endpoints
"""

from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Query, status

from .dependencies import get_ledger
from .errors import to_http_error
from .schemas import (
    CreateAccountRequest, UpdateAccountRequest, FreezeAccountRequest, TeamRequest,
    CreateTransactionRequest, InterestRequest,
    account_to_dict, transaction_to_dict, posting_to_dict, interest_to_dict, statement_to_dict
)
from ..exceptions import LedgerError
from ..ledger import LedgerService


router = APIRouter()


@router.get("")
async def list_accounts(
    team_id: Optional[str] = Query(None, alias="teamId"),
    ledger: LedgerService = Depends(get_ledger)
):
    """List open accounts, optionally for one team"""
    return [account_to_dict(account) for account in ledger.get_all_accounts(team_id)]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_account(
    request: CreateAccountRequest,
    ledger: LedgerService = Depends(get_ledger)
):
    """Create a new account"""
    try:
        account = ledger.create_account(
            team_id=request.team_id,
            account_holder=request.account_holder,
            initial_balance=request.initial_balance,
            account_type=request.account_type
        )
    except LedgerError as e:
        raise to_http_error(e, not_found_status=400)

    return account_to_dict(account)


@router.get("/{account_id}")
async def get_account(
    account_id: int,
    team_id: Optional[str] = Query(None, alias="teamId"),
    ledger: LedgerService = Depends(get_ledger)
):
    """Get account details"""
    account = ledger.get_account_by_id(account_id, team_id)
    if not account:
        raise HTTPException(status_code=404, detail="Account not found")
    return account_to_dict(account)


@router.get("/{account_id}/balance")
async def get_account_balance(
    account_id: int,
    team_id: Optional[str] = Query(None, alias="teamId"),
    ledger: LedgerService = Depends(get_ledger)
):
    """Get the current balance of an account"""
    try:
        balance = ledger.get_account_balance(account_id, team_id)
    except LedgerError as e:
        raise to_http_error(e)

    return {
        "accountId": balance["account_id"],
        "accountNumber": balance["account_number"],
        "balance": float(balance["balance"])
    }


@router.put("/{account_id}")
async def update_account(
    account_id: int,
    request: UpdateAccountRequest,
    ledger: LedgerService = Depends(get_ledger)
):
    """Update holder name and/or account type"""
    try:
        account = ledger.update_account(
            account_id,
            team_id=request.team_id,
            account_holder=request.account_holder,
            account_type=request.account_type
        )
    except LedgerError as e:
        raise to_http_error(e)

    return account_to_dict(account)


@router.post("/{account_id}/freeze")
async def freeze_account(
    account_id: int,
    request: FreezeAccountRequest,
    ledger: LedgerService = Depends(get_ledger)
):
    """Freeze an account"""
    try:
        account = ledger.freeze_account(account_id, request.reason, request.team_id)
    except LedgerError as e:
        raise to_http_error(e)

    return account_to_dict(account)


@router.post("/{account_id}/unfreeze")
async def unfreeze_account(
    account_id: int,
    request: TeamRequest,
    ledger: LedgerService = Depends(get_ledger)
):
    """Unfreeze an account"""
    try:
        account = ledger.unfreeze_account(account_id, request.team_id)
    except LedgerError as e:
        raise to_http_error(e)

    return account_to_dict(account)


@router.post("/{account_id}/close")
async def close_account(
    account_id: int,
    request: TeamRequest,
    ledger: LedgerService = Depends(get_ledger)
):
    """Close an account with a zero balance"""
    try:
        account = ledger.close_account(account_id, request.team_id)
    except LedgerError as e:
        raise to_http_error(e)

    return {
        "message": "Account closed successfully",
        "accountId": account.id,
        "accountNumber": account.account_number,
        "status": account.status.value,
        "closedAt": account.closed_at.isoformat()
    }


@router.get("/{account_id}/transactions")
async def get_account_transactions(
    account_id: int,
    team_id: Optional[str] = Query(None, alias="teamId"),
    ledger: LedgerService = Depends(get_ledger)
):
    """Get transaction history for an account, newest first"""
    try:
        transactions = ledger.get_account_transactions(account_id, team_id)
    except LedgerError as e:
        raise to_http_error(e)

    return [transaction_to_dict(t) for t in transactions]


@router.post("/{account_id}/transactions", status_code=status.HTTP_201_CREATED)
async def create_transaction(
    account_id: int,
    request: CreateTransactionRequest,
    ledger: LedgerService = Depends(get_ledger)
):
    """Post a deposit or withdrawal"""
    try:
        result = ledger.create_transaction(
            account_id,
            type=request.type,
            amount=request.amount,
            description=request.description,
            team_id=request.team_id
        )
    except LedgerError as e:
        raise to_http_error(e, not_found_status=400)

    return posting_to_dict(result)


@router.post("/{account_id}/interest")
async def apply_interest(
    account_id: int,
    request: InterestRequest,
    ledger: LedgerService = Depends(get_ledger)
):
    """Credit one period of interest to a savings account"""
    try:
        result = ledger.calculate_and_apply_interest(
            account_id,
            interest_rate=request.interest_rate,
            period=request.period,
            team_id=request.team_id
        )
    except LedgerError as e:
        raise to_http_error(e, not_found_status=400)

    return interest_to_dict(result)


@router.get("/{account_id}/statement")
async def get_account_statement(
    account_id: int,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    team_id: Optional[str] = Query(None, alias="teamId"),
    ledger: LedgerService = Depends(get_ledger)
):
    """Statement for a date window"""
    if not start_date or not end_date:
        raise HTTPException(status_code=400, detail="Start date and end date are required")

    try:
        statement = ledger.get_account_statement(account_id, start_date, end_date, team_id)
    except LedgerError as e:
        raise to_http_error(e, not_found_status=400)

    return statement_to_dict(statement)
