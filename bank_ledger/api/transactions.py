"""
Transaction and transfer endpoints
"""

from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Query

from .dependencies import get_ledger
from .errors import to_http_error
from .schemas import TransferRequest, transaction_to_dict, transfer_to_dict
from ..exceptions import LedgerError
from ..ledger import LedgerService


router = APIRouter()


@router.get("/transactions")
async def list_transactions(
    team_id: Optional[str] = Query(None, alias="teamId"),
    ledger: LedgerService = Depends(get_ledger)
):
    """List transactions, newest first"""
    return [transaction_to_dict(t) for t in ledger.get_all_transactions(team_id)]


@router.get("/transactions/{transaction_id}")
async def get_transaction(
    transaction_id: int,
    ledger: LedgerService = Depends(get_ledger)
):
    """Get a single transaction"""
    transaction = ledger.get_transaction_by_id(transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return transaction_to_dict(transaction)


@router.post("/transfer")
async def transfer(
    request: TransferRequest,
    ledger: LedgerService = Depends(get_ledger)
):
    """Make a transfer between accounts"""
    try:
        result = ledger.transfer_funds(
            from_account_id=request.from_account_id,
            to_account_id=request.to_account_id,
            amount=request.amount,
            description=request.description,
            team_id=request.team_id
        )
    except LedgerError as e:
        raise to_http_error(e, not_found_status=400)

    return transfer_to_dict(result)
