"""
Request dependencies
"""

from fastapi import Request

from ..ledger import LedgerService


def get_ledger(request: Request) -> LedgerService:
    """The ledger service the application was created with"""
    return request.app.state.ledger
