"""Error taxonomy raised by the ledger service."""


class LedgerError(ValueError):
    """Base exception for all ledger errors."""


class ValidationError(LedgerError):
    """Raised when input is missing or malformed, or an amount is not positive."""


class NotFoundError(LedgerError):
    """Raised when an account or transaction does not exist or is filtered out by team."""


class InvalidStateError(LedgerError):
    """Raised when an account is in the wrong lifecycle state for the operation."""


class InsufficientFundsError(LedgerError):
    """Raised when a withdrawal or transfer exceeds the available balance."""
