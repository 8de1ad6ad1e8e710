"""
Ledger Service Module

Owns the account and transaction tables and every operation that reads or
changes them: account lifecycle, deposits and withdrawals, transfers,
interest and statements.

Every operation checks all of its preconditions before it touches storage,
so a rejected call leaves accounts and the transaction log unchanged. A
single re-entrant lock serializes operations on one service instance.
"""

from decimal import Decimal, InvalidOperation
from datetime import datetime, timezone, timedelta
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union
import threading

from .accounts import Account, AccountType, AccountStatus, generate_account_number
from .config import LedgerConfig, get_config
from .exceptions import (
    LedgerError, ValidationError, NotFoundError, InvalidStateError, InsufficientFundsError
)
from .interest import InterestPeriod, parse_period, calculate_interest, describe_interest
from .logging_config import get_logger, log_action
from .statements import AccountStatement, build_statement
from .storage import StorageInterface, InMemoryStorage
from .transactions import Transaction, TransactionType, POSTABLE_TYPES


Amount = Union[Decimal, int, float, str]


@dataclass
class PostingResult:
    transaction: Transaction
    new_balance: Decimal


@dataclass
class TransferResult:
    from_account: Account
    to_account: Account
    transactions: List[Transaction] = field(default_factory=list)
    message: str = "Transfer completed successfully"


@dataclass
class InterestResult:
    account: Account
    previous_balance: Decimal
    rate: Decimal
    period: InterestPeriod
    amount: Decimal
    applied_at: datetime
    transaction: Transaction

    @property
    def new_balance(self) -> Decimal:
        return self.account.balance


def to_amount(value: Optional[Amount], name: str = "amount") -> Optional[Decimal]:
    """Coerce a caller supplied number to Decimal; ``None`` passes through"""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {name}: {value}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            # Floats go through str(): 0.1 becomes Decimal("0.1")
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValidationError(f"Invalid {name}: {value}") from None
    if not result.is_finite():
        raise ValidationError(f"Invalid {name}: {value}")
    return result


class LedgerService:
    """
    In-memory ledger of team-scoped accounts and their transactions
    """

    def __init__(
        self,
        storage: Optional[StorageInterface] = None,
        config: Optional[LedgerConfig] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.storage = storage or InMemoryStorage()
        self.config = config or get_config()
        self.accounts_table = "accounts"
        self.transactions_table = "transactions"
        self.logger = get_logger("bank_ledger.ledger")
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lock = threading.RLock()

    # Account management

    def get_all_accounts(self, team_id: Optional[str] = None) -> List[Account]:
        """All non-closed accounts, optionally restricted to one team"""
        with self._lock:
            return [
                account for account in self._load_accounts()
                if not account.is_closed and account.belongs_to(team_id)
            ]

    def get_account_by_id(self, account_id: int, team_id: Optional[str] = None) -> Optional[Account]:
        """
        Get a non-closed account by id.

        A team mismatch returns ``None`` exactly like a missing account.
        """
        with self._lock:
            return self._find_account(account_id, team_id)

    def get_accounts_by_team(self, team_id: str) -> List[Account]:
        with self._lock:
            accounts = self.storage.find(self.accounts_table, {"team_id": team_id})
            return [
                account for account in map(Account.from_dict, accounts)
                if not account.is_closed
            ]

    def get_account_balance(self, account_id: int, team_id: Optional[str] = None) -> Dict[str, Any]:
        with self._lock:
            account = self._require_account(account_id, team_id)
            return {
                "account_id": account.id,
                "account_number": account.account_number,
                "balance": account.balance
            }

    def create_account(
        self,
        team_id: str,
        account_holder: str,
        initial_balance: Optional[Amount] = 0,
        account_type: Union[AccountType, str, None] = AccountType.CHECKING
    ) -> Account:
        """
        Create a new account.

        Args:
            team_id: Team the account belongs to
            account_holder: Holder name, stored trimmed
            initial_balance: Opening deposit; posted as a deposit transaction when positive
            account_type: checking (default) or savings

        Returns:
            The created account, its balance reflecting the opening deposit
        """
        team_id = (team_id or "").strip()
        if not team_id:
            raise ValidationError("Team ID is required")

        account_holder = (account_holder or "").strip()
        if not account_holder:
            raise ValidationError("Account holder name is required")

        account_type = self._parse_account_type(account_type or AccountType.CHECKING)

        initial_balance = to_amount(initial_balance, "initial balance") or Decimal('0')
        if initial_balance < 0:
            raise ValidationError("Initial balance cannot be negative")

        with self._lock:
            account = Account(
                id=self.storage.next_id(self.accounts_table),
                team_id=team_id,
                account_number=self._new_account_number(),
                account_holder=account_holder,
                created_at=self._clock(),
                account_type=account_type
            )
            self._save_account(account)

            log_action(
                self.logger, "info", "Account created",
                team_id=team_id, action="create_account", resource=f"account:{account.id}",
                extra={
                    "account_number": account.account_number,
                    "account_type": account_type.value,
                    "initial_balance": str(initial_balance)
                }
            )

            # Balance is only ever set by posting the opening deposit
            if initial_balance > 0:
                self._post(account, TransactionType.DEPOSIT, initial_balance, "Initial deposit")

            return account

    def update_account(
        self,
        account_id: int,
        team_id: str,
        account_holder: Optional[str] = None,
        account_type: Union[AccountType, str, None] = None
    ) -> Account:
        """Update the holder name and/or account type of an active account"""
        with self._lock:
            account = self._require_account(account_id, team_id)

            if account.is_frozen:
                raise InvalidStateError("Cannot update frozen account")

            changes = {}
            if account_holder is not None:
                holder = account_holder.strip()
                if not holder:
                    raise ValidationError("Account holder name is required")
                changes["account_holder"] = holder
            if account_type is not None:
                changes["account_type"] = self._parse_account_type(account_type)

            for name, value in changes.items():
                setattr(account, name, value)
            self._save_account(account)

            log_action(
                self.logger, "info", "Account updated",
                team_id=account.team_id, action="update_account", resource=f"account:{account.id}",
                extra={
                    name: value.value if isinstance(value, AccountType) else value
                    for name, value in changes.items()
                }
            )
            return account

    def freeze_account(self, account_id: int, reason: Optional[str], team_id: str) -> Account:
        """Freeze an active account; frozen accounts are read-only"""
        with self._lock:
            account = self._require_account(account_id, team_id)

            if account.is_frozen:
                raise InvalidStateError("Account is already frozen")

            account.status = AccountStatus.FROZEN
            account.freeze_reason = (reason or "").strip() or "Administrative action"
            account.frozen_at = self._clock()
            self._save_account(account)

            log_action(
                self.logger, "info", "Account frozen",
                team_id=account.team_id, action="freeze_account", resource=f"account:{account.id}",
                extra={"reason": account.freeze_reason}
            )
            return account

    def unfreeze_account(self, account_id: int, team_id: str) -> Account:
        """Return a frozen account to active; freeze metadata is kept"""
        with self._lock:
            account = self._require_account(account_id, team_id)

            if not account.is_frozen:
                raise InvalidStateError("Account is not frozen")

            account.status = AccountStatus.ACTIVE
            account.unfrozen_at = self._clock()
            self._save_account(account)

            log_action(
                self.logger, "info", "Account unfrozen",
                team_id=account.team_id, action="unfreeze_account", resource=f"account:{account.id}"
            )
            return account

    def close_account(self, account_id: int, team_id: str) -> Account:
        """
        Close an account with an exactly zero balance.

        Closed accounts are invisible to every later lookup; there is no
        way to reopen one.
        """
        with self._lock:
            account = self._require_account(account_id, team_id)

            if account.balance != 0:
                raise InvalidStateError(
                    "Cannot close account with non-zero balance. "
                    f"Current balance: ${account.balance:.2f}"
                )

            account.status = AccountStatus.CLOSED
            account.closed_at = self._clock()
            self._save_account(account)

            log_action(
                self.logger, "info", "Account closed",
                team_id=account.team_id, action="close_account", resource=f"account:{account.id}"
            )
            return account

    # Transaction management

    def get_account_transactions(self, account_id: int, team_id: Optional[str] = None) -> List[Transaction]:
        """Transactions of one account, newest first"""
        with self._lock:
            if team_id and not self._find_account(account_id, team_id):
                raise NotFoundError("Account not found or does not belong to team")
            return self._newest_first(
                t for t in self._load_transactions() if t.account_id == account_id
            )

    def get_all_transactions(self, team_id: Optional[str] = None) -> List[Transaction]:
        """All transactions, newest first; with a team, only its non-closed accounts'"""
        with self._lock:
            transactions = self._load_transactions()
            if team_id:
                account_ids = {account.id for account in self.get_accounts_by_team(team_id)}
                transactions = [t for t in transactions if t.account_id in account_ids]
            return self._newest_first(transactions)

    def get_transaction_by_id(self, transaction_id: int) -> Optional[Transaction]:
        with self._lock:
            data = self.storage.load(self.transactions_table, transaction_id)
            return Transaction.from_dict(data) if data else None

    def create_transaction(
        self,
        account_id: int,
        type: Union[TransactionType, str, None],
        amount: Optional[Amount],
        description: Optional[str] = None,
        team_id: Optional[str] = None
    ) -> PostingResult:
        """
        Post a deposit or withdrawal.

        Raises:
            NotFoundError: account missing, closed or in another team
            InvalidStateError: account is frozen
            ValidationError: type or amount missing, or amount not positive
            InsufficientFundsError: withdrawal larger than the balance
        """
        with self._lock:
            account = self._require_account(account_id, team_id)

            if account.is_frozen:
                raise InvalidStateError("Cannot perform transactions on frozen account")

            amount = to_amount(amount)
            if not type or amount is None or amount <= 0:
                raise ValidationError("Valid type and amount are required")

            txn_type = self._parse_posting_type(type)

            if txn_type == TransactionType.WITHDRAWAL and amount > account.balance:
                raise InsufficientFundsError("Insufficient funds")

            transaction = self._post(account, txn_type, amount, description or "")
            return PostingResult(transaction=transaction, new_balance=account.balance)

    def transfer_funds(
        self,
        from_account_id: int,
        to_account_id: int,
        amount: Optional[Amount],
        description: Optional[str] = None,
        team_id: Optional[str] = None
    ) -> TransferResult:
        """
        Move funds between two active accounts.

        Both accounts are resolved under the same team filter, so an account
        of another team is reported exactly like a missing one. The two legs
        are written together.
        """
        with self._lock:
            from_account = self._find_account(from_account_id, team_id)
            to_account = self._find_account(to_account_id, team_id)

            if not from_account or not to_account:
                raise NotFoundError("One or both accounts not found")

            if from_account.id == to_account.id:
                raise ValidationError("Cannot transfer to the same account")

            if not from_account.is_active or not to_account.is_active:
                raise InvalidStateError("Both accounts must be active for transfers")

            amount = to_amount(amount)
            if amount is None or amount <= 0:
                raise ValidationError("Transfer amount must be positive")

            if amount > from_account.balance:
                raise InsufficientFundsError("Insufficient funds")

            suffix = description or ""
            now = self._clock()

            from_account.balance -= amount
            to_account.balance += amount

            outgoing = Transaction(
                id=self.storage.next_id(self.transactions_table),
                account_id=from_account.id,
                type=TransactionType.TRANSFER_OUT,
                amount=amount,
                timestamp=now,
                balance_after=from_account.balance,
                description=f"Transfer to {to_account.account_number}: {suffix}"
            )
            incoming = Transaction(
                id=self.storage.next_id(self.transactions_table),
                account_id=to_account.id,
                type=TransactionType.TRANSFER_IN,
                amount=amount,
                timestamp=now,
                balance_after=to_account.balance,
                description=f"Transfer from {from_account.account_number}: {suffix}"
            )

            with self.storage.atomic():
                self._save_account(from_account)
                self._save_account(to_account)
                self._save_transaction(outgoing)
                self._save_transaction(incoming)

            log_action(
                self.logger, "info", "Transfer completed",
                team_id=from_account.team_id, action="transfer_funds",
                resource=f"account:{from_account.id}",
                extra={
                    "to_account": to_account.id,
                    "amount": str(amount),
                    "transaction_ids": [outgoing.id, incoming.id]
                }
            )

            return TransferResult(
                from_account=from_account,
                to_account=to_account,
                transactions=[outgoing, incoming]
            )

    # Interest

    def calculate_and_apply_interest(
        self,
        account_id: int,
        interest_rate: Optional[Amount],
        period: Union[InterestPeriod, str, None],
        team_id: Optional[str] = None
    ) -> InterestResult:
        """
        Credit one period of interest to an active savings account.

        interest = balance * interest_rate / periods per year. Negative
        rates are not rejected and produce a negative interest posting.
        """
        with self._lock:
            account = self._require_account(account_id, team_id)

            if not account.is_active:
                raise InvalidStateError("Interest can only be applied to active accounts")

            if not account.is_savings:
                raise InvalidStateError("Interest can only be applied to savings accounts")

            rate = to_amount(interest_rate, "interest rate")
            if rate is None or not period:
                raise ValidationError("Interest rate and period are required")
            period = parse_period(period)

            previous_balance = account.balance
            interest_amount = calculate_interest(previous_balance, rate, period)

            transaction = self._post(
                account, TransactionType.INTEREST, interest_amount, describe_interest(rate, period)
            )

            return InterestResult(
                account=account,
                previous_balance=previous_balance,
                rate=rate,
                period=period,
                amount=interest_amount,
                applied_at=transaction.timestamp,
                transaction=transaction
            )

    # Statements

    def get_account_statement(
        self,
        account_id: int,
        start_date: str,
        end_date: str,
        team_id: Optional[str] = None
    ) -> AccountStatement:
        with self._lock:
            account = self._require_account(account_id, team_id)
            transactions = [t for t in self._load_transactions() if t.account_id == account.id]
            return build_statement(account, transactions, start_date, end_date)

    # Demo data

    def seed_sample_data(self) -> None:
        """Load the demo-team accounts and their history into an empty ledger"""
        with self._lock:
            if self.storage.count(self.accounts_table):
                return

            now = self._clock()
            john = self._seed_account(
                "John Doe", "1234567890", AccountType.CHECKING, now - timedelta(days=30)
            )
            self._post(john, TransactionType.DEPOSIT, Decimal('1600.00'), "Salary deposit",
                       timestamp=now - timedelta(days=7))
            self._post(john, TransactionType.WITHDRAWAL, Decimal('100.00'), "ATM withdrawal",
                       timestamp=now - timedelta(days=1))

            jane = self._seed_account(
                "Jane Smith", "0987654321", AccountType.SAVINGS, now - timedelta(days=60)
            )
            self._post(jane, TransactionType.DEPOSIT, Decimal('2750.50'), "Initial deposit",
                       timestamp=now - timedelta(days=60))

            self.logger.info("Sample data loaded for team demo-team")

    def _seed_account(self, holder: str, number: str, account_type: AccountType,
                      created_at: datetime) -> Account:
        account = Account(
            id=self.storage.next_id(self.accounts_table),
            team_id="demo-team",
            account_number=number,
            account_holder=holder,
            created_at=created_at,
            account_type=account_type
        )
        self._save_account(account)
        return account

    # Internals

    def _post(
        self,
        account: Account,
        txn_type: TransactionType,
        amount: Decimal,
        description: str,
        timestamp: Optional[datetime] = None
    ) -> Transaction:
        """Apply ``amount`` to the account and record the matching transaction"""
        if txn_type.is_credit:
            account.balance += amount
        else:
            account.balance -= amount

        transaction = Transaction(
            id=self.storage.next_id(self.transactions_table),
            account_id=account.id,
            type=txn_type,
            amount=amount,
            timestamp=timestamp or self._clock(),
            balance_after=account.balance,
            description=description
        )

        with self.storage.atomic():
            self._save_account(account)
            self._save_transaction(transaction)

        log_action(
            self.logger, "info", f"Transaction posted: {txn_type.value}",
            team_id=account.team_id, action="post_transaction",
            resource=f"transaction:{transaction.id}",
            extra={
                "account_id": account.id,
                "amount": str(amount),
                "balance_after": str(account.balance)
            }
        )
        return transaction

    def _find_account(self, account_id: int, team_id: Optional[str] = None) -> Optional[Account]:
        data = self.storage.load(self.accounts_table, account_id)
        if not data:
            return None
        account = Account.from_dict(data)
        if account.is_closed or not account.belongs_to(team_id):
            return None
        return account

    def _require_account(self, account_id: int, team_id: Optional[str] = None) -> Account:
        account = self._find_account(account_id, team_id)
        if not account:
            raise NotFoundError("Account not found")
        return account

    def _new_account_number(self) -> str:
        for _ in range(self.config.account_number_attempts):
            number = generate_account_number(self.config.account_number_length)
            if not self.storage.find(self.accounts_table, {"account_number": number}):
                return number
        raise LedgerError("Could not generate a unique account number")

    @staticmethod
    def _parse_account_type(value: Union[AccountType, str]) -> AccountType:
        if isinstance(value, AccountType):
            return value
        try:
            return AccountType(value)
        except ValueError:
            raise ValidationError(
                f"Invalid account type: {value}. Use checking or savings"
            ) from None

    @staticmethod
    def _parse_posting_type(value: Union[TransactionType, str]) -> TransactionType:
        try:
            txn_type = value if isinstance(value, TransactionType) else TransactionType(value)
        except ValueError:
            txn_type = None
        if txn_type not in POSTABLE_TYPES:
            raise ValidationError('Invalid transaction type. Use "deposit" or "withdrawal"')
        return txn_type

    @staticmethod
    def _newest_first(transactions) -> List[Transaction]:
        return sorted(transactions, key=lambda t: (t.timestamp, t.id), reverse=True)

    def _load_accounts(self) -> List[Account]:
        return [Account.from_dict(data) for data in self.storage.load_all(self.accounts_table)]

    def _load_transactions(self) -> List[Transaction]:
        return [Transaction.from_dict(data) for data in self.storage.load_all(self.transactions_table)]

    def _save_account(self, account: Account) -> None:
        self.storage.save(self.accounts_table, account.id, account.to_dict())

    def _save_transaction(self, transaction: Transaction) -> None:
        self.storage.save(self.transactions_table, transaction.id, transaction.to_dict())
