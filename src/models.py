from collections import Counter
from dataclasses import dataclass
from decimal import Context, Decimal
from enum import Enum
from typing import Optional

# Wide enough that 4-decimal amounts and their running sums stay exact
LEDGER_CONTEXT = Context(prec=64)


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def creates_entry(self) -> bool:
        """Deposits and withdrawals mint a ledger entry; the rest reference one."""
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class DisputeStatus(Enum):
    NORMAL = "normal"
    DISPUTED = "disputed"
    RESOLVED = "resolved"
    CHARGED_BACK = "charged_back"

    def next_status(self, action: TransactionType) -> Optional["DisputeStatus"]:
        """Status reached by applying a dispute-family action, or None if illegal."""
        return _DISPUTE_TRANSITIONS.get((self, action))

    @property
    def is_terminal(self) -> bool:
        return self in (DisputeStatus.RESOLVED, DisputeStatus.CHARGED_BACK)


_DISPUTE_TRANSITIONS = {
    (DisputeStatus.NORMAL, TransactionType.DISPUTE): DisputeStatus.DISPUTED,
    (DisputeStatus.DISPUTED, TransactionType.RESOLVE): DisputeStatus.RESOLVED,
    (DisputeStatus.DISPUTED, TransactionType.CHARGEBACK): DisputeStatus.CHARGED_BACK,
}


class ProcessingResult(Enum):
    SUCCESS = "success"
    ACCOUNT_LOCKED = "account_locked"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INVALID_AMOUNT = "invalid_amount"
    DUPLICATE_TRANSACTION = "duplicate_transaction"
    UNKNOWN_TRANSACTION = "unknown_transaction"
    CLIENT_MISMATCH = "client_mismatch"
    INVALID_DISPUTE_STATE = "invalid_dispute_state"
    UNSUPPORTED_TRANSACTION = "unsupported_transaction"


@dataclass(frozen=True)
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class LedgerEntry:
    """An accepted deposit or withdrawal and where it stands in the dispute life-cycle."""

    transaction: Transaction
    status: DisputeStatus = DisputeStatus.NORMAL

    @property
    def transaction_id(self) -> int:
        return self.transaction.transaction_id

    @property
    def client_id(self) -> int:
        return self.transaction.client_id

    @property
    def transaction_type(self) -> TransactionType:
        return self.transaction.transaction_type

    @property
    def amount(self) -> Decimal:
        return self.transaction.amount


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return LEDGER_CONTEXT.add(self.available, self.held)

    def credit(self, amount: Decimal) -> None:
        self.available = LEDGER_CONTEXT.add(self.available, amount)

    def debit(self, amount: Decimal) -> None:
        self.available = LEDGER_CONTEXT.subtract(self.available, amount)

    def hold(self, amount: Decimal) -> None:
        self.debit(amount)
        self.add_held(amount)

    def release_hold(self, amount: Decimal) -> None:
        self.remove_held(amount)
        self.credit(amount)

    def add_held(self, amount: Decimal) -> None:
        self.held = LEDGER_CONTEXT.add(self.held, amount)

    def remove_held(self, amount: Decimal) -> None:
        self.held = LEDGER_CONTEXT.subtract(self.held, amount)

    def lock(self) -> None:
        self.locked = True


@dataclass(frozen=True)
class AccountSnapshot:
    client_id: int
    available: Decimal
    held: Decimal
    total: Decimal
    locked: bool

    @classmethod
    def of(cls, account: ClientAccount) -> "AccountSnapshot":
        return cls(
            client_id=account.client_id,
            available=account.available,
            held=account.held,
            total=account.total,
            locked=account.locked,
        )


class ProcessingStats:
    """Counters for tracking processing statistics."""

    def __init__(self):
        self.processed = 0
        self.rejected = 0
        self.rejections_by_result: Counter = Counter()

    def record_success(self):
        self.processed += 1

    def record_rejection(self, result: ProcessingResult):
        self.rejected += 1
        self.rejections_by_result[result] += 1
