import logging

from models import (
    AccountSnapshot,
    ClientAccount,
    DisputeStatus,
    LedgerEntry,
    ProcessingResult,
    Transaction,
    TransactionType,
)
from transaction_log import TransactionLog

logger = logging.getLogger(__name__)


class AccountLedger:
    """
    Applies transactions to a single client account.
    Returns ProcessingResult to indicate success or the reason for rejection.
    Every check runs before any mutation, so a rejected transaction leaves
    both the account and the transaction log untouched.
    """

    def __init__(self, client_id: int, transaction_log: TransactionLog):
        self._account = ClientAccount(client_id=client_id)
        self._log = transaction_log

    @property
    def client_id(self) -> int:
        return self._account.client_id

    @property
    def account(self) -> ClientAccount:
        return self._account

    def snapshot(self) -> AccountSnapshot:
        return AccountSnapshot.of(self._account)

    def apply(self, transaction: Transaction) -> ProcessingResult:
        """
        Apply a single transaction.

        Returns:
            SUCCESS: Applied
            anything else: Rejected, nothing changed
        """
        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                result = self._handle_deposit(transaction)
            case TransactionType.WITHDRAWAL:
                result = self._handle_withdrawal(transaction)
            case TransactionType.DISPUTE:
                result = self._handle_dispute(transaction)
            case TransactionType.RESOLVE:
                result = self._handle_resolve(transaction)
            case TransactionType.CHARGEBACK:
                result = self._handle_chargeback(transaction)
            case _:
                result = ProcessingResult.UNSUPPORTED_TRANSACTION

        if result == ProcessingResult.SUCCESS:
            logger.debug(f"Applied {transaction}")
        return result

    def _check_new_entry(self, transaction: Transaction) -> ProcessingResult:
        if transaction.amount is None or transaction.amount <= 0:
            return ProcessingResult.INVALID_AMOUNT

        if self._account.locked:
            return ProcessingResult.ACCOUNT_LOCKED

        if transaction.transaction_id in self._log:
            return ProcessingResult.DUPLICATE_TRANSACTION

        return ProcessingResult.SUCCESS

    def _handle_deposit(self, transaction: Transaction) -> ProcessingResult:
        result = self._check_new_entry(transaction)
        if result != ProcessingResult.SUCCESS:
            return result

        self._log.record(LedgerEntry(transaction))
        self._account.credit(transaction.amount)
        return ProcessingResult.SUCCESS

    def _handle_withdrawal(self, transaction: Transaction) -> ProcessingResult:
        result = self._check_new_entry(transaction)
        if result != ProcessingResult.SUCCESS:
            return result

        if self._account.available < transaction.amount:
            return ProcessingResult.INSUFFICIENT_FUNDS

        self._log.record(LedgerEntry(transaction))
        self._account.debit(transaction.amount)
        return ProcessingResult.SUCCESS

    def _check_dispute_action(self, transaction: Transaction) -> ProcessingResult:
        """Validate that a dispute, resolve or chargeback may act on its referenced entry."""
        entry = self._log.lookup(transaction.transaction_id)

        if entry is None:
            return ProcessingResult.UNKNOWN_TRANSACTION

        if entry.client_id != transaction.client_id:
            return ProcessingResult.CLIENT_MISMATCH

        if entry.status.next_status(transaction.transaction_type) is None:
            return ProcessingResult.INVALID_DISPUTE_STATE

        return ProcessingResult.SUCCESS

    def _handle_dispute(self, transaction: Transaction) -> ProcessingResult:
        result = self._check_dispute_action(transaction)
        if result != ProcessingResult.SUCCESS:
            return result

        entry = self._log.lookup(transaction.transaction_id)
        if entry.transaction_type == TransactionType.DEPOSIT:
            self._account.hold(entry.amount)
        else:
            # Withdrawn funds come back as held, not available, until the dispute settles.
            self._account.add_held(entry.amount)

        self._log.set_status(entry.transaction_id, DisputeStatus.DISPUTED)
        return ProcessingResult.SUCCESS

    def _handle_resolve(self, transaction: Transaction) -> ProcessingResult:
        result = self._check_dispute_action(transaction)
        if result != ProcessingResult.SUCCESS:
            return result

        entry = self._log.lookup(transaction.transaction_id)
        if entry.transaction_type == TransactionType.DEPOSIT:
            self._account.release_hold(entry.amount)
        else:
            self._account.remove_held(entry.amount)

        self._log.set_status(entry.transaction_id, DisputeStatus.RESOLVED)
        return ProcessingResult.SUCCESS

    def _handle_chargeback(self, transaction: Transaction) -> ProcessingResult:
        result = self._check_dispute_action(transaction)
        if result != ProcessingResult.SUCCESS:
            return result

        entry = self._log.lookup(transaction.transaction_id)
        if entry.transaction_type == TransactionType.DEPOSIT:
            self._account.remove_held(entry.amount)
        else:
            self._account.release_hold(entry.amount)
        self._account.lock()

        self._log.set_status(entry.transaction_id, DisputeStatus.CHARGED_BACK)
        return ProcessingResult.SUCCESS
