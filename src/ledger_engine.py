import logging
from typing import Dict, Iterable, List

from account_ledger import AccountLedger
from csv_io import read_transactions
from errors import LedgerWarning
from models import AccountSnapshot, ProcessingResult, ProcessingStats, Transaction
from transaction_log import TransactionLog

logger = logging.getLogger(__name__)


class LedgerEngine:
    """
    Drives transactions through per-client account ledgers in arrival order.

    Rejected transactions are collected as warnings and processing goes on.
    Input errors raised while reading transactions stop processing and
    propagate to the caller; everything applied before them is kept.
    """

    def __init__(self):
        self._transaction_log = TransactionLog()
        self._ledgers: Dict[int, AccountLedger] = {}
        self._warnings: List[LedgerWarning] = []
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    @property
    def warnings(self) -> List[LedgerWarning]:
        return list(self._warnings)

    def process_file(self, filepath: str) -> Dict[int, AccountSnapshot]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing {filepath}")
        return self.process(read_transactions(filepath))

    def process(self, transactions: Iterable[Transaction]) -> Dict[int, AccountSnapshot]:
        """Apply every transaction once, in order, and return final account states."""
        for transaction in transactions:
            self.apply(transaction)

        logger.info(f"Processing complete: {self._stats.processed} applied, {self._stats.rejected} rejected")
        return self.snapshot()

    def apply(self, transaction: Transaction) -> ProcessingResult:
        ledger = self._get_or_create_ledger(transaction.client_id)
        result = ledger.apply(transaction)

        if result == ProcessingResult.SUCCESS:
            self._stats.record_success()
        else:
            self._stats.record_rejection(result)
            warning = LedgerWarning(result, transaction)
            self._warnings.append(warning)
            logger.warning(str(warning))

        return result

    def snapshot(self) -> Dict[int, AccountSnapshot]:
        """Return all accounts (for final output)."""
        return {client_id: ledger.snapshot() for client_id, ledger in self._ledgers.items()}

    def _get_or_create_ledger(self, client_id: int) -> AccountLedger:
        if client_id not in self._ledgers:
            self._ledgers[client_id] = AccountLedger(client_id, self._transaction_log)
        return self._ledgers[client_id]
