from dataclasses import dataclass

from models import ProcessingResult, Transaction


class LedgerError(Exception):
    """Base class for errors raised by the payments ledger."""


class DuplicateTransactionError(LedgerError):
    def __init__(self, transaction_id: int):
        super().__init__(f"transaction {transaction_id} already recorded")
        self.transaction_id = transaction_id


class InputError(LedgerError):
    """
    Fatal input failure. Processing stops at the offending record and
    no output is produced.
    """


class MalformedRecordError(InputError):
    def __init__(self, line_number: int, reason: str):
        super().__init__(f"line {line_number}: {reason}")
        self.line_number = line_number
        self.reason = reason


@dataclass(frozen=True)
class LedgerWarning:
    """A recoverable rejection: the record was skipped and processing went on."""

    result: ProcessingResult
    transaction: Transaction

    def __str__(self) -> str:
        return (
            f"{self.transaction.transaction_type.value} tx {self.transaction.transaction_id} "
            f"for client {self.transaction.client_id} rejected: {self.result.value}"
        )
