from typing import Dict, List, Optional

from errors import DuplicateTransactionError
from models import DisputeStatus, LedgerEntry


class TransactionLog:
    """
    Stores every accepted deposit and withdrawal for dispute lookups.
    Entries are keyed by transaction id and are never removed.
    """

    def __init__(self):
        self._entries: Dict[int, LedgerEntry] = {}

    def __contains__(self, transaction_id: int) -> bool:
        return transaction_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, entry: LedgerEntry) -> None:
        """Store a new entry. Raises DuplicateTransactionError if the id is taken."""
        if entry.transaction_id in self._entries:
            raise DuplicateTransactionError(entry.transaction_id)
        self._entries[entry.transaction_id] = entry

    def lookup(self, transaction_id: int) -> Optional[LedgerEntry]:
        """Retrieve stored entry by ID."""
        return self._entries.get(transaction_id)

    def set_status(self, transaction_id: int, status: DisputeStatus) -> None:
        """
        Update the dispute status of an entry in place.
        Caller is responsible for checking the transition is legal.
        """
        self._entries[transaction_id].status = status

    def entries_for_client(self, client_id: int) -> List[LedgerEntry]:
        """Return the entries owned by a client, oldest first."""
        return [entry for entry in self._entries.values() if entry.client_id == client_id]
