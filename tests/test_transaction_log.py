import sys
import os
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from errors import DuplicateTransactionError
from models import DisputeStatus, LedgerEntry, Transaction, TransactionType
from transaction_log import TransactionLog


def make_entry(client_id: int, transaction_id: int) -> LedgerEntry:
    return LedgerEntry(Transaction(
        transaction_type=TransactionType.DEPOSIT,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=Decimal("100"),
    ))


class TestTransactionLog:
    def setup_method(self):
        self.log = TransactionLog()

    def test_record_and_lookup(self):
        entry = make_entry(1, 1)
        self.log.record(entry)

        assert self.log.lookup(1) is entry
        assert entry.status == DisputeStatus.NORMAL
        assert 1 in self.log
        assert len(self.log) == 1

    def test_lookup_missing_returns_none(self):
        assert self.log.lookup(42) is None
        assert 42 not in self.log

    def test_duplicate_rejected(self):
        self.log.record(make_entry(1, 1))

        with pytest.raises(DuplicateTransactionError) as excinfo:
            self.log.record(make_entry(2, 1))

        assert excinfo.value.transaction_id == 1
        assert self.log.lookup(1).client_id == 1

    def test_set_status(self):
        self.log.record(make_entry(1, 1))
        self.log.set_status(1, DisputeStatus.DISPUTED)
        assert self.log.lookup(1).status == DisputeStatus.DISPUTED

    def test_entries_for_client(self):
        self.log.record(make_entry(1, 1))
        self.log.record(make_entry(2, 2))
        self.log.record(make_entry(1, 3))

        assert [e.transaction_id for e in self.log.entries_for_client(1)] == [1, 3]
        assert [e.transaction_id for e in self.log.entries_for_client(2)] == [2]
        assert self.log.entries_for_client(3) == []
