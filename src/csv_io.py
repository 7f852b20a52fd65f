import csv
import re
import sys
from decimal import Decimal, InvalidOperation, ROUND_DOWN
from typing import Dict, Iterable, Iterator, Mapping, Optional, TextIO

from errors import MalformedRecordError
from models import LEDGER_CONTEXT, AccountSnapshot, Transaction, TransactionType

AMOUNT_PRECISION = Decimal("0.0001")
AMOUNT_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)")
CLIENT_ID_MAX = 2**16 - 1
TRANSACTION_ID_MAX = 2**32 - 1

OUTPUT_HEADER = ["client", "available", "held", "total", "locked"]


def read_transactions(filepath: str) -> Iterator[Transaction]:
    """Lazily read transactions from a CSV file. Raises OSError if it cannot be opened."""
    # utf-8-sig drops a leading byte order mark that would otherwise end up in the first header
    with open(filepath, "r", encoding="utf-8-sig", newline="") as f:
        yield from parse_transactions(f)


def parse_transactions(lines: Iterable[str]) -> Iterator[Transaction]:
    """
    Parse CSV text with a `type, client, tx, amount` header.
    Stops with MalformedRecordError at the first row that cannot be parsed.
    """
    reader = csv.DictReader(lines)
    try:
        for row in reader:
            yield parse_row(row, reader.line_num)
    except UnicodeDecodeError as e:
        raise MalformedRecordError(reader.line_num + 1, f"undecodable text: {e.reason}") from e
    except csv.Error as e:
        raise MalformedRecordError(reader.line_num, f"invalid CSV: {e}") from e


def parse_row(row: Dict[Optional[str], object], line_number: int) -> Transaction:
    """
    Parse CSV row into Transaction.
    Every row must carry all four fields; the amount may be left empty
    only for dispute, resolve and chargeback.
    """
    if None in row:
        raise MalformedRecordError(line_number, "too many fields")
    if None in row.values():
        raise MalformedRecordError(line_number, "missing field")

    normalized = {k.strip().lower(): v.strip() for k, v in row.items()}

    try:
        transaction_type = TransactionType(normalized["type"].lower())
        client_id = _parse_id(normalized["client"], CLIENT_ID_MAX)
        transaction_id = _parse_id(normalized["tx"], TRANSACTION_ID_MAX)
        amount = _parse_amount(normalized["amount"])
    except KeyError as e:
        raise MalformedRecordError(line_number, f"missing column {e}") from e
    except ValueError as e:
        raise MalformedRecordError(line_number, str(e)) from e

    if amount is None and transaction_type.creates_entry:
        raise MalformedRecordError(line_number, f"{transaction_type.value} requires an amount")

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


def _parse_id(value: str, maximum: int) -> int:
    # int() would also accept signs, underscores and non-ASCII digits
    if not (value.isascii() and value.isdigit()):
        raise ValueError(f"invalid id {value!r}")
    parsed = int(value)
    if parsed > maximum:
        raise ValueError(f"id {parsed} out of range")
    return parsed


def _parse_amount(value: str) -> Optional[Decimal]:
    """Parse an amount truncated to 4 decimal places. Empty means no amount."""
    if not value:
        return None
    # Decimal() would also accept exponents, underscores, NaN and Infinity
    if not (value.isascii() and AMOUNT_PATTERN.fullmatch(value)):
        raise ValueError(f"invalid amount {value!r}")
    try:
        return Decimal(value).quantize(AMOUNT_PRECISION, rounding=ROUND_DOWN, context=LEDGER_CONTEXT)
    except InvalidOperation as e:
        raise ValueError(f"amount {value!r} out of range") from e


def format_amount(value: Decimal) -> str:
    """Format decimal with exactly 4 decimal places."""
    return f"{value.quantize(AMOUNT_PRECISION, context=LEDGER_CONTEXT):f}"


def write_accounts(accounts: Mapping[int, AccountSnapshot], stream: TextIO = sys.stdout) -> None:
    """Write final account states as CSV, ordered by client id."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_HEADER)
    for client_id in sorted(accounts.keys()):
        account = accounts[client_id]
        writer.writerow([
            client_id,
            format_amount(account.available),
            format_amount(account.held),
            format_amount(account.total),
            str(account.locked).lower(),
        ])
