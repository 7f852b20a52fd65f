import sys
import logging
from typing import List, Optional

from csv_io import write_accounts
from errors import InputError
from ledger_engine import LedgerEngine

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Usage: payments-ledger <input.csv>", file=sys.stderr)
        return 1

    filepath = args[0]
    engine = LedgerEngine()
    try:
        accounts = engine.process_file(filepath)
    except OSError as e:
        logger.error(f"Cannot read {filepath}: {e}")
        return 1
    except InputError as e:
        logger.error(f"Aborting, malformed input in {filepath}: {e}")
        return 1

    write_accounts(accounts, sys.stdout)

    print(
        f"Processed: {engine.stats.processed}, "
        f"Rejected: {engine.stats.rejected}",
        file=sys.stderr
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
