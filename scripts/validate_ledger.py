#!/usr/bin/env python3
"""Check a stored ledger record for invariant violations."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from household_budget import config
from household_budget.ledger import Ledger, check_invariants
from household_budget.storage import LedgerStore


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument('--store-dir', type=Path, default=None, help='Record store directory')
    parser.add_argument('--key', default=config.STORAGE_KEY, help='Ledger record key')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format='%(levelname)s %(name)s: %(message)s')

    store = LedgerStore(args.store_dir)
    data = store.read(args.key)
    if data is None:
        print(f"No readable ledger record at {store.get_path(args.key)}")
        return 1

    try:
        ledger = Ledger.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        print("Ledger validation failed:")
        print(f"  - record does not describe a ledger: {e}")
        return 1

    problems = check_invariants(ledger)
    if problems:
        print("Ledger validation failed:")
        for problem in problems:
            print(f"  - {problem}")
        return 1

    print("Ledger validated successfully.")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
