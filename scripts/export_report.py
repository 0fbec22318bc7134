#!/usr/bin/env python3
"""Write CSV reports for a month range from the stored ledger."""

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
from household_budget.export import (
    CsvExport,
    analytics_report_csv,
    export_all,
    quick_summary_csv,
    transactions_csv,
    write_export,
)
from household_budget.ledger import Ledger
from household_budget.lib.analytics import calculate_budget_health_score
from household_budget.lib.budgets import calculate_budget_summary, calculate_category_spending
from household_budget.months import month_list, normalize_date_range, preset_range
from household_budget.storage import LedgerStore

logger = logging.getLogger(__name__)

MODES = ('transactions', 'analytics', 'all', 'summary')


def build_exports(ledger: Ledger, start: str, end: str, mode: str) -> List[CsvExport]:
    period = normalize_date_range(start, end)
    start, end = period['start'], period['end']

    if mode == 'transactions':
        return [transactions_csv(ledger.expenses, ledger.incomes, start, end)]
    if mode == 'summary':
        return [quick_summary_csv(
            ledger.expenses, ledger.incomes, month_list(start, end), ledger.categories,
        )]

    summary = calculate_budget_summary(
        ledger.incomes, ledger.expenses, ledger.monthly_categories, ledger.savings_contributions, end,
    )
    health = calculate_budget_health_score(
        summary, calculate_category_spending(ledger.monthly_categories, ledger.expenses, end),
    )
    if mode == 'analytics':
        return [analytics_report_csv(ledger.expenses, ledger.incomes, start, end, health, ledger.users)]
    return export_all(ledger.expenses, ledger.incomes, start, end, health, ledger.users)


def main(argv: Optional[List[str]] = None) -> int:
    default_range = preset_range('3months')
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument('--start', default=default_range['start'], help='First month (YYYY-MM)')
    parser.add_argument('--end', default=default_range['end'], help='Last month (YYYY-MM)')
    parser.add_argument('--mode', choices=MODES, default='all')
    parser.add_argument('--output', type=Path, default=config.REPORTS_DIR, help='Directory for the CSV files')
    parser.add_argument('--store-dir', type=Path, default=None, help='Record store directory')
    parser.add_argument('--key', default=config.STORAGE_KEY, help='Ledger record key')
    parser.add_argument('-v', '--verbose', action='store_true')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    ledger = LedgerStore(args.store_dir).load(args.key)
    try:
        exports = build_exports(ledger, args.start, args.end, args.mode)
    except ValueError as e:
        logger.error("Cannot build report: %s", e)
        return 2

    for export in exports:
        try:
            path = write_export(export, args.output)
        except OSError as e:
            logger.error("Failed to write %s: %s", export.filename, e)
            return 1
        print(f"Wrote {path}")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
