"""CSV report builders.

Each builder returns a :class:`CsvExport` holding the suggested filename and
the CSV text; nothing is written until :func:`write_export` is called.
Tables are rendered with :meth:`pandas.DataFrame.to_csv`, so quoting follows
the csv module's minimal quoting.  Lines end in ``\\n`` and the text carries
no trailing newline.

Export entry points accept their month range in either order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from .config import REPORTS_DIR
from .lib.analytics import (
    BudgetHealth,
    calculate_category_averages,
    calculate_income_trends,
    calculate_spending_by_user,
    calculate_spending_trends,
)
from .lib.common.file_operations import ensure_directory
from .lib.common.formatting import format_amount, format_percentage
from .models import Category, Expense, Income, Member
from .months import month_list, normalize_date_range

logger = logging.getLogger(__name__)

TRANSACTION_HEADERS = [
    'Date', 'Type', 'Amount', 'Category', 'Member', 'Source/Category', 'Needs/Wants', 'Notes',
]
SUMMARY_HEADERS = ['Metric', 'Value']


@dataclass(frozen=True)
class CsvExport:
    filename: str
    content: str


def generate_csv(headers: Sequence[str], rows: Iterable[Sequence]) -> str:
    """Render a header row and data rows as CSV text.

    ``None`` cells are written empty.

    Example:
        >>> generate_csv(['Metric', 'Value'], [['Food, groceries', '12.00']])
        'Metric,Value\\n"Food, groceries",12.00'
    """
    df = pd.DataFrame(list(rows), columns=list(headers), dtype=object)
    text = df.to_csv(index=False, lineterminator='\n')
    return text[:-1] if text.endswith('\n') else text


def _section(title: str, headers: Sequence[str], rows: Iterable[Sequence]) -> str:
    return title + '\n' + generate_csv(headers, rows)


def _rate(numerator: float, denominator: float) -> str:
    """One-decimal percentage, or ``0`` when there is nothing to divide by."""
    if denominator > 0:
        return format_percentage(numerator / denominator * 100)
    return '0'


def _in_months(records, months: Sequence[str]) -> list:
    wanted = set(months)
    return [r for r in records if r.date[:7] in wanted]


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


def transactions_csv(
    expenses: Iterable[Expense],
    incomes: Iterable[Income],
    start_month: str,
    end_month: str,
) -> CsvExport:
    """One row per income and expense dated inside the range, newest first.

    Rows sharing a date keep expenses ahead of incomes, each in input
    order.
    """
    period = normalize_date_range(start_month, end_month)
    months = month_list(period['start'], period['end'])

    rows: List[List[str]] = []
    for expense in _in_months(expenses, months):
        rows.append([
            expense.date,
            'Expense',
            format_amount(expense.amount),
            expense.category_name,
            expense.user_name,
            expense.category_name,
            getattr(expense.needs_or_wants, 'value', expense.needs_or_wants),
            expense.notes or '',
        ])
    for income in _in_months(incomes, months):
        rows.append([
            income.date,
            'Income',
            format_amount(income.amount),
            income.source_name,
            income.user_name,
            income.source_name,
            '',
            income.notes or '',
        ])
    rows.sort(key=lambda row: row[0], reverse=True)

    return CsvExport(
        filename=f"transactions-{period['start']}-to-{period['end']}.csv",
        content=generate_csv(TRANSACTION_HEADERS, rows),
    )


# ---------------------------------------------------------------------------
# Analytics report
# ---------------------------------------------------------------------------


def analytics_report_csv(
    expenses: Sequence[Expense],
    incomes: Sequence[Income],
    start_month: str,
    end_month: str,
    budget_health: Optional[BudgetHealth] = None,
    users: Sequence[Member] = (),
) -> CsvExport:
    """Multi-section analytics report.

    Sections are separated by a blank line and each starts with a title
    line followed by its own header row:

    - ``SUMMARY STATISTICS``: totals, savings rate, monthly averages and
      the health score when ``budget_health`` is given
    - ``MONTHLY BREAKDOWN``: one row per month of the range
    - ``CATEGORY SPENDING AVERAGES``: categories by total spend
    - ``SPENDING BY MEMBER``: only for households with more than one member
    - ``NEEDS VS WANTS BREAKDOWN``
    """
    period = normalize_date_range(start_month, end_month)
    start, end = period['start'], period['end']
    months = month_list(start, end)

    spending = calculate_spending_trends(expenses, start, end)
    income = calculate_income_trends(incomes, start, end)
    averages = calculate_category_averages(expenses, start, end)

    total_income = sum(t.total_income for t in income)
    total_spending = sum(t.total_spent for t in spending)
    total_saved = total_income - total_spending
    savings_rate = _rate(total_saved, total_income)

    summary_rows = [
        ['Total Income', format_amount(total_income)],
        ['Total Spending', format_amount(total_spending)],
        ['Total Saved', format_amount(total_saved)],
        ['Savings Rate', f"{savings_rate}%"],
        ['Average Monthly Income', format_amount(total_income / len(months))],
        ['Average Monthly Spending', format_amount(total_spending / len(months))],
    ]
    if budget_health is not None:
        summary_rows.append(['Budget Health Score', str(budget_health.score)])
        summary_rows.append(['Budget Health Status', getattr(budget_health.status, 'value', budget_health.status)])
    sections = [_section('SUMMARY STATISTICS', SUMMARY_HEADERS, summary_rows)]

    monthly_rows = []
    for spend, earn in zip(spending, income):
        saved = earn.total_income - spend.total_spent
        monthly_rows.append([
            spend.month,
            format_amount(earn.total_income),
            format_amount(spend.total_spent),
            format_amount(saved),
            _rate(saved, earn.total_income),
        ])
    sections.append(_section(
        'MONTHLY BREAKDOWN',
        ['Month', 'Income', 'Spending', 'Saved', 'Savings Rate (%)'],
        monthly_rows,
    ))

    sections.append(_section(
        'CATEGORY SPENDING AVERAGES',
        ['Category', 'Total Spent', 'Average Per Month', 'Months Data'],
        [
            [
                average.category_name,
                format_amount(average.total_spent),
                format_amount(average.avg_spent),
                str(average.month_count),
            ]
            for average in averages
        ],
    ))

    users = list(users)
    if len(users) > 1:
        sections.append(_section(
            'SPENDING BY MEMBER',
            ['Member', 'Total Spent', 'Percentage (%)'],
            [
                [member.user_name, format_amount(member.total_spent), format_percentage(member.percentage)]
                for member in calculate_spending_by_user(expenses, users, start, end)
            ],
        ))

    needs = sum(t.needs_spent for t in spending)
    wants = sum(t.wants_spent for t in spending)
    sections.append(_section(
        'NEEDS VS WANTS BREAKDOWN',
        ['Category', 'Amount', 'Percentage (%)'],
        [
            ['Needs', format_amount(needs), _rate(needs, needs + wants)],
            ['Wants', format_amount(wants), _rate(wants, needs + wants)],
        ],
    ))

    return CsvExport(
        filename=f"analytics-report-{start}-to-{end}.csv",
        content='\n\n'.join(sections),
    )


def export_all(
    expenses: Sequence[Expense],
    incomes: Sequence[Income],
    start_month: str,
    end_month: str,
    budget_health: Optional[BudgetHealth] = None,
    users: Sequence[Member] = (),
) -> List[CsvExport]:
    """Transactions export followed by the analytics report."""
    return [
        transactions_csv(expenses, incomes, start_month, end_month),
        analytics_report_csv(expenses, incomes, start_month, end_month, budget_health, users),
    ]


# ---------------------------------------------------------------------------
# Quick summary
# ---------------------------------------------------------------------------


def quick_summary_csv(
    expenses: Iterable[Expense],
    incomes: Iterable[Income],
    months: Sequence[str],
    categories: Sequence[Category] = (),
    today: Optional[str] = None,
) -> CsvExport:
    """Short Metric/Value summary over an explicit list of months.

    When ``categories`` is non-empty the five categories with the highest
    spend, grouped by category name, are appended after a blank row.
    """
    months = list(months)
    if not months:
        raise ValueError("At least one month is required for a summary export")
    period_expenses = _in_months(expenses, months)
    total_income = sum(i.amount for i in _in_months(incomes, months))
    total_expenses = sum(e.amount for e in period_expenses)

    rows: List[List[str]] = [
        ['Time Period', f"{months[0]} to {months[-1]}"],
        ['Total Income', format_amount(total_income)],
        ['Total Expenses', format_amount(total_expenses)],
        ['Net Savings', format_amount(total_income - total_expenses)],
        ['Month Count', str(len(months))],
    ]

    if categories:
        rows.append(['', ''])
        rows.append(['Top 5 Categories', ''])
        totals: dict = {}
        for expense in period_expenses:
            totals[expense.category_name] = totals.get(expense.category_name, 0.0) + expense.amount
        ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)[:5]
        rows.extend([name, format_amount(amount)] for name, amount in ranked)

    today = today or datetime.now(timezone.utc).date().isoformat()
    return CsvExport(
        filename=f"budget-summary-{today}.csv",
        content=generate_csv(SUMMARY_HEADERS, rows),
    )


def write_export(export: CsvExport, directory: Optional[Path] = None) -> Path:
    """Write an export into ``directory`` (the reports directory by default).

    Raises:
        OSError: If the file cannot be written
    """
    target_dir = ensure_directory(Path(directory) if directory else REPORTS_DIR)
    target = target_dir / export.filename
    target.write_text(export.content, encoding='utf-8')
    logger.info("Wrote %s (%d bytes)", target, len(export.content.encode('utf-8')))
    return target
