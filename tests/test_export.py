from __future__ import annotations

import io

import pandas as pd

from household_budget.export import (
    TRANSACTION_HEADERS,
    CsvExport,
    analytics_report_csv,
    export_all,
    generate_csv,
    quick_summary_csv,
    transactions_csv,
    write_export,
)
from household_budget.lib.analytics import BudgetHealth, HealthStatus
from household_budget.models import Category, Member

from conftest import make_expense, make_income


def sample_expenses():
    return [
        make_expense('e1', 85.0, '2025-01-15', notes='Milk, eggs'),
        make_expense('e2', 40.0, '2025-02-10', 'c2', 'Fun', 'wants', 'u2', 'Sam', notes='say "hi"'),
        make_expense('e3', 12.0, '2024-12-31'),
    ]


def sample_incomes():
    return [
        make_income('i1', 1000.0, '2025-01-15'),
        make_income('i2', 500.0, '2025-02-01', user_id='u2', user_name='Sam'),
    ]


def test_generate_csv_quotes_only_when_needed() -> None:
    content = generate_csv(
        ['Name', 'Notes'],
        [['plain', 'a,b'], ['quoted', 'say "hi"'], ['multi', 'two\nlines'], ['missing', None]],
    )
    assert content == (
        'Name,Notes\n'
        'plain,"a,b"\n'
        'quoted,"say ""hi"""\n'
        'multi,"two\nlines"\n'
        'missing,'
    )


def test_generate_csv_has_no_trailing_newline() -> None:
    assert generate_csv(['A', 'B'], [['1', '2']]) == 'A,B\n1,2'
    assert generate_csv(['A', 'B'], []) == 'A,B'


def test_transactions_export_reads_back_with_pandas() -> None:
    expenses = [make_expense('e1', 20.0, '2025-01-03', notes='line one\nline two, with comma')]
    export = transactions_csv(expenses, [], '2025-01', '2025-01')

    df = pd.read_csv(io.StringIO(export.content), keep_default_na=False)

    assert list(df.columns) == TRANSACTION_HEADERS
    assert len(df) == 1
    assert df.loc[0, 'Notes'] == 'line one\nline two, with comma'


def test_transactions_export() -> None:
    export = transactions_csv(sample_expenses(), sample_incomes(), '2025-01', '2025-02')

    assert export.filename == 'transactions-2025-01-to-2025-02.csv'
    assert export.content.split('\n') == [
        'Date,Type,Amount,Category,Member,Source/Category,Needs/Wants,Notes',
        '2025-02-10,Expense,40.00,Fun,Sam,Fun,wants,"say ""hi"""',
        '2025-02-01,Income,500.00,Salary,Sam,Salary,,',
        '2025-01-15,Expense,85.00,Groceries,Alex,Groceries,needs,"Milk, eggs"',
        '2025-01-15,Income,1000.00,Salary,Alex,Salary,,',
    ]


def test_transactions_export_accepts_reversed_range() -> None:
    export = transactions_csv(sample_expenses(), sample_incomes(), '2025-02', '2025-01')
    assert export.filename == 'transactions-2025-01-to-2025-02.csv'


def test_analytics_report_sections() -> None:
    users = [Member(id='u1', name='Alex', email='a@x.io'), Member(id='u2', name='Sam', email='s@x.io')]
    health = BudgetHealth(score=85, status=HealthStatus.EXCELLENT, factors=[])

    export = analytics_report_csv(sample_expenses(), sample_incomes(), '2025-01', '2025-02', health, users)
    lines = export.content.split('\n')

    assert export.filename == 'analytics-report-2025-01-to-2025-02.csv'
    assert lines[:10] == [
        'SUMMARY STATISTICS',
        'Metric,Value',
        'Total Income,1500.00',
        'Total Spending,125.00',
        'Total Saved,1375.00',
        'Savings Rate,91.7%',
        'Average Monthly Income,750.00',
        'Average Monthly Spending,62.50',
        'Budget Health Score,85',
        'Budget Health Status,excellent',
    ]
    breakdown = lines.index('MONTHLY BREAKDOWN')
    assert lines[breakdown - 1] == ''
    assert lines[breakdown + 1:breakdown + 4] == [
        'Month,Income,Spending,Saved,Savings Rate (%)',
        '2025-01,1000.00,85.00,915.00,91.5',
        '2025-02,500.00,40.00,460.00,92.0',
    ]
    averages = lines.index('CATEGORY SPENDING AVERAGES')
    assert lines[averages + 2] == 'Groceries,85.00,85.00,1'
    members = lines.index('SPENDING BY MEMBER')
    assert lines[members + 2:members + 4] == ['Alex,85.00,68.0', 'Sam,40.00,32.0']
    assert lines[-3:] == ['Category,Amount,Percentage (%)', 'Needs,85.00,68.0', 'Wants,40.00,32.0']


def test_analytics_report_without_income_or_members() -> None:
    export = analytics_report_csv([], [], '2025-01', '2025-01', None, [])
    lines = export.content.split('\n')

    assert 'Savings Rate,0%' in lines
    assert '2025-01,0.00,0.00,0.00,0' in lines
    assert 'SPENDING BY MEMBER' not in lines
    assert not any(line.startswith('Budget Health') for line in lines)
    assert lines[-2:] == ['Needs,0.00,0', 'Wants,0.00,0']


def test_export_all_returns_both_reports() -> None:
    exports = export_all(sample_expenses(), sample_incomes(), '2025-01', '2025-02')
    assert [e.filename for e in exports] == [
        'transactions-2025-01-to-2025-02.csv',
        'analytics-report-2025-01-to-2025-02.csv',
    ]


def test_quick_summary() -> None:
    categories = [Category(id='c1', name='Groceries', monthly_budget=100.0)]

    export = quick_summary_csv(sample_expenses(), sample_incomes(), ['2025-01', '2025-02'],
                               categories, today='2025-03-01')

    assert export.filename == 'budget-summary-2025-03-01.csv'
    assert export.content.split('\n') == [
        'Metric,Value',
        'Time Period,2025-01 to 2025-02',
        'Total Income,1500.00',
        'Total Expenses,125.00',
        'Net Savings,1375.00',
        'Month Count,2',
        ',',
        'Top 5 Categories,',
        'Groceries,85.00',
        'Fun,40.00',
    ]


def test_write_export(tmp_path) -> None:
    path = write_export(CsvExport('report.csv', 'A,B\n1,2'), tmp_path / 'reports')
    assert path.read_text(encoding='utf-8') == 'A,B\n1,2'
