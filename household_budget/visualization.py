"""Plotly chart builders for the analytics outputs.

Each function takes the records returned by the matching function in
:mod:`household_budget.lib.analytics` and produces an interactive Plotly
figure.  Empty input yields a blank figure titled "No data to display"
rather than an error, so callers can render whatever comes back.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .lib.analytics import (
    BudgetHealth,
    CategoryTrend,
    IncomeTrend,
    MonthComparison,
    NeedsWantsBreakdown,
    SpendingTrend,
    UserSpending,
)
from .months import format_month_display

HEALTH_COLORS = {
    'excellent': '#16a34a',
    'good': '#2563eb',
    'fair': '#f59e0b',
    'poor': '#dc2626',
}


def _empty_figure(title: str = "No data to display") -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title=title)
    return fig


def _frame(records: Sequence) -> pd.DataFrame:
    df = pd.DataFrame([asdict(record) for record in records])
    if 'month' in df.columns:
        df['Month'] = df['month'].map(format_month_display)
    return df


def create_spending_trends_chart(trends: Sequence[SpendingTrend], title: str | None = None) -> go.Figure:
    """Line chart of total, needs and wants spending per month.

    Parameters
    ----------
    trends : sequence of SpendingTrend
        Output of ``calculate_spending_trends``.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Three-line chart, one point per month.
    """
    if not trends:
        return _empty_figure()
    df = _frame(trends).rename(columns={
        'total_spent': 'Total', 'needs_spent': 'Needs', 'wants_spent': 'Wants',
    })
    long_df = df.melt(id_vars='Month', value_vars=['Total', 'Needs', 'Wants'],
                      var_name='Series', value_name='Amount')
    fig = px.line(long_df, x='Month', y='Amount', color='Series', markers=True)
    fig.update_layout(
        title=title or "Spending trends",
        xaxis_title="Month",
        yaxis_title="Amount",
    )
    return fig


def create_income_trends_chart(trends: Sequence[IncomeTrend], title: str | None = None) -> go.Figure:
    """Stacked bar chart of income per month split by source.

    Months without income still appear on the axis.
    """
    if not trends:
        return _empty_figure()
    rows = []
    for trend in trends:
        label = format_month_display(trend.month)
        if not trend.by_source:
            rows.append({'Month': label, 'Source': 'No income', 'Amount': 0.0})
        for source, amount in trend.by_source.items():
            rows.append({'Month': label, 'Source': source, 'Amount': amount})
    fig = px.bar(pd.DataFrame(rows), x='Month', y='Amount', color='Source')
    fig.update_layout(
        barmode='stack',
        title=title or "Income trends",
        xaxis_title="Month",
        yaxis_title="Income",
    )
    return fig


def create_category_trends_chart(trends: Sequence[CategoryTrend], title: str | None = None) -> go.Figure:
    """Multi-line chart with one series per category."""
    rows = [
        {'Month': format_month_display(month), 'Category': trend.category_name, 'Spent': spent}
        for trend in trends
        for month, spent in trend.monthly_data
    ]
    if not rows:
        return _empty_figure()
    fig = px.line(pd.DataFrame(rows), x='Month', y='Spent', color='Category', markers=True)
    fig.update_layout(
        title=title or "Category trends",
        xaxis_title="Month",
        yaxis_title="Spent",
    )
    return fig


def create_month_comparison_chart(rows: Sequence[MonthComparison], title: str | None = None) -> go.Figure:
    """Grouped income/spending bars with the savings rate on a second axis.

    Parameters
    ----------
    rows : sequence of MonthComparison
        Output of ``calculate_month_over_month_comparison``.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Bar and line combination chart.
    """
    if not rows:
        return _empty_figure()
    df = _frame(rows)
    fig = go.Figure()
    fig.add_trace(go.Bar(x=df['Month'], y=df['income'], name='Income'))
    fig.add_trace(go.Bar(x=df['Month'], y=df['spent'], name='Spending'))
    fig.add_trace(go.Scatter(
        x=df['Month'], y=df['savings_rate'], name='Savings rate (%)',
        mode='lines+markers', yaxis='y2',
    ))
    fig.update_layout(
        barmode='group',
        title=title or "Month over month",
        xaxis_title="Month",
        yaxis=dict(title="Amount"),
        yaxis2=dict(title="Savings rate (%)", overlaying='y', side='right'),
    )
    return fig


def create_needs_wants_chart(breakdown: NeedsWantsBreakdown, title: str | None = None) -> go.Figure:
    """Donut chart of needs against wants spending."""
    if breakdown.needs + breakdown.wants <= 0:
        return _empty_figure()
    df = pd.DataFrame({
        'Type': ['Needs', 'Wants'],
        'Amount': [breakdown.needs, breakdown.wants],
    })
    fig = px.pie(df, names='Type', values='Amount', hole=0.4)
    fig.update_layout(title=title or "Needs vs wants")
    return fig


def create_spending_by_user_chart(spending: Sequence[UserSpending], title: str | None = None) -> go.Figure:
    if not spending or sum(s.total_spent for s in spending) <= 0:
        return _empty_figure()
    df = pd.DataFrame({
        'Member': [s.user_name for s in spending],
        'Spent': [s.total_spent for s in spending],
    })
    fig = px.bar(df, x='Member', y='Spent')
    fig.update_layout(
        title=title or "Spending by member",
        xaxis_title="Member",
        yaxis_title="Spent",
    )
    return fig


def create_health_gauge(health: BudgetHealth, title: str | None = None) -> go.Figure:
    """Gauge of the 0-100 health score coloured by its status band."""
    status = getattr(health.status, 'value', health.status)
    fig = go.Figure(go.Indicator(
        mode='gauge+number',
        value=health.score,
        gauge={
            'axis': {'range': [0, 100]},
            'bar': {'color': HEALTH_COLORS.get(status, '#6b7280')},
        },
    ))
    fig.update_layout(title=title or f"Budget health: {status.capitalize()}")
    return fig
