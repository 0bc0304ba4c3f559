"""Plotly visualisation helpers for analyzer output.

Each function accepts data produced by :mod:`aggregation` or by
:class:`~finance_insights.analytics.FinanceInsightsAnalyzer` and returns a
``plotly.graph_objects.Figure``.  Rendering is left to the host
application.  Empty input always yields an empty figure titled
"No data to display" so callers never have to special-case it.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .aggregation import category_spending, current_month_transactions, expense_rows, monthly_expenses
from .models import Budget, SpendingPrediction

DEFAULT_CATEGORY_COLOR = '#85C1E9'
CATEGORY_COLORS: Dict[str, str] = {
    'Food & Dining': '#FF6B6B',
    'Transportation': '#4ECDC4',
    'Shopping': '#45B7D1',
    'Entertainment': '#96CEB4',
    'Bills & Utilities': '#FFEAA7',
    'Healthcare': '#DDA0DD',
    'Travel': '#98D8C8',
    'Education': '#F7DC6F',
    'Personal Care': '#BB8FCE',
    'Investment': '#8E44AD',
    'Insurance': '#E74C3C',
    'Taxes': '#34495E',
    'Subscriptions': '#16A085',
    'Other': '#85C1E9',
    'Salary': '#2ECC71',
    'Freelance': '#3498DB',
    'Business': '#E67E22',
    'Rental': '#27AE60',
    'Dividend': '#9B59B6',
    'Bonus': '#F39C12',
    'Gift': '#1ABC9C',
}


def _empty_figure(title: str = "No data to display") -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title=title)
    return fig


def category_color(category: str) -> str:
    return CATEGORY_COLORS.get(category, DEFAULT_CATEGORY_COLOR)


def create_monthly_expense_chart(frame: pd.DataFrame, months: int = 6, title: str | None = None) -> go.Figure:
    """Bar chart of total expenses for the most recent months.

    Parameters
    ----------
    frame : pandas.DataFrame
        Transaction frame from :func:`aggregation.transactions_to_frame`.
    months : int
        Number of trailing months to show.
    title : str, optional
        Chart title.
    """
    monthly = monthly_expenses(frame, limit=months)
    if monthly.empty:
        return _empty_figure()
    fig = px.bar(monthly, x='label', y='amount')
    fig.update_layout(
        title=title or 'Monthly expenses',
        xaxis_title='Month',
        yaxis_title='Amount',
    )
    return fig


def create_category_pie_chart(frame: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Pie chart of expense share per category using the category palette."""
    spending = category_spending(frame)
    if spending.empty:
        return _empty_figure()
    df = spending.reset_index()
    df.columns = ['Category', 'Amount', 'Percentage']
    fig = px.pie(
        df,
        names='Category',
        values='Amount',
        color='Category',
        color_discrete_map={c: category_color(c) for c in df['Category']},
    )
    fig.update_layout(title=title or 'Spending by category')
    return fig


def create_prediction_chart(predictions: Sequence[SpendingPrediction], title: str | None = None) -> go.Figure:
    """Bar chart of predicted next-period spending coloured by trend."""
    if not predictions:
        return _empty_figure()
    df = pd.DataFrame([
        {'Category': p.category, 'Predicted': p.predicted_amount, 'Trend': p.trend}
        for p in predictions
    ])
    fig = px.bar(
        df,
        x='Category',
        y='Predicted',
        color='Trend',
        color_discrete_map={'increasing': '#E74C3C', 'decreasing': '#2ECC71', 'stable': '#3498DB'},
    )
    fig.update_layout(
        title=title or 'Next month spending forecast',
        xaxis_title='Category',
        yaxis_title='Predicted amount',
    )
    return fig


def create_budget_comparison_chart(
    frame: pd.DataFrame,
    budgets: Iterable[Budget],
    as_of,
    title: str | None = None,
) -> go.Figure:
    """Grouped bars of budget versus actual spending for the month of ``as_of``."""
    budgets = list(budgets)
    if not budgets:
        return _empty_figure()
    month_expenses = expense_rows(current_month_transactions(frame, as_of))
    rows = []
    for budget in budgets:
        spent = float(month_expenses.loc[month_expenses['category'] == budget.category, 'amount'].sum())
        rows.append({'Category': budget.category, 'Budget': budget.amount, 'Actual': spent})
    df = pd.DataFrame(rows)
    fig = go.Figure()
    fig.add_trace(go.Bar(name='Budget', x=df['Category'], y=df['Budget']))
    fig.add_trace(go.Bar(name='Actual', x=df['Category'], y=df['Actual']))
    fig.update_layout(
        barmode='group',
        title=title or 'Budget vs actual',
        xaxis_title='Category',
        yaxis_title='Amount',
    )
    return fig


def create_health_gauge(health: Dict[str, Any], title: str | None = None) -> go.Figure:
    """Gauge for the overall score returned by ``calculate_health_metrics``."""
    if not health.get('metrics'):
        return _empty_figure()
    fig = go.Figure(go.Indicator(
        mode='gauge+number',
        value=round(float(health['overall']), 1),
        gauge={
            'axis': {'range': [0, 100]},
            'steps': [
                {'range': [0, 40], 'color': '#E74C3C'},
                {'range': [40, 60], 'color': '#E67E22'},
                {'range': [60, 80], 'color': '#F7DC6F'},
                {'range': [80, 100], 'color': '#2ECC71'},
            ],
        },
    ))
    fig.update_layout(title=title or 'Financial health score')
    return fig
