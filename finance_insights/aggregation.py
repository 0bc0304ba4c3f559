"""Grouping primitives shared by the analyzers.

Every helper accepts the frame produced by :func:`transactions_to_frame`
and returns a new pandas object; the input frame is never modified.
Period keys are zero-padded ISO strings, so sorting them as strings keeps
them in chronological order.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Iterable

import numpy as np
import pandas as pd

from .models import Transaction

TRANSACTION_COLUMNS = ['id', 'date', 'amount', 'description', 'type', 'category']
FRAME_COLUMNS = TRANSACTION_COLUMNS + ['month', 'week']


def transactions_to_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Convert transaction records into a DataFrame, keeping input order.

    Adds a ``month`` column (``YYYY-MM``) and a ``week`` column holding the
    ISO date of the Sunday on or before the transaction date.
    """
    rows = [t.to_dict() for t in transactions]
    if not rows:
        frame = pd.DataFrame(columns=FRAME_COLUMNS)
        frame['amount'] = frame['amount'].astype(float)
        return frame

    frame = pd.DataFrame(rows, columns=TRANSACTION_COLUMNS)
    frame['amount'] = frame['amount'].astype(float)
    dates = pd.to_datetime(frame['date'], format='%Y-%m-%d')
    frame['month'] = frame['date'].str.slice(0, 7)
    days_since_sunday = (dates.dt.dayofweek + 1) % 7
    week_start = dates - pd.to_timedelta(days_since_sunday, unit='D')
    frame['week'] = week_start.dt.strftime('%Y-%m-%d')
    return frame


def expense_rows(frame: pd.DataFrame) -> pd.DataFrame:
    return frame[frame['type'] == 'expense']


def income_rows(frame: pd.DataFrame) -> pd.DataFrame:
    return frame[frame['type'] == 'income']


def totals(frame: pd.DataFrame) -> Dict[str, float]:
    """Total income and expenses across the whole frame."""
    return {
        'income': float(income_rows(frame)['amount'].sum()),
        'expenses': float(expense_rows(frame)['amount'].sum()),
    }


def monthly_cash_flow(frame: pd.DataFrame) -> pd.DataFrame:
    """Income, expenses and net flow per calendar month, oldest first."""
    if frame.empty:
        return pd.DataFrame(columns=['income', 'expenses', 'net_flow'], dtype=float)

    is_income = frame['type'] == 'income'
    flows = pd.DataFrame({
        'month': frame['month'],
        'income': np.where(is_income, frame['amount'], 0.0),
        'expenses': np.where(is_income, 0.0, frame['amount']),
    })
    monthly = flows.groupby('month')[['income', 'expenses']].sum().sort_index()
    monthly['net_flow'] = monthly['income'] - monthly['expenses']
    return monthly


def weekly_expenses(frame: pd.DataFrame) -> pd.Series:
    """Expense totals per Sunday-started week, oldest first.

    Only weeks that contain at least one expense appear in the result.
    """
    expenses = expense_rows(frame)
    if expenses.empty:
        return pd.Series(dtype=float, name='amount')
    return expenses.groupby('week')['amount'].sum().sort_index()


def category_spending(frame: pd.DataFrame) -> pd.DataFrame:
    """Expense total and percentage share per category, largest first.

    Categories are compared as literal, case-sensitive strings.  Ties keep
    the order in which the categories first appear.
    """
    expenses = expense_rows(frame)
    if expenses.empty:
        return pd.DataFrame(columns=['amount', 'percentage'], dtype=float)

    spending = expenses.groupby('category', sort=False)['amount'].sum().to_frame('amount')
    total = spending['amount'].sum()
    spending['percentage'] = spending['amount'] / total * 100 if total else 0.0
    return spending.sort_values('amount', ascending=False, kind='mergesort')


def monthly_category_spending(frame: pd.DataFrame) -> pd.DataFrame:
    """Month by category expense matrix with absent combinations set to 0.

    Rows are months in ascending order; columns follow the order in which
    each category is first seen when walking the months oldest first.
    """
    expenses = expense_rows(frame)
    if expenses.empty:
        return pd.DataFrame(dtype=float)

    ordered = expenses.sort_values('month', kind='mergesort')
    categories = ordered['category'].drop_duplicates().tolist()
    matrix = ordered.pivot_table(
        index='month',
        columns='category',
        values='amount',
        aggfunc='sum',
        fill_value=0.0,
    )
    matrix = matrix.reindex(columns=categories, fill_value=0.0).sort_index()
    matrix.columns.name = None
    return matrix.astype(float)


def monthly_expenses(frame: pd.DataFrame, limit: int = 6) -> pd.DataFrame:
    """Total expenses for the most recent ``limit`` months with display labels."""
    expenses = expense_rows(frame)
    if expenses.empty:
        return pd.DataFrame(columns=['month', 'label', 'amount'])

    monthly = expenses.groupby('month')['amount'].sum().sort_index().tail(limit).reset_index()
    monthly['label'] = pd.to_datetime(monthly['month'], format='%Y-%m').dt.strftime('%b %Y')
    return monthly[['month', 'label', 'amount']]


def current_month_transactions(frame: pd.DataFrame, as_of: date) -> pd.DataFrame:
    """Rows whose date falls in the calendar month of ``as_of``."""
    return frame[frame['month'] == as_of.strftime('%Y-%m')]
