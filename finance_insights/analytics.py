"""Rule-based spending insights, forecasts and anomaly checks.

:class:`FinanceInsightsAnalyzer` works on a snapshot of the caller's
transactions and budgets.  The three public operations
(:meth:`~FinanceInsightsAnalyzer.generate_insights`,
:meth:`~FinanceInsightsAnalyzer.predict_next_period` and
:meth:`~FinanceInsightsAnalyzer.detect_anomalies`) are pure functions of
that snapshot: nothing is cached and the inputs are never modified, so the
same analyzer can be queried repeatedly or from several threads.

Every analyzer degrades to an empty result when its data gate is not met;
none of them raise on thin or degenerate history.
"""

from __future__ import annotations

import logging
import math
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pandas as pd

from .aggregation import (
    category_spending,
    current_month_transactions,
    expense_rows,
    monthly_cash_flow,
    monthly_category_spending,
    totals,
    transactions_to_frame,
    weekly_expenses,
)
from .config import get_analytics_config
from .formatting import format_currency, format_percentage, format_signed_currency
from .models import AnomalyDetection, Budget, Insight, SpendingPrediction, Transaction
from .trends import linear_trend

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class FinanceInsightsAnalyzer:
    """Personal finance insights over an in-memory transaction snapshot."""

    def __init__(
        self,
        transactions: Iterable[Transaction],
        budgets: Iterable[Budget] = (),
        *,
        as_of: Optional[date] = None,
        settings: Optional[Dict[str, Dict[str, Any]]] = None,
    ):
        """Snapshot the inputs.

        Args:
            transactions: Transactions in stored order.  The order matters for
                anomaly detection, which only inspects the most recent entries.
            budgets: Monthly category budgets.
            as_of: The day treated as "today" when looking at the current
                month.  Defaults to :meth:`date.today`.
            settings: Per-section threshold overrides, see
                :func:`finance_insights.config.get_analytics_config`.
        """
        self.transactions: Tuple[Transaction, ...] = tuple(transactions)
        self.budgets: Tuple[Budget, ...] = tuple(budgets)
        self.as_of = as_of or date.today()
        self.settings = get_analytics_config(settings)
        self.data = transactions_to_frame(self.transactions)

    # ------------------------------------------------------------------
    # Insights
    # ------------------------------------------------------------------
    def generate_insights(self) -> List[Insight]:
        """Run every insight analyzer and return the most confident results."""
        if not self.transactions:
            return []

        insights: List[Insight] = []
        insights.extend(self.analyze_cash_flow())
        insights.extend(self.analyze_spending_patterns())
        insights.extend(self.analyze_budget_optimization())
        insights.extend(self.analyze_seasonal_spending())
        insights.extend(self.calculate_financial_health_score())

        ranked = sorted(insights, key=lambda insight: insight.confidence, reverse=True)
        return ranked[: self.settings['limits']['max_insights']]

    def analyze_cash_flow(self) -> List[Insight]:
        """Compare net flow of the two most recent months."""
        cfg = self.settings['cash_flow']
        monthly = monthly_cash_flow(self.data)
        if len(monthly) < cfg['min_months']:
            logger.debug("cash flow: %d month(s) of history, need %d", len(monthly), cfg['min_months'])
            return []

        latest = float(monthly['net_flow'].iloc[-1])
        previous = float(monthly['net_flow'].iloc[-2])
        if previous == 0:
            logger.debug("cash flow: previous month net flow is zero, skipping")
            return []

        change = latest - previous
        change_pct = abs(change) * 100 / abs(previous)
        if change_pct <= cfg['change_pct']:
            return []

        direction = 'improved' if change > 0 else 'declined'
        return [Insight(
            id='cashflow-change',
            type='success' if change > 0 else 'warning',
            title='Significant Cash Flow Change',
            message=(
                f"Your cash flow {direction} by {format_percentage(change_pct)} this month "
                f"({format_signed_currency(change)})"
            ),
            confidence=cfg['confidence'],
            actionable=change < 0,
            impact='high' if change_pct > cfg['high_impact_pct'] else 'medium',
        )]

    def analyze_spending_patterns(self) -> List[Insight]:
        """Spending concentration and weekly spike checks."""
        return self.analyze_concentration() + self.analyze_spending_spike()

    def analyze_concentration(self) -> List[Insight]:
        cfg = self.settings['concentration']
        spending = category_spending(self.data)
        if spending.empty:
            return []

        top_category = spending.index[0]
        share = float(spending['percentage'].iloc[0])
        if share <= cfg['share_pct']:
            return []

        return [Insight(
            id='dominant-category',
            type='info',
            title='Spending Concentration Alert',
            message=(
                f"{top_category} accounts for {format_percentage(share)} of your spending. "
                "Consider diversifying your expenses."
            ),
            confidence=cfg['confidence'],
            actionable=True,
            category=top_category,
            impact='medium',
        )]

    def analyze_spending_spike(self) -> List[Insight]:
        """Flag a latest week that is well above the average of earlier weeks."""
        cfg = self.settings['spike']
        weekly = weekly_expenses(self.data)
        if len(weekly) < cfg['min_weeks']:
            logger.debug("spending spike: %d week(s) of history, need %d", len(weekly), cfg['min_weeks'])
            return []

        average = float(weekly.iloc[:-1].mean())
        current = float(weekly.iloc[-1])
        if average <= 0 or current <= average * cfg['multiplier']:
            return []

        excess_pct = (current / average - 1) * 100
        return [Insight(
            id='spending-spike',
            type='warning',
            title='Unusual Spending Spike Detected',
            message=(
                f"This week's spending ({format_currency(current)}) is "
                f"{format_currency(current - average)} ({format_percentage(excess_pct)}) "
                f"higher than your weekly average of {format_currency(average)}."
            ),
            confidence=cfg['confidence'],
            actionable=True,
            impact='high',
        )]

    def analyze_budget_optimization(self) -> List[Insight]:
        """Suggest budgeting, or point out budgets that are barely used this month."""
        cfg = self.settings['budget']
        if not self.budgets:
            return [Insight(
                id='no-budgets',
                type='info',
                title='Budget Optimization Opportunity',
                message=(
                    'Setting up budgets could help you save an estimated 15-20% on monthly '
                    'expenses based on your spending patterns.'
                ),
                confidence=cfg['no_budget_confidence'],
                actionable=True,
                impact='high',
            )]

        month_expenses = expense_rows(current_month_transactions(self.data, self.as_of))
        insights: List[Insight] = []
        for budget in self.budgets:
            if budget.amount <= 0:
                continue
            spent = float(month_expenses.loc[month_expenses['category'] == budget.category, 'amount'].sum())
            utilization = spent / budget.amount
            if utilization >= cfg['underused_ratio']:
                continue
            insights.append(Insight(
                id=f'underutilized-budget-{budget.category}',
                type='success',
                title='Budget Optimization Opportunity',
                message=(
                    f"You're only using {format_percentage(utilization * 100)} of your "
                    f"{budget.category} budget. Consider reallocating "
                    f"{format_currency(budget.amount - spent)} to other categories."
                ),
                confidence=cfg['confidence'],
                actionable=True,
                category=budget.category,
                impact='medium',
            ))
        return insights

    def analyze_seasonal_spending(self) -> List[Insight]:
        """Watch-list categories whose latest month is well above their norm."""
        cfg = self.settings['seasonal']
        matrix = monthly_category_spending(self.data)
        if len(matrix) < cfg['min_months']:
            logger.debug("seasonal: %d month(s) of history, need %d", len(matrix), cfg['min_months'])
            return []

        insights: List[Insight] = []
        for category in cfg['categories']:
            if category not in matrix.columns:
                continue
            series = matrix[category]
            active = series[series > 0]
            if len(active) < cfg['min_category_months']:
                continue

            average = float(active.mean())
            recent = float(active.iloc[-1])
            if average <= 0 or recent <= average * cfg['multiplier']:
                continue

            insights.append(Insight(
                id=f'seasonal-{category}',
                type='info',
                title='Seasonal Spending Pattern',
                message=(
                    f"Your {category} spending is {format_percentage((recent / average - 1) * 100)} "
                    "higher than usual. This might be seasonal."
                ),
                confidence=cfg['confidence'],
                actionable=False,
                category=category,
                impact='low',
            ))
        return insights

    def calculate_financial_health_score(self) -> List[Insight]:
        """Score overall health from the savings rate."""
        sums = totals(self.data)
        income = sums['income']
        if income <= 0:
            return []

        savings_rate = (income - sums['expenses']) * 100 / income
        if savings_rate >= 20:
            score = 90 + min(savings_rate - 20, 10)
            message = f"Excellent financial health! You're saving {format_percentage(savings_rate)} of your income."
            kind = 'success'
        elif savings_rate >= 10:
            score = 70 + (savings_rate - 10)
            message = (
                f"Good financial health. Consider increasing your savings rate from "
                f"{format_percentage(savings_rate)} to 20%."
            )
            kind = 'info'
        elif savings_rate >= 0:
            score = 50 + savings_rate
            message = (
                f"Your savings rate is {format_percentage(savings_rate)}. "
                "Focus on reducing expenses or increasing income."
            )
            kind = 'warning'
        else:
            score = max(0.0, 50 + savings_rate)
            message = (
                f"You're spending {format_percentage(abs(savings_rate))} more than you earn. "
                "Immediate action needed."
            )
            kind = 'warning'

        if score < 60:
            impact = 'high'
        elif score < 80:
            impact = 'medium'
        else:
            impact = 'low'

        return [Insight(
            id='financial-health',
            type=kind,
            title=f"Financial Health Score: {_round_half_up(score)}/100",
            message=message,
            confidence=self.settings['health']['confidence'],
            actionable=score < 80,
            impact=impact,
        )]

    # ------------------------------------------------------------------
    # Forecast
    # ------------------------------------------------------------------
    def predict_next_period(self) -> List[SpendingPrediction]:
        """Extrapolate each category's monthly spending one period ahead."""
        cfg = self.settings['prediction']
        matrix = monthly_category_spending(self.data)
        if len(matrix) < cfg['min_months']:
            logger.debug("prediction: %d month(s) of history, need %d", len(matrix), cfg['min_months'])
            return []

        months = len(matrix)
        predictions: List[SpendingPrediction] = []
        for category in matrix.columns:
            series = matrix[category].tolist()
            fit = linear_trend(series)
            average = sum(series) / len(series)

            predicted = average
            confidence = cfg['base_confidence']
            if fit.slope != 0:
                predicted = average + fit.slope * months
                confidence = min(
                    cfg['max_confidence'],
                    cfg['base_confidence'] + abs(fit.correlation) * cfg['correlation_weight'],
                )

            predictions.append(SpendingPrediction(
                category=category,
                predicted_amount=max(0.0, predicted),
                confidence=confidence,
                trend=self._trend_label(fit.slope),
                recommendation=self._recommendation(category, fit.slope, average),
            ))

        predictions.sort(key=lambda prediction: prediction.predicted_amount, reverse=True)
        return predictions[: self.settings['limits']['max_predictions']]

    def _trend_label(self, slope: float) -> str:
        threshold = self.settings['prediction']['trend_threshold']
        if slope > threshold:
            return 'increasing'
        if slope < -threshold:
            return 'decreasing'
        return 'stable'

    def _recommendation(self, category: str, slope: float, average: float) -> str:
        trend = self._trend_label(slope)
        if trend == 'increasing':
            limit = average * self.settings['prediction']['budget_headroom']
            return (
                f"Your {category} spending is trending upward from an average of "
                f"{format_currency(average)}. Consider setting a budget limit of "
                f"{format_currency(limit)} to control growth."
            )
        if trend == 'decreasing':
            return (
                f"Great job reducing {category} spending from an average of "
                f"{format_currency(average)}! You could potentially reallocate some of "
                "this budget to savings or other priorities."
            )
        return (
            f"Your {category} spending is stable at around {format_currency(average)} per month. "
            "This consistency is good for budgeting."
        )

    # ------------------------------------------------------------------
    # Anomalies
    # ------------------------------------------------------------------
    def detect_anomalies(self) -> List[AnomalyDetection]:
        """Flag recent transactions far from their category/type average.

        Only the most recent entries in stored order are inspected; the
        window is positional, not date based.
        """
        cfg = self.settings['anomaly']
        limits = self.settings['limits']
        window = limits['anomaly_window']
        if not self.transactions or window <= 0:
            return []

        grouped = self.data.groupby(['category', 'type'], sort=False)['amount']
        peer_stats = pd.DataFrame({
            'count': grouped.size(),
            'mean': grouped.mean(),
            'std': grouped.std(ddof=0),
        })

        anomalies: List[AnomalyDetection] = []
        for transaction in self.transactions[-window:]:
            stats = peer_stats.loc[(transaction.category, transaction.type)]
            if stats['count'] < cfg['min_peers']:
                continue

            mean = float(stats['mean'])
            std = float(stats['std'])
            if std <= 0:
                continue

            deviation = abs(transaction.amount - mean)
            if deviation <= cfg['medium_sigma'] * std:
                continue

            comparison = 'significantly higher' if transaction.amount > mean else 'significantly lower'
            anomalies.append(AnomalyDetection(
                transaction=transaction,
                anomaly_type='unusual_amount',
                severity='high' if deviation > cfg['high_sigma'] * std else 'medium',
                explanation=(
                    f"This {transaction.type} of {format_currency(transaction.amount)} is "
                    f"{comparison} than your usual {transaction.category} spending "
                    f"(avg: {format_currency(mean)})"
                ),
            ))
            if len(anomalies) >= limits['max_anomalies']:
                break
        return anomalies

    # ------------------------------------------------------------------
    # Summaries
    # ------------------------------------------------------------------
    def summary(self) -> Dict[str, float]:
        """Total income, expenses, balance and savings rate."""
        sums = totals(self.data)
        balance = sums['income'] - sums['expenses']
        savings_rate = (balance * 100 / sums['income']) if sums['income'] > 0 else 0.0
        return {
            'income': sums['income'],
            'expenses': sums['expenses'],
            'balance': balance,
            'savings_rate': savings_rate,
            'transaction_count': len(self.transactions),
        }

    def calculate_health_metrics(self) -> Dict[str, Any]:
        """Weighted multi-metric financial health breakdown.

        Returns a dictionary with the ``overall`` score (0-100), a short
        ``description``, the individual ``metrics`` and a list of
        ``recommendations``.  With no transactions the overall score is 0
        and ``metrics`` is empty.
        """
        if not self.transactions:
            return {
                'overall': 0.0,
                'description': 'Add transactions to calculate your financial health score.',
                'metrics': [],
                'recommendations': [],
            }

        sums = totals(self.data)
        income, expenses = sums['income'], sums['expenses']

        savings_rate = (income - expenses) * 100 / income if income > 0 else 0.0
        savings_score = min(100.0, max(0.0, savings_rate * 5))
        savings_status = _status(savings_rate, (20, 10, 5))

        budget_score, budget_status = 50.0, 'fair'
        if self.budgets:
            month_expenses = expense_rows(current_month_transactions(self.data, self.as_of))
            utilizations = [
                float(month_expenses.loc[month_expenses['category'] == b.category, 'amount'].sum()) / b.amount
                for b in self.budgets
            ]
            avg_utilization = sum(utilizations) / len(utilizations)
            budget_score = max(0.0, 100 - max(0.0, avg_utilization - 0.8) * 500)
            if avg_utilization <= 0.8:
                budget_status = 'excellent'
            elif avg_utilization <= 0.9:
                budget_status = 'good'
            elif avg_utilization <= 1.0:
                budget_status = 'fair'
            else:
                budget_status = 'poor'

        expense_data = expense_rows(self.data)
        category_count = int(expense_data['category'].nunique())
        diversity_score = min(100.0, category_count * 12.5)
        diversity_status = _status(category_count, (6, 4, 2))

        cutoff = (self.as_of - timedelta(days=30)).isoformat()
        recent_count = int((self.data['date'] >= cutoff).sum())
        activity_score = min(100.0, recent_count * 5.0)
        activity_status = _status(recent_count, (15, 10, 5))

        expense_months = max(1, int(expense_data['month'].nunique()))
        monthly_expenses = expenses / expense_months
        emergency_months = (income - expenses) / monthly_expenses if monthly_expenses > 0 else 0.0
        emergency_score = max(0.0, min(100.0, emergency_months * 16.67))
        emergency_status = _status(emergency_months, (6, 3, 1))

        metrics = [
            _metric('Savings Rate', savings_score, 0.3, savings_status,
                    f"{format_percentage(savings_rate)} of income saved"),
            _metric('Budget Adherence', budget_score, 0.25, budget_status,
                    'Staying within budget limits' if self.budgets else 'No budgets set'),
            _metric('Expense Diversity', diversity_score, 0.2, diversity_status,
                    f"{category_count} spending categories"),
            _metric('Transaction Activity', activity_score, 0.15, activity_status,
                    f"{recent_count} transactions in 30 days"),
            _metric('Emergency Fund', emergency_score, 0.1, emergency_status,
                    f"{emergency_months:.1f} months of expenses"),
        ]
        overall = sum(m['score'] * m['weight'] for m in metrics)

        recommendations = []
        if overall < 60:
            recommendations.append('Focus on increasing your savings rate to at least 10%')
        if not self.budgets:
            recommendations.append('Set up monthly budgets to better control spending')
        if diversity_score < 60:
            recommendations.append('Diversify your spending across more categories')
        if emergency_score < 60:
            recommendations.append('Build an emergency fund covering 3-6 months of expenses')

        return {
            'overall': overall,
            'description': _score_description(overall),
            'metrics': metrics,
            'recommendations': recommendations,
        }


def _status(value: float, bands: Tuple[float, float, float]) -> str:
    excellent, good, fair = bands
    if value >= excellent:
        return 'excellent'
    if value >= good:
        return 'good'
    if value >= fair:
        return 'fair'
    return 'poor'


def _metric(name: str, score: float, weight: float, status: str, description: str) -> Dict[str, Any]:
    return {
        'name': name,
        'score': score,
        'weight': weight,
        'status': status,
        'description': description,
    }


def _score_description(score: float) -> str:
    if score >= 90:
        return 'Excellent financial health! Keep up the great work.'
    if score >= 75:
        return 'Good financial health with room for improvement.'
    if score >= 60:
        return 'Fair financial health. Focus on key areas.'
    if score >= 40:
        return 'Below average. Consider reviewing your finances.'
    return 'Poor financial health. Immediate attention needed.'
