#!/usr/bin/env python3
"""Print insights, spending forecasts and anomalies for an exported dataset."""

from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path
from typing import Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from finance_insights import FinanceInsightsAnalyzer, load_budgets, load_transactions
from finance_insights.config import configure_logging
from finance_insights.formatting import format_currency


def main(transactions_path: Path, budgets_path: Optional[Path] = None, as_of: Optional[date] = None) -> int:
    transactions = load_transactions(transactions_path)
    if not transactions:
        print("No valid transactions found.")
        return 1

    budgets = load_budgets(budgets_path) if budgets_path else []
    analyzer = FinanceInsightsAnalyzer(transactions, budgets, as_of=as_of)

    print(f"Transactions: {len(transactions)}  Budgets: {len(budgets)}")

    print("\nInsights:")
    for insight in analyzer.generate_insights():
        print(f"  [{insight.type:<7}] {insight.title} ({insight.confidence:.0%}, {insight.impact} impact)")
        print(f"            {insight.message}")

    predictions = analyzer.predict_next_period()
    print("\nNext month forecast:")
    if not predictions:
        print("  Not enough history (need 3 months of expenses).")
    for prediction in predictions:
        print(
            f"  {prediction.category:<20} {format_currency(prediction.predicted_amount):>12}"
            f"  {prediction.trend:<10} {prediction.confidence:.0%}"
        )

    anomalies = analyzer.detect_anomalies()
    print("\nAnomalies:")
    if not anomalies:
        print("  None detected.")
    for anomaly in anomalies:
        print(f"  [{anomaly.severity}] {anomaly.transaction.date} {anomaly.explanation}")
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Show spending insights for a transaction export.')
    parser.add_argument('--transactions', type=Path, required=True, help='CSV or JSON transaction file')
    parser.add_argument('--budgets', type=Path, default=None, help='JSON budget file')
    parser.add_argument('--as-of', type=date.fromisoformat, default=None, help='Treat this YYYY-MM-DD as today')
    parser.add_argument('--log-level', default=None, help='Logging level (default from FINSIGHTS_LOG_LEVEL)')
    args = parser.parse_args()
    configure_logging(args.log_level)
    raise SystemExit(main(args.transactions, args.budgets, args.as_of))
