"""Top‑level package for the finance insights engine.

The primary modules are:

* ``analytics`` – the :class:`FinanceInsightsAnalyzer` producing insights,
  next-period predictions and anomaly flags
* ``aggregation`` – monthly, weekly and category grouping helpers
* ``records`` – CSV/JSON import and export at the engine's boundary
* ``categorization`` – keyword-based category suggestions
* ``visualization`` – functions that generate Plotly figures

Example:

```python
from finance_insights import FinanceInsightsAnalyzer, load_transactions

analyzer = FinanceInsightsAnalyzer(load_transactions("transactions.csv"))
for insight in analyzer.generate_insights():
    print(insight.title, insight.message)
```
"""

from .analytics import FinanceInsightsAnalyzer
from .models import (
    AnomalyDetection,
    Budget,
    Insight,
    InvalidRecordError,
    SpendingPrediction,
    Transaction,
    validate_category,
)
from .records import load_budgets, load_transactions

__all__ = [
    "FinanceInsightsAnalyzer",
    "AnomalyDetection",
    "Budget",
    "Insight",
    "InvalidRecordError",
    "SpendingPrediction",
    "Transaction",
    "validate_category",
    "load_budgets",
    "load_transactions",
]
