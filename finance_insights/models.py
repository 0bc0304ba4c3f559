"""Record types consumed and produced by the insights engine.

Transactions and budgets are owned by the caller's stores; the engine only
reads them.  Insights, predictions and anomalies are rebuilt on every call
and carry no identity beyond that call.
"""

from __future__ import annotations

import math
import re
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Dict, Optional

TRANSACTION_TYPES = {'income', 'expense'}
INSIGHT_TYPES = {'warning', 'success', 'info', 'prediction'}
IMPACT_LEVELS = {'high', 'medium', 'low'}
TREND_LABELS = {'increasing', 'decreasing', 'stable'}

_MONTH_PATTERN = re.compile(r'^\d{4}-(0[1-9]|1[0-2])$')


class InvalidRecordError(ValueError):
    """Raised when a transaction or budget record fails boundary validation."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field


def validate_category(value: Any) -> str:
    """Validate a category label and return it without surrounding whitespace.

    Categories are open-ended; the label is never lower-cased or mapped onto
    a fixed taxonomy.

    Example:
        >>> validate_category(' Food & Dining ')
        'Food & Dining'
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidRecordError('category', 'must be a non-empty string')
    return value.strip()


def _validate_amount(value: Any) -> float:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise InvalidRecordError('amount', f'not a number: {value!r}') from None
    if not math.isfinite(amount) or amount <= 0:
        raise InvalidRecordError('amount', f'must be a positive number, got {value!r}')
    return amount


def _validate_date(value: Any) -> str:
    text = str(value).strip() if value is not None else ''
    try:
        parsed = date.fromisoformat(text)
    except ValueError:
        raise InvalidRecordError('date', f'expected YYYY-MM-DD, got {value!r}') from None
    return parsed.isoformat()


def _validate_month(value: Any) -> str:
    text = str(value).strip() if value is not None else ''
    if not _MONTH_PATTERN.match(text):
        raise InvalidRecordError('month', f'expected YYYY-MM, got {value!r}')
    return text


@dataclass(frozen=True)
class Transaction:
    """A single dated income or expense movement."""
    id: str
    amount: float
    date: str  # YYYY-MM-DD
    description: str
    type: str  # 'income' or 'expense'
    category: str

    def __post_init__(self) -> None:
        if self.type not in TRANSACTION_TYPES:
            raise InvalidRecordError('type', f"must be 'income' or 'expense', got {self.type!r}")
        object.__setattr__(self, 'id', str(self.id))
        object.__setattr__(self, 'amount', _validate_amount(self.amount))
        object.__setattr__(self, 'date', _validate_date(self.date))
        object.__setattr__(self, 'category', validate_category(self.category))
        object.__setattr__(self, 'description', str(self.description or ''))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Transaction':
        """Build a transaction from a plain mapping such as a JSON object."""
        if 'id' not in data:
            raise InvalidRecordError('id', 'missing')
        kind = str(data.get('type', '')).strip().lower()
        return cls(
            id=data['id'],
            amount=data.get('amount'),
            date=data.get('date'),
            description=data.get('description', ''),
            type=kind,
            category=data.get('category'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Budget:
    """A monthly spending cap for one category."""
    category: str
    amount: float
    month: str  # YYYY-MM
    id: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, 'category', validate_category(self.category))
        object.__setattr__(self, 'amount', _validate_amount(self.amount))
        object.__setattr__(self, 'month', _validate_month(self.month))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Budget':
        return cls(
            category=data.get('category'),
            amount=data.get('amount'),
            month=data.get('month'),
            id=data.get('id'),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class Insight:
    """A human readable observation about spending behaviour."""
    id: str
    type: str
    title: str
    message: str
    confidence: float
    actionable: bool
    impact: str
    category: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        # Remove None values for cleaner payloads
        return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class SpendingPrediction:
    """Forecast of next-period spending for one category."""
    category: str
    predicted_amount: float
    confidence: float
    trend: str
    recommendation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'category': self.category,
            'predictedAmount': self.predicted_amount,
            'confidence': self.confidence,
            'trend': self.trend,
            'recommendation': self.recommendation,
        }


@dataclass(frozen=True)
class AnomalyDetection:
    """A transaction whose amount stands out from its category peers."""
    transaction: Transaction
    anomaly_type: str
    severity: str
    explanation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'transaction': self.transaction.to_dict(),
            'anomalyType': self.anomaly_type,
            'severity': self.severity,
            'explanation': self.explanation,
        }
