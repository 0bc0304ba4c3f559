"""Import and export of transaction and budget files.

The analyzer itself owns no storage.  These helpers sit at its boundary:
they read CSV/JSON exports into validated :class:`Transaction` and
:class:`Budget` records, skipping rows that fail validation, and write
datasets and analysis reports back out.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

import pandas as pd

from .models import Budget, InvalidRecordError, Transaction

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

CSV_HEADERS = ['Date', 'Description', 'Amount', 'Type', 'Category']
REQUIRED_CSV_FIELDS = ['date', 'description', 'amount', 'type']
EXPORT_VERSION = '1.0'


def _find_column(columns: Sequence[str], field: str) -> Optional[str]:
    for column in columns:
        if field in column.strip().lower():
            return column
    return None


def transactions_from_records(records: Iterable[Dict[str, Any]]) -> List[Transaction]:
    """Validate raw mappings, assigning ids where missing and dropping bad rows."""
    transactions: List[Transaction] = []
    for index, record in enumerate(records):
        data = dict(record)
        if not data.get('id'):
            data['id'] = uuid.uuid4().hex
        if not data.get('category'):
            data['category'] = 'Other'
        try:
            transactions.append(Transaction.from_dict(data))
        except InvalidRecordError as exc:
            logger.warning("Skipping transaction row %d: %s", index, exc)
    return transactions


def _read_transactions_csv(path: Path) -> List[Dict[str, Any]]:
    df = pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
    columns = {field: _find_column(df.columns, field) for field in REQUIRED_CSV_FIELDS + ['category']}
    columns['id'] = next((c for c in df.columns if c.strip().lower() == 'id'), None)
    missing = [field for field in REQUIRED_CSV_FIELDS if columns[field] is None]
    if missing:
        raise ValueError(f"Missing required columns: {', '.join(missing)}")

    records = []
    for _, row in df.iterrows():
        record = {field: row[column].strip() for field, column in columns.items() if column is not None}
        record['type'] = record['type'].lower()
        record['description'] = record['description'] or 'Imported transaction'
        records.append(record)
    return records


def _read_json_list(path: Path, key: str) -> List[Dict[str, Any]]:
    with path.open('r', encoding='utf-8') as handle:
        data = json.load(handle)
    if isinstance(data, dict):
        data = data.get(key, [])
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of {key} in {path}")
    return data


def load_transactions(path: PathLike) -> List[Transaction]:
    """Load transactions from a ``.csv`` or ``.json`` file.

    CSV headers are matched loosely (any header containing ``date``,
    ``description``, ``amount`` or ``type``); a missing category becomes
    ``Other``.  JSON may be either a bare list or an export document with a
    ``transactions`` key.

    Raises:
        ValueError: For an unsupported file type or missing CSV columns.
        FileNotFoundError: If ``path`` does not exist.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == '.csv':
        records = _read_transactions_csv(path)
    elif suffix == '.json':
        records = _read_json_list(path, 'transactions')
    else:
        raise ValueError(f"Unsupported file format: {path.suffix or path.name}. Use CSV or JSON.")

    transactions = transactions_from_records(records)
    logger.info("Loaded %d of %d transaction row(s) from %s", len(transactions), len(records), path)
    return transactions


def load_budgets(path: PathLike) -> List[Budget]:
    """Load budgets from a JSON list or export document with a ``budgets`` key."""
    path = Path(path)
    budgets: List[Budget] = []
    for index, record in enumerate(_read_json_list(path, 'budgets')):
        try:
            budgets.append(Budget.from_dict(record))
        except InvalidRecordError as exc:
            logger.warning("Skipping budget row %d: %s", index, exc)
    return budgets


def export_transactions_csv(transactions: Iterable[Transaction], path: PathLike) -> Path:
    """Write transactions as ``Date,Description,Amount,Type,Category`` CSV."""
    rows = [
        {
            'Date': t.date,
            'Description': t.description,
            'Amount': t.amount,
            'Type': t.type,
            'Category': t.category,
        }
        for t in transactions
    ]
    path = Path(path)
    pd.DataFrame(rows, columns=CSV_HEADERS).to_csv(path, index=False)
    return path


def export_dataset_json(
    transactions: Iterable[Transaction],
    budgets: Iterable[Budget],
    path: PathLike,
) -> Path:
    """Write a full dataset export document."""
    document = {
        'transactions': [t.to_dict() for t in transactions],
        'budgets': [b.to_dict() for b in budgets],
        'exportDate': datetime.now().isoformat(),
        'version': EXPORT_VERSION,
    }
    path = Path(path)
    with path.open('w', encoding='utf-8') as handle:
        json.dump(document, handle, indent=2, ensure_ascii=False)
    return path


def export_insights_report(analyzer, path: PathLike) -> Path:
    """Export insights, predictions and anomalies from an analyzer to one CSV."""
    report_data = []

    for insight in analyzer.generate_insights():
        report_data.append({
            'Section': 'Insight',
            'Type': insight.type,
            'Category': insight.category or '',
            'Title': insight.title,
            'Detail': insight.message,
            'Confidence': insight.confidence,
            'Level': insight.impact,
        })

    for prediction in analyzer.predict_next_period():
        report_data.append({
            'Section': 'Prediction',
            'Type': prediction.trend,
            'Category': prediction.category,
            'Title': f"Predicted {prediction.predicted_amount:.2f}",
            'Detail': prediction.recommendation,
            'Confidence': prediction.confidence,
            'Level': '',
        })

    for anomaly in analyzer.detect_anomalies():
        report_data.append({
            'Section': 'Anomaly',
            'Type': anomaly.anomaly_type,
            'Category': anomaly.transaction.category,
            'Title': anomaly.transaction.description,
            'Detail': anomaly.explanation,
            'Confidence': '',
            'Level': anomaly.severity,
        })

    columns = ['Section', 'Type', 'Category', 'Title', 'Detail', 'Confidence', 'Level']
    path = Path(path)
    pd.DataFrame(report_data, columns=columns).to_csv(path, index=False)
    return path
