import pytest

from finance_insights.models import (
    AnomalyDetection,
    Budget,
    Insight,
    InvalidRecordError,
    SpendingPrediction,
    Transaction,
    validate_category,
)


def test_validate_category_strips_but_keeps_case():
    assert validate_category('  food & Dining ') == 'food & Dining'


@pytest.mark.parametrize('value', ['', '   ', None, 42])
def test_validate_category_rejects_blank_and_non_strings(value):
    with pytest.raises(InvalidRecordError) as excinfo:
        validate_category(value)
    assert excinfo.value.field == 'category'


def test_transaction_from_dict_normalizes_type():
    t = Transaction.from_dict({
        'id': 7,
        'amount': '12.50',
        'date': '2024-03-05',
        'description': 'Lunch',
        'type': 'Expense',
        'category': 'Food & Dining',
    })
    assert t.id == '7'
    assert t.amount == 12.5
    assert t.type == 'expense'


def test_transaction_rejects_unknown_type():
    with pytest.raises(InvalidRecordError) as excinfo:
        Transaction('1', 10, '2024-01-01', 'x', 'transfer', 'Other')
    assert excinfo.value.field == 'type'


@pytest.mark.parametrize('amount', [0, -5, 'abc', float('nan'), float('inf')])
def test_transaction_rejects_bad_amounts(amount):
    with pytest.raises(InvalidRecordError) as excinfo:
        Transaction('1', amount, '2024-01-01', 'x', 'expense', 'Other')
    assert excinfo.value.field == 'amount'


def test_transaction_rejects_bad_date():
    with pytest.raises(InvalidRecordError) as excinfo:
        Transaction('1', 10, '2024-13-01', 'x', 'expense', 'Other')
    assert excinfo.value.field == 'date'


def test_transaction_missing_id():
    with pytest.raises(InvalidRecordError):
        Transaction.from_dict({'amount': 1, 'date': '2024-01-01', 'type': 'expense', 'category': 'Other'})


def test_invalid_record_error_is_value_error():
    assert issubclass(InvalidRecordError, ValueError)


def test_budget_validates_month():
    assert Budget('Food', 300, '2024-02').month == '2024-02'
    with pytest.raises(InvalidRecordError) as excinfo:
        Budget('Food', 300, '2024-2')
    assert excinfo.value.field == 'month'


def test_budget_to_dict_drops_missing_id():
    assert Budget('Food', 300, '2024-02').to_dict() == {'category': 'Food', 'amount': 300.0, 'month': '2024-02'}


def test_derived_records_serialise_with_wire_keys():
    t = Transaction('1', 10, '2024-01-01', 'x', 'expense', 'Other')
    prediction = SpendingPrediction('Other', 12.0, 0.6, 'stable', 'ok')
    anomaly = AnomalyDetection(t, 'unusual_amount', 'medium', 'odd')
    insight = Insight('a', 'info', 'T', 'M', 0.5, False, 'low')

    assert prediction.to_dict()['predictedAmount'] == 12.0
    assert anomaly.to_dict()['anomalyType'] == 'unusual_amount'
    assert anomaly.to_dict()['transaction']['id'] == '1'
    assert 'category' not in insight.to_dict()
