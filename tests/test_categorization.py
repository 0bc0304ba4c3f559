import pytest

from finance_insights.categorization import KeywordRule, suggest_categories, suggest_category
from finance_insights.models import Transaction


RULES = {
    'Coffee': [KeywordRule(('starbucks',), 0.9)],
    'Rideshare': [KeywordRule(('uber', 'lyft'), 0.95)],
}


def _txn(i, description, category='Other'):
    return Transaction(str(i), 10, '2024-01-01', description, 'expense', category)


def test_default_rules_scale_confidence_by_matched_keywords():
    suggestion = suggest_category(_txn(1, 'Starbucks coffee'))
    assert suggestion.suggested_category == 'Food & Dining'
    assert suggestion.confidence == pytest.approx(0.9 * 2 / 11)
    assert suggestion.reason == 'Detected keywords: starbucks, coffee'


def test_weak_default_matches_are_filtered():
    assert suggest_categories([_txn(1, 'Starbucks coffee')]) == []


def test_no_match_returns_none():
    assert suggest_category(_txn(1, 'zzz'), RULES) is None


def test_current_category_is_never_suggested():
    assert suggest_category(_txn(1, 'STARBUCKS #123', category='Coffee'), RULES) is None


def test_custom_rules_and_limit():
    rows = [_txn(i, 'Starbucks downtown') for i in range(10)]
    suggestions = suggest_categories(rows, limit=3, rules=RULES)
    assert [s.transaction_id for s in suggestions] == ['0', '1', '2']
    assert suggestions[0].to_dict() == {
        'transaction_id': '0',
        'current_category': 'Other',
        'suggested_category': 'Coffee',
        'confidence': 0.9,
        'reason': 'Detected keywords: starbucks',
    }


def test_strongest_rule_wins():
    suggestion = suggest_category(_txn(1, 'Uber then Lyft to Starbucks'), RULES)
    assert suggestion.suggested_category == 'Rideshare'
    assert suggestion.confidence == pytest.approx(0.95)


def test_min_confidence_is_exclusive():
    rows = [_txn(1, 'Starbucks')]
    assert suggest_categories(rows, min_confidence=0.9, rules=RULES) == []
    assert len(suggest_categories(rows, min_confidence=0.89, rules=RULES)) == 1
