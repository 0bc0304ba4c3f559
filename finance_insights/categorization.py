"""Keyword-based category suggestions.

Each category carries one or more keyword rules with a base confidence.
A transaction description is matched by case-insensitive substring search;
the suggestion confidence is the rule confidence scaled by the fraction of
the rule's keywords that matched.  This is plain string matching, there is
no trained model behind it.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .models import Transaction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeywordRule:
    keywords: Sequence[str]
    confidence: float


@dataclass(frozen=True)
class CategorySuggestion:
    """A proposed re-categorisation for one transaction."""
    transaction_id: str
    current_category: str
    suggested_category: str
    confidence: float
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


CATEGORY_RULES: Dict[str, List[KeywordRule]] = {
    'Food & Dining': [
        KeywordRule(('starbucks', 'coffee', 'cafe', 'restaurant', 'pizza', 'burger', 'food',
                     'dining', 'lunch', 'dinner', 'breakfast'), 0.9),
        KeywordRule(('grocery', 'supermarket', 'market', 'whole foods', 'trader', 'safeway',
                     'costco'), 0.85),
    ],
    'Transportation': [
        KeywordRule(('uber', 'lyft', 'taxi', 'gas', 'fuel', 'parking', 'metro', 'transit',
                     'bus', 'train'), 0.9),
        KeywordRule(('car', 'auto', 'vehicle', 'maintenance', 'repair'), 0.8),
    ],
    'Entertainment': [
        KeywordRule(('netflix', 'spotify', 'movie', 'theater', 'cinema', 'game', 'gaming',
                     'entertainment'), 0.9),
        KeywordRule(('concert', 'show', 'event', 'ticket'), 0.85),
    ],
    'Bills & Utilities': [
        KeywordRule(('electric', 'electricity', 'water', 'gas', 'internet', 'phone', 'mobile',
                     'utility', 'bill'), 0.95),
        KeywordRule(('insurance', 'rent', 'mortgage'), 0.9),
    ],
    'Shopping': [
        KeywordRule(('amazon', 'store', 'shop', 'retail', 'purchase', 'buy'), 0.7),
        KeywordRule(('clothing', 'clothes', 'fashion', 'shoes'), 0.8),
    ],
    'Healthcare': [
        KeywordRule(('doctor', 'hospital', 'medical', 'pharmacy', 'health', 'clinic',
                     'dentist'), 0.9),
    ],
    'Subscriptions': [
        KeywordRule(('subscription', 'monthly', 'premium', 'pro', 'plus'), 0.8),
    ],
}


def suggest_category(
    transaction: Transaction,
    rules: Optional[Dict[str, List[KeywordRule]]] = None,
) -> Optional[CategorySuggestion]:
    """Return the strongest rule match for a transaction, if any.

    Rules belonging to the transaction's current category are ignored, so a
    suggestion always proposes a change.

    Example:
        >>> t = Transaction('1', 4.5, '2024-01-02', 'Starbucks coffee', 'expense', 'Other')
        >>> suggest_category(t).suggested_category
        'Food & Dining'
    """
    description = transaction.description.lower()
    best: Optional[CategorySuggestion] = None

    for category, category_rules in (rules or CATEGORY_RULES).items():
        if category == transaction.category:
            continue
        for rule in category_rules:
            matched = [kw for kw in rule.keywords if kw.lower() in description]
            if not matched:
                continue
            confidence = rule.confidence * (len(matched) / len(rule.keywords))
            if best is None or confidence > best.confidence:
                best = CategorySuggestion(
                    transaction_id=transaction.id,
                    current_category=transaction.category,
                    suggested_category=category,
                    confidence=confidence,
                    reason=f"Detected keywords: {', '.join(matched)}",
                )
    return best


def suggest_categories(
    transactions: Iterable[Transaction],
    limit: int = 5,
    min_confidence: float = 0.7,
    rules: Optional[Dict[str, List[KeywordRule]]] = None,
) -> List[CategorySuggestion]:
    """Suggestions above ``min_confidence`` in transaction order, capped at ``limit``."""
    suggestions: List[CategorySuggestion] = []
    for transaction in transactions:
        suggestion = suggest_category(transaction, rules)
        if suggestion is None or suggestion.confidence <= min_confidence:
            continue
        suggestions.append(suggestion)
        if len(suggestions) >= limit:
            break
    logger.debug("categorization: %d suggestion(s)", len(suggestions))
    return suggestions
