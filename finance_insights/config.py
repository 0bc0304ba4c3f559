"""Configuration management for the insights engine.

This module centralizes the thresholds used by the analyzers together with
environment variable overrides for the limits a host application is most
likely to tune.
"""

from __future__ import annotations

import copy
import logging
import os
from typing import Any, Dict, Optional

# Result limits
MAX_INSIGHTS = int(os.getenv("FINSIGHTS_MAX_INSIGHTS", "8"))
MAX_PREDICTIONS = int(os.getenv("FINSIGHTS_MAX_PREDICTIONS", "6"))
MAX_ANOMALIES = int(os.getenv("FINSIGHTS_MAX_ANOMALIES", "5"))
ANOMALY_WINDOW = int(os.getenv("FINSIGHTS_ANOMALY_WINDOW", "30"))

LOG_LEVEL = os.getenv("FINSIGHTS_LOG_LEVEL", "WARNING")

SEASONAL_CATEGORIES = ("Entertainment", "Travel", "Shopping")

_DEFAULTS: Dict[str, Any] = {
    "limits": {
        "max_insights": MAX_INSIGHTS,
        "max_predictions": MAX_PREDICTIONS,
        "max_anomalies": MAX_ANOMALIES,
        "anomaly_window": ANOMALY_WINDOW,
    },
    "cash_flow": {
        "min_months": 2,
        "change_pct": 20.0,
        "high_impact_pct": 50.0,
        "confidence": 0.9,
    },
    "concentration": {
        "share_pct": 40.0,
        "confidence": 0.85,
    },
    "spike": {
        "min_weeks": 4,
        "multiplier": 1.5,
        "confidence": 0.8,
    },
    "budget": {
        "underused_ratio": 0.5,
        "confidence": 0.75,
        "no_budget_confidence": 0.7,
    },
    "seasonal": {
        "min_months": 6,
        "min_category_months": 3,
        "multiplier": 1.3,
        "confidence": 0.65,
        "categories": SEASONAL_CATEGORIES,
    },
    "health": {
        "confidence": 0.95,
    },
    "prediction": {
        "min_months": 3,
        "base_confidence": 0.6,
        "max_confidence": 0.9,
        "correlation_weight": 0.3,
        "trend_threshold": 0.1,
        "budget_headroom": 1.1,
    },
    "anomaly": {
        "min_peers": 5,
        "medium_sigma": 2.0,
        "high_sigma": 3.0,
    },
}


def get_analytics_config(overrides: Optional[Dict[str, Dict[str, Any]]] = None) -> Dict[str, Any]:
    """Return a fresh copy of the analyzer thresholds.

    Args:
        overrides: Optional mapping of section name to key/value pairs that
            replace individual defaults.

    Returns:
        Nested dictionary of thresholds keyed by analyzer section.

    Raises:
        KeyError: If an override names a section or key that does not exist.

    Example:
        >>> cfg = get_analytics_config({'spike': {'multiplier': 2.0}})
        >>> cfg['spike']['multiplier']
        2.0
    """
    config = copy.deepcopy(_DEFAULTS)
    for section, values in (overrides or {}).items():
        if section not in config:
            raise KeyError(f"Unknown configuration section: {section}")
        for key, value in values.items():
            if key not in config[section]:
                raise KeyError(f"Unknown configuration key: {section}.{key}")
            config[section][key] = value
    return config


def get_config_value(*keys: str, default: Any = None) -> Any:
    """Get a nested configuration value by key path.

    Example:
        >>> get_config_value('anomaly', 'min_peers')
        5
    """
    value: Any = _DEFAULTS
    try:
        for key in keys:
            value = value[key]
    except (KeyError, TypeError):
        return default
    return copy.deepcopy(value)


def configure_logging(level: Optional[str] = None) -> None:
    """Attach a basic handler to the package logger."""
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
