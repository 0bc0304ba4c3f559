import logging

import pytest

from finance_insights import config


def test_defaults_are_copied():
    first = config.get_analytics_config()
    first['spike']['multiplier'] = 99
    assert config.get_analytics_config()['spike']['multiplier'] == 1.5


def test_overrides_replace_single_keys():
    cfg = config.get_analytics_config({'anomaly': {'min_peers': 10}})
    assert cfg['anomaly']['min_peers'] == 10
    assert cfg['anomaly']['medium_sigma'] == 2.0


@pytest.mark.parametrize('overrides', [
    {'unknown': {}},
    {'anomaly': {'min_peer': 3}},
])
def test_unknown_override_raises(overrides):
    with pytest.raises(KeyError):
        config.get_analytics_config(overrides)


def test_get_config_value():
    assert config.get_config_value('limits', 'max_insights') == config.MAX_INSIGHTS
    assert config.get_config_value('prediction', 'missing', default='x') == 'x'
    assert config.get_config_value('seasonal', 'categories') == ('Entertainment', 'Travel', 'Shopping')


def test_configure_logging(monkeypatch):
    calls = {}
    monkeypatch.setattr(logging, 'basicConfig', lambda **kwargs: calls.update(kwargs))
    config.configure_logging('debug')
    assert calls['level'] == 'DEBUG'
