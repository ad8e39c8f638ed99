import importlib
import logging

import pytest

import gemini_proxy.proxy as proxy_mod


@pytest.fixture
def reload_proxy(monkeypatch):
    root = logging.getLogger()
    prior = root.level

    def _reload(level=None):
        if level is None:
            monkeypatch.delenv('LOG_LEVEL', raising=False)
        else:
            monkeypatch.setenv('LOG_LEVEL', level)
        importlib.reload(proxy_mod)
        return root.level

    yield _reload

    monkeypatch.delenv('LOG_LEVEL', raising=False)
    importlib.reload(proxy_mod)
    root.setLevel(prior)


def test_log_level_defaults_to_info(reload_proxy):
    assert reload_proxy() == logging.INFO


@pytest.mark.parametrize('value, expected', [
    ('DEBUG', logging.DEBUG),
    ('warning', logging.WARNING),
    ('error', logging.ERROR),
])
def test_log_level_from_environment(reload_proxy, value, expected):
    assert reload_proxy(value) == expected


@pytest.mark.parametrize('value', ['LOUD', 'basicConfig', ''])
def test_invalid_log_level_falls_back_to_info(reload_proxy, value):
    assert reload_proxy(value) == logging.INFO
