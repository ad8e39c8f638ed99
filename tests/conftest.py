import pytest

from gemini_proxy.config import ProxyConfig
from tests.helpers import API_KEY


@pytest.fixture
def config():
    return ProxyConfig(api_key=API_KEY)


@pytest.fixture
def no_key_config():
    return ProxyConfig(api_key='')
