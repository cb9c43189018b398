"""
Pytest fixtures for unit tests.
"""

import pytest
import responses

from appspider.enterprise.clients import EnterpriseRestClient
from appspider.enterprise.interfaces import AuthenticationModel, EnterpriseClientConfig

BASE_URL = "https://appspider.example.com/AppSpiderEnterprise/rest/v1"
TOKEN = "tok-123"


def endpoint(path: str) -> str:
    return f"{BASE_URL}/{path}"


@pytest.fixture
def responses_mock():
    """Provides a responses mock instance for mocking HTTP requests."""
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def client():
    """재시도 없는 EnterpriseRestClient (네트워크 에러 테스트가 바로 끝나도록)"""
    with EnterpriseRestClient(EnterpriseClientConfig(url=BASE_URL, retry=0)) as c:
        yield c


@pytest.fixture
def auth_model():
    return AuthenticationModel(username="scanner", password="s3cret")


@pytest.fixture
def token():
    return TOKEN


@pytest.fixture
def url_for():
    return endpoint
