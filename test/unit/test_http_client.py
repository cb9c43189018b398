from unittest.mock import MagicMock

import pytest
import requests
from urllib3.exceptions import MaxRetryError, NewConnectionError

from appspider.enterprise.clients import HttpClientConfig, RequestsHttpClient


class MockResponse:
    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text


def make_client(session, **config):
    sleeps = []
    client = RequestsHttpClient(HttpClientConfig(**config), session=session, sleep=sleeps.append)
    return client, sleeps


def test_retries_with_exponential_backoff():
    session = MagicMock()
    ok = MockResponse(200)
    session.request.side_effect = [requests.ConnectionError(), requests.Timeout(), ok]

    client, sleeps = make_client(session, retry=2, backoff=0.5)

    assert client.get("https://h/x") is ok
    assert session.request.call_count == 3
    assert sleeps == [0.5, 1.0]


def test_raises_after_last_retry():
    session = MagicMock()
    session.request.side_effect = requests.ConnectionError("down")

    client, sleeps = make_client(session, retry=1, backoff=0.1)

    with pytest.raises(requests.ConnectionError):
        client.get("https://h/x")
    assert session.request.call_count == 2
    assert sleeps == [0.1]


@pytest.mark.parametrize(
    "error",
    [requests.ReadTimeout("slow"), requests.ConnectionError("Connection aborted.")],
)
def test_post_not_resent_once_it_may_have_reached_the_server(error):
    session = MagicMock()
    session.request.side_effect = [error, MockResponse(200)]

    client, sleeps = make_client(session, retry=3, backoff=0.1)

    with pytest.raises(type(error)):
        client.post("https://h/Scan/RunScanByConfigName", data={"configName": "nightly"})
    assert session.request.call_count == 1
    assert sleeps == []


@pytest.mark.parametrize(
    "error",
    [
        requests.ConnectTimeout("connect timed out"),
        requests.ConnectionError(
            MaxRetryError(None, "https://h/x", reason=NewConnectionError(None, "refused"))
        ),
    ],
)
def test_post_retried_when_never_sent(error):
    session = MagicMock()
    ok = MockResponse(200)
    session.request.side_effect = [error, ok]

    client, sleeps = make_client(session, retry=1, backoff=0.1)

    assert client.post("https://h/x", data={"a": "b"}) is ok
    assert session.request.call_count == 2
    assert sleeps == [0.1]


def test_defaults_are_merged_and_overridable():
    session = MagicMock()
    session.request.return_value = MockResponse()

    client, _ = make_client(session, timeout=7, verify_ssl=False)
    client.get("https://h/x", timeout=99, stream=True)

    kwargs = session.request.call_args.kwargs
    assert kwargs["timeout"] == 99
    assert kwargs["verify"] is False
    assert kwargs["stream"] is True
    assert kwargs["allow_redirects"] is True


def test_base_url_joins_relative_paths():
    session = MagicMock()
    session.request.return_value = MockResponse()

    client, _ = make_client(session, base_url="https://h/rest/v1/")
    client.get("/Scan/HasReport")
    client.get("https://other/abs")

    urls = [c.kwargs["url"] for c in session.request.call_args_list]
    assert urls == ["https://h/rest/v1/Scan/HasReport", "https://other/abs"]


def test_base_headers_and_log_hook():
    session = MagicMock()
    session.headers = {}
    res = MockResponse(204)
    session.request.return_value = res
    seen = []

    client, _ = make_client(session, base_headers={"Accept": "application/json"})
    client.log_hook = lambda method, url, kwargs, r: seen.append((method, url, r.status_code))
    client.set_header("X-Test", "1")
    client.request("DELETE", "https://h/x")

    assert session.headers == {"Accept": "application/json", "X-Test": "1"}
    assert seen == [("DELETE", "https://h/x", 204)]


def test_context_manager_closes_session():
    session = MagicMock()
    with RequestsHttpClient(session=session):
        pass
    session.close.assert_called_once()
