"""
HTTP Client (requests 기반)
- requests.Session을 래핑해서 재시도/백오프/타임아웃/SSL 검증/헤더 일원화
- EnterpriseRestClient 는 HttpClientProtocol 인터페이스만 의존함
"""

from __future__ import annotations

import time
from typing import Callable, Optional

import requests
from requests import Response, Session, RequestException
from urllib3.exceptions import NewConnectionError

from appspider.enterprise.logger import get_logger
from .protocols import HttpClientProtocol, HttpClientConfig

logger = get_logger("http")

# 재전송해도 서버 상태가 바뀌지 않는 메서드
IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE"})


def _not_sent(exc: RequestException) -> bool:
    """요청이 서버에 도달하기 전에 난 에러인지 (연결 타임아웃, 연결 거부)"""
    if isinstance(exc, requests.ConnectTimeout):
        return True
    if isinstance(exc, requests.ConnectionError) and exc.args:
        return isinstance(getattr(exc.args[0], "reason", None), NewConnectionError)
    return False


# requests 기반 구현
class RequestsHttpClient(HttpClientProtocol):
    """
    requests.Session 래퍼.
    - 모든 HTTP 요청을 중앙에서 통제
    - backoff, timeout, SSL, header, session 재사용 통일
    """

    def __init__(
        self,
        config: Optional[HttpClientConfig] = None,
        session: Optional[Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config or HttpClientConfig()
        self.s = session or requests.Session()
        self._sleep = sleep

        if self.config.base_headers:
            self.s.headers.update(self.config.base_headers)

        # 요청/응답 로그 훅 (상위 클라이언트에서 주입)
        self.log_hook: Optional[Callable[[str, str, dict, Response], None]] = None

    def _resolve_url(self, url: str) -> str:
        # base_url 지원 (선택)
        if self.config.base_url and not url.startswith("http"):
            return self.config.base_url.rstrip("/") + "/" + url.lstrip("/")
        return url

    # 내부: 재시도 래퍼
    def _send_with_retry(self, method: str, url: str, **kwargs) -> Response:
        retry = self.config.retry
        backoff = self.config.backoff
        url = self._resolve_url(url)

        merged_kwargs = dict(
            timeout=self.config.timeout,
            verify=self.config.verify_ssl,
            allow_redirects=self.config.allow_redirects,
        )
        merged_kwargs.update(kwargs)

        for attempt in range(retry + 1):
            try:
                res = self.s.request(method=method, url=url, **merged_kwargs)

                if self.log_hook:
                    self.log_hook(method, url, merged_kwargs, res)

                return res

            except RequestException as exc:
                # POST 등은 서버가 이미 처리했을 수 있으므로 전송 전 에러만 재시도
                retryable = method.upper() in IDEMPOTENT_METHODS or _not_sent(exc)
                if attempt >= retry or not retryable:
                    raise
                delay = backoff * (2**attempt)
                logger.debug(
                    "%s %s failed (%s), retry %d/%d in %.2fs",
                    method, url, exc.__class__.__name__, attempt + 1, retry, delay,
                )
                self._sleep(delay)

        raise RuntimeError("HTTP request failed unexpectedly")  # 미도달 보호

    # Public API
    def request(self, method: str, url: str, **kwargs) -> Response:
        return self._send_with_retry(method, url, **kwargs)

    def get(self, url: str, **kwargs) -> Response:
        return self.request("GET", url, **kwargs)

    def post(self, url: str, data=None, **kwargs) -> Response:
        return self.request("POST", url, data=data, **kwargs)

    def set_header(self, key: str, value: str) -> None:
        self.s.headers[key] = value

    # Context Manager
    def close(self) -> None:
        self.s.close()

    def __enter__(self) -> "RequestsHttpClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

__all__ = [
    "HttpClientConfig",
    "RequestsHttpClient",
]
