"""
CLI 입력 + 환경변수 -> EnterpriseClientConfig / AuthenticationModel 변환

우선순위 (높은 것부터):
  1. CLI 옵션
  2. 환경변수 (APPSPIDER_URL, APPSPIDER_USERNAME, APPSPIDER_PASSWORD, APPSPIDER_CLIENT_ID)
  3. 기본값
"""

import os
from typing import Mapping, Optional
from urllib.parse import urlparse, urlunparse

from appspider.enterprise.interfaces import (
    AuthenticationModel,
    ConfigurationError,
    EnterpriseClientConfig,
)

DEFAULT_REST_PATH = "/AppSpiderEnterprise/rest/v1"
REST_SUFFIX = "/rest/v1"

ENV_URL = "APPSPIDER_URL"
ENV_USERNAME = "APPSPIDER_USERNAME"
ENV_PASSWORD = "APPSPIDER_PASSWORD"
ENV_CLIENT_ID = "APPSPIDER_CLIENT_ID"


def normalize_endpoint_url(url: str) -> str:
    """간단한 정규화: 스킴이 없으면 https, 끝 슬래시 제거, REST 경로 보정"""
    if not url:
        raise ConfigurationError("Enterprise URL is required", error_code="MISSING_URL")
    parsed = urlparse(url)
    if not parsed.scheme:
        parsed = urlparse("https://" + url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError(f"Invalid enterprise URL: {url}", error_code="INVALID_URL")

    path = parsed.path.rstrip("/")
    if not path.lower().endswith(REST_SUFFIX):
        # 호스트만 주어졌으면 기본 경로, 아니면 rest/v1 만 덧붙임
        path = DEFAULT_REST_PATH if not path else path + REST_SUFFIX
    return urlunparse((parsed.scheme, parsed.netloc, path, "", "", ""))


def resolve_endpoint_url(
    cli_arg: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    constructor_value: Optional[str] = None,
) -> str:
    env = os.environ if env is None else env
    for candidate in (cli_arg, env.get(ENV_URL), constructor_value):
        if candidate:
            return normalize_endpoint_url(candidate)
    raise ConfigurationError(
        f"Enterprise URL is required (--url or {ENV_URL})", error_code="MISSING_URL"
    )


def build_client_config(
    url: Optional[str] = None,
    *,
    timeout: Optional[float] = 30.0,
    retry: int = 1,
    verify_ssl: bool = True,
    env: Optional[Mapping[str, str]] = None,
) -> EnterpriseClientConfig:
    """CLI 입력 기반으로 EnterpriseClientConfig 구성"""
    if retry < 0:
        raise ConfigurationError("retry must be >= 0", error_code="INVALID_RETRY")
    return EnterpriseClientConfig(
        url=resolve_endpoint_url(url, env=env),
        timeout=timeout,
        retry=retry,
        verify_ssl=verify_ssl,
    )


def build_auth_model(
    username: Optional[str] = None,
    password: Optional[str] = None,
    client_id: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
) -> AuthenticationModel:
    env = os.environ if env is None else env
    username = username or env.get(ENV_USERNAME)
    password = password or env.get(ENV_PASSWORD)
    client_id = client_id or env.get(ENV_CLIENT_ID) or None

    if not username or not password:
        raise ConfigurationError(
            f"Username and password are required (--username/--password or "
            f"{ENV_USERNAME}/{ENV_PASSWORD})",
            error_code="MISSING_CREDENTIALS",
        )
    return AuthenticationModel(username=username, password=password, client_id=client_id)
