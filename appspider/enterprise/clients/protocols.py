"""
공통 클라이언트 프로토콜 정의 모듈

- HttpClientProtocol: requests 기반 HTTP 전송 계층이 따라야 할 공통 인터페이스
- EnterpriseClientProtocol: Enterprise REST API 클라이언트 계약
- 구성용 dataclass (HttpClientConfig)

이 파일은 'interface 역할'만 담당
구현체는 http_client.py, enterprise_client.py에서 제공
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, BinaryIO, Dict, List, Optional, Protocol, runtime_checkable

from appspider.enterprise.interfaces import (
    AuthenticationModel,
    ClientIdNamePair,
    ScanResult,
)

# ----------------------------------------------------------
# HTTP Client Protocol + Config
# ----------------------------------------------------------
class HttpClientProtocol(Protocol):
    """HTTP 요청을 위한 공통 인터페이스 (requests 기반)"""

    s: Any

    def request(self, method: str, url: str, **kwargs) -> Any: ...
    def get(self, url: str, **kwargs) -> Any: ...
    def post(self, url: str, data=None, **kwargs) -> Any: ...

    def set_header(self, key: str, value: str) -> None: ...

    def close(self) -> None: ...

@dataclass
class HttpClientConfig:
    retry: int = 1
    backoff: float = 0.2
    timeout: Optional[float] = None
    verify_ssl: bool = True
    base_headers: Dict[str, str] = field(default_factory=dict)
    allow_redirects: bool = True
    base_url: Optional[str] = None

# ----------------------------------------------------------
# Enterprise API Client Protocol
# ----------------------------------------------------------
@runtime_checkable
class EnterpriseClientProtocol(Protocol):
    """Enterprise REST API 클라이언트 계약

    규칙:
    - login 을 제외한 모든 호출은 호출자가 넘겨주는 auth_token 을 사용한다.
      클라이언트는 세션 상태를 들고 있지 않는다.
    - 어떤 메서드도 예외를 밖으로 던지지 않는다. 실패는 None / False /
      ScanResult(success=False) 로만 전달된다.
    """

    def get_url(self) -> str:
        """Enterprise REST endpoint 의 전체 URL"""
        ...

    def login(self, auth_model: AuthenticationModel) -> Optional[str]:
        """/Authentication/Login 호출. 성공 시 인증 토큰, 실패 시 None"""
        ...

    def test_authentication(self, auth_model: AuthenticationModel) -> bool:
        """자격 증명이 유효하면 True"""
        ...

    def get_engine_group_names_for_client(self, auth_token: str) -> Optional[List[str]]:
        """사용 가능한 엔진 그룹 이름 목록"""
        ...

    def get_engine_group_id_from_name(self, auth_token: str, engine_group_name: str) -> Optional[str]:
        """이름이 정확히 일치하는 엔진 그룹의 id. 없거나 실패하면 None"""
        ...

    def run_scan_by_config_name(self, auth_token: str, config_name: str) -> ScanResult:
        """config_name 설정으로 새 스캔 시작. 항상 ScanResult 를 반환"""
        ...

    def get_scan_status(self, auth_token: str, scan_id: str) -> Optional[str]:
        ...

    def is_scan_finished(self, auth_token: str, scan_id: str) -> bool:
        """종료 방식(성공/실패/취소)과 관계없이 끝났으면 True"""
        ...

    def has_report(self, auth_token: str, scan_id: str) -> bool:
        ...

    def get_config_names(self, auth_token: str) -> Optional[List[str]]:
        ...

    def save_config(self, auth_token: str, name: str, url: str, engine_group_id: str) -> bool:
        """/Config/SaveConfig 호출로 설정 생성 또는 갱신 (upsert)"""
        ...

    def get_vulnerabilities_summary_xml(self, auth_token: str, scan_id: str) -> Optional[str]:
        ...

    def get_report_zip(self, auth_token: str, scan_id: str) -> Optional[BinaryIO]:
        """리포트 zip 스트림. 반환된 스트림은 호출자가 닫아야 한다"""
        ...

    def get_client_name_id_pairs(self, auth_token: str) -> Optional[List[ClientIdNamePair]]:
        ...

__all__ = [
    "HttpClientProtocol",
    "HttpClientConfig",
    "EnterpriseClientProtocol",
]
