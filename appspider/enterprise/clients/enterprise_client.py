"""
EnterpriseRestClient (EnterpriseClientProtocol 구현체)

- 전송은 HttpClientProtocol (기본: RequestsHttpClient) 에 위임
- 응답 해석은 content.py, SaveConfig XML 은 config_xml.py
- 내부에서는 AppSpiderException 계열 예외로 실패를 올리고,
  public 메서드 경계(@_contract)에서 None / False / ScanResult.failed() 로 변환한다.

사용 예시:
    config = EnterpriseClientConfig(url="https://host/AppSpiderEnterprise/rest/v1")
    with EnterpriseRestClient(config) as client:
        token = client.login(AuthenticationModel("user", "secret"))
        if token:
            result = client.run_scan_by_config_name(token, "nightly")
"""

from __future__ import annotations

import functools
import io
import json
from typing import Any, BinaryIO, Callable, Dict, List, Optional, TypeVar

from requests import RequestException, Response

from appspider.enterprise.interfaces import (
    AppSpiderException,
    AuthenticationError,
    AuthenticationModel,
    ClientIdNamePair,
    EngineGroup,
    EnterpriseClientConfig,
    NetworkError,
    ResponseError,
    ScanConfig,
    ScanResult,
    ValidationError,
)
from appspider.enterprise.logger import get_logger
from .config_xml import build_scan_config_xml
from .content import (
    ensure_ok,
    get_bool,
    get_list,
    get_object,
    get_string,
    successful_json,
)
from .http_client import RequestsHttpClient
from .protocols import EnterpriseClientProtocol, HttpClientConfig, HttpClientProtocol

logger = get_logger("client")

T = TypeVar("T")

# Endpoint 경로 (base URL 기준 상대 경로)
LOGIN = "Authentication/Login"
GET_CLIENTS = "Authentication/GetClients"
GET_ENGINE_GROUPS = "EngineGroup/GetEngineGroupsForClient"
RUN_SCAN_BY_CONFIG_NAME = "Scan/RunScanByConfigName"
GET_SCAN_STATUS = "Scan/GetScanStatus"
IS_SCAN_FINISHED = "Scan/IsScanFinished"
HAS_REPORT = "Scan/HasReport"
GET_CONFIGS = "Config/GetConfigs"
SAVE_CONFIG = "Config/SaveConfig"
GET_VULNERABILITIES_SUMMARY = "Report/GetVulnerabilitiesSummaryXml"
GET_REPORT_ZIP = "Report/GetReportZip"

REPORT_CHUNK_SIZE = 64 * 1024


def _contract(default: Any) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """AppSpiderException 을 계약상의 실패 값(default)으로 변환하는 데코레이터"""

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs) -> T:
            try:
                return func(self, *args, **kwargs)
            except AppSpiderException as exc:
                logger.warning("%s failed [%s]: %s", func.__name__, exc.error_code, exc.message)
                return default

        return wrapper

    return decorator


class ReportStream(io.RawIOBase):
    """streaming Response 를 읽기 전용 raw 스트림으로 감싼다. close() 시 연결 반환"""

    def __init__(self, response: Response, chunk_size: int = REPORT_CHUNK_SIZE):
        super().__init__()
        self._response = response
        self._chunks = response.iter_content(chunk_size=chunk_size)
        self._buffer = b""

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        while not self._buffer:
            try:
                self._buffer = next(self._chunks)
            except StopIteration:
                return 0
        n = min(len(b), len(self._buffer))
        b[:n] = self._buffer[:n]
        self._buffer = self._buffer[n:]
        return n

    def close(self) -> None:
        if not self.closed:
            self._response.close()
        super().close()


class EnterpriseRestClient(EnterpriseClientProtocol):
    """Enterprise REST API 클라이언트

    토큰은 항상 호출자가 넘긴다. 인스턴스가 공유하는 것은 연결 풀(Session) 뿐이라
    서로 다른 토큰으로 여러 스레드에서 동시에 호출해도 된다.
    """

    def __init__(
        self,
        config: EnterpriseClientConfig,
        http_client: Optional[HttpClientProtocol] = None,
    ):
        if not config.url:
            raise ValidationError("Enterprise URL is required", error_code="INVALID_URL")
        self.config = config
        self._url = config.url.rstrip("/")

        if http_client is None:
            http_client = RequestsHttpClient(
                HttpClientConfig(
                    retry=config.retry,
                    backoff=config.backoff,
                    timeout=config.timeout,
                    verify_ssl=config.verify_ssl,
                    base_headers={
                        "User-Agent": config.user_agent,
                        "Accept": "application/json",
                    },
                )
            )
            http_client.log_hook = self._log_exchange
        self._http = http_client

    # ------------------------------------------------------------------
    # 내부 helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _log_exchange(method: str, url: str, kwargs: dict, res: Response) -> None:
        # 헤더/본문에는 토큰과 비밀번호가 있으므로 남기지 않음
        logger.debug("%s %s -> %s", method, url, res.status_code)

    def _endpoint(self, path: str) -> str:
        return f"{self._url}/{path}"

    @staticmethod
    def _auth_headers(auth_token: str) -> Dict[str, str]:
        if not auth_token:
            raise AuthenticationError("Authorization token is required", error_code="NO_TOKEN")
        return {"Authorization": f"Basic {auth_token}"}

    def _send(self, method: str, path: str, **kwargs) -> Response:
        try:
            return self._http.request(method, self._endpoint(path), **kwargs)
        except RequestException as exc:
            raise NetworkError(
                f"{method} {path} failed: {exc}",
                error_code="NETWORK",
                context={"path": path},
            ) from exc

    def _get_json(self, auth_token: str, path: str, params: Optional[dict] = None) -> Dict[str, Any]:
        res = self._send("GET", path, headers=self._auth_headers(auth_token), params=params)
        return successful_json(res)

    def _engine_groups(self, auth_token: str) -> List[EngineGroup]:
        body = self._get_json(auth_token, GET_ENGINE_GROUPS)
        return [
            EngineGroup(id=get_string(item, "Id"), name=get_string(item, "Name"))
            for item in get_list(body, "EngineGroups")
        ]

    def _configs(self, auth_token: str) -> List[Dict[str, Any]]:
        return get_list(self._get_json(auth_token, GET_CONFIGS), "Configs")

    # ------------------------------------------------------------------
    # Public API (EnterpriseClientProtocol)
    # ------------------------------------------------------------------
    def get_url(self) -> str:
        return self._url

    @_contract(default=None)
    def login(self, auth_model: AuthenticationModel) -> Optional[str]:
        if not auth_model.username or not auth_model.password:
            raise ValidationError("Username and password are required", error_code="INVALID_CREDENTIALS")

        data = {"name": auth_model.username, "password": auth_model.password}
        if auth_model.has_client_id:
            data["clientId"] = auth_model.client_id

        body = successful_json(self._send("POST", LOGIN, data=data))
        token = get_string(body, "Token")
        logger.info("Authenticated as %s", auth_model.username)
        return token

    def test_authentication(self, auth_model: AuthenticationModel) -> bool:
        return self.login(auth_model) is not None

    @_contract(default=None)
    def get_engine_group_names_for_client(self, auth_token: str) -> Optional[List[str]]:
        groups = self._engine_groups(auth_token)
        if not groups:
            raise ResponseError("No engine groups available", error_code="EMPTY")
        return [group.name for group in groups]

    @_contract(default=None)
    def get_engine_group_id_from_name(self, auth_token: str, engine_group_name: str) -> Optional[str]:
        for group in self._engine_groups(auth_token):
            if group.name == engine_group_name:
                return group.id
        logger.debug("Engine group %r not found", engine_group_name)
        return None

    @_contract(default=ScanResult.failed())
    def run_scan_by_config_name(self, auth_token: str, config_name: str) -> ScanResult:
        if not config_name:
            raise ValidationError("Config name is required", error_code="INVALID_NAME")
        res = self._send(
            "POST",
            RUN_SCAN_BY_CONFIG_NAME,
            headers=self._auth_headers(auth_token),
            data={"configName": config_name},
        )
        scan = get_object(successful_json(res), "Scan")
        scan_id = get_string(scan, "Id")
        logger.info("Scan %s started from config %r", scan_id, config_name)
        return ScanResult.succeeded(scan_id)

    @_contract(default=None)
    def get_scan_status(self, auth_token: str, scan_id: str) -> Optional[str]:
        body = self._get_json(auth_token, GET_SCAN_STATUS, params={"scanId": scan_id})
        return get_string(body, "Status")

    @_contract(default=False)
    def is_scan_finished(self, auth_token: str, scan_id: str) -> bool:
        body = self._get_json(auth_token, IS_SCAN_FINISHED, params={"scanId": scan_id})
        return get_bool(body, "Result")

    @_contract(default=False)
    def has_report(self, auth_token: str, scan_id: str) -> bool:
        body = self._get_json(auth_token, HAS_REPORT, params={"scanId": scan_id})
        return get_bool(body, "Result")

    @_contract(default=None)
    def get_config_names(self, auth_token: str) -> Optional[List[str]]:
        return [get_string(item, "Name") for item in self._configs(auth_token)]

    @_contract(default=False)
    def save_config(self, auth_token: str, name: str, url: str, engine_group_id: str) -> bool:
        if not engine_group_id:
            raise ValidationError("Engine group id is required", error_code="INVALID_ENGINE_GROUP")
        scan_config = ScanConfig(name=name, url=str(url), engine_group_id=engine_group_id)
        payload: Dict[str, Any] = {
            "Name": scan_config.name,
            "EngineGroupId": scan_config.engine_group_id,
            "Xml": build_scan_config_xml(scan_config),
        }

        # 같은 이름의 설정이 있으면 Id 를 넘겨 갱신 (중복 생성 방지)
        existing = next(
            (item for item in self._configs(auth_token) if item.get("Name") == name),
            None,
        )
        if existing is not None:
            payload["Id"] = get_string(existing, "Id")
            if existing.get("ClientId"):
                payload["ClientId"] = existing["ClientId"]

        res = self._send(
            "POST",
            SAVE_CONFIG,
            headers=self._auth_headers(auth_token),
            files={"Config": (None, json.dumps(payload), "application/json")},
        )
        successful_json(res)
        logger.info("%s config %r", "Updated" if existing else "Created", name)
        return True

    @_contract(default=None)
    def get_vulnerabilities_summary_xml(self, auth_token: str, scan_id: str) -> Optional[str]:
        res = self._send(
            "GET",
            GET_VULNERABILITIES_SUMMARY,
            headers={**self._auth_headers(auth_token), "Accept": "application/xml"},
            params={"scanId": scan_id},
        )
        text = ensure_ok(res).text or ""
        # .NET 서버는 UTF-8 BOM 을 붙여 보내기도 함
        if text.startswith("\ufeff"):
            text = text[1:]
        if not text.lstrip().startswith("<"):
            raise ResponseError("Vulnerability summary is not XML", error_code="DECODE")
        return text

    @_contract(default=None)
    def get_report_zip(self, auth_token: str, scan_id: str) -> Optional[BinaryIO]:
        res = self._send(
            "GET",
            GET_REPORT_ZIP,
            headers={**self._auth_headers(auth_token), "Accept": "application/zip"},
            params={"scanId": scan_id},
            stream=True,
        )
        try:
            ensure_ok(res)
            # 리포트가 없으면 서버가 JSON 에러 envelope 를 200 으로 돌려준다
            if "json" in res.headers.get("Content-Type", "").lower():
                raise ResponseError("Report is not available", error_code="NO_REPORT")
        except ResponseError:
            res.close()
            raise
        return io.BufferedReader(ReportStream(res))

    @_contract(default=None)
    def get_client_name_id_pairs(self, auth_token: str) -> Optional[List[ClientIdNamePair]]:
        body = self._get_json(auth_token, GET_CLIENTS)
        return [
            ClientIdNamePair(id=get_string(item, "ClientId"), name=get_string(item, "ClientName"))
            for item in get_list(body, "Clients")
        ]

    # Context Manager
    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "EnterpriseRestClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = [
    "EnterpriseRestClient",
    "ReportStream",
]
