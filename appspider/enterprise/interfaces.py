from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

# ============================================================================
# Enum Types
# ============================================================================

class ScanStatus(str, Enum):
    """서버가 돌려주는 스캔 상태 문자열"""
    STARTING = "Starting"
    QUEUED = "Queued"
    RUNNING = "Running"
    PAUSING = "Pausing"
    PAUSED = "Paused"
    STOPPING = "Stopping"
    COMPLETED = "Completed"
    STOPPED = "Stopped"
    CANCELLED = "Cancelled"
    FAILED = "Failed"

    @classmethod
    def terminal(cls) -> frozenset:
        return frozenset({cls.COMPLETED, cls.STOPPED, cls.CANCELLED, cls.FAILED})

    @classmethod
    def is_terminal(cls, status: Optional[str]) -> bool:
        """상태 문자열이 종료 상태인지 여부 (대소문자 무시)"""
        if not status:
            return False
        lowered = status.strip().lower()
        return any(s.value.lower() == lowered for s in cls.terminal())


# ============================================================================
# Input Types (입력 타입)
# ============================================================================

@dataclass(frozen=True)
class AuthenticationModel:
    """로그인 요청에 쓰이는 자격 증명"""
    username: str
    password: str
    client_id: Optional[str] = None

    @property
    def has_client_id(self) -> bool:
        return bool(self.client_id)

    def __repr__(self) -> str:
        # password 는 repr 에 노출하지 않음
        return (
            f"AuthenticationModel(username={self.username!r}, "
            f"password='***', client_id={self.client_id!r})"
        )


@dataclass(frozen=True)
class ScanConfig:
    """저장/갱신할 스캔 설정"""
    name: str
    url: str
    engine_group_id: str


# ============================================================================
# Configuration Types (설정 타입)
# ============================================================================

@dataclass(frozen=True)
class EnterpriseClientConfig:
    """REST 클라이언트 동작 설정"""
    url: str
    timeout: Optional[float] = 30.0
    retry: int = 1
    backoff: float = 0.2
    verify_ssl: bool = True
    user_agent: str = "appspider-enterprise-client/0.1.0"


# ============================================================================
# Result Types (결과 타입)
# ============================================================================

@dataclass(frozen=True)
class ClientIdNamePair:
    """접근 가능한 client(tenant)의 id/name 쌍"""
    id: str
    name: str


@dataclass(frozen=True)
class EngineGroup:
    """스캔 엔진 그룹"""
    id: str
    name: str


@dataclass(frozen=True)
class ScanResult:
    """스캔 시작 요청 결과

    success 가 False 이면 scan_id 는 항상 None.
    """
    success: bool
    scan_id: Optional[str] = None

    @classmethod
    def succeeded(cls, scan_id: str) -> "ScanResult":
        return cls(success=True, scan_id=scan_id)

    @classmethod
    def failed(cls) -> "ScanResult":
        return cls(success=False, scan_id=None)


# ============================================================================
# Error Types (에러 타입)
# ============================================================================

class AppSpiderException(Exception):
    """모든 클라이언트 예외의 베이스 클래스"""
    def __init__(
        self,
        message: str,
        error_code: str = "UNKNOWN",
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.timestamp = datetime.now()
        self.context = context or {}


class NetworkError(AppSpiderException):
    """네트워크 관련 에러"""
    pass


class AuthenticationError(AppSpiderException):
    """인증 실패"""
    pass


class ConfigurationError(AppSpiderException):
    """설정 오류"""
    pass


class ResponseError(AppSpiderException):
    """응답 형식/내용 오류 (IsSuccess=false, 필드 누락, 파싱 실패)"""
    pass


class ValidationError(AppSpiderException):
    """입력 검증 오류"""
    pass


class ScanTimeoutError(AppSpiderException):
    """스캔 대기 시간 초과"""
    pass

