"""
ScanMonitor
- 시작된 스캔이 종료 상태가 될 때까지 is_scan_finished 를 주기적으로 호출
- 스캔 상태는 서버에만 있으므로 여기서는 폴링만 한다
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from appspider.enterprise.clients.protocols import EnterpriseClientProtocol
from appspider.enterprise.interfaces import ScanTimeoutError
from appspider.enterprise.logger import get_logger

logger = get_logger("monitor")

DEFAULT_POLL_INTERVAL = 30.0


class ScanMonitor:
    def __init__(
        self,
        client: EnterpriseClientProtocol,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        timeout: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        self.client = client
        self.poll_interval = poll_interval
        self.timeout = timeout
        self._sleep = sleep
        self._clock = clock

    def wait(
        self,
        auth_token: str,
        scan_id: str,
        on_status: Optional[Callable[[Optional[str]], None]] = None,
    ) -> Optional[str]:
        """스캔이 끝날 때까지 대기 후 마지막으로 확인한 상태 문자열을 반환

        timeout(초)이 지나면 ScanTimeoutError.
        """
        deadline = None if self.timeout is None else self._clock() + self.timeout
        last_status: Optional[str] = None

        while True:
            status = self.client.get_scan_status(auth_token, scan_id)
            if status is not None:
                last_status = status
            if on_status:
                on_status(last_status)

            if self.client.is_scan_finished(auth_token, scan_id):
                logger.info("Scan %s finished (%s)", scan_id, last_status or "unknown")
                return last_status

            delay = self.poll_interval
            if deadline is not None:
                remaining = deadline - self._clock()
                if remaining <= 0:
                    raise ScanTimeoutError(
                        f"Scan {scan_id} did not finish within {self.timeout} seconds",
                        error_code="SCAN_TIMEOUT",
                        context={"scan_id": scan_id, "last_status": last_status},
                    )
                # 마감 직전에 한 번 더 확인할 수 있도록 남은 시간만큼만 대기
                delay = min(delay, remaining)

            logger.debug("Scan %s status: %s", scan_id, last_status)
            self._sleep(delay)
