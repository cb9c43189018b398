"""
ReportDownloader
- 끝난 스캔의 취약점 요약 XML / 리포트 zip 을 output_dir 에 저장
- get_report_zip 으로 받은 스트림은 여기서 닫는다
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from appspider.enterprise.clients.protocols import EnterpriseClientProtocol
from appspider.enterprise.logger import get_logger
from .io_utils import safe_write, write_stream

logger = get_logger("report")


class ReportDownloader:
    def __init__(self, client: EnterpriseClientProtocol, output_dir: Path):
        self.client = client
        self.output_dir = Path(output_dir)

    def summary_path(self, scan_id: str) -> Path:
        return self.output_dir / f"{scan_id}_VulnerabilitiesSummary.xml"

    def zip_path(self, scan_id: str) -> Path:
        return self.output_dir / f"{scan_id}_Report.zip"

    def save_summary_xml(self, auth_token: str, scan_id: str) -> Optional[Path]:
        xml = self.client.get_vulnerabilities_summary_xml(auth_token, scan_id)
        if xml is None:
            logger.warning("No vulnerability summary for scan %s", scan_id)
            return None
        path = self.summary_path(scan_id)
        safe_write(path, xml)
        logger.info("Saved vulnerability summary to %s", path)
        return path

    def save_report_zip(self, auth_token: str, scan_id: str) -> Optional[Path]:
        stream = self.client.get_report_zip(auth_token, scan_id)
        if stream is None:
            logger.warning("No report zip for scan %s", scan_id)
            return None
        path = self.zip_path(scan_id)
        with stream:
            size = write_stream(path, stream)
        logger.info("Saved report zip to %s (%d bytes)", path, size)
        return path

    def download_all(self, auth_token: str, scan_id: str) -> List[Path]:
        """리포트가 있을 때만 요약 XML 과 zip 을 모두 저장"""
        if not self.client.has_report(auth_token, scan_id):
            logger.warning("Scan %s has no report", scan_id)
            return []
        saved = [
            self.save_summary_xml(auth_token, scan_id),
            self.save_report_zip(auth_token, scan_id),
        ]
        return [path for path in saved if path is not None]
