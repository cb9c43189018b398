"""
SaveConfig 요청용 스캔 설정 XML 생성

서버는 ScanConfig XML 문서를 그대로 저장한다. 여기서는 최소 구성
(이름, 대상 URL, 크롤 범위)만 채우고 나머지는 서버 기본값을 따른다.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from urllib.parse import urlparse

from appspider.enterprise.interfaces import ScanConfig, ValidationError


def _target_host(url: str) -> str:
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError(f"Invalid target URL: {url}", error_code="INVALID_URL")
    return parsed.netloc


def build_scan_config_xml(config: ScanConfig) -> str:
    """ScanConfig -> ScanConfig XML 문자열"""
    if not config.name:
        raise ValidationError("Config name is required", error_code="INVALID_NAME")
    host = _target_host(config.url)

    root = ET.Element("ScanConfig")
    ET.SubElement(root, "Name").text = config.name

    crawl = ET.SubElement(root, "CrawlConfig")
    seeds = ET.SubElement(crawl, "SeedUrlList")
    seed = ET.SubElement(seeds, "SeedUrl")
    ET.SubElement(seed, "Value").text = config.url

    # 대상 호스트 밖으로는 크롤링하지 않음
    scope = ET.SubElement(crawl, "ScopeConstraintList")
    constraint = ET.SubElement(scope, "ScopeConstraint")
    ET.SubElement(constraint, "URL").text = f"{urlparse(config.url).scheme}://{host}*"
    ET.SubElement(constraint, "Method").text = "All"
    ET.SubElement(constraint, "MatchCriteria").text = "Wildcard"
    ET.SubElement(constraint, "Exclusion").text = "Include"

    return ET.tostring(root, encoding="unicode")
