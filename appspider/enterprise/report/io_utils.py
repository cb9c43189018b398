# 파일 저장 공통 유틸

"""
I/O Utility Module

리포트 다운로더가 사용하는 파일 저장 유틸리티를 제공합니다.
디렉토리 생성, 텍스트/바이너리 쓰기, 스트림 복사 등을 담당합니다.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import BinaryIO


def ensure_parent(path: Path) -> None:
    """
    파일 경로의 부모 디렉토리가 존재하지 않으면 생성합니다.
    """
    parent = path.parent
    if not parent.exists():
        parent.mkdir(parents=True, exist_ok=True)


def write_text_file(path: Path, content: str, encoding: str = "utf-8") -> None:
    path = Path(path)
    ensure_parent(path)
    path.write_text(content, encoding=encoding)


def write_binary_file(path: Path, data: bytes) -> None:
    path = Path(path)
    ensure_parent(path)
    path.write_bytes(data)


def safe_write(path: Path, content: str | bytes, encoding: str = "utf-8") -> None:
    """
    텍스트/바이너리 모두 지원하는 통합 API.

    Args:
        path: 저장 경로
        content: 문자열 또는 bytes
        encoding: 문자열일 경우 인코딩 지정
    """
    if isinstance(content, bytes):
        write_binary_file(path, content)
    else:
        write_text_file(path, content, encoding=encoding)


def write_stream(path: Path, stream: BinaryIO, chunk_size: int = 64 * 1024) -> int:
    """
    바이너리 스트림을 파일로 복사합니다. 스트림은 닫지 않습니다.

    Returns:
        기록한 바이트 수
    """
    path = Path(path)
    ensure_parent(path)
    with path.open("wb") as fh:
        shutil.copyfileobj(stream, fh, chunk_size)
        return fh.tell()
