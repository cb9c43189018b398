"""
응답 본문 해석 유틸

Enterprise API 의 JSON 응답은 모두 아래 형태의 envelope 를 가진다.

    {"IsSuccess": true, "<Field>": ...}
    {"IsSuccess": false, "ErrorMessage": "..."}

여기서는 envelope 검사와 필드 추출만 담당하고,
실패는 ResponseError 로 올린다. (계약 경계에서의 변환은 enterprise_client.py)
"""

from __future__ import annotations

from typing import Any, Dict, List

from requests import Response

from appspider.enterprise.interfaces import ResponseError

SUCCESS_KEY = "IsSuccess"
ERROR_KEYS = ("ErrorMessage", "Reason", "Message")


def ensure_ok(res: Response) -> Response:
    """2xx 가 아니면 ResponseError"""
    if not 200 <= res.status_code < 300:
        raise ResponseError(
            f"Unexpected HTTP status {res.status_code}",
            error_code="HTTP_STATUS",
            context={"status_code": res.status_code, "url": res.url},
        )
    return res


def json_body(res: Response) -> Dict[str, Any]:
    """상태 코드 확인 후 JSON object 로 디코딩"""
    ensure_ok(res)
    try:
        body = res.json()
    except ValueError as exc:
        raise ResponseError(
            f"Response body is not JSON: {exc}", error_code="DECODE"
        ) from exc
    if not isinstance(body, dict):
        raise ResponseError("Response body is not a JSON object", error_code="DECODE")
    return body


def error_message(body: Dict[str, Any]) -> str:
    for key in ERROR_KEYS:
        if body.get(key):
            return str(body[key])
    return "IsSuccess is false"


def successful_json(res: Response) -> Dict[str, Any]:
    """IsSuccess 가 true 인 JSON envelope 반환"""
    body = json_body(res)
    if body.get(SUCCESS_KEY) is not True:
        raise ResponseError(error_message(body), error_code="NOT_SUCCESS")
    return body


def get_string(body: Dict[str, Any], key: str) -> str:
    """비어 있지 않은 문자열 필드"""
    value = body.get(key)
    if value is None or value == "":
        raise ResponseError(f"Missing field '{key}'", error_code="MISSING_FIELD")
    return str(value)


def get_bool(body: Dict[str, Any], key: str) -> bool:
    value = body.get(key)
    if isinstance(value, bool):
        return value
    # 일부 서버 버전은 "true"/"false" 문자열로 응답
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise ResponseError(f"Field '{key}' is not a boolean", error_code="MISSING_FIELD")


def get_object(body: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = body.get(key)
    if not isinstance(value, dict):
        raise ResponseError(f"Field '{key}' is not an object", error_code="MISSING_FIELD")
    return value


def get_list(body: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    value = body.get(key)
    if not isinstance(value, list):
        raise ResponseError(f"Field '{key}' is not an array", error_code="MISSING_FIELD")
    return [item for item in value if isinstance(item, dict)]


__all__ = [
    "ensure_ok",
    "json_body",
    "successful_json",
    "get_string",
    "get_bool",
    "get_object",
    "get_list",
]
