"""
JSON 문서 트리 유틸리티.

스키마와 무관한 범용 visitor:
- 값 타입: str | int | float | bool | None | list | dict
- dict key는 방문하지 않음 (값만)
- 원본 트리는 수정하지 않고 새 트리 반환
"""

import copy
import json
from collections.abc import Callable, Iterator
from typing import Any

from src.domain.schemas import JsonObject, JsonValue

FieldPath = tuple[str | int, ...]


def map_strings(value: JsonValue, transform: Callable[[str], str]) -> JsonValue:
    """
    트리의 모든 문자열 값에 transform 적용.

    Args:
        value: JSON 값 (중첩 dict/list 가능)
        transform: 문자열 변환 함수

    Returns:
        변환된 새 트리
    """
    if isinstance(value, str):
        return transform(value)
    if isinstance(value, list):
        return [map_strings(item, transform) for item in value]
    if isinstance(value, dict):
        return {key: map_strings(item, transform) for key, item in value.items()}
    return value


def iter_strings(value: JsonValue, path: FieldPath = ()) -> Iterator[tuple[FieldPath, str]]:
    """트리의 (경로, 문자열 값) 순회."""
    if isinstance(value, str):
        yield path, value
    elif isinstance(value, list):
        for i, item in enumerate(value):
            yield from iter_strings(item, (*path, i))
    elif isinstance(value, dict):
        for key, item in value.items():
            yield from iter_strings(item, (*path, key))


def get_path(document: JsonValue, path: FieldPath) -> JsonValue:
    """경로 값 조회. 없으면 KeyError/IndexError."""
    current: Any = document
    for part in path:
        current = current[part]
    return current


def set_path(document: JsonObject, path: FieldPath, value: JsonValue) -> None:
    """
    경로에 값 설정 (중간 dict 자동 생성).

    document를 직접 수정하므로 호출 측에서 복사본을 넘길 것.
    """
    if not path:
        raise ValueError("empty field path")
    current: Any = document
    for part in path[:-1]:
        if isinstance(current, dict):
            current = current.setdefault(part, {})
        else:
            current = current[part]
    current[path[-1]] = value


def clone(document: JsonObject) -> JsonObject:
    """깊은 복사."""
    return copy.deepcopy(document)


def parse_document(raw: bytes | str) -> JsonObject:
    """
    bytes → JSON object.

    Raises:
        ValueError: JSON이 아니거나 최상위가 object가 아닐 때
    """
    text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"expected JSON object, got {type(data).__name__}")
    return data


def dump_document(document: JsonObject, indent: int | None = 2) -> bytes:
    """JSON object → UTF-8 bytes (inscription payload)."""
    return json.dumps(document, indent=indent, ensure_ascii=False).encode("utf-8")
