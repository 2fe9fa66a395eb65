"""
Reference Resolver: {{vout:N}} → <txid>_N.

규칙:
- 문자열 값 안의 모든 placeholder 치환 (부분 문자열 포함)
- 그 외 바이트/값은 그대로 (bytes 버전은 공백/키 순서까지 보존)
- dict key는 치환 대상 아님
- JSON escape로 쓰인 placeholder도 치환 (해당 문자열 토큰만 재직렬화)
- 멱등: 이미 resolve된 문서에는 placeholder가 없으므로 no-op
"""

import json
import re
from typing import cast

from src.core.documents import iter_strings, map_strings, parse_document
from src.core.locator import format_locator, validate_txid
from src.domain.constants import PLACEHOLDER_PATTERN
from src.domain.errors import ErrorCodes, SchemaError
from src.domain.schemas import ContentLocator, JsonObject, JsonValue, ResolvedDocument

# JSON string 토큰 + (key이면) 뒤따르는 ':'
_JSON_STRING_TOKEN = re.compile(r'("(?:[^"\\]|\\.)*")(\s*:)?')


def resolve_string(value: str, txid: str) -> str:
    """문자열 하나의 placeholder 치환."""
    return PLACEHOLDER_PATTERN.sub(lambda m: format_locator(txid, int(m.group(1))), value)


def resolve_value(value: JsonValue, txid: str) -> JsonValue:
    """
    파싱된 문서 트리의 placeholder 치환.

    Args:
        value: JSON 트리 (원본 불변)
        txid: 최종 트랜잭션 ID

    Returns:
        치환된 새 트리
    """
    txid = validate_txid(txid)
    return map_strings(value, lambda s: resolve_string(s, txid))


def resolve(document_bytes: bytes, txid: str) -> bytes:
    """
    inscription payload(JSON bytes)의 placeholder 치환.

    문자열 값 토큰만 다시 쓰고 나머지 바이트는 그대로 둠.

    Raises:
        SchemaError: JSON 문서가 아닐 때
        InvalidLocatorError: txid 형식 오류
    """
    txid = validate_txid(txid)
    try:
        text = document_bytes.decode("utf-8")
        parse_document(text)
    except ValueError as e:  # UnicodeDecodeError, JSONDecodeError 포함
        raise SchemaError(ErrorCodes.SCHEMA_NOT_JSON, error=str(e)) from e

    def _rewrite(match: re.Match[str]) -> str:
        token, key_colon = match.group(1), match.group(2)
        if key_colon:
            return match.group(0)
        if "\\" not in token:
            return resolve_string(token, txid)
        # escape로 쓰인 placeholder는 디코딩 후 판별, 치환할 때만 재직렬화
        decoded = json.loads(token)
        if not PLACEHOLDER_PATTERN.search(decoded):
            return token
        return json.dumps(resolve_string(decoded, txid), ensure_ascii=False)

    return _JSON_STRING_TOKEN.sub(_rewrite, text).encode("utf-8")


def resolve_template(template: JsonObject, locator: ContentLocator) -> ResolvedDocument:
    """gateway용: fetch한 template를 entry locator의 txid로 resolve."""
    resolved = cast(JsonObject, resolve_value(template, locator.txid))
    return ResolvedDocument(locator=locator, document=resolved)


def referenced_indices(value: JsonValue) -> list[int]:
    """트리에 등장하는 placeholder index (등장 순서, 중복 포함)."""
    indices: list[int] = []
    for _, text in iter_strings(value):
        indices.extend(int(m.group(1)) for m in PLACEHOLDER_PATTERN.finditer(text))
    return indices


def has_references(value: JsonValue) -> bool:
    """placeholder가 하나라도 남아 있는지."""
    return any(PLACEHOLDER_PATTERN.search(text) for _, text in iter_strings(value))
