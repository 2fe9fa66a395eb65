"""
ContentLocator 파싱/검증.

포맷: "<64-hex txid>_<index>"
- txid는 소문자로 정규화
- index는 음수 불가
"""

from src.domain.constants import LOCATOR_PATTERN, TXID_PATTERN
from src.domain.errors import ErrorCodes, InvalidLocatorError
from src.domain.schemas import ContentLocator

# 사용자가 URL 전체를 붙여넣는 경우 제거할 prefix
_KNOWN_PREFIXES = (
    "https://ordfs.network/content/",
    "https://ordfs.network/",
    "/content/",
)


def validate_txid(txid: str) -> str:
    """
    txid 검증 후 정규화된 값 반환.

    Raises:
        InvalidLocatorError: 64자리 hex가 아닐 때
    """
    normalized = txid.strip().lower()
    if not TXID_PATTERN.match(normalized):
        raise InvalidLocatorError(ErrorCodes.INVALID_TXID, txid=txid)
    return normalized


def parse_locator(value: str) -> ContentLocator:
    """
    "<txid>_<index>" 문자열 → ContentLocator.

    Raises:
        InvalidLocatorError: 형식 오류
    """
    match = LOCATOR_PATTERN.match(value.strip().lower())
    if not match:
        raise InvalidLocatorError(locator=value)
    return ContentLocator(txid=match.group("txid"), index=int(match.group("index")))


def is_locator(value: object) -> bool:
    """문자열이 ContentLocator 형식인지."""
    return isinstance(value, str) and LOCATOR_PATTERN.match(value) is not None


def normalize_origin(origin: str) -> ContentLocator:
    """
    요청 경로의 origin → ContentLocator.

    - URL prefix, ".json" 확장자 제거
    - txid만 주어지면 "_0"으로 간주
    """
    cleaned = origin.strip()
    for prefix in _KNOWN_PREFIXES:
        if cleaned.startswith(prefix):
            cleaned = cleaned[len(prefix):]
            break
    if cleaned.endswith(".json"):
        cleaned = cleaned[: -len(".json")]

    if "_" not in cleaned:
        return ContentLocator(txid=validate_txid(cleaned), index=0)
    return parse_locator(cleaned)


def format_locator(txid: str, index: int) -> str:
    """ContentLocator 문자열 직렬화."""
    if index < 0:
        raise InvalidLocatorError(txid=txid, index=index)
    return str(ContentLocator(txid=validate_txid(txid), index=index))
