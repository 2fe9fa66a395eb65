"""
Error definitions for the bundle protocol.

규칙:
- 조용한 실패 금지 → 코드가 붙은 예외로 명시적 실패
- build 단계 에러는 네트워크 계층까지 가지 않음
- gateway 단계 에러는 재시도 없이 타입이 있는 결과로 보고
"""

from typing import Any


class BundleProtocolError(Exception):
    """
    번들 프로토콜 에러의 공통 베이스.

    Usage:
        raise NotFoundError(locator="abc..._0")
        raise SchemaError(ErrorCodes.SCHEMA_FIELD_MISSING, field="name")
    """

    default_code = "BUNDLE_PROTOCOL_ERROR"

    def __init__(self, code: str | None = None, **context: Any) -> None:
        self.code = code or self.default_code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            **self.context,
        }


class DanglingReferenceError(BundleProtocolError):
    """
    build 시점 전용: 참조 인덱스가 번들 범위를 벗어남.

    범위 밖, 음수, 자기 자신(manifest index) 참조 모두 포함.
    치명적 에러. inscription/네트워크 시도 전에 발생.
    """

    default_code = "DANGLING_REFERENCE"


class InvalidLocatorError(BundleProtocolError):
    """ContentLocator 또는 txid 형식 오류."""

    default_code = "INVALID_LOCATOR"


class NotFoundError(BundleProtocolError):
    """ContentLocator가 content store에 없음."""

    default_code = "NOT_FOUND"


class ContentStoreError(BundleProtocolError):
    """content store 호출 실패 (timeout, 5xx 등). NotFound와 구분."""

    default_code = "CONTENT_STORE_FAILED"


class SchemaError(BundleProtocolError):
    """resolve된 문서가 선언된 manifest kind의 스키마를 만족하지 않음."""

    default_code = "SCHEMA_INVALID"


class HydrationError(BundleProtocolError):
    """
    sibling fetch 실패 또는 디코딩 불가.

    하나라도 실패하면 hydration 전체 실패 (부분 결과 반환 금지).
    """

    default_code = "HYDRATION_FAILED"


class UnsupportedKindError(BundleProtocolError):
    """manifest discriminator에 등록된 translator가 없음."""

    default_code = "UNSUPPORTED_KIND"


class InvalidRequestError(BundleProtocolError):
    """bundle API 요청 본문 오류 (base64 아님, 필수 필드 조합 위반 등)."""

    default_code = "INVALID_REQUEST"


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수. 새 코드 추가 시 HTTP 매핑(routes/errors.py)도 확인."""

    # === Build ===
    DANGLING_REFERENCE = "DANGLING_REFERENCE"
    SELF_REFERENCE = "SELF_REFERENCE"
    UNKNOWN_SLOT = "UNKNOWN_SLOT"
    DUPLICATE_SLOT = "DUPLICATE_SLOT"
    UNPLACED_SLOT = "UNPLACED_SLOT"

    # === Locator ===
    INVALID_LOCATOR = "INVALID_LOCATOR"
    INVALID_TXID = "INVALID_TXID"

    # === Content Store ===
    NOT_FOUND = "NOT_FOUND"
    CONTENT_STORE_FAILED = "CONTENT_STORE_FAILED"
    FETCH_TIMEOUT = "FETCH_TIMEOUT"

    # === Validation ===
    SCHEMA_INVALID = "SCHEMA_INVALID"
    SCHEMA_NOT_JSON = "SCHEMA_NOT_JSON"
    SCHEMA_FIELD_MISSING = "SCHEMA_FIELD_MISSING"
    SCHEMA_FIELD_TYPE = "SCHEMA_FIELD_TYPE"
    UNRESOLVED_REFERENCE = "UNRESOLVED_REFERENCE"
    KIND_MISMATCH = "KIND_MISMATCH"

    # === Hydration ===
    HYDRATION_FAILED = "HYDRATION_FAILED"
    SIBLING_NOT_FOUND = "SIBLING_NOT_FOUND"
    SIBLING_TIMEOUT = "SIBLING_TIMEOUT"
    SIBLING_UNDECODABLE = "SIBLING_UNDECODABLE"
    SIBLING_EMPTY = "SIBLING_EMPTY"

    # === Translation ===
    UNSUPPORTED_KIND = "UNSUPPORTED_KIND"

    # === Request ===
    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_BASE64 = "INVALID_BASE64"
