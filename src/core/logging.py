"""
Request logging: gateway 요청 로그, 상태 전이 기록

규칙:
- 요청마다 RequestLog 1개, 상태 전이마다 StageEvent 1개
- 실패 시 error_code + error_context 필수
- 저장하지 않음: 완료 시 logger로 구조화된 한 줄 출력
"""

import json
import logging
import time
from datetime import UTC, datetime
from typing import Any

from src.core.ids import generate_request_id
from src.domain.schemas import GatewayStage, RequestLog, StageEvent

logger = logging.getLogger("src.gateway.requests")


def create_request_log(locator: str) -> RequestLog:
    """
    새 RequestLog 생성.

    Args:
        locator: 요청된 ContentLocator 문자열

    Returns:
        초기화된 RequestLog
    """
    now = datetime.now(UTC).isoformat()
    request_id = generate_request_id()

    return RequestLog(
        request_id=request_id,
        locator=locator,
        started_at=now,
        result="pending",
        monotonic_start=time.monotonic(),
    )


def record_stage(request_log: RequestLog, stage: GatewayStage) -> None:
    """
    상태 전이 기록.

    Args:
        request_log: RequestLog 인스턴스
        stage: 진입한 상태
    """
    started = request_log.monotonic_start or time.monotonic()
    event = StageEvent(
        stage=stage,
        at=datetime.now(UTC).isoformat(),
        elapsed_ms=(time.monotonic() - started) * 1000,
    )
    request_log.stages.append(event)
    logger.debug(f"[{request_log.request_id}] → {stage.value}")


def complete_request_log(
    request_log: RequestLog,
    success: bool,
    document_hash: str | None = None,
    error_code: str | None = None,
    error_context: dict[str, Any] | None = None,
) -> None:
    """
    RequestLog 완료 처리 + 출력.

    Args:
        request_log: RequestLog 인스턴스
        success: 성공 여부
        document_hash: 번역 결과 해시 (성공 시)
        error_code: 에러 코드 (실패 시)
        error_context: 에러 컨텍스트 (실패 시)
    """
    request_log.finished_at = datetime.now(UTC).isoformat()
    request_log.result = "success" if success else "failed"
    request_log.document_hash = document_hash

    if not success:
        request_log.error_code = error_code
        request_log.error_context = error_context

    emit_request_log(request_log)


def emit_request_log(request_log: RequestLog) -> None:
    """RequestLog를 JSON 한 줄로 출력 (실패는 warning)."""
    line = json.dumps(request_log.to_dict(), ensure_ascii=False, default=str)
    if request_log.result == "success":
        logger.info(line)
    else:
        logger.warning(line)


def configure_logging(config: dict[str, Any]) -> None:
    """
    설정의 logging 섹션 적용.

    logging.level: DEBUG/INFO/WARNING (기본 INFO)
    """
    log_config = config.get("logging", {})
    level_name = str(log_config.get("level", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=log_config.get(
            "format", "%(asctime)s %(levelname)s %(name)s: %(message)s"
        ),
    )
