"""
Run logging: run log schema, attempt events, logger setup

규칙:
- 시도 기록 필수 컨텍스트: model, status_code, outcome, latency_ms
- upstream 응답 본문/프롬프트는 run log에 남기지 않음
- 실패 run은 WARNING, 성공 run은 INFO로 출력
"""

import json
import logging
from datetime import UTC, datetime

from src.core.ids import generate_run_id
from src.domain.schemas import AttemptLog, RunLog

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

run_logger = logging.getLogger("explain10.runs")

# =============================================================================
# Logger Setup
# =============================================================================


def configure_logging(level: str | int = "INFO") -> None:
    """
    루트 로거 설정.

    이미 핸들러가 있으면 (uvicorn, pytest 등) 레벨만 조정.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=level,
            format=LOG_FORMAT,
            datefmt=LOG_DATE_FORMAT,
        )
    root.setLevel(level)


# =============================================================================
# Run Log Management
# =============================================================================


def create_run_log(provider: str) -> RunLog:
    """
    새 RunLog 생성.

    Args:
        provider: upstream provider 이름

    Returns:
        초기화된 RunLog
    """
    now = datetime.now(UTC).isoformat()

    return RunLog(
        run_id=generate_run_id(),
        provider=provider,
        started_at=now,
        result="pending",
    )


def record_attempt(
    run_log: RunLog,
    model: str,
    status_code: int | None,
    outcome: str,
    latency_ms: float = 0.0,
) -> AttemptLog:
    """
    후보 모델 시도 기록.

    Args:
        run_log: RunLog 인스턴스
        model: 시도한 모델 ID
        status_code: upstream HTTP 상태 (전송 실패 시 None)
        outcome: "ok" 또는 에러 코드
        latency_ms: 시도 소요 시간

    Returns:
        추가된 AttemptLog
    """
    attempt = AttemptLog(
        model=model,
        status_code=status_code,
        outcome=outcome,
        latency_ms=latency_ms,
    )
    run_log.attempts.append(attempt)
    return attempt


def complete_run_log(
    run_log: RunLog,
    success: bool,
    model_used: str | None = None,
    error_code: str | None = None,
) -> None:
    """
    RunLog 완료 처리.

    Args:
        run_log: RunLog 인스턴스
        success: 성공 여부
        model_used: 성공한 모델 ID
        error_code: 에러 코드 (실패 시)
    """
    run_log.finished_at = datetime.now(UTC).isoformat()
    run_log.result = "success" if success else "failed"
    run_log.model_used = model_used

    if not success:
        run_log.error_code = error_code


def emit_run_log(run_log: RunLog, logger: logging.Logger | None = None) -> None:
    """완료된 RunLog를 한 줄 JSON으로 출력."""
    target = logger or run_logger
    level = logging.INFO if run_log.result == "success" else logging.WARNING
    target.log(level, "explain run %s", json.dumps(run_log.to_dict(), ensure_ascii=False))
