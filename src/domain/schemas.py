"""
Data schemas for the explain gateway.

규칙:
- 모든 값은 요청 단위 (생성 → 사용 → 폐기), 영속화 없음
- HTTP 응답 키는 camelCase (프론트엔드 계약), 내부 필드는 snake_case
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .constants import (
    DEFAULT_LEVEL,
    DEFAULT_STYLE,
    MIN_TOPIC_LENGTH,
    TOPIC_TOO_SHORT_MESSAGE,
)
from .errors import ErrorCodes, GatewayError

# =============================================================================
# Enums
# =============================================================================


class Level(str, Enum):
    """청중 수준."""
    KID = "Kid"
    TEEN = "Teen"
    EXPERT = "Expert"


class Style(str, Enum):
    """설명 스타일."""
    SIMPLE = "Simple"
    ANALOGY = "Analogy"
    STEP_BY_STEP = "Step-by-step"


def _parse_enum(enum_cls: type[Enum], value: Any, default: str, name: str) -> Any:
    if value is None or value == "":
        return enum_cls(default)
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise GatewayError(
            ErrorCodes.INVALID_INPUT,
            f"Unsupported {name} {value!r}. Expected one of: {allowed}.",
        ) from None


# =============================================================================
# Request
# =============================================================================


@dataclass(frozen=True)
class ExplainRequest:
    """
    설명 요청.

    불변식: topic.strip() 길이 >= MIN_TOPIC_LENGTH
    (검증은 validate()에서, 네트워크 호출 전에 수행)
    """
    topic: str
    level: Level = Level.KID
    style: Style = Style.SIMPLE

    @property
    def clean_topic(self) -> str:
        return (self.topic or "").strip()

    def validate(self) -> None:
        """topic 최소 길이 검증. 위반 시 invalid_input."""
        if len(self.clean_topic) < MIN_TOPIC_LENGTH:
            raise GatewayError(ErrorCodes.INVALID_INPUT, TOPIC_TOO_SHORT_MESSAGE)

    @classmethod
    def from_payload(cls, payload: Any) -> "ExplainRequest":
        """
        JSON payload → ExplainRequest.

        Args:
            payload: {"topic": str, "level"?: str, "style"?: str}

        Raises:
            GatewayError: payload가 객체가 아니거나 level/style이 허용값이 아닐 때
        """
        if not isinstance(payload, dict):
            raise GatewayError(
                ErrorCodes.INVALID_INPUT,
                "Request body must be a JSON object.",
            )

        topic = payload.get("topic")
        if not isinstance(topic, str):
            topic = ""

        return cls(
            topic=topic,
            level=_parse_enum(Level, payload.get("level"), DEFAULT_LEVEL, "level"),
            style=_parse_enum(Style, payload.get("style"), DEFAULT_STYLE, "style"),
        )


# =============================================================================
# Result
# =============================================================================


@dataclass(frozen=True)
class ExplainResult:
    """
    호출자에게 반환되는 유일한 성공 값.

    upstream이 필드를 누락하면 빈 문자열 / 빈 튜플.
    """
    simple_explanation: str = ""
    analogy: str = ""
    real_world_example: str = ""
    curious_questions: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """HTTP 응답용 (camelCase)."""
        return {
            "simpleExplanation": self.simple_explanation,
            "analogy": self.analogy,
            "realWorldExample": self.real_world_example,
            "curiousQuestions": list(self.curious_questions),
        }


# =============================================================================
# Upstream Wire Types
# =============================================================================


@dataclass(frozen=True)
class UpstreamRequest:
    """provider가 만든 1회 시도용 wire 요청."""
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    json: dict[str, Any] = field(default_factory=dict)
    params: dict[str, str] = field(default_factory=dict)


@dataclass
class RawUpstreamResult:
    """
    1회 시도 결과.

    시도가 끝나면 폐기 (요청 간 보관 금지).
    """
    succeeded: bool
    status_code: int
    raw_body: str
    parsed_body: Any = None


# =============================================================================
# Run Log Schemas (core/logging.py에서 사용)
# =============================================================================


@dataclass
class AttemptLog:
    """
    후보 모델 1회 시도 기록.

    응답 본문은 저장하지 않음 (model, status, outcome, latency만).
    """
    model: str
    status_code: int | None = None
    outcome: str = "ok"  # ok 또는 ErrorCodes 값
    latency_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "model": self.model,
            "status_code": self.status_code,
            "outcome": self.outcome,
            "latency_ms": round(self.latency_ms, 1),
        }


@dataclass
class RunLog:
    """
    실행 로그.

    explain 요청 단위 실행 결과 및 메타데이터.
    """
    run_id: str
    provider: str
    started_at: str  # ISO 8601
    finished_at: str | None = None
    result: str = "pending"  # pending, success, failed

    attempts: list[AttemptLog] = field(default_factory=list)

    # 성공 시 실제 사용된 모델
    model_used: str | None = None

    # Error (if failed)
    error_code: str | None = None

    @property
    def attempted_models(self) -> list[str]:
        return [a.model for a in self.attempts]

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "provider": self.provider,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "result": self.result,
            "attempts": [a.to_dict() for a in self.attempts],
            "model_used": self.model_used,
            "error_code": self.error_code,
        }
