"""
Upstream 응답 파싱 + ExplainResult 정규화.

파싱 전략 (순서대로):
1. strict json.loads
2. best-effort: 첫 '{' ~ 마지막 '}' 구간만 잘라서 json.loads
   (모델이 JSON 앞뒤에 설명 문장을 붙이는 경우 복구용, 손실 허용 휴리스틱)

어느 단계도 예외를 밖으로 던지지 않음 → 실패 시 None.
"""

import json
from typing import Any

from src.domain.constants import MAX_CURIOUS_QUESTIONS
from src.domain.schemas import ExplainResult

# 과도한 중첩 ("[[[[...")은 json.loads에서 RecursionError
_DECODE_ERRORS = (ValueError, RecursionError)


def safe_parse_json(text: str | None) -> Any:
    """
    JSON 파싱 (strict → 첫 '{' ~ 마지막 '}' 구간).

    구간 탐색은 find/rfind로 선형 시간.

    Returns:
        파싱된 값, 복구 불가 시 None
    """
    if not text:
        return None

    try:
        return json.loads(text)
    except _DECODE_ERRORS:
        pass

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return None

    try:
        return json.loads(text[start : end + 1])
    except _DECODE_ERRORS:
        return None


def parse_explanation(text: str | None) -> dict[str, Any] | None:
    """모델 생성 텍스트 → JSON 객체. 객체가 아니면 None."""
    data = safe_parse_json(text)
    if isinstance(data, dict):
        return data
    return None


def _as_text(value: Any) -> str:
    if not value:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def normalize_result(data: dict[str, Any]) -> ExplainResult:
    """
    파싱된 JSON 객체 → ExplainResult.

    - 누락된 문자열 필드 → ""
    - curiousQuestions: 배열일 때만 사용, 최대 5개, 그 외 → 빈 값
    """
    questions = data.get("curiousQuestions")
    if isinstance(questions, list):
        curious = tuple(_as_text(q) for q in questions[:MAX_CURIOUS_QUESTIONS])
    else:
        curious = ()

    return ExplainResult(
        simple_explanation=_as_text(data.get("simpleExplanation")),
        analogy=_as_text(data.get("analogy")),
        real_world_example=_as_text(data.get("realWorldExample")),
        curious_questions=curious,
    )
