"""
Prompt Builder: (topic, level, style) → 단일 지시문.

순수 함수. 부작용/에러 없음.
topic은 escape 없이 그대로 삽입 (JSON-only 지시 준수는 upstream 모델 책임).
"""

from enum import Enum

PROMPT_ROLE = "You are Explain10, an expert at simplifying complex topics."

RESULT_SHAPE = (
    '{"simpleExplanation":"...","analogy":"...","realWorldExample":"...",'
    '"curiousQuestions":["...","...","..."]}'
)


def _text(value: str | Enum) -> str:
    return str(value.value) if isinstance(value, Enum) else str(value)


def build_prompt(topic: str, level: str | Enum, style: str | Enum) -> str:
    """
    설명 요청 프롬프트 생성.

    Args:
        topic: 설명할 주제 (빈 값 검증은 호출자 책임)
        level: 청중 수준 (Level 또는 문자열)
        style: 설명 스타일 (Style 또는 문자열)

    Returns:
        JSON 객체만 반환하도록 요구하는 지시문
    """
    return "\n".join([
        PROMPT_ROLE,
        f"Audience level: {_text(level)}.",
        f"Output style preference: {_text(style)}.",
        f"Topic: {topic}.",
        "Return ONLY valid JSON with this exact shape:",
        RESULT_SHAPE,
        "Keep each section concise and high-readability.",
    ])
