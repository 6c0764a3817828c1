"""
Local Fallback Explanation: upstream 실패 시 화면용 대체 설명.

네트워크 호출 없이 결정론적으로 생성.
사용자에게 완전히 빈 결과를 보여주지 않기 위한 용도 (HTML 페이지 전용).
JSON API(/explain)는 대체 설명 없이 분류된 에러를 그대로 반환.
"""

from src.domain.schemas import ExplainRequest, ExplainResult, Level, Style

TONE_BY_LEVEL = {
    Level.KID: "super simple with playful words",
    Level.TEEN: "simple, friendly, and practical",
    Level.EXPERT: "clear but with more technical precision",
}

STYLE_TEMPLATES = {
    Style.SIMPLE: {
        "analogy_prefix": "Think of it like",
        "add_on": "Keep it straightforward and concise.",
        "question_prompt": "Want to learn even more?",
    },
    Style.ANALOGY: {
        "analogy_prefix": "Imagine",
        "add_on": "Focus on relatable comparisons.",
        "question_prompt": "If this analogy makes sense, ask:",
    },
    Style.STEP_BY_STEP: {
        "analogy_prefix": "A step-by-step way to picture it is",
        "add_on": "Break the flow into clear steps.",
        "question_prompt": "To go step-by-step, you could ask:",
    },
}


def build_local_explanation(request: ExplainRequest) -> ExplainResult:
    """
    로컬 대체 설명 생성.

    Args:
        request: 원래 요청 (topic은 trim해서 사용)

    Returns:
        네 필드가 모두 채워진 ExplainResult
    """
    topic = request.clean_topic or request.topic
    tone = TONE_BY_LEVEL.get(request.level, TONE_BY_LEVEL[Level.TEEN])
    template = STYLE_TEMPLATES.get(request.style, STYLE_TEMPLATES[Style.SIMPLE])

    return ExplainResult(
        simple_explanation=(
            f"{topic} works in a way that's {tone}. {template['add_on']} "
            "The big idea is that smaller parts work together to create a useful "
            "result. Once you understand the core job each part does, the whole "
            "thing becomes much easier to follow."
        ),
        analogy=(
            f"{template['analogy_prefix']} a team delivering pizzas: one person "
            f"takes orders, one cooks, one drives. {topic} is similar because "
            "different parts each have a role, and the final outcome only works "
            "when they coordinate."
        ),
        real_world_example=(
            f"In real life, {topic} shows up when apps or systems need to handle "
            "many steps quickly and clearly, like booking a ride, tracking a "
            "package, or streaming a video without pauses."
        ),
        curious_questions=(
            f"What is the most important part of {topic}?",
            f"What breaks if one part of {topic} fails?",
            f"How would {topic} change at 10x scale?",
        ),
    )
