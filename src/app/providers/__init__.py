"""
AI Provider Abstraction.

upstream 교체 가능하게 설계.
provider 선택은 config(ai.provider)만 SSOT.
"""

from typing import Any

from .anthropic import ClaudeProvider
from .base import ExplainProvider
from .gemini import GeminiProvider
from .openai import OpenAIProvider

PROVIDERS: dict[str, type[ExplainProvider]] = {
    GeminiProvider.name: GeminiProvider,
    ClaudeProvider.name: ClaudeProvider,
    OpenAIProvider.name: OpenAIProvider,
}


def get_provider(name: str, **kwargs: Any) -> ExplainProvider:
    """
    이름으로 provider 생성.

    Raises:
        ValueError: 등록되지 않은 provider 이름
    """
    key = (name or "").strip().lower()
    if key not in PROVIDERS:
        allowed = ", ".join(sorted(PROVIDERS))
        raise ValueError(f"Unknown provider {name!r}. Expected one of: {allowed}")
    return PROVIDERS[key](**kwargs)


__all__ = [
    "ExplainProvider",
    "GeminiProvider",
    "ClaudeProvider",
    "OpenAIProvider",
    "PROVIDERS",
    "get_provider",
]
