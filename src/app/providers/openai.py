"""
OpenAI-compatible Provider (REST Chat Completions).

OpenAI 호환 게이트웨이(base URL 교체)는 배포된 단일 모델만 노출하므로
모델 fallback을 지원하지 않음 → 첫 후보만 시도.
"""

import os
from typing import Any

from src.domain.schemas import UpstreamRequest

from .base import ExplainProvider, dig

OPENAI_API_BASE = "https://api.openai.com/v1"

DEFAULT_MODELS = ("gpt-4o-mini",)


class OpenAIProvider(ExplainProvider):
    """
    OpenAI Chat Completions Provider.

    Usage:
        provider = OpenAIProvider(api_key="...", api_base="https://.../v1")
    """

    name = "openai"
    default_models = DEFAULT_MODELS
    api_key_envs = ("OPENAI_API_KEY",)
    model_env = "OPENAI_MODEL"
    supports_model_fallback = False

    def __init__(
        self,
        api_key: str | None = None,
        default_models: list[str] | tuple[str, ...] | None = None,
        api_base: str | None = None,
    ):
        """
        Args:
            api_key: API 키 (환경변수 OPENAI_API_KEY 사용 가능)
            default_models: 기본 모델 override
            api_base: base URL (None이면 OPENAI_BASE_URL 또는 공식 엔드포인트)
        """
        super().__init__(api_key=api_key, default_models=default_models)
        base = api_base or os.environ.get("OPENAI_BASE_URL") or OPENAI_API_BASE
        self.api_base = base.rstrip("/")

    def build_request(
        self,
        model: str,
        prompt: str,
        temperature: float,
    ) -> UpstreamRequest:
        return UpstreamRequest(
            url=f"{self.api_base}/chat/completions",
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.api_key or ''}",
            },
            json={
                "model": model,
                "temperature": temperature,
                "response_format": {"type": "json_object"},
                "messages": [{"role": "user", "content": prompt}],
            },
        )

    def parse_envelope(self, data: Any) -> str:
        """choices[0].message.content 추출."""
        text = dig(data, "choices", 0, "message", "content")
        return text if isinstance(text, str) else ""
