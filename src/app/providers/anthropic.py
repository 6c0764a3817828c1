"""
Anthropic (Claude) Provider (REST Messages API).

JSON mode가 없으므로 system 프롬프트로 JSON-only를 강제하고,
응답 content 블록 중 text 블록을 이어 붙여 사용.
"""

from typing import Any

from src.domain.schemas import UpstreamRequest

from .base import ExplainProvider

ANTHROPIC_API_BASE = "https://api.anthropic.com/v1"
ANTHROPIC_VERSION = "2023-06-01"

DEFAULT_MODELS = (
    "claude-sonnet-4-20250514",
    "claude-3-5-haiku-latest",
)

JSON_SYSTEM_PROMPT = (
    "Respond with a single JSON object only. "
    "Do not wrap it in markdown or add any text before or after it."
)


class ClaudeProvider(ExplainProvider):
    """
    Claude API Provider.

    Usage:
        provider = ClaudeProvider(api_key="...")
        request = provider.build_request("claude-sonnet-4-20250514", prompt, 0.5)
    """

    name = "anthropic"
    default_models = DEFAULT_MODELS
    # API 키 결정: 인자 > ANTHROPIC_API_KEY > MY_ANTHROPIC_KEY
    api_key_envs = ("ANTHROPIC_API_KEY", "MY_ANTHROPIC_KEY")
    model_env = "ANTHROPIC_MODEL"

    def __init__(
        self,
        api_key: str | None = None,
        default_models: list[str] | tuple[str, ...] | None = None,
        max_tokens: int = 1024,
        api_base: str = ANTHROPIC_API_BASE,
    ):
        """
        Args:
            api_key: API 키
            default_models: 기본 후보 모델 목록 override
            max_tokens: 최대 토큰 수
            api_base: API base URL
        """
        super().__init__(api_key=api_key, default_models=default_models)
        self.max_tokens = max_tokens
        self.api_base = api_base.rstrip("/")

    def build_request(
        self,
        model: str,
        prompt: str,
        temperature: float,
    ) -> UpstreamRequest:
        return UpstreamRequest(
            url=f"{self.api_base}/messages",
            headers={
                "Content-Type": "application/json",
                "x-api-key": self.api_key or "",
                "anthropic-version": ANTHROPIC_VERSION,
            },
            json={
                "model": model,
                "max_tokens": self.max_tokens,
                "temperature": temperature,
                "system": JSON_SYSTEM_PROMPT,
                "messages": [{"role": "user", "content": prompt}],
            },
        )

    def parse_envelope(self, data: Any) -> str:
        """content[*].text (type == "text") 연결."""
        if not isinstance(data, dict):
            return ""
        blocks = data.get("content")
        if not isinstance(blocks, list):
            return ""

        texts = [
            block["text"]
            for block in blocks
            if isinstance(block, dict)
            and block.get("type", "text") == "text"
            and isinstance(block.get("text"), str)
        ]
        return "".join(texts)
