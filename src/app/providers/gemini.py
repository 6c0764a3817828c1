"""
Google Gemini Provider (REST generateContent).

모델명은 API 버전에 따라 바뀌므로 후보 목록을 순서대로 시도:
- 404 (모델 없음) → 다음 후보
- 그 외 분류는 ExplainGateway에서 수행
"""

from typing import Any

from src.domain.schemas import UpstreamRequest

from .base import ExplainProvider, dig

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta/models"

DEFAULT_MODELS = (
    "gemini-1.5-flash-latest",
    "gemini-1.5-flash",
    "gemini-2.0-flash",
    "gemini-2.0-flash-lite",
)


class GeminiProvider(ExplainProvider):
    """
    Gemini Provider.

    Usage:
        provider = GeminiProvider(api_key="...")
        request = provider.build_request("gemini-2.0-flash", prompt, 0.5)
    """

    name = "gemini"
    default_models = DEFAULT_MODELS
    api_key_envs = ("GEMINI_API_KEY", "GOOGLE_API_KEY")
    model_env = "GEMINI_MODEL"

    def __init__(
        self,
        api_key: str | None = None,
        default_models: list[str] | tuple[str, ...] | None = None,
        api_base: str = GEMINI_API_BASE,
    ):
        """
        Args:
            api_key: API 키 (환경변수 GEMINI_API_KEY 또는 GOOGLE_API_KEY 사용 가능)
            default_models: 기본 후보 모델 목록 override
            api_base: models 엔드포인트 base URL
        """
        super().__init__(api_key=api_key, default_models=default_models)
        self.api_base = api_base.rstrip("/")

    def build_request(
        self,
        model: str,
        prompt: str,
        temperature: float,
    ) -> UpstreamRequest:
        """generateContent 요청 (JSON mime type 힌트 포함)."""
        return UpstreamRequest(
            url=f"{self.api_base}/{model}:generateContent",
            headers={"Content-Type": "application/json"},
            params={"key": self.api_key or ""},
            json={
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {
                    "temperature": temperature,
                    "responseMimeType": "application/json",
                },
            },
        )

    def parse_envelope(self, data: Any) -> str:
        """candidates[0].content.parts[0].text 추출."""
        text = dig(data, "candidates", 0, "content", "parts", 0, "text")
        return text if isinstance(text, str) else ""
