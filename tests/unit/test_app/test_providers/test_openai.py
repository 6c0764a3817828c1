"""
test_openai.py - OpenAI-compatible Provider 테스트
"""

import pytest

from src.app.providers.openai import OPENAI_API_BASE, OpenAIProvider


@pytest.fixture
def provider():
    """기본 OpenAI provider."""
    return OpenAIProvider(api_key="test-api-key")


class TestOpenAIProviderInit:
    """OpenAIProvider 초기화 테스트."""

    def test_single_model_endpoint(self, provider):
        """모델 fallback 미지원."""
        assert provider.supports_model_fallback is False

    def test_default_base_url(self, provider):
        """공식 엔드포인트."""
        assert provider.api_base == OPENAI_API_BASE

    def test_base_url_from_env(self, monkeypatch):
        """OPENAI_BASE_URL 환경변수."""
        monkeypatch.setenv("OPENAI_BASE_URL", "http://gateway.local/v1/")

        assert OpenAIProvider(api_key="k").api_base == "http://gateway.local/v1"


class TestBuildRequest:
    """wire 요청 생성 테스트."""

    def test_request(self, provider):
        """bearer 인증 + json_object 응답 형식."""
        wire = provider.build_request("gpt-4o-mini", "hello", 0.5)

        assert wire.url == f"{OPENAI_API_BASE}/chat/completions"
        assert wire.headers["Authorization"] == "Bearer test-api-key"
        assert wire.json["response_format"] == {"type": "json_object"}
        assert wire.json["messages"] == [{"role": "user", "content": "hello"}]


class TestParseEnvelope:
    """응답 envelope 파싱 테스트."""

    def test_extracts_content(self, provider):
        """choices[0].message.content."""
        data = {"choices": [{"message": {"role": "assistant", "content": "{}"}}]}

        assert provider.parse_envelope(data) == "{}"

    @pytest.mark.parametrize("data", [None, {"choices": []}, {"choices": [{"message": {}}]}])
    def test_missing_content(self, provider, data):
        """content 없음 → 빈 문자열."""
        assert provider.parse_envelope(data) == ""
