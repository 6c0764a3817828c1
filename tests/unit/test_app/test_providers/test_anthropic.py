"""
test_anthropic.py - Claude Provider 테스트
"""

import pytest

from src.app.providers.anthropic import (
    ANTHROPIC_VERSION,
    JSON_SYSTEM_PROMPT,
    ClaudeProvider,
)

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def provider():
    """기본 Claude provider."""
    return ClaudeProvider(api_key="test-api-key")


# =============================================================================
# 초기화 테스트
# =============================================================================


class TestClaudeProviderInit:
    """ClaudeProvider 초기화 테스트."""

    def test_uses_env_api_key(self, monkeypatch):
        """ANTHROPIC_API_KEY 환경변수."""
        monkeypatch.setenv("ANTHROPIC_API_KEY", "env-key")

        assert ClaudeProvider().api_key == "env-key"

    def test_legacy_env_api_key(self, monkeypatch):
        """MY_ANTHROPIC_KEY도 허용."""
        monkeypatch.setenv("MY_ANTHROPIC_KEY", "legacy-key")

        assert ClaudeProvider().api_key == "legacy-key"

    def test_supports_model_fallback(self, provider):
        """여러 모델 후보 지원."""
        assert provider.supports_model_fallback is True
        assert len(provider.default_models) >= 2


# =============================================================================
# build_request 테스트
# =============================================================================


class TestBuildRequest:
    """wire 요청 생성 테스트."""

    def test_headers(self, provider):
        """x-api-key + anthropic-version."""
        wire = provider.build_request("claude-3-5-haiku-latest", "prompt", 0.5)

        assert wire.url == "https://api.anthropic.com/v1/messages"
        assert wire.headers["x-api-key"] == "test-api-key"
        assert wire.headers["anthropic-version"] == ANTHROPIC_VERSION

    def test_body(self, provider):
        """model, system JSON 힌트, user 메시지."""
        wire = provider.build_request("claude-3-5-haiku-latest", "hello", 0.3)

        assert wire.json["model"] == "claude-3-5-haiku-latest"
        assert wire.json["temperature"] == 0.3
        assert wire.json["max_tokens"] == 1024
        assert wire.json["system"] == JSON_SYSTEM_PROMPT
        assert wire.json["messages"] == [{"role": "user", "content": "hello"}]


# =============================================================================
# parse_envelope 테스트
# =============================================================================


class TestParseEnvelope:
    """응답 envelope 파싱 테스트."""

    def test_joins_text_blocks(self, provider):
        """text 블록만 연결."""
        data = {
            "content": [
                {"type": "text", "text": '{"analogy":'},
                {"type": "tool_use", "id": "x"},
                {"type": "text", "text": ' "x"}'},
            ]
        }

        assert provider.parse_envelope(data) == '{"analogy": "x"}'

    @pytest.mark.parametrize("data", [None, {}, {"content": "text"}, {"content": []}])
    def test_missing_content(self, provider, data):
        """content 없음 → 빈 문자열."""
        assert provider.parse_envelope(data) == ""
