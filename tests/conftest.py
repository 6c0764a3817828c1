"""
Pytest fixtures for the explain gateway tests.

upstream은 httpx.MockTransport로 대체 (실제 네트워크 호출 없음).
"""

import json
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import httpx
import pytest
import yaml

from src.app.providers.gemini import GeminiProvider
from src.app.services.explain import ExplainGateway

# upstream 관련 환경변수 (테스트 간 격리)
UPSTREAM_ENV_VARS = (
    "EXPLAIN_PROVIDER",
    "MODEL_OVERRIDE",
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "GEMINI_MODEL",
    "ANTHROPIC_API_KEY",
    "MY_ANTHROPIC_KEY",
    "ANTHROPIC_MODEL",
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "OPENAI_BASE_URL",
)

VALID_EXPLANATION = {
    "simpleExplanation": "Blockchain is a shared notebook that nobody can erase.",
    "analogy": "Like a class diary that every student keeps a copy of.",
    "realWorldExample": "Bitcoin records every payment in such a notebook.",
    "curiousQuestions": [
        "Who checks the notebook?",
        "Can a page ever be removed?",
        "Why is it slow?",
    ],
}


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_upstream_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """개발자 .env / 셸 환경변수가 테스트에 섞이지 않도록 제거."""
    for name in UPSTREAM_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트 경로."""
    return Path(__file__).parent.parent


@pytest.fixture
def default_config_path(project_root: Path) -> Path:
    """default.yaml 경로."""
    return project_root / "default.yaml"


@pytest.fixture
def default_config(default_config_path: Path) -> dict:
    """기본 설정 로드."""
    with open(default_config_path, encoding="utf-8") as f:
        return yaml.safe_load(f)


# =============================================================================
# Upstream Envelope Helpers
# =============================================================================


def gemini_envelope(text: str) -> dict[str, Any]:
    """Gemini generateContent 응답 envelope."""
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def gemini_ok(payload: dict[str, Any] | None = None) -> httpx.Response:
    """설명 JSON을 담은 200 응답."""
    text = json.dumps(payload if payload is not None else VALID_EXPLANATION)
    return httpx.Response(200, json=gemini_envelope(text))


# =============================================================================
# Gateway Fixtures
# =============================================================================

Handler = Callable[[httpx.Request], Any]


class UpstreamRecorder:
    """MockTransport handler 래퍼: 호출된 요청 기록."""

    def __init__(self, handler: Handler):
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> Any:
        self.requests.append(request)
        return self.handler(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    @property
    def models(self) -> list[str]:
        """호출된 Gemini 모델 ID (URL 경로에서 추출)."""
        return [
            req.url.path.rsplit("/", 1)[-1].split(":", 1)[0]
            for req in self.requests
        ]


@pytest.fixture
def make_gateway() -> Callable[..., tuple[ExplainGateway, UpstreamRecorder]]:
    """
    MockTransport gateway 팩토리.

    Usage:
        gateway, upstream = make_gateway(lambda req: gemini_ok())
    """

    def factory(
        handler: Handler,
        provider: Any = None,
        **kwargs: Any,
    ) -> tuple[ExplainGateway, UpstreamRecorder]:
        recorder = UpstreamRecorder(handler)
        gateway = ExplainGateway(
            provider=provider or GeminiProvider(api_key="test-api-key"),
            transport=httpx.MockTransport(recorder),
            **kwargs,
        )
        return gateway, recorder

    return factory


@pytest.fixture
def ok_gateway(make_gateway) -> Generator[tuple[ExplainGateway, UpstreamRecorder], None, None]:
    """항상 성공하는 gateway."""
    yield make_gateway(lambda request: gemini_ok())


@pytest.fixture
def valid_explanation() -> dict[str, Any]:
    """정상 설명 JSON (복사본)."""
    return json.loads(json.dumps(VALID_EXPLANATION))


@pytest.fixture
def upstream_ok() -> Callable[..., httpx.Response]:
    """200 응답 생성 함수."""
    return gemini_ok


@pytest.fixture
def envelope() -> Callable[[str], dict[str, Any]]:
    """Gemini envelope 생성 함수."""
    return gemini_envelope
