"""
test_api_explain.py - Explain API E2E 테스트

엔드포인트:
- GET  /health
- POST /explain, POST /api/explain
- GET  /, POST /
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from src.app.main import app, load_config

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def client():
    """FastAPI TestClient (lifespan 포함)."""
    with TestClient(app) as client:
        yield client
    app.state.gateway = None


@pytest.fixture
def use_gateway(make_gateway):
    """MockTransport gateway를 app.state에 주입."""

    def factory(handler, **kwargs):
        gateway, upstream = make_gateway(handler, **kwargs)
        app.state.gateway = gateway
        return upstream

    return factory


# =============================================================================
# Config
# =============================================================================


class TestLoadConfig:
    """default.yaml 로드."""

    def test_default_yaml(self):
        """기본 provider/logging 설정."""
        config = load_config()

        assert config["ai"]["provider"] == "gemini"
        assert config["logging"]["level"] == "INFO"

    def test_missing_file(self, tmp_path):
        """파일 없음 → 빈 설정."""
        assert load_config(tmp_path / "nope.yaml") == {}


# =============================================================================
# Health Check
# =============================================================================


class TestHealthCheck:
    """헬스 체크 테스트."""

    def test_health_endpoint(self, client):
        """GET /health."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


# =============================================================================
# Explain API
# =============================================================================


class TestExplainApi:
    """POST /explain 전체 흐름."""

    def test_lifespan_sets_state(self, client):
        """시작 시 config + gateway 준비."""
        assert app.state.config["ai"]["provider"] == "gemini"
        assert app.state.gateway is not None

    @pytest.mark.parametrize("path", ["/explain", "/api/explain"])
    def test_success(self, client, use_gateway, upstream_ok, valid_explanation, path):
        """두 경로 모두 동일 계약."""
        use_gateway(lambda request: upstream_ok())

        response = client.post(path, json={"topic": "Explain blockchain", "level": "Kid"})

        assert response.status_code == 200
        assert response.json() == valid_explanation

    def test_fallback_to_second_model(self, client, use_gateway, upstream_ok):
        """첫 모델 404 → 두 번째 모델 성공, 호출 2회."""
        responses = iter([httpx.Response(404, text="not found"), upstream_ok()])
        upstream = use_gateway(lambda request: next(responses))

        response = client.post("/explain", json={"topic": "Blockchain"})

        assert response.status_code == 200
        assert upstream.call_count == 2

    def test_all_models_unparsable(self, client, use_gateway, envelope):
        """전부 파싱 불가 → 502 + 시도 모델 목록."""
        upstream = use_gateway(
            lambda request: httpx.Response(200, json=envelope("plain words"))
        )

        response = client.post("/explain", json={"topic": "Blockchain"})

        assert response.status_code == 502
        body = response.json()
        assert body["code"] == "upstream_error"
        assert body["attempted_models"] == upstream.models

    @pytest.mark.parametrize("status", [401, 403])
    def test_forbidden(self, client, use_gateway, status):
        """401/403 → 같은 상태 + forbidden."""
        use_gateway(lambda request: httpx.Response(status, text="nope"))

        response = client.post("/explain", json={"topic": "Blockchain"})

        assert response.status_code == status
        assert response.json()["code"] == "forbidden"

    def test_short_topic(self, client, use_gateway, upstream_ok):
        """짧은 topic → 400, upstream 호출 0회."""
        upstream = use_gateway(lambda request: upstream_ok())

        response = client.post("/explain", json={"topic": " a "})

        assert response.status_code == 400
        assert upstream.call_count == 0

    @pytest.mark.parametrize("method", ["get", "put", "delete"])
    def test_method_not_allowed(self, client, method):
        """POST 외 메서드 → 405."""
        response = client.request(method.upper(), "/explain")

        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}


# =============================================================================
# HTML Page
# =============================================================================


class TestExplainPage:
    """폼 페이지 전체 흐름."""

    def test_index(self, client):
        """GET / → HTML + CSS 링크."""
        response = client.get("/")

        assert response.status_code == 200
        assert "Explain10" in response.text
        assert "/static/css/style.css" in response.text

    def test_static_css(self, client):
        """정적 CSS 제공."""
        response = client.get("/static/css/style.css")

        assert response.status_code == 200

    def test_question_resubmits(self, client, use_gateway, upstream_ok):
        """호기심 질문은 같은 level/style로 다시 제출하는 폼."""
        use_gateway(lambda request: upstream_ok())

        response = client.post(
            "/",
            data={"topic": "Blockchain", "level": "Expert", "style": "Analogy"},
        )

        assert response.status_code == 200
        assert '<input type="hidden" name="topic" value="Why is it slow?">' in response.text
        assert '<input type="hidden" name="level" value="Expert">' in response.text
        assert '<input type="hidden" name="style" value="Analogy">' in response.text
