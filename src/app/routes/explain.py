"""
Explain Routes: 주제 설명 요청.

- GET  /          → 입력 화면 (Jinja2)
- POST /          → 폼 제출 → 결과 화면 (실패 시 안내 + 로컬 대체 설명)
- POST /explain   → JSON API (ExplainResult 또는 GatewayError 본문)

JSON API는 대체 설명을 섞지 않음: 호출자가 에러 코드를 보고 판단.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from src.app.services.explain import ExplainGateway
from src.app.services.fallback import build_local_explanation
from src.domain.constants import DEFAULT_LEVEL, DEFAULT_STYLE
from src.domain.errors import ErrorCodes, GatewayError
from src.domain.schemas import ExplainRequest, ExplainResult, Level, Style

logger = logging.getLogger(__name__)

# Jinja2 템플릿 설정
_templates_dir = Path(__file__).parent.parent / "templates"
jinja_templates = Jinja2Templates(directory=_templates_dir)

# Routers
router = APIRouter()  # HTML pages
api_router = APIRouter()  # API endpoints

EXAMPLE_TOPICS = ("Explain blockchain", "Explain APIs", "Explain inflation")


def get_gateway(request: Request) -> ExplainGateway:
    """
    app.state의 gateway 사용, 없으면 config로 생성.

    테스트에서는 app.state.gateway에 MockTransport gateway를 주입.
    """
    gateway: ExplainGateway | None = getattr(request.app.state, "gateway", None)
    if gateway is None:
        config = getattr(request.app.state, "config", {}) or {}
        gateway = ExplainGateway.from_config(config)
        request.app.state.gateway = gateway
    return gateway


# =============================================================================
# API Routes
# =============================================================================


@api_router.post("")
async def explain_topic(request: Request) -> JSONResponse:
    """
    주제 설명 생성 (JSON).

    Body:
        {"topic": str, "level"?: "Kid"|"Teen"|"Expert",
         "style"?: "Simple"|"Analogy"|"Step-by-step"}

    Returns:
        200: ExplainResult
        400/429/401/403/500/502: {"error", "code", "model"?, "details"?}
    """
    try:
        payload: Any = await request.json()
    except ValueError:
        payload = None

    try:
        explain_request = ExplainRequest.from_payload(payload)
        result = await get_gateway(request).explain(explain_request)
    except GatewayError as e:
        return JSONResponse(status_code=e.http_status, content=e.to_dict())

    return JSONResponse(content=result.to_dict())


# =============================================================================
# Page Routes (HTML)
# =============================================================================


@dataclass(frozen=True)
class ExplainView:
    """화면 1회 렌더링에 필요한 값 (요청마다 새로 생성)."""
    topic: str = ""
    level: str = DEFAULT_LEVEL
    style: str = DEFAULT_STYLE
    result: ExplainResult | None = None
    error: str | None = None
    error_code: str | None = None
    fallback_used: bool = False


def render_page(
    request: Request,
    view: ExplainView,
    status_code: int = 200,
) -> HTMLResponse:
    """입력 폼 + 결과/에러 화면 렌더링 (단일 렌더 함수)."""
    return jinja_templates.TemplateResponse(
        request,
        "index.html",
        {
            "view": view,
            "levels": [level.value for level in Level],
            "styles": [style.value for style in Style],
            "examples": EXAMPLE_TOPICS,
        },
        status_code=status_code,
    )


@router.get("/", response_class=HTMLResponse)
async def index_page(request: Request) -> HTMLResponse:
    """입력 화면."""
    return render_page(request, ExplainView())


@router.post("/", response_class=HTMLResponse)
async def explain_page(
    request: Request,
    topic: str = Form(""),
    level: str = Form(DEFAULT_LEVEL),
    style: str = Form(DEFAULT_STYLE),
) -> HTMLResponse:
    """
    폼 제출 처리.

    upstream 실패 (입력 오류 제외) → 에러 안내 + 로컬 대체 설명.
    """
    try:
        explain_request = ExplainRequest.from_payload(
            {"topic": topic, "level": level, "style": style}
        )
        result = await get_gateway(request).explain(explain_request)
    except GatewayError as e:
        if e.code == ErrorCodes.INVALID_INPUT:
            return render_page(
                request,
                ExplainView(
                    topic=topic, level=level, style=style,
                    error=e.message, error_code=e.code,
                ),
                status_code=e.http_status,
            )

        logger.info(f"Rendering local fallback explanation ({e.code})")
        return render_page(
            request,
            ExplainView(
                topic=topic,
                level=level,
                style=style,
                result=build_local_explanation(explain_request),
                error=e.message,
                error_code=e.code,
                fallback_used=True,
            ),
        )

    return render_page(
        request,
        ExplainView(topic=topic, level=level, style=style, result=result),
    )
