"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uv run uvicorn src.app.main:app --reload
- 프로덕션: uv run uvicorn src.app.main:app
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.app.routes import explain
from src.app.services.explain import ExplainGateway
from src.core.logging import configure_logging
from src.domain.errors import ErrorCodes

# =============================================================================
# Configuration
# =============================================================================


def load_config(config_path: Path | None = None) -> dict:
    """설정 파일 로드."""
    if config_path is None:
        # 프로젝트 루트의 default.yaml
        config_path = Path(__file__).parent.parent.parent / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] = yaml.safe_load(f) or {}
        return data


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    애플리케이션 생명주기 관리.

    시작 시: .env 로드, 설정 로드, 로거 설정, gateway 생성
    종료 시: 정리할 리소스 없음 (gateway는 요청마다 HTTP 클라이언트 생성)
    """
    # Startup
    load_dotenv()
    config = load_config()
    app.state.config = config
    configure_logging(config.get("logging", {}).get("level", "INFO"))

    # 테스트에서 미리 주입한 gateway는 유지
    if getattr(app.state, "gateway", None) is None:
        app.state.gateway = ExplainGateway.from_config(config)

    yield


# =============================================================================
# App Instance
# =============================================================================

app = FastAPI(
    title="Explain10",
    description="Any topic → simple explanation, analogy, real-world example, curious questions",
    version="0.1.0",
    lifespan=lifespan,
)

# Static files (CSS)
static_dir = Path(__file__).parent / "static"
if static_dir.exists():
    app.mount("/static", StaticFiles(directory=static_dir), name="static")


# =============================================================================
# Exception Handlers
# =============================================================================
# 모든 에러 응답은 {"error": ..., "code"?: ...} 형태로 통일


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code == 405:
        message = "Method not allowed"
    else:
        message = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid request.",
            "code": ErrorCodes.INVALID_INPUT,
        },
    )


# =============================================================================
# Routes
# =============================================================================

# 페이지 라우트 (HTML)
app.include_router(explain.router, prefix="", tags=["Explain"])

# API 라우트
app.include_router(explain.api_router, prefix="/explain", tags=["Explain API"])
app.include_router(explain.api_router, prefix="/api/explain", tags=["Explain API"])


# =============================================================================
# Root Endpoints
# =============================================================================


@app.get("/health")
async def health() -> dict[str, str]:
    """헬스 체크."""
    return {"status": "ok"}


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.app.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
