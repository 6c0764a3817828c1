"""
Error definitions for the explain gateway.

규칙:
- 조용한 실패 금지 → GatewayError로 명시적 실패
- upstream/네트워크/파싱 실패는 모두 gateway 경계에서 분류
- 내부 stack trace는 호출자에게 노출하지 않음
"""

from typing import Any

# =============================================================================
# Error Codes
# =============================================================================


class ErrorCodes:
    """에러 코드 상수. 새 코드 추가 시 HTTP_STATUS_BY_CODE에도 추가."""

    # === Caller / Deployment ===
    INVALID_INPUT = "invalid_input"
    MISSING_API_KEY = "missing_api_key"

    # === Upstream (model 단위, fallback 대상) ===
    MODEL_NOT_FOUND = "model_not_found"
    UNPARSABLE_RESPONSE = "unparsable_response"

    # === Upstream (계정/자격증명 단위, 즉시 중단) ===
    QUOTA_EXCEEDED = "quota_exceeded"
    FORBIDDEN = "forbidden"
    UPSTREAM_ERROR = "upstream_error"

    # === Internal ===
    UNEXPECTED_ERROR = "unexpected_error"


HTTP_STATUS_BY_CODE: dict[str, int] = {
    ErrorCodes.INVALID_INPUT: 400,
    ErrorCodes.MISSING_API_KEY: 500,
    ErrorCodes.MODEL_NOT_FOUND: 502,
    ErrorCodes.UNPARSABLE_RESPONSE: 502,
    ErrorCodes.QUOTA_EXCEEDED: 429,
    ErrorCodes.FORBIDDEN: 403,
    ErrorCodes.UPSTREAM_ERROR: 502,
    ErrorCodes.UNEXPECTED_ERROR: 500,
}

# model 단위 실패: 다음 후보 모델로 계속 진행
MODEL_LEVEL_CODES = frozenset({
    ErrorCodes.MODEL_NOT_FOUND,
    ErrorCodes.UNPARSABLE_RESPONSE,
})


class GatewayError(Exception):
    """
    Explain gateway 에러.

    Usage:
        raise GatewayError(
            ErrorCodes.QUOTA_EXCEEDED,
            "The upstream API quota was exceeded.",
            model="gemini-2.0-flash",
            details=raw_body,
        )
    """

    def __init__(
        self,
        code: str,
        message: str,
        http_status: int | None = None,
        **context: Any,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = (
            http_status
            if http_status is not None
            else HTTP_STATUS_BY_CODE.get(code, 500)
        )
        self.context = context
        super().__init__(f"[{code}] {message}")

    @property
    def model(self) -> str | None:
        model: str | None = self.context.get("model")
        return model

    @property
    def details(self) -> Any:
        return self.context.get("details")

    def to_dict(self) -> dict[str, Any]:
        """JSON 응답 본문용. None 값은 제외."""
        body: dict[str, Any] = {
            "error": self.message,
            "code": self.code,
            **self.context,
        }
        return {k: v for k, v in body.items() if v is not None}
