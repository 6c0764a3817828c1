"""
Explain Gateway: ExplainRequest → ExplainResult | GatewayError.

Fallback 정책:
- 404 (모델 없음), 파싱 불가 응답 → 다음 후보 모델로 재시도 (model 단위 실패)
- 429, 401/403, 그 외 non-2xx → 즉시 중단 (계정/자격증명 단위 실패,
  모든 모델에 동일하므로 후보를 돌며 호출을 낭비하지 않음)
- timeout/전송 실패 → upstream_error, 즉시 중단
- 후보 소진 → upstream_error (시도한 모델 목록 + 마지막 에러 포함)
- 그 외 예외 → unexpected_error (원본 예외는 호출자에게 노출 금지)

시도 사이 대기(backoff) 없음: 실패는 일시적이 아니라 범주적이라고 가정.
"""

import asyncio
import logging
import os
import time
from typing import Any

import httpx

from src.app.providers import ExplainProvider, get_provider
from src.core.logging import (
    complete_run_log,
    create_run_log,
    emit_run_log,
    record_attempt,
)
from src.core.parsing import normalize_result, parse_explanation, safe_parse_json
from src.core.prompt import build_prompt
from src.domain.constants import (
    DEFAULT_PROVIDER,
    DEFAULT_TEMPERATURE,
    DEFAULT_TIMEOUT_SECONDS,
    MODEL_OVERRIDE_ENV,
    PROVIDER_ENV,
)
from src.domain.errors import MODEL_LEVEL_CODES, ErrorCodes, GatewayError
from src.domain.schemas import (
    ExplainRequest,
    ExplainResult,
    RawUpstreamResult,
    RunLog,
)

logger = logging.getLogger(__name__)

# 에러 응답 details에 담을 upstream 본문 최대 길이
MAX_DETAIL_CHARS = 2000


def resolve_model_candidates(
    default_models: tuple[str, ...] | list[str],
    preferred: str | None = None,
) -> tuple[str, ...]:
    """
    후보 모델 목록.

    preferred가 있으면 맨 앞, 나머지는 기본 목록 순서 유지 + 중복 제거.
    """
    ordered: list[str] = []
    preferred = (preferred or "").strip()
    for model in ([preferred] if preferred else []) + list(default_models):
        if model and model not in ordered:
            ordered.append(model)
    return tuple(ordered)


def _truncate(text: str) -> str:
    if len(text) > MAX_DETAIL_CHARS:
        return text[:MAX_DETAIL_CHARS] + "...(truncated)"
    return text


class ExplainGateway:
    """
    Generation Gateway.

    요청 간 공유 상태 없음 (설정만 보관). HTTP 클라이언트는 explain() 호출마다 생성.

    Usage:
        gateway = ExplainGateway.from_config(config)
        result = await gateway.explain(ExplainRequest(topic="Blockchain"))
    """

    def __init__(
        self,
        provider: ExplainProvider,
        model_override: str | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            provider: upstream provider
            model_override: 우선 시도할 모델 ID (후보 목록 맨 앞)
            temperature: 샘플링 온도
            timeout: 시도 1회당 timeout (초)
            transport: httpx transport (테스트용 MockTransport 주입)
        """
        self.provider = provider
        self.model_override = model_override
        self.temperature = temperature
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_config(cls, config: dict) -> "ExplainGateway":
        """
        설정(default.yaml) + 환경변수로 gateway 생성.

        우선순위:
        - provider: EXPLAIN_PROVIDER > ai.provider > gemini
        - 모델 override: MODEL_OVERRIDE > provider별 변수 (GEMINI_MODEL 등) > ai.model
        """
        ai_config: dict[str, Any] = config.get("ai", {}) or {}

        provider_name = (
            os.environ.get(PROVIDER_ENV)
            or ai_config.get("provider")
            or DEFAULT_PROVIDER
        )
        models_config = ai_config.get("models", {}) or {}
        provider = get_provider(
            provider_name,
            default_models=models_config.get(provider_name.strip().lower()),
        )

        model_override = (
            os.environ.get(MODEL_OVERRIDE_ENV)
            or (os.environ.get(provider.model_env) if provider.model_env else None)
            or ai_config.get("model")
        )

        return cls(
            provider=provider,
            model_override=model_override,
            temperature=float(ai_config.get("temperature", DEFAULT_TEMPERATURE)),
            timeout=float(ai_config.get("timeout", DEFAULT_TIMEOUT_SECONDS)),
        )

    def resolve_candidates(self) -> tuple[str, ...]:
        """시도할 모델 목록. 단일 엔드포인트 provider는 첫 후보만."""
        candidates = resolve_model_candidates(
            self.provider.default_models, self.model_override
        )
        if not self.provider.supports_model_fallback:
            return candidates[:1]
        return candidates

    async def explain(self, request: ExplainRequest) -> ExplainResult:
        """
        주제 설명 생성.

        Raises:
            GatewayError: 분류된 실패 (invalid_input, missing_api_key,
                quota_exceeded, forbidden, upstream_error, unexpected_error)
        """
        # 네트워크 호출 전 검증
        request.validate()

        if not self.provider.api_key:
            raise GatewayError(
                ErrorCodes.MISSING_API_KEY,
                f"Missing {self.provider.api_key_env} in server environment.",
            )

        run_log = create_run_log(self.provider.name)

        try:
            result = await self._explain_with_fallback(request, run_log)
        except GatewayError as e:
            complete_run_log(run_log, success=False, error_code=e.code)
            emit_run_log(run_log)
            raise
        except Exception as e:
            logger.error(f"Explain failed with unexpected error: {e}", exc_info=True)
            complete_run_log(
                run_log, success=False, error_code=ErrorCodes.UNEXPECTED_ERROR
            )
            emit_run_log(run_log)
            raise GatewayError(
                ErrorCodes.UNEXPECTED_ERROR,
                "Unexpected server error.",
                details=str(e),
            ) from e

        complete_run_log(run_log, success=True, model_used=run_log.model_used)
        emit_run_log(run_log)
        return result

    async def _explain_with_fallback(
        self,
        request: ExplainRequest,
        run_log: RunLog,
    ) -> ExplainResult:
        """후보 모델을 순서대로 시도 (순차, 병렬 호출 없음)."""
        candidates = self.resolve_candidates()
        prompt = build_prompt(request.clean_topic, request.level, request.style)
        last_error: GatewayError | None = None

        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self.transport
        ) as client:
            for model in candidates:
                started = time.perf_counter()
                try:
                    upstream = await asyncio.wait_for(
                        self._request_upstream(client, model, prompt),
                        timeout=self.timeout,
                    )
                except (TimeoutError, httpx.TimeoutException) as e:
                    record_attempt(
                        run_log, model, None, ErrorCodes.UPSTREAM_ERROR,
                        (time.perf_counter() - started) * 1000,
                    )
                    raise GatewayError(
                        ErrorCodes.UPSTREAM_ERROR,
                        "The upstream API did not respond in time.",
                        model=model,
                        details=str(e) or type(e).__name__,
                    ) from e
                except httpx.TransportError as e:
                    record_attempt(
                        run_log, model, None, ErrorCodes.UPSTREAM_ERROR,
                        (time.perf_counter() - started) * 1000,
                    )
                    raise GatewayError(
                        ErrorCodes.UPSTREAM_ERROR,
                        "Could not reach the upstream API.",
                        model=model,
                        details=str(e) or type(e).__name__,
                    ) from e

                latency_ms = (time.perf_counter() - started) * 1000

                if upstream.succeeded:
                    text = self.provider.parse_envelope(upstream.parsed_body)
                    data = parse_explanation(text)

                    if data is None:
                        record_attempt(
                            run_log, model, upstream.status_code,
                            ErrorCodes.UNPARSABLE_RESPONSE, latency_ms,
                        )
                        logger.warning(
                            f"Model ({model}) returned an unparsable response. "
                            f"Trying next candidate..."
                        )
                        last_error = GatewayError(
                            ErrorCodes.UNPARSABLE_RESPONSE,
                            "The upstream API returned an unparsable response.",
                            model=model,
                        )
                        continue

                    record_attempt(
                        run_log, model, upstream.status_code, "ok", latency_ms
                    )
                    run_log.model_used = model
                    if model != candidates[0]:
                        logger.info(f"Fallback model succeeded: {model}")
                    return normalize_result(data)

                error = self._classify_failure(model, upstream)
                record_attempt(
                    run_log, model, upstream.status_code, error.code, latency_ms
                )

                if error.code in MODEL_LEVEL_CODES:
                    logger.warning(
                        f"Model ({model}) not found for this API key/version. "
                        f"Trying next candidate..."
                    )
                    last_error = error
                    continue

                # 계정/자격증명 단위 실패 → 나머지 후보 시도 안 함
                logger.error(
                    f"Upstream request failed with {upstream.status_code} "
                    f"({error.code}) on model {model}"
                )
                raise error

        raise GatewayError(
            ErrorCodes.UPSTREAM_ERROR,
            "The upstream API request failed for all configured models.",
            attempted_models=list(candidates),
            last_error=last_error.to_dict() if last_error else None,
            details=last_error.message if last_error else None,
        )

    async def _request_upstream(
        self,
        client: httpx.AsyncClient,
        model: str,
        prompt: str,
    ) -> RawUpstreamResult:
        """
        upstream 1회 호출.

        상태와 무관하게 본문 전체를 텍스트로 읽음 (실패 진단 정보 보존).
        """
        wire = self.provider.build_request(model, prompt, self.temperature)
        response = await client.post(
            wire.url,
            headers=wire.headers,
            params=wire.params or None,
            json=wire.json,
        )
        raw = response.text

        return RawUpstreamResult(
            succeeded=response.is_success,
            status_code=response.status_code,
            raw_body=raw,
            parsed_body=safe_parse_json(raw),
        )

    def _classify_failure(
        self,
        model: str,
        upstream: RawUpstreamResult,
    ) -> GatewayError:
        """non-2xx 응답 → GatewayError."""
        status = upstream.status_code
        details = _truncate(upstream.raw_body)

        if status == 404:
            return GatewayError(
                ErrorCodes.MODEL_NOT_FOUND,
                "Model not found for this API key/version. Trying fallback model.",
                model=model,
                details=details,
            )
        if status == 429:
            return GatewayError(
                ErrorCodes.QUOTA_EXCEEDED,
                "The upstream API quota was exceeded. Please try again later.",
                model=model,
                details=details,
            )
        if status in (401, 403):
            return GatewayError(
                ErrorCodes.FORBIDDEN,
                "The upstream API rejected the configured credentials.",
                http_status=status,
                model=model,
                details=details,
            )
        return GatewayError(
            ErrorCodes.UPSTREAM_ERROR,
            "The upstream API request failed.",
            model=model,
            details=details,
        )
