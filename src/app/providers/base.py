"""
AI Provider 추상 인터페이스.

Provider 추상화로 upstream 교체 가능:
- build_request: 프롬프트 → wire 요청 (URL, 헤더, JSON 본문)
- parse_envelope: provider 응답 envelope → 모델 생성 텍스트

fallback 루프, 응답 정규화, 에러 분류는 provider가 아니라
ExplainGateway 한 곳에서만 수행 (provider별 중복 금지).
"""

import os
from abc import ABC, abstractmethod
from typing import Any

from src.domain.schemas import UpstreamRequest


class ExplainProvider(ABC):
    """
    Upstream generation API Provider 추상 인터페이스.

    Usage:
        provider = GeminiProvider(api_key="...")
        request = provider.build_request("gemini-2.0-flash", prompt, 0.5)
        text = provider.parse_envelope(response.json())
    """

    # provider 식별자 (config ai.provider 값)
    name: str = ""

    # 기본 fallback 후보 모델 (순서 = 시도 순서)
    default_models: tuple[str, ...] = ()

    # API 키 환경변수 (앞쪽 우선)
    api_key_envs: tuple[str, ...] = ()

    # provider별 모델 override 환경변수
    model_env: str | None = None

    # 여러 모델 ID를 지원하는지 (False면 첫 후보만 사용)
    supports_model_fallback: bool = True

    def __init__(
        self,
        api_key: str | None = None,
        default_models: list[str] | tuple[str, ...] | None = None,
    ):
        """
        Args:
            api_key: API 키 (None이면 api_key_envs 환경변수 사용)
            default_models: 기본 후보 모델 목록 override (config에서 주입)
        """
        self.api_key = api_key or self._api_key_from_env()
        if default_models:
            self.default_models = tuple(default_models)

    def _api_key_from_env(self) -> str | None:
        for env_name in self.api_key_envs:
            value = os.environ.get(env_name)
            if value:
                return value
        return None

    @property
    def api_key_env(self) -> str:
        """에러 메시지용 대표 환경변수 이름."""
        return self.api_key_envs[0] if self.api_key_envs else "API_KEY"

    @abstractmethod
    def build_request(
        self,
        model: str,
        prompt: str,
        temperature: float,
    ) -> UpstreamRequest:
        """
        1회 시도용 wire 요청 생성.

        Args:
            model: 후보 모델 ID
            prompt: Prompt Builder가 만든 지시문
            temperature: 샘플링 온도

        Returns:
            UpstreamRequest (JSON 출력 힌트 포함)
        """
        ...

    @abstractmethod
    def parse_envelope(self, data: Any) -> str:
        """
        응답 envelope에서 모델 생성 텍스트 추출.

        Args:
            data: 디코딩된 응답 본문 (JSON 아님 → None)

        Returns:
            생성 텍스트, envelope에 없으면 ""
        """
        ...


def dig(data: Any, *path: str | int) -> Any:
    """
    중첩 dict/list 안전 접근.

    경로 중간에 값이 없거나 타입이 맞지 않으면 None.
    """
    current = data
    for key in path:
        if isinstance(key, int):
            if not isinstance(current, list) or len(current) <= key:
                return None
        elif not isinstance(current, dict):
            return None
        current = current[key] if isinstance(key, int) else current.get(key)
        if current is None:
            return None
    return current
