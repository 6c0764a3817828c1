"""
Application Services.

역할:
- explain: upstream 호출 + 모델 fallback + 응답 정규화 + 에러 분류
- fallback: upstream 실패 시 화면용 로컬 대체 설명
"""

from .explain import ExplainGateway, resolve_model_candidates
from .fallback import build_local_explanation

__all__ = [
    "ExplainGateway",
    "resolve_model_candidates",
    "build_local_explanation",
]
