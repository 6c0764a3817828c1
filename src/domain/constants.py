"""
Domain Constants: gateway 전역 상수.

입력 정책, 응답 형태, upstream 기본값 등 시스템 전반에서 사용되는 값들.
"""

# =============================================================================
# Input Policy (입력 정책)
# =============================================================================

MIN_TOPIC_LENGTH = 3
DEFAULT_LEVEL = "Kid"
DEFAULT_STYLE = "Simple"

TOPIC_TOO_SHORT_MESSAGE = "Please enter a topic with at least 3 characters."

# =============================================================================
# Result Shape (응답 형태)
# =============================================================================

MAX_CURIOUS_QUESTIONS = 5

# =============================================================================
# Upstream Call (upstream 호출 정책)
# =============================================================================

DEFAULT_TEMPERATURE = 0.5
DEFAULT_TIMEOUT_SECONDS = 20.0
DEFAULT_PROVIDER = "gemini"

# 범용 모델 override 환경변수 (provider별 변수보다 우선)
MODEL_OVERRIDE_ENV = "MODEL_OVERRIDE"
PROVIDER_ENV = "EXPLAIN_PROVIDER"
