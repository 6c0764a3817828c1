"""
Core layer: 순수 로직 모듈.

역할:
- 프롬프트 생성, upstream 텍스트 파싱/정규화
- run log, ID 발급
"""

from .ids import generate_run_id
from .logging import (
    complete_run_log,
    configure_logging,
    create_run_log,
    emit_run_log,
    record_attempt,
)
from .parsing import normalize_result, parse_explanation, safe_parse_json
from .prompt import build_prompt

__all__ = [
    # prompt
    "build_prompt",
    # parsing
    "safe_parse_json",
    "parse_explanation",
    "normalize_result",
    # ids
    "generate_run_id",
    # logging
    "configure_logging",
    "create_run_log",
    "record_attempt",
    "complete_run_log",
    "emit_run_log",
]
