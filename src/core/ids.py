"""
ID 생성: run_id

요청 단위 추적용 (영속화 없음, 로그 상관관계 전용).
"""

import uuid
from datetime import UTC, datetime


def generate_run_id() -> str:
    """
    Run ID 생성.

    고유성 보장: UUID v4
    포맷: EXP-{timestamp}-{uuid[:8]}

    Returns:
        run_id 문자열
    """
    now = datetime.now(UTC)
    timestamp = now.strftime("%Y%m%d%H%M%S")
    unique = uuid.uuid4().hex[:8]

    return f"EXP-{timestamp}-{unique}"
