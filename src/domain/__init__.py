"""Domain layer: errors, schemas and constants."""

from .errors import ErrorCodes, GatewayError
from .schemas import (
    ExplainRequest,
    ExplainResult,
    Level,
    RawUpstreamResult,
    Style,
    UpstreamRequest,
)

__all__ = [
    "ErrorCodes",
    "GatewayError",
    "ExplainRequest",
    "ExplainResult",
    "Level",
    "Style",
    "RawUpstreamResult",
    "UpstreamRequest",
]
