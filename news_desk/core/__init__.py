"""
News Desk Core Utilities

Shared exception types.
"""
from news_desk.core.types import (
    MalformedResponse,
    NewsDeskError,
    TransportError,
    ValidationError,
)

__all__ = [
    "MalformedResponse",
    "NewsDeskError",
    "TransportError",
    "ValidationError",
]
