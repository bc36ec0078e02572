"""
Error Report Serializer

Wire format for error reports published to Redis:
    {"channel": "<channel>", "data": {<report fields>}}
"""
from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Optional

from news_desk.core.types import NewsDeskError


class SerializationError(Exception):
    """Raised when an error report cannot be encoded or decoded."""


def error_to_dict(
    context: str,
    error: BaseException,
    reported_at: Optional[datetime] = None,
) -> dict[str, Any]:
    """
    Describe an error as a JSON-serializable dict.

    Field names use camelCase to match the service's JSON.
    """
    details = dict(error.context) if isinstance(error, NewsDeskError) else {}
    message = error.message if isinstance(error, NewsDeskError) else str(error)
    return {
        "context": context,
        "errorType": type(error).__name__,
        "message": message,
        "details": details,
        "reportedAt": (reported_at or datetime.now(timezone.utc)).isoformat(),
    }


def serialize(channel: str, data: dict[str, Any]) -> str:
    """Encode a report into its channel envelope."""
    try:
        return json.dumps({"channel": channel, "data": data}, default=str)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Failed to serialize report for '{channel}': {exc}") from exc


def deserialize(raw: str | bytes) -> tuple[str, dict[str, Any]]:
    """Decode an envelope back into (channel, data)."""
    try:
        envelope = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Failed to deserialize report: {exc}") from exc

    if not isinstance(envelope, dict) or "channel" not in envelope or "data" not in envelope:
        raise SerializationError("Malformed report envelope")
    return envelope["channel"], envelope["data"]
