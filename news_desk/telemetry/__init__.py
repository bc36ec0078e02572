"""
news_desk.telemetry - error reporting sinks.

Public API:
    ErrorReporter        - protocol: async report(context, error)
    LoggingErrorReporter - logs reports
    RedisErrorReporter   - logs and publishes reports to a Redis channel
    report_error         - forwards to a reporter without ever raising
"""
from .reporter import (
    DEFAULT_ERROR_CHANNEL,
    ErrorReporter,
    LoggingErrorReporter,
    RedisErrorReporter,
    report_error,
)
from .serializer import SerializationError, deserialize, error_to_dict, serialize

__all__ = [
    "DEFAULT_ERROR_CHANNEL",
    "ErrorReporter",
    "LoggingErrorReporter",
    "RedisErrorReporter",
    "SerializationError",
    "deserialize",
    "error_to_dict",
    "report_error",
    "serialize",
]
