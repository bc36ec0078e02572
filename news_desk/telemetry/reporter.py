"""
Error Reporters

Sinks for fetch failures that the core turns into empty results. The core
only knows the ErrorReporter protocol; the entry point decides which sink to use.

Usage:
    reporter = RedisErrorReporter(redis_url="redis://localhost:6379/0")
    await reporter.connect()
    await reporter.report("category:FMCG", error)
    await reporter.close()
"""
from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from redis.asyncio import Redis
from redis.exceptions import RedisError

from .serializer import SerializationError, error_to_dict, serialize

logger = logging.getLogger(__name__)

DEFAULT_ERROR_CHANNEL = "news_desk:errors"


@runtime_checkable
class ErrorReporter(Protocol):
    """Receives (context, error) for every failure the core absorbs."""

    async def report(self, context: str, error: BaseException) -> None:
        ...


class LoggingErrorReporter:
    """Writes every report to the log at WARNING level."""

    def __init__(self, name: str = "news_desk.errors") -> None:
        self._logger = logging.getLogger(name)
        self.reports_logged = 0

    async def report(self, context: str, error: BaseException) -> None:
        self.reports_logged += 1
        self._logger.warning(
            "%s failed: %s",
            context,
            error,
            extra={"context": context, "error_type": type(error).__name__},
        )


class RedisErrorReporter:
    """
    Logs each report and publishes it to a Redis pub/sub channel.

    Publishing is best-effort: when Redis is unreachable or not yet connected
    the report is only logged.
    """

    def __init__(self, redis_url: str, channel: str = DEFAULT_ERROR_CHANNEL) -> None:
        self._redis_url = redis_url
        self._channel = channel
        self._redis: Redis | None = None
        self._fallback = LoggingErrorReporter()
        self.reports_published = 0

    @property
    def channel(self) -> str:
        return self._channel

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    async def connect(self) -> None:
        """Open the Redis connection; on failure keep logging only."""
        self._redis = Redis.from_url(self._redis_url, decode_responses=False)
        try:
            await self._redis.ping()
            logger.info("RedisErrorReporter connected to Redis at %s", self._redis_url)
        except RedisError as exc:
            logger.warning(
                "Cannot connect to Redis, error reports will only be logged: %s", exc
            )
            await self._redis.aclose()
            self._redis = None

    async def close(self) -> None:
        """Close the Redis connection."""
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
            logger.info("RedisErrorReporter disconnected from Redis")

    async def __aenter__(self) -> RedisErrorReporter:
        await self.connect()
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()

    # ── Report ────────────────────────────────────────────────────────────────

    async def report(self, context: str, error: BaseException) -> None:
        await self._fallback.report(context, error)

        if self._redis is None:
            return

        try:
            payload = serialize(self._channel, error_to_dict(context, error))
            deliveries = await self._redis.publish(self._channel, payload)
        except (RedisError, SerializationError) as exc:
            logger.warning("Failed to publish error report: %s", exc)
            return

        self.reports_published += 1
        logger.debug(
            "Published error report to '%s', reached %d subscriber(s)",
            self._channel,
            deliveries,
        )


async def report_error(reporter: ErrorReporter, context: str, error: BaseException) -> None:
    """Forward an error to reporter; a failing reporter is logged, never raised."""
    try:
        await reporter.report(context, error)
    except Exception as callback_error:
        logger.error(
            "Error reporter failed",
            extra={"context": context, "error": str(callback_error)},
        )
