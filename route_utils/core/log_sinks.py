"""
Logging hooks for route wrappers

A logging hook is any callable ``(payload, tag) -> None``. Hooks are fire and
forget: they are never awaited and anything they raise is swallowed, so a
broken hook can never change the HTTP response.
"""
import asyncio
import inspect
import logging
from typing import Any, Optional

from route_utils.core.logging_config import LoggingConfig
from route_utils.core.sink import LoggerFn

logger = LoggingConfig.get_logger(__name__)

# Strong references so scheduled hook tasks are not garbage collected mid-flight
_pending = set()


def noop_logger(payload: Any, tag: Optional[str] = None) -> None:
    """Silent hook used when no logger is configured"""
    return None


def stdlib_log_sink(target: Optional[logging.Logger] = None, level: int = logging.ERROR) -> LoggerFn:
    """Build a hook that forwards payloads to a stdlib logger

    Args:
        target: Logger to write to (defaults to ``route_utils.routes``)
        level: Level used for every payload

    Returns:
        A ``(payload, tag)`` hook. Exceptions are logged with their traceback,
        the tag travels as ``extra={"route_tag": tag}``.
    """
    route_logger = target or LoggingConfig.get_logger("route_utils.routes")

    def _log(payload: Any, tag: Optional[str] = None) -> None:
        extra = {"route_tag": tag}
        if isinstance(payload, BaseException):
            route_logger.log(
                level,
                "%s: %s",
                type(payload).__name__,
                payload,
                exc_info=(type(payload), payload, payload.__traceback__),
                extra=extra,
            )
        elif isinstance(payload, dict) and "message" in payload:
            details = {k: v for k, v in payload.items() if k != "message"}
            route_logger.log(level, str(payload["message"]), extra={**extra, "details": details})
        else:
            route_logger.log(level, "%r", payload, extra=extra)

    return _log


def safe_log(log_fn: LoggerFn, payload: Any, tag: Optional[str]) -> None:
    """Invoke a hook without letting it affect the caller"""
    try:
        outcome = log_fn(payload, tag)
    except Exception:
        logger.debug("Logging hook failed", exc_info=True, extra={"route_tag": tag})
        return

    if inspect.isawaitable(outcome):
        _schedule(outcome, tag)


def _schedule(awaitable, tag: Optional[str]) -> None:
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        # No loop to run it on; drop it instead of leaking an un-awaited coroutine
        if inspect.iscoroutine(awaitable):
            awaitable.close()
        return

    task = loop.create_task(_drain(awaitable, tag))
    _pending.add(task)
    task.add_done_callback(_pending.discard)


async def _drain(awaitable, tag: Optional[str]) -> None:
    try:
        await awaitable
    except Exception:
        logger.debug("Async logging hook failed", exc_info=True, extra={"route_tag": tag})
