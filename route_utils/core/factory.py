"""
Route utils factory

make_route_utils(logger=None, tag_prefix=None) builds helpers bound to a shared
logging hook and tag prefix, so routes don't pass the same options repeatedly:

    utils = make_route_utils(logger=stdlib_log_sink(), tag_prefix="users:")

    @utils.wrap_route
    async def get_user(request, sink):
        return {"status": True, "data": {"id": 1}}
"""
import functools
import inspect
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, Union

from route_utils.core.config import get_settings
from route_utils.core.log_sinks import noop_logger, safe_log
from route_utils.core.logging_config import LoggingConfig
from route_utils.core.resolver import resolve_route_response
from route_utils.core.sink import ApiResponse, LoggerFn, is_committed

logger = LoggingConfig.get_logger(__name__)

ResultLike = Union[ApiResponse, dict, Any]
RouteHandler = Callable[[Any, Any], Union[ResultLike, Awaitable[ResultLike]]]
WorkFn = Callable[[], Union[ResultLike, Awaitable[ResultLike]]]


async def _maybe_await(value):
    if inspect.isawaitable(value):
        return await value
    return value


def _send_fallback(sink: Any, body: dict) -> None:
    """Best-effort 500; a sink that refuses is left alone"""
    try:
        if not is_committed(sink):
            sink.set_status(500).send_json(body)
    except Exception:
        logger.debug("Fallback response could not be sent", exc_info=True)


def _request_field(request: Any, name: str) -> Any:
    if request is None:
        return None
    if isinstance(request, dict):
        return request.get(name)
    return getattr(request, name, None)


def build_route_tag(request: Any) -> str:
    """Default tag for a request: "METHOD path", with "?" for missing parts"""
    method = _request_field(request, "method") or "?"

    path = _request_field(request, "original_url")
    if not path:
        url = _request_field(request, "url")
        if url is not None and hasattr(url, "path"):
            query = getattr(url, "query", "")
            path = f"{url.path}?{query}" if query else url.path
        elif isinstance(url, str):
            path = url
        else:
            path = _request_field(request, "path")

    return f"{method} {path or '?'}"



def _safe_route_tag(request: Any) -> str:
    try:
        return build_route_tag(request)
    except Exception:
        logger.debug("Could not build route tag from request", exc_info=True)
        return "? ?"

@dataclass(frozen=True)
class RouteUtils:
    """Helpers bound to a logging hook and a tag prefix"""

    logger: LoggerFn = noop_logger
    tag_prefix: str = ""
    fallback_tag: str = field(default="createResponder")

    def _pick_logger(self, override: Optional[LoggerFn]) -> LoggerFn:
        return override if callable(override) else self.logger

    resolve_route_response = staticmethod(resolve_route_response)

    def wrap_route(
        self,
        handler: Optional[RouteHandler] = None,
        *,
        tag: Optional[str] = None,
        logger: Optional[LoggerFn] = None,
    ):
        """Wrap a route handler into a ``(request, sink, next)`` coroutine

        The handler returns an ApiResponse (sync or async). The result goes
        through resolve_route_response; unexpected shapes and exceptions are
        logged and answered with a 500 when nothing was sent yet.

        Usable directly or as a decorator, with or without options.
        """
        if handler is None:
            return functools.partial(self.wrap_route, tag=tag, logger=logger)

        route_logger = self._pick_logger(logger)
        tag_prefix = self.tag_prefix

        @functools.wraps(handler)
        async def route(request: Any, sink: Any, next: Any = None) -> None:
            base_tag = tag or _safe_route_tag(request)
            route_tag = f"{tag_prefix}{base_tag}" if tag_prefix else base_tag

            try:
                response = await _maybe_await(handler(request, sink))
                if resolve_route_response(sink, response):
                    return

                safe_log(
                    route_logger,
                    {"message": "Unexpected response shape", "response": response, "route": route_tag},
                    route_tag,
                )
                _send_fallback(sink, {"error": "UnexpectedResponseShape"})
            except Exception as e:
                safe_log(route_logger, e, f"{route_tag}/catch")
                _send_fallback(sink, {"error": str(e) or "Unexpected error"})

        return route

    def create_responder(
        self,
        sink: Any,
        *,
        tag: Optional[str] = None,
        logger: Optional[LoggerFn] = None,
    ) -> Callable[[WorkFn], Awaitable[bool]]:
        """In-route responder bound to one sink

        Keeps the route signature untouched: call the responder with a
        zero-argument work function returning an ApiResponse. Always
        resolves to True, meaning a best-effort response was attempted.
        """
        route_logger = self._pick_logger(logger)
        route_tag = tag or self.fallback_tag

        async def respond(work_fn: WorkFn) -> bool:
            try:
                response = await _maybe_await(work_fn())
                if resolve_route_response(sink, response):
                    return True

                safe_log(route_logger, {"message": "Unexpected response shape", "response": response}, route_tag)
                _send_fallback(sink, {"status": False, "error": "UnexpectedResponseShape"})
                return True
            except Exception as e:
                safe_log(route_logger, e, f"{route_tag}/catch")
                _send_fallback(sink, {"status": False, "error": str(e) or "Unexpected error"})
                return True

        return respond


def make_route_utils(logger: Optional[LoggerFn] = None, tag_prefix: Optional[str] = None) -> RouteUtils:
    """Create route helpers bound to shared defaults

    Args:
        logger: Optional ``(payload, tag)`` hook. If omitted, nothing is logged.
        tag_prefix: Prefix applied to generated and explicit tags. Defaults to
            the ``ROUTE_UTILS_TAG_PREFIX`` setting (empty unless configured).

    Returns:
        RouteUtils exposing wrap_route, create_responder and resolve_route_response
    """
    settings = get_settings()
    return RouteUtils(
        logger=logger if callable(logger) else noop_logger,
        tag_prefix=settings.tag_prefix if tag_prefix is None else tag_prefix,
        fallback_tag=settings.fallback_responder_tag,
    )


@functools.lru_cache(maxsize=None)
def get_default_route_utils() -> RouteUtils:
    """Silent helpers shared by the module-level wrap_route and create_responder"""
    return RouteUtils()


def wrap_route(handler: Optional[RouteHandler] = None, *, tag: Optional[str] = None, logger: Optional[LoggerFn] = None):
    return get_default_route_utils().wrap_route(handler, tag=tag, logger=logger)


def create_responder(sink: Any, *, tag: Optional[str] = None, logger: Optional[LoggerFn] = None):
    return get_default_route_utils().create_responder(sink, tag=tag, logger=logger)
