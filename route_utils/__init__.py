"""
route_utils: normalized responses for HTTP route handlers

- Normalized results: {"status": bool, "data"?, "http"?, "headers"?, "meta"?}
- Guards against double responses (sink.already_committed)
- Pluggable logging hook, silent by default
- Two ergonomics:
    a) wrap_route(handler, tag=None, logger=None) -> (request, sink, next) coroutine
    b) create_responder(sink, tag=None, logger=None) -> in-route responder
- Core primitive: resolve_route_response(sink, result) -> bool
"""
from route_utils.core.errors import ResponseAlreadyCommittedError, RouteUtilsError
from route_utils.core.factory import (RouteUtils, build_route_tag,
                                      create_responder,
                                      get_default_route_utils,
                                      make_route_utils, wrap_route)
from route_utils.core.log_sinks import noop_logger, stdlib_log_sink
from route_utils.core.resolver import resolve_route_response
from route_utils.core.sink import ApiResponse, LoggerFn, ResponseSink

__version__ = "0.1.0"

__all__ = [
    "ApiResponse",
    "LoggerFn",
    "ResponseAlreadyCommittedError",
    "ResponseSink",
    "RouteUtils",
    "RouteUtilsError",
    "build_route_tag",
    "create_responder",
    "get_default_route_utils",
    "make_route_utils",
    "noop_logger",
    "resolve_route_response",
    "stdlib_log_sink",
    "wrap_route",
]
