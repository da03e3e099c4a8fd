"""
Starlette / FastAPI integration

StarletteResponseSink records a single commit and renders it as a Starlette
Response; as_endpoint turns a wrapped route into a regular endpoint.

    app = FastAPI()
    app.add_api_route("/users/{user_id}", as_endpoint(wrap_route(get_user)), methods=["GET"])
"""
from typing import Any, Callable, Dict, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from starlette.responses import JSONResponse, Response

from route_utils.core.errors import ResponseAlreadyCommittedError
from route_utils.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)


class StarletteResponseSink:
    """In-memory ResponseSink backed by a Starlette response"""

    def __init__(self, default_status: int = 200):
        self.status_code = default_status
        self.headers: Dict[str, str] = {}
        self.body: Any = None
        self.is_json = False
        self._response: Optional[Response] = None

    @property
    def already_committed(self) -> bool:
        return self._response is not None

    def set_status(self, code: int) -> "StarletteResponseSink":
        self.status_code = code
        return self

    def set_header(self, name: str, value: str) -> None:
        if self.already_committed:
            raise ResponseAlreadyCommittedError("Cannot set header after the response was committed")
        self.headers[name] = value

    def send_json(self, body: Any = None) -> "StarletteResponseSink":
        self._commit(lambda headers: JSONResponse(
            content=jsonable_encoder(body), status_code=self.status_code, headers=headers
        ))
        self.body = body
        self.is_json = True
        return self

    def send_raw(self, body: Any = None) -> "StarletteResponseSink":
        self._commit(lambda headers: Response(content=body, status_code=self.status_code, headers=headers))
        self.body = body
        return self

    def _commit(self, render: Callable[[Dict[str, str]], Response]) -> None:
        if self.already_committed:
            raise ResponseAlreadyCommittedError()
        try:
            response = render(dict(self.headers))
        except Exception:
            # Headers belong to the result that failed to render, not to a later fallback
            self.headers.clear()
            raise
        self._response = response

    def to_response(self) -> Response:
        """Rendered response, or an empty 500 if nothing was ever committed"""
        if self._response is None:
            logger.debug("Sink was never committed, returning empty 500")
            return Response(status_code=500)
        return self._response


def as_endpoint(
    route: Callable[..., Any],
    sink_factory: Callable[[], StarletteResponseSink] = StarletteResponseSink,
):
    """Expose a wrapped route as a Starlette/FastAPI endpoint

    Args:
        route: Coroutine ``(request, sink, next)`` produced by wrap_route
        sink_factory: Builds one sink per request

    Returns:
        ``async (request) -> Response``
    """

    async def endpoint(request: Request) -> Response:
        sink = sink_factory()
        await route(request, sink)
        return sink.to_response()

    endpoint.__name__ = getattr(route, "__name__", "endpoint")
    endpoint.__doc__ = getattr(route, "__doc__", None)
    return endpoint
