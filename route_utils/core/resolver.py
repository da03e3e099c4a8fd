"""
Core primitive: resolve a normalized result into an HTTP response

resolve_route_response(sink, result) -> bool

- Validates the sink
- Prevents double responses (``already_committed``)
- Applies optional headers
- Chooses the status code (explicit ``http`` if valid, else 200/204/400)
- Serializes success and error shapes predictably
"""
from collections.abc import Mapping
from typing import Any, Dict, Optional

from pydantic import BaseModel

from route_utils.core.logging_config import LoggingConfig
from route_utils.core.sink import ResponseSink, has_capability, is_committed

logger = LoggingConfig.get_logger(__name__)

_MISSING = object()

MISSING_STATUS_BODY = {"error": "MissingStatus", "message": "Missing `status` on response object"}
INVALID_STATUS_BODY = {"status": False, "error": "InvalidStatusField", "message": "`status` must be boolean"}


def resolve_route_response(sink: ResponseSink, result: Any) -> bool:
    """Commit exactly one HTTP response for ``result`` onto ``sink``

    Args:
        sink: Object implementing the ResponseSink protocol
        result: ApiResponse, or a mapping with a boolean ``status``

    Returns:
        True if a response was sent (or one was already committed);
        False if ``sink`` cannot send anything, in which case it is untouched.
    """
    try:
        if not has_capability(sink):
            return False

        if is_committed(sink):
            return True

        response = _as_mapping(result)
        if response is None or "status" not in response:
            sink.set_status(500).send_json(dict(MISSING_STATUS_BODY))
            return True

        status = response["status"]
        is_ok = status is True
        is_fail = status is False
        data = response.get("data", _MISSING)

        http = _explicit_http(response.get("http"))
        if http is None:
            if is_ok:
                http = 204 if _is_empty(data) else 200
            else:
                http = 400

        _apply_headers(sink, response.get("headers"))

        if is_ok:
            if http == 204:
                sink.set_status(http).send_raw()
            else:
                sink.set_status(http).send_json(None if data is _MISSING else data)
            return True

        if is_fail:
            sink.set_status(http).send_json(error_body(None if data is _MISSING else data))
            return True

        sink.set_status(500).send_json(dict(INVALID_STATUS_BODY))
        return True
    except Exception as e:
        logger.debug("Resolver failed, attempting last-resort response", exc_info=True)
        try:
            if not is_committed(sink):
                sink.set_status(500).send_json({
                    "status": False,
                    "error": "UnhandledResponderError",
                    "message": str(e) or "Unexpected error",
                })
        except Exception:
            # Nothing else can be done safely with this sink
            logger.debug("Last-resort response failed", exc_info=True)
        return True


def error_body(raw: Any) -> Dict[str, Any]:
    """Derive the error body of a failed result from its ``data``"""
    if isinstance(raw, BaseException):
        return {"error": type(raw).__name__ or "Error", "message": str(raw)}

    if isinstance(raw, Mapping):
        body = {}
        if raw.get("error"):
            body["error"] = raw["error"]
        if raw.get("message"):
            body["message"] = raw["message"]
        return body

    return {
        "error": "RequestFailed",
        "message": raw if isinstance(raw, str) else "Request failed",
    }


def _as_mapping(result: Any) -> Optional[Mapping]:
    if isinstance(result, BaseModel):
        # Unset optional fields behave like missing keys; values are passed through as-is
        return {name: getattr(result, name) for name in result.model_fields_set}
    if isinstance(result, Mapping):
        return result
    return None


def _explicit_http(value: Any) -> Optional[int]:
    # bool is an int subclass but never a status code
    if isinstance(value, int) and not isinstance(value, bool) and 100 <= value <= 599:
        return value
    return None


def _is_empty(data: Any) -> bool:
    return data is _MISSING or data is None or (isinstance(data, str) and data == "")


def _apply_headers(sink: Any, headers: Any) -> None:
    if not isinstance(headers, Mapping):
        return

    set_header = getattr(sink, "set_header", None)
    if not callable(set_header):
        return

    for name, value in headers.items():
        try:
            set_header(name, str(value))
        except Exception:
            logger.debug("Ignoring header that could not be set", extra={"header": name})
