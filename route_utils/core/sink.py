"""
Response sink protocol and the normalized result contract
"""
from typing import Any, Callable, Dict, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, Field, StrictBool, field_validator

# (payload, tag) -> None, fire and forget
LoggerFn = Callable[[Any, Optional[str]], Any]


@runtime_checkable
class ResponseSink(Protocol):
    """Minimal response interface, so no host framework types are required.

    Any object with these members can be handed to the resolver. ``set_header``
    is optional and looked up at call time.
    """

    already_committed: bool

    def set_status(self, code: int) -> "ResponseSink":
        ...

    def send_json(self, body: Any = None) -> "ResponseSink":
        ...

    def send_raw(self, body: Any = None) -> "ResponseSink":
        ...


class ApiResponse(BaseModel):
    """Normalized result returned by route handlers

    - ``status`` is mandatory and must be a real bool
    - ``http`` overrides the default status code mapping when it is a valid code
    - ``headers`` are applied to the response before the body
    - ``meta`` is carried along but never rendered
    """

    status: StrictBool
    data: Any = None
    http: Optional[int] = Field(default=None, description="Explicit HTTP status code")
    headers: Optional[Dict[str, Any]] = None
    meta: Any = None

    @field_validator("http", mode="before")
    @classmethod
    def ignore_invalid_http(cls, v: Any) -> Optional[int]:
        """Anything but a real int is dropped, never coerced"""
        if isinstance(v, int) and not isinstance(v, bool):
            return v
        return None

    @classmethod
    def ok(cls, data: Any = None, **kwargs) -> "ApiResponse":
        """Success result"""
        return cls(status=True, data=data, **kwargs)

    @classmethod
    def fail(cls, data: Any = None, **kwargs) -> "ApiResponse":
        """Failure result"""
        return cls(status=False, data=data, **kwargs)


def has_capability(sink: Any) -> bool:
    """Check that ``sink`` can set a status and send a body"""
    if sink is None:
        return False
    return all(
        callable(getattr(sink, name, None))
        for name in ("set_status", "send_json", "send_raw")
    )


def is_committed(sink: Any) -> bool:
    return bool(getattr(sink, "already_committed", False))
