"""
Endpoint results and their translation into HTTP responses.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, PlainTextResponse, Response

NOT_READY_MESSAGE = "Not ready"
UNAUTHORIZED_MESSAGE = "Unauthorized"


class ResultKind(str, Enum):
    """Outcome of a proxy endpoint."""
    OK = "ok"
    NOT_READY = "not_ready"
    UNAUTHORIZED = "unauthorized"
    BAD_REQUEST = "bad_request"


class BodyType(str, Enum):
    JSON = "json"
    TEXT = "text"
    EMPTY = "empty"


@dataclass(frozen=True)
class ProxyResult:
    kind: ResultKind
    payload: Any = None
    headers: Dict[str, str] = field(default_factory=dict)
    body_type: BodyType = BodyType.JSON

    @classmethod
    def ok(cls, payload: Any, headers: Optional[Dict[str, str]] = None) -> "ProxyResult":
        return cls(ResultKind.OK, payload, dict(headers or {}))

    @classmethod
    def ok_text(cls, text: str) -> "ProxyResult":
        return cls(ResultKind.OK, text, body_type=BodyType.TEXT)

    @classmethod
    def ok_empty(cls) -> "ProxyResult":
        return cls(ResultKind.OK, body_type=BodyType.EMPTY)

    @classmethod
    def not_ready(cls) -> "ProxyResult":
        return cls(ResultKind.NOT_READY, NOT_READY_MESSAGE, body_type=BodyType.TEXT)

    @classmethod
    def unauthorized(cls) -> "ProxyResult":
        return cls(ResultKind.UNAUTHORIZED, UNAUTHORIZED_MESSAGE, body_type=BodyType.TEXT)

    @classmethod
    def bad_request(cls, error: Any) -> "ProxyResult":
        return cls(ResultKind.BAD_REQUEST, error)


_STATUS_CODES = {
    ResultKind.OK: 200,
    ResultKind.NOT_READY: 503,
    ResultKind.UNAUTHORIZED: 401,
    ResultKind.BAD_REQUEST: 400,
}


def render_result(result: ProxyResult) -> Response:
    """Map a result to its status code and body."""
    status_code = _STATUS_CODES[result.kind]

    if result.kind is ResultKind.NOT_READY:
        return PlainTextResponse(NOT_READY_MESSAGE, status_code=status_code)
    if result.kind is ResultKind.UNAUTHORIZED:
        return PlainTextResponse(UNAUTHORIZED_MESSAGE, status_code=status_code)

    if result.body_type is BodyType.EMPTY:
        return Response(status_code=status_code, headers=result.headers)
    if result.body_type is BodyType.TEXT:
        return PlainTextResponse(result.payload, status_code=status_code, headers=result.headers)
    return JSONResponse(
        content=jsonable_encoder(result.payload),
        status_code=status_code,
        headers=result.headers,
    )
