"""JSON request body parsing, applied to every request before routing."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from .config import DEFAULT_JSON_LIMIT
from .utils import error_body

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"
STRICT_OPENERS = ("{", "[")
BOM = "\ufeff"


def parse_content_type(header: str) -> tuple[str, dict[str, str]]:
    """Split a Content-Type header into its media type and lowercased params."""
    media_type, *raw_params = header.split(";")
    params = {}
    for raw in raw_params:
        key, sep, value = raw.partition("=")
        if sep:
            params[key.strip().lower()] = value.strip().strip('"')
    return media_type.strip().lower(), params


class BodyRejected(Exception):
    def __init__(self, status_code: int, code: str, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details


def too_large(limit: int, length: int) -> BodyRejected:
    return BodyRejected(413, "entity_too_large", "request entity too large", {"limit": limit, "length": length})


def check_charset(charset: str) -> None:
    if not charset.startswith("utf-"):
        raise BodyRejected(415, "unsupported_charset", f'unsupported charset "{charset.upper()}"', {"charset": charset})


def reject_constant(name: str):
    raise BodyRejected(400, "invalid_json", f"Unexpected token {name} in JSON")


def decode_json(raw: bytes, charset: str) -> Any:
    try:
        text = raw.decode(charset)
    except LookupError:
        raise BodyRejected(415, "unsupported_charset", f'unsupported charset "{charset.upper()}"', {"charset": charset})
    except UnicodeDecodeError as exc:
        raise BodyRejected(400, "invalid_json", f"body is not valid {charset}", {"position": exc.start})

    if text.startswith(BOM):
        text = text[1:]
    stripped = text.lstrip(" \t\r\n")
    if not stripped.startswith(STRICT_OPENERS):
        raise BodyRejected(400, "invalid_json", "top-level JSON value must be an object or array")
    try:
        return json.loads(stripped, parse_constant=reject_constant)
    except json.JSONDecodeError as exc:
        raise BodyRejected(400, "invalid_json", exc.msg, {"line": exc.lineno, "column": exc.colno})
    except RecursionError:
        raise BodyRejected(400, "invalid_json", "JSON nesting too deep")


async def read_body(request: Request, limit: int) -> bytes:
    """Read the body, giving up as soon as it grows past ``limit`` bytes."""
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        raise too_large(limit, int(declared))

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise too_large(limit, len(body))
    # Cache it the way Request.body() does so routes can read it again.
    request._body = bytes(body)
    return request._body


class JSONBodyMiddleware(BaseHTTPMiddleware):
    """Parse ``application/json`` bodies onto ``request.state.json``.

    Requests with another content type, or with no body, pass through
    untouched. Bodies that are too large, wrongly encoded or malformed are
    answered here and never reach a route.
    """

    def __init__(self, app, limit: int = DEFAULT_JSON_LIMIT) -> None:
        super().__init__(app)
        self.limit = limit

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        media_type, params = parse_content_type(request.headers.get("content-type", ""))
        if media_type != JSON_MEDIA_TYPE:
            return await call_next(request)

        try:
            charset = params.get("charset", "utf-8").lower()
            check_charset(charset)
            raw = await read_body(request, self.limit)
            if raw:
                request.state.json = decode_json(raw, charset)
        except BodyRejected as exc:
            logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.message)
            return JSONResponse(
                status_code=exc.status_code,
                content=error_body(exc.code, exc.message, exc.details),
            )
        return await call_next(request)


def json_body(request: Request) -> Any:
    """Dependency returning the parsed JSON body, or ``None`` if there was none."""
    return getattr(request.state, "json", None)
