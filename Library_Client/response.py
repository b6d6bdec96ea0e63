"""Parsing of raw HTTP/1.1 responses from the library service."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from .config import (
    HEADER_TERMINATOR,
    JSON_CONTENT_TYPE,
    LINE_END,
    RATE_LIMIT_MESSAGE,
    SESSION_COOKIE_NAME,
)
from .request import Cookie

_COOKIE_PREFIX = f"{SESSION_COOKIE_NAME}="
_CONTENT_LENGTH = "Content-Length: "
_CONTENT_TYPE = "Content-Type: "


class MalformedResponseError(Exception):
    """Raised when a response cannot be parsed."""

    def __init__(self, message: str, raw: str = "") -> None:
        self.raw = raw
        super().__init__(message)


def is_success(code: int) -> bool:
    """True for 2xx status codes."""
    return code // 100 == 2


@dataclass
class Response:
    """A parsed HTTP response."""

    code: int
    headers: list[str] = field(default_factory=list)
    session_cookie: Cookie | None = None
    json_data: Any = None
    body: str = ""

    @property
    def success(self) -> bool:
        return is_success(self.code)

    @property
    def token(self) -> str | None:
        """The library access token carried in a JSON body, if any."""
        if isinstance(self.json_data, dict):
            token = self.json_data.get("token")
            if isinstance(token, str) and token:
                return token
        return None

    @property
    def error(self) -> str | None:
        if isinstance(self.json_data, dict) and "error" in self.json_data:
            return str(self.json_data["error"])
        return None


def _parse_status_code(status_line: str, raw: str) -> int:
    parts = status_line.split()
    if len(parts) < 2:
        raise MalformedResponseError(f"Bad status line: {status_line!r}", raw)
    try:
        return int(parts[1])
    except ValueError:
        raise MalformedResponseError(f"Bad status code in: {status_line!r}", raw) from None


def parse_response(raw: str) -> Response:
    """Split a raw response into status code, cookie and JSON payload.

    Args:
        raw: The full response text as returned by ``recv_response``

    Returns:
        The parsed response. ``json_data`` is None when the body is empty or
        not JSON; non-JSON bodies are kept only as text.

    Raises:
        MalformedResponseError: If the status line is unusable or a body
            declared as JSON does not parse
    """
    head, separator, body = raw.partition(HEADER_TERMINATOR)
    if not separator:
        body = ""

    lines = head.split(LINE_END)
    code = _parse_status_code(lines[0], raw)
    headers = lines[1:]

    session_cookie = None
    has_data = False
    is_json = False

    for line in headers:
        if (pos := line.find(_COOKIE_PREFIX)) >= 0:
            value = line[pos + len(_COOKIE_PREFIX):].split(";", 1)[0]
            session_cookie = Cookie(SESSION_COOKIE_NAME, value)
        elif (pos := line.find(_CONTENT_LENGTH)) >= 0:
            has_data = line[pos + len(_CONTENT_LENGTH):].strip() != "0"
        elif (pos := line.find(_CONTENT_TYPE)) >= 0:
            media_type = line[pos + len(_CONTENT_TYPE):].split(";", 1)[0].strip()
            is_json = media_type == JSON_CONTENT_TYPE

    data = None
    if body == RATE_LIMIT_MESSAGE:
        data = {"error": RATE_LIMIT_MESSAGE}
    elif has_data and body and is_json:
        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise MalformedResponseError(f"Invalid JSON body: {e}", raw) from e

    return Response(
        code=code,
        headers=headers,
        session_cookie=session_cookie,
        json_data=data,
        body=body,
    )
