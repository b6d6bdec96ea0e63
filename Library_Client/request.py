"""HTTP/1.1 request construction for the library service.

Requests are assembled as plain text:
- Request line, then one header per line, each ended by CR-LF
- A blank line separates the headers from the (optional) body
- POST bodies are either a JSON object or ``key=value`` pairs joined by ``&``

Only the headers the service needs are emitted. A missing token or an
empty cookie list means the header is left out, never sent empty.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Sequence

from .config import FORM_CONTENT_TYPE, JSON_CONTENT_TYPE, LINE_END


@dataclass(frozen=True)
class Cookie:
    """A single cookie. Both fields empty means "no session"."""

    key: str = ""
    value: str = ""

    @property
    def is_null(self) -> bool:
        return self.key == "" and self.value == ""

    def __str__(self) -> str:
        return f"{self.key}={self.value}"


@dataclass(frozen=True)
class KeyValue:
    """One body field of a POST request."""

    key: str
    value: str

    def __str__(self) -> str:
        return f"{self.key}={self.value}"


@dataclass(frozen=True)
class HttpRequest:
    """Everything needed to put one request on the wire."""

    method: str
    host: str
    path: str
    query_params: str = ""
    content_type: str = ""
    body: tuple[KeyValue, ...] = ()
    cookies: tuple[Cookie, ...] = ()
    token: str = ""

    def serialize_body(self) -> str:
        if self.method != "POST":
            return ""
        if self.content_type == JSON_CONTENT_TYPE:
            return json.dumps({pair.key: pair.value for pair in self.body})
        return "&".join(str(pair) for pair in self.body)

    def to_bytes(self) -> bytes:
        """Render the request exactly as it is sent."""
        target = f"{self.path}?{self.query_params}" if self.query_params else self.path
        lines = [f"{self.method} {target} HTTP/1.1", f"Host: {self.host}"]

        if self.token:
            lines.append(f"Authorization: Bearer {self.token}")
        if self.cookies:
            lines.append("Cookie: " + "; ".join(str(cookie) for cookie in self.cookies))

        if self.method != "POST":
            return (LINE_END.join(lines) + LINE_END + LINE_END).encode("utf-8")

        body = self.serialize_body().encode("utf-8")
        lines.append(f"Content-Type: {self.content_type}")
        lines.append(f"Content-Length: {len(body)}")
        head = (LINE_END.join(lines) + LINE_END + LINE_END).encode("utf-8")
        return head + body + LINE_END.encode("utf-8")


def build_get_request(
    host: str,
    path: str,
    query_params: str = "",
    cookies: Sequence[Cookie] = (),
    token: str = "",
) -> bytes:
    """Build a GET request.

    Args:
        host: Value of the Host header
        path: Request path
        query_params: Already-encoded query string, appended after ``?``
        cookies: Cookies sent in a single Cookie header
        token: Bearer token for the Authorization header

    Returns:
        The request bytes, ending with the blank line and no body
    """
    return HttpRequest(
        method="GET",
        host=host,
        path=path,
        query_params=query_params,
        cookies=tuple(cookies),
        token=token,
    ).to_bytes()


def build_delete_request(
    host: str,
    path: str,
    cookies: Sequence[Cookie] = (),
    token: str = "",
) -> bytes:
    """Build a DELETE request. Same header rules as GET, no body."""
    return HttpRequest(
        method="DELETE",
        host=host,
        path=path,
        cookies=tuple(cookies),
        token=token,
    ).to_bytes()


def build_post_request(
    host: str,
    path: str,
    content_type: str,
    body: Sequence[KeyValue] = (),
    cookies: Sequence[Cookie] = (),
    token: str = "",
) -> bytes:
    """Build a POST request.

    Args:
        host: Value of the Host header
        path: Request path
        content_type: Either ``application/json`` or the form content type
        body: Ordered body fields
        cookies: Cookies sent in a single Cookie header
        token: Bearer token for the Authorization header

    Returns:
        The request bytes. Content-Length counts the serialized body only,
        not the trailing line terminator.

    Raises:
        ValueError: If the content type is not one of the two supported ones
    """
    if content_type not in (JSON_CONTENT_TYPE, FORM_CONTENT_TYPE):
        raise ValueError(f"Unsupported content type: {content_type!r}")

    return HttpRequest(
        method="POST",
        host=host,
        path=path,
        content_type=content_type,
        body=tuple(body),
        cookies=tuple(cookies),
        token=token,
    ).to_bytes()
