"""Socket-level framing for HTTP/1.1 exchanges with the library service.

Protocol format:
- Send: the whole request, looping over short writes
- Receive: read until the blank line that ends the headers, take the
  Content-Length value from the header block, then read exactly that many
  body bytes

TCP has no message boundaries, so the reader is a small state machine
that only moves from headers to body once the header terminator has been
seen. Chunked transfer-encoding is not supported; the service never uses it.
"""

from __future__ import annotations

import logging
import socket
from enum import Enum

from .config import HEADER_TERMINATOR, LINE_END, RECV_BUFFER_SIZE

logger = logging.getLogger("LibraryClient")

_TERMINATOR = HEADER_TERMINATOR.encode("ascii")
_LINE_END = LINE_END.encode("ascii")
_CONTENT_LENGTH = b"Content-Length: "


class ReadState(Enum):
    """Where the reader is inside the response."""

    READING_HEADERS = "reading_headers"
    READING_BODY = "reading_body"


def send_all(sock: socket.socket, data: bytes) -> int:
    """Write data to the socket, retrying after short writes.

    Args:
        sock: Connected socket to write to
        data: Bytes to send

    Returns:
        Number of bytes actually written. Less than ``len(data)`` only if
        the peer stopped accepting data.

    Raises:
        OSError: If a write fails
    """
    sent = 0
    view = memoryview(data)
    while sent < len(data):
        written = sock.send(view[sent:])
        if written == 0:
            logger.warning(f"Connection stopped accepting data after {sent}/{len(data)} bytes")
            break
        sent += written
    return sent


def _find_content_length(header_block: bytes) -> int | None:
    """Return the Content-Length value from a header block, if present.

    The match is case-sensitive on the exact ``Content-Length: `` prefix,
    which is what the service emits.
    """
    start = header_block.find(_CONTENT_LENGTH)
    if start < 0:
        return None
    start += len(_CONTENT_LENGTH)
    end = header_block.find(_LINE_END, start)
    if end < 0:
        end = len(header_block)
    try:
        length = int(header_block[start:end].strip())
    except ValueError:
        length = -1
    if length < 0:
        logger.warning(f"Ignoring malformed Content-Length: {header_block[start:end]!r}")
        return None
    return length


def recv_response(sock: socket.socket, bufsize: int = RECV_BUFFER_SIZE) -> str:
    """Receive one complete HTTP response from the socket.

    Args:
        sock: Connected socket to read from
        bufsize: Maximum bytes per ``recv`` call

    Returns:
        The raw response text (headers and body). If the peer closes the
        connection early, whatever arrived so far is returned.

    Raises:
        OSError: If a read fails
    """
    buffer = bytearray()
    state = ReadState.READING_HEADERS
    header_end = 0
    target_size = 0

    while True:
        if state is ReadState.READING_HEADERS:
            header_end = buffer.find(_TERMINATOR)
            if header_end >= 0:
                header_end += len(_TERMINATOR)
                content_length = _find_content_length(bytes(buffer[:header_end]))
                if content_length is not None:
                    target_size = header_end + content_length
                    state = ReadState.READING_BODY
                    logger.debug(f"Headers complete ({header_end} bytes), expecting {content_length} body bytes")
                    continue

        elif len(buffer) >= target_size:
            del buffer[target_size:]
            break

        chunk = sock.recv(bufsize)
        if not chunk:
            if state is ReadState.READING_BODY:
                logger.warning(f"Connection closed after {len(buffer)}/{target_size} bytes")
            else:
                logger.warning("Connection closed before the response headers were complete")
            break
        buffer.extend(chunk)

    return buffer.decode("utf-8", errors="replace")
