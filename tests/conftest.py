"""Shared fixtures for library client tests.

Replaces the network boundary:
- FakeSocket stands in for a connected socket.socket
- FakeTransport stands in for LibraryConnection and replays raw responses
"""

import json

import pytest

from Library_Client import Cookie, LibraryClient, parse_response


# ---------------------------------------------------------------------------
# Raw response helper
# ---------------------------------------------------------------------------

def http_response(code=200, reason="OK", body="", content_type="application/json", extra_headers=()):
    """Build raw response text the way the service sends it."""
    if not isinstance(body, str):
        body = json.dumps(body)
    lines = [f"HTTP/1.1 {code} {reason}", "X-Powered-By: Express"]
    lines.extend(extra_headers)
    if content_type:
        lines.append(f"Content-Type: {content_type}; charset=utf-8")
    lines.append(f"Content-Length: {len(body.encode('utf-8'))}")
    lines.append("Connection: close")
    return "\r\n".join(lines) + "\r\n\r\n" + body


# ---------------------------------------------------------------------------
# Socket double
# ---------------------------------------------------------------------------

class FakeSocket:
    """Replays scripted recv chunks and records everything sent."""

    def __init__(self, chunks=(), max_send=None):
        self.chunks = [c.encode("utf-8") if isinstance(c, str) else c for c in chunks]
        self.max_send = max_send
        self.sent = b""
        self.recv_calls = 0
        self.closed = False

    def recv(self, bufsize):
        self.recv_calls += 1
        if not self.chunks:
            return b""
        chunk = self.chunks.pop(0)
        if len(chunk) > bufsize:
            self.chunks.insert(0, chunk[bufsize:])
            chunk = chunk[:bufsize]
        return chunk

    def send(self, data):
        data = bytes(data)
        if self.max_send is not None:
            data = data[:self.max_send]
        self.sent += data
        return len(data)

    def close(self):
        self.closed = True


def split_every(data, size):
    """Cut data into chunks of the given size."""
    return [data[i:i + size] for i in range(0, len(data), size)]


# ---------------------------------------------------------------------------
# Transport double
# ---------------------------------------------------------------------------

class FakeTransport:
    """Records requests and answers each with the next queued raw response."""

    def __init__(self, host="library.test"):
        self.host = host
        self.requests = []
        self.responses = []

    def queue(self, raw):
        self.responses.append(raw)

    def send_request(self, request):
        self.requests.append(request.decode("utf-8"))
        outcome = self.responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return parse_response(outcome)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(transport):
    return LibraryClient(transport)


@pytest.fixture
def logged_in_client(client):
    """Client that already holds a session cookie."""
    client.session.cookie = Cookie("connect.sid", "s%3Aabc.def")
    return client


@pytest.fixture
def library_client(logged_in_client):
    """Client that holds both a session cookie and a library token."""
    logged_in_client.session.library_token = "jwt-token"
    return logged_in_client
