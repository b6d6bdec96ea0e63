"""TCP transport to the library service.

One connection is opened per request and closed once the response has
been read. There are no timeouts: a stalled server blocks the client
until it answers or the process is interrupted.
"""

from __future__ import annotations

import logging
import socket
from dataclasses import dataclass
from typing import Optional

from .protocol import recv_response, send_all
from .response import Response, parse_response

logger = logging.getLogger("LibraryClient")


class FatalConnectionError(Exception):
    """Raised when the server cannot be resolved or connected to.

    The client cannot do anything useful without a connection, so this
    error ends the process.
    """

    def __init__(self, host: str, port: int, reason: str) -> None:
        self.host = host
        self.port = port
        self.reason = reason
        super().__init__(f"Couldn't connect to {host}:{port}: {reason}")


class TransportError(Exception):
    """Raised when sending or receiving fails in the middle of a request."""

    pass


@dataclass
class LibraryConnection:
    host: str
    port: int
    sock: Optional[socket.socket] = None

    def resolve(self) -> str:
        """Look up the IPv4 address of the host.

        Raises:
            FatalConnectionError: If the lookup fails or yields no IPv4 address
        """
        try:
            infos = socket.getaddrinfo(self.host, self.port, socket.AF_INET, socket.SOCK_STREAM)
        except socket.gaierror as e:
            raise FatalConnectionError(self.host, self.port, f"Invalid ip address! ({e})") from e
        for family, _type, _proto, _canon, address in infos:
            if family == socket.AF_INET:
                return address[0]
        raise FatalConnectionError(self.host, self.port, "Invalid ip address! (no IPv4 record)")

    def connect(self) -> None:
        """Open a fresh TCP connection to the server"""
        if self.sock:
            return

        address = self.resolve()
        try:
            self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            self.sock.connect((address, self.port))
            logger.info(f"Connected to {self.host}:{self.port} ({address})")
        except OSError as e:
            self.disconnect()
            raise FatalConnectionError(self.host, self.port, str(e)) from e

    def disconnect(self):
        """Close the connection. Safe to call more than once."""
        if self.sock:
            try:
                self.sock.close()
            except OSError as e:
                logger.error(f"Error disconnecting from {self.host}:{self.port}: {str(e)}")
            finally:
                self.sock = None

    def send(self, data: bytes) -> None:
        if not self.sock:
            raise TransportError("Not connected")
        try:
            sent = send_all(self.sock, data)
        except OSError as e:
            raise TransportError(f"Send failed: {e}") from e
        if sent < len(data):
            raise TransportError(f"Connection closed after sending {sent}/{len(data)} bytes")

    def receive(self) -> str:
        if not self.sock:
            raise TransportError("Not connected")
        try:
            return recv_response(self.sock)
        except OSError as e:
            raise TransportError(f"Receive failed: {e}") from e

    def probe(self) -> None:
        """Connect and disconnect once, so a bad address fails early."""
        self.connect()
        self.disconnect()

    def send_request(self, request: bytes) -> Response:
        """Run one request/response cycle on its own connection.

        Raises:
            FatalConnectionError: If the connection cannot be opened
            TransportError: If the exchange fails midway or nothing comes back
            MalformedResponseError: If the response cannot be parsed
        """
        request_line = request.split(b"\r\n", 1)[0].decode("utf-8", errors="replace")
        self.connect()
        try:
            logger.info(f"Sending request: {request_line}")
            self.send(request)
            raw = self.receive()
        finally:
            self.disconnect()

        if not raw:
            raise TransportError("Server closed the connection without responding")

        response = parse_response(raw)
        logger.info(f"Response received, status: {response.code}")
        return response
