"""Command-line client for the library catalog REST service."""

__version__ = "0.1.0"

# Request construction
from .request import (
    Cookie,
    KeyValue,
    HttpRequest,
    build_get_request,
    build_post_request,
    build_delete_request,
)

# Response framing and parsing
from .protocol import ReadState, send_all, recv_response
from .response import MalformedResponseError, Response, is_success, parse_response

# Transport and session state
from .connection import FatalConnectionError, TransportError, LibraryConnection
from .session import ClientSession

# Service operations
from .client import LibraryClient, library_command
