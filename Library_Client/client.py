"""Library service operations.

Every operation builds one request, sends it on a fresh connection and
turns the response into the message shown at the prompt. The session
cookie and library token live in a ``ClientSession`` owned by the client.
"""

from __future__ import annotations

import json
import logging
from functools import wraps
from typing import Callable, Optional, Protocol

from .config import (
    BOOKS_PATH,
    JSON_CONTENT_TYPE,
    LIBRARY_ACCESS_PATH,
    LOGIN_PATH,
    LOGOUT_PATH,
    REGISTER_PATH,
)
from .connection import TransportError
from .request import Cookie, KeyValue, build_delete_request, build_get_request, build_post_request
from .response import MalformedResponseError, Response
from .session import ClientSession

logger = logging.getLogger("LibraryClient")

LOGIN_FIRST = "Login into the account first!"
ENTER_LIBRARY_FIRST = "Enter the library first!"


class Transport(Protocol):
    host: str

    def send_request(self, request: bytes) -> Response:
        ...


def library_command(
    error_context: str,
    needs_login: bool = False,
    needs_library: bool = False,
):
    """Decorator that guards a client operation.

    Preconditions are checked before anything touches the network. Errors
    that only spoil the current operation are logged and turned into a
    message; the session is left as it was.

    Args:
        error_context: Short description used in error messages
        needs_login: Require a session cookie
        needs_library: Require a library token
    """
    def decorator(fn: Callable) -> Callable:
        @wraps(fn)
        def wrapper(self: "LibraryClient", *args, **kwargs) -> str:
            if (needs_login or needs_library) and not self.session.logged_in:
                return LOGIN_FIRST
            if needs_library and not self.session.in_library:
                return ENTER_LIBRARY_FIRST
            try:
                return fn(self, *args, **kwargs)
            except (TransportError, MalformedResponseError) as e:
                logger.error(f"Error {error_context}: {str(e)}")
                return f"Error {error_context}: {str(e)}"
        return wrapper
    return decorator


def _failure(message: str, response: Response) -> str:
    text = f"{message} ({response.code})"
    if response.error is not None:
        text += "\n" + response.error
    elif response.json_data is not None:
        text += "\n" + json.dumps(response.json_data)
    return text


def _success(message: str, response: Response) -> str:
    if response.json_data is None:
        return message
    return message + "\n" + json.dumps(response.json_data)


class LibraryClient:
    def __init__(self, transport: Transport, session: Optional[ClientSession] = None) -> None:
        self.transport = transport
        self.session = session if session is not None else ClientSession()

    @property
    def host(self) -> str:
        return self.transport.host

    def _credentials(self, username: str, password: str) -> list[KeyValue]:
        return [KeyValue("username", username), KeyValue("password", password)]

    @library_command("registering")
    def register(self, username: str, password: str) -> str:
        request = build_post_request(
            self.host, REGISTER_PATH, JSON_CONTENT_TYPE, self._credentials(username, password)
        )
        response = self.transport.send_request(request)
        if response.success:
            return "Registration succeeded!"
        return _failure("Registration failed", response)

    @library_command("logging in")
    def login(self, username: str, password: str) -> str:
        request = build_post_request(
            self.host, LOGIN_PATH, JSON_CONTENT_TYPE, self._credentials(username, password)
        )
        response = self.transport.send_request(request)
        if not response.success:
            return _failure("Login failed", response)
        if response.session_cookie is None:
            logger.warning("Login succeeded but no session cookie was set")
            return "Login failed (no session cookie)"
        self.session.cookie = response.session_cookie
        return "Login succeeded!"

    @library_command("entering the library", needs_login=True)
    def enter_library(self) -> str:
        request = build_get_request(self.host, LIBRARY_ACCESS_PATH, cookies=self.session.cookies())
        response = self.transport.send_request(request)
        if not response.success:
            return _failure("Couldn't enter the library", response)
        if response.token is None:
            logger.warning("Library access granted but no token was returned")
            return "Couldn't enter the library (no token)"
        self.session.library_token = response.token
        return "Authorized!"

    @library_command("getting the books", needs_library=True)
    def get_books(self) -> str:
        request = build_get_request(
            self.host, BOOKS_PATH, cookies=self.session.cookies(), token=self.session.library_token
        )
        response = self.transport.send_request(request)
        if response.success:
            return _success("Received the books!", response)
        return _failure("The books weren't received", response)

    @library_command("getting the book", needs_library=True)
    def get_book(self, book_id: int) -> str:
        request = build_get_request(
            self.host,
            f"{BOOKS_PATH}/{book_id}",
            cookies=self.session.cookies(),
            token=self.session.library_token,
        )
        response = self.transport.send_request(request)
        if response.success:
            return _success("Received the book!", response)
        return _failure("The book wasn't received", response)

    @library_command("adding the book", needs_library=True)
    def add_book(self, title: str, author: str, genre: str, publisher: str, page_count: int) -> str:
        body = [
            KeyValue("title", title),
            KeyValue("author", author),
            KeyValue("genre", genre),
            KeyValue("page_count", str(page_count)),
            KeyValue("publisher", publisher),
        ]
        request = build_post_request(
            self.host,
            BOOKS_PATH,
            JSON_CONTENT_TYPE,
            body,
            cookies=self.session.cookies(),
            token=self.session.library_token,
        )
        response = self.transport.send_request(request)
        if response.success:
            return "Added book to the library!"
        return _failure("Couldn't add the book", response)

    @library_command("deleting the book", needs_library=True)
    def delete_book(self, book_id: int) -> str:
        request = build_delete_request(
            self.host,
            f"{BOOKS_PATH}/{book_id}",
            cookies=self.session.cookies(),
            token=self.session.library_token,
        )
        response = self.transport.send_request(request)
        if response.success:
            return "Removed the book from the library!"
        return _failure("Couldn't remove the book", response)

    @library_command("logging out", needs_login=True)
    def logout(self) -> str:
        request = build_get_request(self.host, LOGOUT_PATH, cookies=self.session.cookies())
        response = self.transport.send_request(request)
        if not response.success:
            return _failure("Couldn't log out", response)
        self.session.cookie = Cookie()
        return "You logged out!"
