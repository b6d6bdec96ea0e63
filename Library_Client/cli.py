"""Interactive command-line client for the library service.

Usage:
    library-client HOST PORT

Commands are read from standard input, one word at a time:
    register, login, enter_library, get_books, get_book, add_book,
    delete_book, logout, exit

Arguments can follow the command on the same line (``get_book 42``) or be
entered at the prompts that follow.
"""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from typing import Callable, Dict, List, Optional, TextIO

from . import config as C
from .client import LibraryClient
from .connection import FatalConnectionError, LibraryConnection

logger = logging.getLogger("LibraryClient")


class TokenReader:
    """Reads whitespace-separated words from a stream, prompting when empty."""

    def __init__(self, stream: Optional[TextIO] = None, out: Optional[TextIO] = None) -> None:
        self.stream = stream if stream is not None else sys.stdin
        self.out = out if out is not None else sys.stdout
        self._pending: List[str] = []

    def _prompt(self, prompt: str) -> None:
        if prompt:
            print(prompt, end="", file=self.out, flush=True)

    def _readline(self) -> str:
        line = self.stream.readline()
        if not line:
            raise EOFError
        return line

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def token(self, prompt: str = "") -> str:
        """Return the next word, reading new lines as needed.

        Raises:
            EOFError: If the input is exhausted
        """
        while not self._pending:
            self._prompt(prompt)
            self._pending = self._readline().split()
        return self._pending.pop(0)

    def rest_of_line(self, prompt: str = "") -> str:
        """Return what is left of the current line, or a whole new line."""
        if self._pending:
            text = " ".join(self._pending)
            self._pending = []
            return text
        self._prompt(prompt)
        return self._readline().strip()


def read_number(reader: TokenReader, prompt: str) -> int:
    while True:
        value = reader.token(prompt)
        if value.isascii() and value.isdigit():
            return int(value)
        print("Invalid value!", file=sys.stderr)


def read_password(reader: TokenReader, prompt: str = "Password: ") -> str:
    if C.HIDE_PASSWORD and not reader.has_pending:
        return getpass.getpass(prompt)
    return reader.token(prompt)


# ---------- Command handlers ---------- #
def _register(client: LibraryClient, reader: TokenReader) -> str:
    username = reader.token("Username: ")
    password = read_password(reader)
    if C.HIDE_PASSWORD:
        confirm = read_password(reader, "Confirm password: ")
        if password != confirm:
            return "Passwords are not the same!"
    return client.register(username, password)


def _login(client: LibraryClient, reader: TokenReader) -> str:
    username = reader.token("Username: ")
    password = read_password(reader)
    return client.login(username, password)


def _get_book(client: LibraryClient, reader: TokenReader) -> str:
    return client.get_book(read_number(reader, "Book id: "))


def _add_book(client: LibraryClient, reader: TokenReader) -> str:
    title = reader.rest_of_line("Title: ")
    author = reader.rest_of_line("Author: ")
    genre = reader.rest_of_line("Genre: ")
    publisher = reader.rest_of_line("Publisher: ")
    page_count = read_number(reader, "Number of pages: ")
    return client.add_book(title, author, genre, publisher, page_count)


def _delete_book(client: LibraryClient, reader: TokenReader) -> str:
    return client.delete_book(read_number(reader, "Book id: "))


COMMANDS: Dict[str, Callable[[LibraryClient, TokenReader], str]] = {
    "register": _register,
    "login": _login,
    "enter_library": lambda client, reader: client.enter_library(),
    "get_books": lambda client, reader: client.get_books(),
    "get_book": _get_book,
    "add_book": _add_book,
    "delete_book": _delete_book,
    "logout": lambda client, reader: client.logout(),
}


def run(client: LibraryClient, reader: TokenReader) -> None:
    """Process commands until ``exit`` or end of input.

    Raises:
        FatalConnectionError: If the server becomes unreachable
    """
    while True:
        try:
            command = reader.token().lower()
            if command == "exit":
                return
            handler = COMMANDS.get(command)
            if handler is None:
                print("Invalid input!", file=reader.out)
            else:
                print(handler(client, reader), file=reader.out)
        except EOFError:
            return
        print(file=reader.out)


def _positive_int(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port: {value!r}") from None
    if port <= 0:
        raise argparse.ArgumentTypeError(f"port must be positive: {value!r}")
    return port


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the library client CLI."""
    parser = argparse.ArgumentParser(
        prog="library-client",
        description="Interactive client for the library REST service",
    )
    parser.add_argument("host", metavar="HOST", help="Server hostname or IPv4 address")
    parser.add_argument("port", metavar="PORT", type=_positive_int, help="Server port")
    args = parser.parse_args(argv)

    logging.basicConfig(level=C.LOG_LEVEL, format=C.LOG_FORMAT)

    connection = LibraryConnection(host=args.host, port=args.port)
    try:
        connection.probe()
        run(LibraryClient(connection), TokenReader())
    except FatalConnectionError as e:
        logger.debug(f"Fatal connection error: {e.reason}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted.")
    finally:
        connection.disconnect()
    return 0


if __name__ == "__main__":
    sys.exit(main())
