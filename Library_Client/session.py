from __future__ import annotations

from dataclasses import dataclass, field

from .request import Cookie


@dataclass
class ClientSession:
    """Credentials carried between commands.

    ``cookie`` is the empty Cookie until a login succeeds and again after
    logout. ``library_token`` is empty until the library has been entered.
    """

    cookie: Cookie = field(default_factory=Cookie)
    library_token: str = ""

    @property
    def logged_in(self) -> bool:
        return not self.cookie.is_null

    @property
    def in_library(self) -> bool:
        return self.library_token != ""

    def cookies(self) -> list[Cookie]:
        return [] if self.cookie.is_null else [self.cookie]
