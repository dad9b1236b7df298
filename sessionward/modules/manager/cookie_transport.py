"""Cookie transport for session identifiers."""
from datetime import datetime
from typing import Any, Mapping, Optional
from urllib.parse import quote, unquote

from ..errors import CookieDecodeError
from ..identifier import is_well_formed

COOKIE_PATH = "/"


class CookieTransport:
    """
    Reads and writes the session identifier cookie.

    The response side only needs Starlette's ``set_cookie`` signature, so
    any fastapi/starlette Response works as the sink.
    """

    def __init__(self, cookie_name: str, max_lifetime: int):
        self.cookie_name = cookie_name
        self.max_lifetime = max_lifetime

    def read(self, cookies: Mapping[str, str]) -> Optional[str]:
        """
        Extract the session identifier from request cookies.

        Returns:
            Decoded identifier, or None when the cookie is absent or empty

        Raises:
            CookieDecodeError: If the cookie value is not a valid identifier
        """
        value = cookies.get(self.cookie_name)
        if not value:
            return None

        session_id = unquote(value)
        if not is_well_formed(session_id):
            raise CookieDecodeError(value)
        return session_id

    def write(self, response: Any, session_id: str) -> None:
        # Max-Age is omitted for a zero lifetime so the cookie lives until browser close
        response.set_cookie(
            key=self.cookie_name,
            value=quote(session_id, safe=""),
            max_age=self.max_lifetime or None,
            path=COOKIE_PATH,
            httponly=True,
        )

    def expire(self, response: Any, now: datetime) -> None:
        response.set_cookie(
            key=self.cookie_name,
            value="",
            max_age=-1,
            expires=now,
            path=COOKIE_PATH,
            httponly=True,
        )
