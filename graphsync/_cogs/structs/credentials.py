"""
Connection-related structures.

The credentials are not acquired here: they are provided by the callers
(e.g. from the environment or from the CLI options), and only carried
to the HTTP client as the session's headers and connection flags:

* HTTP(S) server's base URL.
* SSL verification/ignorance flag.
* HTTP ``Authorization: Bearer token`` (or other schemes).
"""
import dataclasses
from typing import Optional


class LoginError(Exception):
    """ Raised when the client cannot be used for the lack of the connection info. """


@dataclasses.dataclass(frozen=True)
class ConnectionInfo:
    """
    A single endpoint with specific credentials and connection flags to use.
    """
    server: str  # e.g. "https://graph.microsoft.com"
    insecure: Optional[bool] = None
    scheme: Optional[str] = None  # RFC-7235/5.1: e.g. Bearer, Basic, Digest, etc.
    token: Optional[str] = None
