import functools
from collections.abc import Callable
from contextvars import ContextVar
from typing import Any, Optional, TypeVar, cast

import aiohttp

from graphsync._cogs.helpers import versions
from graphsync._cogs.structs import credentials

# The exchange point for the API context of the current run (e.g. of the CLI).
# The explicitly passed contexts always take precedence over this one.
context_var: ContextVar['APIContext'] = ContextVar('context_var')

# A typevar to show that we return a function with the same signature as given.
_F = TypeVar('_F', bound=Callable[..., Any])


def authenticated(fn: _F) -> _F:
    """
    A decorator to inject a pre-authenticated session to a requesting routine.

    If the context is passed explicitly, it is used as is. Otherwise, the context
    of the current run is taken from the context variable (see `context_var`).
    The credentials are never acquired or refreshed here: it is up to the callers
    to provide the contexts with valid credentials.
    """
    @functools.wraps(fn)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        if kwargs.get('context') is None:
            try:
                kwargs['context'] = context_var.get()
            except LookupError:
                raise credentials.LoginError("No API context is configured for the request.")
        return await fn(*args, **kwargs)

    return cast(_F, wrapper)


class APIContext:
    """
    A container for an aiohttp session and the info of the environment.

    The container is constructed once per connection, and then re-used for
    all the requests. It must be closed when not needed anymore, or used as
    an async context manager (``async with APIContext(info) as context: ...``).
    """

    # The main contained object used by the API methods.
    session: aiohttp.ClientSession

    # Contextual information for URL building.
    server: str

    def __init__(
            self,
            info: credentials.ConnectionInfo,
            *,
            session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        super().__init__()
        self.session = session if session is not None else self.make_aiohttp_session(info)

        # It is a good practice to self-identify a bit, even with a user-provided session.
        if self.session.headers.get('User-Agent') is None:
            self.session.headers['User-Agent'] = f'graphsync/{versions.version or "unknown"}'

        self.server = info.server.rstrip('/')

    def make_aiohttp_session(self, info: credentials.ConnectionInfo) -> aiohttp.ClientSession:

        # The token auth part.
        headers: dict[str, str] = {'Accept': 'application/json'}
        if info.scheme and info.token:
            headers['Authorization'] = f'{info.scheme} {info.token}'
        elif info.scheme:
            headers['Authorization'] = f'{info.scheme}'
        elif info.token:
            headers['Authorization'] = f'Bearer {info.token}'

        return aiohttp.ClientSession(
            connector=aiohttp.TCPConnector(
                limit=0,
                ssl=False if info.insecure else True,
            ),
            headers=headers,
        )

    async def close(self) -> None:
        await self.session.close()

    async def __aenter__(self) -> 'APIContext':
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()
