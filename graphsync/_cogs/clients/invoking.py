from typing import Any, Mapping, Optional

from graphsync._cogs.clients import api, auth, errors
from graphsync._cogs.configs import configuration
from graphsync._cogs.helpers import typedefs


async def call_action(
        method: str,
        url: str,
        *,
        settings: configuration.Settings,
        payload: Optional[object] = None,
        api_version: Optional[str] = None,
        params: Optional[api.QueryParams] = None,
        headers: Optional[Mapping[str, str]] = None,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger,
) -> Any:
    """
    Invoke an arbitrary action on an object, e.g. ``POST users/123/revokeSignInSessions``.

    Returns the parsed response, or ``None`` if there was no content.
    """
    response = await api.request(
        method=method,
        url=url,
        payload=payload,
        api_version=api_version,
        params=params,
        headers=headers,
        settings=settings,
        context=context,
        logger=logger,
    )
    async with response:
        return await errors.parse_response(response)
