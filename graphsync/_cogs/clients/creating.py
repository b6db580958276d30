from typing import Any, Mapping, Optional

from graphsync._cogs.clients import api, auth
from graphsync._cogs.configs import configuration
from graphsync._cogs.helpers import typedefs
from graphsync._cogs.structs import values


async def create_obj(
        url: str,
        *,
        settings: configuration.Settings,
        body: Optional[values.RawBody] = None,
        api_version: Optional[str] = None,
        params: Optional[api.QueryParams] = None,
        headers: Optional[Mapping[str, str]] = None,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger,
) -> Any:
    """
    Create an object in a collection (or a reference in a reference collection).

    Returns the created body as reported by the server, or ``None`` if the server
    responded with no content (as is usual for the references).
    """
    return await api.post(
        url=url,
        payload=body if body is not None else {},
        api_version=api_version,
        params=params,
        headers=headers,
        settings=settings,
        context=context,
        logger=logger,
    )
