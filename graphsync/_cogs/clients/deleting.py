from typing import Mapping, Optional

from graphsync._cogs.clients import api, auth, errors
from graphsync._cogs.configs import configuration
from graphsync._cogs.helpers import typedefs


async def delete_obj(
        url: str,
        *,
        settings: configuration.Settings,
        api_version: Optional[str] = None,
        params: Optional[api.QueryParams] = None,
        headers: Optional[Mapping[str, str]] = None,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger,
) -> bool:
    """
    Delete an object (or a reference in a reference collection).

    Returns ``False`` if the object was absent already (HTTP 404):
    the goal of deletion is achieved anyway, so it is not an error.
    """
    try:
        await api.delete(
            url=url,
            api_version=api_version,
            params=params,
            headers=headers,
            settings=settings,
            context=context,
            logger=logger,
        )
    except errors.APINotFoundError:
        return False
    return True
