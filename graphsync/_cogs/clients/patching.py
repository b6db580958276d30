from typing import Any, Mapping, Optional

from graphsync._cogs.clients import api, auth, errors
from graphsync._cogs.configs import configuration
from graphsync._cogs.helpers import typedefs
from graphsync._cogs.structs import values


async def patch_obj(
        url: str,
        *,
        settings: configuration.Settings,
        patch: values.RawBody,
        api_version: Optional[str] = None,
        params: Optional[api.QueryParams] = None,
        headers: Optional[Mapping[str, str]] = None,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger,
) -> Optional[Any]:
    """
    Patch an object with a partial body (only the changed fields).

    Returns the patched body if the server returns it. Mind that the servers
    usually respond with ``204 No Content``, in which case it is an empty body.

    Returns ``None`` if the underlying object is absent, as detected by trying
    to patch it and failing with HTTP 404. This can happen if the object was
    deleted externally, so that we were unaware of it until the last moment.
    """
    try:
        patched_body = await api.patch(
            url=url,
            payload=patch,
            api_version=api_version,
            params=params,
            headers=headers,
            settings=settings,
            context=context,
            logger=logger,
        )
    except errors.APINotFoundError:
        return None
    return patched_body if patched_body is not None else {}
