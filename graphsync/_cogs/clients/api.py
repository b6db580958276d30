import asyncio
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

import aiohttp

from graphsync._cogs.clients import auth, errors
from graphsync._cogs.configs import configuration
from graphsync._cogs.helpers import typedefs

# A query parameter can be repeated, e.g. ``{'$select': ['id', 'displayName']}``.
QueryParams = Mapping[str, Union[str, Sequence[str]]]


def build_url(
        url: str,  # relative to the server's api version root, or absolute.
        *,
        server: str,
        api_version: str,
) -> str:
    """
    Make an absolute URL for the API request.

    The absolute URLs (e.g. the continuation links of the paginated listings)
    are opaque and used as is. The relative URLs are prefixed with the server
    and the API version: ``groups/123`` -> ``https://server/v1.0/groups/123``.
    """
    if '://' in url:
        return url
    return '/'.join([server.rstrip('/'), api_version.strip('/'), url.lstrip('/')])


def build_query(params: Optional[QueryParams]) -> List[Tuple[str, str]]:
    query: List[Tuple[str, str]] = []
    for key, value in (params or {}).items():
        if isinstance(value, str):
            query.append((key, value))
        else:
            query.extend((key, item) for item in value)
    return query


@auth.authenticated
async def request(
        method: str,
        url: str,  # relative to the server's api version root, or absolute.
        *,
        settings: configuration.Settings,
        api_version: Optional[str] = None,
        params: Optional[QueryParams] = None,
        payload: Optional[object] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[aiohttp.ClientTimeout] = None,
        context: Optional[auth.APIContext] = None,  # injected by the decorator
        logger: typedefs.Logger,
) -> aiohttp.ClientResponse:
    if context is None:  # for type-checking!
        raise RuntimeError("API instance is not injected by the decorator.")

    url = build_url(url, server=context.server, api_version=api_version or settings.api.version)

    if timeout is None:
        timeout = aiohttp.ClientTimeout(
            total=settings.networking.request_timeout,
            sock_connect=settings.networking.connect_timeout,
        )

    what = f"{method.upper()} {url}"
    try:
        logger.debug(f"Requesting: {what}")
        response = await context.session.request(
            method=method,
            url=url,
            params=build_query(params),
            json=payload,
            headers=headers,
            timeout=timeout,
        )
        await errors.check_response(response)  # but do not parse it!
    except (aiohttp.ClientConnectionError, errors.APIError, asyncio.TimeoutError) as e:
        logger.error(f"Request failed; escalating: {what} -> {e!r}")
        raise
    return response


async def get(
        url: str,  # relative to the server's api version root, or absolute.
        *,
        settings: configuration.Settings,
        api_version: Optional[str] = None,
        params: Optional[QueryParams] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[aiohttp.ClientTimeout] = None,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger,
) -> Any:
    response = await request(
        method='get',
        url=url,
        api_version=api_version,
        params=params,
        headers=headers,
        timeout=timeout,
        settings=settings,
        context=context,
        logger=logger,
    )
    async with response:
        return await errors.parse_response(response)


async def post(
        url: str,  # relative to the server's api version root, or absolute.
        *,
        settings: configuration.Settings,
        api_version: Optional[str] = None,
        params: Optional[QueryParams] = None,
        payload: Optional[object] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[aiohttp.ClientTimeout] = None,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger,
) -> Any:
    response = await request(
        method='post',
        url=url,
        api_version=api_version,
        params=params,
        payload=payload,
        headers=headers,
        timeout=timeout,
        settings=settings,
        context=context,
        logger=logger,
    )
    async with response:
        return await errors.parse_response(response)


async def patch(
        url: str,  # relative to the server's api version root, or absolute.
        *,
        settings: configuration.Settings,
        api_version: Optional[str] = None,
        params: Optional[QueryParams] = None,
        payload: Optional[object] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[aiohttp.ClientTimeout] = None,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger,
) -> Any:
    response = await request(
        method='patch',
        url=url,
        api_version=api_version,
        params=params,
        payload=payload,
        headers=headers,
        timeout=timeout,
        settings=settings,
        context=context,
        logger=logger,
    )
    async with response:
        return await errors.parse_response(response)


async def delete(
        url: str,  # relative to the server's api version root, or absolute.
        *,
        settings: configuration.Settings,
        api_version: Optional[str] = None,
        params: Optional[QueryParams] = None,
        payload: Optional[object] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[aiohttp.ClientTimeout] = None,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger,
) -> Any:
    response = await request(
        method='delete',
        url=url,
        api_version=api_version,
        params=params,
        payload=payload,
        headers=headers,
        timeout=timeout,
        settings=settings,
        context=context,
        logger=logger,
    )
    async with response:
        return await errors.parse_response(response)
