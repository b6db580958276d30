import collections.abc
import contextlib
from typing import Any, AsyncGenerator, AsyncIterator, List, Mapping, Optional

from graphsync._cogs.clients import api, auth
from graphsync._cogs.configs import configuration
from graphsync._cogs.helpers import typedefs
from graphsync._cogs.structs import fields, values


async def read_obj(
        url: str,
        *,
        settings: configuration.Settings,
        api_version: Optional[str] = None,
        params: Optional[api.QueryParams] = None,
        headers: Optional[Mapping[str, str]] = None,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger,
) -> Any:
    """
    Read a single object, or the whole collection if the URL turns out to be one.

    If the response has a continuation link, the read is escalated to a listing:
    the remaining pages are fetched and aggregated the same way as `list_objs`
    does, continuing from the already received first page.
    """
    body = await api.get(
        url=url,
        api_version=api_version,
        params=params,
        headers=headers,
        settings=settings,
        context=context,
        logger=logger,
    )
    if not fields.has_next_link(body):
        return body

    pages = follow_pages(body, headers=headers, settings=settings, context=context, logger=logger)
    return await aggregate_pages(pages)


async def list_objs(
        url: str,
        *,
        settings: configuration.Settings,
        api_version: Optional[str] = None,
        params: Optional[api.QueryParams] = None,
        headers: Optional[Mapping[str, str]] = None,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger,
) -> Any:
    """
    List all the objects of a collection, following the continuation links.

    The result is the same as the collection's page, but with the items of
    all the pages in its ``value`` field, and the non-paging fields (e.g. counts)
    as in the last page.

    If the endpoint does not follow the paging convention (i.e. any page is not
    an object with the ``value`` array), the body of that page is returned as is.

    Any failure of any page fails the whole listing: no partial results.
    """
    pages = iter_pages(
        url=url,
        api_version=api_version,
        params=params,
        headers=headers,
        settings=settings,
        context=context,
        logger=logger,
    )
    return await aggregate_pages(pages)


async def list_ref_ids(
        url: str,
        *,
        settings: configuration.Settings,
        api_version: Optional[str] = None,
        params: Optional[api.QueryParams] = None,
        headers: Optional[Mapping[str, str]] = None,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger,
) -> List[str]:
    """
    List the ids of all the objects in a collection (e.g. of group members).
    """
    body = await list_objs(
        url=url,
        api_version=api_version,
        params=params,
        headers=headers,
        settings=settings,
        context=context,
        logger=logger,
    )
    return values.flatten_reference_ids(body)


async def iter_pages(
        url: str,
        *,
        settings: configuration.Settings,
        api_version: Optional[str] = None,
        params: Optional[api.QueryParams] = None,
        headers: Optional[Mapping[str, str]] = None,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger,
) -> AsyncIterator[Any]:
    """
    Iterate over the raw pages of a collection, starting from the first one.

    Only the first page is requested with the query parameters. The following
    pages are requested by their continuation links, which are opaque and
    fully qualified (i.e. they already contain all the needed parameters).
    """
    page = await api.get(
        url=url,
        api_version=api_version,
        params=params,
        headers=headers,
        settings=settings,
        context=context,
        logger=logger,
    )
    followed = follow_pages(page, headers=headers, settings=settings, context=context, logger=logger)
    async with contextlib.aclosing(followed):
        async for page in followed:
            yield page


async def follow_pages(
        page: Any,
        *,
        settings: configuration.Settings,
        headers: Optional[Mapping[str, str]] = None,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger,
) -> AsyncIterator[Any]:
    """
    Yield the given page, and then all the following pages by their links.

    The next page is requested only when the previous one is consumed.
    The consumer can stop the iteration at any time to stop the requests.
    """
    yield page
    next_link = fields.get_next_link(page)
    while next_link is not None:
        logger.debug(f"Following the continuation link: {next_link}")
        page = await api.get(
            url=next_link,
            headers=headers,
            settings=settings,
            context=context,
            logger=logger,
        )
        yield page
        next_link = fields.get_next_link(page)


async def aggregate_pages(
        pages: AsyncGenerator[Any, None],
) -> Any:
    extras: values.Object = {}
    items: values.Array = []
    async with contextlib.aclosing(pages):
        async for page in pages:

            # If the response does not follow the paging convention, return the response as is.
            if not isinstance(page, collections.abc.Mapping):
                return page
            if not isinstance(page.get(fields.VALUE_FIELD), list):
                return page

            items.extend(page[fields.VALUE_FIELD])
            extras = {key: val for key, val in page.items() if not fields.is_paging_field(key)}

    return dict(extras, **{fields.VALUE_FIELD: items})
