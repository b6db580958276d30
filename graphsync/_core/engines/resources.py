"""
The reconciliation cycle of a single generic resource.

The resources are arbitrary JSON objects addressed by their URLs. Their schema
is not known in advance. The locally stored state of a resource is what was
last observed remotely, combined with what was last declared by the user:

* On creation, the declared body is sent, and the server's response is merged
  over it: so that the server-generated fields (ids, timestamps) are kept.
* On reading, the remote body is merged into the stored state as configured
  (e.g. keeping the write-only fields which are never returned by the server).
* On updating, only the fields that have changed since the last stored state
  are sent as a patch; nothing is sent if nothing has changed.
* On deletion, the absence of the resource is not an error.

The "not found" responses on reading mean that the resource is gone
(e.g. deleted externally), and the local state should be dropped:
they are reported as ``None``, not as errors.
"""
import dataclasses
from typing import Optional, Union

from graphsync._cogs.clients import api, auth, creating, deleting, errors, fetching, patching
from graphsync._cogs.configs import configuration
from graphsync._cogs.helpers import typedefs
from graphsync._cogs.structs import diffs, merging, values


@dataclasses.dataclass(frozen=True)
class Reconciliation:
    body: values.Value
    """ The new authoritative local state of the resource, to be stored. """

    patch: Union[values.Value, values.Absent] = values.ABSENT
    """ The patch as it was sent to the server, or `values.ABSENT` if nothing was sent. """

    @property
    def changed(self) -> bool:
        return self.patch is not values.ABSENT


async def create_resource(
        url: str,
        body: values.RawBody,
        *,
        settings: configuration.Settings,
        api_version: Optional[str] = None,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger,
) -> Reconciliation:
    created = await creating.create_obj(
        url=url,
        body=body,
        api_version=api_version,
        settings=settings,
        context=context,
        logger=logger,
    )
    logger.info("The resource is created.")
    state = merging.merge(body, created if created is not None else {})
    return Reconciliation(body=state, patch=body)


async def read_resource(
        url: str,
        previous: Optional[values.Value] = None,
        *,
        settings: configuration.Settings,
        options: Optional[merging.UpdateOptions] = None,
        api_version: Optional[str] = None,
        params: Optional[api.QueryParams] = None,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger,
) -> Optional[values.Value]:
    """
    Read the remote state and reconcile it with the previously stored one.

    Returns ``None`` if the resource is gone (so the local state must be dropped).
    """
    try:
        current = await fetching.read_obj(
            url=url,
            api_version=api_version,
            params=params,
            settings=settings,
            context=context,
            logger=logger,
        )
    except errors.APINotFoundError:
        logger.info("The resource is not found; it is assumed to be deleted.")
        return None

    if previous is None:
        return current
    options = options if options is not None else settings.reconciling.options
    return merging.update(previous, current, options)


async def update_resource(
        url: str,
        previous: values.Value,
        desired: values.Value,
        *,
        settings: configuration.Settings,
        options: Optional[merging.UpdateOptions] = None,
        api_version: Optional[str] = None,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger,
) -> Optional[Reconciliation]:
    """
    Send only the changed fields of the desired state, if anything has changed.

    Returns ``None`` if the resource is gone (so the local state must be dropped).
    """
    options = options if options is not None else settings.reconciling.options
    patch = diffs.diff(previous, desired, options)
    state = merging.merge(previous, desired)
    if values.is_empty(patch):
        logger.debug("Nothing to update: the resource is up to date.")
        return Reconciliation(body=state)

    logger.debug(f"Patching the resource with: {patch!r}")
    patched = await patching.patch_obj(
        url=url,
        patch=patch,  # type: ignore  # it is an object for the object bodies
        api_version=api_version,
        settings=settings,
        context=context,
        logger=logger,
    )
    if patched is None:
        logger.info("The resource is not found; it is assumed to be deleted.")
        return None

    logger.info("The resource is updated.")
    return Reconciliation(body=merging.merge(state, patched), patch=patch)


async def delete_resource(
        url: str,
        *,
        settings: configuration.Settings,
        api_version: Optional[str] = None,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger,
) -> None:
    deleted = await deleting.delete_obj(
        url=url,
        api_version=api_version,
        settings=settings,
        context=context,
        logger=logger,
    )
    if deleted:
        logger.info("The resource is deleted.")
    else:
        logger.info("The resource is already absent.")
