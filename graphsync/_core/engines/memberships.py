"""
Synchronization of the reference collections, such as group members or owners.

The membership is a set of ids of the referenced objects. To converge
the remote collection to the desired membership, the differences between
the previously known membership and the desired one are planned as
the references to add and the references to remove.

The planned operations are applied one by one, all of them, regardless
of the failures of the individual operations. The failures are collected
and reported together afterwards. The partially applied plan leaves
the remote collection in an intermediate state: it is re-read and re-planned
on the next reconciliation cycle.

The reference collections are addressed by their ``$ref`` URLs,
e.g. ``groups/{group-id}/members/$ref``:

* Adding: ``POST groups/{group-id}/members/$ref`` with ``{"@odata.id": ...}``.
* Removing: ``DELETE groups/{group-id}/members/{member-id}/$ref``.
* Listing: ``GET groups/{group-id}/members`` (i.e. the base collection URL).
"""
import asyncio
import dataclasses
import enum
from typing import Collection, Iterable, NamedTuple, Optional, Sequence

import aiohttp

from graphsync._cogs.clients import api, auth, creating, deleting, errors, fetching
from graphsync._cogs.configs import configuration
from graphsync._cogs.helpers import typedefs
from graphsync._cogs.structs import fields

REF_SUFFIX = '/$ref'


class MembershipOperation(str, enum.Enum):
    ADD = 'add'
    REMOVE = 'remove'

    def __str__(self) -> str:
        return str(self.value)


class MembershipPlan(NamedTuple):
    to_add: Sequence[str]
    to_remove: Sequence[str]

    def __bool__(self) -> bool:
        return bool(self.to_add or self.to_remove)


@dataclasses.dataclass(frozen=True)
class MembershipFailure:
    member: str
    operation: MembershipOperation
    error: BaseException


class MembershipSyncError(Exception):
    """
    Raised when some of the planned membership operations have failed.

    All the planned operations are attempted before this error is raised;
    the succeeded ones are not reverted.
    """

    def __init__(self, failures: Collection[MembershipFailure]) -> None:
        self.failures: Sequence[MembershipFailure] = tuple(failures)
        summary = ', '.join(f"{failure.operation} {failure.member}: {failure.error!r}"
                            for failure in self.failures)
        super().__init__(f"Failed to sync {len(self.failures)} member(s): {summary}")

    @property
    def members(self) -> Sequence[str]:
        return tuple(failure.member for failure in self.failures)


def base_collection_url(url: str) -> str:
    """ ``groups/123/members/$ref`` -> ``groups/123/members``. """
    return url.removesuffix(REF_SUFFIX)


def reference_collection_url(url: str) -> str:
    """ ``groups/123/members`` -> ``groups/123/members/$ref``. """
    return base_collection_url(url) + REF_SUFFIX


def plan_membership(
        old: Optional[Iterable[str]],
        new: Optional[Iterable[str]],
) -> MembershipPlan:
    """
    Plan the membership changes as the set differences of the old & new members.

    The order of the planned members follows the order of the inputs,
    the duplicates are ignored. ``None`` means no members at all.
    """
    old_members = list(dict.fromkeys(old or []))
    new_members = list(dict.fromkeys(new or []))
    old_set = frozenset(old_members)
    new_set = frozenset(new_members)
    to_add = [member for member in new_members if member not in old_set]
    to_remove = [member for member in old_members if member not in new_set]
    return MembershipPlan(to_add=tuple(to_add), to_remove=tuple(to_remove))


def build_reference(
        member: str,
        *,
        server: str,
        settings: configuration.Settings,
        api_version: Optional[str] = None,
) -> dict[str, str]:
    version = api_version or settings.api.version
    collection = settings.api.reference_collection
    return {fields.ID_FIELD: f"{server.rstrip('/')}/{version}/{collection}/{member}"}


@auth.authenticated
async def apply_membership(
        plan: MembershipPlan,
        *,
        url: str,
        settings: configuration.Settings,
        api_version: Optional[str] = None,
        context: Optional[auth.APIContext] = None,  # injected by the decorator
        logger: typedefs.Logger,
) -> None:
    """
    Apply the planned membership changes: all additions, then all removals.

    Raises `MembershipSyncError` with all the failed operations, if any.
    """
    if context is None:  # for type-checking!
        raise RuntimeError("API instance is not injected by the decorator.")

    failures: list[MembershipFailure] = []
    for member in plan.to_add:
        try:
            await creating.create_obj(
                url=reference_collection_url(url),
                body=build_reference(member, server=context.server,
                                     settings=settings, api_version=api_version),
                api_version=api_version,
                settings=settings,
                context=context,
                logger=logger,
            )
        except (errors.APIError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Failed to add the member {member!r}: {e!r}")
            failures.append(MembershipFailure(member, MembershipOperation.ADD, e))
        else:
            logger.info(f"Added the member {member!r}.")

    for member in plan.to_remove:
        try:
            await deleting.delete_obj(
                url=f"{base_collection_url(url)}/{member}{REF_SUFFIX}",
                api_version=api_version,
                settings=settings,
                context=context,
                logger=logger,
            )
        except (errors.APIError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Failed to remove the member {member!r}: {e!r}")
            failures.append(MembershipFailure(member, MembershipOperation.REMOVE, e))
        else:
            logger.info(f"Removed the member {member!r}.")

    if failures:
        raise MembershipSyncError(failures)


async def sync_membership(
        old: Optional[Iterable[str]],
        new: Optional[Iterable[str]],
        *,
        url: str,
        settings: configuration.Settings,
        api_version: Optional[str] = None,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger,
) -> MembershipPlan:
    """
    Plan & apply the membership changes. Returns the plan as it was applied.
    """
    plan = plan_membership(old, new)
    if not plan:
        logger.debug("The membership is up to date, nothing to sync.")
        return plan

    logger.debug(f"Syncing the membership: adding {list(plan.to_add)}, "
                 f"removing {list(plan.to_remove)}.")
    await apply_membership(
        plan,
        url=url,
        api_version=api_version,
        settings=settings,
        context=context,
        logger=logger,
    )
    return plan


async def read_membership(
        url: str,
        *,
        settings: configuration.Settings,
        api_version: Optional[str] = None,
        params: Optional[api.QueryParams] = None,
        context: Optional[auth.APIContext] = None,
        logger: typedefs.Logger,
) -> Optional[list[str]]:
    """
    Read the current membership, or ``None`` if the collection's owner is gone.
    """
    try:
        return await fetching.list_ref_ids(
            url=base_collection_url(url),
            api_version=api_version,
            params=params,
            settings=settings,
            context=context,
            logger=logger,
        )
    except errors.APINotFoundError:
        logger.info("The collection is not found.")
        return None
