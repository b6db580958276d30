"""
The reserved fields of the OData-style API responses & requests.

The metadata fields are prefixed with ``@`` and a namespace:
e.g. ``@odata.type``, ``@odata.context``, ``@odata.nextLink``.
They are injected by the server out-of-band and are not the user's data.

Among them, the type discriminators (``@<namespace>.type``) are special:
they must accompany any change of their sibling fields in the patches,
so that the server could disambiguate the polymorphic shape of the object.

The paging convention: a collection's page is an object with the items
in the ``value`` array and an optional continuation link to the next page
in ``@odata.nextLink`` (opaque and already fully qualified).

All the checks of the reserved names must be done via these predicates,
never by the ad-hoc string comparisons in other places.
"""
import collections.abc
import re
from typing import Any, Optional

NEXT_LINK_FIELD = '@odata.nextLink'
VALUE_FIELD = 'value'
ID_FIELD = '@odata.id'

PAGING_FIELDS = frozenset({NEXT_LINK_FIELD, VALUE_FIELD})

_METADATA_FIELD = re.compile(r'^@(?P<namespace>[^.@]+)\.(?P<name>.+)$')


def is_metadata_field(key: str) -> bool:
    return _METADATA_FIELD.match(key) is not None


def is_type_discriminator_field(key: str) -> bool:
    match = _METADATA_FIELD.match(key)
    return match is not None and match.group('name') == 'type'


def is_paging_field(key: str) -> bool:
    return key in PAGING_FIELDS


def get_next_link(page: Any) -> Optional[str]:
    """
    Get the continuation link of a page, if there is a next page at all.

    Non-object pages, absent/null links, and empty strings mean the last page.
    """
    if not isinstance(page, collections.abc.Mapping):
        return None
    link = page.get(NEXT_LINK_FIELD)
    return link if isinstance(link, str) and link else None


def has_next_link(page: Any) -> bool:
    return get_next_link(page) is not None
