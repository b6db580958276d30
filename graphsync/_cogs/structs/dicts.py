"""
Picking the nested fields out of the bodies by their paths.
"""
import collections.abc
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from graphsync._cogs.structs import values

FieldPath = Tuple[str, ...]
FieldSpec = Union[None, str, FieldPath, List[str]]


def parse_field(field: FieldSpec) -> FieldPath:
    """
    Convert a dotted string (``"owner.id"``) or a sequence of keys into a path.

    ``None`` and ``""`` address the root. The reserved fields contain dots
    themselves (``@odata.type``), so they are addressed only as sequences.
    """
    match field:
        case None | '':
            return ()
        case str():
            return tuple(field.split('.'))
        case list() | tuple():
            return tuple(field)
        case _:
            raise ValueError(f"Field must be either a str, or a list/tuple. Got {field!r}")


def resolve(body: Any, field: FieldSpec) -> Union[values.Value, values.Absent]:
    """
    Get a nested field, or `values.ABSENT` if it or any of its parents is missing.

    A parent that is not an object (e.g. a string or null) has no fields.
    """
    result = body
    for key in parse_field(field):
        if not isinstance(result, collections.abc.Mapping) or key not in result:
            return values.ABSENT
        result = result[key]
    return result


def export_values(
        body: Any,
        paths: Optional[Mapping[str, FieldSpec]],
) -> Dict[str, Any]:
    """
    Pick the named values out of a response body, for exposing them as outputs.

    Every output name is mapped to a field path in the body. The missing fields
    (or the fields under non-object parents) are exported as ``None``.
    An empty path exports the whole body.
    """
    result: Dict[str, Any] = {}
    for name, field in (paths or {}).items():
        value = resolve(body, field)
        result[name] = None if value is values.ABSENT else value
    return result
