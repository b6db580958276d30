"""
The semi-structured values as received from & sent to the API.

The values are the plain JSON-decoded Python objects: dicts for objects,
lists for arrays, and str/int/float/bool/None for scalars. No wrapping
classes are used, so that the values can be passed to & from ``json`` and
``aiohttp`` as is; the type aliases below only document the closed union.

All reconciliation routines dispatch over the same closed set of kinds
(see `kind_of`) with exhaustive ``match`` statements; anything else
(e.g. a tuple or a custom class) is a programming error, not data.
"""
import collections.abc
import enum
import math
from typing import Any, Dict, List, Union

from graphsync._cogs.structs import fields

Scalar = Union[None, bool, int, float, str]
Value = Union[Scalar, List['Value'], Dict[str, 'Value']]
Object = Dict[str, Value]
Array = List[Value]

# The bodies of the resources are always objects at the root.
RawBody = Dict[str, Any]


class Absent(enum.Enum):
    """
    A marker of an absent value, distinct from JSON's ``null`` (``None``).

    Returned from the diffs when there is nothing to send,
    and used for the keys missing on one of the compared sides.
    """
    token = enum.auto()

    def __repr__(self) -> str:
        return 'ABSENT'

    def __bool__(self) -> bool:
        return False


ABSENT = Absent.token


class Kind(enum.Enum):
    ABSENT = 'absent'
    NULL = 'null'
    BOOL = 'bool'
    NUMBER = 'number'
    STRING = 'string'
    ARRAY = 'array'
    OBJECT = 'object'


def kind_of(value: Union[Value, Absent]) -> Kind:
    """
    Classify a value into one of the JSON kinds.

    Booleans are not numbers here, despite ``bool`` being a subclass of ``int``
    in Python: ``true`` and ``1`` are different values in JSON.
    """
    match value:
        case Absent():
            return Kind.ABSENT
        case None:
            return Kind.NULL
        case bool():
            return Kind.BOOL
        case int() | float():
            return Kind.NUMBER
        case str():
            return Kind.STRING
        case collections.abc.Mapping():
            return Kind.OBJECT
        case list() | tuple():
            return Kind.ARRAY
        case _:
            raise TypeError(f"Not a JSON-compatible value: {value!r}")


def is_empty(value: Union[Value, Absent]) -> bool:
    """
    Check if the value is not worth sending: absent, null, an empty object/array.

    Empty strings, zeroes, and ``false`` are not empty: they are values.
    """
    match kind_of(value):
        case Kind.ABSENT | Kind.NULL:
            return True
        case Kind.OBJECT | Kind.ARRAY:
            return len(value) == 0  # type: ignore
        case _:
            return False


def flatten_reference_ids(body: Union[Value, Absent]) -> List[str]:
    """
    Extract the ids of the referenced objects from a listing of a collection.

    The listing is expected to be ``{"value": [{"id": "..."}, ...]}``.
    Items without an id, and bodies of other shapes, yield nothing.
    """
    if not isinstance(body, collections.abc.Mapping):
        return []
    items = body.get(fields.VALUE_FIELD)
    if not isinstance(items, list):
        return []
    return [
        item['id'] for item in items
        if isinstance(item, collections.abc.Mapping) and isinstance(item.get('id'), str)
    ]




def check_value(value: Any) -> None:
    """
    Ensure that a value decoded from a non-JSON source (e.g. YAML) is a JSON value.

    Raises ``TypeError`` for the foreign types (e.g. dates) and the non-string keys,
    and ``ValueError`` for the non-finite numbers (``NaN`` & infinities).
    """
    match kind_of(value):
        case Kind.OBJECT:
            for key, item in value.items():
                if not isinstance(key, str):
                    raise TypeError(f"Not a string key: {key!r}")
                check_value(item)
        case Kind.ARRAY:
            for item in value:
                check_value(item)
        case Kind.NUMBER if not math.isfinite(value):
            raise ValueError(f"Not a finite number: {value!r}")
