"""
Canonical textual forms of the values, for order-insensitive comparisons.

The canonical form is the compact JSON with the keys sorted at every level:
two structurally equal values always produce the same string regardless of
the keys' order and the formatting of the original text.

The numbers are compared by their values, not by their notation: the integral
floats are rendered as integers (``1.0`` and ``1e0`` become ``1``), except for
the huge ones, which keep the exponent notation.
"""
import json
from typing import Any, NoReturn, Union

from graphsync._cogs.structs import values

# The canonical JSON never starts with a letter, so the diagnostics are distinguishable.
INVALID_PREFIX = 'invalid JSON: '

# From this magnitude on, the numbers are rendered with exponents (as in JavaScript).
_INTEGRAL_LIMIT = 1e21


def decode(text: Union[str, bytes]) -> values.Value:
    """
    Decode a strict JSON text: ``NaN`` & ``Infinity`` are not JSON and are rejected.

    Raises ``ValueError`` (incl. ``json.JSONDecodeError``) if the text is not JSON.
    """
    return json.loads(text, parse_constant=_reject_constant)


def _reject_constant(name: str) -> NoReturn:
    raise ValueError(f"Unsupported constant: {name}")


def canonicalize(value: Union[values.Value, values.Absent]) -> str:
    """ Render a decoded value into its canonical text; absent renders to nothing. """
    if value is values.ABSENT:
        return ''
    return json.dumps(_simplify_numbers(value), sort_keys=True, separators=(',', ':'),
                      ensure_ascii=False, allow_nan=False)


def _simplify_numbers(value: Any) -> Any:
    match value:
        case float() if value.is_integer() and abs(value) < _INTEGRAL_LIMIT:
            return int(value)
        case dict():
            return {key: _simplify_numbers(item) for key, item in value.items()}
        case list():
            return [_simplify_numbers(item) for item in value]
        case _:
            return value


def normalize(text: Union[str, bytes]) -> str:
    """
    Convert a JSON text to its canonical form.

    An empty input gives an empty output. An unparsable input gives
    a non-empty diagnostic message instead of raising: it is up to the caller
    to decide if it is an error (e.g. for a user-provided text) or not.
    """
    if not text:
        return ''
    try:
        value = decode(text)
    except ValueError as e:  # incl. json.JSONDecodeError & UnicodeDecodeError
        return f'{INVALID_PREFIX}{e}'
    return canonicalize(value)


def is_invalid(normalized: str) -> bool:
    return normalized.startswith(INVALID_PREFIX)
