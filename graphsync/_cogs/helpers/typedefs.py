"""
Rudimentary type [re-]definitions for cross-versioned Python & mypy.

Some stdlib types are defined as generics in the type-sheds only,
while the runtime does not support the subscripted syntax for them
(e.g. ``logging.LoggerAdapter``).

This module defines them in a most suitable and reusable way.
"""
import logging
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    LoggerAdapter = logging.LoggerAdapter[Any]
else:
    LoggerAdapter = logging.LoggerAdapter

# As publicly exposed: we only promise that it is based on one of the built-in loggable classes.
Logger = Union[logging.Logger, LoggerAdapter]
