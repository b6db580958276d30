"""
Detecting the project's own version.

The codebase does not contain the version directly: it is derived from
the versioning system's tags at packaging time (see ``setup.py``), and is
determined only once at startup when the code is loaded.
"""
import importlib.metadata
from typing import Optional

version: Optional[str] = None

try:
    name, *_ = __name__.split('.')  # usually "graphsync", unless renamed/forked.
    version = importlib.metadata.version(name)
except importlib.metadata.PackageNotFoundError:
    pass  # not installed, e.g. running from a source checkout.
