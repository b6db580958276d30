"""
All configuration flags, options, settings to fine-tune the clients & engines.

All settings are grouped semantically just for convenience
(instead of a flat mega-object with all the values in it).

Some of the settings are flags, some are scalars, some are optional,
some are not (but all of them have reasonable defaults).
"""
import dataclasses
from typing import Optional

from graphsync._cogs.structs import merging


@dataclasses.dataclass
class NetworkingSettings:

    request_timeout: Optional[float] = 5 * 60  # == aiohttp.client.DEFAULT_TIMEOUT
    """
    A timeout for the whole API request (incl. reading the response), in seconds.
    If ``None``, there is no timeout (on your own risk).
    """

    connect_timeout: Optional[float] = None
    """
    A timeout for establishing the connection to the API server, in seconds.
    """


@dataclasses.dataclass
class ApiSettings:

    version: str = 'v1.0'
    """
    The API version to prefix the relative URLs with, e.g. ``v1.0`` or ``beta``.
    Can be overridden per request.
    """

    reference_collection: str = 'directoryObjects'
    """
    The collection of the referenced objects, used to build the ``@odata.id``
    of the references when they are added to the reference collections:
    ``<server>/<version>/<reference_collection>/<id>``.
    """


@dataclasses.dataclass
class ReconcilingSettings:

    ignore_missing_property: bool = True
    """
    Should the fields of the locally stored state which are absent in the
    freshly read remote state be kept (e.g. the write-only secrets)?
    """

    ignore_casing: bool = False
    """
    Should the strings differing only by the letter case be considered equal?
    Useful for the APIs which canonicalize the casing of the values.
    """

    @property
    def options(self) -> merging.UpdateOptions:
        return merging.UpdateOptions(
            ignore_missing_property=self.ignore_missing_property,
            ignore_casing=self.ignore_casing,
        )


@dataclasses.dataclass
class Settings:
    networking: NetworkingSettings = dataclasses.field(default_factory=NetworkingSettings)
    api: ApiSettings = dataclasses.field(default_factory=ApiSettings)
    reconciling: ReconcilingSettings = dataclasses.field(default_factory=ReconcilingSettings)
