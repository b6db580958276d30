"""
API errors.

The underlying client library (now, ``aiohttp``) can be replaced in the future.
We cannot rely on embedding its exceptions all over the code in the project.
Hence, we have our own hierarchy of exceptions for the API errors.

Low-level errors, such as the network connectivity issues, SSL/HTTPS issues,
timeouts, cancellations, are escalated from the client library as is,
since they are related not to the domain of the API, but rather to the
networking and encryption.

The original errors of the client library are chained as the causes of our own
specialised errors -- for better explainability of errors in the stack traces.

Some selected reasons of the API errors are made into their own classes,
so that they could be intercepted and handled in other places:
e.g. "not found" on reading means that the object is gone, not a failure.
All other reasons are raised as the base error class and are indistinguishable
from each other (except via the exception's fields).
"""
import collections.abc
from typing import Any, Collection, Optional

import aiohttp
from typing_extensions import TypedDict


class RawErrorDetail(TypedDict, total=False):
    code: str
    message: str
    target: str


class RawError(TypedDict, total=False):
    code: str
    message: str
    target: str
    details: Collection[RawErrorDetail]


# The OData error envelope: {"error": {"code": "...", "message": "...", ...}}
class RawErrorPayload(TypedDict):
    error: RawError


class APIError(Exception):

    def __init__(
            self,
            payload: Optional[RawErrorPayload],
            *,
            status: int,
    ) -> None:
        message = payload['error'].get('message') if payload else None
        super().__init__(message, payload)
        self._status = status
        self._payload = payload

    @property
    def status(self) -> int:
        return self._status

    @property
    def code(self) -> Optional[str]:
        return self._payload['error'].get('code') if self._payload else None

    @property
    def message(self) -> Optional[str]:
        return self._payload['error'].get('message') if self._payload else None

    @property
    def details(self) -> Optional[Collection[RawErrorDetail]]:
        return self._payload['error'].get('details') if self._payload else None


class APIUnauthorizedError(APIError):
    pass


class APIForbiddenError(APIError):
    pass


class APINotFoundError(APIError):
    pass


class APIConflictError(APIError):
    pass


def is_success(status: int) -> bool:
    return 200 <= status < 300


async def check_response(
        response: aiohttp.ClientResponse,
) -> None:
    """
    Check for specialised API errors, and raise with extended information.
    """
    if not is_success(response.status):

        # Read the response's body before it is closed by raise_for_status().
        payload: Optional[RawErrorPayload]
        try:
            payload = await response.json(content_type=None)
        except (ValueError, aiohttp.ClientConnectionError):
            payload = None

        # Better be safe: who knows which sensitive information can be dumped otherwise.
        if (not isinstance(payload, collections.abc.Mapping) or
                not isinstance(payload.get('error'), collections.abc.Mapping)):
            payload = None

        cls = (
            APIUnauthorizedError if response.status == 401 else
            APIForbiddenError if response.status == 403 else
            APINotFoundError if response.status == 404 else
            APIConflictError if response.status == 409 else
            APIError
        )

        # Raise the project-specific error while keeping the original error in scope.
        # This call also closes the response's body, so it cannot be read afterwards.
        try:
            response.raise_for_status()
        except aiohttp.ClientResponseError as e:
            raise cls(payload, status=response.status) from e
        else:  # the informational & redirection statuses, which were not followed.
            raise cls(payload, status=response.status)


async def parse_response(
        response: aiohttp.ClientResponse,
) -> Any:
    """
    Check the response for errors, and either raise or return the parsed data.

    The responses with no content (e.g. ``204 No Content``) are parsed as ``None``.
    """
    await check_response(response)
    if response.status == 204:
        return None
    return await response.json(content_type=None)
