import dataclasses
import json
import logging
from typing import Any, List

import pytest

from graphsync._cogs.clients.auth import APIContext, context_var
from graphsync._cogs.configs.configuration import Settings
from graphsync._cogs.structs.credentials import ConnectionInfo


@pytest.fixture()
def settings():
    return Settings()


@pytest.fixture()
def logger():
    return logging.getLogger('graphsync.tests')


@pytest.fixture()
def hostname():
    """ A fake hostname to be used in all aiohttp/aresponses tests. """
    return 'fake-host'


@pytest.fixture()
def server(hostname):
    return f'http://{hostname}'


@pytest.fixture()
def connection_info(server):
    return ConnectionInfo(server=server, token='fake-token')


#
# Mocks for the API clients. Reasons:
# 1. We do not test aiohttp, we test the layers on top of it,
#    so everything low-level is served by a fake server and assumed to be functional.
# 2. No external calls must be made under any circumstances.
#    The unit-tests must be fully isolated from the environment.
#

@pytest.fixture()
async def context(connection_info, aresponses):
    """
    The API context with a real aiohttp session, served by the fake server.

    Mind that `aresponses` is activated before the session is created.
    """
    async with APIContext(connection_info) as context:
        yield context


@pytest.fixture()
def context_via_contextvar(context):
    token = context_var.set(context)
    try:
        yield context
    finally:
        context_var.reset(token)


@dataclasses.dataclass(frozen=True)
class RecordedRequest:
    method: str
    path: str
    query: Any
    headers: Any
    data: Any


@pytest.fixture()
def resp_mocker(mocker):
    """
    A factory of server-side callbacks for `aresponses` with mocking/spying.

    The value of the fixture is a function, which returns a coroutine function.
    That coroutine function should be passed to `aresponses.add` as a response
    callback. When called, it calls the mock defined by the function's
    arguments (specifically, return_value or side_effect), and remembers
    the request with its already read payload for later assertions.

    Sample usage::

        def test_me(resp_mocker):
            response = aiohttp.web.json_response({'a': 'b'})
            callback = resp_mocker(return_value=response)
            aresponses.add(hostname, '/path/', 'get', callback)
            do_something()
            assert callback.mock.called
            assert callback.requests[0].data == {...}
    """
    def resp_maker(*args, **kwargs):
        actual_response = mocker.Mock(*args, **kwargs)
        requests: List[RecordedRequest] = []

        async def resp_mock_effect(request):

            # The request's content can be read inside of the handler only. We preserve
            # the data into a record, so that they could be asserted later.
            text = await request.text()
            try:
                data = json.loads(text)
            except json.JSONDecodeError:
                data = text

            requests.append(RecordedRequest(
                method=request.method,
                path=request.path,
                query=request.query.copy(),
                headers=request.headers.copy(),
                data=data,
            ))

            # Get a response/error as it was intended (via return_value/side_effect).
            return actual_response()

        resp_mock_effect.mock = actual_response
        resp_mock_effect.requests = requests
        return resp_mock_effect
    return resp_maker


@pytest.fixture(autouse=True)
def _undo_logging_configuration():
    """ Undo `configure()` as called by the CLI commands, so that it does not leak. """
    logger = logging.getLogger()
    handlers = logger.handlers[:]
    level = logger.level
    propagates = {name: logging.getLogger(name).propagate for name in ['asyncio', 'aiohttp']}
    try:
        yield
    finally:
        logger.handlers[:] = handlers
        logger.setLevel(level)
        for name, propagate in propagates.items():
            logging.getLogger(name).propagate = propagate
