import asyncio

import aiohttp.web
import pytest

from graphsync._cogs.clients.api import delete, get, patch, post, request
from graphsync._cogs.clients.auth import APIContext


async def test_get_with_params_and_headers(
        resp_mocker, aresponses, hostname, settings, logger, context):
    mock = resp_mocker(return_value=aiohttp.web.json_response({'id': 'g1'}))
    aresponses.add(hostname, '/v1.0/groups/g1', 'get', mock)

    result = await get(
        'groups/g1',
        params={'$select': ['id', 'displayName']},
        headers={'ConsistencyLevel': 'eventual'},
        settings=settings, logger=logger, context=context,
    )

    assert result == {'id': 'g1'}
    assert mock.mock.call_count == 1
    assert mock.requests[0].method == 'GET'
    assert mock.requests[0].path == '/v1.0/groups/g1'
    assert mock.requests[0].query.getall('$select') == ['id', 'displayName']
    assert mock.requests[0].headers['ConsistencyLevel'] == 'eventual'


async def test_session_headers(
        resp_mocker, aresponses, hostname, settings, logger, context):
    mock = resp_mocker(return_value=aiohttp.web.json_response({}))
    aresponses.add(hostname, '/v1.0/me', 'get', mock)

    await get('me', settings=settings, logger=logger, context=context)

    headers = mock.requests[0].headers
    assert headers['Authorization'] == 'Bearer fake-token'
    assert headers['Accept'] == 'application/json'
    assert headers['User-Agent'].startswith('graphsync/')


async def test_api_version_overridden(
        resp_mocker, aresponses, hostname, settings, logger, context):
    mock = resp_mocker(return_value=aiohttp.web.json_response({}))
    aresponses.add(hostname, '/beta/groups', 'get', mock)

    await get('groups', api_version='beta', settings=settings, logger=logger, context=context)

    assert mock.requests[0].path == '/beta/groups'


async def test_api_version_from_settings(
        resp_mocker, aresponses, hostname, settings, logger, context):
    settings.api.version = 'beta'
    mock = resp_mocker(return_value=aiohttp.web.json_response({}))
    aresponses.add(hostname, '/beta/groups', 'get', mock)

    await get('groups', settings=settings, logger=logger, context=context)

    assert mock.requests[0].path == '/beta/groups'


async def test_post_with_payload(
        resp_mocker, aresponses, hostname, settings, logger, context):
    mock = resp_mocker(return_value=aiohttp.web.json_response({'id': 'g1', 'x': 1}, status=201))
    aresponses.add(hostname, '/v1.0/groups', 'post', mock)

    result = await post('groups', payload={'x': 1}, settings=settings, logger=logger, context=context)

    assert result == {'id': 'g1', 'x': 1}
    assert mock.requests[0].data == {'x': 1}


async def test_patch_with_no_content(
        resp_mocker, aresponses, hostname, settings, logger, context):
    mock = resp_mocker(return_value=aiohttp.web.Response(status=204))
    aresponses.add(hostname, '/v1.0/groups/g1', 'patch', mock)

    result = await patch('groups/g1', payload={'x': 1}, settings=settings, logger=logger, context=context)

    assert result is None
    assert mock.requests[0].method == 'PATCH'
    assert mock.requests[0].data == {'x': 1}


async def test_delete_with_empty_body(
        resp_mocker, aresponses, hostname, settings, logger, context):
    mock = resp_mocker(return_value=aiohttp.web.Response(status=200, text=''))
    aresponses.add(hostname, '/v1.0/groups/g1', 'delete', mock)

    result = await delete('groups/g1', settings=settings, logger=logger, context=context)

    assert result is None
    assert mock.requests[0].method == 'DELETE'


async def test_absolute_urls_used_as_is(
        resp_mocker, aresponses, hostname, settings, logger, context):
    mock = resp_mocker(return_value=aiohttp.web.json_response({'value': []}))
    aresponses.add(hostname, '/v1.0/groups', 'get', mock)

    await get(f'http://{hostname}/v1.0/groups?$skiptoken=abc',
              settings=settings, logger=logger, context=context)

    assert mock.requests[0].path == '/v1.0/groups'
    assert mock.requests[0].query['$skiptoken'] == 'abc'


async def test_context_from_contextvar(
        resp_mocker, aresponses, hostname, settings, logger, context_via_contextvar):
    mock = resp_mocker(return_value=aiohttp.web.json_response({'id': 'me'}))
    aresponses.add(hostname, '/v1.0/me', 'get', mock)

    result = await get('me', settings=settings, logger=logger)

    assert result == {'id': 'me'}


async def test_connection_errors_escalated(mocker, settings, logger, connection_info, caplog):
    session = mocker.Mock(headers={})
    session.request = mocker.AsyncMock(side_effect=aiohttp.ClientConnectionError('boom'))
    context = APIContext(connection_info, session=session)

    with pytest.raises(aiohttp.ClientConnectionError):
        await request('get', 'groups', settings=settings, logger=logger, context=context)

    assert 'Request failed; escalating: GET http://fake-host/v1.0/groups' in caplog.text


async def test_timeouts_from_settings(mocker, settings, logger, connection_info):
    settings.networking.request_timeout = 12.5
    settings.networking.connect_timeout = 3
    session = mocker.Mock(headers={})
    session.request = mocker.AsyncMock(return_value=mocker.Mock(status=200))
    context = APIContext(connection_info, session=session)

    await request('get', 'groups', settings=settings, logger=logger, context=context)

    timeout = session.request.call_args.kwargs['timeout']
    assert timeout.total == 12.5
    assert timeout.sock_connect == 3


async def test_timeouts_escalated(mocker, settings, logger, connection_info, caplog):
    session = mocker.Mock(headers={})
    session.request = mocker.AsyncMock(side_effect=asyncio.TimeoutError())
    context = APIContext(connection_info, session=session)

    with pytest.raises(asyncio.TimeoutError):
        await request('get', 'groups', settings=settings, logger=logger, context=context)

    assert 'Request failed; escalating: GET http://fake-host/v1.0/groups' in caplog.text
