import aiohttp.web
import pytest

from graphsync._cogs.clients.errors import APIError, APINotFoundError
from graphsync._cogs.clients.fetching import list_objs, list_ref_ids, read_obj


async def test_single_page(
        resp_mocker, aresponses, hostname, settings, logger, context):
    page = {'@odata.context': 'ctx', 'value': [{'id': 'a'}, {'id': 'b'}]}
    mock = resp_mocker(return_value=aiohttp.web.json_response(page))
    aresponses.add(hostname, '/v1.0/groups', 'get', mock)

    result = await list_objs('groups', settings=settings, logger=logger, context=context)

    assert result == {'@odata.context': 'ctx', 'value': [{'id': 'a'}, {'id': 'b'}]}
    assert mock.mock.call_count == 1


async def test_multiple_pages(
        resp_mocker, aresponses, hostname, settings, logger, context):
    page1 = {'value': [{'id': 'a'}], '@odata.nextLink': f'http://{hostname}/v1.0/groups?$skiptoken=p2'}
    page2 = {'value': [{'id': 'b'}], '@odata.nextLink': f'http://{hostname}/v1.0/groups?$skiptoken=p3'}
    page3 = {'value': [{'id': 'c'}], '@odata.count': 3}
    mock1 = resp_mocker(return_value=aiohttp.web.json_response(page1))
    mock2 = resp_mocker(return_value=aiohttp.web.json_response(page2))
    mock3 = resp_mocker(return_value=aiohttp.web.json_response(page3))
    aresponses.add(hostname, '/v1.0/groups', 'get', mock1)
    aresponses.add(hostname, '/v1.0/groups', 'get', mock2)
    aresponses.add(hostname, '/v1.0/groups', 'get', mock3)

    result = await list_objs('groups', params={'$top': '1'},
                             settings=settings, logger=logger, context=context)

    assert result == {'value': [{'id': 'a'}, {'id': 'b'}, {'id': 'c'}], '@odata.count': 3}
    assert '@odata.nextLink' not in result

    # The query params go only to the first page; the links are used as is.
    assert mock1.requests[0].query.get('$top') == '1'
    assert mock2.requests[0].query.get('$top') is None
    assert mock2.requests[0].query.get('$skiptoken') == 'p2'
    assert mock3.requests[0].query.get('$skiptoken') == 'p3'


async def test_headers_sent_to_all_pages(
        resp_mocker, aresponses, hostname, settings, logger, context):
    page1 = {'value': [1], '@odata.nextLink': f'http://{hostname}/v1.0/users?$skiptoken=p2'}
    page2 = {'value': [2]}
    mock1 = resp_mocker(return_value=aiohttp.web.json_response(page1))
    mock2 = resp_mocker(return_value=aiohttp.web.json_response(page2))
    aresponses.add(hostname, '/v1.0/users', 'get', mock1)
    aresponses.add(hostname, '/v1.0/users', 'get', mock2)

    result = await list_objs('users', headers={'ConsistencyLevel': 'eventual'},
                             settings=settings, logger=logger, context=context)

    assert result == {'value': [1, 2]}
    assert mock1.requests[0].headers['ConsistencyLevel'] == 'eventual'
    assert mock2.requests[0].headers['ConsistencyLevel'] == 'eventual'


async def test_non_conforming_page_returned_as_is(
        resp_mocker, aresponses, hostname, settings, logger, context):
    mock = resp_mocker(return_value=aiohttp.web.json_response({'id': 'me', 'displayName': 'Me'}))
    aresponses.add(hostname, '/v1.0/me', 'get', mock)

    result = await list_objs('me', settings=settings, logger=logger, context=context)

    assert result == {'id': 'me', 'displayName': 'Me'}


async def test_failure_of_a_page_fails_the_listing(
        resp_mocker, aresponses, hostname, settings, logger, context):
    page1 = {'value': [1], '@odata.nextLink': f'http://{hostname}/v1.0/groups?$skiptoken=p2'}
    mock1 = resp_mocker(return_value=aiohttp.web.json_response(page1))
    mock2 = resp_mocker(return_value=aiohttp.web.json_response({'error': {'code': 'x'}}, status=500))
    aresponses.add(hostname, '/v1.0/groups', 'get', mock1)
    aresponses.add(hostname, '/v1.0/groups', 'get', mock2)

    with pytest.raises(APIError) as err:
        await list_objs('groups', settings=settings, logger=logger, context=context)

    assert err.value.status == 500


async def test_not_found_escalated(
        resp_mocker, aresponses, hostname, settings, logger, context):
    mock = resp_mocker(return_value=aiohttp.web.json_response({'error': {}}, status=404))
    aresponses.add(hostname, '/v1.0/groups', 'get', mock)

    with pytest.raises(APINotFoundError):
        await list_objs('groups', settings=settings, logger=logger, context=context)


async def test_ref_ids_listed(
        resp_mocker, aresponses, hostname, settings, logger, context):
    page1 = {'value': [{'id': 'a'}, {'id': 'b'}],
             '@odata.nextLink': f'http://{hostname}/v1.0/groups/g1/members?$skiptoken=p2'}
    page2 = {'value': [{'id': 'c'}, {'displayName': 'no id'}]}
    mock1 = resp_mocker(return_value=aiohttp.web.json_response(page1))
    mock2 = resp_mocker(return_value=aiohttp.web.json_response(page2))
    aresponses.add(hostname, '/v1.0/groups/g1/members', 'get', mock1)
    aresponses.add(hostname, '/v1.0/groups/g1/members', 'get', mock2)

    result = await list_ref_ids('groups/g1/members', params={'$select': 'id'},
                                settings=settings, logger=logger, context=context)

    assert result == ['a', 'b', 'c']
    assert mock1.requests[0].query.get('$select') == 'id'


async def test_object_read(
        resp_mocker, aresponses, hostname, settings, logger, context):
    mock = resp_mocker(return_value=aiohttp.web.json_response({'id': 'g1', 'displayName': 'G'}))
    aresponses.add(hostname, '/v1.0/groups/g1', 'get', mock)

    result = await read_obj('groups/g1', settings=settings, logger=logger, context=context)

    assert result == {'id': 'g1', 'displayName': 'G'}
    assert mock.mock.call_count == 1


async def test_object_read_escalated_to_a_listing(
        resp_mocker, aresponses, hostname, settings, logger, context):
    page1 = {'@odata.context': 'c1', 'value': [{'id': 'a'}],
             '@odata.nextLink': f'http://{hostname}/v1.0/groups?$skiptoken=p2'}
    page2 = {'@odata.context': 'c2', 'value': [{'id': 'b'}]}
    mock1 = resp_mocker(return_value=aiohttp.web.json_response(page1))
    mock2 = resp_mocker(return_value=aiohttp.web.json_response(page2))
    aresponses.add(hostname, '/v1.0/groups', 'get', mock1)
    aresponses.add(hostname, '/v1.0/groups', 'get', mock2)

    result = await read_obj('groups', settings=settings, logger=logger, context=context)

    assert result == {'@odata.context': 'c2', 'value': [{'id': 'a'}, {'id': 'b'}]}
    assert mock1.mock.call_count == 1
    assert mock2.mock.call_count == 1


async def test_object_read_fails_when_absent(
        resp_mocker, aresponses, hostname, settings, logger, context):
    mock = resp_mocker(return_value=aiohttp.web.json_response({'error': {}}, status=404))
    aresponses.add(hostname, '/v1.0/groups/g1', 'get', mock)

    with pytest.raises(APINotFoundError):
        await read_obj('groups/g1', settings=settings, logger=logger, context=context)
