import aiohttp.web
import pytest

from graphsync._cogs.clients.api import get, post
from graphsync._cogs.clients.errors import APIConflictError, APIError, APIForbiddenError, \
                                           APINotFoundError, APIUnauthorizedError, is_success

ERROR_PAYLOAD = {
    'error': {
        'code': 'Request_BadRequest',
        'message': 'Something went wrong.',
        'details': [{'code': 'InvalidValue', 'message': 'Bad value.', 'target': 'displayName'}],
    },
}


@pytest.mark.parametrize('status, expected', [
    (200, True),
    (201, True),
    (204, True),
    (299, True),
    (199, False),
    (304, False),
    (400, False),
    (404, False),
    (500, False),
])
def test_success_statuses(status, expected):
    assert is_success(status) == expected


@pytest.mark.parametrize('status, exctype', [
    (400, APIError),
    (401, APIUnauthorizedError),
    (403, APIForbiddenError),
    (404, APINotFoundError),
    (409, APIConflictError),
    (429, APIError),
    (500, APIError),
    (503, APIError),
])
async def test_errors_mapped_with_payload(
        resp_mocker, aresponses, hostname, settings, logger, context, status, exctype):
    mock = resp_mocker(return_value=aiohttp.web.json_response(ERROR_PAYLOAD, status=status))
    aresponses.add(hostname, '/v1.0/groups', 'get', mock)

    with pytest.raises(exctype) as err:
        await get('groups', settings=settings, logger=logger, context=context)

    assert isinstance(err.value, APIError)
    assert err.value.status == status
    assert err.value.code == 'Request_BadRequest'
    assert err.value.message == 'Something went wrong.'
    assert err.value.details == [
        {'code': 'InvalidValue', 'message': 'Bad value.', 'target': 'displayName'},
    ]
    assert isinstance(err.value.__cause__, aiohttp.ClientResponseError)


@pytest.mark.parametrize('status', [400, 404, 500])
@pytest.mark.parametrize('body', ['not json at all', '', '["a list"]', '{"no": "error"}'])
async def test_errors_with_unusable_payload(
        resp_mocker, aresponses, hostname, settings, logger, context, status, body):
    mock = resp_mocker(return_value=aiohttp.web.Response(status=status, text=body))
    aresponses.add(hostname, '/v1.0/groups', 'post', mock)

    with pytest.raises(APIError) as err:
        await post('groups', payload={}, settings=settings, logger=logger, context=context)

    assert err.value.status == status
    assert err.value.code is None
    assert err.value.message is None
    assert err.value.details is None


async def test_errors_logged(
        resp_mocker, aresponses, hostname, settings, logger, context, caplog):
    mock = resp_mocker(return_value=aiohttp.web.json_response(ERROR_PAYLOAD, status=409))
    aresponses.add(hostname, '/v1.0/groups', 'get', mock)

    with pytest.raises(APIConflictError):
        await get('groups', settings=settings, logger=logger, context=context)

    assert 'Request failed; escalating: GET http://fake-host/v1.0/groups' in caplog.text


def test_error_message_as_args():
    error = APIError(ERROR_PAYLOAD, status=400)
    assert error.args[0] == 'Something went wrong.'
    assert error.args[1] == ERROR_PAYLOAD


def test_error_without_payload():
    error = APINotFoundError(None, status=404)
    assert error.status == 404
    assert error.args[0] is None
