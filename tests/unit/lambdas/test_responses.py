import json

import pytest

from shortlinker.exceptions import (
    ShortLinkerError,
    MissingURLError,
    InvalidURLError,
    InvalidValidityError,
    InvalidShortcodeError,
    ShortcodeConflictError,
    ShortcodeGenerationError,
    ShortURLNotFoundError,
    ShortURLExpiredError,
    BadConfigurationError,
)
from shortlinker.lambdas.responses import (
    CORS_HEADERS,
    json_response,
    response_error,
    response_302,
    response_data_store_error,
    response_for_error,
    status_code_for,
)


def test_json_response():
    response = json_response(200, {'hello': 'world'}, headers={'X-Custom': '1'})

    assert response['statusCode'] == 200
    assert response['headers'] == {'Content-Type': 'application/json', **CORS_HEADERS, 'X-Custom': '1'}
    assert json.loads(response['body']) == {'hello': 'world'}


@pytest.mark.parametrize(
    'status_code, message, error_code, expected',
    [
        (400, None, None, {'message': 'Bad Request'}),
        (400, 'invalid JSON body', 'INVALID_JSON_BODY', {'message': 'Bad Request (invalid JSON body)', 'errorCode': 'INVALID_JSON_BODY'}),
        (410, 'expired', 'SHORT_URL_EXPIRED', {'message': 'Gone (expired)', 'errorCode': 'SHORT_URL_EXPIRED'}),
    ],
)
def test_response_error(status_code, message, error_code, expected):
    response = response_error(status_code, message, error_code)

    assert response['statusCode'] == status_code
    assert json.loads(response['body']) == expected


def test_response_302():
    response = response_302(location='https://example.com/a')

    assert response['statusCode'] == 302
    assert response['headers']['Location'] == 'https://example.com/a'
    assert json.loads(response['body']) == {}


def test_response_data_store_error():
    response = response_data_store_error()

    assert response['statusCode'] == 500
    assert json.loads(response['body']) == {
        'message': 'Internal Server Error (data store unavailable)',
        'errorCode': 'DATA_STORE_ERROR',
    }


@pytest.mark.parametrize(
    'error, status_code',
    [
        (MissingURLError(), 400),
        (InvalidURLError(), 400),
        (InvalidValidityError(), 400),
        (InvalidShortcodeError(), 400),
        (ShortURLNotFoundError(), 404),
        (ShortcodeConflictError(), 409),
        (ShortURLExpiredError(), 410),
        (ShortcodeGenerationError(), 500),
        (BadConfigurationError(), 500),
        (ShortLinkerError(), 500),
    ],
)
def test_status_code_for(error, status_code):
    assert status_code_for(error) == status_code


def test_response_for_error():
    response = response_for_error(ShortcodeConflictError("Shortcode 'promo1' is already in use."))

    assert response['statusCode'] == 409
    assert json.loads(response['body']) == {
        'message': "Conflict (Shortcode 'promo1' is already in use.)",
        'errorCode': 'SHORTCODE_CONFLICT',
    }


def test_response_for_error_with_message():
    response = response_for_error(ShortURLNotFoundError('internal detail'), 'short url https://sho.rt/abc12 doesn\'t exist')
    assert json.loads(response['body'])['message'] == "Not Found (short url https://sho.rt/abc12 doesn't exist)"
