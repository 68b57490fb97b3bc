"""API Gateway (Lambda proxy) response builders shared by all lambdas

Error bodies look like:

    {"message": "Not Found (short url https://sho.rt/abc12 doesn't exist)", "errorCode": "SHORT_URL_NOT_FOUND"}

Application errors map to HTTP status codes as follows:

    ValidationError             400
    ShortURLNotFoundError       404
    ShortcodeConflictError      409
    ShortURLExpiredError        410
    ShortcodeGenerationError    500
    ConfigurationError          500
"""

import json
from http import HTTPStatus
from typing import Any

from shortlinker.constants import DATA_STORE_ERROR
from shortlinker.exceptions import (
    ShortLinkerError,
    ValidationError,
    ShortcodeConflictError,
    ShortcodeGenerationError,
    ShortURLNotFoundError,
    ShortURLExpiredError,
    ConfigurationError,
)
from shortlinker.types import LambdaResponse


CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type',
    'Access-Control-Allow-Methods': 'OPTIONS,POST,GET',
}

ERROR_STATUS_CODES: dict[type[ShortLinkerError], int] = {
    ValidationError: 400,
    ShortURLNotFoundError: 404,
    ShortcodeConflictError: 409,
    ShortURLExpiredError: 410,
    ShortcodeGenerationError: 500,
    ConfigurationError: 500,
}


def json_response(status_code: int, body: Any, headers: dict[str, str] | None = None) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json', **CORS_HEADERS, **(headers or {})},
        'body': json.dumps(body),
    }


def response_error(status_code: int, message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    base = HTTPStatus(status_code).phrase
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return json_response(status_code, body)


def response_302(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 302,
        'headers': {'Location': location, **CORS_HEADERS},
        'body': json.dumps({}),  # no body needed for redirects
    }


def response_500(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return response_error(500, message, error_code)


def response_data_store_error() -> LambdaResponse:
    return response_500('data store unavailable', DATA_STORE_ERROR)


def status_code_for(error: ShortLinkerError) -> int:
    for error_type in type(error).__mro__:
        if error_type in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[error_type]
    return 500


def response_for_error(error: ShortLinkerError, message: str | None = None) -> LambdaResponse:
    """Build the error response for an application error (message defaults to the error's own)."""
    return response_error(status_code_for(error), message or str(error), error.error_code)
