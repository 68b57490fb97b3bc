import json
import logging

from shortlinker.dao import build_short_url_dao
from shortlinker.dao.exceptions import DataStoreError
from shortlinker.exceptions import ShortLinkerError, ConfigurationError
from shortlinker.lifecycle import ShortURLService
from shortlinker.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlinker.utils import load_config, get_short_url, app_prefix, guarantee_500_response
from shortlinker.lambdas.responses import (
    json_response,
    response_error,
    response_500,
    response_data_store_error,
    response_for_error,
)
from shortlinker.lambdas.shorten_url.constants import INVALID_JSON_BODY, SHORT_URL_CREATED


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs (POST /shorturls)

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Load the application's config
    - Step 2: Extract url, validity and shortcode from the JSON request body
    - Step 3: Create the short URL (validation, shortcode, expiry, storage)
    - Step 4: Respond to user with 201 success

    Request body:
        url (str): original URL (required, absolute)
        validity (number): validity in minutes (optional, default 30)
        shortcode (str): custom shortcode, 5-10 alphanumeric characters (optional)

    HTTP responses:
        201: Short URL created
            shortCode, originalUrl, expiry (ISO-8601), shortLink
        400: Bad client request
            invalid JSON, missing/invalid url, invalid validity, invalid shortcode
        409: Conflict
            custom shortcode already in use
        500: Internal server error
            shortcode generation exhausted, configuration or data store failure

    Example:
        >>> event = {'body': '{"url": "https://example.com", "validity": 10}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        201
    """
    # 1- Get application's config
    try:
        app_config = load_config('shorten_url')
    except ConfigurationError as e:
        logger.exception('Failed to load AppConfig for shorten URL function. Responding with 500.')
        return response_500(error_code=e.error_code)

    # 2- Extract request parameters from body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        request_body = None
    if not isinstance(request_body, dict):
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_error(400, 'invalid JSON body', INVALID_JSON_BODY)

    target_url = request_body.get('url')
    validity = request_body.get('validity')
    shortcode = request_body.get('shortcode')

    # 3- Create the short URL
    try:
        short_url_dao = build_short_url_dao(app_config, prefix=app_prefix())
        service = ShortURLService.from_config(short_url_dao, app_config.get('lifecycle', {}))
        short_url = service.create(target_url, validity=validity, shortcode=shortcode)
    except ShortLinkerError as e:
        logger.info(
            'Failed to create short URL. Responding with error.',
            extra={'event': e.error_code, 'target': target_url, 'shortcode': shortcode, 'reason': str(e)},
        )
        return response_for_error(e)
    except DataStoreError:
        logger.exception('Data store failure while creating short URL. Responding with 500.')
        return response_data_store_error()

    # 4- Return successful response to user
    short_link = get_short_url(short_url.shortcode, event)
    logger.info(
        'Short URL created. Responding with 201.',
        extra={'shortcode': short_url.shortcode, 'event': SHORT_URL_CREATED},
    )
    return json_response(
        201,
        {
            **short_url.created_view(),
            'shortLink': short_link,
            'message': 'Short URL created successfully.',
        },
    )
