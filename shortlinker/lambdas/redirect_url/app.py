import logging

from shortlinker.dao import build_short_url_dao
from shortlinker.dao.exceptions import DataStoreError
from shortlinker.exceptions import ShortLinkerError, ConfigurationError, ShortURLNotFoundError, ShortURLExpiredError
from shortlinker.lifecycle import ShortURLService
from shortlinker.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlinker.utils import load_config, get_short_url, app_prefix, guarantee_500_response
from shortlinker.lambdas.events import path_shortcode, request_context
from shortlinker.lambdas.responses import (
    response_302,
    response_error,
    response_500,
    response_data_store_error,
    response_for_error,
)
from shortlinker.lambdas.redirect_url.constants import MISSING_SHORTCODE, REDIRECT_SUCCESS


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect URLs (GET /{shortcode})

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Load the application's config
    - Step 2: Extract shortcode from request path
    - Step 3: Resolve the short URL and record the click (referrer / user agent / source IP)
    - Step 4: Redirect client to target URL

    HTTP responses:
        302: Successful redirect
            headers:
                Location: target URL destination
        400: Bad client request
            missing shortcode in path parameters
        404: Not found
            short URL was never created (or was already evicted)
        410: Gone
            short URL exists but expired (no click is recorded)
        500: Internal server error
            configuration or data store failure

    Example:
        >>> event = {'pathParameters': {'shortcode': 'Gh71T'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 1- Get application's config
    try:
        app_config = load_config('redirect_url')
    except ConfigurationError as e:
        logger.exception('Failed to load AppConfig for redirect URL function. Responding with 500.')
        return response_500(error_code=e.error_code)

    # 2- Extract shortcode from request's path
    shortcode = path_shortcode(event)
    if shortcode is None:
        logger.info('Missing "shortcode" in path. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_error(400, "missing 'shortcode' in path", MISSING_SHORTCODE)
    logger.debug('Client requested short URL %s.', get_short_url(shortcode, event))

    # 3- Resolve the short URL and record the click
    try:
        short_url_dao = build_short_url_dao(app_config, prefix=app_prefix())
        service = ShortURLService.from_config(short_url_dao, app_config.get('lifecycle', {}))
        target_url = service.redirect(shortcode, request_context(event))
    except ShortURLNotFoundError as e:
        logger.info('Short URL record not found. Responding with 404.', extra={'shortcode': shortcode, 'event': e.error_code})
        return response_for_error(e, f"short url {get_short_url(shortcode, event)} doesn't exist")
    except ShortURLExpiredError as e:
        logger.info('Short URL has expired. Responding with 410.', extra={'shortcode': shortcode, 'event': e.error_code})
        return response_for_error(e, f'short url {get_short_url(shortcode, event)} has expired')
    except ShortLinkerError as e:
        logger.exception('Failed to redirect short URL.', extra={'shortcode': shortcode, 'event': e.error_code})
        return response_for_error(e)
    except DataStoreError:
        logger.exception('Data store failure while redirecting. Responding with 500.', extra={'shortcode': shortcode})
        return response_data_store_error()

    # 4- Redirect client to target URL
    logger.info(
        'Redirecting client to target URL. Responding with 302.',
        extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS},
    )
    return response_302(location=target_url)
