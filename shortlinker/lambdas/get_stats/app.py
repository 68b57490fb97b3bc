import logging

from shortlinker.dao import build_short_url_dao
from shortlinker.dao.exceptions import DataStoreError
from shortlinker.exceptions import ShortLinkerError, ConfigurationError, ShortURLNotFoundError, ShortURLExpiredError
from shortlinker.lifecycle import ShortURLService
from shortlinker.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlinker.utils import load_config, get_short_url, app_prefix, guarantee_500_response
from shortlinker.lambdas.events import path_shortcode
from shortlinker.lambdas.responses import (
    json_response,
    response_error,
    response_500,
    response_data_store_error,
    response_for_error,
)
from shortlinker.lambdas.get_stats.constants import MISSING_SHORTCODE, STATS_RETRIEVED


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests for short URL statistics (GET /shorturls/{shortcode})

    This Lambda handler follows this procedure:
    - Step 1: Load the application's config
    - Step 2: Extract shortcode from request path
    - Step 3: Look up the short URL and check its expiry
    - Step 4: Respond with the short URL's statistics

    HTTP responses:
        200: Statistics
            shortCode, originalUrl, createdAt, expiresAt, totalClicks,
            clickHistory[] (timestamp, source, location)
        400: Bad client request
            missing shortcode in path parameters
        404: Not found
            short URL was never created (or was already evicted)
        410: Gone
            short URL exists but expired
        500: Internal server error
            configuration or data store failure
    """
    # 1- Get application's config
    try:
        app_config = load_config('get_stats')
    except ConfigurationError as e:
        logger.exception('Failed to load AppConfig for get stats function. Responding with 500.')
        return response_500(error_code=e.error_code)

    # 2- Extract shortcode from request's path
    shortcode = path_shortcode(event)
    if shortcode is None:
        logger.info('Missing "shortcode" in path. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_error(400, "missing 'shortcode' in path", MISSING_SHORTCODE)

    # 3- Look up the short URL
    try:
        short_url_dao = build_short_url_dao(app_config, prefix=app_prefix())
        service = ShortURLService.from_config(short_url_dao, app_config.get('lifecycle', {}))
        short_url = service.stats(shortcode)
    except ShortURLNotFoundError as e:
        logger.info('Short URL record not found. Responding with 404.', extra={'shortcode': shortcode, 'event': e.error_code})
        return response_for_error(e, f"short url {get_short_url(shortcode, event)} doesn't exist")
    except ShortURLExpiredError as e:
        logger.info('Short URL has expired. Responding with 410.', extra={'shortcode': shortcode, 'event': e.error_code})
        return response_for_error(e, f'short url {get_short_url(shortcode, event)} has expired')
    except ShortLinkerError as e:
        logger.exception('Failed to retrieve short URL statistics.', extra={'shortcode': shortcode, 'event': e.error_code})
        return response_for_error(e)
    except DataStoreError:
        logger.exception('Data store failure while retrieving statistics. Responding with 500.', extra={'shortcode': shortcode})
        return response_data_store_error()

    # 4- Respond with statistics
    logger.info(
        'Short URL statistics retrieved. Responding with 200.',
        extra={'shortcode': shortcode, 'clicks': short_url.clicks, 'event': STATS_RETRIEVED},
    )
    return json_response(200, short_url.stats_view())
