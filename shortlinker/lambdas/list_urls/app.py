import logging

from shortlinker.dao import build_short_url_dao
from shortlinker.dao.exceptions import DataStoreError
from shortlinker.exceptions import ConfigurationError
from shortlinker.lifecycle import ShortURLService
from shortlinker.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlinker.utils import load_config, app_prefix, guarantee_500_response
from shortlinker.lambdas.responses import json_response, response_500, response_data_store_error
from shortlinker.lambdas.list_urls.constants import SHORT_URLS_LISTED


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to list short URLs (GET /shorturls)

    Lists every stored short URL (without click history), oldest first.
    Expired short URLs are listed until the data store evicts them.

    HTTP responses:
        200: JSON array of {shortCode, originalUrl, createdAt, expiresAt, totalClicks}
        500: Internal server error
            configuration or data store failure
    """
    try:
        app_config = load_config('list_urls')
    except ConfigurationError as e:
        logger.exception('Failed to load AppConfig for list URLs function. Responding with 500.')
        return response_500(error_code=e.error_code)

    try:
        short_url_dao = build_short_url_dao(app_config, prefix=app_prefix())
        service = ShortURLService.from_config(short_url_dao, app_config.get('lifecycle', {}))
        short_urls = service.list_all()
    except ConfigurationError as e:
        logger.exception('Bad short URL backend configuration. Responding with 500.')
        return response_500(error_code=e.error_code)
    except DataStoreError:
        logger.exception('Data store failure while listing short URLs. Responding with 500.')
        return response_data_store_error()

    logger.info('Listed short URLs. Responding with 200.', extra={'count': len(short_urls), 'event': SHORT_URLS_LISTED})
    return json_response(200, [short_url.summary_view() for short_url in short_urls])
