"""Click recording for short URL redirects"""

from datetime import datetime

from shortlinker.constants import Lifecycle
from shortlinker.dao.base import ShortURLBaseDAO
from shortlinker.models import ClickEventModel, RequestContext, ShortURLModel


def build_click_event(context: RequestContext, now: datetime) -> ClickEventModel:
    """Describe a redirect: referrer, else user agent, else 'unknown' as its source."""
    return ClickEventModel(
        timestamp=now,
        source=context.referrer or context.user_agent or Lifecycle.UNKNOWN,
        location=context.ip or Lifecycle.UNKNOWN,
    )


def record_click(dao: ShortURLBaseDAO, shortcode: str, context: RequestContext, now: datetime) -> ShortURLModel:
    """Append one click to a short URL and increment its counter in a single DAO update.

    The caller is responsible for not recording clicks on expired short URLs.

    Raises:
        ShortURLNotFoundError (dao): if the short URL was evicted in the meantime.
        DataStoreError: if the DAO can't reach its data store.
    """
    return dao.hit(shortcode, build_click_event(context, now))
