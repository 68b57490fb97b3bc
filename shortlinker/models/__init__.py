from shortlinker.models.click_event_model import ClickEventModel, RequestContext
from shortlinker.models.short_url_model import ShortURLModel


__all__ = [
    'ClickEventModel',
    'RequestContext',
    'ShortURLModel',
]
