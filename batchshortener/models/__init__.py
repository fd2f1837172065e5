from batchshortener.models.click_event_model import ClickEventModel
from batchshortener.models.short_url_model import ShortURLModel
from batchshortener.models.pending_url_model import PendingURLModel


__all__ = [
    'ClickEventModel',
    'ShortURLModel',
    'PendingURLModel',
]
