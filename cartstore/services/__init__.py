# Services Module
from .api import ProductCatalog, ShopApiClient, StockService
from .models import ProductRecord, StockRecord
from .notifications import LoggingNotificationSink, NotificationSink, RecordingNotificationSink

__all__ = [
    "ProductCatalog",
    "StockService",
    "ShopApiClient",
    "ProductRecord",
    "StockRecord",
    "NotificationSink",
    "LoggingNotificationSink",
    "RecordingNotificationSink",
]
