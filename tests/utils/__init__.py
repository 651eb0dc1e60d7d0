from tests.utils.factories import OrderFactory
from tests.utils.helpers import (
    ADMIN_EMAIL,
    PROXY_SECRET,
    WEBHOOK_SECRET,
    InMemoryRedis,
    post_order_webhook,
    proxy_url,
    signed_query,
)

__all__ = [
    "ADMIN_EMAIL",
    "PROXY_SECRET",
    "WEBHOOK_SECRET",
    "InMemoryRedis",
    "OrderFactory",
    "post_order_webhook",
    "proxy_url",
    "signed_query",
]
