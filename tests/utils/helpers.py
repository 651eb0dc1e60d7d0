import json
from typing import Any, Optional
from urllib.parse import urlencode

from httpx import AsyncClient, Response

from app.core.proxy_signature import compute_signature, compute_webhook_hmac

DEFAULT_SHOP = "marketformation.myshopify.com"
PROXY_SECRET = "test-proxy-secret"
WEBHOOK_SECRET = "test-webhook-secret"
ADMIN_EMAIL = "ops@marketformation.test"


def signed_query(params: list[tuple[str, str]], secret: str) -> str:
    signature = compute_signature(params, secret)
    return urlencode(params + [("signature", signature)])


def proxy_url(
    path: str,
    secret: str,
    logged_in_customer_id: Optional[str] = None,
    extra: Optional[list[tuple[str, str]]] = None,
    shop: str = DEFAULT_SHOP,
) -> str:
    params = [("shop", shop), ("path_prefix", "/apps/mf"), ("timestamp", "1700000000")]
    if logged_in_customer_id is not None:
        params.append(("logged_in_customer_id", logged_in_customer_id))
    params.extend(extra or [])
    return f"/v1/proxy{path}?{signed_query(params, secret)}"


async def post_order_webhook(
    client: AsyncClient,
    order: dict,
    secret: str,
    topic: str = "orders/paid",
    hmac_header: Optional[str] = None,
) -> Response:
    body = json.dumps(order).encode("utf-8")
    return await client.post(
        "/v1/webhooks/shopify/order-paid",
        content=body,
        headers={
            "Content-Type": "application/json",
            "X-Shopify-Topic": topic,
            "X-Shopify-Shop-Domain": DEFAULT_SHOP,
            "X-Shopify-Hmac-Sha256": hmac_header or compute_webhook_hmac(body, secret),
        },
    )


class InMemoryRedis:
    """Stands in for a redis.asyncio client in tests: incr/expire/mget only."""

    def __init__(self) -> None:
        self.values: dict[str, int] = {}
        self.ttls: dict[str, int] = {}
        self.closed = False

    async def incr(self, key: str) -> int:
        self.values[key] = self.values.get(key, 0) + 1
        return self.values[key]

    async def expire(self, key: str, seconds: int) -> bool:
        self.ttls[key] = seconds
        return True

    async def mget(self, *keys: str) -> list[Any]:
        return [
            str(self.values[key]) if key in self.values else None for key in keys
        ]

    async def aclose(self) -> None:
        self.closed = True
