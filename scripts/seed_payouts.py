import asyncio
import json
import os
import sys
from pathlib import Path
from urllib.parse import urlencode

import httpx

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.core.proxy_signature import compute_signature, compute_webhook_hmac  # noqa: E402


def signed_proxy_url(api_url: str, path: str, params: dict, secret: str) -> str:
    pairs = list(params.items())
    signature = compute_signature(pairs, secret)
    return f"{api_url}{path}?{urlencode(pairs + [('signature', signature)])}"


async def seed_payouts():
    api_url = os.environ.get("API_URL", "http://localhost:8000")
    proxy_secret = os.environ["APP_PROXY_SHARED_SECRET"]
    webhook_secret = os.environ["SHOPIFY_WEBHOOK_SECRET"]

    trainers = ["7001", "7002", "7003"]

    print("Sending paid orders via webhook...\n")

    async with httpx.AsyncClient(timeout=30.0) as client:
        for index, trainer_id in enumerate(trainers, start=1):
            order = {
                "id": 900000 + index,
                "name": f"#MF{1000 + index}",
                "currency": "EUR",
                "line_items": [
                    {
                        "id": 800000 + index,
                        "product_id": 700000 + index,
                        "title": f"Formation {index}",
                        "quantity": 1,
                        "price": f"{40 + index * 10}.00",
                        "properties": [{"name": "mfapp.trainer_id", "value": trainer_id}],
                    }
                ],
            }
            body = json.dumps(order).encode("utf-8")
            try:
                response = await client.post(
                    f"{api_url}/v1/webhooks/shopify/order-paid",
                    content=body,
                    headers={
                        "Content-Type": "application/json",
                        "X-Shopify-Topic": "orders/paid",
                        "X-Shopify-Shop-Domain": "marketformation.myshopify.com",
                        "X-Shopify-Hmac-Sha256": compute_webhook_hmac(body, webhook_secret),
                    },
                )
                print(f"Order for trainer {trainer_id} - {response.status_code}: {response.text[:200]}")
            except httpx.HTTPError as e:
                print(f"Error for {trainer_id}: {e}")

        print("\n--- Verification ---")

        for trainer_id in trainers:
            url = signed_proxy_url(
                api_url,
                "/v1/proxy/payouts/summary",
                {"shop": "marketformation.myshopify.com", "logged_in_customer_id": trainer_id},
                proxy_secret,
            )
            response = await client.get(url)
            data = response.json()
            print(
                f"Trainer {trainer_id}: available={data.get('available')} "
                f"pending={data.get('pending')} entries={len(data.get('history', []))}"
            )


if __name__ == "__main__":
    asyncio.run(seed_payouts())
