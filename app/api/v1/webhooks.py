import json
import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Header, Request
from pydantic import ValidationError

from app.api.dependencies import SessionDep
from app.core.config import settings
from app.core.proxy_signature import verify_webhook_hmac
from app.exceptions import ConfigurationException, SignatureException, ValidationException
from app.schemas.webhooks import OrderCreditResponse, ShopifyOrder
from app.services.order_credit import OrderCreditProcessor

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/shopify/order-paid", response_model=OrderCreditResponse)
async def shopify_order_paid(
    request: Request,
    session: SessionDep,
    x_shopify_hmac_sha256: Annotated[Optional[str], Header()] = None,
    x_shopify_topic: Annotated[str, Header()] = "",
    x_shopify_shop_domain: Annotated[str, Header()] = "",
) -> OrderCreditResponse:
    if not settings.shopify_webhook_secret:
        raise ConfigurationException(
            "SHOPIFY_WEBHOOK_SECRET", error_code="MISSING_WEBHOOK_SECRET"
        )

    raw_body = await request.body()
    if not verify_webhook_hmac(
        raw_body, x_shopify_hmac_sha256, settings.shopify_webhook_secret
    ):
        logger.warning(
            "Shopify webhook HMAC rejected shop=%s topic=%s",
            x_shopify_shop_domain,
            x_shopify_topic,
        )
        raise SignatureException("invalid_signature")

    if not x_shopify_topic.startswith("orders/"):
        return OrderCreditResponse(ignored=True)

    try:
        order = ShopifyOrder.model_validate(json.loads(raw_body))
    except (ValueError, ValidationError) as e:
        raise ValidationException(
            message="Malformed order payload", details={"error": str(e)[:200]}
        )

    async with session.begin():
        processor = OrderCreditProcessor(session)
        return await processor.process_order(order, x_shopify_shop_domain)
