import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.identity import normalize_email
from app.core.money import to_cents
from app.db.repositories import HistoryRepository
from app.exceptions import CurrencyMismatchException, InvalidAmountException
from app.metrics import webhook_line_items_total
from app.schemas.webhooks import OrderCreditResponse, ShopifyLineItem, ShopifyOrder
from app.services.payout_ledger import PayoutLedger

logger = logging.getLogger(__name__)

TRAINER_PROPERTY_NAMES = ("mfapp.trainer_id", "trainer_id", "trainerId")


def _trainer_key(value: str) -> Optional[str]:
    value = value.strip()
    if not value:
        return None
    return normalize_email(value) if "@" in value else value


def trainer_id_for_line(line: ShopifyLineItem) -> Optional[str]:
    """Line property set at checkout, else the product vendor (trainer email)."""
    for prop in line.properties:
        if prop.name in TRAINER_PROPERTY_NAMES and prop.value:
            trainer_id = _trainer_key(str(prop.value))
            if trainer_id:
                return trainer_id
    if line.vendor:
        return _trainer_key(line.vendor)
    return None


def source_ref_for_line(order: ShopifyOrder, line: ShopifyLineItem) -> str:
    return f"{order.id}:{line.id}"


class OrderCreditProcessor:
    """Turns a paid Shopify order into sale credits, one per trainer line item.

    Shopify delivers webhooks at least once, so each line is checked against
    existing sale provenance before the ledger is credited. Each line runs in
    its own savepoint: a line that cannot be credited leaves the others intact.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.ledger = PayoutLedger(session)
        self.history_repo = HistoryRepository(session)

    async def _credit_line(
        self,
        order: ShopifyOrder,
        line: ShopifyLineItem,
        trainer_id: str,
        amount_cents: int,
        currency: str,
        shop_domain: str,
    ) -> str:
        source_ref = source_ref_for_line(order, line)

        # Check under the summary lock: a concurrent delivery of the same
        # order commits before this one can read.
        await self.ledger.lock_profile(trainer_id, currency)
        if await self.history_repo.exists_for_source_ref(source_ref):
            logger.info(
                "Duplicate order line ignored order_id=%s line_item_id=%s trainer_id=%s",
                order.id,
                line.id,
                trainer_id,
                extra={"source_ref": source_ref, "trainer_id": trainer_id},
            )
            return "duplicate"

        await self.ledger.credit_sale(
            trainer_id,
            amount_cents,
            currency,
            meta={
                "shop": shop_domain,
                "orderId": order.id,
                "orderName": order.name,
                "lineItemId": line.id,
                "productId": line.product_id,
                "title": line.title,
            },
            source_ref=source_ref,
        )
        return "credited"

    async def process_order(
        self, order: ShopifyOrder, shop_domain: str = ""
    ) -> OrderCreditResponse:
        currency = (
            order.currency or order.presentment_currency or settings.default_currency
        ).upper()
        result = OrderCreditResponse()

        for line in order.line_items:
            trainer_id = trainer_id_for_line(line)
            amount_cents = 0
            if trainer_id and line.id is not None and line.price is not None:
                # 100% of the line goes to the trainer; no platform commission yet.
                try:
                    amount_cents = to_cents(line.price) * max(line.quantity, 0)
                except InvalidAmountException:
                    amount_cents = 0

            if amount_cents <= 0:
                outcome = "skipped"
            else:
                try:
                    async with self.session.begin_nested():
                        outcome = await self._credit_line(
                            order, line, trainer_id, amount_cents, currency, shop_domain
                        )
                except CurrencyMismatchException as e:
                    logger.warning(
                        "Order line currency differs from trainer balance order_id=%s line_item_id=%s trainer_id=%s",
                        order.id,
                        line.id,
                        trainer_id,
                        extra={"trainer_id": trainer_id, "details": e.details},
                    )
                    outcome = "currency_mismatch"

            if outcome == "credited":
                result.credited += 1
            elif outcome == "duplicate":
                result.duplicates += 1
            elif outcome == "currency_mismatch":
                result.currency_mismatch += 1
            else:
                result.skipped += 1
            webhook_line_items_total.labels(outcome=outcome).inc()

        logger.info(
            "Order processed order_id=%s credited=%s duplicates=%s skipped=%s currency_mismatch=%s",
            order.id,
            result.credited,
            result.duplicates,
            result.skipped,
            result.currency_mismatch,
            extra={"order_id": order.id, "shop": shop_domain},
        )
        return result
