from typing import Optional
from uuid import uuid4


class OrderFactory:
    @staticmethod
    def create_line_item(
        trainer_id: Optional[str] = "7001",
        line_item_id: Optional[int] = None,
        price: Optional[str] = "49.90",
        quantity: int = 1,
        vendor: Optional[str] = None,
        title: str = "Formation Excel avancé",
    ) -> dict:
        line = {
            "id": line_item_id or int(uuid4().int % 10**9),
            "product_id": 555001,
            "title": title,
            "quantity": quantity,
            "price": price,
            "properties": [],
        }
        if trainer_id is not None:
            line["properties"].append({"name": "mfapp.trainer_id", "value": trainer_id})
        if vendor is not None:
            line["vendor"] = vendor
        return line

    @staticmethod
    def create_order(
        line_items: Optional[list[dict]] = None,
        order_id: Optional[int] = None,
        currency: str = "EUR",
    ) -> dict:
        order_id = order_id or int(uuid4().int % 10**9)
        return {
            "id": order_id,
            "name": f"#MF{order_id % 10000}",
            "currency": currency,
            "line_items": line_items
            if line_items is not None
            else [OrderFactory.create_line_item()],
        }
