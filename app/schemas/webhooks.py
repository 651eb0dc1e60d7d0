from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class LineItemProperty(BaseModel):
    name: str
    value: Any = None


class ShopifyLineItem(BaseModel):
    id: Optional[int | str] = None
    product_id: Optional[int | str] = None
    title: Optional[str] = None
    vendor: Optional[str] = None
    quantity: int = 1
    price: Optional[str | float | int] = None
    properties: list[LineItemProperty] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class ShopifyOrder(BaseModel):
    id: int | str
    name: Optional[str] = None
    currency: Optional[str] = None
    presentment_currency: Optional[str] = None
    line_items: list[ShopifyLineItem] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class OrderCreditResponse(BaseModel):
    ok: bool = True
    ignored: bool = False
    credited: int = 0
    duplicates: int = 0
    skipped: int = 0
    currency_mismatch: int = 0
