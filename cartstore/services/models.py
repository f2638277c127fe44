"""API Models - Pydantic models for records returned by the shop API."""
from decimal import Decimal, InvalidOperation
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class ProductRecord(BaseModel):
    """Display record of a product (GET products/{id})."""

    model_config = ConfigDict(extra="ignore")

    id: int
    title: str
    price: Decimal
    image: str = ""

    @field_validator("price", mode="before")
    @classmethod
    def convert_price_to_decimal(cls, v):
        if v is None or isinstance(v, (bool, dict, list)):
            raise ValueError("price must be a number")
        try:
            price = Decimal(str(v)) if isinstance(v, float) else Decimal(v)
        except (InvalidOperation, ValueError, TypeError):
            raise ValueError(f"invalid price: {v!r}")
        if not price.is_finite():
            raise ValueError(f"invalid price: {v!r}")
        return price


class StockRecord(BaseModel):
    """Available quantity of a product (GET stock/{id})."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    amount: int
