"""Catalog models - Pydantic models for records returned by the stock service."""
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storecart.services.money import to_decimal as _to_decimal


class Product(BaseModel):
    """Product as served by ``GET /products/{id}``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: int
    title: str
    price: Decimal
    image: str = Field(default="", alias="imageUrl")

    @field_validator("price", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        return _to_decimal(v)

    @field_validator("image", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return v or ""


class Stock(BaseModel):
    """Availability record served by ``GET /stock/{id}``."""

    model_config = ConfigDict(extra="ignore")

    id: int
    amount: int
