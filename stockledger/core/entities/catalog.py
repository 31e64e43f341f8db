"""
Catalog domain entities.

Branches partition every inventory fact. Products are identified by a
system-generated SKU that stays fixed for the product's lifetime.
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field


class MeasurementUnit(str, Enum):
    """Units a product can be counted in."""

    PIECE = "piece"
    KILOGRAM = "kilogram"
    GRAM = "gram"
    LITER = "liter"
    MILLILITER = "milliliter"
    METER = "meter"
    CENTIMETER = "centimeter"
    BOX = "box"
    CARTON = "carton"


class Branch(BaseModel):
    """A store or warehouse with its own stock."""

    id: int | None = None
    name: str
    location: str = ""
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Category(BaseModel):
    id: int | None = None
    name: str
    description: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ProductType(BaseModel):
    id: int | None = None
    name: str
    description: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Product(BaseModel):
    """
    A catalog product.

    Only name, barcode, unit and description are editable after creation;
    sku, category and type are part of its identity.
    """

    id: int | None = None
    name: str
    sku: str
    barcode: str | None = None
    category_id: int
    product_type_id: int
    unit: MeasurementUnit = MeasurementUnit.PIECE
    description: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
