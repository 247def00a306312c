from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class OrderStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class OrderItemCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: int = Field(..., alias="productId", strict=True)
    quantity: int = Field(..., gt=0, strict=True)


class OrderCreate(BaseModel):
    """Body of ``POST /orders``.

    Required fields are checked by ``crud.create_order`` so that a missing
    field and an empty item list are reported the same way.
    """

    model_config = ConfigDict(populate_by_name=True)

    order_date: Optional[date] = Field(default=None, alias="orderDate")
    status: Optional[OrderStatus] = None
    farmer_id: Optional[int] = None
    admin_id: Optional[int] = None
    total_price: Optional[Decimal] = Field(default=None, alias="totalPrice", ge=0)
    items: Optional[List[OrderItemCreate]] = None


class OrderUpdate(BaseModel):
    """Body of ``PUT /orders/{id}``. Omitted or null fields keep their value."""

    model_config = ConfigDict(populate_by_name=True)

    order_date: Optional[date] = Field(default=None, alias="orderDate")
    status: Optional[OrderStatus] = None
    farmer_id: Optional[int] = None
    total_price: Optional[Decimal] = Field(default=None, alias="totalPrice", ge=0)


class OrderItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    order_item_id: int
    order_id: int
    product_id: int
    quantity: int
    order_price: Decimal


class OrderRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    order_id: int
    order_date: date
    status: OrderStatus
    farmer_id: int
    admin_id: Optional[int]
    total_price: Decimal
    items: Tuple[OrderItemRead, ...] = ()


class OrderCreatedResponse(BaseModel):
    message: str
    order: OrderRead


class MessageResponse(BaseModel):
    message: str
