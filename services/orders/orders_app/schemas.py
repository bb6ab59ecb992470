"""
Pydantic schemas for request/response validation in the Orders service.

These schemas define the structure of data for API requests and responses.
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field

from .models import OrderStatus


class OrderItemCreate(BaseModel):
    """Schema for a requested order line."""
    product_id: str = Field(..., min_length=1, description="Product ID from inventory")
    quantity: int = Field(..., gt=0, description="Quantity ordered")


class OrderCreate(BaseModel):
    """Schema for placing a new order."""
    customer_id: str = Field(..., min_length=1)
    items: List[OrderItemCreate] = Field(default_factory=list, description="Order line items")


class OrderItem(BaseModel):
    """Schema for an order line in responses."""
    id: int
    product_id: str
    quantity: int

    class Config:
        from_attributes = True


class Order(BaseModel):
    """
    Schema for order responses, includes all database fields.

    Attributes:
        order_id (str): Order's unique identifier
        customer_id (str): Customer who placed the order
        status (OrderStatus): PENDING, CONFIRMED or FAILED
        items (List[OrderItem]): Order line items
        created_at (datetime): When the order was created
        updated_at (datetime): When the order last changed
    """
    order_id: str
    customer_id: str
    status: OrderStatus
    items: List[OrderItem] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class OrderEvent(BaseModel):
    """
    Schema for order timeline events.

    Attributes:
        id (int): Event ID
        order_id (str): Order identifier
        event_type (str): Type of event
        description (str): Human-readable event description
        old_value (str): Previous value (optional)
        new_value (str): New value (optional)
        created_at (datetime): When the event occurred
    """
    id: int
    order_id: str
    event_type: str
    description: str
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
