"""
SQLAlchemy ORM models for the Orders service.

Defines the database schema for order-related tables.
"""
import enum
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from .database import Base


class OrderStatus(str, enum.Enum):
    """Order lifecycle states. PENDING is initial; CONFIRMED and FAILED are terminal."""
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    FAILED = "FAILED"


class Order(Base):
    """
    Order model representing a customer order in the system.

    Attributes:
        order_id (str): Primary key, generated order ID (e.g., "ORD-1A2B3C4D")
        customer_id (str): Opaque ID of the customer who placed the order
        status (str): Order status (PENDING, CONFIRMED or FAILED)
        items (list): Order line items, in the order they were requested
        created_at (datetime): Timestamp when the order was created
        updated_at (datetime): Timestamp of the last change
    """
    __tablename__ = "orders"

    order_id = Column(String, primary_key=True, index=True)
    customer_id = Column(String, nullable=False, index=True)
    status = Column(String, nullable=False, default=OrderStatus.PENDING.value)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )


class OrderItem(Base):
    """
    OrderItem model representing one requested product line.

    Attributes:
        id (int): Primary key, auto-incrementing surrogate ID
        order_id (str): Foreign key to the owning order
        product_id (str): Product identifier in the Inventory service
        quantity (int): Requested quantity
    """
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    order_id = Column(String, ForeignKey("orders.order_id"), nullable=False, index=True)
    product_id = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False)

    order = relationship("Order", back_populates="items")


class OrderEvent(Base):
    """
    OrderEvent model representing historical events in an order's lifecycle.

    Attributes:
        id (int): Primary key, auto-incrementing event ID
        order_id (str): Foreign key to the order
        event_type (str): Type of event (created, inventory_deducted, inventory_failed, status_changed)
        description (str): Human-readable description of the event
        old_value (str): Previous value (for changes, optional)
        new_value (str): New value (for changes, optional)
        created_at (datetime): Timestamp when the event occurred
    """
    __tablename__ = "order_events"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    order_id = Column(String, ForeignKey("orders.order_id"), nullable=False, index=True)
    event_type = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    old_value = Column(String, nullable=True)
    new_value = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
