"""
Pydantic schemas for request/response validation in the Inventory service.

These schemas define the structure of data for API requests and responses.
"""
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field

ORDER_REDUCTION = "ORDER_REDUCTION"

class ProductCreate(BaseModel):
    """Schema for registering a new product."""
    product_id: str = Field(..., min_length=1, description="Externally assigned product ID")
    name: str = Field(..., min_length=1, description="Display name")

class Product(BaseModel):
    """
    Schema for product responses.

    Attributes:
        id (int): Surrogate database ID
        product_id (str): Product identifier
        name (str): Display name
        created_at (datetime): When the product was registered
    """
    id: int
    product_id: str
    name: str
    created_at: datetime

    class Config:
        from_attributes = True

class InventoryUpdate(BaseModel):
    """
    Schema for POST /inventory/update.

    batch_id selects the mode: a new batch ID adds a batch (expiry_date required),
    an existing batch ID deducts from that batch, and ORDER_REDUCTION deducts
    across the product's batches using the allocation strategy.
    """
    product_id: str = Field(..., min_length=1)
    batch_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=0)
    expiry_date: Optional[date] = Field(None, description="Required when adding a new batch")
    strategy: Optional[str] = Field(None, description="FIFO or LIFO, ORDER_REDUCTION only")

class Batch(BaseModel):
    """
    Schema for batch responses.

    Attributes:
        id (int): Surrogate database ID
        batch_id (str): Batch identifier
        product_id (str): Owning product identifier
        quantity (int): Units remaining
        expiry_date (date): Expiry date
    """
    id: int
    batch_id: str
    product_id: str
    quantity: int
    expiry_date: date

    class Config:
        from_attributes = True

class AllocationRequest(BaseModel):
    """Schema for previewing an allocation plan."""
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=0)
    strategy: str = "FIFO"

class AllocationLine(BaseModel):
    """A single planned take from one batch."""
    batch_id: str
    quantity: int
