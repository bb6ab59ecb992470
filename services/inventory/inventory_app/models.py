"""
SQLAlchemy ORM models for the Inventory service.

Defines the database schema for products and their expiry-dated batches.
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Date, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from .database import Base

class Product(Base):
    """
    Product model representing a stocked product.

    Attributes:
        id (int): Primary key, auto-incremented surrogate ID
        product_id (str): Externally assigned product identifier (unique)
        name (str): Display name
        created_at (datetime): Timestamp when the product was registered
        batches (list): Batches owned by this product
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    batches = relationship("Batch", back_populates="product", cascade="all, delete-orphan")


class Batch(Base):
    """
    Batch model representing a quantity of a product with a single expiry date.

    A batch that reaches zero is kept as a zero-quantity record.

    Attributes:
        id (int): Primary key, auto-incremented surrogate ID
        batch_id (str): Batch identifier (unique across all products)
        product_fk (int): Foreign key to the owning product
        quantity (int): Units remaining, never negative
        expiry_date (date): Calendar expiry date
        version (int): Row version, bumped on every write; a write against a
            stale version raises StaleDataError
    """
    __tablename__ = "batches"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_batches_quantity_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    batch_id = Column(String, unique=True, index=True, nullable=False)
    product_fk = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=0)
    expiry_date = Column(Date, nullable=False)
    version = Column(Integer, nullable=False)

    product = relationship("Product", back_populates="batches")

    __mapper_args__ = {"version_id_col": version}

    @property
    def product_id(self) -> str:
        return self.product.product_id
