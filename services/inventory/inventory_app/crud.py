"""
CRUD (Create, Read, Update, Delete) operations for the Inventory service.

This module contains all database operations for products and batches,
including the three-mode inventory update used for restocking and for
order-driven deductions.
"""
import logging
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from . import allocation, models, schemas
from .exceptions import AlreadyExists, InsufficientInventory, InvalidRequest, NotFound

logger = logging.getLogger(__name__)

MAX_UPDATE_ATTEMPTS = 3

def get_product(db: Session, product_id: str) -> Optional[models.Product]:
    """
    Retrieve a product by its product ID.

    Args:
        db: Database session
        product_id: Product identifier to search for

    Returns:
        Product object or None if not found
    """
    return db.query(models.Product).filter(models.Product.product_id == product_id).first()

def get_batch(db: Session, batch_id: str, lock: bool = False) -> Optional[models.Batch]:
    """
    Retrieve a batch by its batch ID.

    Args:
        db: Database session
        batch_id: Batch identifier to search for
        lock: Take a row lock (SELECT ... FOR UPDATE) for a following write
            and reload the row over any copy already in the session

    Returns:
        Batch object or None if not found
    """
    query = db.query(models.Batch).filter(models.Batch.batch_id == batch_id)
    if lock:
        query = query.with_for_update().populate_existing()
    return query.first()

def get_batches(db: Session, product: models.Product, lock: bool = False) -> List[models.Batch]:
    """
    Retrieve all batches of a product, ascending by expiry date.

    Args:
        db: Database session
        product: Owning product
        lock: Take row locks on every returned batch and reload them

    Returns:
        List of Batch objects
    """
    query = (
        db.query(models.Batch)
        .filter(models.Batch.product_fk == product.id)
        .order_by(models.Batch.expiry_date, models.Batch.id)
    )
    if lock:
        query = query.with_for_update().populate_existing()
    return query.all()

def _require_product(db: Session, product_id: str) -> models.Product:
    product = get_product(db, product_id)
    if product is None:
        raise NotFound(f"Product not found: {product_id}")
    return product

def create_product(db: Session, product: schemas.ProductCreate) -> models.Product:
    """
    Register a new product with no batches.

    Args:
        db: Database session
        product: Product data to create

    Returns:
        Created Product object

    Raises:
        AlreadyExists: If the product ID is already registered
    """
    logger.info(f"Creating new product: {product.product_id}")
    if get_product(db, product.product_id) is not None:
        raise AlreadyExists(f"Product already exists: {product.product_id}")

    db_product = models.Product(product_id=product.product_id, name=product.name)
    db.add(db_product)
    db.commit()
    db.refresh(db_product)
    logger.info(f"Product created successfully: {db_product.product_id}")
    return db_product

def list_batches_by_product(db: Session, product_id: str) -> List[models.Batch]:
    """
    List a product's batches ordered by ascending expiry date.

    Raises:
        NotFound: If the product does not exist
    """
    logger.info(f"Fetching batches for product: {product_id}")
    product = _require_product(db, product_id)
    return get_batches(db, product)

def update_inventory(db: Session, update: schemas.InventoryUpdate) -> List[models.Batch]:
    """
    Add a batch or deduct inventory, depending on update.batch_id.

    - ORDER_REDUCTION: deduct update.quantity across the product's batches
      using the allocation strategy (FIFO by expiry unless LIFO is requested).
    - An existing batch ID: deduct update.quantity from that batch.
    - Any other batch ID: create a new batch (expiry_date required).

    Batches are read with row locks and all changes are committed together;
    any failure rolls the transaction back. Writes are also checked against
    the batch row version, so a batch changed by another transaction since it
    was read is re-read and the update re-applied, up to MAX_UPDATE_ATTEMPTS
    times.

    Args:
        db: Database session
        update: Inventory update request

    Returns:
        Affected batches, in the order they were touched

    Raises:
        NotFound: If the product does not exist
        AlreadyExists: If a new batch ID was registered concurrently
        InvalidRequest: Missing expiry date, no batches to reduce, unknown
            strategy, or a batch ID owned by another product
        InsufficientInventory: If the requested deduction exceeds what is
            available, or the batches kept changing underneath the update
    """
    logger.info(
        f"Updating inventory - Product: {update.product_id}, "
        f"Batch: {update.batch_id}, Quantity: {update.quantity}"
    )
    for attempt in range(1, MAX_UPDATE_ATTEMPTS + 1):
        try:
            return _apply_update(db, update)
        except StaleDataError:
            db.rollback()
            logger.warning(
                f"Batches of {update.product_id} changed concurrently, "
                f"retrying update (attempt {attempt}/{MAX_UPDATE_ATTEMPTS})"
            )
        except Exception:
            db.rollback()
            raise
    raise InsufficientInventory(
        f"Inventory for {update.product_id} changed concurrently; try again"
    )

def _apply_update(db: Session, update: schemas.InventoryUpdate) -> List[models.Batch]:
    product = _require_product(db, update.product_id)
    if update.batch_id == schemas.ORDER_REDUCTION:
        return _reduce_for_order(db, product, update)

    batch = get_batch(db, update.batch_id, lock=True)
    if batch is None:
        return [_add_batch(db, product, update)]
    if batch.product_fk != product.id:
        raise InvalidRequest(
            f"Batch {update.batch_id} does not belong to product {update.product_id}"
        )
    return [_reduce_batch(db, batch, update.quantity)]

def _add_batch(db: Session, product: models.Product, update: schemas.InventoryUpdate) -> models.Batch:
    if update.expiry_date is None:
        raise InvalidRequest("Expiry date is required for new batch")

    db_batch = models.Batch(
        batch_id=update.batch_id,
        product=product,
        quantity=update.quantity,
        expiry_date=update.expiry_date,
    )
    db.add(db_batch)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise AlreadyExists(f"Batch already exists: {update.batch_id}")
    db.refresh(db_batch)
    logger.info(f"New batch {db_batch.batch_id} created for product {product.product_id}")
    return db_batch

def _reduce_batch(db: Session, batch: models.Batch, quantity: int) -> models.Batch:
    if batch.quantity < quantity:
        raise InsufficientInventory(
            f"Insufficient quantity in batch {batch.batch_id}. "
            f"Available: {batch.quantity}, Requested: {quantity}"
        )
    batch.quantity -= quantity
    db.commit()
    db.refresh(batch)
    logger.info(f"Reduced batch {batch.batch_id} by {quantity}, remaining {batch.quantity}")
    return batch

def _reduce_for_order(db: Session, product: models.Product, update: schemas.InventoryUpdate) -> List[models.Batch]:
    strategy = allocation.get_strategy(update.strategy or allocation.AllocationStrategy.FIFO)
    if strategy is allocation.AllocationStrategy.EXPIRY:
        raise InvalidRequest("EXPIRY only orders batches; use FIFO or LIFO to deduct")

    batches = get_batches(db, product, lock=True)
    if not batches:
        raise InvalidRequest(f"No batches available for product: {product.product_id}")
    batches = allocation.sort_by_expiry(batches)

    total_available = sum(batch.quantity for batch in batches)
    if update.quantity > total_available:
        raise InsufficientInventory(
            f"Insufficient total quantity. Available: {total_available}, "
            f"Requested: {update.quantity}"
        )

    plan = allocation.allocate(batches, update.quantity, strategy)
    if not plan:
        db.commit()
        return [batches[0]]

    by_id = {batch.batch_id: batch for batch in batches}
    affected = []
    for line in plan:
        batch = by_id[line.batch_id]
        batch.quantity -= line.quantity
        affected.append(batch)
    db.commit()

    logger.info(
        f"Order reduction completed for {product.product_id}. Batches affected: "
        + ", ".join(f"{line.batch_id}(-{line.quantity})" for line in plan)
    )
    return affected

def preview_allocation(db: Session, request: schemas.AllocationRequest) -> List[allocation.AllocationLine]:
    """
    Compute an allocation plan against a product's current batches without applying it.

    Raises:
        NotFound: If the product does not exist
        InvalidRequest: If the strategy is unknown
        InsufficientInventory: If FIFO/LIFO cannot cover the quantity
    """
    strategy = allocation.get_strategy(request.strategy)
    product = _require_product(db, request.product_id)
    return allocation.allocate(get_batches(db, product), request.quantity, strategy)
